"""
Configuration Loader — Turns persisted settings into an AnalysisConfig.

Two shapes are understood:

  * directive text, one setting per line:

        # comments and blank lines are ignored
        disable_rule: use-const
        enable_rule: typescript:arrow-function
        minimum_confidence: 0.75
        strict_language: true
        severity: warning, error

  * a mapping (e.g. parsed JSON) using either snake_case keys or the
    editor settings keys enabledRules / minimumConfidence / ...

Malformed directives are logged and skipped; a bad setting never stops
analysis from running.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from code_optimizer.models.config_models import AnalysisConfig
from code_optimizer.models.rule_models import Severity

logger = logging.getLogger("code_optimizer.config_loader")

_TRUE_VALUES = {"true", "yes", "on", "1"}
_FALSE_VALUES = {"false", "no", "off", "0"}


def _parse_bool(value: str) -> bool | None:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def parse_config_text(text: str, base: AnalysisConfig | None = None) -> AnalysisConfig:
    """Parse directive text, layering it over `base` (defaults if None)."""
    base = base or AnalysisConfig()
    enabled_rules = dict(base.enabled_rules)
    updates: dict[str, Any] = {}

    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        key, sep, value = line.partition(":")
        key = key.strip().lower()
        value = value.strip()
        if not sep or not value:
            logger.warning(f"Config line {line_number}: expected 'key: value', got {raw!r}")
            continue

        if key == "disable_rule":
            enabled_rules[value] = False
        elif key == "enable_rule":
            enabled_rules[value] = True
        elif key == "minimum_confidence":
            try:
                updates["minimum_confidence"] = float(value)
            except ValueError:
                logger.warning(f"Config line {line_number}: invalid minimum_confidence {value!r}")
        elif key == "strict_language":
            flag = _parse_bool(value)
            if flag is None:
                logger.warning(f"Config line {line_number}: invalid strict_language {value!r}")
            else:
                updates["strict_language"] = flag
        elif key == "severity":
            severities: list[Severity] = []
            for name in value.split(","):
                try:
                    severities.append(Severity(name.strip().lower()))
                except ValueError:
                    logger.warning(f"Config line {line_number}: unknown severity {name.strip()!r}")
            if severities:
                updates["severity_filter"] = severities
        else:
            logger.warning(f"Config line {line_number}: unknown directive {key!r}")

    return AnalysisConfig.model_validate(
        {
            **base.model_dump(),
            **updates,
            "enabled_rules": enabled_rules,
        }
    )


def config_from_mapping(mapping: dict[str, Any]) -> AnalysisConfig:
    """Build a config from a dict; accepts snake_case or editor-style keys."""
    return AnalysisConfig.model_validate(mapping)


def load_config_file(path: str | Path) -> AnalysisConfig:
    """Load a .json mapping or a directive-text file."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text) if text.strip() else {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object at the top level")
        # Editor settings files nest everything under one section
        data = data.get("codeOptimizer", data)
        return config_from_mapping(data)
    return parse_config_text(text)
