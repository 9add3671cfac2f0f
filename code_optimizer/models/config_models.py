"""
Configuration Data Models — The resolved policy applied to engine output.

Pure value holders: construction validates and clamps, nothing here reads
files or environment variables.
"""

from __future__ import annotations

import json
import logging
import math
import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from code_optimizer.models.rule_models import Language, Severity

logger = logging.getLogger("code_optimizer.config")

DEFAULT_MINIMUM_CONFIDENCE = 0.6


class PatternType(str, Enum):
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    REGEX = "regex"


def clamp_confidence(value: Any, name: str = "minimum_confidence") -> float:
    """Coerce a threshold into [0, 1]; None and NaN fall back to the default."""
    if value is None:
        return DEFAULT_MINIMUM_CONFIDENCE
    try:
        value = float(value)
    except TypeError as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e
    if math.isnan(value):
        logger.warning(f"{name} is NaN, using default {DEFAULT_MINIMUM_CONFIDENCE}")
        return DEFAULT_MINIMUM_CONFIDENCE
    clamped = min(1.0, max(0.0, value))
    if clamped != value:
        logger.warning(f"{name} {value} clamped to {clamped}")
    return clamped


class CustomRuleSpec(BaseModel):
    """A user-declared pattern rule carried in the configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    language: Language
    pattern_type: PatternType = Field(default=PatternType.CONTAINS, alias="patternType")
    pattern: str = Field(..., min_length=1)
    replacement: str | None = None
    explanation: str = ""
    severity: Severity = Severity.INFO
    confidence: float = Field(default=0.7, ge=0.0, le=1.0)
    enabled: bool = True

    @field_validator("language", mode="before")
    @classmethod
    def _parse_language(cls, value: Any) -> Any:
        return Language.parse(value) or value

    @model_validator(mode="after")
    def _check_regex(self) -> "CustomRuleSpec":
        if self.pattern_type is PatternType.REGEX:
            try:
                compiled = re.compile(self.pattern)
            except re.error as e:
                raise ValueError(f"Custom rule '{self.id}' has an invalid regex: {e}") from e
            if self.replacement is not None:
                try:
                    compiled.sub(self.replacement, "")
                except (re.error, IndexError) as e:
                    raise ValueError(
                        f"Custom rule '{self.id}' has an invalid replacement: {e}"
                    ) from e
        return self


class AnalysisConfig(BaseModel):
    """Enable/disable toggles plus the confidence and severity filters."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    enabled_rules: dict[str, bool] = Field(default_factory=dict, alias="enabledRules")
    minimum_confidence: float = Field(
        default=DEFAULT_MINIMUM_CONFIDENCE, alias="minimumConfidence"
    )
    severity_filter: list[Severity] | None = Field(default=None, alias="severityFilter")
    strict_language: bool = Field(default=False, alias="strictLanguage")
    custom_rules: list[CustomRuleSpec] = Field(default_factory=list, alias="customRules")

    @field_validator("minimum_confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: Any) -> float:
        return clamp_confidence(value)

    def is_enabled(
        self,
        rule_id: str,
        language: Language | None = None,
        default: bool = True,
    ) -> bool:
        """Explicit override if present (qualified key first), else the rule's default."""
        if language is not None:
            qualified = f"{language.value}:{rule_id}"
            if qualified in self.enabled_rules:
                return self.enabled_rules[qualified]
        return self.enabled_rules.get(rule_id, default)

    def passes_threshold(self, confidence: float) -> bool:
        return confidence >= self.minimum_confidence

    def allows_severity(self, severity: Severity) -> bool:
        return self.severity_filter is None or severity in self.severity_filter

    def fingerprint(self) -> str:
        """Stable string identifying this configuration, used as a cache key part."""
        return json.dumps(self.model_dump(mode="json"), sort_keys=True)
