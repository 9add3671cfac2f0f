"""
Line Matching — Shared helpers for line-oriented, non-AST detection.

Also turns user-declared CustomRuleSpec entries into ordinary Rules so the
engine runs them exactly like built-ins.
"""

from __future__ import annotations

import re
from functools import lru_cache

from code_optimizer.models.config_models import CustomRuleSpec, PatternType
from code_optimizer.models.rule_models import Language, LineContext, Rule, SuggestionDraft

COMMENT_PREFIXES: dict[Language, tuple[str, ...]] = {
    Language.JAVASCRIPT: ("//", "/*"),
    Language.TYPESCRIPT: ("//", "/*"),
    Language.RUST: ("//", "/*"),
    Language.GO: ("//", "/*"),
    Language.JAVA: ("//", "/*"),
    Language.PYTHON: ("#",),
}


def is_comment(line: str, language: Language) -> bool:
    """True when the line, ignoring indentation, is a comment."""
    stripped = line.lstrip()
    return stripped.startswith(COMMENT_PREFIXES.get(language, ()))


def is_code_line(line: str, language: Language) -> bool:
    return bool(line.strip()) and not is_comment(line, language)


def comment_out(line: str, language: Language) -> str:
    """Prefix the line's code with the language's line-comment marker."""
    marker = "#" if language is Language.PYTHON else "//"
    indent = line[: len(line) - len(line.lstrip())]
    return f"{indent}{marker} {line.lstrip()}"


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def matches_pattern(line: str, pattern_type: PatternType, pattern: str) -> bool:
    if pattern_type is PatternType.CONTAINS:
        return pattern in line
    if pattern_type is PatternType.STARTS_WITH:
        return line.lstrip().startswith(pattern)
    if pattern_type is PatternType.ENDS_WITH:
        return line.rstrip().endswith(pattern)
    return _compile(pattern).search(line) is not None


def apply_replacement(
    line: str, pattern_type: PatternType, pattern: str, replacement: str
) -> str:
    if pattern_type is PatternType.CONTAINS:
        return line.replace(pattern, replacement)
    if pattern_type is PatternType.STARTS_WITH:
        return line.replace(pattern, replacement, 1)
    if pattern_type is PatternType.ENDS_WITH:
        head, sep, tail = line.rpartition(pattern)
        return f"{head}{replacement}{tail}" if sep else line
    return _compile(pattern).sub(replacement, line)


def build_pattern_rule(spec: CustomRuleSpec) -> Rule:
    """Wrap a CustomRuleSpec in a Rule whose matcher follows its pattern type."""

    def detect(ctx: LineContext) -> SuggestionDraft | None:
        line = ctx.text
        if not line.strip() or not matches_pattern(line, spec.pattern_type, spec.pattern):
            return None
        suggested = None
        if spec.replacement is not None:
            suggested = apply_replacement(line, spec.pattern_type, spec.pattern, spec.replacement)
        return SuggestionDraft(suggested_text=suggested, confidence=spec.confidence)

    return Rule(
        id=spec.id,
        language=spec.language,
        severity=spec.severity,
        base_confidence=spec.confidence,
        explanation=spec.explanation or f"Matches custom pattern '{spec.pattern}'",
        detect=detect,
        enabled_by_default=spec.enabled,
    )
