"""
No Console Rule — Flags console.log / console.debug left in source.
"""

from __future__ import annotations

import re

from code_optimizer.core.matching import is_code_line
from code_optimizer.models.rule_models import (
    Language,
    LineContext,
    Rule,
    Severity,
    SuggestionDraft,
)

RULE_ID = "no-console"
SEVERITY = Severity.WARNING
BASE_CONFIDENCE = 0.9
EXPLANATION = "Remove console.log statements in production code"

_CONSOLE_CALL = re.compile(r"(?<![\w$.])console\.(?:log|debug)\s*\(")


def detect(ctx: LineContext) -> SuggestionDraft | None:
    line = ctx.text
    if not is_code_line(line, Language.JAVASCRIPT):
        return None

    match = _CONSOLE_CALL.search(line)
    if match is None:
        return None

    start = match.start()
    suggested = f"{line[:start]}// {line[start:]}"
    return SuggestionDraft(suggested_text=suggested, confidence=BASE_CONFIDENCE)


RULES = [
    Rule(
        id=RULE_ID,
        language=language,
        severity=SEVERITY,
        base_confidence=BASE_CONFIDENCE,
        explanation=EXPLANATION,
        detect=detect,
    )
    for language in (Language.JAVASCRIPT, Language.TYPESCRIPT)
]
