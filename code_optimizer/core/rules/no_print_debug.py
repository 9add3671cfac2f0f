"""
No Print Debug Rule — Flags bare print() calls.

Method calls such as `logger.print(` and helpers like `pprint(` do not
count. A print that is not the first statement on its line is still
reported, but commenting it out would take the rest of the line with it,
so confidence drops.
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

RULE_ID = "no-print-debug"
SEVERITY = Severity.WARNING
BASE_CONFIDENCE = 0.8
INLINE_CONFIDENCE = 0.6
EXPLANATION = "Remove print statements in production code"

_PRINT_CALL = re.compile(r"(?<![\w.])print\s*\(")


def detect(ctx: LineContext) -> SuggestionDraft | None:
    line = ctx.text
    if not is_code_line(line, Language.PYTHON):
        return None

    match = _PRINT_CALL.search(line)
    if match is None:
        return None

    start = match.start()
    suggested = f"{line[:start]}# {line[start:]}"
    leading = start == len(line) - len(line.lstrip())
    return SuggestionDraft(
        suggested_text=suggested,
        confidence=BASE_CONFIDENCE if leading else INLINE_CONFIDENCE,
    )


RULES = [
    Rule(
        id=RULE_ID,
        language=Language.PYTHON,
        severity=SEVERITY,
        base_confidence=BASE_CONFIDENCE,
        explanation=EXPLANATION,
        detect=detect,
    )
]
