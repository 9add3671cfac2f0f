"""
Redundant Clone Rule — Flags `.clone()` calls that look unnecessary.

Purely syntactic: if the cloned expression never shows up again within
the lookahead window, borrowing or moving it is probably enough. When it
is used again the clone may be load-bearing and confidence drops below
the usual reporting threshold.
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

RULE_ID = "redundant-clone"
SEVERITY = Severity.WARNING
BASE_CONFIDENCE = 0.8
REUSED_CONFIDENCE = 0.5
EXPLANATION = "Unnecessary clone() - consider borrowing instead"

_CLONE_CALL = re.compile(r"(?P<expr>[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*)\.clone\(\)")


def detect(ctx: LineContext) -> SuggestionDraft | None:
    line = ctx.text
    if not is_code_line(line, Language.RUST):
        return None

    match = _CLONE_CALL.search(line)
    if match is None:
        return None

    used_again = re.compile(rf"(?<![\w.]){re.escape(match.group('expr'))}(?!\w)")
    reused = any(used_again.search(following) for following in ctx.lookahead())

    return SuggestionDraft(
        suggested_text=line[:match.end("expr")] + line[match.end():],
        confidence=REUSED_CONFIDENCE if reused else BASE_CONFIDENCE,
    )


RULES = [
    Rule(
        id=RULE_ID,
        language=Language.RUST,
        severity=SEVERITY,
        base_confidence=BASE_CONFIDENCE,
        explanation=EXPLANATION,
        detect=detect,
    )
]
