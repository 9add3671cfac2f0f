"""
Arrow Function Rule — Points out anonymous `function(` expressions.

Advisory only: a correct rewrite depends on how `this` and `arguments`
are used in the body, which a single line cannot show.
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

RULE_ID = "arrow-function"
SEVERITY = Severity.INFO
BASE_CONFIDENCE = 0.6
EXPLANATION = "Consider using arrow functions for shorter syntax"

# Anonymous function expressions only; `function name(` declarations are fine.
_ANONYMOUS_FUNCTION = re.compile(r"(?<![\w$])function\s*\(")


def detect(ctx: LineContext) -> SuggestionDraft | None:
    line = ctx.text
    if not is_code_line(line, Language.JAVASCRIPT):
        return None
    if _ANONYMOUS_FUNCTION.search(line) is None:
        return None
    return SuggestionDraft(suggested_text=None, confidence=BASE_CONFIDENCE)


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
