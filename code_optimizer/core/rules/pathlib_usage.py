"""
Pathlib Usage Rule — Flags os.path helpers.
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

RULE_ID = "pathlib-usage"
SEVERITY = Severity.WARNING
BASE_CONFIDENCE = 0.9
EXPLANATION = "Use pathlib instead of os.path for modern path handling"

_OS_PATH = re.compile(r"(?<![\w.])os\.path\.")


def detect(ctx: LineContext) -> SuggestionDraft | None:
    line = ctx.text
    if not is_code_line(line, Language.PYTHON) or _OS_PATH.search(line) is None:
        return None
    return SuggestionDraft(suggested_text=None, confidence=BASE_CONFIDENCE)


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
