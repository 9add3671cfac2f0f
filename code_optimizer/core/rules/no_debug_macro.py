"""
No Debug Macro Rule — Flags dbg!/println!-style output left in Rust code.

dbg! is always a leftover; println! and friends are sometimes legitimate
program output, so they are reported with less confidence.
"""

from __future__ import annotations

import re

from code_optimizer.core.matching import comment_out, is_code_line
from code_optimizer.models.rule_models import (
    Language,
    LineContext,
    Rule,
    Severity,
    SuggestionDraft,
)

RULE_ID = "no-debug-macro"
SEVERITY = Severity.WARNING
BASE_CONFIDENCE = 0.9
PRINT_MACRO_CONFIDENCE = 0.7
EXPLANATION = "Remove debug print macros before shipping"

_DEBUG_MACRO = re.compile(r"(?<![\w:])(?P<name>dbg|println|print|eprintln|eprint)!\s*[\(\[{]")


def detect(ctx: LineContext) -> SuggestionDraft | None:
    line = ctx.text
    if not is_code_line(line, Language.RUST):
        return None

    match = _DEBUG_MACRO.search(line)
    if match is None:
        return None

    confidence = BASE_CONFIDENCE if match.group("name") == "dbg" else PRINT_MACRO_CONFIDENCE
    # Only a macro that is the whole statement can be commented out safely
    if line.lstrip().startswith(match.group(0)):
        suggested = comment_out(line, Language.RUST)
    else:
        suggested = None
    return SuggestionDraft(suggested_text=suggested, confidence=confidence)


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
