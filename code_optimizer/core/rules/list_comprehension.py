"""
List Comprehension Rule — Flags `for` loops whose whole body is one append.

    result = []
    for item in items:
        result.append(item * 2)

Confidence is full only when the lookbehind window shows the target list
being initialised empty; otherwise the loop might be extending a list
that already has content, and the rule is less sure.
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

RULE_ID = "list-comprehension"
SEVERITY = Severity.INFO
BASE_CONFIDENCE = 0.7
UNINITIALISED_CONFIDENCE = 0.5
EXPLANATION = "Consider using list comprehension for better performance"

_FOR_HEADER = re.compile(r"^(?P<indent>\s*)for\s+.+?\s+in\s+.+:\s*$")
_APPEND_BODY = re.compile(r"^(?P<indent>\s*)(?P<target>[A-Za-z_]\w*)\.append\(.*\)\s*$")


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip())


def detect(ctx: LineContext) -> SuggestionDraft | None:
    line = ctx.text
    if not is_code_line(line, Language.PYTHON):
        return None

    header = _FOR_HEADER.match(line)
    if header is None:
        return None

    following = [l for l in ctx.lookahead() if is_code_line(l, Language.PYTHON)]
    if not following:
        return None

    body = _APPEND_BODY.match(following[0])
    header_indent = _indent_width(line)
    if body is None or _indent_width(following[0]) <= header_indent:
        return None

    # A second statement inside the loop body rules it out
    if len(following) > 1 and _indent_width(following[1]) > header_indent:
        return None

    target = re.escape(body.group("target"))
    initialised = re.compile(rf"^\s*{target}\s*=\s*\[\s*\]\s*$")
    if any(initialised.match(previous) for previous in ctx.lookbehind()):
        confidence = BASE_CONFIDENCE
    else:
        confidence = UNINITIALISED_CONFIDENCE

    return SuggestionDraft(suggested_text=None, confidence=confidence)


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
