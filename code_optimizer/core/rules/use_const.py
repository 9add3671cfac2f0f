"""
Use Const Rule — Flags `let` bindings that are never reassigned nearby.

The check is textual: a binding counts as reassigned only when an
assignment, compound assignment or ++/-- on the same name shows up within
the lookahead window. Loop heads and conventional loop counters are left
alone. In `let a = 1, b = 2` every declarator must pass.
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

RULE_ID = "use-const"
SEVERITY = Severity.INFO
BASE_CONFIDENCE = 0.8
EXPLANATION = "Use 'const' for variables that never change"

LOOP_COUNTER_NAMES = {"i", "j", "k"}

# let name = ...   /   let name: Type = ...
_LET_BINDING = re.compile(r"\blet\s+([A-Za-z_$][\w$]*)\s*(?::[^=]+)?=(?![=>])")
# Every declarator of `let a = 1, b: T = 2`
_DECLARATOR = re.compile(r"(?:\blet|,)\s*([A-Za-z_$][\w$]*)\s*(?::[^=,;]+)?=(?![=>])")
_LOOP_HEAD = re.compile(r"\bfor\s*\(\s*let\b")


def _reassigns(line: str, name: str) -> bool:
    escaped = re.escape(name)
    assignment = rf"(?<![\w$.]){escaped}\s*(?:\*\*|<<|>>>|>>|&&|\|\||\?\?|[-+*/%&|^])?=(?![=>])"
    increment = rf"(?:\+\+|--)\s*{escaped}(?![\w$])|(?<![\w$.]){escaped}\s*(?:\+\+|--)"
    return re.search(assignment, line) is not None or re.search(increment, line) is not None


def detect(ctx: LineContext) -> SuggestionDraft | None:
    line = ctx.text
    if not is_code_line(line, Language.JAVASCRIPT) or _LOOP_HEAD.search(line):
        return None

    match = _LET_BINDING.search(line)
    if match is None:
        return None

    start = match.start()
    end = line.find(";", start)
    if end == -1:
        end = len(line)
    names = {match.group(1), *_DECLARATOR.findall(line[start:end])}
    if any(name in LOOP_COUNTER_NAMES for name in names):
        return None

    # The rest of the declaring line counts too, e.g. `let n = 0; n += 1;`
    remainder = line[end:]
    for name in names:
        if _reassigns(remainder, name):
            return None
        if any(_reassigns(following, name) for following in ctx.lookahead()):
            return None

    suggested = f"{line[:start]}const{line[start + len('let'):]}"
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
