"""
Use F-Strings Rule — Flags str.format() calls.

When the receiver is a plain string literal whose placeholders are all
`{}`, `{0}` or `{name}` and every argument is a simple name, attribute or
number, the rule proposes the equivalent f-string. Anything fancier is
reported without a rewrite and at lower confidence.
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

RULE_ID = "use-f-strings"
SEVERITY = Severity.INFO
BASE_CONFIDENCE = 0.7
ADVISORY_CONFIDENCE = 0.6
EXPLANATION = "Use f-strings instead of .format() for better performance"

_FORMAT_CALL = re.compile(r"\.format\s*\(")
_LITERAL_FORMAT = re.compile(
    r"""(?P<prefix>[rRuU]?)(?P<quote>['"])(?P<body>(?:\\.|(?!(?P=quote))[^\\])*)(?P=quote)"""
    r"""\.format\((?P<args>[^()]*)\)"""
)
_PLACEHOLDER = re.compile(r"\{([^{}]*)\}")
_FIELD = re.compile(r"^(?P<field>\w*)(?P<conv>![rsa])?(?P<spec>:[^{}]*)?$")
_SIMPLE_EXPR = re.compile(r"^(?:[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*|-?\d+(?:\.\d+)?)$")
_KEYWORD_ARG = re.compile(r"^([A-Za-z_]\w*)\s*=\s*(.+)$")


def _split_args(args: str) -> tuple[list[str], dict[str, str]] | None:
    positional: list[str] = []
    keywords: dict[str, str] = {}
    parts = [part.strip() for part in args.split(",")]
    if parts and parts[-1] == "":
        parts.pop()
    for part in parts:
        keyword = _KEYWORD_ARG.match(part)
        if keyword:
            value = keyword.group(2).strip()
            if not _SIMPLE_EXPR.match(value):
                return None
            keywords[keyword.group(1)] = value
            continue
        if keywords or not _SIMPLE_EXPR.match(part):
            return None
        positional.append(part)
    return positional, keywords


def _to_f_string(match: re.Match[str]) -> str | None:
    body = match.group("body")
    if "{{" in body or "}}" in body:
        return None

    split = _split_args(match.group("args"))
    if split is None:
        return None
    positional, keywords = split

    pieces: list[str] = []
    cursor = 0
    auto_index = 0
    for placeholder in _PLACEHOLDER.finditer(body):
        field = _FIELD.match(placeholder.group(1))
        if field is None:
            return None
        name = field.group("field")
        if name == "":
            if auto_index >= len(positional):
                return None
            expr = positional[auto_index]
            auto_index += 1
        elif name.isdigit():
            if int(name) >= len(positional):
                return None
            expr = positional[int(name)]
        elif name in keywords:
            expr = keywords[name]
        else:
            return None
        if match.group("quote") in expr:
            return None
        pieces.append(body[cursor:placeholder.start()])
        pieces.append("{" + expr + (field.group("conv") or "") + (field.group("spec") or "") + "}")
        cursor = placeholder.end()
    pieces.append(body[cursor:])

    literal_text = "".join(
        piece for index, piece in enumerate(pieces) if index % 2 == 0
    )
    if "{" in literal_text or "}" in literal_text:
        return None

    prefix = "rf" if match.group("prefix").lower() == "r" else "f"
    quote = match.group("quote")
    return f"{prefix}{quote}{''.join(pieces)}{quote}"


def detect(ctx: LineContext) -> SuggestionDraft | None:
    line = ctx.text
    if not is_code_line(line, Language.PYTHON) or _FORMAT_CALL.search(line) is None:
        return None

    literal = _LITERAL_FORMAT.search(line)
    # A prefix like f or b glued to the literal is not ours to rewrite
    glued = literal is not None and literal.start() > 0 and (
        line[literal.start() - 1].isalnum() or line[literal.start() - 1] == "_"
    )
    if literal is not None and not glued:
        converted = _to_f_string(literal)
        if converted is not None:
            suggested = f"{line[:literal.start()]}{converted}{line[literal.end():]}"
            return SuggestionDraft(suggested_text=suggested, confidence=BASE_CONFIDENCE)

    return SuggestionDraft(suggested_text=None, confidence=ADVISORY_CONFIDENCE)


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
