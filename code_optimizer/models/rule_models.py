"""
Rule Engine Data Models — Languages, severities, rules and suggestions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field

# Furthest a matcher may look above or below the current line
CONTEXT_WINDOW = 5


class Language(str, Enum):
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    PYTHON = "python"
    RUST = "rust"
    GO = "go"
    JAVA = "java"

    @classmethod
    def parse(cls, name: str | Language | None) -> Language | None:
        """Resolve a language name or alias. Returns None when unrecognized."""
        if name is None:
            return None
        if isinstance(name, Language):
            return name
        key = str(name).strip().lower()
        try:
            return cls(key)
        except ValueError:
            return LANGUAGE_ALIASES.get(key)


LANGUAGE_ALIASES: dict[str, Language] = {
    "js": Language.JAVASCRIPT,
    "jsx": Language.JAVASCRIPT,
    "node": Language.JAVASCRIPT,
    "ts": Language.TYPESCRIPT,
    "tsx": Language.TYPESCRIPT,
    "py": Language.PYTHON,
    "python3": Language.PYTHON,
    "rs": Language.RUST,
    "golang": Language.GO,
}


class Severity(str, Enum):
    HINT = "hint"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return SEVERITY_RANK[self]


SEVERITY_RANK: dict[Severity, int] = {
    Severity.HINT: 0,
    Severity.INFO: 1,
    Severity.WARNING: 2,
    Severity.ERROR: 3,
}


@dataclass(frozen=True)
class SuggestionDraft:
    """What a matcher hands back when its rule fires on a line."""

    suggested_text: str | None
    confidence: float
    explanation: str | None = None


@dataclass(frozen=True)
class LineContext:
    """
    The line under inspection plus a bounded view of its neighbours.

    Matchers only ever see lines through lookbehind()/lookahead(), which
    never reach past CONTEXT_WINDOW lines in either direction.
    """

    lines: tuple[str, ...]
    index: int

    @property
    def text(self) -> str:
        return self.lines[self.index]

    @property
    def line_number(self) -> int:
        return self.index + 1

    def lookbehind(self, n: int = CONTEXT_WINDOW) -> tuple[str, ...]:
        """Up to n preceding lines, nearest first."""
        n = max(0, min(n, CONTEXT_WINDOW))
        start = max(0, self.index - n)
        return tuple(reversed(self.lines[start:self.index]))

    def lookahead(self, n: int = CONTEXT_WINDOW) -> tuple[str, ...]:
        """Up to n following lines, nearest first."""
        n = max(0, min(n, CONTEXT_WINDOW))
        return self.lines[self.index + 1:self.index + 1 + n]


DetectFn = Callable[[LineContext], "SuggestionDraft | None"]


@dataclass(frozen=True)
class Rule:
    """An immutable, language-scoped optimization heuristic."""

    id: str
    language: Language
    severity: Severity
    base_confidence: float
    explanation: str
    detect: DetectFn = field(compare=False, repr=False)
    enabled_by_default: bool = True

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValueError("Rule id must be a non-empty string")
        if not 0.0 <= self.base_confidence <= 1.0:
            raise ValueError(
                f"Rule '{self.id}' base_confidence {self.base_confidence} is outside [0, 1]"
            )

    @property
    def key(self) -> tuple[Language, str]:
        return (self.language, self.id)


class Suggestion(BaseModel):
    """A single located optimization recommendation."""

    model_config = ConfigDict(frozen=True)

    rule_id: str = Field(..., description="Rule that produced this suggestion, e.g. 'use-const'")
    language: Language
    line_number: int = Field(..., ge=1, description="1-based line number in the analyzed text")
    original_code: str = Field(..., description="The line as it appears in the source")
    suggested_code: str | None = Field(
        default=None, description="Proposed rewrite of the line; None for advisory-only rules"
    )
    explanation: str
    severity: Severity
    confidence: float = Field(..., ge=0.0, le=1.0)


class AnalysisReport(BaseModel):
    """Result of one analysis pass over one source text."""

    language: Language | None = None
    language_supported: bool = True
    suggestions: list[Suggestion] = Field(default_factory=list)
    rules_executed: list[str] = Field(default_factory=list)
    lines_analyzed: int = 0
    duration_ms: float = 0.0
