"""
Engine Errors — Raised only for genuinely exceptional inputs.

Everything else (no matches, unsupported language, odd configuration)
degrades to an empty or filtered result.
"""

from __future__ import annotations


class OptimizerError(Exception):
    """Base class for all code optimizer errors."""


class DuplicateRuleError(OptimizerError):
    def __init__(self, language: str, rule_id: str) -> None:
        super().__init__(f"Rule '{rule_id}' is already registered for {language}")
        self.language = language
        self.rule_id = rule_id


class RegistrySealedError(OptimizerError):
    """Registration attempted after the registry was sealed."""


class UnsupportedEncodingError(OptimizerError):
    """Source bytes could not be decoded as text."""


class UnsupportedLanguageError(OptimizerError):
    def __init__(self, language: object) -> None:
        super().__init__(f"Unsupported language: {language!r}")
        self.language = language


class AnalysisCancelledError(OptimizerError):
    def __init__(self, line_number: int) -> None:
        super().__init__(f"Analysis cancelled before line {line_number}")
        self.line_number = line_number
