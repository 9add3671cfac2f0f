"""
Rule Engine — Runs a language's rules over every line of a source text.

Pure in-memory work: no I/O, no shared mutable state. The registry is
read-only once sealed, so analyze() can be called from many threads.
"""

from __future__ import annotations

import codecs
import logging
import re
import time
from collections.abc import Callable, Iterable

from code_optimizer.core.errors import (
    AnalysisCancelledError,
    UnsupportedEncodingError,
    UnsupportedLanguageError,
)
from code_optimizer.core.matching import build_pattern_rule
from code_optimizer.core.registry import RuleRegistry, get_default_registry
from code_optimizer.models.config_models import AnalysisConfig
from code_optimizer.models.rule_models import (
    AnalysisReport,
    Language,
    LineContext,
    Rule,
    Suggestion,
)

logger = logging.getLogger("code_optimizer.engine")

_LINE_BREAK = re.compile(r"\r\n|\r|\n")

EXTENSION_LANGUAGES: dict[str, Language] = {
    ".js": Language.JAVASCRIPT,
    ".jsx": Language.JAVASCRIPT,
    ".mjs": Language.JAVASCRIPT,
    ".cjs": Language.JAVASCRIPT,
    ".ts": Language.TYPESCRIPT,
    ".tsx": Language.TYPESCRIPT,
    ".mts": Language.TYPESCRIPT,
    ".cts": Language.TYPESCRIPT,
    ".py": Language.PYTHON,
    ".pyi": Language.PYTHON,
    ".rs": Language.RUST,
    ".go": Language.GO,
    ".java": Language.JAVA,
}


def detect_language_from_path(path: str) -> Language | None:
    """Map a file name to a language by its extension."""
    dot = path.rfind(".")
    if dot == -1 or dot < max(path.rfind("/"), path.rfind("\\")):
        return None
    return EXTENSION_LANGUAGES.get(path[dot:].lower())


def decode_source(source: str | bytes) -> str:
    """Return source as text, decoding UTF-8 bytes and dropping a BOM."""
    if isinstance(source, bytes):
        if source.startswith(codecs.BOM_UTF8):
            source = source[len(codecs.BOM_UTF8):]
        try:
            return source.decode("utf-8")
        except UnicodeDecodeError as e:
            raise UnsupportedEncodingError(
                f"Source is not valid UTF-8 (byte {e.start}: {e.reason})"
            ) from e
    return source.removeprefix("\ufeff")


def split_lines(text: str) -> list[str]:
    """Split like an editor does: a trailing newline does not open a new line."""
    if not text:
        return []
    lines = _LINE_BREAK.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


class AnalysisEngine:
    """
    Line-oriented suggestion engine.

    Output order is line ascending, then rule registration order, which
    makes results identical for identical inputs.
    """

    def __init__(self, registry: RuleRegistry | None = None) -> None:
        self.registry = registry or get_default_registry()

    def analyze(
        self,
        source_text: str | bytes,
        language: Language | str | None,
        config: AnalysisConfig | None = None,
        cancel_check: Callable[[], bool] | None = None,
    ) -> list[Suggestion]:
        return self.run(source_text, language, config, cancel_check).suggestions

    def run(
        self,
        source_text: str | bytes,
        language: Language | str | None,
        config: AnalysisConfig | None = None,
        cancel_check: Callable[[], bool] | None = None,
    ) -> AnalysisReport:
        """
        Analyze one source text.

        Args:
            source_text: Text, or UTF-8 bytes.
            language: Language enum member or name/alias.
            config: Filtering policy; defaults to AnalysisConfig().
            cancel_check: Polled between lines; returning True aborts.

        Returns:
            AnalysisReport with suggestions plus bookkeeping.
        """
        start = time.monotonic()
        config = config or AnalysisConfig()
        text = decode_source(source_text)

        resolved = Language.parse(language)
        if resolved is None:
            if config.strict_language:
                raise UnsupportedLanguageError(language)
            logger.debug(f"No rules for language {language!r}; returning no suggestions")
            return AnalysisReport(language=None, language_supported=False)

        rules = self._rules_for(resolved, config)
        lines = split_lines(text)
        active = [
            rule
            for rule in rules
            if config.is_enabled(rule.id, rule.language, rule.enabled_by_default)
        ]

        suggestions: list[Suggestion] = []
        if active:
            snapshot = tuple(lines)
            for index, line in enumerate(lines):
                if cancel_check is not None and cancel_check():
                    raise AnalysisCancelledError(index + 1)
                if not line.strip():
                    continue
                ctx = LineContext(lines=snapshot, index=index)
                for rule in active:
                    suggestion = self._apply(rule, ctx)
                    if suggestion is None:
                        continue
                    if config.passes_threshold(suggestion.confidence) and config.allows_severity(
                        suggestion.severity
                    ):
                        suggestions.append(suggestion)

        elapsed = (time.monotonic() - start) * 1000
        logger.debug(
            f"Analyzed {len(lines)} {resolved.value} lines with {len(active)} rules: "
            f"{len(suggestions)} suggestions ({elapsed:.2f}ms)"
        )

        return AnalysisReport(
            language=resolved,
            language_supported=bool(rules),
            suggestions=suggestions,
            rules_executed=[rule.id for rule in active],
            lines_analyzed=len(lines),
            duration_ms=round(elapsed, 3),
        )

    def _rules_for(self, language: Language, config: AnalysisConfig) -> list[Rule]:
        rules = list(self.registry.rules_for(language))
        taken = {rule.id for rule in rules}
        for spec in config.custom_rules:
            if spec.language is not language:
                continue
            if spec.id in taken:
                logger.warning(
                    f"Custom rule '{spec.id}' clashes with an existing {language.value} rule; skipped"
                )
                continue
            taken.add(spec.id)
            rules.append(build_pattern_rule(spec))
        return rules

    def _apply(self, rule: Rule, ctx: LineContext) -> Suggestion | None:
        try:
            draft = rule.detect(ctx)
        except Exception:
            # A broken matcher must not take the whole analysis down
            logger.warning(
                f"Rule '{rule.id}' ({rule.language.value}) failed on line {ctx.line_number}",
                exc_info=True,
            )
            return None

        if draft is None:
            return None

        confidence = min(1.0, max(0.0, draft.confidence))
        return Suggestion(
            rule_id=rule.id,
            language=rule.language,
            line_number=ctx.line_number,
            original_code=ctx.text.rstrip(),
            suggested_code=draft.suggested_text,
            explanation=draft.explanation or rule.explanation,
            severity=rule.severity,
            confidence=confidence,
        )


def analyze(
    source_text: str | bytes,
    language: Language | str | None,
    config: AnalysisConfig | None = None,
    rules: Iterable[Rule] | None = None,
) -> list[Suggestion]:
    """
    Analyze with the default registry, or with an ad-hoc rule list.

    Passing `rules` builds a throwaway sealed registry from exactly those
    rules, which is handy for embedding and tests.
    """
    if rules is None:
        return AnalysisEngine().analyze(source_text, language, config)
    registry = RuleRegistry()
    registry.register_all(rules)
    registry.seal()
    return AnalysisEngine(registry).analyze(source_text, language, config)
