"""
Rule Registry — Per-language, ordered, sealable collection of Rules.

Built-in rules are registered once at first use, optionally followed by
rules from provider callables, and the registry is then sealed so that
concurrent analyses only ever read it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from functools import lru_cache

from code_optimizer.core.errors import DuplicateRuleError, RegistrySealedError
from code_optimizer.models.rule_models import Language, Rule

# Import all rule modules
from code_optimizer.core.rules import (
    arrow_function,
    list_comprehension,
    no_console,
    no_debug_macro,
    no_print_debug,
    pathlib_usage,
    redundant_clone,
    use_const,
    use_f_strings,
)

logger = logging.getLogger("code_optimizer.registry")

# A provider yields extra rules to register after the built-ins
RuleProvider = Callable[[], Iterable[Rule]]

# Registration order within a language is the tie-break order on a line
BUILTIN_RULES: list[Rule] = [
    *use_const.RULES,
    *no_console.RULES,
    *arrow_function.RULES,
    *use_f_strings.RULES,
    *no_print_debug.RULES,
    *pathlib_usage.RULES,
    *list_comprehension.RULES,
    *redundant_clone.RULES,
    *no_debug_macro.RULES,
]


class RuleRegistry:
    """
    Language -> ordered Rules.

    Rules are never removed; configuration can only suppress them.
    """

    def __init__(self) -> None:
        self._rules: dict[Language, list[Rule]] = {}
        self._keys: set[tuple[Language, str]] = set()
        self._sealed = False
        self._lock = threading.Lock()

    def register(self, rule: Rule) -> None:
        with self._lock:
            if self._sealed:
                raise RegistrySealedError(
                    f"Cannot register '{rule.id}' for {rule.language.value}: registry is sealed"
                )
            if rule.key in self._keys:
                raise DuplicateRuleError(rule.language.value, rule.id)
            self._keys.add(rule.key)
            self._rules.setdefault(rule.language, []).append(rule)

    def register_all(self, rules: Iterable[Rule]) -> None:
        for rule in rules:
            self.register(rule)

    def seal(self) -> None:
        with self._lock:
            self._sealed = True

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    def rules_for(self, language: Language | str | None) -> tuple[Rule, ...]:
        """Ordered rules for a language; empty for anything unrecognized."""
        resolved = Language.parse(language)
        if resolved is None:
            return ()
        return tuple(self._rules.get(resolved, ()))

    def get(self, language: Language | str, rule_id: str) -> Rule | None:
        for rule in self.rules_for(language):
            if rule.id == rule_id:
                return rule
        return None

    def languages(self) -> list[Language]:
        """Languages that have at least one rule, in enum order."""
        return [language for language in Language if self._rules.get(language)]

    def all_rules(self) -> list[Rule]:
        return [rule for language in self.languages() for rule in self._rules[language]]

    def __len__(self) -> int:
        return len(self._keys)

    def describe(self) -> dict[str, object]:
        """Capability summary: total rule count and the count per language."""
        return {
            "total_rules": len(self),
            "sealed": self._sealed,
            "rules_per_language": {
                language.value: len(self._rules[language]) for language in self.languages()
            },
        }


def build_registry(providers: Iterable[RuleProvider] = (), seal: bool = True) -> RuleRegistry:
    """Create a registry holding the built-in rules plus provider rules."""
    registry = RuleRegistry()
    registry.register_all(BUILTIN_RULES)
    for provider in providers:
        provided = list(provider())
        registry.register_all(provided)
        logger.info(f"Registered {len(provided)} rules from provider {provider!r}")
    if seal:
        registry.seal()
    logger.debug(f"Rule registry ready: {registry.describe()}")
    return registry


@lru_cache
def get_default_registry() -> RuleRegistry:
    """Process-wide sealed registry of built-in rules."""
    return build_registry()
