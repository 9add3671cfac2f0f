"""
Tests for the Rule Registry — ordering, uniqueness and sealing.
"""

import pytest

from code_optimizer.core.errors import DuplicateRuleError, RegistrySealedError
from code_optimizer.core.registry import (
    BUILTIN_RULES,
    RuleRegistry,
    build_registry,
    get_default_registry,
)
from code_optimizer.models.rule_models import Language, Rule, Severity


def _rule(rule_id, language=Language.PYTHON, confidence=0.7):
    return Rule(
        id=rule_id,
        language=language,
        severity=Severity.INFO,
        base_confidence=confidence,
        explanation=f"{rule_id} explanation",
        detect=lambda ctx: None,
    )


def test_default_registry_is_sealed():
    registry = get_default_registry()
    assert registry.is_sealed
    assert len(registry) == len(BUILTIN_RULES)


def test_builtin_order_per_language():
    registry = get_default_registry()
    ids = lambda language: [rule.id for rule in registry.rules_for(language)]

    assert ids(Language.JAVASCRIPT) == ["use-const", "no-console", "arrow-function"]
    assert ids(Language.TYPESCRIPT) == ["use-const", "no-console", "arrow-function"]
    assert ids(Language.PYTHON) == [
        "use-f-strings",
        "no-print-debug",
        "pathlib-usage",
        "list-comprehension",
    ]
    assert ids(Language.RUST) == ["redundant-clone", "no-debug-macro"]


def test_rules_for_unknown_or_empty_language():
    registry = get_default_registry()
    assert registry.rules_for("cobol") == ()
    assert registry.rules_for(None) == ()
    assert registry.rules_for(Language.GO) == ()
    assert registry.rules_for("py") == registry.rules_for(Language.PYTHON)


def test_describe():
    summary = get_default_registry().describe()
    assert summary["total_rules"] == 12
    assert summary["sealed"] is True
    assert summary["rules_per_language"] == {
        "javascript": 3,
        "typescript": 3,
        "python": 4,
        "rust": 2,
    }


def test_get_rule():
    registry = get_default_registry()
    rule = registry.get("rust", "redundant-clone")
    assert rule is not None
    assert rule.base_confidence == 0.8
    assert registry.get(Language.RUST, "use-const") is None


def test_duplicate_rule_rejected():
    registry = RuleRegistry()
    registry.register(_rule("dup"))
    with pytest.raises(DuplicateRuleError) as info:
        registry.register(_rule("dup"))
    assert info.value.rule_id == "dup"


def test_same_id_in_two_languages_is_allowed():
    registry = RuleRegistry()
    registry.register(_rule("shared", Language.PYTHON))
    registry.register(_rule("shared", Language.RUST))
    assert len(registry) == 2


def test_sealed_registry_rejects_registration():
    registry = RuleRegistry()
    registry.seal()
    with pytest.raises(RegistrySealedError):
        registry.register(_rule("late"))


def test_build_registry_with_provider():
    registry = build_registry(providers=[lambda: [_rule("extra-python")]])
    python_ids = [rule.id for rule in registry.rules_for(Language.PYTHON)]
    assert python_ids[-1] == "extra-python"
    assert registry.is_sealed


def test_build_registry_unsealed():
    registry = build_registry(seal=False)
    registry.register(_rule("later", Language.GO))
    assert registry.languages()[-1] == Language.GO


def test_provider_cannot_duplicate_builtin():
    with pytest.raises(DuplicateRuleError):
        build_registry(providers=[lambda: [_rule("pathlib-usage")]])


@pytest.mark.parametrize("rule_id,confidence", [("", 0.5), ("   ", 0.5), ("ok", 1.5), ("ok", -0.1)])
def test_invalid_rule_definition(rule_id, confidence):
    with pytest.raises(ValueError):
        _rule(rule_id, confidence=confidence)
