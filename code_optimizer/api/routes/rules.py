"""
Rule Catalog Routes — GET /rules, GET /rules/{language}

Lets clients build settings screens without hard-coding rule ids.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from code_optimizer.api.dependencies import get_registry
from code_optimizer.core.registry import RuleRegistry
from code_optimizer.models.analysis_models import RuleCatalog, RuleInfo
from code_optimizer.models.rule_models import Language, Rule

router = APIRouter(prefix="/rules")


def _info(rule: Rule) -> RuleInfo:
    return RuleInfo(
        id=rule.id,
        language=rule.language,
        severity=rule.severity,
        base_confidence=rule.base_confidence,
        explanation=rule.explanation,
        enabled_by_default=rule.enabled_by_default,
    )


@router.get("", response_model=RuleCatalog)
async def list_rules(registry: RuleRegistry = Depends(get_registry)):
    """Every registered rule, grouped by language in registration order."""
    return RuleCatalog(
        total_rules=len(registry),
        languages=registry.languages(),
        rules=[_info(rule) for rule in registry.all_rules()],
    )


@router.get("/{language}", response_model=RuleCatalog)
async def list_language_rules(language: str, registry: RuleRegistry = Depends(get_registry)):
    """Rules for one language. Known languages without rules return an empty catalog."""
    resolved = Language.parse(language)
    if resolved is None:
        raise HTTPException(status_code=404, detail=f"Unknown language: {language}")
    rules = registry.rules_for(resolved)
    return RuleCatalog(
        total_rules=len(rules),
        languages=[resolved] if rules else [],
        rules=[_info(rule) for rule in rules],
    )
