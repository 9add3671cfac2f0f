"""
FastAPI Dependencies — Shared singletons injected via Depends().
"""

from __future__ import annotations

import logging
from functools import lru_cache

from code_optimizer.audit.logger import AuditLogger
from code_optimizer.cache.result_cache import ResultCache
from code_optimizer.config import settings
from code_optimizer.core.config_loader import load_config_file
from code_optimizer.core.registry import RuleRegistry, get_default_registry
from code_optimizer.core.rule_engine import AnalysisEngine
from code_optimizer.models.config_models import AnalysisConfig
from code_optimizer.workers.analysis_worker import AnalysisWorker

logger = logging.getLogger("code_optimizer.api")


@lru_cache
def get_registry() -> RuleRegistry:
    """Sealed built-in rule registry."""
    return get_default_registry()


@lru_cache
def get_engine() -> AnalysisEngine:
    """Shared analysis engine singleton."""
    return AnalysisEngine(get_registry())


@lru_cache
def get_result_cache() -> ResultCache:
    """Shared result cache singleton."""
    return ResultCache()


@lru_cache
def get_audit_logger() -> AuditLogger:
    """Shared audit logger singleton."""
    return AuditLogger()


@lru_cache
def get_analysis_worker() -> AnalysisWorker:
    """Shared batch worker singleton."""
    return AnalysisWorker(engine=get_engine(), cache=get_result_cache())


@lru_cache
def get_default_config() -> AnalysisConfig:
    """Policy used when a request carries no configuration of its own."""
    if settings.rules_config_path:
        logger.info(f"Loading default analysis config from {settings.rules_config_path}")
        return load_config_file(settings.rules_config_path)
    return AnalysisConfig(
        minimum_confidence=settings.default_minimum_confidence,
        strict_language=settings.strict_language,
    )
