"""
Health Check Route — GET /health
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from code_optimizer.api.dependencies import get_registry
from code_optimizer.config import VERSION
from code_optimizer.core.registry import RuleRegistry
from code_optimizer.models.analysis_models import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(registry: RuleRegistry = Depends(get_registry)):
    """Health check endpoint."""
    return HealthResponse(
        version=VERSION,
        engine="line-heuristic",
        rules=len(registry),
    )
