"""
Analyze Routes — POST /analyze, POST /analyze/batch

Single-file analysis runs inline; batches go through the worker, which
caches per file and writes an audit entry.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException

from code_optimizer.api.dependencies import (
    get_analysis_worker,
    get_audit_logger,
    get_default_config,
    get_engine,
)
from code_optimizer.audit.logger import AuditLogger
from code_optimizer.config import settings
from code_optimizer.core.errors import UnsupportedLanguageError
from code_optimizer.core.rule_engine import AnalysisEngine, detect_language_from_path
from code_optimizer.models.analysis_models import (
    AnalyzeRequest,
    AnalyzeResponse,
    BatchAnalyzeRequest,
    BatchAnalyzeResponse,
)
from code_optimizer.models.config_models import AnalysisConfig
from code_optimizer.workers.analysis_worker import AnalysisWorker, new_analysis_id

logger = logging.getLogger("code_optimizer.api.analyze")

router = APIRouter()


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_source(
    req: AnalyzeRequest,
    engine: AnalysisEngine = Depends(get_engine),
    default_config: AnalysisConfig = Depends(get_default_config),
):
    """Analyze one source text and return its ordered suggestions."""
    # Input size guard
    if len(req.source.encode("utf-8")) > settings.max_source_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Source exceeds maximum size of {settings.max_source_bytes} bytes",
        )

    language = req.language
    if language is None and req.path:
        language = detect_language_from_path(req.path)

    analysis_id = new_analysis_id()
    try:
        # Analysis is CPU-bound; keep it off the event loop
        report = await asyncio.to_thread(
            engine.run, req.source, language, req.config or default_config
        )
    except UnsupportedLanguageError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if not report.language_supported:
        logger.info(f"[{analysis_id}] No rules for language {language!r}")
    logger.info(
        f"[{analysis_id}] {len(report.suggestions)} suggestions "
        f"over {report.lines_analyzed} lines ({report.duration_ms:.1f}ms)"
    )

    return AnalyzeResponse(analysis_id=analysis_id, report=report)


@router.post("/analyze/batch", response_model=BatchAnalyzeResponse)
async def analyze_batch(
    request: BatchAnalyzeRequest,
    worker: AnalysisWorker = Depends(get_analysis_worker),
    audit: AuditLogger = Depends(get_audit_logger),
    default_config: AnalysisConfig = Depends(get_default_config),
):
    """Analyze several files under one policy."""
    files = request.files

    if not files:
        return BatchAnalyzeResponse(message="error")

    if len(files) > settings.max_batch_files:
        raise HTTPException(
            status_code=413,
            detail=f"Batch exceeds maximum of {settings.max_batch_files} files",
        )

    response = await worker.run_batch(files, request.config or default_config)

    if response.audit:
        audit.log(response.audit)

    return response
