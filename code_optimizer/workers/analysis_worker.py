"""
Analysis Worker — Async orchestrator for multi-file analysis requests.

Pipeline per batch:
1. Resolve each file's language (explicit, else from its extension)
2. Serve unchanged files from the result cache
3. Analyze the rest concurrently in worker threads
4. Cache fresh reports and assemble the per-file results plus audit entry
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid

from code_optimizer.cache.result_cache import ResultCache
from code_optimizer.config import settings
from code_optimizer.core.errors import OptimizerError
from code_optimizer.core.rule_engine import AnalysisEngine, detect_language_from_path
from code_optimizer.models.analysis_models import (
    AuditEntry,
    BatchAnalyzeResponse,
    FileInput,
    FileReport,
)
from code_optimizer.models.config_models import AnalysisConfig
from code_optimizer.models.rule_models import Language

logger = logging.getLogger("code_optimizer.worker")


def new_analysis_id() -> str:
    return str(uuid.uuid4())[:8]


class AnalysisWorker:
    """Runs batches of files through the engine with caching."""

    def __init__(
        self,
        engine: AnalysisEngine | None = None,
        cache: ResultCache | None = None,
    ) -> None:
        self.engine = engine or AnalysisEngine()
        self.cache = cache or ResultCache()

    def analyze_file(self, file: FileInput, config: AnalysisConfig) -> FileReport:
        """Analyze one file synchronously; failures become a FileReport error."""
        if len(file.content.encode("utf-8")) > settings.max_source_bytes:
            return FileReport(
                path=file.path,
                error=f"File exceeds maximum size of {settings.max_source_bytes} bytes",
            )

        language = file.language or detect_language_from_path(file.path)
        resolved = Language.parse(language)
        language_key = resolved.value if resolved else str(language)

        cached = self.cache.get(file.path, file.content, language_key, config)
        if cached is not None:
            return FileReport(path=file.path, report=cached, cached=True)

        try:
            report = self.engine.run(file.content, language, config)
        except OptimizerError as e:
            logger.warning(f"Analysis of {file.path} failed: {e}")
            return FileReport(path=file.path, error=str(e))

        self.cache.put(file.path, file.content, language_key, config, report)
        return FileReport(path=file.path, report=report)

    async def run_batch(
        self,
        files: list[FileInput],
        config: AnalysisConfig,
    ) -> BatchAnalyzeResponse:
        """
        Analyze every file of a batch.

        Args:
            files: Files to analyze.
            config: Policy applied to every file.

        Returns:
            BatchAnalyzeResponse with one FileReport per input, in input order.
        """
        analysis_id = new_analysis_id()
        start_time = time.monotonic()

        logger.info(f"[{analysis_id}] Starting batch analysis of {len(files)} files")

        # The engine is pure, so files can run side by side
        results = await asyncio.gather(
            *(asyncio.to_thread(self.analyze_file, f, config) for f in files)
        )

        suggestions_found = sum(len(r.report.suggestions) for r in results if r.report)
        languages = sorted(
            {r.report.language.value for r in results if r.report and r.report.language}
        )
        cache_hits = sum(1 for r in results if r.cached)
        errors = sum(1 for r in results if r.error)
        elapsed = (time.monotonic() - start_time) * 1000

        logger.info(
            f"[{analysis_id}] Done: {suggestions_found} suggestions across {len(files)} files "
            f"({cache_hits} cached, {errors} errors, {elapsed:.1f}ms)"
        )

        return BatchAnalyzeResponse(
            analysis_id=analysis_id,
            files=list(results),
            audit=AuditEntry(
                analysis_id=analysis_id,
                files_analyzed=len(files),
                suggestions_found=suggestions_found,
                languages=languages,
                cache_hits=cache_hits,
                errors=errors,
                duration_ms=round(elapsed, 2),
            ),
        )
