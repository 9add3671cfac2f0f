"""
Analysis Request/Response Models — API contract schemas.

These are the public-facing Pydantic models used by FastAPI endpoints and
by the CLI's JSON output.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from code_optimizer.models.config_models import AnalysisConfig
from code_optimizer.models.rule_models import AnalysisReport, Language, Severity


class AnalyzeRequest(BaseModel):
    """Request body for POST /analyze."""

    source: str = Field(..., description="Source text to analyze")
    language: str | None = Field(
        default=None, description="Language name or alias; detected from path when omitted"
    )
    path: str | None = Field(default=None, description="File path, used for language detection")
    config: AnalysisConfig | None = Field(
        default=None, description="Analysis policy; service defaults when omitted"
    )


class FileInput(BaseModel):
    """A single file submitted for batch analysis."""

    path: str = Field(..., description="File path (absolute or relative)")
    content: str = Field(..., description="File source content")
    language: str | None = Field(default=None, description="Overrides extension-based detection")


class BatchAnalyzeRequest(BaseModel):
    """Request body for POST /analyze/batch."""

    files: list[FileInput] = Field(default_factory=list)
    config: AnalysisConfig | None = None


class FileReport(BaseModel):
    """Analysis outcome for one file of a batch."""

    path: str
    report: AnalysisReport | None = None
    cached: bool = False
    error: str | None = None


class AuditEntry(BaseModel):
    """Audit metadata for an analysis request."""

    analysis_id: str
    files_analyzed: int
    suggestions_found: int
    languages: list[str] = Field(default_factory=list)
    cache_hits: int = 0
    errors: int = 0
    duration_ms: float = 0.0


class AnalyzeResponse(BaseModel):
    """Top-level response for POST /analyze."""

    message: str = "analysis_complete"
    analysis_id: str = ""
    report: AnalysisReport | None = None


class BatchAnalyzeResponse(BaseModel):
    """Top-level response for POST /analyze/batch."""

    message: str = "analysis_complete"
    analysis_id: str = ""
    files: list[FileReport] = Field(default_factory=list)
    audit: AuditEntry | None = None


class RuleInfo(BaseModel):
    """Catalog entry describing one registered rule."""

    id: str
    language: Language
    severity: Severity
    base_confidence: float
    explanation: str
    enabled_by_default: bool = True


class RuleCatalog(BaseModel):
    """Response for GET /rules."""

    total_rules: int
    languages: list[Language] = Field(default_factory=list)
    rules: list[RuleInfo] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    version: str
    engine: str
    rules: int
