"""API response models (no credential details exposed)."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"]
    version: str
    timestamp: datetime


class SummaryResponse(BaseModel):
    """Cleanup run counters (no credential details)."""

    summary: str = Field(description="Human-readable summary")
    dry_run: bool
    principals_processed: int = Field(description="Service principals processed")
    principals_failed: int = Field(description="Service principals skipped after a listing failure")
    credentials_total: int = Field(description="Total credentials found")
    expired_total: int = Field(description="Expired credentials found")
    expired_deletable: int = Field(description="Expired credentials selected for deletion")
    expired_excluded: int = Field(description="Expired credentials protected by exclusion rules")
    deleted: int = Field(description="Credentials deleted")
    deletion_failed: int = Field(description="Deletions that failed")
    started_at: datetime
    finished_at: datetime | None = None


class CleanupResponse(BaseModel):
    """Response from triggering a cleanup."""

    success: bool
    message: str
    summary: SummaryResponse


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    detail: str | None = None
