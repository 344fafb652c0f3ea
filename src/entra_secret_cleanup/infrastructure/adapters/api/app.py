"""FastAPI application factory."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import FastAPI, HTTPException, status
from fastapi.responses import JSONResponse

from ....application.exceptions import PrincipalListingError
from .models import CleanupResponse, ErrorResponse, HealthResponse, SummaryResponse

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable, Coroutine

    from ....domain.entities import CleanupSummary

logger = logging.getLogger(__name__)


def _summary_to_response(summary: CleanupSummary) -> SummaryResponse:
    """Convert domain summary to API response."""
    return SummaryResponse(
        summary=summary.get_summary(),
        dry_run=summary.dry_run,
        principals_processed=summary.principals_processed,
        principals_failed=summary.principals_failed,
        credentials_total=summary.credentials_total,
        expired_total=summary.expired_total,
        expired_deletable=summary.expired_deletable,
        expired_excluded=summary.expired_excluded,
        deleted=summary.deleted,
        deletion_failed=summary.deletion_failed,
        started_at=summary.started_at,
        finished_at=summary.finished_at,
    )


class ApiState:
    """Shared state for API endpoints."""

    def __init__(
        self,
        cleanup_func: Callable[[], Coroutine[None, None, CleanupSummary]],
        version: str = "1.0.0",
    ) -> None:
        """Initialize API state."""
        self.cleanup_func = cleanup_func
        self.version = version
        self.last_summary: CleanupSummary | None = None
        self.run_lock = asyncio.Lock()


def create_app(
    cleanup_func: Callable[[], Coroutine[None, None, CleanupSummary]],
    version: str = "1.0.0",
) -> FastAPI:
    """
    Create FastAPI application.

    Args:
        cleanup_func: Async function executing one cleanup run.
        version: Application version string.

    Returns:
        Configured FastAPI application.
    """
    state = ApiState(cleanup_func=cleanup_func, version=version)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        logger.info("API server starting...")
        yield
        logger.info("API server shutting down...")

    app = FastAPI(
        title="Entra ID Expired Secret Cleanup API",
        description="Delete expired service principal secrets on demand. "
        "**No credential details are exposed through this API.**",
        version=version,
        lifespan=lifespan,
        responses={
            500: {"model": ErrorResponse, "description": "Internal server error"},
        },
    )

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            version=state.version,
            timestamp=datetime.now(UTC),
        )

    @app.get(
        "/api/v1/summary",
        response_model=SummaryResponse,
        tags=["Reports"],
        summary="Get latest cleanup summary",
        responses={
            404: {"model": ErrorResponse, "description": "No cleanup has run yet"},
        },
    )
    async def get_summary() -> SummaryResponse:
        if state.last_summary is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No summary available. Trigger a cleanup first using POST /api/v1/cleanup",
            )
        return _summary_to_response(state.last_summary)

    @app.post(
        "/api/v1/cleanup",
        response_model=CleanupResponse,
        tags=["Operations"],
        summary="Trigger cleanup",
        description="Delete expired secrets of every service principal, honouring exclusions and dry-run.",
        responses={
            409: {"model": ErrorResponse, "description": "A cleanup is already running"},
            500: {"model": ErrorResponse, "description": "Cleanup failed"},
        },
    )
    async def trigger_cleanup() -> CleanupResponse:
        if state.run_lock.locked():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A cleanup run is already in progress",
            )

        async with state.run_lock:
            try:
                logger.info("API: Triggering cleanup...")
                summary = await state.cleanup_func()
            except PrincipalListingError as e:
                logger.error("API: Cleanup aborted: %s", e)
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=f"Cleanup aborted: {e}",
                ) from e

        state.last_summary = summary
        success = summary.deletion_failed == 0 and summary.principals_failed == 0
        return CleanupResponse(
            success=success,
            message="Cleanup completed successfully" if success else "Cleanup completed with errors",
            summary=_summary_to_response(summary),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc: Exception) -> JSONResponse:  # noqa: ARG001
        """Handle uncaught exceptions."""
        logger.exception("Unhandled exception in API")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "detail": str(exc)},
        )

    return app
