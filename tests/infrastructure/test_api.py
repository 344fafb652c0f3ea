"""Tests for the FastAPI adapter."""

from __future__ import annotations

from fastapi.testclient import TestClient

from entra_secret_cleanup.application.exceptions import PrincipalListingError
from entra_secret_cleanup.domain.entities import CleanupSummary
from entra_secret_cleanup.infrastructure.adapters.api import create_app


def _client(cleanup_func) -> TestClient:
    return TestClient(create_app(cleanup_func=cleanup_func, version="9.9.9"))


class TestApi:
    """Tests for the HTTP endpoints."""

    def test_health(self) -> None:
        """Health endpoint should report the version."""

        async def cleanup() -> CleanupSummary:
            return CleanupSummary()

        response = _client(cleanup).get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["version"] == "9.9.9"

    def test_summary_missing_before_first_run(self) -> None:
        """Summary should be 404 until a cleanup ran."""

        async def cleanup() -> CleanupSummary:
            return CleanupSummary()

        assert _client(cleanup).get("/api/v1/summary").status_code == 404

    def test_trigger_cleanup_stores_summary(self) -> None:
        """A triggered cleanup should return and remember its summary."""

        async def cleanup() -> CleanupSummary:
            return CleanupSummary.from_results([], dry_run=True)

        client = _client(cleanup)
        response = client.post("/api/v1/cleanup")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["summary"]["dry_run"] is True

        latest = client.get("/api/v1/summary")
        assert latest.status_code == 200
        assert latest.json()["expired_total"] == 0

    def test_deletion_failures_reported(self) -> None:
        """Runs with failed deletions should not be reported as successful."""

        async def cleanup() -> CleanupSummary:
            return CleanupSummary(expired_deletable=2, deleted=1, deletion_failed=1)

        body = _client(cleanup).post("/api/v1/cleanup").json()
        assert body["success"] is False
        assert body["message"] == "Cleanup completed with errors"

    def test_aborted_cleanup_returns_500(self) -> None:
        """A fatal listing error should map to HTTP 500."""

        async def cleanup() -> CleanupSummary:
            raise PrincipalListingError("No service principals found or insufficient permissions")

        response = _client(cleanup).post("/api/v1/cleanup")
        assert response.status_code == 500
        assert "No service principals found" in response.json()["detail"]
