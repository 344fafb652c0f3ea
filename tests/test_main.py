"""Tests for the composition root and exit codes."""

from __future__ import annotations

import asyncio

import pytest
import uvicorn
from fastapi import FastAPI
from fastapi.testclient import TestClient

from entra_secret_cleanup import main as main_module
from entra_secret_cleanup.application.exceptions import PrincipalListingError
from entra_secret_cleanup.domain.entities import CleanupSummary
from entra_secret_cleanup.main import Application, ApplicationContainer, async_main


@pytest.fixture
def client_secret_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Configure client secret authentication with no optional features."""
    monkeypatch.setenv("AZURE_TENANT_ID", "tenant")
    monkeypatch.setenv("AZURE_CLIENT_ID", "client")
    monkeypatch.setenv("AZURE_CLIENT_SECRET", "secret")
    monkeypatch.setenv("AZURE_CONFIG_DIR", str(tmp_path / "missing"))
    for key in ("RUN_MODE", "API_ENABLED", "SLACK_ENABLED", "WEBHOOK_ENABLED", "MAX_CONCURRENT", "DRY_RUN"):
        monkeypatch.delenv(key, raising=False)


class TestAsyncMain:
    """Tests for async_main exit codes."""

    def test_missing_authentication_exits_nonzero(self, monkeypatch, tmp_path) -> None:
        """No credentials and no CLI context should exit with 1."""
        for key in ("AZURE_TENANT_ID", "AZURE_CLIENT_ID", "AZURE_CLIENT_SECRET"):
            monkeypatch.delenv(key, raising=False)
        monkeypatch.setenv("AZURE_CONFIG_DIR", str(tmp_path / "missing"))

        assert asyncio.run(async_main()) == 1

    def test_zero_principals_exits_nonzero(self, client_secret_env, monkeypatch, fake_repository) -> None:
        """An empty tenant listing should abort with 1."""
        repository = fake_repository([])
        monkeypatch.setattr(ApplicationContainer, "create_principal_repository", lambda self: repository)

        assert asyncio.run(async_main()) == 1
        assert repository.listed_applications == []

    def test_failed_deletions_still_exit_zero(
        self, client_secret_env, monkeypatch, fake_repository, make_principal, make_credential
    ) -> None:
        """Deletion failures are reported, not fatal."""
        repository = fake_repository(
            [make_principal("app-1")],
            {"app-1": [make_credential("2020-01-01", key_id="k1")]},
            failing_keys={"k1"},
        )
        monkeypatch.setattr(ApplicationContainer, "create_principal_repository", lambda self: repository)

        assert asyncio.run(async_main()) == 0
        assert repository.delete_calls == [("app-1", "k1")]

    def test_invalid_run_mode_exits_nonzero(self, client_secret_env, monkeypatch) -> None:
        """Unknown run modes should be rejected."""
        monkeypatch.setenv("RUN_MODE", "sometimes")
        assert asyncio.run(async_main()) == 1

    def test_dry_run_from_environment(
        self, client_secret_env, monkeypatch, fake_repository, make_principal, make_credential
    ) -> None:
        """DRY_RUN should prevent deletion calls end to end."""
        monkeypatch.setenv("DRY_RUN", "true")
        repository = fake_repository(
            [make_principal("app-1")],
            {"app-1": [make_credential("2020-01-01")]},
        )
        monkeypatch.setattr(ApplicationContainer, "create_principal_repository", lambda self: repository)

        assert asyncio.run(async_main()) == 0
        assert repository.delete_calls == []


class StopSchedule(Exception):
    """Raised by the patched sleep to leave the scheduler loop."""


class TestRunModes:
    """Tests for the API and scheduled run modes."""

    def test_api_mode_serves_on_running_loop(self, client_secret_env, monkeypatch) -> None:
        """API mode should start the server inside the existing event loop."""
        monkeypatch.setenv("API_ENABLED", "true")
        served: list[uvicorn.Config] = []

        async def fake_serve(self, sockets=None) -> None:
            served.append(self.config)

        monkeypatch.setattr(uvicorn.Server, "serve", fake_serve)

        assert asyncio.run(Application(main_module.load_settings()).run()) == 0
        assert len(served) == 1
        assert isinstance(served[0].app, FastAPI)
        assert served[0].port == 8080
        assert TestClient(served[0].app).get("/health").status_code == 200

    def test_listing_failure_does_not_end_schedule(self, client_secret_env, monkeypatch) -> None:
        """A fatal run in scheduled mode should be logged and the schedule kept."""
        monkeypatch.setenv("RUN_MODE", "scheduled")
        monkeypatch.setenv("CRON_SCHEDULE", "* * * * *")
        runs: list[int] = []
        sleeps: list[float] = []

        async def fake_run_once(self) -> CleanupSummary:
            runs.append(len(runs))
            if len(runs) == 1:
                msg = "No service principals found or insufficient permissions"
                raise PrincipalListingError(msg)
            return CleanupSummary()

        async def fake_sleep(seconds: float) -> None:
            sleeps.append(seconds)
            if len(sleeps) == 3:
                raise StopSchedule

        monkeypatch.setattr(Application, "run_once", fake_run_once)
        monkeypatch.setattr(main_module.asyncio, "sleep", fake_sleep)

        with pytest.raises(StopSchedule):
            asyncio.run(Application(main_module.load_settings()).run())

        assert len(runs) == 3
        assert all(0 < seconds <= 60 for seconds in sleeps)


class TestApplicationContainer:
    """Tests for dependency wiring."""

    def test_client_secret_token_provider(self, client_secret_env) -> None:
        """The explicit triple should select the MSAL token provider."""
        settings = main_module.load_settings()
        provider = ApplicationContainer(settings).create_token_provider()
        assert isinstance(provider, main_module.ClientSecretTokenProvider)

    def test_cli_token_provider(self, monkeypatch, tmp_path) -> None:
        """A mounted CLI context should select the Azure CLI token provider."""
        for key in ("AZURE_TENANT_ID", "AZURE_CLIENT_ID", "AZURE_CLIENT_SECRET"):
            monkeypatch.delenv(key, raising=False)
        monkeypatch.setenv("AZURE_CONFIG_DIR", str(tmp_path))

        settings = main_module.load_settings()
        provider = ApplicationContainer(settings).create_token_provider()
        assert isinstance(provider, main_module.AzureCliTokenProvider)
