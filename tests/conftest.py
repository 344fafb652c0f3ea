"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from entra_secret_cleanup.application.exceptions import PrincipalRepositoryError
from entra_secret_cleanup.domain.entities import Credential, ServicePrincipal

NOW = datetime(2024, 1, 1, tzinfo=UTC)


class FakePrincipalRepository:
    """In-memory PrincipalRepository that records calls and concurrency."""

    def __init__(
        self,
        principals: list[ServicePrincipal],
        credentials: dict[str, list[Credential]] | None = None,
        *,
        failing_applications: set[str] | None = None,
        failing_keys: set[str] | None = None,
        listing_error: Exception | None = None,
        unexpected_errors: dict[str, Exception] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.principals = principals
        self.credentials = credentials or {}
        self.failing_applications = failing_applications or set()
        self.failing_keys = failing_keys or set()
        self.listing_error = listing_error
        self.unexpected_errors = unexpected_errors or {}
        self.delay = delay
        self.listed_applications: list[str] = []
        self.delete_calls: list[tuple[str, str]] = []
        self.active = 0
        self.max_active = 0

    async def list_service_principals(self) -> list[ServicePrincipal]:
        if self.listing_error:
            raise self.listing_error
        return list(self.principals)

    async def list_credentials(self, application_id: str) -> list[Credential]:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delay)
            self.listed_applications.append(application_id)
            if application_id in self.unexpected_errors:
                raise self.unexpected_errors[application_id]
            if application_id in self.failing_applications:
                msg = f"HTTP 404 for {application_id}"
                raise PrincipalRepositoryError(msg)
            return list(self.credentials.get(application_id, []))
        finally:
            self.active -= 1

    async def delete_credential(self, application_id: str, key_id: str) -> None:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delay)
            self.delete_calls.append((application_id, key_id))
            if key_id in self.failing_keys:
                msg = f"HTTP 403 deleting {key_id}"
                raise PrincipalRepositoryError(msg)
        finally:
            self.active -= 1


@pytest.fixture
def now() -> datetime:
    """Fixed reference time used by the cleanup clock."""
    return NOW


@pytest.fixture
def make_credential() -> Callable[..., Credential]:
    """Factory for credentials with an ISO expiry string or None."""

    def factory(
        expiry: str | None,
        display_name: str | None = "app-secret",
        hint: str | None = "abc",
        application_id: str = "app-1",
        key_id: str | None = None,
    ) -> Credential:
        return Credential.create(
            key_id=key_id or str(uuid4()),
            display_name=display_name,
            hint=hint,
            expiry_date=datetime.fromisoformat(expiry) if expiry else None,
            application_id=application_id,
        )

    return factory


@pytest.fixture
def make_principal() -> Callable[..., ServicePrincipal]:
    """Factory for service principals."""

    def factory(application_id: str, display_name: str | None = None) -> ServicePrincipal:
        return ServicePrincipal(
            id=f"sp-{application_id}",
            display_name=display_name or f"Principal {application_id}",
            application_id=application_id,
        )

    return factory


@pytest.fixture
def fake_repository() -> type[FakePrincipalRepository]:
    """The in-memory repository class, for tests to build scenarios with."""
    return FakePrincipalRepository
