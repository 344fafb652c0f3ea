"""Tests for Credential entity."""

from __future__ import annotations

from datetime import UTC, datetime

from entra_secret_cleanup.domain.entities import Credential


class TestCredential:
    """Tests for Credential entity."""

    def test_naive_expiry_is_treated_as_utc(self) -> None:
        """Naive expiry dates should be normalized to UTC."""
        credential = Credential.create(
            key_id="k1",
            display_name="secret",
            hint="abc",
            expiry_date=datetime(2020, 1, 1),  # noqa: DTZ001
            application_id="app-1",
        )
        assert credential.expiry_date == datetime(2020, 1, 1, tzinfo=UTC)

    def test_is_expired_at_is_strict(self) -> None:
        """A credential expiring exactly now is not expired."""
        expiry = datetime(2024, 1, 1, tzinfo=UTC)
        credential = Credential.create(
            key_id="k1",
            display_name=None,
            hint=None,
            expiry_date=expiry,
            application_id="app-1",
        )
        assert credential.is_expired_at(expiry) is False
        assert credential.is_expired_at(datetime(2024, 1, 2, tzinfo=UTC)) is True

    def test_without_expiry_never_expires(self) -> None:
        """Credentials without expiry are never expired."""
        credential = Credential.create(
            key_id="k1",
            display_name="secret",
            hint=None,
            expiry_date=None,
            application_id="app-1",
        )
        assert credential.is_expired_at(datetime(2999, 1, 1, tzinfo=UTC)) is False

    def test_create_normalizes_empty_strings(self) -> None:
        """Empty display names and hints should become None."""
        credential = Credential.create(
            key_id="k1",
            display_name="",
            hint="",
            expiry_date=None,
            application_id="app-1",
        )
        assert credential.display_name is None
        assert credential.hint is None
        assert credential.label == "k1"
