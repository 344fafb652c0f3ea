"""Credential entity representing an application secret."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Self


@dataclass(frozen=True, slots=True)
class Credential:
    """A password credential (client secret) belonging to an application."""

    key_id: str
    display_name: str | None
    hint: str | None
    expiry_date: datetime | None
    application_id: str

    def __post_init__(self) -> None:
        """Normalize naive expiry dates to UTC."""
        if self.expiry_date is not None and self.expiry_date.tzinfo is None:
            object.__setattr__(self, "expiry_date", self.expiry_date.replace(tzinfo=UTC))

    @property
    def label(self) -> str:
        """Name used in log output."""
        return self.display_name or self.key_id

    def is_expired_at(self, now: datetime) -> bool:
        """Check if the credential expired strictly before ``now``."""
        if self.expiry_date is None:
            return False
        now_aware = now if now.tzinfo else now.replace(tzinfo=UTC)
        return self.expiry_date < now_aware

    @classmethod
    def create(
        cls,
        *,
        key_id: str,
        display_name: str | None,
        hint: str | None,
        expiry_date: datetime | None,
        application_id: str,
    ) -> Self:
        """Factory method to create a Credential from raw data."""
        return cls(
            key_id=key_id,
            display_name=display_name or None,
            hint=hint or None,
            expiry_date=expiry_date,
            application_id=application_id,
        )
