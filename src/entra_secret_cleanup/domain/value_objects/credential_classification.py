"""Credential classification value object."""

from enum import StrEnum, auto


class CredentialClassification(StrEnum):
    """Outcome of classifying a credential against expiry and exclusions."""

    UNEXPIRED = auto()
    EXCLUDED = auto()
    DELETABLE = auto()

    @property
    def is_expired(self) -> bool:
        """Check if this classification applies to an expired credential."""
        return self in {CredentialClassification.EXCLUDED, CredentialClassification.DELETABLE}

    def __str__(self) -> str:
        return self.value
