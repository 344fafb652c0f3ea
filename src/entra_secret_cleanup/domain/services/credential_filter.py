"""Domain service deciding which credentials may be deleted."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from ..entities import Credential
from ..value_objects import CredentialClassification, ExclusionRules


@dataclass(slots=True)
class PartitionedCredentials:
    """Credentials grouped by classification."""

    unexpired: list[Credential] = field(default_factory=list)
    excluded: list[Credential] = field(default_factory=list)
    deletable: list[Credential] = field(default_factory=list)


class CredentialFilter:
    """Classify credentials by expiry and exclusion rules."""

    def __init__(self, rules: ExclusionRules) -> None:
        """Initialize filter with exclusion rules."""
        self._rules = rules

    @property
    def rules(self) -> ExclusionRules:
        """Configured exclusion rules."""
        return self._rules

    def classify(self, credential: Credential, now: datetime) -> CredentialClassification:
        """
        Classify a single credential.

        Credentials without an expiry date are never expired.

        Args:
            credential: The credential to classify.
            now: Reference time for the expiry check.

        Returns:
            UNEXPIRED, EXCLUDED or DELETABLE.
        """
        if not credential.is_expired_at(now):
            return CredentialClassification.UNEXPIRED
        if self._rules.matches(credential.display_name, credential.hint):
            return CredentialClassification.EXCLUDED
        return CredentialClassification.DELETABLE

    def partition(self, credentials: Iterable[Credential], now: datetime) -> PartitionedCredentials:
        """Classify each credential once and group the results."""
        groups = PartitionedCredentials()
        for credential in credentials:
            match self.classify(credential, now):
                case CredentialClassification.UNEXPIRED:
                    groups.unexpired.append(credential)
                case CredentialClassification.EXCLUDED:
                    groups.excluded.append(credential)
                case CredentialClassification.DELETABLE:
                    groups.deletable.append(credential)
        return groups
