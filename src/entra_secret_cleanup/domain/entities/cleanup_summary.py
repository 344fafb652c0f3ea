"""Cleanup summary aggregate root."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from .credential import Credential
from .service_principal import ServicePrincipal


@dataclass(slots=True)
class PrincipalResult:
    """Outcome of processing one service principal."""

    principal: ServicePrincipal
    index: int
    credentials_total: int = 0
    excluded: list[Credential] = field(default_factory=list)
    deletable: list[Credential] = field(default_factory=list)
    deleted_key_ids: list[str] = field(default_factory=list)
    failed_key_ids: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the principal could not be processed."""
        return self.error is not None

    @property
    def expired_count(self) -> int:
        """Count of expired credentials, excluded or not."""
        return len(self.excluded) + len(self.deletable)

    def get_summary(self) -> str:
        """Generate a one-line summary for progress output."""
        if self.failed:
            return f"Skipped: {self.error}"
        return (
            f"{len(self.deletable)} expired (to delete), {len(self.excluded)} excluded, "
            f"{len(self.deleted_key_ids)} deleted"
        )


@dataclass(slots=True)
class CleanupSummary:
    """Aggregate counters for a cleanup run."""

    dry_run: bool = False
    principals_processed: int = 0
    principals_failed: int = 0
    credentials_total: int = 0
    expired_deletable: int = 0
    expired_excluded: int = 0
    deleted: int = 0
    deletion_failed: int = 0
    notifications_sent: int = 0
    notifications_failed: int = 0
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None

    @classmethod
    def from_results(
        cls,
        results: Iterable[PrincipalResult],
        *,
        dry_run: bool = False,
        started_at: datetime | None = None,
    ) -> CleanupSummary:
        """Fold per-principal results into a summary."""
        summary = cls(dry_run=dry_run)
        if started_at is not None:
            summary.started_at = started_at
        for result in results:
            summary.add(result)
        summary.finished_at = datetime.now(UTC)
        return summary

    @property
    def expired_total(self) -> int:
        """Count of expired credentials across all principals."""
        return self.expired_deletable + self.expired_excluded

    @property
    def duration_seconds(self) -> float | None:
        """Wall-clock duration of the run."""
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    def add(self, result: PrincipalResult) -> None:
        """Add one principal's counts to the totals."""
        self.principals_processed += 1
        if result.failed:
            self.principals_failed += 1
            return
        self.credentials_total += result.credentials_total
        self.expired_deletable += len(result.deletable)
        self.expired_excluded += len(result.excluded)
        self.deleted += len(result.deleted_key_ids)
        self.deletion_failed += len(result.failed_key_ids)

    def get_summary(self) -> str:
        """Generate a human-readable summary of the run."""
        if not self.expired_total:
            return f"No expired credentials found across {self.principals_processed} service principals"
        if self.dry_run:
            return (
                f"{self.expired_total} expired credentials: "
                f"{self.expired_deletable} would be deleted, {self.expired_excluded} excluded"
            )
        return (
            f"{self.expired_total} expired credentials: {self.deleted} deleted, "
            f"{self.deletion_failed} failed, {self.expired_excluded} excluded"
        )

    def to_dict(self) -> dict:
        """Serialize counters for notifications and API responses."""
        return {
            "dry_run": self.dry_run,
            "principals_processed": self.principals_processed,
            "principals_failed": self.principals_failed,
            "credentials_total": self.credentials_total,
            "expired_total": self.expired_total,
            "expired_deletable": self.expired_deletable,
            "expired_excluded": self.expired_excluded,
            "deleted": self.deleted,
            "deletion_failed": self.deletion_failed,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }
