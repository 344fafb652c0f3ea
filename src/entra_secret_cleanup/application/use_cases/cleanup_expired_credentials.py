"""Use case for deleting expired service principal secrets."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime

from ...domain.entities import CleanupSummary, PrincipalResult, ServicePrincipal
from ...domain.services import CredentialFilter
from ...domain.value_objects import ExclusionRules
from ..exceptions import PrincipalListingError, PrincipalRepositoryError
from ..ports import NotificationSender, PrincipalRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT = 5


def _utc_now() -> datetime:
    return datetime.now(UTC)


class CleanupExpiredCredentials:
    """
    Use case for removing expired secrets from every service principal.

    Each principal is handled end-to-end by one worker coroutine. A semaphore
    caps the number of active workers; workers hand back a PrincipalResult
    and the totals are folded only after all of them have finished.
    """

    def __init__(
        self,
        repository: PrincipalRepository,
        exclusion_rules: ExclusionRules,
        notification_senders: list[NotificationSender] | None = None,
        *,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        dry_run: bool = False,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """
        Initialize the use case.

        Args:
            repository: Adapter for listing principals and pruning credentials.
            exclusion_rules: Patterns protecting expired credentials.
            notification_senders: Adapters notified with the final summary.
            max_concurrent: Maximum number of principals processed at once.
            dry_run: If True, classify and report without deleting anything.
            clock: Source of the current UTC time.
        """
        if max_concurrent < 1:
            msg = f"max_concurrent must be at least 1, got {max_concurrent}"
            raise ValueError(msg)

        self._repository = repository
        self._filter = CredentialFilter(exclusion_rules)
        self._senders = [s for s in notification_senders or [] if s.is_configured()]
        self._max_concurrent = max_concurrent
        self._dry_run = dry_run
        self._clock = clock

    async def execute(self) -> CleanupSummary:
        """
        Execute the cleanup.

        Returns:
            CleanupSummary with aggregate counts.

        Raises:
            PrincipalListingError: If principals cannot be listed or none exist.
        """
        started_at = self._clock()
        self._log_configuration()

        principals = await self._list_principals()
        total = len(principals)
        logger.info("Found %d service principals to process", total)

        semaphore = asyncio.Semaphore(self._max_concurrent)

        async def worker(principal: ServicePrincipal, index: int) -> PrincipalResult:
            async with semaphore:
                try:
                    return await self._process_principal(principal, index, total)
                except Exception as e:
                    logger.exception("[%d/%d] Unexpected error processing %s", index, total, principal.display_name)
                    return PrincipalResult(principal=principal, index=index, error=f"Unexpected error: {e!r}")

        results = await asyncio.gather(
            *(worker(principal, index) for index, principal in enumerate(principals, start=1))
        )

        summary = CleanupSummary.from_results(results, dry_run=self._dry_run, started_at=started_at)
        self._log_summary(summary)

        if self._senders:
            summary.notifications_sent, summary.notifications_failed = await self._send_notifications(summary)

        return summary

    async def _list_principals(self) -> list[ServicePrincipal]:
        """Fetch the full principal list, failing the run if it is unusable."""
        logger.info("Fetching all service principals...")
        try:
            principals = await self._repository.list_service_principals()
        except PrincipalRepositoryError as e:
            msg = f"Failed to list service principals: {e}"
            raise PrincipalListingError(msg) from e

        if not principals:
            msg = "No service principals found or insufficient permissions"
            raise PrincipalListingError(msg)

        return principals

    async def _process_principal(self, principal: ServicePrincipal, index: int, total: int) -> PrincipalResult:
        """List, classify and delete credentials of a single principal."""
        result = PrincipalResult(principal=principal, index=index)
        logger.info("[%d/%d] Processing: %s", index, total, principal.display_name)
        logger.debug(
            "  Service Principal ID: %s, Application ID: %s",
            principal.id,
            principal.application_id,
        )

        try:
            credentials = await self._repository.list_credentials(principal.application_id)
        except PrincipalRepositoryError as e:
            logger.warning("[%d/%d] Could not list credentials for %s: %s", index, total, principal.display_name, e)
            result.error = str(e)
            return result

        result.credentials_total = len(credentials)
        if not credentials:
            logger.info("[%d/%d] No credentials found", index, total)
            return result

        groups = self._filter.partition(credentials, self._clock())
        result.excluded = groups.excluded
        result.deletable = groups.deletable

        for credential in groups.excluded:
            logger.info("    Skipping expired token (excluded): %s", credential.label)
        for credential in groups.deletable:
            logger.info(
                "    Found expired token: %s (Expires: %s)",
                credential.label,
                credential.expiry_date.isoformat() if credential.expiry_date else "unknown",
            )

        if groups.deletable and self._dry_run:
            logger.info("  DRY RUN: Would delete %d expired secrets", len(groups.deletable))
        elif groups.deletable:
            await self._delete_credentials(result)

        logger.info("[%d/%d] %s: %s", index, total, principal.display_name, result.get_summary())
        return result

    async def _delete_credentials(self, result: PrincipalResult) -> None:
        """Delete each deletable credential once, recording failures per key."""
        application_id = result.principal.application_id
        for credential in result.deletable:
            try:
                await self._repository.delete_credential(application_id, credential.key_id)
            except PrincipalRepositoryError as e:
                logger.warning("    Failed to delete secret %s: %s", credential.key_id, e)
                result.failed_key_ids.append(credential.key_id)
            else:
                logger.info("    Deleted secret: %s", credential.key_id)
                result.deleted_key_ids.append(credential.key_id)

    async def _send_notifications(self, summary: CleanupSummary) -> tuple[int, int]:
        """Send the summary through all configured senders."""
        sent = 0
        failed = 0

        for sender in self._senders:
            try:
                if await sender.send(summary):
                    sent += 1
                    logger.info("Notification sent via %s", sender.__class__.__name__)
                else:
                    failed += 1
                    logger.warning("Notification failed via %s", sender.__class__.__name__)
            except Exception:
                failed += 1
                logger.exception("Error sending notification via %s", sender.__class__.__name__)

        return sent, failed

    def _log_configuration(self) -> None:
        rules = self._filter.rules
        if rules.names:
            logger.info("Excluding tokens with names: %s", ", ".join(rules.names))
        if rules.descriptions:
            logger.info("Excluding tokens with descriptions: %s", ", ".join(rules.descriptions))
        if self._dry_run:
            logger.info("DRY RUN MODE: Will show what would be deleted without actually deleting")
        logger.info("Maximum concurrent operations: %d", self._max_concurrent)

    def _log_summary(self, summary: CleanupSummary) -> None:
        """Log the final run report."""
        logger.info("BULK CLEANUP COMPLETED: %s", summary.get_summary())
        logger.info("  Service Principals Processed: %d", summary.principals_processed)
        logger.info("  Service Principals Skipped: %d", summary.principals_failed)
        logger.info("  Total Credentials Found: %d", summary.credentials_total)
        logger.info("  Total Expired Credentials: %d", summary.expired_total)
        logger.info("  Expired Credentials To Delete: %d", summary.expired_deletable)
        logger.info("  Expired Credentials Excluded: %d", summary.expired_excluded)
        logger.info("  Expired Credentials Deleted: %d", summary.deleted)
        if summary.deletion_failed:
            logger.warning("  Failed Deletions: %d", summary.deletion_failed)
        if summary.dry_run:
            logger.info("  DRY RUN: No actual deletions were performed")
