"""Port for notification sending - driven/secondary port."""

from typing import Protocol

from ...domain.entities import CleanupSummary


class NotificationSender(Protocol):
    """
    Port for sending notifications.

    This is a driven (secondary) port that defines how the application
    reports a finished cleanup run to external systems.
    """

    async def send(self, summary: CleanupSummary) -> bool:
        """
        Send a notification for the cleanup summary.

        Returns:
            True if notification was sent successfully.
        """
        ...

    def is_configured(self) -> bool:
        """
        Check if this notification sender is properly configured.

        Returns:
            True if the sender is ready to send notifications.
        """
        ...
