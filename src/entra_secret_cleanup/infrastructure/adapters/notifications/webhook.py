"""Generic webhook notification sender."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import httpx

from .base import BaseNotificationSender

if TYPE_CHECKING:
    from ....domain.entities import CleanupSummary


@dataclass(frozen=True, slots=True)
class WebhookConfig:
    """Webhook notification configuration."""

    enabled: bool = False
    url: str = ""


class WebhookNotificationSender(BaseNotificationSender):
    """Send notifications via generic HTTP webhook with JSON payload."""

    def __init__(self, config: WebhookConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize the webhook sender."""
        super().__init__(transport=transport)
        self._config = config

    def is_configured(self) -> bool:
        """Check if webhook is properly configured."""
        return self._config.enabled and bool(self._config.url)

    async def send(self, summary: CleanupSummary) -> bool:
        """Send webhook notification with JSON payload."""
        if not self.is_configured():
            self._logger.warning("Webhook sender not configured")
            return False

        try:
            await self.post_json(self._config.url, self._build_payload(summary))
            self._logger.info("Webhook notification sent to %s", self._config.url)
            return True

        except Exception:
            self._logger.exception("Failed to send webhook notification")
            return False

    def _build_payload(self, summary: CleanupSummary) -> dict:
        """Build the JSON payload for the webhook."""
        return {
            "event_type": "entra_id_secret_cleanup",
            "timestamp": datetime.now(UTC).isoformat(),
            "summary": summary.get_summary(),
            "statistics": summary.to_dict(),
        }
