"""Slack notification sender."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from .base import BaseNotificationSender

if TYPE_CHECKING:
    from ....domain.entities import CleanupSummary


@dataclass(frozen=True, slots=True)
class SlackConfig:
    """Slack notification configuration."""

    enabled: bool = False
    webhook_url: str = ""


class SlackNotificationSender(BaseNotificationSender):
    """Send notifications to Slack via incoming webhook."""

    def __init__(self, config: SlackConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize the Slack sender."""
        super().__init__(transport=transport)
        self._config = config

    def is_configured(self) -> bool:
        """Check if Slack is properly configured."""
        return self._config.enabled and bool(self._config.webhook_url)

    async def send(self, summary: CleanupSummary) -> bool:
        """Send Slack notification using Block Kit."""
        if not self.is_configured():
            self._logger.warning("Slack sender not configured")
            return False

        try:
            await self.post_json(self._config.webhook_url, self._build_slack_message(summary))
            self._logger.info("Slack notification sent")
            return True

        except Exception:
            self._logger.exception("Failed to send Slack notification")
            return False

    def _build_slack_message(self, summary: CleanupSummary) -> dict:
        """Build a Slack message using Block Kit."""
        deleted_label = "Would delete" if summary.dry_run else "Deleted"
        deleted_value = summary.expired_deletable if summary.dry_run else summary.deleted

        blocks: list[dict] = [
            {
                "type": "header",
                "text": {"type": "plain_text", "text": self.format_title(summary), "emoji": True},
            },
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": f"*{summary.get_summary()}*"},
            },
            {
                "type": "section",
                "fields": [
                    {"type": "mrkdwn", "text": f"*Service Principals:*\n{summary.principals_processed}"},
                    {"type": "mrkdwn", "text": f"*Skipped:*\n{summary.principals_failed}"},
                    {"type": "mrkdwn", "text": f"*Credentials:*\n{summary.credentials_total}"},
                    {"type": "mrkdwn", "text": f"*Expired:*\n{summary.expired_total}"},
                ],
            },
            {
                "type": "section",
                "fields": [
                    {"type": "mrkdwn", "text": f"*{deleted_label}:*\n{deleted_value}"},
                    {"type": "mrkdwn", "text": f"*Excluded:*\n{summary.expired_excluded}"},
                ],
            },
        ]

        if summary.deletion_failed:
            blocks.append({
                "type": "section",
                "text": {"type": "mrkdwn", "text": f":warning: {summary.deletion_failed} deletions failed"},
            })

        blocks.append({"type": "divider"})
        blocks.append({
            "type": "context",
            "elements": [{"type": "mrkdwn", "text": "Entra ID Expired Secret Cleanup"}],
        })

        return {"blocks": blocks}
