"""Base notification sender with common functionality."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from ....domain.entities import CleanupSummary


class BaseNotificationSender(ABC):
    """Abstract base class for notification senders."""

    def __init__(self, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize the notification sender."""
        self._logger = logging.getLogger(self.__class__.__name__)
        self._transport = transport

    @abstractmethod
    async def send(self, summary: CleanupSummary) -> bool:
        """Send notification for the given summary."""
        ...

    @abstractmethod
    def is_configured(self) -> bool:
        """Check if the sender is properly configured."""
        ...

    async def post_json(self, url: str, payload: dict) -> None:
        """POST a JSON payload, raising on error responses."""
        async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
            response = await client.post(
                url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()

    @staticmethod
    def format_title(summary: CleanupSummary) -> str:
        """Format a short title for the run."""
        prefix = "[DRY RUN] " if summary.dry_run else ""
        return f"{prefix}Entra ID Expired Secret Cleanup"
