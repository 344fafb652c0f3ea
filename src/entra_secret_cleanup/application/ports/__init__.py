"""Application ports - Interfaces for external adapters."""

from .notification_sender import NotificationSender
from .principal_repository import PrincipalRepository

__all__ = [
    "NotificationSender",
    "PrincipalRepository",
]
