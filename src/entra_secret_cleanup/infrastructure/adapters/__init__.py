"""Infrastructure adapters - Implementations of application ports."""

from .entra_id import EntraIdPrincipalRepository
from .notifications import SlackNotificationSender, WebhookNotificationSender

__all__ = [
    "EntraIdPrincipalRepository",
    "SlackNotificationSender",
    "WebhookNotificationSender",
]
