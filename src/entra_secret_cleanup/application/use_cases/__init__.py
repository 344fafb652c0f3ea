"""Application use cases."""

from .cleanup_expired_credentials import CleanupExpiredCredentials

__all__ = ["CleanupExpiredCredentials"]
