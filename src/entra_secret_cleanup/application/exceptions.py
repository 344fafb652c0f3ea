"""Application layer exceptions."""


class ApplicationError(Exception):
    """Base exception for application errors."""


class PrincipalRepositoryError(ApplicationError):
    """Raised when principal repository operations fail."""


class PrincipalListingError(ApplicationError):
    """Raised when the service principal list cannot be obtained."""


class NotificationError(ApplicationError):
    """Raised when notification sending fails."""


class ConfigurationError(ApplicationError):
    """Raised when configuration is invalid."""
