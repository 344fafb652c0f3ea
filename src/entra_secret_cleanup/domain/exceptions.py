"""Domain exceptions."""


class DomainError(Exception):
    """Base exception for domain errors."""


class InvalidExclusionRulesError(DomainError):
    """Raised when exclusion rules cannot be built."""
