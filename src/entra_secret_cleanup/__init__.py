"""Delete expired secrets from Entra ID service principals."""

__version__ = "1.0.0"
