"""Entra ID adapter backed by Microsoft Graph."""

from .auth import AzureCliTokenProvider, ClientSecretConfig, ClientSecretTokenProvider, TokenProvider
from .graph_client import GraphClient, GraphClientConfig
from .repository import EntraIdPrincipalRepository

__all__ = [
    "AzureCliTokenProvider",
    "ClientSecretConfig",
    "ClientSecretTokenProvider",
    "EntraIdPrincipalRepository",
    "GraphClient",
    "GraphClientConfig",
    "TokenProvider",
]
