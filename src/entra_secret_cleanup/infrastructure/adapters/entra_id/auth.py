"""Access token providers for the Microsoft Graph API."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import ClassVar, Protocol

import msal
from azure.identity import AzureCliCredential

logger = logging.getLogger(__name__)

GRAPH_SCOPE = "https://graph.microsoft.com/.default"

# Refresh tokens this long before they expire
_EXPIRY_MARGIN = timedelta(minutes=5)


class TokenProvider(Protocol):
    """Source of bearer tokens for Graph requests."""

    async def get_token(self) -> str:
        """Return a valid access token."""
        ...


@dataclass(frozen=True, slots=True)
class ClientSecretConfig:
    """Service principal credentials for the client credentials flow."""

    tenant_id: str
    client_id: str
    client_secret: str


class ClientSecretTokenProvider:
    """Acquire tokens with an explicit client id, secret and tenant via MSAL."""

    AUTHORITY_BASE: ClassVar[str] = "https://login.microsoftonline.com"
    SCOPE: ClassVar[list[str]] = [GRAPH_SCOPE]

    def __init__(self, config: ClientSecretConfig) -> None:
        """Initialize the provider."""
        self._config = config
        self._access_token: str | None = None
        self._token_expiry: datetime | None = None
        self._msal_app: msal.ConfidentialClientApplication | None = None
        self._lock = asyncio.Lock()

    def _get_msal_app(self) -> msal.ConfidentialClientApplication:
        """Get or create MSAL application instance."""
        if self._msal_app is None:
            authority = f"{self.AUTHORITY_BASE}/{self._config.tenant_id}"
            self._msal_app = msal.ConfidentialClientApplication(
                client_id=self._config.client_id,
                client_credential=self._config.client_secret,
                authority=authority,
            )
        return self._msal_app

    async def get_token(self) -> str:
        """Acquire access token using client credentials flow."""
        async with self._lock:
            if self._access_token and self._token_expiry and datetime.now(UTC) < self._token_expiry:
                return self._access_token

            app = self._get_msal_app()
            # MSAL performs blocking HTTP, keep it off the event loop
            result = await asyncio.to_thread(app.acquire_token_for_client, scopes=self.SCOPE)

            if "access_token" not in result:
                error = result.get("error_description", result.get("error", "Unknown error"))
                msg = f"Failed to acquire access token: {error}"
                raise RuntimeError(msg)

            self._access_token = result["access_token"]
            expires_in = result.get("expires_in", 3600)
            self._token_expiry = datetime.now(UTC) + timedelta(seconds=expires_in) - _EXPIRY_MARGIN

            return self._access_token


class AzureCliTokenProvider:
    """Reuse the login context of a mounted Azure CLI configuration directory."""

    def __init__(self, credential: AzureCliCredential | None = None) -> None:
        """Initialize the provider."""
        self._credential = credential or AzureCliCredential()
        self._access_token: str | None = None
        self._token_expiry: datetime | None = None
        self._lock = asyncio.Lock()

    async def get_token(self) -> str:
        """Acquire access token from the Azure CLI."""
        async with self._lock:
            if self._access_token and self._token_expiry and datetime.now(UTC) < self._token_expiry:
                return self._access_token

            # AzureCliCredential shells out to `az`, keep it off the event loop
            token = await asyncio.to_thread(self._credential.get_token, GRAPH_SCOPE)
            self._access_token = token.token
            self._token_expiry = datetime.fromtimestamp(token.expires_on, UTC) - _EXPIRY_MARGIN
            logger.debug("Acquired Graph token from Azure CLI context")

            return self._access_token
