"""Microsoft Graph API client for Entra ID."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

import httpx

if TYPE_CHECKING:
    from .auth import TokenProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GraphClientConfig:
    """Configuration for Microsoft Graph API client."""

    timeout: float = 30.0


class GraphClient:
    """
    Async client for Microsoft Graph API.

    Handles bearer authentication and paginated requests to the Graph API.
    """

    GRAPH_BASE_URL: ClassVar[str] = "https://graph.microsoft.com/v1.0"

    def __init__(
        self,
        config: GraphClientConfig,
        token_provider: TokenProvider,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the Graph client.

        Args:
            config: Client configuration.
            token_provider: Source of access tokens.
            transport: Optional httpx transport, used to stub the API in tests.
        """
        self._config = config
        self._token_provider = token_provider
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._config.timeout, transport=self._transport)

    async def _headers(self) -> dict[str, str]:
        token = await self._token_provider.get_token()
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    def _url(self, url: str) -> str:
        # Handle both relative and absolute URLs
        return url if url.startswith("http") else f"{self.GRAPH_BASE_URL}{url}"

    async def get(self, endpoint: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        """
        Retrieve a single Graph resource.

        Raises:
            httpx.HTTPError: If the request fails or returns an error status.
        """
        async with self._client() as client:
            response = await client.get(self._url(endpoint), params=params, headers=await self._headers())
            response.raise_for_status()
            return response.json()

    async def post(self, endpoint: str, payload: dict[str, Any]) -> None:
        """
        Invoke a Graph action that returns no content.

        Raises:
            httpx.HTTPError: If the request fails or returns an error status.
        """
        async with self._client() as client:
            response = await client.post(self._url(endpoint), json=payload, headers=await self._headers())
            response.raise_for_status()

    async def get_all_pages(self, endpoint: str, params: dict[str, str] | None = None) -> list[dict[str, Any]]:
        """
        Retrieve all pages from a paginated Graph API endpoint.

        Args:
            endpoint: The API endpoint path.
            params: Query parameters for the first page; next links carry their own.

        Returns:
            Combined list of all results across pages.
        """
        results: list[dict[str, Any]] = []
        url: str | None = endpoint
        page_params = params

        async with self._client() as client:
            while url:
                response = await client.get(self._url(url), params=page_params, headers=await self._headers())
                response.raise_for_status()
                data = response.json()

                results.extend(data.get("value", []))
                url = data.get("@odata.nextLink")
                page_params = None

        return results
