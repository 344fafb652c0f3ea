"""Entra ID principal repository implementation."""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from typing import Any

import httpx

from ....application.exceptions import PrincipalRepositoryError
from ....domain.entities import Credential, ServicePrincipal
from .auth import TokenProvider
from .graph_client import GraphClient, GraphClientConfig

logger = logging.getLogger(__name__)

# Graph may return up to seven fractional digits; datetime takes six
_EXCESS_FRACTION = re.compile(r"(\.\d{6})\d+")


def _describe(error: Exception) -> str:
    """Render an error for log output, including Graph status codes."""
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP {error.response.status_code} from {error.request.url.path}"
    return str(error) or error.__class__.__name__


class EntraIdPrincipalRepository:
    """
    Principal repository implementation using Microsoft Graph API.

    Implements the PrincipalRepository port for Entra ID.
    """

    def __init__(
        self,
        config: GraphClientConfig,
        token_provider: TokenProvider,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the repository.

        Args:
            config: Configuration for the Graph API client.
            token_provider: Source of Graph access tokens.
            transport: Optional httpx transport, used to stub the API in tests.
        """
        self._client = GraphClient(config, token_provider, transport=transport)

    async def list_service_principals(self) -> list[ServicePrincipal]:
        """
        Retrieve all service principals that have an application id.

        Raises:
            PrincipalRepositoryError: If retrieval fails.
        """
        logger.info("Fetching service principals from Entra ID...")
        try:
            raw_principals = await self._client.get_all_pages(
                "/servicePrincipals",
                params={"$select": "id,displayName,appId"},
            )
        except Exception as e:
            msg = f"Failed to retrieve service principals from Entra ID: {_describe(e)}"
            logger.exception(msg)
            raise PrincipalRepositoryError(msg) from e

        principals = [
            ServicePrincipal(
                id=raw.get("id", ""),
                display_name=raw.get("displayName") or "Unknown",
                application_id=raw["appId"],
            )
            for raw in raw_principals
            if raw.get("appId")
        ]
        logger.info(
            "Found %d service principals (%d without application id skipped)",
            len(principals),
            len(raw_principals) - len(principals),
        )
        return principals

    async def list_credentials(self, application_id: str) -> list[Credential]:
        """
        Retrieve the password credentials of an application.

        Malformed records are skipped with a warning.

        Raises:
            PrincipalRepositoryError: If retrieval fails.
        """
        try:
            data = await self._client.get(
                f"/applications(appId='{application_id}')",
                params={"$select": "passwordCredentials"},
            )
        except Exception as e:
            msg = f"Failed to list credentials for application {application_id}: {_describe(e)}"
            raise PrincipalRepositoryError(msg) from e

        credentials: list[Credential] = []
        for raw in data.get("passwordCredentials") or []:
            credential = self._map_credential(raw, application_id)
            if credential:
                credentials.append(credential)

        return credentials

    async def delete_credential(self, application_id: str, key_id: str) -> None:
        """
        Remove a password credential from an application.

        Raises:
            PrincipalRepositoryError: If deletion fails.
        """
        try:
            await self._client.post(
                f"/applications(appId='{application_id}')/removePassword",
                {"keyId": key_id},
            )
        except Exception as e:
            msg = f"Failed to delete credential {key_id} of application {application_id}: {_describe(e)}"
            raise PrincipalRepositoryError(msg) from e

    def _map_credential(self, raw: Any, application_id: str) -> Credential | None:
        """
        Map raw Graph API credential data to domain entity.

        Args:
            raw: Raw password credential from Graph API.
            application_id: Application ID owning the credential.

        Returns:
            Credential entity or None if the record is malformed.
        """
        if not isinstance(raw, dict) or not raw.get("keyId") or not isinstance(raw["keyId"], str):
            logger.warning("Skipping malformed credential record in application %s", application_id)
            return None

        for key in ("displayName", "hint"):
            if not isinstance(raw.get(key), str | None):
                logger.warning(
                    "Skipping credential %s in application %s with non-text %s",
                    raw["keyId"],
                    application_id,
                    key,
                )
                return None

        expiry_date: datetime | None = None
        expiry_str = raw.get("endDateTime")
        if expiry_str:
            expiry_date = self._parse_datetime(expiry_str) if isinstance(expiry_str, str) else None
            if expiry_date is None:
                logger.warning(
                    "Skipping credential %s in application %s with unreadable expiry",
                    raw["keyId"],
                    application_id,
                )
                return None

        return Credential.create(
            key_id=raw["keyId"],
            display_name=raw.get("displayName"),
            hint=raw.get("hint"),
            expiry_date=expiry_date,
            application_id=application_id,
        )

    @staticmethod
    def _parse_datetime(dt_string: str) -> datetime | None:
        """Parse ISO datetime string to datetime object."""
        try:
            # Handle various formats from Graph API
            dt_string = _EXCESS_FRACTION.sub(r"\1", dt_string.replace("Z", "+00:00"))
            dt = datetime.fromisoformat(dt_string)
            # Ensure timezone-aware
            return dt if dt.tzinfo else dt.replace(tzinfo=UTC)
        except (AttributeError, TypeError, ValueError):
            logger.warning("Failed to parse datetime: %s", dt_string)
            return None
