"""Port for service principal repository - driven/secondary port."""

from typing import Protocol

from ...domain.entities import Credential, ServicePrincipal


class PrincipalRepository(Protocol):
    """
    Port for reading and pruning service principal credentials.

    This is a driven (secondary) port that defines how the application
    talks to the identity provider.
    """

    async def list_service_principals(self) -> list[ServicePrincipal]:
        """
        Retrieve every service principal that is backed by an application.

        Raises:
            PrincipalRepositoryError: If retrieval fails.
        """
        ...

    async def list_credentials(self, application_id: str) -> list[Credential]:
        """
        Retrieve the password credentials of an application.

        Raises:
            PrincipalRepositoryError: If retrieval fails.
        """
        ...

    async def delete_credential(self, application_id: str, key_id: str) -> None:
        """
        Delete a password credential by key identifier.

        Raises:
            PrincipalRepositoryError: If deletion fails.
        """
        ...
