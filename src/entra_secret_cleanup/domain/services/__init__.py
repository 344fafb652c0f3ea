"""Domain services - Stateless operations on domain objects."""

from .credential_filter import CredentialFilter, PartitionedCredentials

__all__ = ["CredentialFilter", "PartitionedCredentials"]
