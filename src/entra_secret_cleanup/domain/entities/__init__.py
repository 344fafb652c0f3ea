"""Domain entities - Objects with identity and lifecycle."""

from .cleanup_summary import CleanupSummary, PrincipalResult
from .credential import Credential
from .service_principal import ServicePrincipal

__all__ = [
    "CleanupSummary",
    "Credential",
    "PrincipalResult",
    "ServicePrincipal",
]
