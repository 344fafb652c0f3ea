"""Domain value objects - Immutable objects defined by their attributes."""

from .credential_classification import CredentialClassification
from .exclusion_rules import ExclusionRules

__all__ = [
    "CredentialClassification",
    "ExclusionRules",
]
