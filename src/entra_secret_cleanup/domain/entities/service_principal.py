"""Service principal entity."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ServicePrincipal:
    """An Entra ID service principal backed by an application."""

    id: str
    display_name: str
    application_id: str
