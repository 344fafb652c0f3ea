"""API adapter for HTTP endpoints."""

from .app import create_app
from .models import CleanupResponse, HealthResponse, SummaryResponse

__all__ = [
    "CleanupResponse",
    "HealthResponse",
    "SummaryResponse",
    "create_app",
]
