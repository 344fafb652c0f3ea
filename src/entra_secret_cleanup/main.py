#!/usr/bin/env python3
"""
Entra ID Expired Secret Cleanup

Composition root and application entry point.
Wires together all layers following hexagonal architecture principles.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from croniter import croniter

from . import __version__
from .application.exceptions import ConfigurationError, PrincipalListingError
from .application.use_cases import CleanupExpiredCredentials
from .infrastructure.adapters import (
    EntraIdPrincipalRepository,
    SlackNotificationSender,
    WebhookNotificationSender,
)
from .infrastructure.adapters.entra_id import (
    AzureCliTokenProvider,
    ClientSecretTokenProvider,
    TokenProvider,
)
from .infrastructure.config import AuthMethod, Settings, load_settings

if TYPE_CHECKING:
    from .application.ports import NotificationSender
    from .domain.entities import CleanupSummary

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


class ApplicationContainer:
    """
    Dependency injection container.

    Responsible for creating and wiring all application components.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize container with settings."""
        self._settings = settings
        self._token_provider: TokenProvider | None = None

    def create_token_provider(self) -> TokenProvider:
        """Create the token provider for the configured authentication method."""
        if self._token_provider is None:
            if self._settings.auth_method == AuthMethod.CLIENT_SECRET:
                logger.info("Authenticating with service principal %s", self._settings.azure_client_id)
                self._token_provider = ClientSecretTokenProvider(self._settings.client_secret_config)
            else:
                logger.info("Using mounted Azure credentials from %s", self._settings.azure_config_dir)
                self._token_provider = AzureCliTokenProvider()
        return self._token_provider

    def create_principal_repository(self) -> EntraIdPrincipalRepository:
        """Create the principal repository adapter."""
        return EntraIdPrincipalRepository(
            self._settings.graph_config,
            self.create_token_provider(),
        )

    def create_notification_senders(self) -> list[NotificationSender]:
        """Create all configured notification sender adapters."""
        senders: list[NotificationSender] = [
            SlackNotificationSender(self._settings.slack_config),
            WebhookNotificationSender(self._settings.webhook_config),
        ]

        configured = [s for s in senders if s.is_configured()]
        logger.info(
            "Configured notification senders: %s",
            [s.__class__.__name__ for s in configured] or "None",
        )

        return senders

    def create_cleanup_use_case(self) -> CleanupExpiredCredentials:
        """Create the main use case with all dependencies."""
        return CleanupExpiredCredentials(
            repository=self.create_principal_repository(),
            exclusion_rules=self._settings.exclusion_rules,
            notification_senders=self.create_notification_senders(),
            max_concurrent=self._settings.max_concurrent,
            dry_run=self._settings.dry_run,
        )


class Application:
    """
    Main application orchestrator.

    Handles run modes (single execution, scheduled, or API) and lifecycle.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize application with settings."""
        self._settings = settings
        self._container = ApplicationContainer(settings)

    async def run_once(self) -> CleanupSummary:
        """Execute a single cleanup run."""
        use_case = self._container.create_cleanup_use_case()
        return await use_case.execute()

    async def run_scheduled(self) -> None:
        """Run in scheduled mode with cron expression."""
        logger.info("Starting scheduled mode with cron: %s", self._settings.cron_schedule)

        logger.info("Running initial cleanup on startup...")
        await self._run_guarded()

        cron = croniter(self._settings.cron_schedule, datetime.now(UTC))

        while True:
            next_run = cron.get_next(datetime)
            now = datetime.now(UTC)

            # Handle timezone-naive datetime from croniter
            if next_run.tzinfo is None:
                next_run = next_run.replace(tzinfo=UTC)

            sleep_seconds = (next_run - now).total_seconds()

            if sleep_seconds > 0:
                logger.info("Next cleanup scheduled for %s", next_run.isoformat())
                await asyncio.sleep(sleep_seconds)

            logger.info("Running scheduled cleanup...")
            await self._run_guarded()

    async def _run_guarded(self) -> None:
        """Run once, keeping the schedule alive when a run aborts."""
        try:
            await self.run_once()
        except PrincipalListingError as e:
            logger.error("Cleanup aborted: %s", e)

    async def run_api(self) -> None:
        """Run in API server mode on the current event loop."""
        import uvicorn

        from .infrastructure.adapters.api import create_app

        logger.info(
            "Starting API server on %s:%d",
            self._settings.api_host,
            self._settings.api_port,
        )

        app = create_app(
            cleanup_func=self.run_once,
            version=__version__,
        )

        server = uvicorn.Server(
            uvicorn.Config(
                app,
                host=self._settings.api_host,
                port=self._settings.api_port,
                log_level=self._settings.log_level.lower(),
            )
        )
        await server.serve()

    async def run(self) -> int:
        """
        Run the application based on configured mode.

        Returns:
            Exit code (0 for success, 1 for failure).
        """
        # API mode takes precedence if enabled
        if self._settings.api_enabled:
            await self.run_api()
            return 0

        match self._settings.run_mode.lower():
            case "once":
                logger.info("Running in single-execution mode")
                # Failed deletions are reported in the summary, not through the exit code
                await self.run_once()
                return 0

            case "scheduled":
                await self.run_scheduled()
                return 0  # Never reached in scheduled mode

            case _:
                logger.error(
                    "Invalid RUN_MODE: %s (use 'once', 'scheduled', or set API_ENABLED=true)",
                    self._settings.run_mode,
                )
                return 1


async def async_main() -> int:
    """Async entry point."""
    try:
        logger.info("Entra ID Expired Secret Cleanup %s starting...", __version__)

        settings = load_settings()
        logging.getLogger().setLevel(settings.log_level.upper())

        app = Application(settings)
        return await app.run()

    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return 1
    except PrincipalListingError as e:
        logger.error("Cleanup aborted: %s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        return 0
    except Exception:
        logger.exception("Unexpected error")
        return 1


def main() -> None:
    """Main entry point."""
    exit_code = asyncio.run(async_main())
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
