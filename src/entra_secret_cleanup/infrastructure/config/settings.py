"""Application settings loaded from environment variables."""

import logging
import os
from dataclasses import dataclass, field
from enum import StrEnum, auto
from functools import cached_property
from pathlib import Path

from croniter import croniter

from ...application.exceptions import ConfigurationError
from ...domain.value_objects import ExclusionRules
from ..adapters.entra_id import ClientSecretConfig, GraphClientConfig
from ..adapters.notifications import SlackConfig, WebhookConfig

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "yes")
_FALSE_VALUES = ("false", "0", "no", "")


def _env_bool(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.environ.get(key, str(default)).strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    msg = f"{key} must be a boolean (true/false), got {value!r}"
    raise ConfigurationError(msg)


def _env_int(key: str, default: int) -> int:
    """Get integer from environment variable."""
    value = os.environ.get(key, str(default))
    try:
        return int(value)
    except ValueError:
        msg = f"{key} must be an integer, got {value!r}"
        raise ConfigurationError(msg) from None


def _env_float(key: str, default: float) -> float:
    """Get float from environment variable."""
    value = os.environ.get(key, str(default))
    try:
        return float(value)
    except ValueError:
        msg = f"{key} must be a number, got {value!r}"
        raise ConfigurationError(msg) from None


def _env_str(key: str, default: str = "") -> str:
    """Get string from environment variable."""
    return os.environ.get(key, default)


class AuthMethod(StrEnum):
    """How the Graph API token is obtained."""

    CLIENT_SECRET = auto()
    AZURE_CLI = auto()


@dataclass
class Settings:
    """Application settings container."""

    # Azure/Entra ID
    azure_tenant_id: str = field(default_factory=lambda: _env_str("AZURE_TENANT_ID"))
    azure_client_id: str = field(default_factory=lambda: _env_str("AZURE_CLIENT_ID"))
    azure_client_secret: str = field(default_factory=lambda: _env_str("AZURE_CLIENT_SECRET"))
    azure_config_dir: str = field(default_factory=lambda: _env_str("AZURE_CONFIG_DIR", "~/.azure"))
    graph_timeout: float = field(default_factory=lambda: _env_float("GRAPH_TIMEOUT", 30.0))

    # Cleanup rules
    exclude_names: str = field(default_factory=lambda: _env_str("EXCLUDE_NAMES"))
    exclude_descriptions: str = field(default_factory=lambda: _env_str("EXCLUDE_DESCRIPTIONS"))
    max_concurrent: int = field(default_factory=lambda: _env_int("MAX_CONCURRENT", 5))
    dry_run: bool = field(default_factory=lambda: _env_bool("DRY_RUN"))

    # Run configuration
    run_mode: str = field(default_factory=lambda: _env_str("RUN_MODE", "once"))
    cron_schedule: str = field(default_factory=lambda: _env_str("CRON_SCHEDULE", "0 3 * * *"))
    log_level: str = field(default_factory=lambda: _env_str("LOG_LEVEL", "INFO"))

    # Slack settings
    slack_enabled: bool = field(default_factory=lambda: _env_bool("SLACK_ENABLED"))
    slack_webhook_url: str = field(default_factory=lambda: _env_str("SLACK_WEBHOOK_URL"))

    # Webhook settings
    webhook_enabled: bool = field(default_factory=lambda: _env_bool("WEBHOOK_ENABLED"))
    webhook_url: str = field(default_factory=lambda: _env_str("WEBHOOK_URL"))

    # API settings
    api_enabled: bool = field(default_factory=lambda: _env_bool("API_ENABLED"))
    api_host: str = field(default_factory=lambda: _env_str("API_HOST", "0.0.0.0"))  # noqa: S104
    api_port: int = field(default_factory=lambda: _env_int("API_PORT", 8080))

    @property
    def has_client_secret(self) -> bool:
        """Check if the full client id/secret/tenant triple is set."""
        return bool(self.azure_tenant_id and self.azure_client_id and self.azure_client_secret)

    @property
    def has_cli_context(self) -> bool:
        """Check if an Azure CLI configuration directory is mounted."""
        return Path(self.azure_config_dir).expanduser().is_dir()

    @cached_property
    def auth_method(self) -> AuthMethod:
        """Select the authentication method, preferring explicit credentials."""
        if self.has_client_secret:
            return AuthMethod.CLIENT_SECRET
        if self.has_cli_context:
            return AuthMethod.AZURE_CLI
        msg = (
            "No Azure authentication found. Either mount your Azure config directory "
            f"({self.azure_config_dir}) or set AZURE_CLIENT_ID, AZURE_CLIENT_SECRET and AZURE_TENANT_ID"
        )
        raise ConfigurationError(msg)

    def validate(self) -> None:
        """Validate required settings."""
        if self.max_concurrent < 1:
            msg = f"MAX_CONCURRENT must be at least 1, got {self.max_concurrent}"
            raise ConfigurationError(msg)

        if self.graph_timeout <= 0:
            msg = f"GRAPH_TIMEOUT must be positive, got {self.graph_timeout}"
            raise ConfigurationError(msg)

        if self.run_mode.lower() == "scheduled" and not croniter.is_valid(self.cron_schedule):
            msg = f"Invalid CRON_SCHEDULE: {self.cron_schedule!r}"
            raise ConfigurationError(msg)

        partial = [self.azure_tenant_id, self.azure_client_id, self.azure_client_secret]
        if any(partial) and not all(partial):
            logger.warning(
                "Incomplete service principal credentials; "
                "AZURE_CLIENT_ID, AZURE_CLIENT_SECRET and AZURE_TENANT_ID must all be set"
            )

        # Raises ConfigurationError when no authentication source exists
        _ = self.auth_method

    @cached_property
    def exclusion_rules(self) -> ExclusionRules:
        """Get exclusion rules."""
        return ExclusionRules.from_csv(self.exclude_names, self.exclude_descriptions)

    @cached_property
    def graph_config(self) -> GraphClientConfig:
        """Get Graph API client configuration."""
        return GraphClientConfig(timeout=self.graph_timeout)

    @cached_property
    def client_secret_config(self) -> ClientSecretConfig:
        """Get client credentials flow configuration."""
        return ClientSecretConfig(
            tenant_id=self.azure_tenant_id,
            client_id=self.azure_client_id,
            client_secret=self.azure_client_secret,
        )

    @cached_property
    def slack_config(self) -> SlackConfig:
        """Get Slack configuration."""
        return SlackConfig(
            enabled=self.slack_enabled,
            webhook_url=self.slack_webhook_url,
        )

    @cached_property
    def webhook_config(self) -> WebhookConfig:
        """Get webhook configuration."""
        return WebhookConfig(
            enabled=self.webhook_enabled,
            url=self.webhook_url,
        )


def load_settings() -> Settings:
    """Load and validate settings from environment."""
    settings = Settings()
    settings.validate()
    return settings
