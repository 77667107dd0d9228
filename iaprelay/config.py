"""Relay configuration — env-driven, immutable.

Centralized config using pydantic-settings for environment variable
support. Reads from a .env file and IAPRELAY_* environment variables;
nested sections use a double underscore.

The configuration is built once at process start with ``load_config()``
and passed explicitly to the relay, the dispatcher and the API factory.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from iaprelay.models.routing import DestinationKind


class GeneralSettings(BaseModel):
    """Settings shared by every destination pipeline."""

    model_config = ConfigDict(frozen=True)

    allow_sandbox_notifications: bool = True
    retry_attempts: int = 3
    retry_delay_ms: int = 1000  # initial backoff, doubled after each retry
    timezone: str = "Europe/Istanbul"
    date_format: str = "%d.%m.%Y %H:%M:%S"
    request_timeout_seconds: float = 10.0


class TelegramDestination(BaseModel):
    """Telegram Bot API credentials."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    bot_token: str = ""
    chat_id: str = ""
    api_base: str = "https://api.telegram.org"


class DiscordDestination(BaseModel):
    """Discord webhook settings."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    webhook_url: str = ""
    username: str = "IAP Events"
    color: int = 15258703
    store_region: str = "tr"  # region segment of the App Store link


class SlackDestination(BaseModel):
    """Slack incoming-webhook settings."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    webhook_url: str = ""
    channel: str = "#app-store-notifications"
    username: str = "App Store Bot"
    icon_emoji: str = ":apple:"


DestinationSettings = TelegramDestination | DiscordDestination | SlackDestination


class RelayConfig(BaseSettings):
    """Process-wide relay configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export IAPRELAY_LOG_LEVEL=DEBUG
        export IAPRELAY_GENERAL__RETRY_ATTEMPTS=5
        export IAPRELAY_TELEGRAM__BOT_TOKEN=123:abc
        export IAPRELAY_SLACK__ENABLED=true

    Or via .env file::

        IAPRELAY_DISCORD__WEBHOOK_URL=https://discord.com/api/webhooks/...
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="IAPRELAY_",
        env_nested_delimiter="__",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    log_level: str = "INFO"

    general: GeneralSettings = GeneralSettings()
    telegram: TelegramDestination = TelegramDestination()
    discord: DiscordDestination = DiscordDestination()
    slack: SlackDestination = SlackDestination()

    def destination(self, kind: DestinationKind) -> DestinationSettings:
        """Return the settings block for one destination kind."""
        return getattr(self, kind.value)

    @property
    def enabled_destinations(self) -> list[DestinationKind]:
        """Enabled destinations, in fan-out order."""
        return [kind for kind in DestinationKind if self.destination(kind).enabled]


def load_config(**overrides: object) -> RelayConfig:
    """Build the immutable configuration for this process."""
    return RelayConfig(**overrides)
