"""Routing and delivery models — destination kinds, requests, outcomes."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class DestinationKind(str, Enum):
    """The supported chat destinations, in fan-out order."""

    TELEGRAM = "telegram"
    DISCORD = "discord"
    SLACK = "slack"


class FlagStyle(str, Enum):
    """How a destination renders a country flag."""

    CODEPOINT_PAIR = "codepoint-pair"  # regional-indicator emoji
    SHORTCODE_UNDERSCORE = "shortcode-underscore"  # :flag_tr:
    SHORTCODE_HYPHEN = "shortcode-hyphen"  # :flag-tr:


class DeliveryRequest(BaseModel):
    """One outbound HTTP call to a destination endpoint."""

    model_config = ConfigDict(frozen=True)

    destination: DestinationKind
    method: str = "POST"
    url: str
    headers: dict[str, str] = {"Content-Type": "application/json"}
    body: dict[str, Any]


class DeliveryResult(BaseModel):
    """A successful delivery: status code and the parsed response body."""

    model_config = ConfigDict(frozen=True)

    destination: DestinationKind
    status_code: int
    body: Any = None


class DeliveryOutcome(BaseModel):
    """Per-destination entry in the aggregate dispatch result."""

    model_config = ConfigDict(frozen=True)

    destination: DestinationKind
    succeeded: bool
    status_code: int | None = None
    error: str | None = None
