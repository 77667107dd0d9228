"""NotificationRelay — processes one inbound App Store notification.

    body -> normalize_envelope -> sandbox check -> build_display_payload
         -> DispatchCoordinator.dispatch_all

Decoding errors propagate to the caller (the HTTP layer answers 500).
Destination failures never do: they are recorded in ``RelayResult``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from iaprelay.config import RelayConfig
from iaprelay.core.display import build_display_payload
from iaprelay.core.normalizer import normalize_envelope
from iaprelay.models.notifications import RawEnvelope
from iaprelay.models.routing import DeliveryOutcome
from iaprelay.routing.dispatcher import DispatchCoordinator

logger = logging.getLogger(__name__)


class RelayStatus(str, Enum):
    SENT = "sent"
    SKIPPED_SANDBOX = "skipped_sandbox"


class RelayResult(BaseModel):
    """What happened to one inbound notification."""

    model_config = ConfigDict(frozen=True)

    status: RelayStatus
    notification_type: str | None = None
    outcomes: list[DeliveryOutcome] = []

    @property
    def failed(self) -> list[DeliveryOutcome]:
        return [o for o in self.outcomes if not o.succeeded]


class NotificationRelay:
    """Decodes inbound notifications and hands them to the coordinator."""

    def __init__(
        self, config: RelayConfig, coordinator: DispatchCoordinator | None = None
    ) -> None:
        self._config = config
        self._coordinator = coordinator or DispatchCoordinator(config)

    @property
    def config(self) -> RelayConfig:
        return self._config

    async def process(self, body: RawEnvelope | Mapping[str, Any]) -> RelayResult:
        """Relay one notification body to every enabled destination."""
        event = normalize_envelope(body)

        if event.is_sandbox and not self._config.general.allow_sandbox_notifications:
            logger.info(
                "Skipping sandbox %s notification", event.notification_type or "unknown"
            )
            return RelayResult(
                status=RelayStatus.SKIPPED_SANDBOX,
                notification_type=event.notification_type,
            )

        payload = build_display_payload(event, self._config.general)
        logger.info(
            "Dispatching %s/%s for %s",
            event.notification_type,
            event.subtype,
            event.data.bundle_id,
        )
        outcomes = await self._coordinator.dispatch_all(payload)
        return RelayResult(
            status=RelayStatus.SENT,
            notification_type=event.notification_type,
            outcomes=outcomes,
        )
