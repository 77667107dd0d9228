"""DispatchCoordinator — fans a DisplayPayload out to every enabled destination.

Each destination runs its own format + deliver pipeline.  Pipelines run
concurrently and the coordinator waits for all of them to settle; one
destination failing never cancels, blocks or alters another.  Failures
are logged and recorded in the returned outcomes.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from iaprelay.config import RelayConfig
from iaprelay.models.display import DisplayPayload
from iaprelay.models.routing import DeliveryOutcome, DestinationKind
from iaprelay.routing.delivery import DeliveryClient, DeliveryError, Sleep
from iaprelay.routing.destinations import build_delivery_request

logger = logging.getLogger(__name__)


class DispatchCoordinator:
    """Routes one payload to ALL enabled destinations.

    Usage
    -----
    >>> coordinator = DispatchCoordinator(load_config())
    >>> outcomes = await coordinator.dispatch_all(payload)
    >>> [o.destination for o in outcomes if not o.succeeded]

    Parameters
    ----------
    config:
        The immutable relay configuration.
    transport:
        Optional httpx transport for the per-dispatch client (tests pass
        ``httpx.MockTransport``).
    sleep:
        Awaitable used for retry waits.
    """

    def __init__(
        self,
        config: RelayConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._config = config
        self._transport = transport
        self._sleep = sleep

    @property
    def enabled_destinations(self) -> list[DestinationKind]:
        """Destinations that receive dispatched payloads, in order."""
        return self._config.enabled_destinations

    async def _deliver(
        self, client: DeliveryClient, kind: DestinationKind, payload: DisplayPayload
    ) -> DeliveryOutcome:
        request = build_delivery_request(kind, payload, self._config.destination(kind))
        logger.debug("Sending %s notification to %s", kind.value, request.url)
        result = await client.send(request)
        return DeliveryOutcome(
            destination=kind, succeeded=True, status_code=result.status_code
        )

    async def dispatch_all(self, payload: DisplayPayload) -> list[DeliveryOutcome]:
        """Deliver *payload* to every enabled destination.

        Returns one outcome per enabled destination, in configuration
        order.  Never raises for a destination failure.
        """
        kinds = self.enabled_destinations
        if not kinds:
            logger.warning("No destinations enabled, notification dropped")
            return []

        general = self._config.general
        async with httpx.AsyncClient(
            transport=self._transport, timeout=general.request_timeout_seconds
        ) as http:
            client = DeliveryClient(
                http,
                retry_attempts=general.retry_attempts,
                retry_delay_ms=general.retry_delay_ms,
                sleep=self._sleep,
            )
            results = await asyncio.gather(
                *(self._deliver(client, kind, payload) for kind in kinds),
                return_exceptions=True,
            )

        outcomes: list[DeliveryOutcome] = []
        for kind, result in zip(kinds, results):
            if isinstance(result, DeliveryOutcome):
                outcomes.append(result)
                continue
            if not isinstance(result, DeliveryError):
                logger.error(
                    "%s pipeline raised %s",
                    kind.value,
                    type(result).__name__,
                    exc_info=result,
                )
            outcomes.append(
                DeliveryOutcome(
                    destination=kind,
                    succeeded=False,
                    status_code=getattr(result, "status_code", None),
                    error=str(result),
                )
            )

        failed = [o for o in outcomes if not o.succeeded]
        if failed:
            logger.warning(
                "Some notifications failed: %d/%d destinations succeeded (%s failed)",
                len(outcomes) - len(failed),
                len(outcomes),
                ", ".join(o.destination.value for o in failed),
            )
        else:
            logger.info("Notification delivered to %d destinations", len(outcomes))
        return outcomes
