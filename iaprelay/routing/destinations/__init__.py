"""Destination strategy table.

Each destination is a pair of pure functions: ``format_message`` projects
a DisplayPayload into the destination's JSON body and ``build_url``
returns the endpoint for its settings.  Retry and delivery are shared
(see ``iaprelay.routing.delivery``); only formatting differs.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, NamedTuple

from iaprelay.config import DestinationSettings
from iaprelay.models.display import DisplayPayload
from iaprelay.models.routing import DeliveryRequest, DestinationKind
from iaprelay.routing.destinations import discord, slack, telegram


class DestinationStrategy(NamedTuple):
    format_message: Callable[[DisplayPayload, Any], dict[str, Any]]
    build_url: Callable[[Any], str]


DESTINATION_STRATEGIES: dict[DestinationKind, DestinationStrategy] = {
    DestinationKind.TELEGRAM: DestinationStrategy(
        telegram.format_message, telegram.build_url
    ),
    DestinationKind.DISCORD: DestinationStrategy(
        discord.format_message, discord.build_url
    ),
    DestinationKind.SLACK: DestinationStrategy(slack.format_message, slack.build_url),
}


def build_delivery_request(
    kind: DestinationKind,
    payload: DisplayPayload,
    settings: DestinationSettings,
) -> DeliveryRequest:
    """Format *payload* for *kind* and address it to the configured endpoint."""
    strategy = DESTINATION_STRATEGIES[kind]
    return DeliveryRequest(
        destination=kind,
        url=strategy.build_url(settings),
        body=strategy.format_message(payload, settings),
    )


__all__ = [
    "DESTINATION_STRATEGIES",
    "DestinationStrategy",
    "build_delivery_request",
]
