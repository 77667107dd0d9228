"""iaprelay data models — all Pydantic v2, all frozen (immutable)."""

from iaprelay.models.display import DisplayItem, DisplayPayload
from iaprelay.models.notifications import (
    Claims,
    NormalizedEvent,
    NotificationData,
    RawEnvelope,
)
from iaprelay.models.routing import (
    DeliveryOutcome,
    DeliveryRequest,
    DeliveryResult,
    DestinationKind,
    FlagStyle,
)

__all__ = [
    # notifications
    "Claims",
    "RawEnvelope",
    "NotificationData",
    "NormalizedEvent",
    # display
    "DisplayItem",
    "DisplayPayload",
    # routing
    "DestinationKind",
    "FlagStyle",
    "DeliveryRequest",
    "DeliveryResult",
    "DeliveryOutcome",
]
