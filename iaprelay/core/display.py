"""DisplayPayload construction from a NormalizedEvent.

The title, the primary items and the "additional info" sub-items are
computed once here and reused by every destination formatter.
"""

from __future__ import annotations

from iaprelay.config import GeneralSettings
from iaprelay.models.display import DisplayItem, DisplayPayload
from iaprelay.models.notifications import NormalizedEvent
from iaprelay.routing.formatting import derive_country_code, format_date, format_price


def build_display_payload(
    event: NormalizedEvent, general: GeneralSettings
) -> DisplayPayload:
    """Project *event* onto the destination-neutral DisplayPayload.

    A missing ``transactionInfo`` is tolerated: the transaction-derived
    items are simply left empty and therefore not rendered.
    """
    info = event.data.transaction_info or {}
    price = format_price(info.get("price"), info.get("currency"))
    storefront = _text(info.get("storefront"))

    return DisplayPayload(
        title=f"🔔 {event.notification_type or ''} {price} 💵",
        items=[
            DisplayItem(name="Event", value=event.subtype),
            DisplayItem(name="Product", value=_text(info.get("productId"))),
            DisplayItem(
                name="Country",
                value=storefront,
                country_code=derive_country_code(storefront),
            ),
            DisplayItem(name="Price", value=price),
        ],
        sub_items=[
            DisplayItem(name="Environment", value=_text(info.get("environment"))),
            DisplayItem(name="ID", value=_text(info.get("originalTransactionId"))),
            DisplayItem(name="Type", value=_text(info.get("type"))),
            DisplayItem(
                name="Expires Date",
                value=format_date(
                    info.get("expiresDate"), general.timezone, general.date_format
                ),
            ),
        ],
        app_apple_id=event.data.app_apple_id,
        bundle_id=event.data.bundle_id,
    )


def _text(value: object) -> str | None:
    return None if value is None else str(value)
