"""Slack destination — incoming-webhook message with one attachment."""

from __future__ import annotations

from typing import Any

from iaprelay.config import SlackDestination
from iaprelay.models.display import DisplayItem, DisplayPayload
from iaprelay.models.routing import FlagStyle
from iaprelay.routing.destinations.discord import APP_STORE_ICON_URL
from iaprelay.routing.formatting import flag_glyph, visible_items

ATTACHMENT_COLOR = "#007AFF"


def _field(item: DisplayItem) -> dict[str, Any]:
    flag = flag_glyph(item.country_code, FlagStyle.SHORTCODE_HYPHEN)
    value = f"{flag} {item.value}" if flag else item.value
    return {"title": item.name, "value": value, "short": True}


def format_message(
    payload: DisplayPayload, settings: SlackDestination
) -> dict[str, Any]:
    """Build the webhook JSON body."""
    footer = "\n".join(
        f"*{item.name}:* {item.value}" for item in visible_items(payload.sub_items)
    )
    return {
        "channel": settings.channel,
        "username": settings.username,
        "icon_emoji": settings.icon_emoji,
        "attachments": [
            {
                "color": ATTACHMENT_COLOR,
                "title": payload.bundle_id,
                "title_link": f"https://apps.apple.com/app/id{payload.app_apple_id}",
                "text": payload.title,
                "fields": [_field(item) for item in visible_items(payload.items)],
                "footer": footer,
                "footer_icon": APP_STORE_ICON_URL,
            }
        ],
    }


def build_url(settings: SlackDestination) -> str:
    return settings.webhook_url
