"""Discord destination — webhook message with a single embed.

Discord renders ``:flag_xx:`` shortcodes itself, so text goes into the
embed fields verbatim.
"""

from __future__ import annotations

from typing import Any

from iaprelay.config import DiscordDestination
from iaprelay.models.display import DisplayItem, DisplayPayload
from iaprelay.models.routing import FlagStyle
from iaprelay.routing.formatting import flag_glyph, visible_items

APP_STORE_ICON_URL = (
    "https://upload.wikimedia.org/wikipedia/commons/thumb/6/67/"
    "App_Store_%28iOS%29.svg/512px-App_Store_%28iOS%29.svg.png"
)


def _field(item: DisplayItem) -> dict[str, Any]:
    flag = flag_glyph(item.country_code, FlagStyle.SHORTCODE_UNDERSCORE)
    value = f"{flag} {item.value}" if flag else item.value
    return {"name": item.name, "value": value, "inline": True}


def format_message(
    payload: DisplayPayload, settings: DiscordDestination
) -> dict[str, Any]:
    """Build the webhook JSON body."""
    footer = "\n".join(
        f"{item.name}: {item.value}" for item in visible_items(payload.sub_items)
    )
    return {
        "username": settings.username,
        "content": payload.title,
        "embeds": [
            {
                "title": payload.bundle_id,
                "url": (
                    f"https://apps.apple.com/{settings.store_region}"
                    f"/app/id{payload.app_apple_id}"
                ),
                "color": settings.color,
                "fields": [_field(item) for item in visible_items(payload.items)],
                "thumbnail": {"url": APP_STORE_ICON_URL},
                "footer": {"text": footer},
            }
        ],
    }


def build_url(settings: DiscordDestination) -> str:
    return settings.webhook_url
