"""Telegram destination — MarkdownV2 ``sendMessage`` payloads.

Every piece of user-visible text is escaped for MarkdownV2; the bold
markers around item names are the only markup emitted.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from iaprelay.config import TelegramDestination
from iaprelay.models.display import DisplayItem, DisplayPayload
from iaprelay.models.routing import FlagStyle
from iaprelay.routing.formatting import escape_markdown_v2, flag_glyph, visible_items

ITEM_EMOJI: dict[str, str] = {
    "Event": "📊",
    "Product": "🏷",
    "Country": "🌍",
    "Price": "💰",
}


class TelegramPayload(BaseModel):
    """A Telegram Bot API sendMessage payload."""

    model_config = ConfigDict(frozen=True)

    chat_id: str
    text: str
    parse_mode: str = "MarkdownV2"
    disable_web_page_preview: bool = False


def _item_value(item: DisplayItem) -> str:
    flag = flag_glyph(item.country_code, FlagStyle.CODEPOINT_PAIR)
    return f"{flag} {item.value}" if flag else str(item.value)


def _format_item(item: DisplayItem) -> str:
    emoji = ITEM_EMOJI.get(item.name, "")
    return (
        f"{emoji} *{escape_markdown_v2(item.name)}:* "
        f"{escape_markdown_v2(_item_value(item))}"
    )


def format_text(payload: DisplayPayload) -> str:
    """Render the MarkdownV2 message text."""
    lines = [
        escape_markdown_v2(payload.bundle_id),
        escape_markdown_v2(payload.title),
        "",
        *(_format_item(item) for item in visible_items(payload.items)),
        "",
        "ℹ️ *Additional Info:*",
        *(
            f"• *{escape_markdown_v2(item.name)}:* {escape_markdown_v2(item.value)}"
            for item in visible_items(payload.sub_items)
        ),
        "",
    ]
    return "\n".join(lines)


def format_message(
    payload: DisplayPayload, settings: TelegramDestination
) -> dict[str, Any]:
    """Build the sendMessage JSON body."""
    return TelegramPayload(
        chat_id=settings.chat_id,
        text=format_text(payload),
    ).model_dump()


def build_url(settings: TelegramDestination) -> str:
    """Return the Bot API sendMessage URL for the configured bot."""
    return f"{settings.api_base.rstrip('/')}/bot{settings.bot_token}/sendMessage"
