"""Shared formatting helpers for the destination formatters.

Price, date and flag rendering live here so that every destination
presents the same values; only markup differs per destination.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

import pycountry

from iaprelay.models.display import DisplayItem
from iaprelay.models.routing import FlagStyle

logger = logging.getLogger(__name__)

# Unicode regional indicator "A" minus ASCII "A".
REGIONAL_INDICATOR_OFFSET = 127397

_MARKDOWN_V2_SPECIAL = re.compile(r"([_*\[\]()~`>#+=|{}.!\-])")


def visible_items(items: Iterable[DisplayItem]) -> list[DisplayItem]:
    """Drop items whose value is empty or missing."""
    return [item for item in items if item.value]


def escape_markdown_v2(text: Any) -> str:
    """Backslash-escape the characters Telegram MarkdownV2 reserves."""
    if not text:
        return ""
    return _MARKDOWN_V2_SPECIAL.sub(r"\\\1", str(text))


def flag_glyph(country_code: str | None, style: FlagStyle) -> str:
    """Render a two-letter country code as a flag in *style*.

    >>> flag_glyph("TR", FlagStyle.SHORTCODE_UNDERSCORE)
    ':flag_tr:'
    >>> flag_glyph("tr", FlagStyle.SHORTCODE_HYPHEN)
    ':flag-tr:'

    Returns an empty string for anything that is not two ASCII letters.
    """
    if not country_code or len(country_code) != 2:
        return ""
    if not (country_code.isascii() and country_code.isalpha()):
        return ""

    style = FlagStyle(style)
    if style is FlagStyle.SHORTCODE_UNDERSCORE:
        return f":flag_{country_code.lower()}:"
    if style is FlagStyle.SHORTCODE_HYPHEN:
        return f":flag-{country_code.lower()}:"
    return "".join(chr(ord(c) + REGIONAL_INDICATOR_OFFSET) for c in country_code.upper())


def derive_country_code(storefront: str | None) -> str | None:
    """ISO 3166-1 alpha-2 code for an App Store storefront (``"TUR"`` -> ``"TR"``).

    Storefronts are alpha-3 codes; anything pycountry does not know maps to
    ``None`` and renders no flag.
    """
    if not isinstance(storefront, str) or len(storefront) != 3:
        return None
    country = pycountry.countries.get(alpha_3=storefront.upper())
    return country.alpha_2 if country is not None else None


def format_price(price: Any, currency: str | None) -> str:
    """``4990, "USD"`` -> ``"4.99 USD"``.

    App Store prices are in milli-units.  Non-numeric or non-finite prices
    yield ``""``.
    """
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        return ""
    try:
        amount = price / 1000
        text = str(int(amount)) if amount == int(amount) else repr(amount)
    except (OverflowError, ValueError):
        return ""
    return f"{text} {currency}" if currency else text


def format_date(value: Any, timezone: str, date_format: str) -> str:
    """Render an epoch timestamp in *timezone*.

    Values below 1e12 are read as seconds, larger ones as milliseconds.
    Anything that cannot be rendered is returned as ``str(value)``.
    """
    if not value:
        return ""
    try:
        timestamp = float(value)
        if timestamp >= 1e12:
            timestamp /= 1000
        return datetime.fromtimestamp(timestamp, tz=ZoneInfo(timezone)).strftime(
            date_format
        )
    except (TypeError, ValueError, OverflowError, OSError, KeyError) as exc:
        logger.error("Error formatting date %r: %s", value, exc)
        return str(value)
