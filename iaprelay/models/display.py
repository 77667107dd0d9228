"""Display payload — the destination-neutral projection of an event."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class DisplayItem(BaseModel):
    """A single ``name: value`` line.

    ``country_code`` is set only on the Country item so that each
    destination can render the flag in its own syntax.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    value: str | None = None
    country_code: str | None = None


class DisplayPayload(BaseModel):
    """Built once per notification and shared read-only by all formatters."""

    model_config = ConfigDict(frozen=True)

    title: str
    items: list[DisplayItem] = []
    sub_items: list[DisplayItem] = []
    app_apple_id: int | str | None = None
    bundle_id: str | None = None
