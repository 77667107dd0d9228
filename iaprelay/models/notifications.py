"""Inbound notification models — the raw envelope and the normalized event.

The App Store posts ``{"signedPayload": "<jws>"}``.  The payload decodes to
``{notificationType, subtype, data}``; ``data`` carries two optional signed
sub-tokens (transaction and renewal info) that the normalizer replaces with
their decoded claims.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Decoded JSON object from the middle segment of a signed token.
Claims = dict[str, Any]


class RawEnvelope(BaseModel):
    """The body of an inbound App Store server notification."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    signed_payload: str = Field(alias="signedPayload")


class NotificationData(BaseModel):
    """The ``data`` object of a notification.

    Unknown keys are kept as extra fields so nothing Apple adds is lost.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    app_apple_id: int | str | None = Field(default=None, alias="appAppleId")
    bundle_id: str | None = Field(default=None, alias="bundleId")
    bundle_version: str | None = Field(default=None, alias="bundleVersion")
    environment: str | None = None
    status: int | None = None
    transaction_info: Claims | None = Field(default=None, alias="transactionInfo")
    renewal_info: Claims | None = Field(default=None, alias="renewalInfo")
    signed_transaction_info: str | None = Field(
        default=None, alias="signedTransactionInfo"
    )
    signed_renewal_info: str | None = Field(default=None, alias="signedRenewalInfo")


class NormalizedEvent(BaseModel):
    """A decoded notification with its sub-tokens resolved."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    notification_type: str | None = Field(default=None, alias="notificationType")
    subtype: str | None = None
    notification_uuid: str | None = Field(default=None, alias="notificationUUID")
    version: str | None = None
    signed_date: int | None = Field(default=None, alias="signedDate")
    data: NotificationData = NotificationData()

    @property
    def is_sandbox(self) -> bool:
        """Whether Apple flagged this notification as a sandbox purchase."""
        info = self.data.transaction_info or {}
        return info.get("environment") == "Sandbox"

    def to_json_dict(self) -> dict[str, Any]:
        """Dump using Apple's camelCase keys, omitting absent fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
