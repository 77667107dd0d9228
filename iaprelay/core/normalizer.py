"""Event normalization — turns a raw envelope into a NormalizedEvent.

The outer token is decoded into ``{notificationType, subtype, data}``.
Each embedded signed sub-token is then decoded and, when its claims carry
an ``originalTransactionId``, swapped in under its decoded name:

    data.signedTransactionInfo  ->  data.transactionInfo
    data.signedRenewalInfo      ->  data.renewalInfo

Claims without ``originalTransactionId`` are treated as decode-incomplete:
the raw signed field stays in place and the decoded name is not set.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from iaprelay.core.tokens import MalformedTokenError, decode_token
from iaprelay.models.notifications import Claims, NormalizedEvent, RawEnvelope

logger = logging.getLogger(__name__)

# signed field -> decoded field
SIGNED_SUB_TOKENS: dict[str, str] = {
    "signedTransactionInfo": "transactionInfo",
    "signedRenewalInfo": "renewalInfo",
}


class InvalidPayloadError(ValueError):
    """Raised when the envelope's ``signedPayload`` is absent or malformed."""


def _trace(label: str, obj: Any) -> None:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("=== %s ===\n%s", label, json.dumps(obj, indent=2, default=str))


def _signed_payload(envelope: RawEnvelope | Mapping[str, Any]) -> str:
    if isinstance(envelope, RawEnvelope):
        return envelope.signed_payload
    if not isinstance(envelope, Mapping):
        raise InvalidPayloadError("Notification body must be a JSON object")
    payload = envelope.get("signedPayload")
    if not isinstance(payload, str) or "." not in payload:
        raise InvalidPayloadError("invalid signedPayload")
    return payload


def resolve_sub_tokens(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of *data* with its signed sub-tokens decoded.

    Raises
    ------
    MalformedTokenError
        If a present sub-token cannot be decoded.
    """
    resolved = dict(data)
    for signed_key, decoded_key in SIGNED_SUB_TOKENS.items():
        token = resolved.get(signed_key)
        if not token:
            continue
        claims: Claims = decode_token(token)
        _trace(decoded_key, claims)
        if claims.get("originalTransactionId"):
            resolved[decoded_key] = claims
            del resolved[signed_key]
        else:
            logger.debug(
                "%s has no originalTransactionId; keeping %s", decoded_key, signed_key
            )
    return resolved


def normalize_envelope(envelope: RawEnvelope | Mapping[str, Any]) -> NormalizedEvent:
    """Decode *envelope* and its sub-tokens into a NormalizedEvent.

    Raises
    ------
    InvalidPayloadError
        If ``signedPayload`` is missing, not a dot-delimited string, or does
        not decode to a notification object.
    MalformedTokenError
        If an embedded sub-token is malformed.
    """
    signed_payload = _signed_payload(envelope)

    try:
        event = decode_token(signed_payload)
    except MalformedTokenError as exc:
        raise InvalidPayloadError(f"decode event: {exc}") from exc

    data = event.get("data") or {}
    if not isinstance(data, Mapping):
        raise InvalidPayloadError("Notification data must be a JSON object")

    normalized = {**event, "data": resolve_sub_tokens(data)}
    _trace("FINAL PROCESSED EVENT", normalized)

    try:
        return NormalizedEvent.model_validate(normalized)
    except ValidationError as exc:
        raise InvalidPayloadError(f"Unexpected notification shape: {exc}") from exc
