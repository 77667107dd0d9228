"""Compact signed-token decoding.

App Store payloads are JWS compact serializations
(``header.payload.signature``).  Only the payload segment is read here:
it is base64url-decoded and parsed as a JSON object.

The signature is NOT verified.  Anything that can reach the inbound
endpoint can forge a notification; see DESIGN.md.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from iaprelay.models.notifications import Claims

_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


def _reject_constant(name: str) -> Any:
    # json.loads accepts NaN and Infinity by default; RFC 8259 does not.
    raise ValueError(f"Non-standard JSON constant {name!r}")


class MalformedTokenError(ValueError):
    """Raised when a token has no dot-delimited structure or its payload
    segment is not base64url-encoded JSON."""


def decode_segment(segment: str) -> Any:
    """Decode one base64url segment into its JSON value."""
    text = segment.translate(_URLSAFE_TO_STANDARD)
    text += "=" * (-len(text) % 4)
    try:
        raw = base64.b64decode(text, validate=True)
        return json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise MalformedTokenError(f"Invalid token segment: {exc}") from exc


def decode_token(token: str) -> Claims:
    """Return the claims carried in the payload segment of *token*.

    Raises
    ------
    MalformedTokenError
        If *token* is not a dot-delimited string or its payload segment
        does not decode to a JSON object.
    """
    if not isinstance(token, str) or "." not in token:
        raise MalformedTokenError("Token is not a dot-delimited string")

    claims = decode_segment(token.split(".")[1])
    if not isinstance(claims, dict):
        raise MalformedTokenError(
            f"Token payload is a JSON {type(claims).__name__}, expected an object"
        )
    return claims
