"""Shared test fixtures for iaprelay."""

from __future__ import annotations

import base64
import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from iaprelay.config import (
    DiscordDestination,
    GeneralSettings,
    RelayConfig,
    SlackDestination,
    TelegramDestination,
)
from iaprelay.models.display import DisplayItem, DisplayPayload

TELEGRAM_TOKEN = "123456:test-token"
DISCORD_WEBHOOK = "https://discord.test/api/webhooks/1/abc"
SLACK_WEBHOOK = "https://hooks.slack.test/services/T0/B0/xyz"


def _b64url(data: bytes) -> str:
    """Unpadded base64url, as used in JWS compact serialization."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _sign(claims: Any) -> str:
    """Build an unsigned-but-well-formed JWS carrying *claims*."""
    header = _b64url(json.dumps({"alg": "ES256", "x5c": []}).encode())
    body = _b64url(json.dumps(claims).encode("utf-8"))
    return f"{header}.{body}.{_b64url(b'signature')}"


@pytest.fixture
def b64url() -> Callable[[bytes], str]:
    """Unpadded base64url encoder for hand-built token segments."""
    return _b64url


@pytest.fixture
def sign() -> Callable[[Any], str]:
    """Encoder for a compact token carrying the given claims."""
    return _sign


@pytest.fixture
def transaction_claims() -> dict[str, Any]:
    return {
        "originalTransactionId": "2000000123456789",
        "transactionId": "2000000987654321",
        "productId": "com.example.pro.monthly",
        "type": "Auto-Renewable Subscription",
        "environment": "Production",
        "storefront": "TUR",
        "price": 4990,
        "currency": "USD",
        "expiresDate": 1735689600000,
    }


@pytest.fixture
def renewal_claims() -> dict[str, Any]:
    return {
        "originalTransactionId": "2000000123456789",
        "autoRenewProductId": "com.example.pro.monthly",
        "autoRenewStatus": 1,
    }


@pytest.fixture
def make_notification_body(
    transaction_claims: dict[str, Any], renewal_claims: dict[str, Any]
) -> Callable[..., dict[str, str]]:
    """Factory fixture: an inbound ``{"signedPayload": ...}`` body."""

    def _factory(
        notification_type: str = "DID_RENEW",
        subtype: str | None = "BILLING_RECOVERY",
        transaction: dict[str, Any] | None = None,
        renewal: dict[str, Any] | None = None,
        **data_overrides: Any,
    ) -> dict[str, str]:
        data: dict[str, Any] = {
            "appAppleId": 1234567890,
            "bundleId": "com.example.app",
            "bundleVersion": "42",
            "environment": "Production",
            "signedTransactionInfo": _sign(transaction or transaction_claims),
            "signedRenewalInfo": _sign(renewal or renewal_claims),
        }
        data.update(data_overrides)
        event: dict[str, Any] = {
            "notificationType": notification_type,
            "notificationUUID": "0a1b2c3d-0000-4000-8000-000000000000",
            "data": data,
            "version": "2.0",
            "signedDate": 1735000000000,
        }
        if subtype is not None:
            event["subtype"] = subtype
        return {"signedPayload": _sign(event)}

    return _factory


@pytest.fixture
def relay_config() -> RelayConfig:
    """All three destinations enabled with test credentials and no env input."""
    return RelayConfig(
        _env_file=None,
        general=GeneralSettings(timezone="UTC"),
        telegram=TelegramDestination(bot_token=TELEGRAM_TOKEN, chat_id="-100200300"),
        discord=DiscordDestination(webhook_url=DISCORD_WEBHOOK),
        slack=SlackDestination(enabled=True, webhook_url=SLACK_WEBHOOK),
    )


@pytest.fixture
def display_payload() -> DisplayPayload:
    return DisplayPayload(
        title="🔔 DID_RENEW 4.99 USD 💵",
        items=[
            DisplayItem(name="Event", value="BILLING_RECOVERY"),
            DisplayItem(name="Product", value="com.example.pro.monthly"),
            DisplayItem(name="Country", value="TUR", country_code="TR"),
            DisplayItem(name="Price", value="4.99 USD"),
        ],
        sub_items=[
            DisplayItem(name="Environment", value="Production"),
            DisplayItem(name="ID", value="2000000123456789"),
            DisplayItem(name="Type", value=None),
            DisplayItem(name="Expires Date", value=""),
        ],
        app_apple_id=1234567890,
        bundle_id="com.example.app",
    )


class SleepRecorder:
    """Stand-in for ``asyncio.sleep`` that records requested waits."""

    def __init__(self) -> None:
        self.waits: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.waits.append(seconds)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def mock_transport() -> Callable[..., httpx.MockTransport]:
    """Factory fixture: MockTransport answering from a per-host script.

    ``responses`` maps a host to a list of responses (or exceptions) served
    in order; the last entry repeats once the list is exhausted.  Every
    request is appended to ``transport.requests``.
    """

    def _factory(responses: dict[str, list[Any]]) -> httpx.MockTransport:
        served: dict[str, int] = {}
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            script = responses[request.url.host]
            index = served.get(request.url.host, 0)
            served[request.url.host] = index + 1
            item = script[min(index, len(script) - 1)]
            if isinstance(item, Exception):
                raise item
            return item

        transport = httpx.MockTransport(handler)
        transport.requests = requests  # type: ignore[attr-defined]
        return transport

    return _factory
