"""Unit tests for DeliveryClient — retry and backoff over httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from iaprelay.models.routing import DeliveryRequest, DestinationKind
from iaprelay.routing.delivery import DeliveryClient, DeliveryError, parse_retry_after

_URL = "https://hooks.test/notify"


def _request() -> DeliveryRequest:
    return DeliveryRequest(
        destination=DestinationKind.DISCORD, url=_URL, body={"content": "hello"}
    )


def _client(transport, sleep, **kwargs) -> tuple[DeliveryClient, httpx.AsyncClient]:
    http = httpx.AsyncClient(transport=transport)
    return DeliveryClient(http, sleep=sleep, **kwargs), http


class TestDeliverySuccess:
    @pytest.mark.asyncio
    async def test_posts_json_body(self, mock_transport, sleep_recorder):
        transport = mock_transport({"hooks.test": [httpx.Response(200, json={"ok": True})]})
        client, http = _client(transport, sleep_recorder)

        result = await client.send(_request())
        await http.aclose()

        assert result.status_code == 200
        assert result.body == {"ok": True}
        (sent,) = transport.requests
        assert sent.method == "POST"
        assert sent.headers["content-type"] == "application/json"
        assert json.loads(sent.content) == {"content": "hello"}
        assert sleep_recorder.waits == []

    @pytest.mark.asyncio
    async def test_no_content_response(self, mock_transport, sleep_recorder):
        transport = mock_transport({"hooks.test": [httpx.Response(204)]})
        client, http = _client(transport, sleep_recorder)

        result = await client.send(_request())
        await http.aclose()

        assert result.status_code == 204
        assert result.body is None

    @pytest.mark.asyncio
    async def test_text_response(self, mock_transport, sleep_recorder):
        transport = mock_transport({"hooks.test": [httpx.Response(200, text="ok")]})
        client, http = _client(transport, sleep_recorder)

        result = await client.send(_request())
        await http.aclose()

        assert result.body == "ok"


class TestRateLimitBackoff:
    @pytest.mark.asyncio
    async def test_exponential_backoff_then_success(self, mock_transport, sleep_recorder):
        transport = mock_transport(
            {
                "hooks.test": [
                    httpx.Response(429),
                    httpx.Response(429),
                    httpx.Response(429),
                    httpx.Response(200, json={}),
                ]
            }
        )
        client, http = _client(
            transport, sleep_recorder, retry_attempts=3, retry_delay_ms=1000
        )

        result = await client.send(_request())
        await http.aclose()

        assert result.status_code == 200
        assert sleep_recorder.waits == [1.0, 2.0, 4.0]
        assert len(transport.requests) == 4

    @pytest.mark.asyncio
    async def test_retry_after_header_wins(self, mock_transport, sleep_recorder):
        transport = mock_transport(
            {
                "hooks.test": [
                    httpx.Response(429, headers={"Retry-After": "7"}),
                    httpx.Response(429),
                    httpx.Response(200, json={}),
                ]
            }
        )
        client, http = _client(transport, sleep_recorder)

        await client.send(_request())
        await http.aclose()

        # The server-specified wait does not stop the delay from doubling.
        assert sleep_recorder.waits == [7.0, 2.0]

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise(self, mock_transport, sleep_recorder):
        transport = mock_transport({"hooks.test": [httpx.Response(429)]})
        client, http = _client(transport, sleep_recorder, retry_attempts=2)

        with pytest.raises(DeliveryError) as excinfo:
            await client.send(_request())
        await http.aclose()

        assert excinfo.value.status_code == 429
        assert excinfo.value.destination is DestinationKind.DISCORD
        assert sleep_recorder.waits == [1.0, 2.0]
        assert len(transport.requests) == 3

    @pytest.mark.asyncio
    async def test_make_request_with_explicit_state(self, mock_transport, sleep_recorder):
        transport = mock_transport(
            {"hooks.test": [httpx.Response(429), httpx.Response(200, json={})]}
        )
        client, http = _client(transport, sleep_recorder)

        await client.make_request(_request(), retries_remaining=1, delay_ms=250)
        await http.aclose()

        assert sleep_recorder.waits == [0.25]


class TestTerminalFailures:
    @pytest.mark.asyncio
    async def test_zero_retries_fails_immediately(self, mock_transport, sleep_recorder):
        transport = mock_transport({"hooks.test": [httpx.Response(429)]})
        client, http = _client(transport, sleep_recorder, retry_attempts=0)

        with pytest.raises(DeliveryError):
            await client.send(_request())
        await http.aclose()

        assert sleep_recorder.waits == []
        assert len(transport.requests) == 1

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 500, 503])
    @pytest.mark.asyncio
    async def test_other_errors_are_not_retried(
        self, status, mock_transport, sleep_recorder
    ):
        transport = mock_transport({"hooks.test": [httpx.Response(status)]})
        client, http = _client(transport, sleep_recorder, retry_attempts=3)

        with pytest.raises(DeliveryError, match=f"status: {status}") as excinfo:
            await client.send(_request())
        await http.aclose()

        assert excinfo.value.status_code == status
        assert sleep_recorder.waits == []
        assert len(transport.requests) == 1


class TestNetworkFailures:
    @pytest.mark.asyncio
    async def test_transport_error_is_retried(self, mock_transport, sleep_recorder):
        transport = mock_transport(
            {
                "hooks.test": [
                    httpx.ConnectError("connection refused"),
                    httpx.ReadTimeout("timed out"),
                    httpx.Response(200, json={}),
                ]
            }
        )
        client, http = _client(transport, sleep_recorder)

        result = await client.send(_request())
        await http.aclose()

        assert result.status_code == 200
        assert sleep_recorder.waits == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_exhausted_transport_errors_become_delivery_error(
        self, mock_transport, sleep_recorder
    ):
        cause = httpx.ConnectError("connection refused")
        transport = mock_transport({"hooks.test": [cause]})
        client, http = _client(transport, sleep_recorder, retry_attempts=3)

        with pytest.raises(DeliveryError, match="request failed") as excinfo:
            await client.send(_request())
        await http.aclose()

        assert excinfo.value.__cause__ is cause
        assert excinfo.value.status_code is None
        assert sleep_recorder.waits == [1.0, 2.0, 4.0]


class TestParseRetryAfter:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("3", 3.0), ("0.5", 0.5), (None, None), ("", None), ("-1", None),
         ("Wed, 21 Oct 2015 07:28:00 GMT", None)],
    )
    def test_values(self, value, expected):
        assert parse_retry_after(value) == expected
