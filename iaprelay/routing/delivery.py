"""DeliveryClient — POSTs a DeliveryRequest with rate-limit backoff.

Retry policy
------------
* 2xx: success.
* 429 with retries left: wait ``Retry-After`` seconds when the header is
  numeric, otherwise the current delay; then retry with the delay doubled.
* No response at all (``httpx.TransportError``) with retries left: wait the
  current delay, retry with the delay doubled.
* Anything else, or no retries left: ``DeliveryError``.

Every ``send`` call owns its own retry counter and delay, so concurrent
deliveries never share a rate-limit budget.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from iaprelay.models.routing import DeliveryRequest, DeliveryResult, DestinationKind

logger = logging.getLogger(__name__)

DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_DELAY_MS = 1000
HTTP_TOO_MANY_REQUESTS = 429

Sleep = Callable[[float], Awaitable[Any]]


class DeliveryError(RuntimeError):
    """Raised when a destination rejects a message or cannot be reached."""

    def __init__(
        self,
        message: str,
        *,
        destination: DestinationKind | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.destination = destination
        self.status_code = status_code


def parse_retry_after(value: str | None) -> float | None:
    """Seconds from a ``Retry-After`` header, or ``None`` if not numeric."""
    if value is None:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


def _response_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class DeliveryClient:
    """Sends DeliveryRequests over a shared ``httpx.AsyncClient``.

    Parameters
    ----------
    http:
        An open async client.  The caller owns its lifecycle.
    retry_attempts:
        Retries allowed after the first attempt.
    retry_delay_ms:
        Initial backoff delay; doubled after every retry.
    sleep:
        Awaitable used for waits.  Tests inject a recorder.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._http = http
        self._retry_attempts = retry_attempts
        self._retry_delay_ms = retry_delay_ms
        self._sleep = sleep

    async def send(self, request: DeliveryRequest) -> DeliveryResult:
        """Deliver *request* with the configured retry budget."""
        try:
            return await self.make_request(
                request, self._retry_attempts, self._retry_delay_ms
            )
        except DeliveryError as exc:
            logger.error("Delivery to %s failed: %s", request.destination.value, exc)
            raise

    async def make_request(
        self,
        request: DeliveryRequest,
        retries_remaining: int,
        delay_ms: float,
    ) -> DeliveryResult:
        """Deliver *request* starting from an explicit retry state."""
        destination = request.destination
        while True:
            try:
                response = await self._http.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    json=request.body,
                )
            except httpx.TransportError as exc:
                if retries_remaining <= 0:
                    raise DeliveryError(
                        f"{destination.value}: request failed: {exc}",
                        destination=destination,
                    ) from exc
                logger.warning(
                    "%s unreachable (%s), retrying in %dms. Retries left: %d",
                    destination.value,
                    exc,
                    delay_ms,
                    retries_remaining,
                )
                await self._sleep(delay_ms / 1000)
                retries_remaining -= 1
                delay_ms *= 2
                continue

            if response.is_success:
                return DeliveryResult(
                    destination=destination,
                    status_code=response.status_code,
                    body=_response_body(response),
                )

            if response.status_code == HTTP_TOO_MANY_REQUESTS and retries_remaining > 0:
                retry_after = parse_retry_after(response.headers.get("retry-after"))
                wait_ms = retry_after * 1000 if retry_after is not None else delay_ms
                logger.info(
                    "%s rate limited, waiting %dms before retry. Retries left: %d",
                    destination.value,
                    wait_ms,
                    retries_remaining,
                )
                await self._sleep(wait_ms / 1000)
                retries_remaining -= 1
                delay_ms *= 2
                continue

            raise DeliveryError(
                f"{destination.value}: HTTP error! status: {response.status_code}",
                destination=destination,
                status_code=response.status_code,
            )
