"""FastAPI application factory for the inbound notification endpoint.

Apple posts ``{"signedPayload": "..."}`` to ``/``.  Any other method gets
405; any failure while decoding or processing gets a plain-text 500;
everything else, including partial destination failures, gets 200.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from iaprelay import __version__
from iaprelay.config import RelayConfig, load_config
from iaprelay.core.relay import NotificationRelay, RelayStatus

logger = logging.getLogger(__name__)

NON_POST_METHODS = ["GET", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(
    *,
    config: RelayConfig | None = None,
    relay: NotificationRelay | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        config: Optional RelayConfig.  If *None*, it is loaded from the
            environment.
        relay: Optional pre-built relay (tests inject one with a mock
            transport).
    """
    if relay is None:
        relay = NotificationRelay(config or load_config())

    app = FastAPI(
        title="iaprelay",
        version=__version__,
        description="App Store server notification relay",
    )
    app.state.relay = relay

    @app.api_route("/", methods=NON_POST_METHODS, include_in_schema=False)
    async def _method_not_allowed() -> PlainTextResponse:
        return PlainTextResponse("Only POST method is accepted", status_code=405)

    @app.post("/", response_class=PlainTextResponse)
    async def receive_notification(request: Request) -> PlainTextResponse:
        try:
            body = await request.json()
            result = await app.state.relay.process(body)
        except Exception:
            logger.exception("Error sending notifications")
            return PlainTextResponse("Internal Server Error", status_code=500)

        if result.status is RelayStatus.SKIPPED_SANDBOX:
            return PlainTextResponse("Sandbox notifications are disabled")
        return PlainTextResponse("Notifications sent successfully")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
