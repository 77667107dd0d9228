"""``iaprelay serve`` — run the inbound notification endpoint."""

from __future__ import annotations

import typer
import uvicorn

from iaprelay.config import load_config
from iaprelay.logging_config import configure_logging


def serve_cmd(
    host: str = typer.Option("0.0.0.0", "--host", help="Interface to bind."),
    port: int = typer.Option(8080, "--port", "-p", help="Port to listen on."),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes."),
) -> None:
    """Serve the App Store notification endpoint with uvicorn."""
    config = load_config()
    configure_logging(config.log_level)
    uvicorn.run(
        "iaprelay.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=config.log_level.lower(),
    )
