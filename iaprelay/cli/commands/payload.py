"""``iaprelay decode`` and ``iaprelay preview`` — offline payload inspection.

Both read a saved notification body (``{"signedPayload": "..."}``).
``decode`` prints the normalized event; ``preview`` prints the request each
enabled destination would receive.  Nothing is sent.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from iaprelay.config import load_config
from iaprelay.core.display import build_display_payload
from iaprelay.core.normalizer import InvalidPayloadError, normalize_envelope
from iaprelay.core.tokens import MalformedTokenError
from iaprelay.models.notifications import NormalizedEvent
from iaprelay.routing.destinations import build_delivery_request

console = Console()


def _load_event(path: Path) -> NormalizedEvent:
    try:
        body = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        console.print(f"[bold red]Cannot read {path}:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc
    try:
        return normalize_envelope(body)
    except (InvalidPayloadError, MalformedTokenError) as exc:
        console.print(f"[bold red]{type(exc).__name__}:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc


def _json(obj: Any) -> Syntax:
    return Syntax(json.dumps(obj, indent=2, ensure_ascii=False), "json")


def decode_cmd(
    path: Path = typer.Argument(..., help="File holding the notification JSON body."),
) -> None:
    """Decode a notification body and print the normalized event."""
    event = _load_event(path)
    console.print(_json(event.to_json_dict()))


def preview_cmd(
    path: Path = typer.Argument(..., help="File holding the notification JSON body."),
) -> None:
    """Show what each enabled destination would receive (nothing is sent)."""
    config = load_config()
    event = _load_event(path)
    payload = build_display_payload(event, config.general)

    if not config.enabled_destinations:
        console.print("[yellow]No destinations enabled.[/yellow]")
        return

    for kind in config.enabled_destinations:
        request = build_delivery_request(kind, payload, config.destination(kind))
        console.print(
            Panel(
                _json(request.body),
                title=f"[bold]{kind.value}[/bold]",
                subtitle=f"{request.method} {request.url}",
                border_style="cyan",
            )
        )
