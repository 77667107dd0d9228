"""``iaprelay destinations`` — show which destinations are configured."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from iaprelay.config import load_config
from iaprelay.models.routing import DestinationKind
from iaprelay.routing.destinations import DESTINATION_STRATEGIES

console = Console()


def _mask(url: str, secret: str) -> str:
    """Hide a credential embedded in *url*, keeping its last four characters.

    Secrets of four characters or fewer are hidden completely.
    """
    head, found, tail = url.rpartition(secret) if secret else ("", "", url)
    if not found:
        return url
    if len(secret) <= 4:
        masked = "*" * len(secret)
    else:
        masked = "*" * (len(secret) - 4) + secret[-4:]
    return head + masked + tail


def destinations_cmd() -> None:
    """List the Telegram, Discord and Slack destinations and their status."""
    config = load_config()

    table = Table(title="Destinations", header_style="bold cyan")
    table.add_column("Destination", min_width=10)
    table.add_column("Enabled", justify="center")
    table.add_column("Endpoint")

    for kind in DestinationKind:
        settings = config.destination(kind)
        url = DESTINATION_STRATEGIES[kind].build_url(settings)
        if kind is DestinationKind.TELEGRAM:
            url = _mask(url, settings.bot_token)
        else:
            url = _mask(url, url.rsplit("/", 1)[-1])
        enabled = "[green]Yes[/green]" if settings.enabled else "[red]No[/red]"
        table.add_row(kind.value, enabled, url or "[dim]not configured[/dim]")

    console.print(table)
    console.print(
        f"[dim]Retry attempts: {config.general.retry_attempts}, "
        f"initial delay: {config.general.retry_delay_ms}ms, "
        f"sandbox notifications: "
        f"{'on' if config.general.allow_sandbox_notifications else 'off'}[/dim]"
    )
