"""Main Typer application — imports and registers all CLI commands.

Entry point: ``iaprelay`` (configured via pyproject.toml [project.scripts]).

Commands: serve, decode, preview, destinations.
"""

from __future__ import annotations

import typer

from iaprelay.cli.commands.destinations import destinations_cmd
from iaprelay.cli.commands.payload import decode_cmd, preview_cmd
from iaprelay.cli.commands.serve import serve_cmd

app = typer.Typer(
    name="iaprelay",
    help="iaprelay: App Store server notification relay.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="serve", help="Serve the inbound notification endpoint.")(serve_cmd)
app.command(name="decode", help="Decode a saved notification body.")(decode_cmd)
app.command(name="preview", help="Preview per-destination messages.")(preview_cmd)
app.command(name="destinations", help="List configured destinations.")(
    destinations_cmd
)


def main() -> None:
    """Entry point for the ``iaprelay`` console script."""
    app()


if __name__ == "__main__":
    main()
