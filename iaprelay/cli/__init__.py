"""iaprelay CLI — Typer-based command-line interface."""
