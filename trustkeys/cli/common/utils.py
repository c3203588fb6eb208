# trustkeys/cli/common/utils.py

import typer
from rich.console import Console

console = Console()


def echo_progress(message: str):
    """Operator-facing progress goes to stderr so stdout stays machine-readable."""
    typer.echo(message, err=True)


def echo_error(message: str):
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
