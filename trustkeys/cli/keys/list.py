# trustkeys/cli/keys/list.py

import typer
from pathlib import Path
from typing import Optional
from rich.table import Table

from trustkeys.cli.common.config import build_trust_config
from trustkeys.cli.common.utils import console, echo_error
from trustkeys.core.errors import ConfigError
from trustkeys.core.keys import list_trusted_keys


def keys_list(
    system_config: Optional[Path] = typer.Option(None, "--system-config", help="System trust store directory."),
    local_config: Optional[Path] = typer.Option(None, "--local-config", help="User trust store directory.")
):
    """Lists all trusted public keys."""
    try:
        config = build_trust_config(system_config_dir=system_config, local_config_dir=local_config)
    except ConfigError as e:
        echo_error(str(e))
        raise typer.Exit(code=1)

    result = list_trusted_keys(config)
    if not result["success"]:
        echo_error(result["error"])
        raise typer.Exit(code=1)

    if not result["keys"]:
        typer.echo("No trusted keys found.")
        return

    table = Table(title="Trusted Keys")
    table.add_column("Scope")
    table.add_column("Origin")
    table.add_column("Fingerprint")
    table.add_column("Path")
    for key in result["keys"]:
        table.add_row(key["scope"] or "(root)", key["origin"], key["fingerprint"], key["path"])
    console.print(table)
