# trustkeys/cli/keys/trust.py

import typer
from pathlib import Path
from typing import List, Optional

from trustkeys.cli.common.config import build_trust_config
from trustkeys.cli.common.utils import echo_error, echo_progress
from trustkeys.core.errors import ConfigError
from trustkeys.core.keys import trust_keys


def keys_trust(
    keys: Optional[List[str]] = typer.Argument(None, help="Paths or http(s) URLs of the public keys to trust."),
    prefix: str = typer.Option("", "--prefix", help="Prefix to limit trust to (also used for key discovery)."),
    root: bool = typer.Option(False, "--root", help="Add keys as root keys, trusted for every prefix."),
    insecure_allow_http: bool = typer.Option(False, "--insecure-allow-http", help="Allow plain http for key discovery and retrieval."),
    skip_fingerprint_review: bool = typer.Option(False, "--skip-fingerprint-review", help="Accept keys without asking for fingerprint review."),
    debug: bool = typer.Option(False, "--debug", help="Report every failed discovery attempt."),
    system_config: Optional[Path] = typer.Option(None, "--system-config", help="System trust store directory."),
    local_config: Optional[Path] = typer.Option(None, "--local-config", help="User trust store directory (keys are written here).")
):
    """Trusts public keys for a prefix, or as root keys, after fingerprint review."""
    keys = keys or []

    if not prefix and not root:
        if keys:
            echo_error("--root required for non-prefixed (root) keys")
        else:
            echo_error("at least one key or --prefix required")
        raise typer.Exit(code=1)

    if prefix and root:
        echo_error("--root and --prefix usage mutually exclusive")
        raise typer.Exit(code=1)

    try:
        config = build_trust_config(
            allow_http=insecure_allow_http,
            force_accept=skip_fingerprint_review,
            debug=debug,
            system_config_dir=system_config,
            local_config_dir=local_config,
        )
    except ConfigError as e:
        echo_error(str(e))
        raise typer.Exit(code=1)

    result = trust_keys(keys, prefix, config, progress_callback=echo_progress)

    if not result["success"]:
        echo_error(result["error"])
        raise typer.Exit(code=1)

    if result["trusted"]:
        typer.secho(f"✅ Trusted {len(result['trusted'])} key(s).", fg=typer.colors.GREEN, err=True)
