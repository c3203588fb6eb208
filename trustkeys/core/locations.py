# trustkeys/core/locations.py

import logging
from typing import Callable, List, Optional, Sequence

from trustkeys.core.discovery import App, discover_public_keys
from trustkeys.core.errors import DiscoveryError, MissingInputError, NoKeysDiscoveredError


def get_pubkey_locations(
    prefix: str,
    args: Sequence[str],
    allow_http: bool = False,
    debug: bool = False,
    discover: Callable = discover_public_keys,
    progress_callback: Optional[Callable] = None
) -> List[str]:
    """
    Returns the key locations supplied in ``args``, or discovers them at ``prefix``.

    Explicit locations always win and are returned unchanged.
    """
    def report_progress(message):
        if progress_callback:
            progress_callback(message)
        else:
            logging.info(message)

    if args:
        return list(args)

    if not prefix:
        raise MissingInputError("at least one key or --prefix required")

    try:
        app = App.from_string(prefix)
        endpoints, attempts = discover(app, allow_http)
    except DiscoveryError as e:
        if debug:
            for attempt in getattr(e, "attempts", []):
                report_progress(f"meta tag 'ac-discovery-pubkeys' not found on {attempt.prefix}: {attempt.error}")
        raise DiscoveryError(f"--prefix meta discovery error: {e}") from e

    if debug:
        for attempt in attempts:
            report_progress(f"meta tag 'ac-discovery-pubkeys' not found on {attempt.prefix}: {attempt.error}")

    if not endpoints.keys:
        raise NoKeysDiscoveredError(f"meta discovery on {prefix} resulted in no keys")

    return list(endpoints.keys)
