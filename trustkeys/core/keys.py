# trustkeys/core/keys.py
"""
Core trust-on-first-use workflow for trustkeys.

For every key location the key is fetched, shown to the operator for review
and, once accepted, written into the trust store under the requested prefix
(or as a root key when the prefix is empty).

ARCHITECTURE:
=============
- add_keys() and its helpers raise the exceptions in trustkeys.core.errors
- trust_keys() and list_trusted_keys() wrap them for the CLI and return
  JSON-serializable dictionaries
- Consistent error format: {"success": false, "error": "message"}
- All operator-facing text goes through progress_callback (stderr by default)
"""

import sys
import logging
from pathlib import Path
from typing import Any, BinaryIO, Callable, Dict, List, Optional, Sequence, TextIO

from trustkeys.core.config import TrustConfig
from trustkeys.core.errors import (
    FetchError,
    KeyAccessError,
    KeyReviewError,
    KeyStoreError,
    ReviewError,
    StoreError,
    TrustError,
)
from trustkeys.core.fetch import fetch_key
from trustkeys.core.keystore import Keystore, KeystoreConfig, KeystoreError
from trustkeys.core.locations import get_pubkey_locations
from trustkeys.core.review import review_key

# Configure logging to go to stderr only, never stdout
logging.basicConfig(stream=sys.stderr, level=logging.INFO)


def _reporter(progress_callback: Optional[Callable]) -> Callable[[str], None]:
    def report_progress(message):
        if progress_callback:
            progress_callback(message)
        else:
            logging.info(message)
    return report_progress


def add_pubkey(
    prefix: str,
    key: BinaryIO,
    keystore: Keystore,
    progress_callback: Optional[Callable] = None
) -> Path:
    """Adds ``key`` to the keystore as a root key, or for ``prefix`` when one is given."""
    report_progress = _reporter(progress_callback)

    try:
        key.seek(0)
        if prefix == "":
            path = keystore.store_root_key(key)
            report_progress(f"Added root key at \"{path}\"")
        else:
            path = keystore.store_key_for_prefix(prefix, key)
            report_progress(f"Added key for prefix \"{prefix}\" at \"{path}\"")
    except (KeystoreError, OSError) as e:
        raise StoreError(str(e)) from e
    return path


def add_keys(
    locations: Sequence[str],
    prefix: str,
    config: TrustConfig,
    keystore: Optional[Keystore] = None,
    stdin: Optional[TextIO] = None,
    fetcher: Callable = fetch_key,
    reviewer: Callable = review_key,
    progress_callback: Optional[Callable] = None
) -> Dict[str, List[str]]:
    """
    Fetches, reviews and stores the keys at ``locations`` for ``prefix``.

    Locations are handled one at a time, in order. The first fetch, review or
    store failure aborts the whole batch; a rejected key is skipped.

    Returns {"trusted": [paths...], "rejected": [locations...]}.
    """
    report_progress = _reporter(progress_callback)
    if keystore is None:
        keystore = Keystore(KeystoreConfig(config.system_config_dir, config.local_config_dir))

    trusted = []
    rejected = []

    for location in locations:
        try:
            key = fetcher(location, config.allow_http)
        except FetchError as e:
            raise KeyAccessError(location, e) from e

        with key:
            try:
                accepted = reviewer(
                    prefix, location, key,
                    force_accept=config.force_accept,
                    stdin=stdin,
                    progress_callback=progress_callback,
                )
            except ReviewError as e:
                raise KeyReviewError(location, e) from e

            if not accepted:
                report_progress(f"Not trusting \"{location}\"")
                rejected.append(location)
                continue

            if config.force_accept:
                report_progress(f"Trusting \"{location}\" for prefix \"{prefix}\" without fingerprint review.")
            else:
                report_progress(f"Trusting \"{location}\" for prefix \"{prefix}\" after fingerprint review.")

            try:
                path = add_pubkey(prefix, key, keystore, progress_callback=progress_callback)
            except StoreError as e:
                raise KeyStoreError(location, e) from e
            trusted.append(str(path))

    return {"trusted": trusted, "rejected": rejected}


def trust_keys(
    keys: Sequence[str],
    prefix: str,
    config: TrustConfig,
    stdin: Optional[TextIO] = None,
    progress_callback: Optional[Callable] = None
) -> Dict[str, Any]:
    """
    Resolves key locations (explicit or discovered at ``prefix``) and trusts them.

    Returns:
        Dict with structure:
        {
            "success": bool,
            "trusted": [str],   # Paths of the stored keys
            "rejected": [str]   # Locations the operator declined
        }

    On error:
        {
            "success": false,
            "error": "error message",
            "error_type": "ExceptionClassName"
        }
    """
    try:
        locations = get_pubkey_locations(
            prefix, keys,
            allow_http=config.allow_http,
            debug=config.debug,
            progress_callback=progress_callback,
        )
        result = add_keys(locations, prefix, config, stdin=stdin, progress_callback=progress_callback)
        return {"success": True, **result}

    except TrustError as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": type(e).__name__
        }
    except Exception as e:
        logging.exception("Unexpected error trusting keys")
        return {
            "success": False,
            "error": f"Failed to trust keys: {str(e)}",
            "error_type": type(e).__name__
        }


def list_trusted_keys(config: TrustConfig) -> Dict[str, Any]:
    """
    Lists the keys in the system and local trust stores.

    Returns:
        {"success": True, "keys": [{"scope", "origin", "fingerprint", "path"}], "total_count": int}
    """
    try:
        keystore = Keystore(KeystoreConfig(config.system_config_dir, config.local_config_dir))
        keys = keystore.list_trusted_keys()
        return {
            "success": True,
            "keys": keys,
            "total_count": len(keys)
        }
    except OSError as e:
        logging.exception("Unexpected error listing keys")
        return {
            "success": False,
            "error": f"Failed to list keys: {str(e)}"
        }
