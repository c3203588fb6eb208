# trustkeys/core/discovery.py
"""
Meta discovery of public key locations.

A prefix such as ``example.com/project/app`` is looked up by fetching
``https://<prefix>?ac-discovery=1`` for every path prefix of the name, from
the full name up to the bare domain, and reading the
``ac-discovery-pubkeys`` meta tags of the returned HTML:

    <meta name="ac-discovery-pubkeys" content="example.com/project https://example.com/pubkeys.gpg">

Discovery stops at the first prefix that yields at least one key.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import requests
from bs4 import BeautifulSoup

from trustkeys.core.errors import DiscoveryError

PUBKEYS_META_NAME = "ac-discovery-pubkeys"

_IDENTIFIER_RE = re.compile(r"^[a-z0-9]+([-._~/][a-z0-9]+)*$")


def is_valid_identifier(name: str) -> bool:
    return bool(_IDENTIFIER_RE.match(name))


@dataclass(frozen=True)
class App:
    name: str
    labels: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_string(cls, app: str) -> "App":
        """Parses ``name[:version][,label=value...]``."""
        parts = app.split(",")
        name = parts[0]
        labels = {}

        if ":" in name:
            name, version = name.split(":", 1)
            if not version:
                raise DiscoveryError(f"empty version in {app!r}")
            labels["version"] = version

        for part in parts[1:]:
            key, sep, value = part.partition("=")
            if not sep or not key:
                raise DiscoveryError(f"malformed label {part!r} in {app!r}")
            if key in labels:
                raise DiscoveryError(f"duplicate label {key!r} in {app!r}")
            labels[key] = value

        if not is_valid_identifier(name):
            raise DiscoveryError(f"invalid application name {name!r}")
        return cls(name=name, labels=labels)


@dataclass
class FailedAttempt:
    prefix: str
    error: Exception


@dataclass
class PublicKeysEndpoints:
    keys: List[str] = field(default_factory=list)


def _name_prefixes(name: str) -> List[str]:
    parts = name.split("/")
    return ["/".join(parts[:i]) for i in range(len(parts), 0, -1)]


def _parse_pubkeys_meta(html: str, app_name: str) -> List[str]:
    soup = BeautifulSoup(html, "html.parser")
    keys = []
    for tag in soup.find_all("meta", attrs={"name": PUBKEYS_META_NAME}):
        content = (tag.get("content") or "").split()
        if len(content) != 2:
            continue
        prefix, url = content
        if app_name.startswith(prefix):
            keys.append(url)
    return keys


def _fetch_discovery_page(session, prefix: str, allow_http: bool) -> str:
    schemes = ["https", "http"] if allow_http else ["https"]
    last_error = None
    for scheme in schemes:
        url = f"{scheme}://{prefix}?ac-discovery=1"
        try:
            response = session.get(url)
        except requests.RequestException as e:
            last_error = e
            continue
        if response.status_code != 200:
            last_error = DiscoveryError(f"{url}: bad HTTP status code: {response.status_code}")
            continue
        return response.text
    raise last_error


def discover_public_keys(
    app: App,
    allow_http: bool = False,
    session: Optional[requests.Session] = None
) -> Tuple[PublicKeysEndpoints, List[FailedAttempt]]:
    """
    Discovers the public key locations published for ``app``.

    Returns the endpoints found (possibly empty) together with one
    FailedAttempt per prefix that did not yield keys. Raises DiscoveryError,
    with the failed attempts attached, when no prefix could be fetched at all.
    """
    session = session or requests.Session()
    endpoints = PublicKeysEndpoints()
    attempts = []

    reached = False
    for prefix in _name_prefixes(app.name):
        logging.debug(f"Looking up {PUBKEYS_META_NAME} on {prefix}")
        try:
            html = _fetch_discovery_page(session, prefix, allow_http)
        except (requests.RequestException, DiscoveryError) as e:
            attempts.append(FailedAttempt(prefix=prefix, error=e))
            continue
        reached = True

        keys = _parse_pubkeys_meta(html, app.name)
        if not keys:
            attempts.append(FailedAttempt(prefix=prefix, error=DiscoveryError(f"no {PUBKEYS_META_NAME} meta tags")))
            continue

        endpoints.keys.extend(keys)
        break

    if not reached:
        error = DiscoveryError(f"no discovery endpoint reachable for {app.name}: {attempts[-1].error}")
        error.attempts = attempts
        raise error

    return endpoints, attempts
