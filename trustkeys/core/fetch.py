# trustkeys/core/fetch.py
"""
Retrieval of public keys from local paths or http(s) URLs.

Remote keys are streamed into an anonymous temporary file (already unlinked
on creation), so nothing fetched from the network is left behind on disk once
the returned file object is closed.
"""

import enum
import tempfile
from dataclasses import dataclass
from typing import BinaryIO, Optional
from urllib.parse import urlsplit

import requests

from trustkeys.core.errors import (
    HTTPStatusError,
    InsecureTransportError,
    InvalidLocationError,
    NotFoundError,
    SourceIOError,
    TransportError,
    UnsupportedSchemeError,
)

CHUNK_SIZE = 8192


class LocationKind(enum.Enum):
    LOCAL = "local"
    HTTP = "http"
    HTTPS = "https"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class KeyLocation:
    raw: str
    kind: LocationKind
    scheme: str = ""

    @classmethod
    def parse(cls, location: str) -> "KeyLocation":
        try:
            scheme = urlsplit(location).scheme
        except ValueError as e:
            raise InvalidLocationError(f"invalid key location {location!r}: {e}") from e

        if scheme == "":
            kind = LocationKind.LOCAL
        elif scheme == "http":
            kind = LocationKind.HTTP
        elif scheme == "https":
            kind = LocationKind.HTTPS
        else:
            kind = LocationKind.UNSUPPORTED
        return cls(raw=location, kind=kind, scheme=scheme)


def fetch_key(location: str, allow_http: bool = False, session: Optional[requests.Session] = None) -> BinaryIO:
    """
    Returns a readable, seekable binary file holding the key at ``location``.

    The caller owns the returned file and must close it.
    """
    loc = KeyLocation.parse(location)

    if loc.kind is LocationKind.LOCAL:
        try:
            return open(loc.raw, "rb")
        except OSError as e:
            raise NotFoundError(f"cannot open key file {loc.raw!r}: {e}") from e

    if loc.kind is LocationKind.HTTP and not allow_http:
        raise InsecureTransportError("--insecure-allow-http required for http URLs")

    if loc.kind in (LocationKind.HTTP, LocationKind.HTTPS):
        return download_key(loc.raw, session=session)

    raise UnsupportedSchemeError(f"only http and https urls supported, got {loc.scheme!r}")


def download_key(url: str, session: Optional[requests.Session] = None) -> BinaryIO:
    """Downloads ``url`` into an unlinked temporary file, rewound to the start."""
    session = session or requests.Session()

    try:
        tf = tempfile.TemporaryFile(prefix="trustkeys_")
    except OSError as e:
        raise SourceIOError(f"error creating tempfile: {e}") from e

    try:
        try:
            response = session.get(url, stream=True)
        except requests.RequestException as e:
            raise TransportError(f"error getting key: {e}") from e

        with response:
            if response.status_code != 200:
                raise HTTPStatusError(response.status_code)

            try:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    tf.write(chunk)
            except (requests.RequestException, OSError) as e:
                raise SourceIOError(f"error copying key: {e}") from e

        tf.seek(0)
    except BaseException:
        tf.close()
        raise

    return tf
