# trustkeys/core/errors.py
"""
Exception hierarchy for trustkeys.

Every failure the trust workflow can report derives from TrustError so the
CLI (and any other caller) can convert it into a single error message.
"""

from typing import Optional


class TrustError(Exception):
    pass


# --- Locating keys ---

class LocatorError(TrustError):
    pass

class MissingInputError(LocatorError):
    pass

class DiscoveryError(LocatorError):
    pass

class NoKeysDiscoveredError(LocatorError):
    pass


# --- Fetching keys ---

class FetchError(TrustError):
    pass

class InvalidLocationError(FetchError):
    pass

class NotFoundError(FetchError):
    pass

class UnsupportedSchemeError(FetchError):
    pass

class InsecureTransportError(FetchError):
    pass

class TransportError(FetchError):
    pass

class HTTPStatusError(FetchError):
    def __init__(self, code: int):
        super().__init__(f"bad HTTP status code: {code}")
        self.code = code

class SourceIOError(FetchError):
    pass


# --- Reviewing keys ---

class ReviewError(TrustError):
    pass

class ParseError(ReviewError):
    pass

class InputError(ReviewError):
    pass


# --- Storing keys ---

class StoreError(TrustError):
    pass


# --- Batch wrappers ---

class BatchError(TrustError):
    """A per-location failure that aborted the whole batch."""

    stage = "processing"

    def __init__(self, location: str, cause: Optional[BaseException] = None):
        message = f"error {self.stage} key {location!r}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
        self.location = location
        self.cause = cause

class KeyAccessError(BatchError):
    stage = "accessing"

class KeyReviewError(BatchError):
    stage = "reviewing"

class KeyStoreError(BatchError):
    stage = "adding"


class ConfigError(TrustError):
    pass
