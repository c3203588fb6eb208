# trustkeys/core/review.py
"""
Review of fetched OpenPGP keys before they are trusted.

The armored key ring is parsed with gpg (through python-gnupg, in a throwaway
GNUPGHOME so the user's own keyring is never touched), summarised for the
operator, and then accepted either automatically (force mode) or through a
yes/no prompt.
"""

import sys
import logging
import tempfile
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, List, Optional, TextIO

import gnupg

from trustkeys.core.errors import InputError, ParseError

logging.basicConfig(stream=sys.stderr, level=logging.INFO)

ARMOR_HEADER = b"-----BEGIN PGP PUBLIC KEY BLOCK-----"
TRUST_PROMPT = "Are you sure you want to trust this key (yes/no)?"


@dataclass
class KeyInfo:
    fingerprint: bytes
    subkey_fingerprints: List[bytes] = field(default_factory=list)
    identities: List[str] = field(default_factory=list)


def _fingerprint_bytes(hex_fpr: str) -> bytes:
    try:
        return bytes.fromhex(hex_fpr)
    except (TypeError, ValueError) as e:
        raise ParseError(f"invalid fingerprint {hex_fpr!r} in key ring") from e


def parse_key_ring(data: bytes, gpgbinary: str = "gpg") -> List[KeyInfo]:
    """Parses ASCII-armored public key data into a list of KeyInfo."""
    if ARMOR_HEADER not in data:
        raise ParseError("error reading key: no armored public key block found")

    with tempfile.TemporaryDirectory(prefix="trustkeys_gpg_") as gnupghome:
        try:
            gpg = gnupg.GPG(gnupghome=gnupghome, gpgbinary=gpgbinary)
        except (OSError, ValueError) as e:
            raise ParseError(f"error reading key: gpg unavailable: {e}") from e
        scanned = gpg.scan_keys_mem(data)

    if not scanned:
        raise ParseError(f"error reading key: {scanned.stderr.strip() or 'no keys found'}")

    ring = []
    for key in scanned:
        identities = []
        for uid in key.get("uids", []):
            if uid not in identities:
                identities.append(uid)
        ring.append(KeyInfo(
            fingerprint=_fingerprint_bytes(key["fingerprint"]),
            subkey_fingerprints=[_fingerprint_bytes(sub[2]) for sub in key.get("subkeys", [])],
            identities=identities,
        ))
    return ring


def fingerprint_to_string(fpr: bytes) -> str:
    """
    Renders a fingerprint the way gpg does: groups of two bytes, with a
    double space after the tenth byte.
    """
    out = ""
    for i, b in enumerate(fpr):
        if i > 0 and i % 2 == 0:
            out += " "
            if i == 10:
                out += " "
        out += f"{b:02X}"
    return out


def render_key_summary(prefix: str, location: str, ring: List[KeyInfo]) -> List[str]:
    lines = [f"Prefix: \"{prefix}\"", f"Key: \"{location}\""]
    for key in ring:
        lines.append(f"GPG key fingerprint is: {fingerprint_to_string(key.fingerprint)}")
        for sub in key.subkey_fingerprints:
            lines.append(f"    Subkey fingerprint: {fingerprint_to_string(sub)}")
        for identity in key.identities:
            lines.append(f"\t{identity}")
    return lines


def ask_for_trust(stdin: TextIO, report_progress: Callable[[str], None]) -> bool:
    """Prompts until the operator answers exactly 'yes' or 'no'."""
    while True:
        report_progress(TRUST_PROMPT)
        try:
            line = stdin.readline()
        except (OSError, ValueError) as e:
            raise InputError(f"error reading input: {e}") from e
        if not line:
            raise InputError("error reading input: EOF")

        answer = line.rstrip("\n")
        if answer == "yes":
            return True
        if answer == "no":
            return False
        report_progress("Please enter 'yes' or 'no'")


def review_key(
    prefix: str,
    location: str,
    key: BinaryIO,
    force_accept: bool = False,
    stdin: Optional[TextIO] = None,
    parser: Optional[Callable[[bytes], List[KeyInfo]]] = None,
    progress_callback: Optional[Callable] = None
) -> bool:
    """
    Shows the key summary and, unless ``force_accept``, asks the operator to accept it.

    ``key`` is rewound before parsing and again on every way out, so later
    readers see the whole key.
    """
    def report_progress(message):
        if progress_callback:
            progress_callback(message)
        else:
            logging.info(message)

    try:
        key.seek(0)
        ring = (parser or parse_key_ring)(key.read())

        for line in render_key_summary(prefix, location, ring):
            report_progress(line)

        if force_accept:
            return True
        return ask_for_trust(stdin if stdin is not None else sys.stdin, report_progress)
    finally:
        key.seek(0)
