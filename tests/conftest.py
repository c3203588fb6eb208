"""Pytest configuration and fixtures for trustkeys tests."""

import io
from unittest.mock import MagicMock, patch

import pytest
import requests

from trustkeys.core.config import TrustConfig
from trustkeys.core.keystore import Keystore, KeystoreConfig
from trustkeys.core.review import KeyInfo

ARMORED_KEY = (
    b"-----BEGIN PGP PUBLIC KEY BLOCK-----\n"
    b"\n"
    b"mQENBFRtest\n"
    b"=abcd\n"
    b"-----END PGP PUBLIC KEY BLOCK-----\n"
)

PRIMARY_FPR = bytes.fromhex("bff313cdaa560b16a8987b8f72abf5f6799d33bc")
SUBKEY_FPR = bytes.fromhex("0123456789abcdef0123456789abcdef01234567")


@pytest.fixture(autouse=True)
def _isolate_settings_file(tmp_path):
    """Never read the user's real ~/.config/trustkeys/config.yaml during tests."""
    with patch("trustkeys.cli.common.config.SETTINGS_FILE", tmp_path / "no-such-config.yaml"):
        yield


@pytest.fixture
def armored_key():
    return ARMORED_KEY


@pytest.fixture
def key_ring():
    return [KeyInfo(
        fingerprint=PRIMARY_FPR,
        subkey_fingerprints=[SUBKEY_FPR],
        identities=["Example Signing Key <signing@example.com>"],
    )]


@pytest.fixture
def fake_parser(key_ring):
    """Stands in for gpg: accepts the sample armored key, nothing else."""
    from trustkeys.core.errors import ParseError

    def parse(data):
        if data != ARMORED_KEY:
            raise ParseError("error reading key: not a key")
        return key_ring
    return parse


@pytest.fixture
def keystore(tmp_path, fake_parser):
    config = KeystoreConfig(system_config_dir=tmp_path / "system", local_config_dir=tmp_path / "local")
    return Keystore(config, parser=fake_parser)


@pytest.fixture
def trust_config(tmp_path):
    return TrustConfig(system_config_dir=tmp_path / "system", local_config_dir=tmp_path / "local")


def make_response(status_code=200, chunks=(ARMORED_KEY,), text=""):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.iter_content.return_value = iter(chunks)
    response.__enter__.return_value = response
    return response


@pytest.fixture
def session():
    """A requests.Session stand-in; set session.get.return_value / side_effect per test."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def key_file(tmp_path):
    path = tmp_path / "pubkeys.gpg"
    path.write_bytes(ARMORED_KEY)
    return path


def stdin_with(text):
    return io.StringIO(text)
