"""
Tests for key retrieval from local paths and http(s) URLs.
"""
import tempfile

import pytest
import requests

from conftest import ARMORED_KEY, make_response
from trustkeys.core.errors import (
    HTTPStatusError,
    InsecureTransportError,
    NotFoundError,
    SourceIOError,
    TransportError,
    UnsupportedSchemeError,
)
from trustkeys.core.fetch import KeyLocation, LocationKind, fetch_key


pytestmark = pytest.mark.core


class TestKeyLocation:
    @pytest.mark.parametrize("location,kind", [
        ("/etc/keys/pubkey.gpg", LocationKind.LOCAL),
        ("relative/pubkey.gpg", LocationKind.LOCAL),
        ("http://example.com/pubkey.gpg", LocationKind.HTTP),
        ("https://example.com/pubkey.gpg", LocationKind.HTTPS),
        ("ftp://example.com/pubkey.gpg", LocationKind.UNSUPPORTED),
    ])
    def test_scheme_dispatch(self, location, kind):
        assert KeyLocation.parse(location).kind is kind


class TestLocalKeys:
    def test_opens_local_file(self, key_file):
        with fetch_key(str(key_file)) as key:
            assert key.read() == ARMORED_KEY

    def test_missing_file(self, tmp_path):
        with pytest.raises(NotFoundError):
            fetch_key(str(tmp_path / "absent.gpg"))


class TestRemoteKeys:
    def test_unsupported_scheme_does_no_io(self, session):
        with pytest.raises(UnsupportedSchemeError):
            fetch_key("ftp://example.com/pubkey.gpg", session=session)
        session.get.assert_not_called()

    def test_http_requires_flag(self, session):
        with pytest.raises(InsecureTransportError):
            fetch_key("http://example.com/pubkey.gpg", allow_http=False, session=session)
        session.get.assert_not_called()

    def test_http_allowed(self, session):
        session.get.return_value = make_response()
        with fetch_key("http://example.com/pubkey.gpg", allow_http=True, session=session) as key:
            assert key.read() == ARMORED_KEY
        session.get.assert_called_once_with("http://example.com/pubkey.gpg", stream=True)

    def test_https_body_rewound_and_rereadable(self, session):
        half = len(ARMORED_KEY) // 2
        session.get.return_value = make_response(chunks=(ARMORED_KEY[:half], ARMORED_KEY[half:]))
        with fetch_key("https://example.com/pubkey.gpg", session=session) as key:
            assert key.tell() == 0
            assert key.read() == ARMORED_KEY
            key.seek(0)
            assert key.read() == ARMORED_KEY

    def test_bad_status_leaves_no_file(self, session, tmp_path, monkeypatch):
        monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
        session.get.return_value = make_response(status_code=404)

        with pytest.raises(HTTPStatusError) as exc_info:
            fetch_key("https://example.com/pubkey.gpg", session=session)

        assert exc_info.value.code == 404
        assert list(tmp_path.iterdir()) == []

    def test_downloaded_key_not_visible_on_disk(self, session, tmp_path, monkeypatch):
        monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
        session.get.return_value = make_response()

        with fetch_key("https://example.com/pubkey.gpg", session=session) as key:
            assert list(tmp_path.iterdir()) == []
            assert key.read() == ARMORED_KEY

    def test_connection_failure(self, session):
        session.get.side_effect = requests.ConnectionError("connection refused")
        with pytest.raises(TransportError):
            fetch_key("https://example.com/pubkey.gpg", session=session)

    def test_copy_failure(self, session):
        response = make_response()
        response.iter_content.side_effect = requests.exceptions.ChunkedEncodingError("truncated")
        session.get.return_value = response
        with pytest.raises(SourceIOError):
            fetch_key("https://example.com/pubkey.gpg", session=session)
