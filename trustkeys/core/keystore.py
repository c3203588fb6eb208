# trustkeys/core/keystore.py
"""
On-disk trust store for OpenPGP public keys.

Layout, under both the system and the local (user) config directory:

    trustedkeys/root.d/<fingerprint>             keys trusted for every prefix
    trustedkeys/prefix.d/<prefix>/<fingerprint>  keys trusted for one prefix

Keys are always written to the local tree; the system tree is only read.
Each file holds the original armored key data, named after the lowercase hex
fingerprint of the first primary key it contains.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, Dict, List, Optional

from trustkeys.core.config import PREFIX_KEYS_DIR, ROOT_KEYS_DIR, TRUSTED_KEYS_DIR
from trustkeys.core.discovery import is_valid_identifier
from trustkeys.core.errors import ParseError
from trustkeys.core.review import KeyInfo, parse_key_ring


class KeystoreError(Exception):
    pass


@dataclass(frozen=True)
class KeystoreConfig:
    system_config_dir: Path
    local_config_dir: Path

    @property
    def system_root_path(self) -> Path:
        return Path(self.system_config_dir) / TRUSTED_KEYS_DIR / ROOT_KEYS_DIR

    @property
    def system_prefix_path(self) -> Path:
        return Path(self.system_config_dir) / TRUSTED_KEYS_DIR / PREFIX_KEYS_DIR

    @property
    def local_root_path(self) -> Path:
        return Path(self.local_config_dir) / TRUSTED_KEYS_DIR / ROOT_KEYS_DIR

    @property
    def local_prefix_path(self) -> Path:
        return Path(self.local_config_dir) / TRUSTED_KEYS_DIR / PREFIX_KEYS_DIR


class Keystore:
    def __init__(self, config: KeystoreConfig, parser: Optional[Callable[[bytes], List[KeyInfo]]] = None):
        self.config = config
        self.parser = parser or parse_key_ring

    def store_root_key(self, key: BinaryIO) -> Path:
        """Stores ``key`` as trusted for all prefixes and returns its path."""
        return self._store_trusted_key(self.config.local_root_path, key)

    def store_key_for_prefix(self, prefix: str, key: BinaryIO) -> Path:
        """Stores ``key`` as trusted for ``prefix`` and returns its path."""
        if not is_valid_identifier(prefix):
            raise KeystoreError(f"invalid prefix {prefix!r}")
        return self._store_trusted_key(self.config.local_prefix_path / prefix, key)

    def _store_trusted_key(self, directory: Path, key: BinaryIO) -> Path:
        try:
            data = key.read()
        except OSError as e:
            raise KeystoreError(f"error reading key: {e}") from e

        try:
            ring = self.parser(data)
        except ParseError as e:
            raise KeystoreError(str(e)) from e
        if not ring:
            raise KeystoreError("missing openpgp entity")

        try:
            directory.mkdir(mode=0o755, parents=True, exist_ok=True)
            path = directory / ring[0].fingerprint.hex()
            path.write_bytes(data)
            os.chmod(path, 0o644)
        except OSError as e:
            raise KeystoreError(f"error writing key to {directory}: {e}") from e
        return path

    def list_trusted_keys(self) -> List[Dict[str, str]]:
        """
        Lists every trusted key in the system and local trees.

        Returns records with "scope" ("" for root keys), "origin"
        ("system" or "local"), "fingerprint" and "path".
        """
        trees = [
            ("system", self.config.system_root_path, self.config.system_prefix_path),
            ("local", self.config.local_root_path, self.config.local_prefix_path),
        ]
        records = []
        for origin, root_path, prefix_path in trees:
            if root_path.is_dir():
                for key_file in sorted(root_path.iterdir()):
                    if key_file.is_file():
                        records.append(self._record("", origin, key_file))
            if prefix_path.is_dir():
                for key_file in sorted(prefix_path.rglob("*")):
                    if key_file.is_file():
                        scope = key_file.parent.relative_to(prefix_path).as_posix()
                        records.append(self._record(scope, origin, key_file))
        return records

    @staticmethod
    def _record(scope: str, origin: str, key_file: Path) -> Dict[str, str]:
        return {
            "scope": scope,
            "origin": origin,
            "fingerprint": key_file.name,
            "path": str(key_file),
        }
