# trustkeys/core/config.py

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from trustkeys.core.errors import ConfigError

TRUSTKEYS_CONFIG_DIR = Path.home() / ".config" / "trustkeys"
SETTINGS_FILE = TRUSTKEYS_CONFIG_DIR / "config.yaml"

# Trust store roots. Keys are always written under the local (user) root;
# the system root is only read.
DEFAULT_SYSTEM_CONFIG_DIR = Path("/etc/trustkeys")
DEFAULT_LOCAL_CONFIG_DIR = TRUSTKEYS_CONFIG_DIR

TRUSTED_KEYS_DIR = "trustedkeys"
ROOT_KEYS_DIR = "root.d"
PREFIX_KEYS_DIR = "prefix.d"

SETTINGS_KEYS = ("system_config_dir", "local_config_dir", "insecure_allow_http")


@dataclass(frozen=True)
class TrustConfig:
    """Options for one trust batch, fixed for its whole duration."""
    allow_http: bool = False
    force_accept: bool = False
    debug: bool = False
    system_config_dir: Path = DEFAULT_SYSTEM_CONFIG_DIR
    local_config_dir: Path = DEFAULT_LOCAL_CONFIG_DIR


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Reads the optional YAML settings file.

    Only the keys in SETTINGS_KEYS are returned; a missing file yields an
    empty dict.
    """
    path = Path(path) if path is not None else SETTINGS_FILE
    if not path.exists():
        return {}

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read settings file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")

    settings = {k: data[k] for k in SETTINGS_KEYS if k in data}
    for key in ("system_config_dir", "local_config_dir"):
        if key in settings:
            settings[key] = Path(settings[key]).expanduser()
    if "insecure_allow_http" in settings:
        settings["insecure_allow_http"] = bool(settings["insecure_allow_http"])
    return settings
