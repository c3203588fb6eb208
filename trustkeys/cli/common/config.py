# trustkeys/cli/common/config.py

from pathlib import Path
from typing import Optional

from trustkeys.core.config import (
    DEFAULT_LOCAL_CONFIG_DIR,
    DEFAULT_SYSTEM_CONFIG_DIR,
    SETTINGS_FILE,
    TrustConfig,
    load_settings,
)


def build_trust_config(
    allow_http: bool = False,
    force_accept: bool = False,
    debug: bool = False,
    system_config_dir: Optional[Path] = None,
    local_config_dir: Optional[Path] = None,
    settings_file: Optional[Path] = None
) -> TrustConfig:
    """Command-line flags take precedence over the settings file, which takes precedence over defaults."""
    settings = load_settings(settings_file or SETTINGS_FILE)

    return TrustConfig(
        allow_http=allow_http or settings.get("insecure_allow_http", False),
        force_accept=force_accept,
        debug=debug,
        system_config_dir=system_config_dir or settings.get("system_config_dir", DEFAULT_SYSTEM_CONFIG_DIR),
        local_config_dir=local_config_dir or settings.get("local_config_dir", DEFAULT_LOCAL_CONFIG_DIR),
    )
