"""
Core configuration settings for simaccess.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

# Base paths
SIMACCESS_ROOT = Path(__file__).parent.parent
DATA_DIR = Path(
    os.getenv(
        "SIMACCESS_DATA_DIR",
        Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local/share")) / "simaccess",
    )
)
CONFIG_DIR = Path(
    os.getenv(
        "SIMACCESS_CONFIG_DIR",
        Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config")) / "simaccess",
    )
)

# Logging configuration
LOG_DIR = DATA_DIR / "logs"
LOG_DIR.mkdir(parents=True, exist_ok=True)

# Log types
LOG__GENERAL = "GENERAL"
LOG__DEBUG = "DEBUG"

# Default adapter
DEFAULT_ADAPTER = "hci0"

# Settings file
CONFIG_FILE = CONFIG_DIR / "config.yaml"

BUS_SYSTEM = "system"
BUS_SESSION = "session"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_SETTINGS: Dict[str, Any] = {
    "adapter": DEFAULT_ADAPTER,
    "log_level": "INFO",
    "bus": BUS_SYSTEM,
}


class ConfigError(Exception):
    """Raised when the settings file cannot be used."""


def load_settings(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Return the default settings merged with *path* (or ``CONFIG_FILE``).

    A missing file is not an error; the defaults are returned unchanged.
    Keys the defaults do not know are ignored.
    """
    settings = dict(DEFAULT_SETTINGS)
    path = Path(path) if path else CONFIG_FILE
    if not path.exists():
        return settings

    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        return settings
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")

    for key in DEFAULT_SETTINGS:
        if key in data and data[key] is not None:
            settings[key] = str(data[key])

    if settings["bus"] not in (BUS_SYSTEM, BUS_SESSION):
        raise ConfigError(f"Unknown bus '{settings['bus']}' in {path}")
    if settings["log_level"].upper() not in LOG_LEVELS:
        raise ConfigError(f"Unknown log_level '{settings['log_level']}' in {path}")
    return settings
