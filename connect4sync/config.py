"""
config.py - Settings for connect4sync

Settings live in a JSON file that is read and written under a file lock so
two instances started from the same directory (host and joiner) never see a
half-written file. Command-line flags override file values.
"""

import json
import os
import shutil
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Optional

import filelock

from connect4sync.debug import debug
from connect4sync.errors import ConfigError

DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 8888
CONFIG_FILE = 'connect4sync.json'


@dataclass
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    timeout: Optional[float] = None  # seconds to wait for the peer; None waits forever
    strict_snapshots: bool = False
    player_one: str = "player1"
    player_two: str = "player2"
    debug_level: str = "warning"
    log_file: Optional[str] = None


# Accepted JSON types per field
FIELD_TYPES = {
    'host': (str,),
    'port': (int,),
    'timeout': (int, float, type(None)),
    'strict_snapshots': (bool,),
    'player_one': (str,),
    'player_two': (str,),
    'debug_level': (str,),
    'log_file': (str, type(None)),
}


def safe_read_json(file_path: str) -> Optional[Dict[str, Any]]:
    """
    Read a JSON file under a file lock.

    Args:
        file_path: Path to JSON file

    Returns:
        Parsed JSON data, or None if the file doesn't exist
    """
    if not os.path.exists(file_path):
        return None

    with filelock.FileLock(f"{file_path}.lock"):
        try:
            with open(file_path, 'r') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Error decoding JSON from {file_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read {file_path}: {e}") from e


def safe_write_json(file_path: str, data: Any) -> None:
    """Write JSON through a temporary file so readers never see a partial file."""
    with filelock.FileLock(f"{file_path}.lock"):
        temp_file = f"{file_path}.tmp"
        try:
            with open(temp_file, 'w') as f:
                json.dump(data, f, indent=2)
            shutil.move(temp_file, file_path)
        except OSError as e:
            raise ConfigError(f"Cannot write {file_path}: {e}") from e


def _validate(data: Dict[str, Any]) -> Dict[str, Any]:
    known = {}
    for key, value in data.items():
        if key not in FIELD_TYPES:
            debug.warning(f"Ignoring unknown setting '{key}'", "config")
            continue
        expected = FIELD_TYPES[key]
        # bool is an int subclass; only accept it where bool is expected
        if not isinstance(value, expected) or (isinstance(value, bool) and bool not in expected):
            raise ConfigError(f"Setting '{key}' has invalid value {value!r}")
        known[key] = value

    if 'port' in known and not 0 < known['port'] < 65536:
        raise ConfigError(f"Port {known['port']} out of range")
    if known.get('timeout') is not None and known['timeout'] <= 0:
        raise ConfigError("Timeout must be positive")
    return known


def load_settings(config_path: str = CONFIG_FILE) -> Settings:
    """
    Load settings from a JSON file.

    Args:
        config_path: Path to the settings file

    Returns:
        Settings with file values over defaults (plain defaults if the file is missing)

    Raises:
        ConfigError: if the file is unreadable or holds invalid values
    """
    data = safe_read_json(config_path)
    if data is None:
        debug.debug(f"No settings file at {config_path}, using defaults", "config")
        return Settings()

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must hold a JSON object")

    settings = Settings(**_validate(data))
    debug.debug(f"Loaded settings from {config_path}", "config")
    return settings


def save_settings(settings: Settings, config_path: str = CONFIG_FILE) -> None:
    safe_write_json(config_path, asdict(settings))
    debug.info(f"Saved settings to {config_path}", "config")


def apply_overrides(settings: Settings, **overrides: Any) -> Settings:
    """
    Return a copy of settings with every non-None override applied.

    Raises:
        ConfigError: if an override names an unknown setting or has a bad value
    """
    names = {f.name for f in fields(Settings)}
    unknown = set(overrides) - names
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(sorted(unknown))}")

    changes = _validate({k: v for k, v in overrides.items() if v is not None})
    return replace(settings, **changes)
