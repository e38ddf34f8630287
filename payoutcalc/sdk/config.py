"""Configuration management for Payout Calc.

Configuration lives in one directory:

1. settings.json - Machine-specific settings
   - policies: path to a custom pay cycle table (YAML)
   - upcoming_days: default window for the upcoming view

2. pay_cycles.yaml - Optional local copy of the pay cycle table. When
   present it replaces the table shipped with the package.

Config directory resolution:
1. PAYOUT_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/payout-calc/ (XDG_CONFIG_HOME fallback)

Policy table resolution:
1. Explicit path (e.g. CLI --policies)
2. settings.json "policies" key
3. pay_cycles.yaml in the config directory
4. Table bundled with the package
"""

import json
import os
from pathlib import Path
from typing import Any, Optional


APP_NAME = "payout-calc"
SETTINGS_FILENAME = "settings.json"
POLICIES_FILENAME = "pay_cycles.yaml"
DEFAULT_POLICIES_PATH = Path(__file__).parent / POLICIES_FILENAME
DEFAULT_UPCOMING_DAYS = 30


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. PAYOUT_CALC_CONFIG_PATH environment variable
    2. ~/.config/payout-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("PAYOUT_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    settings = load_settings()
    return settings.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_policies_path(override: Optional[Path] = None) -> Path:
    """Get the pay cycle table to load.

    Args:
        override: Explicit path, wins over everything else

    Returns:
        Path to a pay cycle YAML file (bundled table as last resort)
    """
    if override:
        return Path(override)

    custom = get_setting("policies")
    if custom:
        return Path(custom).expanduser()

    local = get_config_dir() / POLICIES_FILENAME
    if local.exists():
        return local

    return DEFAULT_POLICIES_PATH


def get_upcoming_days() -> int:
    """Default window (days) for the upcoming payouts view."""
    value = get_setting("upcoming_days", DEFAULT_UPCOMING_DAYS)
    try:
        return int(value)
    except (TypeError, ValueError):
        return DEFAULT_UPCOMING_DAYS
