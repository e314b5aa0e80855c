"""Configuration management for momo-press."""

import json
import os
from pathlib import Path
from typing import Any

from momo_press.models import NormalizationRules
from momo_press.rules import rules_from_dict

# Default config filename
CONFIG_FILENAME = "config.json"

DEFAULT_SOURCE = "transactions.json"
DEFAULT_OUTPUT = "transactions.normalized.json"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000


def get_config_dir() -> Path:
    """Get the config directory path (XDG compliant)."""
    xdg_config_home = os.getenv("XDG_CONFIG_HOME", str(Path.home() / ".config"))
    return Path(xdg_config_home) / "momo-press"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_config_dir() / CONFIG_FILENAME


def find_config_file() -> Path | None:
    """Find the config file in standard locations.

    Searches for config in the following order:
    1. config.json in current directory
    2. XDG config: ~/.config/momo-press/config.json
    """
    config_paths = [
        Path(CONFIG_FILENAME),
        get_config_path(),
    ]

    for path in config_paths:
        if path.exists():
            return path

    return None


def load_json_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a JSON file."""
    with open(config_path) as f:
        return json.load(f)  # type: ignore[no-any-return]


def save_json_config(config: dict[str, Any], config_path: Path | None = None) -> Path:
    """Save configuration to a JSON file.

    Args:
        config: Configuration dictionary to save
        config_path: Path to save to (defaults to XDG config location)

    Returns:
        Path where config was saved
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        json.dump(config, f, indent=2)
        f.write("\n")

    return config_path


def load_config(config_path: Path | None = None) -> dict[str, Any] | None:
    """Load configuration from config file.

    Args:
        config_path: Explicit path to config.json file

    Returns:
        Loaded config dict or None if not found
    """
    if config_path:
        return load_json_config(config_path)

    config_file = find_config_file()
    if config_file:
        return load_json_config(config_file)

    return None


def get_rules(config: dict[str, Any] | None = None) -> NormalizationRules:
    """Get normalization rules, applying any overrides from config."""
    if not config:
        return rules_from_dict(None)
    return rules_from_dict(config.get("rules"))


def get_source_path(config: dict[str, Any] | None = None, override: Path | None = None) -> Path:
    """Get the raw transaction export path."""
    if override:
        return override
    if config and config.get("source"):
        return Path(config["source"])
    return Path(DEFAULT_SOURCE)


def get_output_path(config: dict[str, Any] | None = None, override: Path | None = None) -> Path:
    """Get the path of the generated JSON artifact."""
    if override:
        return override
    if config and config.get("output"):
        return Path(config["output"])
    return Path(DEFAULT_OUTPUT)


def get_server_address(config: dict[str, Any] | None = None) -> tuple[str, int]:
    """Get (host, port) for the backend server."""
    server = (config or {}).get("server", {})
    return server.get("host", DEFAULT_HOST), int(server.get("port", DEFAULT_PORT))


def create_default_config() -> dict[str, Any]:
    """Create a default configuration."""
    return {
        "source": DEFAULT_SOURCE,
        "output": DEFAULT_OUTPUT,
        "server": {
            "host": DEFAULT_HOST,
            "port": DEFAULT_PORT,
        },
        "rules": {},
    }
