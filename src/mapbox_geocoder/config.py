# Project: mapbox-geocoder
# Owner: GreenUnicorn
"""
config.py — Load and validate the TOML configuration file.

We use tomllib (Python 3.11+ stdlib) so no extra install is needed.
The config path defaults to "config.toml" in the current working directory,
but can be overridden for testing.
"""

import tomllib
from pathlib import Path


DEFAULT_CONFIG_PATH = Path("config.toml")

DEFAULT_BASE_URL = "https://api.mapbox.com/v4"
DEFAULT_DATASET = "mapbox.places"
DEFAULT_TIMEOUT = 10

MAPBOX_DEFAULTS = {
    "base_url": DEFAULT_BASE_URL,
    "dataset": DEFAULT_DATASET,
    "timeout": DEFAULT_TIMEOUT,
}


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> dict:
    """Load and validate a TOML configuration file.

    Optional [mapbox] keys that are absent are filled in from MAPBOX_DEFAULTS.

    Args:
        path: Path to the TOML config file.

    Returns:
        Nested dict of configuration values.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If required keys or sections are missing.
    """
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            "Copy config.toml.example to config.toml and fill in your access token."
        )

    with open(path, "rb") as f:
        config = tomllib.load(f)

    _validate(config)
    for key, value in MAPBOX_DEFAULTS.items():
        config["mapbox"].setdefault(key, value)
    return config


def _validate(config: dict) -> None:
    """Validate that all required config sections and keys are present.

    Expected config schema::

        [mapbox]
        access_token = <str>    # required, e.g. "pk.eyJ1Ijo..."
        base_url     = <str>    # optional, API root
        dataset      = <str>    # optional, e.g. "mapbox.places"
        timeout      = <float>  # optional, seconds

        [log]
        path = <str>     # relative or absolute path to the log file

    Args:
        config: Parsed TOML config dict.

    Raises:
        ValueError: If any required section or key is absent.
    """
    required_sections = ["mapbox", "log"]
    for section in required_sections:
        if section not in config:
            raise ValueError(f"Missing required config section: [{section}]")

    mapbox = config["mapbox"]
    if "access_token" not in mapbox:
        raise ValueError("Missing required config key: [mapbox].access_token")
    if not isinstance(mapbox["access_token"], str) or not mapbox["access_token"].strip():
        raise ValueError("Config key [mapbox].access_token must be a non-empty string")

    if "path" not in config["log"]:
        raise ValueError("Missing required config key: [log].path")
