"""
Configuration management for spotify-private-api.

This module handles loading, validating, and providing access to the
configuration used by the command-line interface and by callers who
prefer a file over passing credentials around.

The configuration contains:
    - Browser-session cookies (sp_dc, sp_key) and the Spotify user id
    - HTTP timeout for the web player endpoints
    - Optional directory for log files

Sources (later wins):
    1. config.yaml (explicit path, or config.yaml in the current directory)
    2. Environment variables, including those from a .env file:
       SPOTIFY_DC, SPOTIFY_KEY, SPOTIFY_USER_ID

Example config.yaml:
    spotify:
      sp_dc: "AQB..."
      sp_key: "07c9..."
      user_id: "31h5mfzvglpwfevvaens2flw7smu"

    session:
      timeout: 10

    logging:
      directory: null  # Optional: write log files here
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from spotify_private_api.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

DEFAULT_TIMEOUT = 10.0

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "SPOTIFY_DC": ("spotify", "sp_dc"),
    "SPOTIFY_KEY": ("spotify", "sp_key"),
    "SPOTIFY_USER_ID": ("spotify", "user_id"),
}


@dataclass(frozen=True)
class SpotifyConfig:
    """
    Browser-session credentials.

    The cookies are taken from a logged-in web player session and stay
    valid for about a year unless the user logs out.

    Attributes:
        sp_dc: Value of the sp_dc cookie.
        sp_key: Value of the sp_key cookie.
        user_id: Spotify user id, the last part of the profile URL.
    """
    sp_dc: str
    sp_key: str
    user_id: str


@dataclass(frozen=True)
class SessionConfig:
    """
    HTTP behaviour for the web player endpoints.

    Attributes:
        timeout: Per-request timeout in seconds.
    """
    timeout: float = DEFAULT_TIMEOUT


@dataclass(frozen=True)
class LoggingConfig:
    """
    Attributes:
        directory: Where log files are written, or None for console only.
    """
    directory: Path | None = None


@dataclass(frozen=True)
class Config:
    """
    Complete configuration.

    Created by load_config() and immutable afterwards.

    Example:
        config = load_config()
        session = Session.create(
            config.spotify.sp_dc,
            config.spotify.sp_key,
            config.spotify.user_id,
            timeout=config.session.timeout,
        )
    """
    spotify: SpotifyConfig
    session: SessionConfig
    logging: LoggingConfig


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml and the environment.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in the current working
                     directory and silently skips it when absent.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is not found, the file has
                     invalid YAML syntax, is not a mapping, credentials are
                     missing from both file and environment, or a value is invalid.

    Behavior:
        1. Load .env into the environment (existing variables win)
        2. Read and parse YAML content, if there is a file
        3. Apply SPOTIFY_* environment overrides
        4. Validate each section and return a frozen Config
    """
    load_dotenv()

    explicit = config_path is not None
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    raw_config: dict[str, Any] = {}
    if config_path.exists():
        raw_config = _read_yaml(config_path)
    elif explicit:
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    _apply_environment(raw_config)

    return Config(
        spotify=_parse_spotify_config(_section(raw_config, "spotify")),
        session=_parse_session_config(_section(raw_config, "session")),
        logging=_parse_logging_config(_section(raw_config, "logging")),
    )


def _read_yaml(config_path: Path) -> dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except IOError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file parses to None
    if raw_config is None:
        return {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return raw_config


def _apply_environment(raw_config: dict[str, Any]) -> None:
    """Overlay SPOTIFY_* environment variables onto the raw config in place."""
    for env_var, (section, key) in ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value:
            target = raw_config.get(section)
            if not isinstance(target, dict):
                target = {}
                raw_config[section] = target
            target[key] = value


def _section(raw_config: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw_config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section '{name}' must be a dictionary",
            details={"section": name}
        )
    return section


def _parse_spotify_config(spotify_section: dict[str, Any]) -> SpotifyConfig:
    """
    Parse and validate the credentials section.

    Raises:
        ConfigError: If sp_dc, sp_key or user_id is missing or empty.
    """
    values = {}
    for key in ("sp_dc", "sp_key", "user_id"):
        value = spotify_section.get(key, "")
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(
                f"'spotify.{key}' must be a non-empty string",
                details={"field": f"spotify.{key}"}
            )
        values[key] = value.strip()

    return SpotifyConfig(**values)


def _parse_session_config(session_section: dict[str, Any]) -> SessionConfig:
    timeout = session_section.get("timeout")
    if timeout is None:
        return SessionConfig()

    # bool is an int subclass; reject it explicitly
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError(
            "'session.timeout' must be a positive number",
            details={"field": "session.timeout", "value": timeout}
        )

    return SessionConfig(timeout=float(timeout))


def _parse_logging_config(logging_section: dict[str, Any]) -> LoggingConfig:
    directory = logging_section.get("directory")
    if directory is None:
        return LoggingConfig()

    if not isinstance(directory, str) or not directory.strip():
        raise ConfigError(
            "'logging.directory' must be a non-empty string or null",
            details={"field": "logging.directory"}
        )

    return LoggingConfig(directory=Path(directory.strip()).expanduser().resolve())
