"""
Core module for spotify-private-api.

This module provides the foundational components used throughout the library:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging setup for the command-line interface

Usage:
    from spotify_private_api.core import (
        Config, load_config,
        setup_logging, get_logger,
        SpotifyPrivateApiError, ParseError, SessionError
    )
"""

from spotify_private_api.core.config import (
    Config,
    LoggingConfig,
    SessionConfig,
    SpotifyConfig,
    load_config,
)
from spotify_private_api.core.exceptions import (
    ChangesParseError,
    ConfigError,
    IdentifierSpaceExhaustedError,
    ParseError,
    RootListParseError,
    SessionError,
    SpotifyPrivateApiError,
)
from spotify_private_api.core.logger import (
    get_logger,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "SpotifyConfig",
    "SessionConfig",
    "LoggingConfig",
    "load_config",
    # Exceptions
    "SpotifyPrivateApiError",
    "ConfigError",
    "ParseError",
    "RootListParseError",
    "ChangesParseError",
    "IdentifierSpaceExhaustedError",
    "SessionError",
    # Logger
    "setup_logging",
    "get_logger",
    "shutdown_logging",
]
