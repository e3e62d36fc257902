"""
spotify-private-api: Manage Spotify playlist folders through the web player API.

Spotify's public Web API cannot create or rearrange playlist folders. The
web player can, through undocumented endpoints that operate on the user's
"root list": a flat, ordered list of playlists and folder boundary markers,
versioned by an opaque revision. Edits are sent as a delta of ordered
ADD / REM / MOV operations against the revision they were built from.

Architecture:
    folders/ (synchronous core)
        - RootList: immutable snapshot of the root list
        - FolderRequest: records operations and renders the Changes payload
        - FolderIdAllocator: collision-free identifiers for new folders

    session/ (network collaborator)
        - Session: token exchange, fetch_root_list(), submit_changes()

    core/
        - Configuration, exceptions, logging

    cli.py
        - `spfolders` command-line interface

Usage:
    Python API:
        from spotify_private_api import Session

        session = Session.create(sp_dc, sp_key, user_id)
        root_list = session.fetch_root_list()

        changes = (
            root_list.new_request()
            .add("New Folder", root_list.generate_folder_uri(), 0, 2)
            .build()
        )
        session.submit_changes(changes)

    Command Line:
        spfolders list
        spfolders add-folder "New Folder" --start 0 --end 2

Credentials:
    sp_dc and sp_key are cookies of a logged-in open.spotify.com session
    (valid for about a year; logging out invalidates them). The user id is
    the last part of the profile URL: https://open.spotify.com/user/<user_id>

Dependencies:
    - requests: HTTP client for token exchange and root list calls
    - pyyaml: Configuration file parsing
    - python-dotenv: .env support for credentials
    - click / rich-click: CLI framework
"""

__version__ = "0.1.0"
__author__ = "spotify-private-api"
__license__ = "MIT"

from spotify_private_api.core import (
    ChangesParseError,
    Config,
    ConfigError,
    IdentifierSpaceExhaustedError,
    ParseError,
    RootListParseError,
    SessionError,
    SpotifyPrivateApiError,
    get_logger,
    load_config,
    setup_logging,
)
from spotify_private_api.folders import (
    Changes,
    FolderRequest,
    RootList,
    generate_folder_id,
)
from spotify_private_api.session import Session

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "setup_logging",
    "get_logger",
    # Exceptions
    "SpotifyPrivateApiError",
    "ConfigError",
    "ParseError",
    "RootListParseError",
    "ChangesParseError",
    "IdentifierSpaceExhaustedError",
    "SessionError",
    # Core models
    "RootList",
    "FolderRequest",
    "Changes",
    "generate_folder_id",
    # Network
    "Session",
]
