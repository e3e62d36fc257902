"""
Network layer for spotify-private-api.

    - Session: Authenticated root list fetch / changes submission
    - AccessToken, get_access_token, get_client_token: Token exchange

Usage:
    from spotify_private_api.session import Session

    session = Session.create(sp_dc, sp_key, user_id)
    root_list = session.fetch_root_list()
"""

from spotify_private_api.session.session import Session
from spotify_private_api.session.tokens import (
    AccessToken,
    get_access_token,
    get_client_token,
)

__all__ = [
    "Session",
    "AccessToken",
    "get_access_token",
    "get_client_token",
]
