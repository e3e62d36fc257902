"""
Authenticated session for the root list endpoints.

Session is the network collaborator of the folders core: it fetches the
current RootList snapshot and submits Changes built against it. Everything
about retries, rate limits and credential storage is left to the caller.

Usage:
    from spotify_private_api.session import Session

    session = Session.create(sp_dc, sp_key, user_id)

    root_list = session.fetch_root_list()
    changes = (
        root_list.new_request()
        .add("New Folder", root_list.generate_folder_uri(), 0, 1)
        .build()
    )
    session.submit_changes(changes)
"""

import json
from typing import Any
from urllib.parse import quote

import requests

from spotify_private_api.core.config import DEFAULT_TIMEOUT, Config
from spotify_private_api.core.exceptions import SessionError
from spotify_private_api.core.logger import get_logger
from spotify_private_api.folders.models import RootList
from spotify_private_api.folders.operations import Changes
from spotify_private_api.session.tokens import get_access_token, get_client_token

logger = get_logger(__name__)


SPCLIENT_BASE = "https://spclient.wg.spotify.com/playlist/v2/user"
ROOTLIST_DECORATE = "revision,length,attributes,timestamp,owner"


class Session:
    """
    Holds the tokens and HTTP connection pool for one user.

    Attributes:
        user_id: Spotify user whose root list is read and edited.
        client_id: Web player client id the access token was issued for.
        timeout: Per-request timeout in seconds.

    Note:
        Construct with Session.create() (or from_config()), which performs
        the token exchange. The constructor only stores already obtained tokens.
    """

    def __init__(
        self,
        user_id: str,
        access_token: str,
        client_id: str,
        client_token: str,
        http: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT
    ) -> None:
        self.user_id = user_id
        self.client_id = client_id
        self.timeout = timeout
        self._access_token = access_token
        self._client_token = client_token
        self._http = http or requests.Session()

    @classmethod
    def create(
        cls,
        sp_dc: str,
        sp_key: str,
        user_id: str,
        timeout: float = DEFAULT_TIMEOUT,
        http: requests.Session | None = None
    ) -> "Session":
        """
        Log in with browser-session cookies.

        Args:
            sp_dc: Value of the sp_dc cookie.
            sp_key: Value of the sp_key cookie.
            user_id: Spotify user id.
            timeout: Per-request timeout in seconds.
            http: Optional requests.Session to reuse.

        Raises:
            SessionError: With is_auth_error=True if either token exchange fails.
        """
        http = http or requests.Session()
        access = get_access_token(http, sp_dc, sp_key, timeout)
        client_token = get_client_token(http, access.client_id, timeout)
        logger.info(f"Session ready for user {user_id}")
        return cls(
            user_id=user_id,
            access_token=access.access_token,
            client_id=access.client_id,
            client_token=client_token,
            http=http,
            timeout=timeout,
        )

    @classmethod
    def from_config(cls, config: Config, http: requests.Session | None = None) -> "Session":
        return cls.create(
            config.spotify.sp_dc,
            config.spotify.sp_key,
            config.spotify.user_id,
            timeout=config.session.timeout,
            http=http,
        )

    # =========================================================================
    # HTTP plumbing
    # =========================================================================

    @property
    def rootlist_url(self) -> str:
        return f"{SPCLIENT_BASE}/{quote(self.user_id, safe='')}/rootlist"

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "app-platform": "WebPlayer",
            "authorization": f"Bearer {self._access_token}",
            "client-token": self._client_token,
        }

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        headers = self._headers()
        headers.update(kwargs.pop("headers", {}))
        try:
            response = self._http.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise SessionError(
                f"{method} {url} failed: {e}",
                details={"url": url, "original_error": str(e)},
                is_auth_error=status in (401, 403),
                http_status=status
            ) from e
        except requests.RequestException as e:
            raise SessionError(
                f"{method} {url} failed: {e}",
                details={"url": url, "original_error": str(e)}
            ) from e
        return response

    # =========================================================================
    # Root list operations
    # =========================================================================

    def fetch_root_list(self) -> RootList:
        """
        Fetch the current root list snapshot.

        Raises:
            SessionError: On network failure or non-2xx response, or if the
                          body is not JSON.
            RootListParseError: If the body does not look like a root list.
        """
        logger.info(f"Fetching root list for {self.user_id}")
        response = self._request("GET", self.rootlist_url, params={"decorate": ROOTLIST_DECORATE})
        try:
            document = response.json()
        except ValueError as e:
            raise SessionError(
                "Root list response is not valid JSON",
                details={"url": self.rootlist_url, "original_error": str(e)}
            ) from e

        root_list = RootList.from_api(document)
        logger.debug(f"Root list revision {root_list.revision} with {len(root_list)} items")
        return root_list

    def submit_changes(self, changes: Changes) -> None:
        """
        Submit a changes envelope.

        A delta is applied atomically by the server or not at all; nothing
        is compensated locally on failure.

        Raises:
            SessionError: On network failure or non-2xx response. A 409
                          usually means the base revision is out of date:
                          fetch again and rebuild.
        """
        url = f"{self.rootlist_url}/changes"
        logger.info(
            f"Submitting {len(changes.operations)} operation(s) against revision {changes.base_revision}"
        )
        self._request(
            "POST",
            url,
            data=json.dumps(changes.to_api()).encode("utf-8"),
            headers={"content-type": "application/json;charset=UTF-8"},
        )

    def add_folder(self, name: str, start_index: int, end_index: int | None = None) -> str:
        """
        Create a folder on top of the latest root list.

        Args:
            name: Folder display name.
            start_index: Position of the start marker.
            end_index: Position of the end marker once the start marker is
                       in place. Defaults to start_index + 1 (empty folder).

        Returns:
            The new folder's identifier.
        """
        root_list = self.fetch_root_list()
        folder_id = root_list.generate_folder_uri()
        if end_index is None:
            end_index = start_index + 1
        changes = root_list.new_request().add(name, folder_id, start_index, end_index).build()
        self.submit_changes(changes)
        logger.info(f"Created folder '{name}' ({folder_id})")
        return folder_id
