"""
Token acquisition for the web player endpoints.

Two tokens are needed for every root list call:
    1. An access token, obtained by presenting the sp_dc / sp_key browser
       session cookies to the web player's token endpoint.
    2. A client token, obtained by describing a web player "device" to the
       client token service, using the client id returned with step 1.

Both exchanges are single requests without retry; callers that need
backoff wrap Session.create().
"""

from dataclasses import dataclass
from typing import Any

import requests

from spotify_private_api.core.exceptions import SessionError
from spotify_private_api.core.logger import get_logger

logger = get_logger(__name__)


ACCESS_TOKEN_URL = "https://open.spotify.com/get_access_token"
ACCESS_TOKEN_PARAMS = {"reason": "transport", "productType": "web_player"}
CLIENT_TOKEN_URL = "https://clienttoken.spotify.com/v1/clienttoken"

# The token endpoint refuses requests without a browser user agent
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/105.0.0.0 Safari/537.36"
)
CLIENT_VERSION = "1.1.97.136.g81a082e9"


@dataclass(frozen=True)
class AccessToken:
    """
    Bearer token for the web player API.

    Attributes:
        access_token: Value for the 'authorization: Bearer' header.
        client_id: Web player client id, needed for the client token.
        expires_at_ms: Expiry as epoch milliseconds.
        is_anonymous: True when the cookies were not accepted. An anonymous
                      token cannot read or edit a user's root list.
    """
    access_token: str
    client_id: str
    expires_at_ms: int
    is_anonymous: bool

    @classmethod
    def from_api(cls, document: Any) -> "AccessToken":
        if not isinstance(document, dict):
            raise SessionError("Access token response is not a JSON object", is_auth_error=True)
        try:
            return cls(
                access_token=str(document["accessToken"]),
                client_id=str(document["clientId"]),
                # Sent as a number or a numeric string
                expires_at_ms=int(document["accessTokenExpirationTimestampMs"]),
                is_anonymous=bool(document.get("isAnonymous", False)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise SessionError(
                f"Malformed access token response: {e}",
                details={"original_error": str(e)},
                is_auth_error=True
            ) from e


def _json_body(response: requests.Response, what: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise SessionError(
            f"{what} response is not valid JSON",
            details={"url": response.url, "original_error": str(e)},
            is_auth_error=True
        ) from e


def get_access_token(
    http: requests.Session,
    sp_dc: str,
    sp_key: str,
    timeout: float
) -> AccessToken:
    """
    Exchange browser-session cookies for an access token.

    Raises:
        SessionError: With is_auth_error=True on network failure, non-2xx
                      response, malformed body, or an anonymous token
                      (cookies rejected or expired).
    """
    logger.info("Requesting access token")
    try:
        response = http.request(
            "GET",
            ACCESS_TOKEN_URL,
            params=ACCESS_TOKEN_PARAMS,
            headers={
                "user-agent": BROWSER_USER_AGENT,
                "Cookie": f"sp_dc={sp_dc};sp_key={sp_key}",
            },
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.HTTPError as e:
        raise SessionError(
            f"Access token request failed: {e}",
            details={"url": ACCESS_TOKEN_URL, "original_error": str(e)},
            is_auth_error=True,
            http_status=e.response.status_code if e.response is not None else None
        ) from e
    except requests.RequestException as e:
        raise SessionError(
            f"Access token request failed: {e}",
            details={"url": ACCESS_TOKEN_URL, "original_error": str(e)},
            is_auth_error=True
        ) from e

    token = AccessToken.from_api(_json_body(response, "Access token"))
    if token.is_anonymous:
        raise SessionError(
            "Received an anonymous access token; sp_dc/sp_key cookies are invalid or expired",
            is_auth_error=True
        )

    logger.debug(f"Access token for client {token.client_id} expires at {token.expires_at_ms}")
    return token


def client_token_request(client_id: str) -> dict[str, Any]:
    """Body describing a desktop web player to the client token service."""
    return {
        "client_data": {
            "client_id": client_id,
            "client_version": CLIENT_VERSION,
            "js_sdk_data": {
                "device_brand": "unknown",
                "device_model": "desktop",
                "os": "Linux",
                "os_version": "unknown",
            },
        }
    }


def get_client_token(http: requests.Session, client_id: str, timeout: float) -> str:
    """
    Obtain a client token for the given web player client id.

    Raises:
        SessionError: With is_auth_error=True on network failure, non-2xx
                      response or a body without granted_token.token.
    """
    logger.info("Requesting client token")
    try:
        response = http.request(
            "POST",
            CLIENT_TOKEN_URL,
            json=client_token_request(client_id),
            headers={"Accept": "application/json"},
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.HTTPError as e:
        raise SessionError(
            f"Client token request failed: {e}",
            details={"url": CLIENT_TOKEN_URL, "original_error": str(e)},
            is_auth_error=True,
            http_status=e.response.status_code if e.response is not None else None
        ) from e
    except requests.RequestException as e:
        raise SessionError(
            f"Client token request failed: {e}",
            details={"url": CLIENT_TOKEN_URL, "original_error": str(e)},
            is_auth_error=True
        ) from e

    body = _json_body(response, "Client token")
    try:
        token = body["granted_token"]["token"]
    except (KeyError, TypeError) as e:
        raise SessionError(
            "Client token response has no granted_token.token",
            details={"response_type": body.get("response_type") if isinstance(body, dict) else None},
            is_auth_error=True
        ) from e

    if not isinstance(token, str) or not token:
        raise SessionError("Client token response carried an empty token", is_auth_error=True)
    return token
