"""
Exception classes for spotify-private-api.

This module defines all custom exceptions used throughout the library.
Each exception is designed to provide a clear error message and to
distinguish between the different failure modes a caller can act on.

Exception Hierarchy:
    SpotifyPrivateApiError (base)
        ConfigError - Configuration file or environment issues
        ParseError - Malformed server documents
            RootListParseError - Root list snapshot could not be read
            ChangesParseError - Changes payload could not be read
        IdentifierSpaceExhaustedError - No free folder identifier found
        SessionError - Token exchange or HTTP failures
"""


class SpotifyPrivateApiError(Exception):
    """
    Base exception for all spotify-private-api errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch every library error with a single
    except clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., URLs, indices).

    Example:
        try:
            session.submit_changes(changes)
        except SpotifyPrivateApiError as e:
            logger.error(f"Operation failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'url': URL that caused the error
                     - 'field': Document field that failed to parse
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(SpotifyPrivateApiError):
    """
    Raised when there's an issue with the configuration.

    Common causes:
        - An explicitly given config.yaml does not exist
        - config.yaml has invalid YAML syntax
        - sp_dc, sp_key or user_id missing from both file and environment
        - Invalid field values (e.g., non-positive timeout)

    Example:
        raise ConfigError(
            "'spotify.sp_dc' must be a non-empty string",
            details={'field': 'spotify.sp_dc'}
        )
    """
    pass


class ParseError(SpotifyPrivateApiError):
    """
    Raised when a server document does not have the expected shape.

    Parse errors are never recovered locally: the document is rejected
    as a whole and the caller decides whether to refetch.
    """
    pass


class RootListParseError(ParseError):
    """
    Raised when a root list snapshot cannot be deserialized.

    Common causes:
        - 'revision' or 'contents.items' missing
        - An item without a 'uri'
        - 'metaItems' not aligned with 'items'
        - Unbalanced folder markers when building the folder tree
    """
    pass


class ChangesParseError(ParseError):
    """
    Raised when a changes payload cannot be deserialized.

    Common causes:
        - Operation with an unknown 'kind'
        - Operation missing its nested parameter object
    """
    pass


class IdentifierSpaceExhaustedError(SpotifyPrivateApiError):
    """
    Raised when no unused folder identifier could be generated.

    With 16^16 possible identifiers this only happens when the set of
    identifiers in use is pathological (e.g., a test covering the whole
    space with a constrained random source). It is treated as fatal.
    """
    pass


class SessionError(SpotifyPrivateApiError):
    """
    Raised when there's an issue talking to the web player endpoints.

    Common causes:
        - sp_dc / sp_key cookies expired or invalid (auth error)
        - Non-2xx response when fetching or submitting the root list
        - Network connectivity issues
        - Response body is not valid JSON

    Attributes:
        is_auth_error: True if the failure came from token acquisition.
        http_status: HTTP status code of the failed response, if any.

    Example:
        raise SessionError(
            "Failed to submit changes: 409 Conflict",
            details={'url': url},
            http_status=409
        )
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        is_auth_error: bool = False,
        http_status: int | None = None
    ) -> None:
        """
        Initialize session error with additional flags.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
            is_auth_error: Set to True if the access or client token could
                          not be obtained.
            http_status: Status code of the failed response, when there was one.
                        A 409 on submission usually means the base revision is stale.
        """
        super().__init__(message, details)
        self.is_auth_error = is_auth_error
        self.http_status = http_status
