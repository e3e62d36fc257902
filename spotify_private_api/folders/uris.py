"""
URI conventions for root list items.

The root list is flat. Whether an entry is a playlist or one of the two
folder boundary markers is encoded only in the shape of its URI:

    playlist      <namespace>:playlist:<playlist_id>
    folder start  <namespace>:start-group:<folder_id>:<name>
    folder end    <namespace>:end-group:<folder_id>

Anything else is treated as an opaque item and passed through unchanged.
"""

from dataclasses import dataclass
from enum import Enum


DEFAULT_NAMESPACE = "spotify"

PLAYLIST_TAG = "playlist"
START_GROUP_TAG = "start-group"
END_GROUP_TAG = "end-group"


class ItemKind(Enum):
    """Logical kind of a root list entry, derived from its URI."""
    PLAYLIST = "playlist"
    FOLDER_START = "folder_start"
    FOLDER_END = "folder_end"
    OTHER = "other"


@dataclass(frozen=True)
class ParsedUri:
    """
    Components of a root list URI.

    Attributes:
        kind: Which convention the URI follows.
        namespace: Leading URI segment, normally "spotify".
        identifier: Playlist id or folder id. Empty for OTHER.
        name: Folder display name for FOLDER_START, otherwise None.
    """
    kind: ItemKind
    namespace: str
    identifier: str = ""
    name: str | None = None


def playlist_uri(playlist_id: str, namespace: str = DEFAULT_NAMESPACE) -> str:
    return f"{namespace}:{PLAYLIST_TAG}:{playlist_id}"


def folder_start_uri(folder_id: str, name: str, namespace: str = DEFAULT_NAMESPACE) -> str:
    return f"{namespace}:{START_GROUP_TAG}:{folder_id}:{name}"


def folder_end_uri(folder_id: str, namespace: str = DEFAULT_NAMESPACE) -> str:
    return f"{namespace}:{END_GROUP_TAG}:{folder_id}"


def parse_uri(uri: str) -> ParsedUri:
    """
    Split a root list URI into its components.

    Folder names may themselves contain ':', so a start marker is split
    at most three times.

    Args:
        uri: URI of a root list item.

    Returns:
        ParsedUri. URIs that match none of the conventions, including
        markers with missing segments, come back as ItemKind.OTHER.

    Example:
        parsed = parse_uri("spotify:start-group:123456789abcdefa:Road: Trip")
        parsed.kind        # ItemKind.FOLDER_START
        parsed.identifier  # "123456789abcdefa"
        parsed.name        # "Road: Trip"
    """
    parts = uri.split(":", 3)
    namespace = parts[0]

    if len(parts) >= 3 and parts[2]:
        tag = parts[1]
        if tag == PLAYLIST_TAG and len(parts) == 3:
            return ParsedUri(ItemKind.PLAYLIST, namespace, parts[2])
        if tag == START_GROUP_TAG and len(parts) == 4:
            return ParsedUri(ItemKind.FOLDER_START, namespace, parts[2], parts[3])
        if tag == END_GROUP_TAG and len(parts) == 3:
            return ParsedUri(ItemKind.FOLDER_END, namespace, parts[2])

    return ParsedUri(ItemKind.OTHER, namespace)
