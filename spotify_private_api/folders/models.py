"""
Root list snapshot model.

The root list is the server's view of a user's top-level arrangement of
playlists and folders. It is flat: folders are delimited by start/end
marker items, and membership is everything between a matching pair.

Design Decisions:
    - Snapshots are frozen; edits are expressed as a new delta built with
      new_request() and sent to the server, which answers with a new
      revision out of band.
    - Every optional field is independently optional. Absent fields stay
      absent when the snapshot is serialized again.
    - Keys this library does not model are kept in `extra` and written
      back verbatim, so re-serializing a partially understood document
      does not lose data.
    - Opaque values are deep-copied on the way in and on the way out, so
      neither the parsed document nor a to_api() result aliases a snapshot.
    - Snapshots compare by value but are unhashable (they hold dicts).
    - The hierarchical folder view is derived on demand from the flat list.

Usage:
    from spotify_private_api.folders.models import RootList

    root_list = RootList.from_api(session_response_json)
    folder_id = root_list.generate_folder_uri()
    changes = root_list.new_request().add("Mixes", folder_id, 0, 1).build()
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Union

from spotify_private_api.core.exceptions import RootListParseError
from spotify_private_api.folders.fields import (
    extra_fields,
    opaque,
    optional,
    put_extra,
    put_optional,
    require,
    require_mapping,
)
from spotify_private_api.folders.identifiers import FolderIdAllocator
from spotify_private_api.folders.request import FolderRequest
from spotify_private_api.folders.uris import ItemKind, ParsedUri, parse_uri


_ROOT_KEYS = frozenset({"revision", "length", "attributes", "timestamp", "contents"})
_CONTENTS_KEYS = frozenset({"pos", "truncated", "items", "metaItems"})
_ITEM_KEYS = frozenset({"uri", "attributes"})
_META_KEYS = frozenset({"revision", "attributes", "length", "timestamp", "ownerUsername"})


@dataclass(frozen=True)
class RootListItem:
    """
    One entry of the flat root list.

    Attributes:
        uri: Playlist URI or folder marker URI (see folders.uris).
        attributes: Opaque per-item attributes (timestamp, seenAt, public, ...),
                    or None when the document had none.
        extra: Unmodelled keys, written back unchanged.
    """
    uri: str
    attributes: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    # Opaque dict fields make these snapshots unhashable
    __hash__ = None

    @property
    def parsed(self) -> ParsedUri:
        return parse_uri(self.uri)

    @property
    def kind(self) -> ItemKind:
        return self.parsed.kind

    @property
    def is_playlist(self) -> bool:
        return self.kind is ItemKind.PLAYLIST

    @property
    def is_folder_marker(self) -> bool:
        return self.kind in (ItemKind.FOLDER_START, ItemKind.FOLDER_END)

    @property
    def folder_id(self) -> str | None:
        """Folder id for start/end markers, None for anything else."""
        return self.parsed.identifier if self.is_folder_marker else None

    @property
    def folder_name(self) -> str | None:
        return self.parsed.name

    @classmethod
    def from_api(cls, document: Any, path: str) -> "RootListItem":
        document = require_mapping(document, path, RootListParseError)
        return cls(
            uri=require(document, "uri", str, path, RootListParseError),
            attributes=opaque(document, "attributes", dict, path, RootListParseError),
            extra=extra_fields(document, _ITEM_KEYS),
        )

    def to_api(self) -> dict[str, Any]:
        result: dict[str, Any] = {"uri": self.uri}
        put_optional(result, "attributes", self.attributes)
        put_extra(result, self.extra)
        return result


@dataclass(frozen=True)
class RootListMetaItem:
    """
    Per-index metadata aligned with the root list items.

    Folder markers usually come with an empty record; playlists carry
    their own revision, name (in attributes), track count and owner.
    Every field is independently optional.
    """
    revision: str | None = None
    attributes: dict[str, Any] | None = None
    length: int | None = None
    timestamp: str | None = None
    owner_username: str | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    __hash__ = None

    @property
    def name(self) -> str | None:
        """Playlist display name, when the server decorated it."""
        if self.attributes is None:
            return None
        name = self.attributes.get("name")
        return name if isinstance(name, str) else None

    @classmethod
    def from_api(cls, document: Any, path: str) -> "RootListMetaItem":
        document = require_mapping(document, path, RootListParseError)
        return cls(
            revision=optional(document, "revision", str, path, RootListParseError),
            attributes=opaque(document, "attributes", dict, path, RootListParseError),
            length=optional(document, "length", int, path, RootListParseError),
            timestamp=optional(document, "timestamp", str, path, RootListParseError),
            owner_username=optional(document, "ownerUsername", str, path, RootListParseError),
            extra=extra_fields(document, _META_KEYS),
        )

    def to_api(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        put_optional(result, "revision", self.revision)
        put_optional(result, "attributes", self.attributes)
        put_optional(result, "length", self.length)
        put_optional(result, "timestamp", self.timestamp)
        put_optional(result, "ownerUsername", self.owner_username)
        put_extra(result, self.extra)
        return result


_EMPTY_META = RootListMetaItem()


@dataclass(frozen=True)
class RootListContents:
    """The 'contents' object of a root list document."""
    items: tuple[RootListItem, ...]
    meta_items: tuple[RootListMetaItem, ...] | None = None
    pos: int | None = None
    truncated: bool | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    __hash__ = None

    @classmethod
    def from_api(cls, document: Any, path: str = "contents") -> "RootListContents":
        document = require_mapping(document, path, RootListParseError)

        raw_items = require(document, "items", list, path, RootListParseError)
        items = tuple(
            RootListItem.from_api(item, f"{path}.items[{i}]") for i, item in enumerate(raw_items)
        )

        raw_meta = optional(document, "metaItems", list, path, RootListParseError)
        meta_items = None
        if raw_meta is not None:
            if len(raw_meta) != len(items):
                raise RootListParseError(
                    f"'{path}.metaItems' has {len(raw_meta)} entries for {len(items)} items",
                    details={"field": f"{path}.metaItems", "items": len(items), "meta_items": len(raw_meta)}
                )
            meta_items = tuple(
                RootListMetaItem.from_api(meta, f"{path}.metaItems[{i}]")
                for i, meta in enumerate(raw_meta)
            )

        return cls(
            items=items,
            meta_items=meta_items,
            pos=optional(document, "pos", int, path, RootListParseError),
            truncated=optional(document, "truncated", bool, path, RootListParseError),
            extra=extra_fields(document, _CONTENTS_KEYS),
        )

    def to_api(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        put_optional(result, "pos", self.pos)
        put_optional(result, "truncated", self.truncated)
        result["items"] = [item.to_api() for item in self.items]
        if self.meta_items is not None:
            result["metaItems"] = [meta.to_api() for meta in self.meta_items]
        put_extra(result, self.extra)
        return result


@dataclass(frozen=True)
class ListEntry:
    """A non-marker item placed in the folder tree, with its flat index."""
    index: int
    item: RootListItem
    meta: RootListMetaItem

    __hash__ = None

    @property
    def name(self) -> str:
        return self.meta.name or self.item.uri


@dataclass
class Folder:
    """
    A folder reconstructed from a matching start/end marker pair.

    Attributes:
        folder_id: Identifier embedded in both markers.
        name: Display name from the start marker.
        start_index: Flat index of the start marker.
        end_index: Flat index of the end marker.
        children: Nested folders and entries, in list order.
    """
    folder_id: str
    name: str
    start_index: int
    end_index: int = -1
    children: list[Union["Folder", ListEntry]] = field(default_factory=list)

    @property
    def span(self) -> int:
        """Number of flat items covered, markers included (for remove/move)."""
        return self.end_index - self.start_index + 1

    def walk(self) -> Iterator["Folder"]:
        """Yield this folder and every nested folder, depth first."""
        yield self
        for child in self.children:
            if isinstance(child, Folder):
                yield from child.walk()


TreeNode = Union[Folder, ListEntry]


@dataclass(frozen=True)
class RootList:
    """
    Immutable snapshot of a user's root list.

    Attributes:
        revision: Opaque version token. Echo it unchanged as the base
                  revision of the next submission.
        contents: Items and aligned metadata.
        length: Item count reported by the server, if decorated.
        attributes: Opaque list-level attributes, if present.
        timestamp: Last modification time reported by the server, if present.
        extra: Unmodelled top-level keys, written back unchanged.
        folder_ids: Session-scoped identifier allocator for this snapshot.
                    It is the one mutable part of the instance: every
                    generate_folder_uri() call records its result here.
                    A snapshot therefore has a single owner and must not
                    be shared across threads without external locking.
    """
    revision: str
    contents: RootListContents
    length: int | None = None
    attributes: dict[str, Any] | None = None
    timestamp: str | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)
    folder_ids: FolderIdAllocator = field(init=False, compare=False, repr=False)

    __hash__ = None

    def __post_init__(self) -> None:
        in_use = set()
        for item in self.contents.items:
            in_use.add(item.uri)
            if item.folder_id:
                in_use.add(item.folder_id)
        object.__setattr__(self, "folder_ids", FolderIdAllocator(in_use))

    # =========================================================================
    # Serialization
    # =========================================================================

    @classmethod
    def from_api(cls, document: Any) -> "RootList":
        """
        Deserialize a root list document as returned by the server.

        Args:
            document: Decoded JSON object.

        Returns:
            RootList: The snapshot.

        Raises:
            RootListParseError: If 'revision', 'contents' or 'contents.items'
                                is missing, an item has no 'uri', a field has
                                the wrong type, or 'metaItems' is not aligned
                                with 'items'.
        """
        document = require_mapping(document, "rootlist", RootListParseError)
        return cls(
            revision=require(document, "revision", str, "", RootListParseError),
            contents=RootListContents.from_api(
                require(document, "contents", dict, "", RootListParseError)
            ),
            length=optional(document, "length", int, "", RootListParseError),
            attributes=opaque(document, "attributes", dict, "", RootListParseError),
            timestamp=optional(document, "timestamp", str, "", RootListParseError),
            extra=extra_fields(document, _ROOT_KEYS),
        )

    def to_api(self) -> dict[str, Any]:
        """Serialize back to the server document shape."""
        result: dict[str, Any] = {"revision": self.revision}
        put_optional(result, "length", self.length)
        put_optional(result, "attributes", self.attributes)
        put_optional(result, "timestamp", self.timestamp)
        result["contents"] = self.contents.to_api()
        put_extra(result, self.extra)
        return result

    # =========================================================================
    # Item access
    # =========================================================================

    @property
    def items(self) -> tuple[RootListItem, ...]:
        return self.contents.items

    @property
    def meta_items(self) -> tuple[RootListMetaItem, ...]:
        """Metadata aligned with items; empty records when the server sent none."""
        if self.contents.meta_items is None:
            return (_EMPTY_META,) * len(self.contents.items)
        return self.contents.meta_items

    def __len__(self) -> int:
        return len(self.contents.items)

    def index_of(self, uri: str) -> int | None:
        """Flat index of the first item with this URI, or None."""
        for index, item in enumerate(self.contents.items):
            if item.uri == uri:
                return index
        return None

    # =========================================================================
    # Editing
    # =========================================================================

    def generate_folder_uri(self) -> str:
        """
        Mint a folder identifier unused in this snapshot and in this session.

        The identifier avoids every item URI and folder id in the snapshot,
        and every identifier previously returned by this method on the same
        instance.
        """
        return self.folder_ids.allocate()

    def new_request(self, clock: Callable[[], int] | None = None) -> FolderRequest:
        """Start a request builder based on this snapshot's revision."""
        return FolderRequest(self.revision, clock=clock)

    # =========================================================================
    # Derived folder view
    # =========================================================================

    def folder_tree(self) -> list[TreeNode]:
        """
        Rebuild the folder hierarchy from the flat marker sequence.

        Returns:
            Top-level nodes in list order: Folder for each marker pair,
            ListEntry for every other item.

        Raises:
            RootListParseError: If an end marker does not close the innermost
                                open folder, or a folder is never closed.
        """
        top: list[TreeNode] = []
        stack: list[Folder] = []

        for index, (item, meta) in enumerate(zip(self.items, self.meta_items)):
            siblings = stack[-1].children if stack else top
            kind = item.kind

            if kind is ItemKind.FOLDER_START:
                folder = Folder(item.parsed.identifier, item.parsed.name or "", index)
                siblings.append(folder)
                stack.append(folder)
            elif kind is ItemKind.FOLDER_END:
                folder_id = item.parsed.identifier
                if not stack or stack[-1].folder_id != folder_id:
                    raise RootListParseError(
                        f"Unbalanced folder end marker for '{folder_id}' at index {index}",
                        details={"index": index, "folder_id": folder_id}
                    )
                stack.pop().end_index = index
            else:
                siblings.append(ListEntry(index, item, meta))

        if stack:
            unclosed = stack[-1]
            raise RootListParseError(
                f"Folder '{unclosed.name}' starting at index {unclosed.start_index} is never closed",
                details={"index": unclosed.start_index, "folder_id": unclosed.folder_id}
            )

        return top

    def folders(self) -> Iterator[Folder]:
        """Every folder in the tree, depth first."""
        for node in self.folder_tree():
            if isinstance(node, Folder):
                yield from node.walk()

    def find_folder(self, name: str) -> Folder | None:
        """First folder (depth first) whose display name equals `name`."""
        for folder in self.folders():
            if folder.name == name:
                return folder
        return None
