"""
Delta operation model and the changes submission envelope.

A submission ("changes") carries a base revision and one delta. The delta
holds an ordered list of structural operations plus provenance info.
The server applies the operations left to right, each against the index
space produced by the previous operation of the same delta.

Wire shapes, tagged by "kind" and nested under the lower-cased tag:

    {"kind": "ADD", "add": {"fromIndex", "items", "addLast", "addFirst"}}
    {"kind": "REM", "rem": {"fromIndex", "length", "items", "itemsAsKey"}}
    {"kind": "MOV", "mov": {"fromIndex", "toIndex", "length"}}

All models are frozen dataclasses holding tuples, so a built Changes
object can be handed around without later builder calls affecting it.
Keys a model does not know are kept in its `extra` dict (excluded from
equality, copied in and out) and written back on serialization, so a
payload read from the server survives a round trip unchanged.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from spotify_private_api.core.exceptions import ChangesParseError
from spotify_private_api.folders.fields import (
    extra_fields,
    opaque,
    optional,
    put_extra,
    require,
    require_mapping,
)


WEBPLAYER_CLIENT = "WEBPLAYER"

_ATTRIBUTE_KEYS = frozenset({"addedBy", "timestamp", "seenAt", "public", "formatAttributes"})
_ITEM_KEYS = frozenset({"uri", "attributes"})
_ADD_KEYS = frozenset({"fromIndex", "items", "addLast", "addFirst"})
_REM_KEYS = frozenset({"fromIndex", "length", "items", "itemsAsKey"})
_MOV_KEYS = frozenset({"fromIndex", "toIndex", "length"})
_SOURCE_KEYS = frozenset({"client", "app", "source", "version"})
_INFO_KEYS = frozenset({
    "user", "timestamp", "admin", "undo", "redo", "merge",
    "compressed", "migration", "splitId", "source",
})
_DELTA_KEYS = frozenset({"ops", "info"})
_CHANGES_KEYS = frozenset({
    "baseRevision", "deltas", "wantResultingRevisions", "wantSyncResult", "nonces",
})


@dataclass(frozen=True)
class OperationItemAttributes:
    """
    Creation attributes stamped on every inserted item.

    Attributes:
        timestamp: Creation time in epoch milliseconds, as a string.
        added_by: Username of the creator. Left empty by this client.
        seen_at: Last-seen marker. Always "0" for new items.
        public: Visibility flag. New folder markers are never public.
        format_attributes: Opaque format attributes, empty for new items.
    """
    timestamp: str
    added_by: str = ""
    seen_at: str = "0"
    public: bool = False
    format_attributes: tuple[Any, ...] = ()
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    def to_api(self) -> dict[str, Any]:
        result = {
            "addedBy": self.added_by,
            "timestamp": self.timestamp,
            "seenAt": self.seen_at,
            "public": self.public,
            "formatAttributes": copy.deepcopy(list(self.format_attributes)),
        }
        put_extra(result, self.extra)
        return result

    @classmethod
    def from_api(cls, document: Any, path: str = "attributes") -> "OperationItemAttributes":
        document = require_mapping(document, path, ChangesParseError)
        return cls(
            timestamp=require(document, "timestamp", str, path, ChangesParseError),
            added_by=optional(document, "addedBy", str, path, ChangesParseError) or "",
            seen_at=optional(document, "seenAt", str, path, ChangesParseError) or "0",
            public=bool(optional(document, "public", bool, path, ChangesParseError)),
            format_attributes=tuple(
                opaque(document, "formatAttributes", list, path, ChangesParseError) or ()
            ),
            extra=extra_fields(document, _ATTRIBUTE_KEYS),
        )


@dataclass(frozen=True)
class OperationItem:
    """An item inserted by an ADD operation."""
    uri: str
    attributes: OperationItemAttributes
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    def to_api(self) -> dict[str, Any]:
        result = {"uri": self.uri, "attributes": self.attributes.to_api()}
        put_extra(result, self.extra)
        return result

    @classmethod
    def from_api(cls, document: Any, path: str = "item") -> "OperationItem":
        document = require_mapping(document, path, ChangesParseError)
        return cls(
            uri=require(document, "uri", str, path, ChangesParseError),
            attributes=OperationItemAttributes.from_api(
                require(document, "attributes", dict, path, ChangesParseError),
                f"{path}.attributes",
            ),
            extra=extra_fields(document, _ITEM_KEYS),
        )


# Every operation carries two extra dicts: `extra` for unknown keys of its
# parameter object, `envelope_extra` for unknown keys next to "kind".

@dataclass(frozen=True)
class AddOperation:
    """Insert `items` so that the first one lands at `from_index`."""
    KIND: ClassVar[str] = "ADD"

    from_index: int
    items: tuple[OperationItem, ...]
    add_last: bool = False
    add_first: bool = False
    extra: dict[str, Any] = field(default_factory=dict, compare=False)
    envelope_extra: dict[str, Any] = field(default_factory=dict, compare=False)

    def params_to_api(self) -> dict[str, Any]:
        result = {
            "fromIndex": self.from_index,
            "items": [item.to_api() for item in self.items],
            "addLast": self.add_last,
            "addFirst": self.add_first,
        }
        put_extra(result, self.extra)
        return result

    @classmethod
    def params_from_api(
        cls,
        params: dict[str, Any],
        path: str,
        envelope_extra: dict[str, Any]
    ) -> "AddOperation":
        items = require(params, "items", list, path, ChangesParseError)
        return cls(
            from_index=optional(params, "fromIndex", int, path, ChangesParseError) or 0,
            items=tuple(
                OperationItem.from_api(item, f"{path}.items[{i}]") for i, item in enumerate(items)
            ),
            add_last=bool(optional(params, "addLast", bool, path, ChangesParseError)),
            add_first=bool(optional(params, "addFirst", bool, path, ChangesParseError)),
            extra=extra_fields(params, _ADD_KEYS),
            envelope_extra=envelope_extra,
        )


@dataclass(frozen=True)
class RemoveOperation:
    """Delete `length` consecutive items starting at `from_index`."""
    KIND: ClassVar[str] = "REM"

    from_index: int
    length: int
    items: tuple[Any, ...] = ()
    items_as_key: bool = False
    extra: dict[str, Any] = field(default_factory=dict, compare=False)
    envelope_extra: dict[str, Any] = field(default_factory=dict, compare=False)

    def params_to_api(self) -> dict[str, Any]:
        result = {
            "fromIndex": self.from_index,
            "length": self.length,
            "items": copy.deepcopy(list(self.items)),
            "itemsAsKey": self.items_as_key,
        }
        put_extra(result, self.extra)
        return result

    @classmethod
    def params_from_api(
        cls,
        params: dict[str, Any],
        path: str,
        envelope_extra: dict[str, Any]
    ) -> "RemoveOperation":
        return cls(
            from_index=optional(params, "fromIndex", int, path, ChangesParseError) or 0,
            length=require(params, "length", int, path, ChangesParseError),
            items=tuple(opaque(params, "items", list, path, ChangesParseError) or ()),
            items_as_key=bool(optional(params, "itemsAsKey", bool, path, ChangesParseError)),
            extra=extra_fields(params, _REM_KEYS),
            envelope_extra=envelope_extra,
        )


@dataclass(frozen=True)
class MoveOperation:
    """Relocate `length` consecutive items from `from_index` to `to_index`."""
    KIND: ClassVar[str] = "MOV"

    from_index: int
    to_index: int
    length: int
    extra: dict[str, Any] = field(default_factory=dict, compare=False)
    envelope_extra: dict[str, Any] = field(default_factory=dict, compare=False)

    def params_to_api(self) -> dict[str, Any]:
        result = {
            "fromIndex": self.from_index,
            "toIndex": self.to_index,
            "length": self.length,
        }
        put_extra(result, self.extra)
        return result

    @classmethod
    def params_from_api(
        cls,
        params: dict[str, Any],
        path: str,
        envelope_extra: dict[str, Any]
    ) -> "MoveOperation":
        return cls(
            from_index=optional(params, "fromIndex", int, path, ChangesParseError) or 0,
            to_index=require(params, "toIndex", int, path, ChangesParseError),
            length=require(params, "length", int, path, ChangesParseError),
            extra=extra_fields(params, _MOV_KEYS),
            envelope_extra=envelope_extra,
        )


Operation = Union[AddOperation, RemoveOperation, MoveOperation]

OPERATION_TYPES: dict[str, type] = {
    op_type.KIND: op_type for op_type in (AddOperation, RemoveOperation, MoveOperation)
}


def operation_to_api(operation: Operation) -> dict[str, Any]:
    """Serialize an operation with its kind tag and nested parameter object."""
    result = {
        "kind": operation.KIND,
        operation.KIND.lower(): operation.params_to_api(),
    }
    put_extra(result, operation.envelope_extra)
    return result


def operation_from_api(document: Any, path: str = "op") -> Operation:
    """
    Deserialize a tagged operation.

    Raises:
        ChangesParseError: If the kind is unknown or its parameters are
                           missing or malformed.
    """
    document = require_mapping(document, path, ChangesParseError)
    kind = require(document, "kind", str, path, ChangesParseError)

    op_type = OPERATION_TYPES.get(kind)
    if op_type is None:
        raise ChangesParseError(
            f"Unknown operation kind '{kind}' at '{path}'",
            details={"field": f"{path}.kind", "kind": kind}
        )

    key = kind.lower()
    params = require(document, key, dict, path, ChangesParseError)
    envelope_extra = extra_fields(document, frozenset({"kind", key}))
    return op_type.params_from_api(params, f"{path}.{key}", envelope_extra)


@dataclass(frozen=True)
class DeltaInfoSource:
    """Client identity reported with a delta."""
    client: str = WEBPLAYER_CLIENT
    app: str = ""
    source: str = ""
    version: str = ""
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    def to_api(self) -> dict[str, Any]:
        result = {
            "client": self.client,
            "app": self.app,
            "source": self.source,
            "version": self.version,
        }
        put_extra(result, self.extra)
        return result

    @classmethod
    def from_api(cls, document: Any, path: str = "source") -> "DeltaInfoSource":
        document = require_mapping(document, path, ChangesParseError)
        return cls(
            client=optional(document, "client", str, path, ChangesParseError) or WEBPLAYER_CLIENT,
            app=optional(document, "app", str, path, ChangesParseError) or "",
            source=optional(document, "source", str, path, ChangesParseError) or "",
            version=optional(document, "version", str, path, ChangesParseError) or "",
            extra=extra_fields(document, _SOURCE_KEYS),
        )


@dataclass(frozen=True)
class DeltaInfo:
    """
    Provenance of a delta.

    This client only originates fresh edits, so every flag stays at its
    neutral value. The flags are still modelled so that deltas read back
    from the server keep them.
    """
    user: str = ""
    timestamp: str = "0"
    admin: bool = False
    undo: bool = False
    redo: bool = False
    merge: bool = False
    compressed: bool = False
    migration: bool = False
    split_id: int = 0
    source: DeltaInfoSource = field(default_factory=DeltaInfoSource)
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    def to_api(self) -> dict[str, Any]:
        result = {
            "user": self.user,
            "timestamp": self.timestamp,
            "admin": self.admin,
            "undo": self.undo,
            "redo": self.redo,
            "merge": self.merge,
            "compressed": self.compressed,
            "migration": self.migration,
            "splitId": self.split_id,
            "source": self.source.to_api(),
        }
        put_extra(result, self.extra)
        return result

    @classmethod
    def from_api(cls, document: Any, path: str = "info") -> "DeltaInfo":
        document = require_mapping(document, path, ChangesParseError)

        def flag(key: str) -> bool:
            return bool(optional(document, key, bool, path, ChangesParseError))

        def text(key: str, default: str) -> str:
            value = optional(document, key, str, path, ChangesParseError)
            return default if value is None else value

        source = optional(document, "source", dict, path, ChangesParseError)
        return cls(
            user=text("user", ""),
            timestamp=text("timestamp", "0"),
            admin=flag("admin"),
            undo=flag("undo"),
            redo=flag("redo"),
            merge=flag("merge"),
            compressed=flag("compressed"),
            migration=flag("migration"),
            split_id=optional(document, "splitId", int, path, ChangesParseError) or 0,
            source=(
                DeltaInfoSource() if source is None
                else DeltaInfoSource.from_api(source, f"{path}.source")
            ),
            extra=extra_fields(document, _INFO_KEYS),
        )


@dataclass(frozen=True)
class Delta:
    """One atomic batch of ordered operations."""
    ops: tuple[Operation, ...] = ()
    info: DeltaInfo = field(default_factory=DeltaInfo)
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    def to_api(self) -> dict[str, Any]:
        result = {
            "ops": [operation_to_api(op) for op in self.ops],
            "info": self.info.to_api(),
        }
        put_extra(result, self.extra)
        return result

    @classmethod
    def from_api(cls, document: Any, path: str = "delta") -> "Delta":
        document = require_mapping(document, path, ChangesParseError)
        ops = require(document, "ops", list, path, ChangesParseError)
        info = optional(document, "info", dict, path, ChangesParseError)
        return cls(
            ops=tuple(operation_from_api(op, f"{path}.ops[{i}]") for i, op in enumerate(ops)),
            info=DeltaInfo() if info is None else DeltaInfo.from_api(info, f"{path}.info"),
            extra=extra_fields(document, _DELTA_KEYS),
        )


@dataclass(frozen=True)
class Changes:
    """
    Submission envelope for a delta against a base revision.

    Attributes:
        base_revision: Revision of the snapshot the delta was built from.
                       The server rejects the delta if the list has moved on.
        deltas: The deltas to apply. This client always sends exactly one.
        want_resulting_revisions: Ask the server to report resulting revisions.
                                  Not supported by this client; always False.
        want_sync_result: Ask the server for a sync result. Always False.
        nonces: Opaque nonce values, passed through untouched.
        extra: Unmodelled top-level keys, written back unchanged.

    Example:
        changes = root_list.new_request().remove(3, 1).build()
        json.dumps(changes.to_api())
    """
    base_revision: str
    deltas: tuple[Delta, ...] = ()
    want_resulting_revisions: bool = False
    want_sync_result: bool = False
    nonces: tuple[Any, ...] = ()
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def operations(self) -> tuple[Operation, ...]:
        """All operations of all deltas, in application order."""
        return tuple(op for delta in self.deltas for op in delta.ops)

    def to_api(self) -> dict[str, Any]:
        result = {
            "baseRevision": self.base_revision,
            "deltas": [delta.to_api() for delta in self.deltas],
            "wantResultingRevisions": self.want_resulting_revisions,
            "wantSyncResult": self.want_sync_result,
            "nonces": copy.deepcopy(list(self.nonces)),
        }
        put_extra(result, self.extra)
        return result

    @classmethod
    def from_api(cls, document: Any) -> "Changes":
        """
        Deserialize a changes payload.

        Raises:
            ChangesParseError: If 'baseRevision' or 'deltas' is missing, or any
                               delta or operation is malformed.
        """
        document = require_mapping(document, "changes", ChangesParseError)
        deltas = require(document, "deltas", list, "", ChangesParseError)
        return cls(
            base_revision=require(document, "baseRevision", str, "", ChangesParseError),
            deltas=tuple(Delta.from_api(d, f"deltas[{i}]") for i, d in enumerate(deltas)),
            want_resulting_revisions=bool(
                optional(document, "wantResultingRevisions", bool, "", ChangesParseError)
            ),
            want_sync_result=bool(optional(document, "wantSyncResult", bool, "", ChangesParseError)),
            nonces=tuple(opaque(document, "nonces", list, "", ChangesParseError) or ()),
            extra=extra_fields(document, _CHANGES_KEYS),
        )
