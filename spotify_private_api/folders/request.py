"""
Request builder for root list changes.

FolderRequest records structural operations against a base revision and
renders them into a Changes envelope ready for submission.

The builder is a faithful, unchecked recorder. It does not validate
indices, operation order, or that every folder start marker gets a
matching end marker. Indices must be chosen by the caller knowing that
the server applies operations left to right, each against the list as
left by the previous one.

Usage:
    request = FolderRequest(root_list.revision)
    request.add("Workout", folder_id, 0, 1)   # empty folder at the top
    request.move(5, 1, 2)                     # pull two items into it
    changes = request.build()
"""

import logging
import time
from typing import Callable

from spotify_private_api.core.logger import get_logger
from spotify_private_api.folders.operations import (
    AddOperation,
    Changes,
    Delta,
    MoveOperation,
    Operation,
    OperationItem,
    OperationItemAttributes,
    RemoveOperation,
)
from spotify_private_api.folders.uris import (
    DEFAULT_NAMESPACE,
    folder_end_uri,
    folder_start_uri,
    playlist_uri,
)

logger = get_logger(__name__)


Clock = Callable[[], int]


def epoch_millis() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


class FolderRequest:
    """
    Builder for a single-delta changes submission.

    Attributes:
        revision: Base revision the operations are expressed against.
        namespace: URI namespace for inserted items.

    Example:
        changes = (
            FolderRequest("AAAAELqqrKuzaoeUKYP7gEzCzrx3h0rD")
            .add("TestFolder", "123456789abcdefa", 0, 2)
            .build()
        )
    """

    def __init__(
        self,
        revision: str,
        clock: Clock | None = None,
        namespace: str = DEFAULT_NAMESPACE
    ) -> None:
        """
        Args:
            revision: Base revision, echoed unchanged in the built payload.
            clock: Zero-argument callable returning epoch milliseconds.
                   Read once per inserted item, when the operation is queued.
                   Defaults to the system clock.
            namespace: URI namespace for inserted items.
        """
        self.revision = revision
        self.namespace = namespace
        self._clock = clock or epoch_millis
        self._ops: list[Operation] = []

    @property
    def operations(self) -> tuple[Operation, ...]:
        return tuple(self._ops)

    def __len__(self) -> int:
        return len(self._ops)

    def _new_item(self, uri: str) -> OperationItem:
        return OperationItem(uri, OperationItemAttributes(timestamp=str(self._clock())))

    def _queue(self, operation: Operation) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Queued {operation.KIND} {operation.params_to_api()}")
        self._ops.append(operation)

    def add(self, name: str, folder_id: str, start_index: int, end_index: int) -> "FolderRequest":
        """
        Queue a new folder as two ADD operations.

        The start marker is inserted at start_index first, then the end
        marker at end_index, in the index space left by the first insert.
        Use start_index + 1 for an empty folder, or a larger end_index to
        enclose the items that follow the start marker.

        Args:
            name: Folder display name.
            folder_id: Identifier for both markers (see RootList.generate_folder_uri).
            start_index: Position of the start marker.
            end_index: Position of the end marker after the start marker is in place.

        Returns:
            The builder, for chaining.
        """
        self._queue(AddOperation(
            from_index=start_index,
            items=(self._new_item(folder_start_uri(folder_id, name, self.namespace)),),
        ))
        self._queue(AddOperation(
            from_index=end_index,
            items=(self._new_item(folder_end_uri(folder_id, self.namespace)),),
        ))
        return self

    def add_playlist(self, playlist_id: str, index: int) -> "FolderRequest":
        """Queue an ADD inserting a playlist reference at index."""
        self._queue(AddOperation(
            from_index=index,
            items=(self._new_item(playlist_uri(playlist_id, self.namespace)),),
        ))
        return self

    def remove(self, start_index: int, length: int) -> "FolderRequest":
        """Queue a REM deleting `length` items starting at start_index."""
        self._queue(RemoveOperation(from_index=start_index, length=length))
        return self

    def move(self, from_index: int, to_index: int, length: int) -> "FolderRequest":
        """Queue a MOV relocating `length` items from from_index to to_index."""
        self._queue(MoveOperation(from_index=from_index, to_index=to_index, length=length))
        return self

    def build(self) -> Changes:
        """
        Render the queued operations into a Changes envelope.

        Non-destructive: the builder keeps accumulating afterwards, and
        each call returns an independent snapshot of the operations queued
        so far. Two calls with nothing queued in between return equal
        payloads.
        """
        return Changes(
            base_revision=self.revision,
            deltas=(Delta(ops=tuple(self._ops)),),
        )
