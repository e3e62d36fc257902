"""
Root list model and delta request builder.

This module is the synchronous core of the library:
    - identifiers: Collision-free folder identifier generation
    - uris: Playlist and folder marker URI conventions
    - models: RootList snapshot and derived folder tree
    - operations: ADD / REM / MOV operations and the Changes envelope
    - request: FolderRequest builder

Usage:
    from spotify_private_api.folders import RootList

    root_list = RootList.from_api(document)
    changes = (
        root_list.new_request()
        .add("New Folder", root_list.generate_folder_uri(), 0, 1)
        .build()
    )
    payload = changes.to_api()
"""

from spotify_private_api.folders.identifiers import (
    FOLDER_ID_ALPHABET,
    FOLDER_ID_LENGTH,
    FolderIdAllocator,
    generate_folder_id,
)
from spotify_private_api.folders.models import (
    Folder,
    ListEntry,
    RootList,
    RootListContents,
    RootListItem,
    RootListMetaItem,
)
from spotify_private_api.folders.operations import (
    AddOperation,
    Changes,
    Delta,
    DeltaInfo,
    DeltaInfoSource,
    MoveOperation,
    Operation,
    OperationItem,
    OperationItemAttributes,
    RemoveOperation,
)
from spotify_private_api.folders.request import FolderRequest
from spotify_private_api.folders.uris import ItemKind

__all__ = [
    # Identifiers
    "FOLDER_ID_ALPHABET",
    "FOLDER_ID_LENGTH",
    "FolderIdAllocator",
    "generate_folder_id",
    # Snapshot
    "RootList",
    "RootListContents",
    "RootListItem",
    "RootListMetaItem",
    "Folder",
    "ListEntry",
    "ItemKind",
    # Operations
    "Operation",
    "AddOperation",
    "RemoveOperation",
    "MoveOperation",
    "OperationItem",
    "OperationItemAttributes",
    "Delta",
    "DeltaInfo",
    "DeltaInfoSource",
    "Changes",
    # Builder
    "FolderRequest",
]
