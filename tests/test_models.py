"""Test the root list snapshot model"""

import pytest

from spotify_private_api.core.exceptions import RootListParseError
from spotify_private_api.folders.identifiers import is_folder_id
from spotify_private_api.folders.models import Folder, ListEntry, RootList
from spotify_private_api.folders.request import FolderRequest
from spotify_private_api.folders.uris import ItemKind

from conftest import REVISION


class TestRootListDeserialization:
    """Test RootList.from_api"""

    def test_parses_server_document(self, root_list_document):
        root_list = RootList.from_api(root_list_document)

        assert root_list.revision == REVISION
        assert root_list.length == 4
        assert root_list.timestamp == "1665495078416"
        assert len(root_list) == 4
        assert [item.kind for item in root_list.items] == [
            ItemKind.FOLDER_START,
            ItemKind.FOLDER_END,
            ItemKind.PLAYLIST,
            ItemKind.PLAYLIST,
        ]

    def test_meta_items_align_with_items(self, root_list_document):
        root_list = RootList.from_api(root_list_document)

        assert len(root_list.meta_items) == len(root_list.items)
        # Folder markers carry empty meta records
        assert root_list.meta_items[0].revision is None
        assert root_list.meta_items[0].attributes is None
        assert root_list.meta_items[2].name == "My Playlist #2"
        assert root_list.meta_items[3].owner_username == "31h5mfzvglpwfevvaens2flw7smu"
        assert root_list.meta_items[3].length == 1

    def test_partial_meta_item(self, root_list_document):
        root_list_document["contents"]["metaItems"][2] = {"ownerUsername": "someone"}

        meta = RootList.from_api(root_list_document).meta_items[2]

        assert meta.owner_username == "someone"
        assert meta.revision is None
        assert meta.length is None
        assert meta.name is None

    def test_missing_meta_items_reads_as_empty(self, root_list_document):
        del root_list_document["contents"]["metaItems"]

        root_list = RootList.from_api(root_list_document)

        assert len(root_list.meta_items) == 4
        assert all(meta.revision is None for meta in root_list.meta_items)
        assert "metaItems" not in root_list.to_api()["contents"]

    def test_folder_marker_properties(self, root_list_document):
        start, end, playlist, _ = RootList.from_api(root_list_document).items

        assert start.folder_id == "123456789abcdefa"
        assert start.folder_name == "Abablagan"
        assert end.folder_id == "123456789abcdefa"
        assert playlist.is_playlist
        assert playlist.folder_id is None

    @pytest.mark.parametrize("missing", ["revision", "contents"])
    def test_missing_required_top_level_field(self, root_list_document, missing):
        del root_list_document[missing]

        with pytest.raises(RootListParseError) as exc_info:
            RootList.from_api(root_list_document)

        assert exc_info.value.details["field"] == missing

    def test_missing_items(self, root_list_document):
        del root_list_document["contents"]["items"]

        with pytest.raises(RootListParseError, match="contents.items"):
            RootList.from_api(root_list_document)

    def test_item_without_uri(self, root_list_document):
        del root_list_document["contents"]["items"][2]["uri"]

        with pytest.raises(RootListParseError, match=r"contents.items\[2\].uri"):
            RootList.from_api(root_list_document)

    def test_wrong_field_type(self, root_list_document):
        root_list_document["length"] = "four"

        with pytest.raises(RootListParseError, match="length"):
            RootList.from_api(root_list_document)

    def test_bool_is_not_an_int(self, root_list_document):
        root_list_document["contents"]["pos"] = True

        with pytest.raises(RootListParseError):
            RootList.from_api(root_list_document)

    def test_misaligned_meta_items(self, root_list_document):
        root_list_document["contents"]["metaItems"].pop()

        with pytest.raises(RootListParseError, match="metaItems"):
            RootList.from_api(root_list_document)

    def test_not_an_object(self):
        with pytest.raises(RootListParseError):
            RootList.from_api(["not", "a", "document"])


class TestRootListRoundTrip:
    """Test RootList.to_api"""

    def test_round_trip_is_lossless(self, root_list_document):
        assert RootList.from_api(root_list_document).to_api() == root_list_document

    def test_absent_optional_fields_stay_absent(self, nested_root_list_document):
        document = RootList.from_api(nested_root_list_document).to_api()

        assert document == nested_root_list_document
        assert "length" not in document
        assert "timestamp" not in document
        assert "pos" not in document["contents"]

    def test_unknown_fields_are_preserved(self, root_list_document):
        root_list_document["nonces"] = ["n1"]
        root_list_document["contents"]["futureFlag"] = {"x": 1}
        root_list_document["contents"]["items"][0]["rank"] = 3
        root_list_document["contents"]["metaItems"][2]["collaborative"] = True

        document = RootList.from_api(root_list_document).to_api()

        assert document["nonces"] == ["n1"]
        assert document["contents"]["futureFlag"] == {"x": 1}
        assert document["contents"]["items"][0]["rank"] == 3
        assert document["contents"]["metaItems"][2]["collaborative"] is True

    def test_snapshot_is_detached_from_input_document(self, root_list_document):
        root_list_document["contents"]["futureFlag"] = {"x": 1}
        root_list = RootList.from_api(root_list_document)

        root_list_document["contents"]["items"][0]["attributes"]["timestamp"] = "MUTATED"
        root_list_document["contents"]["metaItems"][2]["attributes"]["name"] = "Renamed"
        root_list_document["attributes"]["extra"] = True
        root_list_document["contents"]["futureFlag"]["x"] = 2

        assert root_list.items[0].attributes["timestamp"] == "1665495078416"
        assert root_list.meta_items[2].name == "My Playlist #2"
        assert root_list.attributes == {}
        assert root_list.contents.extra == {"futureFlag": {"x": 1}}

    def test_serialized_document_is_detached_from_snapshot(self, root_list_document):
        root_list = RootList.from_api(root_list_document)

        document = root_list.to_api()
        document["contents"]["metaItems"][2]["attributes"]["name"] = "Hijacked"
        document["contents"]["items"][0]["attributes"]["public"] = True

        assert root_list.meta_items[2].name == "My Playlist #2"
        assert root_list.items[0].attributes["public"] is False
        assert root_list.to_api() == root_list_document

    def test_snapshots_are_unhashable(self, root_list_document):
        root_list = RootList.from_api(root_list_document)

        with pytest.raises(TypeError):
            hash(root_list)
        with pytest.raises(TypeError):
            hash(root_list.items[0])


class TestGenerateFolderUri:
    """Test RootList.generate_folder_uri"""

    def test_generates_valid_identifier(self, root_list_document):
        folder_id = RootList.from_api(root_list_document).generate_folder_uri()

        assert is_folder_id(folder_id)
        assert folder_id != "123456789abcdefa"

    def test_existing_folder_ids_are_in_use(self, root_list_document):
        root_list = RootList.from_api(root_list_document)

        assert "123456789abcdefa" in root_list.folder_ids
        assert "spotify:playlist:5aNzxEEkRE9MgNkiuXmpOR" in root_list.folder_ids

    def test_remembers_generated_ids_per_instance(self, root_list_document):
        root_list = RootList.from_api(root_list_document)

        generated = [root_list.generate_folder_uri() for _ in range(20)]

        assert len(set(generated)) == 20
        assert root_list.folder_ids.generated == generated

    def test_memo_is_not_shared_between_instances(self, root_list_document):
        first = RootList.from_api(root_list_document)
        second = RootList.from_api(root_list_document)

        first.generate_folder_uri()

        assert second.folder_ids.generated == []
        # The allocator takes no part in equality
        assert first == second


class TestNewRequest:
    """Test RootList.new_request"""

    def test_seeded_with_revision(self, root_list_document):
        request = RootList.from_api(root_list_document).new_request()

        assert isinstance(request, FolderRequest)
        assert request.build().base_revision == REVISION

    def test_passes_clock(self, root_list_document, fixed_clock):
        root_list = RootList.from_api(root_list_document)

        changes = root_list.new_request(clock=fixed_clock).add_playlist("abc", 0).build()

        assert changes.operations[0].items[0].attributes.timestamp == "1665582465479"

    def test_index_of(self, root_list_document):
        root_list = RootList.from_api(root_list_document)

        assert root_list.index_of("spotify:playlist:3FKTkhbClLGgKdPpbx3aHy") == 3
        assert root_list.index_of("spotify:playlist:missing") is None


class TestFolderTree:
    """Test the derived hierarchical view"""

    def test_flat_document(self, root_list_document):
        tree = RootList.from_api(root_list_document).folder_tree()

        assert len(tree) == 3
        folder, first, second = tree
        assert isinstance(folder, Folder)
        assert folder.name == "Abablagan"
        assert (folder.start_index, folder.end_index, folder.span) == (0, 1, 2)
        assert folder.children == []
        assert isinstance(first, ListEntry)
        assert first.index == 2
        assert first.name == "My Playlist #2"
        assert second.name == "My Playlist #1"

    def test_nested_folders(self, nested_root_list_document):
        root_list = RootList.from_api(nested_root_list_document)
        tree = root_list.folder_tree()

        assert [type(node) for node in tree] == [ListEntry, Folder, ListEntry]
        outer = tree[1]
        assert outer.name == "Outer"
        assert (outer.start_index, outer.end_index) == (1, 6)
        assert isinstance(outer.children[0], ListEntry)
        inner = outer.children[1]
        assert inner.name == "Inner"
        assert (inner.start_index, inner.end_index) == (3, 5)
        assert [entry.item.uri for entry in inner.children] == ["spotify:playlist:inner1"]

        assert [f.name for f in root_list.folders()] == ["Outer", "Inner"]
        assert root_list.find_folder("Inner").start_index == 3
        assert root_list.find_folder("Nope") is None

    def test_entry_without_meta_name_falls_back_to_uri(self, nested_root_list_document):
        tree = RootList.from_api(nested_root_list_document).folder_tree()
        assert tree[0].name == "spotify:playlist:top"

    def test_unmatched_end_marker(self):
        root_list = RootList.from_api({
            "revision": "r",
            "contents": {"items": [{"uri": "spotify:end-group:aaaaaaaaaaaaaaaa"}]},
        })

        with pytest.raises(RootListParseError, match="Unbalanced"):
            root_list.folder_tree()

    def test_crossed_markers(self):
        root_list = RootList.from_api({
            "revision": "r",
            "contents": {"items": [
                {"uri": "spotify:start-group:aaaaaaaaaaaaaaaa:A"},
                {"uri": "spotify:start-group:bbbbbbbbbbbbbbbb:B"},
                {"uri": "spotify:end-group:aaaaaaaaaaaaaaaa"},
                {"uri": "spotify:end-group:bbbbbbbbbbbbbbbb"},
            ]},
        })

        with pytest.raises(RootListParseError):
            root_list.folder_tree()

    def test_unclosed_folder(self):
        root_list = RootList.from_api({
            "revision": "r",
            "contents": {"items": [{"uri": "spotify:start-group:aaaaaaaaaaaaaaaa:Open"}]},
        })

        with pytest.raises(RootListParseError, match="never closed"):
            root_list.folder_tree()
