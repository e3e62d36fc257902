"""Test operation and changes deserialization"""

import pytest

from spotify_private_api.core.exceptions import ChangesParseError
from spotify_private_api.folders.operations import (
    AddOperation,
    Changes,
    DeltaInfo,
    MoveOperation,
    RemoveOperation,
    operation_from_api,
    operation_to_api,
)
from spotify_private_api.folders.request import FolderRequest

from conftest import REVISION


class TestOperationFromApi:
    """Test operation_from_api"""

    def test_move(self):
        op = operation_from_api({"kind": "MOV", "mov": {"fromIndex": 6, "toIndex": 8, "length": 1}})
        assert op == MoveOperation(from_index=6, to_index=8, length=1)

    def test_remove_defaults(self):
        op = operation_from_api({"kind": "REM", "rem": {"fromIndex": 3, "length": 2}})
        assert op == RemoveOperation(from_index=3, length=2)

    def test_add_items(self):
        op = operation_from_api({
            "kind": "ADD",
            "add": {
                "fromIndex": 1,
                "items": [{"uri": "spotify:playlist:abc", "attributes": {"timestamp": "5"}}],
            },
        })

        assert isinstance(op, AddOperation)
        assert op.from_index == 1
        assert op.items[0].uri == "spotify:playlist:abc"
        assert op.items[0].attributes.timestamp == "5"
        assert op.items[0].attributes.seen_at == "0"
        assert op.add_last is False

    def test_zero_from_index_may_be_omitted(self):
        op = operation_from_api({"kind": "MOV", "mov": {"toIndex": 2, "length": 1}})
        assert op.from_index == 0

    def test_unknown_kind(self):
        with pytest.raises(ChangesParseError, match="Unknown operation kind 'UPDATE_ITEM_ATTRIBUTES'"):
            operation_from_api({"kind": "UPDATE_ITEM_ATTRIBUTES"})

    def test_params_must_sit_under_kind_key(self):
        with pytest.raises(ChangesParseError, match="op.mov"):
            operation_from_api({"kind": "MOV", "fromIndex": 1, "toIndex": 2, "length": 1})

    def test_round_trip_through_tagged_form(self):
        op = RemoveOperation(from_index=4, length=3)
        assert operation_from_api(operation_to_api(op)) == op


class TestChangesFromApi:
    """Test Changes.from_api"""

    def test_reads_back_built_payload(self, fixed_clock):
        built = (
            FolderRequest(REVISION, clock=fixed_clock)
            .add("TestFolder", "123456789abcdefa", 0, 2)
            .move(6, 8, 1)
            .build()
        )

        assert Changes.from_api(built.to_api()) == built

    def test_info_defaults_when_absent(self):
        changes = Changes.from_api({
            "baseRevision": REVISION,
            "deltas": [{"ops": [{"kind": "REM", "rem": {"fromIndex": 0, "length": 1}}]}],
        })

        assert changes.deltas[0].info == DeltaInfo()
        assert changes.want_sync_result is False
        assert changes.nonces == ()

    def test_info_flags_are_kept(self):
        changes = Changes.from_api({
            "baseRevision": REVISION,
            "deltas": [{"ops": [], "info": {"undo": True, "source": {"client": "DESKTOP"}}}],
        })

        info = changes.deltas[0].info
        assert info.undo is True
        assert info.source.client == "DESKTOP"
        assert info.timestamp == "0"

    def test_unknown_keys_round_trip(self, fixed_clock):
        document = (
            FolderRequest(REVISION, clock=fixed_clock)
            .add("TestFolder", "123456789abcdefa", 0, 2)
            .remove(5, 1)
            .move(6, 8, 1)
            .build()
            .to_api()
        )
        document["futureTop"] = 1
        document["deltas"][0]["futureDelta"] = [1, 2]
        document["deltas"][0]["info"]["extraInfo"] = {"a": "b"}
        document["deltas"][0]["info"]["source"]["build"] = "x"
        ops = document["deltas"][0]["ops"]
        ops[0]["add"]["items"][0]["attributes"]["futureAttr"] = "y"
        ops[0]["add"]["items"][0]["rank"] = 2
        ops[1]["priority"] = "high"
        ops[2]["rem"]["futureRem"] = None
        ops[3]["mov"]["futureKey"] = 7

        assert Changes.from_api(document).to_api() == document

    def test_unknown_keys_are_copied(self):
        document = {
            "baseRevision": REVISION,
            "deltas": [{"ops": [{"kind": "MOV", "mov": {"toIndex": 2, "length": 1, "hint": {"n": 1}}}]}],
            "nonces": [{"id": 1}],
        }
        changes = Changes.from_api(document)

        document["deltas"][0]["ops"][0]["mov"]["hint"]["n"] = 99
        document["nonces"][0]["id"] = 99
        changes.to_api()["deltas"][0]["ops"][0]["mov"]["hint"]["n"] = 42

        assert changes.operations[0].extra == {"hint": {"n": 1}}
        assert changes.to_api()["nonces"] == [{"id": 1}]

    def test_missing_base_revision(self):
        with pytest.raises(ChangesParseError) as exc_info:
            Changes.from_api({"deltas": []})
        assert exc_info.value.details["field"] == "baseRevision"

    def test_bad_operation_path(self):
        with pytest.raises(ChangesParseError, match=r"deltas\[0\].ops\[1\]"):
            Changes.from_api({
                "baseRevision": REVISION,
                "deltas": [{"ops": [
                    {"kind": "REM", "rem": {"length": 1}},
                    {"kind": "BOGUS"},
                ]}],
            })
