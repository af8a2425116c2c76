"""
Table Normalization Tests
=========================

INVARIANTS TESTED:
1. The index is exactly the hash projection of the ordered records
2. Duplicate hashes are stored once (first occurrence wins)
3. Merging keeps old order and appends unseen records in arrival order
4. An unchanged merge returns the very same Table object
"""

import pytest

from relstore.contracts.errors import (
    HashMissingError, MissingDataError, WrongDataTypeError
)
from relstore.hashing import JsonHasher
from relstore.normalization import build_table, merge_tables, normalize


@pytest.fixture
def hasher():
    return JsonHasher()


def hashed_table(hasher, records, **properties):
    raw = dict(properties)
    raw["_data"] = records
    return hasher.apply({"t": raw})["t"]


class TestNormalize:

    def test_indexes_records_by_hash(self, hasher):
        raw = hashed_table(hasher, [{"a": 1}, {"a": 2}])

        index = normalize(raw, "t")

        assert list(index) == [r["_hash"] for r in raw["_data"]]
        assert index[raw["_data"][1]["_hash"]]["a"] == 2

    def test_missing_data(self):
        with pytest.raises(MissingDataError):
            normalize({}, "t")

    def test_data_must_be_a_list(self):
        with pytest.raises(WrongDataTypeError):
            normalize({"_data": {"a": 1}}, "t")

    def test_records_must_be_objects(self):
        with pytest.raises(WrongDataTypeError):
            normalize({"_data": ["a"]}, "t")

    def test_records_must_be_hashed(self):
        with pytest.raises(HashMissingError) as exc_info:
            normalize({"_data": [{"a": 1}]}, "t")

        assert exc_info.value.context_value("path") == "t/_data/0"


class TestBuildTable:

    def test_index_matches_records(self, hasher):
        table = build_table("t", hashed_table(hasher, [{"a": 1}, {"a": 2}]), hasher)

        assert len(table) == 2
        assert list(table.index) == list(table.hashes)
        for record in table.records:
            assert table.index[record["_hash"]] is record

    def test_duplicates_are_collapsed(self, hasher):
        table = build_table("t", hashed_table(hasher, [{"a": 1}, {"a": 2}, {"a": 1}]), hasher)

        assert [r["a"] for r in table] == [1, 2]

    def test_records_are_read_only(self, hasher):
        table = build_table("t", hashed_table(hasher, [{"a": [1, 2]}]), hasher)
        record = table.records[0]

        with pytest.raises(TypeError):
            record["a"] = 3
        assert record["a"] == (1, 2)

    def test_table_hash_matches_hasher(self, hasher):
        raw = hashed_table(hasher, [{"a": 1}], description="numbers")

        table = build_table("t", raw, hasher)

        assert table.hash == raw["_hash"]
        assert table.properties["description"] == "numbers"


class TestMergeTables:

    def test_appends_unseen_records_in_arrival_order(self, hasher):
        old = build_table("t", hashed_table(hasher, [{"a": 0}, {"a": 1}]), hasher)
        new = build_table("t", hashed_table(hasher, [{"a": 3}, {"a": 0}, {"a": 2}]), hasher)

        merged = merge_tables(old, new, hasher)

        assert [r["a"] for r in merged] == [0, 1, 3, 2]
        assert list(merged.index) == list(merged.hashes)

    def test_merge_does_not_touch_inputs(self, hasher):
        old = build_table("t", hashed_table(hasher, [{"a": 0}]), hasher)
        new = build_table("t", hashed_table(hasher, [{"a": 1}]), hasher)

        merge_tables(old, new, hasher)

        assert [r["a"] for r in old] == [0]
        assert len(old.index) == 1

    def test_unchanged_merge_returns_same_table(self, hasher):
        old = build_table("t", hashed_table(hasher, [{"a": 0}, {"a": 1}]), hasher)
        new = build_table("t", hashed_table(hasher, [{"a": 1}]), hasher)

        assert merge_tables(old, new, hasher) is old

    def test_incoming_properties_override(self, hasher):
        old = build_table("t", hashed_table(hasher, [], label="old"), hasher)
        new = build_table("t", hashed_table(hasher, [], label="new"), hasher)

        merged = merge_tables(old, new, hasher)

        assert merged.properties["label"] == "new"
        assert merged.hash != old.hash

    def test_merged_hash_matches_fresh_table(self, hasher):
        old = build_table("t", hashed_table(hasher, [{"a": 0}]), hasher)
        new = build_table("t", hashed_table(hasher, [{"a": 1}]), hasher)
        fresh = build_table("t", hashed_table(hasher, [{"a": 0}, {"a": 1}]), hasher)

        assert merge_tables(old, new, hasher) == fresh
