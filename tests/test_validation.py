"""
Validation Layer Tests
======================

INVARIANTS TESTED:
1. Naming rules: letters and digits, no leading digit, no `Ref` suffix
2. Bulk reporting: one error lists every offending table
3. Missing `_data` is reported before malformed `_data`
4. The root `_hash` key is never treated as a table
"""

import pytest

from relstore.contracts.base import ErrorCode
from relstore.contracts.errors import (
    InvalidNameError, MissingDataError, WrongDataTypeError
)
from relstore.validation import (
    name_violations,
    validate_table_name,
    validate_table_names,
    validate_structure,
    validate_table_set,
    table_violations,
)


class TestTableNames:

    @pytest.mark.parametrize("name", ["tableA", "a", "a0", "Table123", "refs", "R"])
    def test_valid_names(self, name):
        validate_table_name(name)
        assert name_violations(name) == ()

    @pytest.mark.parametrize("name", [
        "", "table-a", "table a", "_hash", "tableÄ", "1table", "tableRef", "Ref",
        "tableA\n", "tabRef\n", "\ntableA",
    ])
    def test_invalid_names(self, name):
        with pytest.raises(InvalidNameError):
            validate_table_name(name)

    def test_every_broken_rule_is_listed(self):
        assert name_violations("1tableRef") == (
            "must not start with a number",
            "must not end with 'Ref'",
        )

    def test_non_string_name_is_invalid(self):
        assert name_violations(42) != ()

    def test_root_hash_key_is_skipped(self):
        validate_table_names({"_hash": "x", "tableA": {"_data": []}})

    def test_all_violations_in_one_error(self):
        with pytest.raises(InvalidNameError) as exc_info:
            validate_table_names({
                "aRef": {}, "ok": {}, "9lives": {}, "bad name": {},
            })

        error = exc_info.value
        assert error.error.code == ErrorCode.INVALID_NAME
        assert error.tables == ("aRef", "9lives", "bad name")
        assert error.context_value("tables") == "aRef, 9lives, bad name"
        assert "aRef (must not end with 'Ref')" in str(error)


class TestTableStructure:

    def test_valid_structure_passes(self):
        validate_structure({
            "tableA": {"_data": [{"a": 1}]},
            "tableB": {"_data": []},
            "_hash": "x",
        })

    def test_missing_data_lists_all_tables(self):
        with pytest.raises(MissingDataError) as exc_info:
            validate_structure({
                "tableA": {},
                "tableB": {"_data": None},
                "tableC": {"_data": []},
            })

        assert exc_info.value.tables == ("tableA", "tableB")
        assert str(exc_info.value).startswith("_data is missing in tables: tableA")

    def test_non_object_table_counts_as_missing_data(self):
        with pytest.raises(MissingDataError) as exc_info:
            validate_structure({"tableA": [1, 2]})

        assert exc_info.value.tables == ("tableA",)

    def test_wrong_type_lists_all_tables(self):
        with pytest.raises(WrongDataTypeError) as exc_info:
            validate_structure({
                "tableA": {"_data": {}},
                "tableB": {"_data": "text"},
            })

        assert exc_info.value.tables == ("tableA", "tableB")
        assert exc_info.value.error.code == ErrorCode.WRONG_DATA_TYPE

    def test_non_object_items_are_wrong_type(self):
        with pytest.raises(WrongDataTypeError) as exc_info:
            validate_structure({"tableA": {"_data": [{"a": 1}, "x", 3]}})

        assert exc_info.value.violations[0].reasons == ("items at 1, 2 are not objects",)

    def test_missing_data_reported_before_wrong_type(self):
        with pytest.raises(MissingDataError):
            validate_structure({
                "tableA": {"_data": {}},
                "tableB": {},
            })


class TestTableSet:

    def test_structure_is_checked_before_names(self):
        with pytest.raises(MissingDataError):
            validate_table_set({"tableRef": {}})

    def test_non_mapping_table_set_is_rejected(self):
        with pytest.raises(TypeError):
            validate_table_set([{"_data": []}])

    def test_violation_report_does_not_raise(self):
        violations = table_violations({
            "tableA": {},
            "tableB": {"_data": 1},
            "cRef": {"_data": []},
        })

        assert [v.table for v in violations] == ["tableA", "tableB", "cRef"]
