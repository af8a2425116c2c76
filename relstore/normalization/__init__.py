"""
Table Normalization Layer

RESPONSIBILITY: Turn ordered-list tables into hash-indexed Table snapshots
ALLOWED INPUTS: Hashed table objects ({"_data": [...], "_hash": ...})
OUTPUTS: Hash index mappings, immutable Table objects

WHAT THIS LAYER MUST NOT DO:
============================
- Validate table names (validation layer)
- Decide which tables to merge (storage layer)
- Resolve references between tables

DEDUPLICATION:
==============
Content hash equality implies content equality, so a record whose hash is
already present is dropped silently. No conflict resolution is needed.
"""

from __future__ import annotations
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Tuple

from ..contracts.base import HASH_FIELD, DATA_FIELD, Violation
from ..contracts.errors import (
    HashMissingError, MissingDataError, WrongDataTypeError
)
from ..contracts.tables import Record, Table, freeze
from ..hashing import JsonHasher


def _records_of(name: str, table: Any) -> Tuple[Any, ...]:
    if not isinstance(table, Mapping) or table.get(DATA_FIELD) is None:
        raise MissingDataError([Violation(name, (f"{DATA_FIELD} is missing",))])
    items = table[DATA_FIELD]
    if not isinstance(items, (list, tuple)):
        raise WrongDataTypeError([Violation(
            name, (f"{DATA_FIELD} is {type(items).__name__}, not a list",)
        )])
    return tuple(items)


def normalize(table: Mapping[str, Any], name: str = "") -> Dict[str, Record]:
    """
    Index a table's records by their content hash.

    The result is a lookup structure only; order lives in the Table.
    Records must already carry their hash.
    """
    index: Dict[str, Record] = {}
    for position, record in enumerate(_records_of(name, table)):
        if not isinstance(record, Mapping):
            raise WrongDataTypeError([Violation(
                name, (f"item at {position} is not an object",)
            )])
        if HASH_FIELD not in record:
            raise HashMissingError(f"{name}/{DATA_FIELD}/{position}")
        index[record[HASH_FIELD]] = record
    return index


def _unique(records: Iterable[Record], seen: Mapping[str, Record]) -> Dict[str, Record]:
    """Records in order, skipping hashes already in `seen` or repeated."""
    fresh: Dict[str, Record] = {}
    for record in records:
        item_hash = record[HASH_FIELD]
        if item_hash in seen or item_hash in fresh:
            continue
        fresh[item_hash] = record
    return fresh


def _table_hash(
    records: Tuple[Record, ...],
    properties: Mapping[str, Any],
    hasher: JsonHasher
) -> str:
    content: Dict[str, Any] = {DATA_FIELD: records}
    content.update(properties)
    return hasher.hash_object(content)


def build_table(name: str, raw_table: Mapping[str, Any], hasher: JsonHasher) -> Table:
    """
    Build an immutable Table from a hashed table object.

    Records are frozen and deduplicated (first occurrence wins); every
    table-level key other than `_data` and `_hash` becomes a property.
    """
    indexed = _unique((freeze(r) for r in _records_of(name, raw_table)), {})
    records = tuple(indexed.values())
    properties = freeze({
        key: value for key, value in raw_table.items()
        if key not in (DATA_FIELD, HASH_FIELD)
    })
    return Table(
        name=name,
        records=records,
        index=MappingProxyType(indexed),
        hash=_table_hash(records, properties, hasher),
        properties=properties
    )


def merge_tables(old: Table, new: Table, hasher: JsonHasher) -> Table:
    """
    Append-only union of two versions of one table.

    Result order: old records unchanged, then new records not yet present,
    in the order they arrived. Returns `old` itself when nothing changes.
    """
    fresh = _unique(new.records, old.index)
    properties = dict(old.properties)
    properties.update(new.properties)

    if not fresh and properties == dict(old.properties):
        return old

    records = old.records + tuple(fresh.values())
    index = dict(old.index)
    index.update(fresh)
    frozen_properties = MappingProxyType(properties)

    return Table(
        name=old.name,
        records=records,
        index=MappingProxyType(index),
        hash=_table_hash(records, frozen_properties, hasher),
        properties=frozen_properties
    )


__all__ = ["normalize", "build_table", "merge_tables"]
