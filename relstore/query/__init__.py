"""
Query Layer (Record Accessor)

RESPONSIBILITY: Read-only lookups of tables, records and linked values
ALLOWED INPUTS: A Store snapshot and explicit lookup parameters
OUTPUTS: Read-only records and values, or a typed lookup error

WHAT THIS LAYER MUST NOT DO:
============================
- Mutate the Store
- Repair or guess missing data (every miss is an explicit error)
- Follow references implicitly; only `get` walks `*Ref` fields, and only
  along the keys it is given
"""

from __future__ import annotations
from typing import Any, Callable, List, Mapping

from ..contracts.base import HASH_FIELD, is_reference_field, target_table
from ..contracts.errors import (
    TableNotFoundError, ItemNotFoundError, KeyNotFoundError,
    InvalidKeyError, IndexOutOfRangeError
)
from ..contracts.tables import Record, Store, Table
from .paths import ls


def _table(store: Store, name: str) -> Table:
    table = store.tables.get(name)
    if table is None:
        raise TableNotFoundError(name)
    return table


def table(store: Store, name: str) -> Mapping[str, Record]:
    """The hash index of a table."""
    return _table(store, name).index


def items(
    store: Store,
    name: str,
    predicate: Callable[[Record], bool]
) -> List[Record]:
    """Records of a table matching predicate, in index order."""
    return [record for record in _table(store, name).index.values() if predicate(record)]


def select(store: Store, name: str, where: Mapping[str, Any]) -> List[Record]:
    """Records whose fields equal every key/value in `where`."""
    def matches(record: Record) -> bool:
        return all(
            key in record and record[key] == value
            for key, value in where.items()
        )
    return items(store, name, matches)


def item(store: Store, name: str, item_hash: str) -> Record:
    """A single record by content hash."""
    found = _table(store, name)
    if item_hash not in found:
        raise ItemNotFoundError(name, item_hash)
    return found.index[item_hash]


def hash_at(store: Store, name: str, position: int) -> str:
    """Hash of the record at a position in insertion order."""
    found = _table(store, name)
    if not 0 <= position < len(found):
        raise IndexOutOfRangeError(name, position, len(found))
    return found.records[position][HASH_FIELD]


def get(store: Store, name: str, item_hash: str, *keys: str) -> Any:
    """
    Resolve a chain of keys starting at one record.

    - No keys: the record itself
    - Plain field: its value; it must be the last key
    - `*Ref` field: continue at the referenced record in the table named
      by the field without its suffix. A trailing `*Ref` key yields the
      referenced record.
    """
    current_table = name
    current_hash = item_hash
    record = item(store, current_table, current_hash)

    for position, key in enumerate(keys):
        if key not in record:
            raise KeyNotFoundError(current_table, current_hash, key)
        value = record[key]

        if is_reference_field(key):
            current_table = target_table(key)
            current_hash = value
            record = item(store, current_table, current_hash)
            continue

        if position < len(keys) - 1:
            raise InvalidKeyError(
                f'Invalid key "{keys[position + 1]}". Additional keys are only '
                f'allowed for links, but key "{key}" points to a value.',
                table=current_table,
                hash=current_hash,
                key=keys[position + 1]
            )
        return value

    return record


def value_at(store: Store, path: str) -> Any:
    """Resolve a `<table>/<hash>/<field>` path as produced by `ls`."""
    parts = path.split('/')
    if len(parts) != 3 or not all(parts):
        raise InvalidKeyError(
            f'Invalid path "{path}". Expected "<table>/<hash>/<field>".',
            path=path
        )
    name, item_hash, key = parts
    return get(store, name, item_hash, key)


__all__ = [
    "table", "items", "select", "item", "hash_at", "get", "value_at", "ls",
]
