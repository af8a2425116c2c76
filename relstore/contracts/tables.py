"""
Table and Store Snapshots

IMMUTABLE containers for normalized data. Nothing in this module computes
hashes or validates input; the normalization and storage layers build these
objects and the query layers read them.

INVARIANTS:
===========
- A Table's index is the hash-indexed projection of its ordered records
- Records are frozen recursively: mappings are read-only proxies and
  lists are tuples, so a returned record can never alter a snapshot
- A Store is never mutated; merges return a new Store that shares
  untouched Table objects with its predecessor
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .base import HASH_FIELD, DATA_FIELD, AuditLogEntry


Record = Mapping[str, Any]

_EMPTY: Mapping = MappingProxyType({})


def freeze(value: Any) -> Any:
    """Return a read-only deep copy of a JSON-compatible value."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Return a plain, mutable deep copy of a frozen value."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(item) for item in value]
    return value


# =============================================================================
# TABLE
# =============================================================================

@dataclass(frozen=True)
class Table:
    """
    A named, ordered, content-addressed collection of records.

    `records` keeps insertion order (used by position lookups and export);
    `index` maps each record's hash to the record for O(1) lookup.
    """
    name: str
    records: Tuple[Record, ...]
    index: Mapping[str, Record] = field(compare=False, repr=False)
    hash: str
    properties: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __contains__(self, item_hash: object) -> bool:
        return isinstance(item_hash, str) and item_hash in self.index

    @property
    def hashes(self) -> Tuple[str, ...]:
        return tuple(record[HASH_FIELD] for record in self.records)

    def to_json(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {DATA_FIELD: [thaw(r) for r in self.records]}
        result.update(thaw(self.properties))
        result[HASH_FIELD] = self.hash
        return result


# =============================================================================
# STORE SNAPSHOT
# =============================================================================

@dataclass(frozen=True)
class Store:
    """
    Immutable snapshot of all tables.

    Equality compares table contents only; the root hash is derived from
    them and the audit log records how the snapshot came to be.
    """
    tables: Mapping[str, Table] = field(default_factory=lambda: _EMPTY)
    hash: Optional[str] = field(default=None, compare=False)
    audit_log: Tuple[AuditLogEntry, ...] = field(
        default_factory=tuple, compare=False, repr=False
    )

    @staticmethod
    def empty(root_hash: Optional[str] = None) -> Store:
        return Store(tables=_EMPTY, hash=root_hash)

    @property
    def table_names(self) -> List[str]:
        return list(self.tables.keys())

    @property
    def canonical_form(self) -> Mapping[str, Tuple[Record, ...]]:
        """Table name -> records in insertion order."""
        return MappingProxyType(
            {name: table.records for name, table in self.tables.items()}
        )

    @property
    def index(self) -> Mapping[str, Mapping[str, Record]]:
        """Table name -> content hash -> record."""
        return MappingProxyType(
            {name: table.index for name, table in self.tables.items()}
        )

    def __contains__(self, table_name: object) -> bool:
        return table_name in self.tables

    def __len__(self) -> int:
        return len(self.tables)

    def to_json(self) -> Dict[str, Any]:
        """Export as plain structured data, including table and root hashes."""
        result: Dict[str, Any] = {
            name: table.to_json() for name, table in self.tables.items()
        }
        if self.hash is not None:
            result[HASH_FIELD] = self.hash
        return result
