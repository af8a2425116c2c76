"""
Engine Orchestration Module

This module provides the unified interface over all store layers while
keeping their boundaries intact.

DESIGN PRINCIPLES:
==================
1. Layers communicate ONLY through contracts
2. The facade is as immutable as the snapshot it wraps: every
   content-changing call returns a new RelationalStore
3. Configuration is explicit and layered (one dataclass per layer)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

import networkx as nx

from .contracts.base import AuditLogEntry
from .contracts.tables import Record, Store
from .hashing import HashConfig, JsonHasher
from .storage import StorageConfig, add_data, empty_store
from . import integrity
from . import query


@dataclass
class StoreConfig:
    """Unified configuration for the entire store."""
    hashing: HashConfig = None
    storage: StorageConfig = None

    def __post_init__(self):
        self.hashing = self.hashing or HashConfig()
        self.storage = self.storage or StorageConfig()


class RelationalStore:
    """
    Immutable relational store keyed by content hashes.

    LAYER FLOW:
    ===========
    1. Validation: table structure and names
    2. Hashing: content hash for every record
    3. Normalization: hash-indexed tables
    4. Storage: append-only merge into a new snapshot
    5. Query / Integrity: read-only access to the snapshot
    """

    def __init__(
        self,
        snapshot: Optional[Store] = None,
        config: Optional[StoreConfig] = None
    ):
        self._config = config or StoreConfig()
        self._hasher = JsonHasher(self._config.hashing)
        self._snapshot = snapshot if snapshot is not None else empty_store(self._hasher)

    @classmethod
    def from_data(
        cls,
        data: Mapping[str, Any],
        validate_hashes: Optional[bool] = None,
        config: Optional[StoreConfig] = None
    ) -> RelationalStore:
        """Create a store holding exactly the given tables."""
        return cls(config=config).add_data(data, validate_hashes=validate_hashes)

    # =========================================================================
    # MERGE INTERFACE
    # =========================================================================

    def add_data(
        self,
        data: Mapping[str, Any],
        validate_hashes: Optional[bool] = None
    ) -> RelationalStore:
        """Return a new store with data merged in; this one is unchanged."""
        snapshot = add_data(
            self._snapshot,
            data,
            validate_hashes_first=validate_hashes,
            hasher=self._hasher,
            config=self._config.storage
        )
        return RelationalStore(snapshot, self._config)

    # =========================================================================
    # QUERY INTERFACE
    # =========================================================================

    def table(self, name: str) -> Mapping[str, Record]:
        return query.table(self._snapshot, name)

    def items(self, name: str, predicate: Callable[[Record], bool]) -> List[Record]:
        return query.items(self._snapshot, name, predicate)

    def query(self, name: str, where: Mapping[str, Any]) -> List[Record]:
        return query.select(self._snapshot, name, where)

    def item(self, name: str, item_hash: str) -> Record:
        return query.item(self._snapshot, name, item_hash)

    def hash(self, table: str, index: int) -> str:
        """Hash of the record at `index` in insertion order."""
        return query.hash_at(self._snapshot, table, index)

    def get(self, table: str, item: str, *keys: str) -> Any:
        return query.get(self._snapshot, table, item, *keys)

    def value_at(self, path: str) -> Any:
        return query.value_at(self._snapshot, path)

    def ls(self) -> List[str]:
        return query.ls(self._snapshot)

    # =========================================================================
    # INTEGRITY INTERFACE
    # =========================================================================

    def check_links(self) -> None:
        integrity.check_links(self._snapshot)

    def find_dangling_links(self) -> List[integrity.DanglingLink]:
        return integrity.find_dangling_links(self._snapshot)

    def link_graph(self) -> nx.MultiDiGraph:
        return integrity.link_graph(self._snapshot)

    def linked_records(self, table: str, item: str) -> Set[str]:
        return integrity.linked_records(self._snapshot, table, item)

    # =========================================================================
    # STATE INTROSPECTION
    # =========================================================================

    @property
    def snapshot(self) -> Store:
        return self._snapshot

    @property
    def hasher(self) -> JsonHasher:
        """The hasher used by this store, for hashing data in advance."""
        return self._hasher

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def content_hash(self) -> Optional[str]:
        """Root hash over all tables."""
        return self._snapshot.hash

    @property
    def data(self) -> Dict[str, Any]:
        """Plain structured export, including table and root hashes."""
        return self._snapshot.to_json()

    def get_audit_log(self) -> List[AuditLogEntry]:
        return list(self._snapshot.audit_log)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RelationalStore):
            return NotImplemented
        return self._snapshot == other._snapshot

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"RelationalStore(tables={self._snapshot.table_names}, "
            f"hash={self._snapshot.hash!r})"
        )
