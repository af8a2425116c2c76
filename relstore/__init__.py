"""
relstore - Immutable Relational Store Keyed by Content Hashes

Named tables of content-addressed records, cross-table `*Ref` links and
chained lookups, with plain structured data as the storage format.

LAYER STRUCTURE:
================

1. CONTRACTS (contracts/)
   - Reserved names, error taxonomy, Table and Store snapshots
   - MUST NOT: Contain behavior beyond construction and export

2. VALIDATION (validation/)
   - Responsibility: Table structure and naming rules, bulk-reported
   - MUST NOT: Hash, merge or check references

3. HASHING (hashing/)
   - Responsibility: Deterministic content hashes, hash validation
   - MUST NOT: Know about tables or stores

4. NORMALIZATION (normalization/)
   - Responsibility: Ordered lists -> hash-indexed, deduplicated Tables

5. STORAGE (storage/)
   - Responsibility: Append-only, idempotent merge into new snapshots
   - MUST NOT: Modify an existing snapshot

6. QUERY (query/)
   - Responsibility: Point lookups, chained link resolution, path listing

7. INTEGRITY (integrity/)
   - Responsibility: On-demand reference audit and link graph

CONSTRAINTS ENFORCED:
=====================
- Immutability-first: snapshots and records are read-only
- Append-only: merges never drop or rewrite records
- Deterministic: identical content always has the identical hash
- Explicit errors: every failure is a typed StoreError with context
"""

from .contracts import (
    HASH_FIELD, DATA_FIELD, REF_SUFFIX,
    ErrorCode, Error, Result, Violation, AuditLogEntry,
    StoreError, InvalidNameError, MissingDataError, WrongDataTypeError,
    HashMismatchError, HashMissingError, TableNotFoundError,
    ItemNotFoundError, KeyNotFoundError, InvalidKeyError,
    IndexOutOfRangeError, DanglingTableRefError, DanglingItemRefError,
    Table, Store,
)
from .hashing import HashConfig, JsonHasher
from .storage import StorageConfig, add_data, from_data, empty_store
from .query import table, items, select, item, hash_at, get, value_at, ls
from .integrity import (
    check_links, find_dangling_links, link_graph, linked_records, DanglingLink
)
from .engine import RelationalStore, StoreConfig

__version__ = "0.1.0"

__all__ = [
    "HASH_FIELD", "DATA_FIELD", "REF_SUFFIX",
    "ErrorCode", "Error", "Result", "Violation", "AuditLogEntry",
    "StoreError", "InvalidNameError", "MissingDataError", "WrongDataTypeError",
    "HashMismatchError", "HashMissingError", "TableNotFoundError",
    "ItemNotFoundError", "KeyNotFoundError", "InvalidKeyError",
    "IndexOutOfRangeError", "DanglingTableRefError", "DanglingItemRefError",
    "Table", "Store",
    "HashConfig", "JsonHasher",
    "StorageConfig", "add_data", "from_data", "empty_store",
    "table", "items", "select", "item", "hash_at", "get", "value_at", "ls",
    "check_links", "find_dangling_links", "link_graph", "linked_records",
    "DanglingLink",
    "RelationalStore", "StoreConfig",
]
