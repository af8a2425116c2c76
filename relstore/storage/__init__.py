"""
Storage Layer (Merge Engine)

RESPONSIBILITY: Build new immutable Store snapshots from incoming data
ALLOWED INPUTS: An existing Store and a table set in wire format
OUTPUTS: A new Store; the input Store is never touched

WHAT THIS LAYER MUST NOT DO:
============================
- Modify or delete existing records (append-only)
- Check references between tables (links may point to later data)
- Apply partial results: every check runs before a Store is built

MERGE SEMANTICS:
================
1. Validate structure and names, reporting every offending table
2. Optionally validate existing hashes
3. Hash a copy of the incoming data
4. Tables new to the store are inserted as given
5. Existing tables become: old records, then unseen new records in
   incoming order
6. Tables not mentioned are carried over as the same objects

Adding the same data twice gives the same Store as adding it once.
"""

from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple
import hashlib
import logging

from ..contracts.base import (
    HASH_FIELD, Timestamp, AuditEventType, AuditLogEntry
)
from ..contracts.tables import Store, Table
from ..hashing import DEFAULT_HASHER, JsonHasher
from ..normalization import build_table, merge_tables
from ..validation import validate_table_set


logger = logging.getLogger(__name__)


@dataclass
class StorageConfig:
    """Configuration for the merge engine."""
    validate_hashes_first: bool = False
    record_audit: bool = False


def root_hash(tables: Mapping[str, Table], hasher: JsonHasher) -> str:
    """Hash of the whole store, built from the table hashes."""
    return hasher.hash_object(
        {name: {HASH_FIELD: table.hash} for name, table in tables.items()}
    )


def empty_store(hasher: Optional[JsonHasher] = None) -> Store:
    """A Store without tables, carrying its root hash."""
    hasher = hasher or DEFAULT_HASHER
    return Store.empty(root_hash=root_hash({}, hasher))


def add_data(
    store: Store,
    incoming: Mapping[str, Any],
    validate_hashes_first: Optional[bool] = None,
    hasher: Optional[JsonHasher] = None,
    config: Optional[StorageConfig] = None
) -> Store:
    """
    Merge incoming tables into a new Store.

    `validate_hashes_first` overrides the configured default; when set,
    hashes already present in `incoming` must match their content.
    """
    config = config or StorageConfig()
    hasher = hasher or DEFAULT_HASHER
    if validate_hashes_first is None:
        validate_hashes_first = config.validate_hashes_first

    validate_table_set(incoming)
    if validate_hashes_first:
        hasher.validate(incoming)

    hashed = hasher.apply(incoming)

    tables: Dict[str, Table] = dict(store.tables)
    summary: List[Tuple[str, str]] = []

    for name, raw_table in hashed.items():
        if name == HASH_FIELD:
            continue

        new_table = build_table(name, raw_table, hasher)
        old_table = store.tables.get(name)

        if old_table is None:
            tables[name] = new_table
            summary.append((name, f"inserted {len(new_table)}"))
            continue

        merged = merge_tables(old_table, new_table, hasher)
        tables[name] = merged
        summary.append((name, f"appended {len(merged) - len(old_table)}"))

    new_hash = root_hash(tables, hasher)
    logger.debug(
        "Merged %d table(s) into store %s -> %s: %s",
        len(summary), store.hash, new_hash,
        ", ".join(f"{name} {change}" for name, change in summary)
    )

    # merges that change nothing leave no entry
    audit_log = store.audit_log
    if config.record_audit and new_hash != store.hash:
        audit_log = audit_log + (_audit_entry(
            action="tables_merged",
            entity_id=new_hash,
            metadata=(("previous_hash", str(store.hash)),) + tuple(summary)
        ),)

    return Store(
        tables=MappingProxyType(tables),
        hash=new_hash,
        audit_log=audit_log
    )


def from_data(
    data: Mapping[str, Any],
    validate_hashes_first: Optional[bool] = None,
    hasher: Optional[JsonHasher] = None,
    config: Optional[StorageConfig] = None
) -> Store:
    """Create a Store holding exactly the given data."""
    return add_data(
        empty_store(hasher),
        data,
        validate_hashes_first=validate_hashes_first,
        hasher=hasher,
        config=config
    )


def _audit_entry(
    action: str,
    entity_id: Optional[str] = None,
    metadata: tuple = ()
) -> AuditLogEntry:
    now = Timestamp.now()
    entry_id = hashlib.sha256(
        f"storage_{action}|{entity_id}|{now.value.timestamp()}".encode()
    ).hexdigest()[:16]

    return AuditLogEntry(
        entry_id=f"audit_{entry_id}",
        event_type=AuditEventType.MERGE,
        timestamp=now,
        layer="storage",
        action=action,
        entity_id=entity_id,
        metadata=metadata
    )


__all__ = ["StorageConfig", "add_data", "from_data", "empty_store", "root_hash"]
