"""
Path Enumeration

Flattens a Store into `<table>/<hash>/<field>` strings for diffing and
printing. Order: tables as inserted, records as inserted, fields as stored.
"""

from __future__ import annotations
from typing import Iterator, List

from ..contracts.base import HASH_FIELD
from ..contracts.tables import Store


def iter_paths(store: Store) -> Iterator[str]:
    for name, table in store.tables.items():
        for record in table.records:
            item_hash = record[HASH_FIELD]
            for key in record:
                if key == HASH_FIELD:
                    continue
                yield f"{name}/{item_hash}/{key}"


def ls(store: Store) -> List[str]:
    """Every addressable leaf path of the store."""
    return list(iter_paths(store))
