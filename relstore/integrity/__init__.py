"""
Referential Integrity Layer

RESPONSIBILITY: Audit `*Ref` fields and expose the record link structure
ALLOWED INPUTS: A Store snapshot
OUTPUTS: Dangling link reports, typed integrity errors, link graphs

WHAT THIS LAYER MUST NOT DO:
============================
- Repair, drop or rewrite broken links
- Run during merges (links may point to records added later)
- Rank or weight records; the graph is purely structural

A reference field `<target>Ref` must hold the hash of an existing record
in table `<target>`.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterator, List, Set
import logging

import networkx as nx

from ..contracts.base import (
    HASH_FIELD, ErrorCode, is_reference_field, target_table
)
from ..contracts.errors import (
    DanglingItemRefError, DanglingTableRefError, TableNotFoundError,
    ItemNotFoundError
)
from ..contracts.tables import Store


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Link:
    """One reference field of one record."""
    table: str
    item_hash: str
    key: str
    target_table: str
    target_hash: Any


@dataclass(frozen=True)
class DanglingLink:
    """A reference that does not resolve."""
    link: Link
    code: ErrorCode  # DANGLING_TABLE_REF or DANGLING_ITEM_REF

    def to_error(self):
        link = self.link
        if self.code == ErrorCode.DANGLING_TABLE_REF:
            return DanglingTableRefError(
                link.table, link.item_hash, link.key, link.target_table
            )
        return DanglingItemRefError(
            link.table, link.item_hash, link.key,
            link.target_table, link.target_hash
        )


def node_id(table: str, item_hash: str) -> str:
    return f"{table}/{item_hash}"


def iter_links(store: Store) -> Iterator[Link]:
    """Every reference field in the store, in `ls` order."""
    for name, table in store.tables.items():
        for record in table.records:
            for key, value in record.items():
                if key == HASH_FIELD or not is_reference_field(key):
                    continue
                yield Link(
                    table=name,
                    item_hash=record[HASH_FIELD],
                    key=key,
                    target_table=target_table(key),
                    target_hash=value
                )


def _dangling(store: Store, link: Link):
    target = store.tables.get(link.target_table)
    if target is None:
        return DanglingLink(link, ErrorCode.DANGLING_TABLE_REF)
    if link.target_hash not in target:
        return DanglingLink(link, ErrorCode.DANGLING_ITEM_REF)
    return None


def find_dangling_links(store: Store) -> List[DanglingLink]:
    """All references that do not resolve, without raising."""
    found = []
    for link in iter_links(store):
        broken = _dangling(store, link)
        if broken is not None:
            found.append(broken)
    return found


def check_links(store: Store) -> None:
    """Raise for the first reference that does not resolve."""
    for link in iter_links(store):
        broken = _dangling(store, link)
        if broken is not None:
            logger.debug(
                "%s: %s/%s field %s -> %s/%s",
                broken.code.name, link.table, link.item_hash, link.key,
                link.target_table, link.target_hash
            )
            raise broken.to_error()


# =============================================================================
# LINK GRAPH (Structural only)
# =============================================================================

def link_graph(store: Store) -> nx.MultiDiGraph:
    """
    Directed graph of records and the references between them.

    Nodes are `<table>/<hash>` for every record; each resolvable
    reference adds one edge carrying the field name. Dangling
    references are left out (see find_dangling_links).
    """
    graph = nx.MultiDiGraph()

    for name, table in store.tables.items():
        for item_hash in table.hashes:
            graph.add_node(node_id(name, item_hash), table=name, hash=item_hash)

    for link in iter_links(store):
        if _dangling(store, link) is not None:
            continue
        graph.add_edge(
            node_id(link.table, link.item_hash),
            node_id(link.target_table, link.target_hash),
            key=link.key,
            field=link.key
        )

    return graph


def linked_records(store: Store, table: str, item_hash: str) -> Set[str]:
    """Every record node transitively reachable from one record."""
    source = store.tables.get(table)
    if source is None:
        raise TableNotFoundError(table)
    if item_hash not in source:
        raise ItemNotFoundError(table, item_hash)

    return set(nx.descendants(link_graph(store), node_id(table, item_hash)))


__all__ = [
    "Link", "DanglingLink", "iter_links", "find_dangling_links",
    "check_links", "link_graph", "linked_records", "node_id",
]
