"""
Integration Test Fixtures

Explicit table sets for deterministic testing.
All fixtures are functions returning fresh data - no shared mutable state,
no random generation.
"""

from typing import Any, Dict

from relstore import RelationalStore


# =============================================================================
# TABLE SETS
# =============================================================================

def create_two_tables() -> Dict[str, Any]:
    """Two independent tables with two records each."""
    return {
        "tableA": {
            "_data": [
                {"keyA0": "a0"},
                {"keyA1": "a1"},
            ],
        },
        "tableB": {
            "_data": [
                {"keyB0": "b0"},
                {"keyB1": "b1"},
            ],
        },
    }


def create_letters() -> Dict[str, Any]:
    """Single table `tableA` with records {a: a0} and {a: a1}."""
    return {
        "tableA": {
            "_data": [
                {"a": "a0"},
                {"a": "a1"},
            ],
        },
    }


# =============================================================================
# STORES
# =============================================================================

def create_store() -> RelationalStore:
    return RelationalStore.from_data(create_two_tables())


def create_linked_store() -> RelationalStore:
    """
    tableA = [{a: a0}, {a: a1}]
    tableB = [{a0Ref: <hash of tableA[0]>}]

    The reference field `a0Ref` names table `a0`, which does not exist;
    use `tableARef` for a resolvable link (see create_resolvable_store).
    """
    store = RelationalStore.from_data(create_letters())
    return store.add_data({
        "tableB": {"_data": [{"a0Ref": store.hash("tableA", 0)}]},
    })


def create_resolvable_store() -> RelationalStore:
    """
    a0 = [{a: a0}, {a: a1}]
    tableB = [{a0Ref: <hash of a0[0]>}]
    """
    store = RelationalStore.from_data({
        "a0": {"_data": [{"a": "a0"}, {"a": "a1"}]},
    })
    return store.add_data({
        "tableB": {"_data": [{"a0Ref": store.hash("a0", 0)}]},
    })


def create_chain(length: int) -> RelationalStore:
    """
    Tables t0 .. t<length> where t0 holds {value: end} and every t<n>
    holds one record {t<n-1>Ref: <hash of t<n-1>[0]>}.
    """
    store = RelationalStore.from_data({"t0": {"_data": [{"value": "end"}]}})
    for n in range(1, length + 1):
        previous = f"t{n - 1}"
        store = store.add_data({
            f"t{n}": {"_data": [{f"{previous}Ref": store.hash(previous, 0)}]},
        })
    return store
