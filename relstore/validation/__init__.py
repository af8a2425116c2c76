"""
Validation Layer

RESPONSIBILITY: Reject malformed table sets before anything is hashed or merged
ALLOWED INPUTS: Incoming structured data (table name -> table object)
OUTPUTS: Nothing on success; one bulk error listing every offending table

WHAT THIS LAYER MUST NOT DO:
============================
- Stop at the first offending table
- Modify or hash the data
- Check references (that is the integrity layer's job, on demand)

NAMING RULES:
=============
A table name is non-empty, letters and digits only, does not start with a
digit and does not end with the reference suffix `Ref`.
"""

from __future__ import annotations
from typing import Any, List, Mapping, Tuple
import re

from ..contracts.base import HASH_FIELD, DATA_FIELD, REF_SUFFIX, Violation
from ..contracts.errors import (
    InvalidNameError, MissingDataError, WrongDataTypeError
)


_NAME_PATTERN = re.compile(r'[A-Za-z0-9]+')


# =============================================================================
# TABLE NAMES
# =============================================================================

def name_violations(name: Any) -> Tuple[str, ...]:
    """Every naming rule the given name breaks, empty when valid."""
    if not isinstance(name, str) or not _NAME_PATTERN.fullmatch(name):
        return ("must contain only letters and digits",)

    reasons = []
    if name[0].isdigit():
        reasons.append("must not start with a number")
    if name.endswith(REF_SUFFIX):
        reasons.append(f"must not end with '{REF_SUFFIX}'")
    return tuple(reasons)


def validate_table_name(name: Any) -> None:
    """Raise InvalidNameError if name is not a valid table name."""
    reasons = name_violations(name)
    if reasons:
        raise InvalidNameError([Violation(table=str(name), reasons=reasons)])


def validate_table_names(table_set: Mapping[str, Any]) -> None:
    """Check every table name, reporting all violations at once."""
    violations = _collect_name_violations(table_set)
    if violations:
        raise InvalidNameError(violations)


def _collect_name_violations(table_set: Mapping[str, Any]) -> List[Violation]:
    violations = []
    for name in table_set:
        if name == HASH_FIELD:
            continue
        reasons = name_violations(name)
        if reasons:
            violations.append(Violation(table=str(name), reasons=reasons))
    return violations


# =============================================================================
# TABLE STRUCTURE
# =============================================================================

def structure_violations(
    table_set: Mapping[str, Any]
) -> Tuple[List[Violation], List[Violation]]:
    """
    Find tables without `_data` and tables whose `_data` is malformed.

    Returns (missing, wrong_type).
    """
    missing = []
    wrong_type = []

    for name, table in table_set.items():
        if name == HASH_FIELD:
            continue

        if not isinstance(table, Mapping):
            missing.append(Violation(str(name), ("table must be an object",)))
            continue

        if DATA_FIELD not in table or table[DATA_FIELD] is None:
            missing.append(Violation(str(name), (f"{DATA_FIELD} is missing",)))
            continue

        items = table[DATA_FIELD]
        if not isinstance(items, (list, tuple)):
            wrong_type.append(Violation(
                str(name),
                (f"{DATA_FIELD} is {type(items).__name__}, not a list",)
            ))
            continue

        bad_positions = [
            str(position) for position, item in enumerate(items)
            if not isinstance(item, Mapping)
        ]
        if bad_positions:
            wrong_type.append(Violation(
                str(name),
                (f"items at {', '.join(bad_positions)} are not objects",)
            ))

    return missing, wrong_type


def validate_structure(table_set: Mapping[str, Any]) -> None:
    """
    Require every table to hold a `_data` list of objects.

    Missing data is reported before wrong types; each report lists
    every offending table.
    """
    missing, wrong_type = structure_violations(table_set)
    if missing:
        raise MissingDataError(missing)
    if wrong_type:
        raise WrongDataTypeError(wrong_type)


def validate_table_set(table_set: Mapping[str, Any]) -> None:
    """Structure first, then names."""
    if not isinstance(table_set, Mapping):
        raise TypeError(
            f"Table set must be a mapping, got {type(table_set).__name__}"
        )
    validate_structure(table_set)
    validate_table_names(table_set)


def table_violations(table_set: Mapping[str, Any]) -> List[Violation]:
    """Non-raising report of every structure and naming problem."""
    missing, wrong_type = structure_violations(table_set)
    return missing + wrong_type + _collect_name_violations(table_set)


__all__ = [
    "name_violations", "validate_table_name", "validate_table_names",
    "structure_violations", "validate_structure", "validate_table_set",
    "table_violations",
]
