"""
Typed Store Errors

Every failure the store can report has one exception class here.
Each exception carries an immutable Error value (see base.py) so callers
can inspect the code and context, or convert it with Result.capture.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence, Tuple

from .base import Error, ErrorCode, Violation


class StoreError(Exception):
    """Base class of all store failures."""

    code: ErrorCode = None

    def __init__(
        self,
        message: str,
        context: Iterable[Tuple[str, str]] = (),
        violations: Sequence[Violation] = ()
    ):
        super().__init__(message)
        self.error = Error(
            code=self.code,
            message=message,
            timestamp=datetime.now(timezone.utc),
            context=tuple((key, str(value)) for key, value in context),
            violations=tuple(violations)
        )

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def violations(self) -> Tuple[Violation, ...]:
        return self.error.violations

    def context_value(self, key: str) -> Optional[str]:
        return self.error.get(key)


# =============================================================================
# BULK VALIDATION
# =============================================================================

class _BulkValidationError(StoreError):
    """A single failure listing every offending table."""

    summary = ""

    def __init__(self, violations: Sequence[Violation]):
        listing = ", ".join(v.describe() for v in violations)
        super().__init__(
            f"{self.summary}: {listing}",
            context=(("tables", ", ".join(v.table for v in violations)),),
            violations=violations
        )

    @property
    def tables(self) -> Tuple[str, ...]:
        return tuple(v.table for v in self.violations)


class InvalidNameError(_BulkValidationError):
    code = ErrorCode.INVALID_NAME
    summary = "Invalid table names"


class MissingDataError(_BulkValidationError):
    code = ErrorCode.MISSING_DATA
    summary = "_data is missing in tables"


class WrongDataTypeError(_BulkValidationError):
    code = ErrorCode.WRONG_DATA_TYPE
    summary = "_data must be a list of objects in tables"


# =============================================================================
# HASH VALIDATION
# =============================================================================

class HashMissingError(StoreError):
    code = ErrorCode.HASH_MISSING

    def __init__(self, path: str):
        super().__init__(
            f'Hash is missing at "{path or "/"}".',
            context=(("path", path),)
        )


class HashMismatchError(StoreError):
    code = ErrorCode.HASH_MISMATCH

    def __init__(self, path: str, actual: str, expected: str):
        super().__init__(
            f'Hash "{actual}" at "{path or "/"}" does not match '
            f'the recomputed hash "{expected}".',
            context=(("path", path), ("actual", actual), ("expected", expected))
        )


# =============================================================================
# LOOKUP
# =============================================================================

class TableNotFoundError(StoreError):
    code = ErrorCode.TABLE_NOT_FOUND

    def __init__(self, table: str):
        super().__init__(f"Table not found: {table}", context=(("table", table),))


class ItemNotFoundError(StoreError):
    code = ErrorCode.ITEM_NOT_FOUND

    def __init__(self, table: str, item_hash: object):
        super().__init__(
            f'Item with hash "{item_hash}" not found in table "{table}".',
            context=(("table", table), ("hash", item_hash))
        )


class KeyNotFoundError(StoreError):
    code = ErrorCode.KEY_NOT_FOUND

    def __init__(self, table: str, item_hash: str, key: str):
        super().__init__(
            f'Key "{key}" not found in item "{item_hash}" of table "{table}".',
            context=(("table", table), ("hash", item_hash), ("key", key))
        )


class InvalidKeyError(StoreError):
    code = ErrorCode.INVALID_KEY

    def __init__(self, message: str, **context: str):
        super().__init__(message, context=tuple(context.items()))


class IndexOutOfRangeError(StoreError):
    code = ErrorCode.INDEX_OUT_OF_RANGE

    def __init__(self, table: str, position: int, length: int):
        super().__init__(
            f'Index {position} is out of range for table "{table}" '
            f'with {length} items.',
            context=(("table", table), ("index", position), ("length", length))
        )


# =============================================================================
# REFERENTIAL INTEGRITY
# =============================================================================

class DanglingTableRefError(StoreError):
    code = ErrorCode.DANGLING_TABLE_REF

    def __init__(self, table: str, item_hash: str, key: str, target: str):
        super().__init__(
            f'Table "{table}" has an item "{item_hash}" which links to '
            f'not existing table "{target}".',
            context=(
                ("table", table), ("hash", item_hash),
                ("key", key), ("target_table", target),
            )
        )


class DanglingItemRefError(StoreError):
    code = ErrorCode.DANGLING_ITEM_REF

    def __init__(
        self, table: str, item_hash: str, key: str, target: str, target_hash: object
    ):
        super().__init__(
            f'Table "{table}" has an item "{item_hash}" which links to '
            f'not existing item "{target_hash}" in table "{target}".',
            context=(
                ("table", table), ("hash", item_hash), ("key", key),
                ("target_table", target), ("target_hash", target_hash),
            )
        )
