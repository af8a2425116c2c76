"""
Base Contracts and Shared Types

These are the foundational types used across all layers.
All types here are IMMUTABLE and represent pure data.

BOUNDARY ENFORCEMENT:
=====================
- This module is READ-ONLY from all layers
- Reserved field names live here and nowhere else
- All types are frozen dataclasses for immutability guarantee
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Tuple
from enum import Enum, auto


# =============================================================================
# RESERVED NAMES
# =============================================================================

HASH_FIELD = "_hash"
DATA_FIELD = "_data"
REF_SUFFIX = "Ref"


def is_reference_field(key: str) -> bool:
    """A field whose name ends with the reference suffix links to another table."""
    return isinstance(key, str) and key.endswith(REF_SUFFIX)


def target_table(key: str) -> str:
    """Name of the table a reference field points to."""
    return key[:-len(REF_SUFFIX)]


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes for deterministic error handling.
    No silent fallbacks - every error state is enumerated.
    """
    # Validation errors (bulk-reported)
    INVALID_NAME = auto()
    MISSING_DATA = auto()
    WRONG_DATA_TYPE = auto()

    # Hash errors
    HASH_MISMATCH = auto()
    HASH_MISSING = auto()

    # Lookup errors
    TABLE_NOT_FOUND = auto()
    ITEM_NOT_FOUND = auto()
    KEY_NOT_FOUND = auto()
    INVALID_KEY = auto()
    INDEX_OUT_OF_RANGE = auto()

    # Integrity errors
    DANGLING_TABLE_REF = auto()
    DANGLING_ITEM_REF = auto()


@dataclass(frozen=True)
class Violation:
    """One offending table in a bulk validation report."""
    table: str
    reasons: Tuple[str, ...]

    def describe(self) -> str:
        return f"{self.table} ({'; '.join(self.reasons)})"


@dataclass(frozen=True)
class Error:
    """
    Immutable error representation with full context.
    Errors are data, not exceptions - they can be stored and queried.
    """
    code: ErrorCode
    message: str
    timestamp: datetime
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
    violations: Tuple[Violation, ...] = field(default_factory=tuple)

    def get(self, key: str) -> Optional[str]:
        """Look up a context value by key."""
        for name, value in self.context:
            if name == key:
                return value
        return None


@dataclass(frozen=True)
class Result:
    """
    Generic result type for operations that can fail.
    Either contains a value OR an error, never both.
    """
    value: Optional[object] = None
    error: Optional[Error] = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    @staticmethod
    def success(value: object) -> Result:
        return Result(value=value, error=None)

    @staticmethod
    def failure(error: Error) -> Result:
        return Result(value=None, error=error)

    @staticmethod
    def capture(operation: Callable[..., Any], *args, **kwargs) -> Result:
        """
        Run a store operation and wrap its outcome.

        Only store errors become failures; anything else propagates.
        """
        from .errors import StoreError

        try:
            return Result.success(operation(*args, **kwargs))
        except StoreError as exc:
            return Result.failure(exc.error)


# =============================================================================
# TEMPORAL TYPES
# =============================================================================

@dataclass(frozen=True)
class Timestamp:
    """
    Immutable timestamp with explicit semantics.
    All timestamps are UTC, never local time.
    """
    value: datetime

    def __post_init__(self):
        if self.value.tzinfo is None:
            object.__setattr__(self, 'value', self.value.replace(tzinfo=timezone.utc))

    @staticmethod
    def now() -> Timestamp:
        return Timestamp(value=datetime.now(timezone.utc))


# =============================================================================
# AUDIT TYPES
# =============================================================================

class AuditEventType(Enum):
    """Explicit audit event types."""
    MERGE = "merge"


@dataclass(frozen=True)
class AuditLogEntry:
    """Immutable audit log entry."""
    entry_id: str
    event_type: AuditEventType
    timestamp: Timestamp
    layer: str  # Which layer generated this
    action: str
    entity_id: Optional[str] = None
    metadata: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
