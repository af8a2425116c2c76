"""
Contracts Module

This module defines the data types shared by every layer of the store.
Layers exchange ONLY these types; no layer imports implementation details
from another layer.

DESIGN PRINCIPLES:
==================
1. All contract types are immutable (frozen dataclasses, read-only mappings)
2. Every failure has an explicit ErrorCode and a typed exception
3. Content hashes are the only identity of records and tables
4. Reserved field names are declared once, here
"""

from .base import (
    HASH_FIELD, DATA_FIELD, REF_SUFFIX,
    ErrorCode, Violation, Error, Result, Timestamp,
    AuditEventType, AuditLogEntry,
    is_reference_field, target_table,
)
from .errors import (
    StoreError, InvalidNameError, MissingDataError, WrongDataTypeError,
    HashMismatchError, HashMissingError, TableNotFoundError,
    ItemNotFoundError, KeyNotFoundError, InvalidKeyError,
    IndexOutOfRangeError, DanglingTableRefError, DanglingItemRefError,
)
from .tables import Table, Store, freeze, thaw

__all__ = [
    "HASH_FIELD", "DATA_FIELD", "REF_SUFFIX",
    "ErrorCode", "Violation", "Error", "Result", "Timestamp",
    "AuditEventType", "AuditLogEntry",
    "is_reference_field", "target_table",
    "StoreError", "InvalidNameError", "MissingDataError", "WrongDataTypeError",
    "HashMismatchError", "HashMissingError", "TableNotFoundError",
    "ItemNotFoundError", "KeyNotFoundError", "InvalidKeyError",
    "IndexOutOfRangeError", "DanglingTableRefError", "DanglingItemRefError",
    "Table", "Store", "freeze", "thaw",
]
