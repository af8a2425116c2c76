"""
Content Hashing Layer

RESPONSIBILITY: Assign and verify deterministic content hashes
ALLOWED INPUTS: JSON-compatible structured data (mappings, lists, scalars)
OUTPUTS: Hashed deep copies, hash tokens, validation failures

WHAT THIS LAYER MUST NOT DO:
============================
- Mutate the data handed to it
- Know about tables, references or stores
- Depend on dictionary insertion order or platform specifics

HASH FORMAT:
============
Every mapping gets a `_hash` field holding the digest of its canonical
content without the `_hash` field itself:
1. Nested mappings contribute their own `_hash` instead of their content
2. Canonical text is JSON with sorted keys and compact separators
3. Floats are rounded to a fixed precision; integral floats become integers
4. Digest is SHA-256 truncated to 16 bytes, URL-safe base64 without
   padding (22 characters)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
import base64
import hashlib
import json
import math

from ..contracts.base import HASH_FIELD
from ..contracts.errors import HashMismatchError, HashMissingError


@dataclass
class HashConfig:
    """Configuration for content hashing."""
    digest_bytes: int = 16
    float_precision: int = 10


class JsonHasher:
    """
    Deterministic hasher for nested structured data.

    Same content always produces the same token, whatever the key order,
    merge history or platform.
    """

    def __init__(self, config: Optional[HashConfig] = None):
        self._config = config or HashConfig()

    @property
    def config(self) -> HashConfig:
        return self._config

    # =========================================================================
    # ASSIGNMENT
    # =========================================================================

    def apply(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Return a deep copy of data where every mapping carries its hash.

        Existing hashes are recomputed, so correct ones are unchanged and
        stale ones are replaced.
        """
        return self._hashed_copy(data)

    def hash_object(self, obj: Mapping[str, Any]) -> str:
        """
        Hash a single mapping.

        Nested mappings contribute their own `_hash`; those without one
        are hashed on the fly.
        """
        content = {
            key: self._canonical(value)
            for key, value in obj.items()
            if key != HASH_FIELD
        }
        text = json.dumps(
            content,
            sort_keys=True,
            separators=(',', ':'),
            ensure_ascii=False
        )
        return self.digest(text)

    def digest(self, text: str) -> str:
        raw = hashlib.sha256(text.encode('utf-8')).digest()
        raw = raw[:self._config.digest_bytes]
        return base64.urlsafe_b64encode(raw).decode('ascii').rstrip('=')

    def _hashed_copy(self, value: Any) -> Any:
        if isinstance(value, Mapping):
            copy = {
                key: self._hashed_copy(item)
                for key, item in value.items()
                if key != HASH_FIELD
            }
            copy[HASH_FIELD] = self.hash_object(copy)
            return copy
        if isinstance(value, (list, tuple)):
            return [self._hashed_copy(item) for item in value]
        return value

    def _canonical(self, value: Any) -> Any:
        if isinstance(value, Mapping):
            nested = value.get(HASH_FIELD)
            return nested if isinstance(nested, str) else self.hash_object(value)
        if isinstance(value, (list, tuple)):
            return [self._canonical(item) for item in value]
        if isinstance(value, bool) or value is None:
            return value
        if isinstance(value, float):
            if not math.isfinite(value):
                raise ValueError(f"Cannot hash non-finite number: {value}")
            rounded = round(value, self._config.float_precision)
            # 1.0 and 1 must hash alike
            return int(rounded) if rounded.is_integer() else rounded
        if isinstance(value, (str, int)):
            return value
        raise TypeError(
            f"Cannot hash value of type {type(value).__name__}: {value!r}"
        )

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def validate(self, data: Mapping[str, Any]) -> None:
        """
        Verify that every mapping carries its correct hash.

        Raises HashMissingError or HashMismatchError for the deepest
        offending object, identified by its slash-separated path.
        """
        expected = self._hashed_copy(data)
        self._compare(data, expected, path="")

    def is_valid(self, data: Mapping[str, Any]) -> bool:
        try:
            self.validate(data)
        except (HashMissingError, HashMismatchError):
            return False
        return True

    def _compare(self, actual: Any, expected: Any, path: str) -> None:
        if isinstance(actual, Mapping):
            for key, value in actual.items():
                if key == HASH_FIELD:
                    continue
                self._compare(value, expected[key], _join(path, key))

            present = actual.get(HASH_FIELD)
            if present is None:
                raise HashMissingError(path)
            if present != expected[HASH_FIELD]:
                raise HashMismatchError(path, str(present), expected[HASH_FIELD])
            return

        if isinstance(actual, (list, tuple)):
            for position, (item, expected_item) in enumerate(zip(actual, expected)):
                self._compare(item, expected_item, _join(path, str(position)))


def _join(path: str, key: str) -> str:
    return f"{path}/{key}" if path else key


DEFAULT_HASHER = JsonHasher()

__all__ = ["HashConfig", "JsonHasher", "DEFAULT_HASHER"]
