"""Folio seed error codes and exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ErrorCategory(IntEnum):
    LAYOUT = 0x01
    SCHEMA = 0x02
    RANGE = 0x03
    PRECONDITION = 0x04
    LEDGER = 0x05
    INTERNAL = 0xFF


class ErrorCode(IntEnum):
    # Layout
    BUFFER_OVERFLOW = 0x0100
    BUFFER_UNDERRUN = 0x0101
    SIZE_MISMATCH = 0x0102
    INVALID_LENGTH = 0x0103

    # Schema mismatch
    DISCRIMINATOR_MISMATCH = 0x0200
    UNKNOWN_RECORD_KIND = 0x0201
    INVALID_TAG = 0x0202
    INVALID_UTF8 = 0x0203
    OWNER_MISMATCH = 0x0204

    # Range
    VALUE_OUT_OF_RANGE = 0x0300
    TOO_MANY_ITEMS = 0x0301
    MISSING_FIELD = 0x0302
    INVALID_VALUE = 0x0303

    # Seeder preconditions
    INVALID_ADDRESS = 0x0400
    INVALID_OWNER = 0x0401
    INVALID_LAMPORTS = 0x0402
    INVALID_CLOCK = 0x0403

    # Ledger
    ACCOUNT_NOT_FOUND = 0x0500
    REMOTE_ERROR = 0x0501

    # Internal
    INTERNAL_ERROR = 0xFF00


@dataclass(frozen=True)
class SeedError(Exception):
    code: ErrorCode
    message: str

    @property
    def category(self) -> ErrorCategory:
        return ErrorCategory(self.code >> 8)

    def __str__(self) -> str:
        return f"{self.code.name}({self.code:#06x}): {self.message}"


# Allow Python's Exception machinery to set __traceback__/__context__/__cause__
# while keeping dataclass fields frozen.
_EXCEPTION_ATTRS = frozenset(("__traceback__", "__context__", "__cause__"))
_frozen_setattr = SeedError.__setattr__


def _seed_error_setattr(self: SeedError, name: str, value: object) -> None:
    if name in _EXCEPTION_ATTRS:
        object.__setattr__(self, name, value)
    else:
        _frozen_setattr(self, name, value)


SeedError.__setattr__ = _seed_error_setattr  # type: ignore[method-assign]
