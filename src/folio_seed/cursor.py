"""Bounds-checked little-endian cursor over account byte buffers."""

from __future__ import annotations

from typing import Callable, Optional, Sequence, TypeVar

from solders.pubkey import Pubkey

from .errors import ErrorCode, SeedError

T = TypeVar("T")

PUBKEY_SIZE = 32


def int_bounds(width: int, signed: bool) -> tuple[int, int]:
    bits = width * 8
    if signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


def check_int(value: int, width: int, signed: bool = False) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SeedError(ErrorCode.INVALID_VALUE, f"expected integer, got {type(value).__name__}")
    lo, hi = int_bounds(width, signed)
    if not lo <= value <= hi:
        kind = f"{'i' if signed else 'u'}{width * 8}"
        raise SeedError(ErrorCode.VALUE_OUT_OF_RANGE, f"{value} does not fit in {kind}")


class Writer:
    """Sequential writer over a zero-filled buffer of fixed capacity.

    Every write checks its value and the remaining space before touching the
    buffer, so a failed write leaves both the buffer and the offset unchanged.
    """

    def __init__(self, capacity: int):
        if capacity < 0:
            raise SeedError(ErrorCode.INVALID_LENGTH, f"negative capacity {capacity}")
        self.buf = bytearray(capacity)
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self.buf) - self.offset

    def _reserve(self, n: int) -> int:
        if n > self.remaining:
            raise SeedError(
                ErrorCode.BUFFER_OVERFLOW,
                f"write of {n} bytes at offset {self.offset} exceeds buffer of {len(self.buf)}",
            )
        start = self.offset
        self.offset += n
        return start

    def write_int(self, v: int, width: int, signed: bool = False) -> None:
        check_int(v, width, signed)
        start = self._reserve(width)
        self.buf[start:start + width] = int(v).to_bytes(width, "little", signed=signed)

    def write_u8(self, v: int) -> None:
        self.write_int(v, 1)

    def write_u16(self, v: int) -> None:
        self.write_int(v, 2)

    def write_u32(self, v: int) -> None:
        self.write_int(v, 4)

    def write_u64(self, v: int) -> None:
        self.write_int(v, 8)

    def write_u128(self, v: int) -> None:
        self.write_int(v, 16)

    def write_i64(self, v: int) -> None:
        self.write_int(v, 8, signed=True)

    def write_bool(self, v: bool) -> None:
        self.write_u8(1 if v else 0)

    def write_bytes(self, b: bytes) -> None:
        start = self._reserve(len(b))
        self.buf[start:start + len(b)] = b

    def write_pubkey(self, pk: Pubkey) -> None:
        self.write_bytes(bytes(pk))

    def write_option(self, present: bool, write_payload: Callable[["Writer"], None]) -> None:
        self.write_u8(1 if present else 0)
        if present:
            write_payload(self)

    def write_vec(self, items: Sequence[T], write_item: Callable[["Writer", T], None]) -> None:
        self.write_u32(len(items))
        for item in items:
            write_item(self, item)

    def write_len_prefixed(self, b: bytes) -> None:
        self.write_u32(len(b))
        self.write_bytes(b)

    def write_string(self, s: str) -> None:
        self.write_len_prefixed(s.encode("utf-8"))

    def pad_zero(self, n: int) -> None:
        start = self._reserve(n)
        self.buf[start:start + n] = bytes(n)

    def getvalue(self) -> bytes:
        return bytes(self.buf)


class Reader:
    """Sequential reader mirroring :class:`Writer`."""

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def _take(self, n: int) -> bytes:
        if n > self.remaining:
            raise SeedError(
                ErrorCode.BUFFER_UNDERRUN,
                f"read of {n} bytes at offset {self.offset} exceeds buffer of {len(self.data)}",
            )
        start = self.offset
        self.offset += n
        return self.data[start:start + n]

    def read_int(self, width: int, signed: bool = False) -> int:
        return int.from_bytes(self._take(width), "little", signed=signed)

    def read_u8(self) -> int:
        return self.read_int(1)

    def read_u16(self) -> int:
        return self.read_int(2)

    def read_u32(self) -> int:
        return self.read_int(4)

    def read_u64(self) -> int:
        return self.read_int(8)

    def read_u128(self) -> int:
        return self.read_int(16)

    def read_i64(self) -> int:
        return self.read_int(8, signed=True)

    def read_bool(self) -> bool:
        at = self.offset
        v = self.read_u8()
        if v not in (0, 1):
            raise SeedError(ErrorCode.INVALID_TAG, f"bool at offset {at} is {v}")
        return v == 1

    def read_bytes(self, n: int) -> bytes:
        return self._take(n)

    def read_pubkey(self) -> Pubkey:
        return Pubkey.from_bytes(self._take(PUBKEY_SIZE))

    def read_option(self, read_payload: Callable[["Reader"], T]) -> Optional[T]:
        at = self.offset
        tag = self.read_u8()
        if tag == 0:
            return None
        if tag != 1:
            raise SeedError(ErrorCode.INVALID_TAG, f"option tag at offset {at} is {tag}")
        return read_payload(self)

    def read_vec(self, read_item: Callable[["Reader"], T]) -> list[T]:
        count = self.read_u32()
        return [read_item(self) for _ in range(count)]

    def read_len_prefixed(self) -> bytes:
        n = self.read_u32()
        return self._take(n)

    def read_string(self) -> str:
        at = self.offset
        raw = self.read_len_prefixed()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SeedError(ErrorCode.INVALID_UTF8, f"string at offset {at}: {e}") from e

    def skip(self, n: int) -> None:
        self._take(n)
