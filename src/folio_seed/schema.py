"""Declarative field kinds and record layouts.

A record layout is a discriminator followed by a list of fields, each bound
to a :class:`Kind`. Every kind knows three things about its wire form:

* ``size(value, path)`` validates a value and returns its encoded width;
* ``write(writer, value)`` emits it through the cursor;
* ``read(reader)`` parses it back.

Encoding always sizes the whole record first, so range and shape errors are
raised before a buffer is allocated. ``path`` is the dotted field path used in
error messages, e.g. ``proposal.options[0].label``.
"""

from __future__ import annotations

import hashlib
from enum import IntEnum
from typing import Any, Callable, NamedTuple, Optional, Sequence

from solders.pubkey import Pubkey

from .cursor import PUBKEY_SIZE, Reader, Writer, check_int
from .errors import ErrorCode, SeedError
from .types import RecordKind


def anchor_discriminator(name: str) -> bytes:
    """First 8 bytes of ``sha256("account:<Name>")``."""
    return hashlib.sha256(f"account:{name}".encode()).digest()[:8]


def _require(value: Any, path: str) -> None:
    if value is None:
        raise SeedError(ErrorCode.MISSING_FIELD, f"{path} is required")


def _at(path: str, e: SeedError) -> SeedError:
    return SeedError(e.code, f"{path}: {e.message}")


class Kind:
    # Encoded width when it does not depend on the value.
    fixed: Optional[int] = None

    def size(self, value: Any, path: str) -> int:
        raise NotImplementedError

    def write(self, w: Writer, value: Any) -> None:
        raise NotImplementedError

    def read(self, r: Reader) -> Any:
        raise NotImplementedError

    def to_json(self, value: Any) -> Any:
        return value

    def from_json(self, obj: Any, path: str) -> Any:
        return obj


class Int(Kind):
    def __init__(self, width: int, signed: bool = False):
        self.width = width
        self.signed = signed
        self.fixed = width

    def size(self, value: Any, path: str) -> int:
        _require(value, path)
        try:
            check_int(value, self.width, self.signed)
        except SeedError as e:
            raise _at(path, e) from None
        return self.width

    def write(self, w: Writer, value: int) -> None:
        w.write_int(value, self.width, self.signed)

    def read(self, r: Reader) -> int:
        return r.read_int(self.width, self.signed)

    def to_json(self, value: int) -> int:
        return int(value)

    def from_json(self, obj: Any, path: str) -> int:
        # u128 amounts may arrive as strings from JSON tooling
        if isinstance(obj, str):
            try:
                return int(obj, 0)
            except ValueError:
                raise SeedError(ErrorCode.INVALID_VALUE, f"{path}: not an integer: {obj!r}") from None
        return obj


U8 = Int(1)
U16 = Int(2)
U32 = Int(4)
U64 = Int(8)
U128 = Int(16)
I64 = Int(8, signed=True)


class Bool(Kind):
    fixed = 1

    def size(self, value: Any, path: str) -> int:
        _require(value, path)
        if not isinstance(value, bool):
            raise SeedError(ErrorCode.INVALID_VALUE, f"{path} must be a bool")
        return 1

    def write(self, w: Writer, value: bool) -> None:
        w.write_bool(value)

    def read(self, r: Reader) -> bool:
        return r.read_bool()


BOOL = Bool()


class PubkeyKind(Kind):
    fixed = PUBKEY_SIZE

    def size(self, value: Any, path: str) -> int:
        _require(value, path)
        if not isinstance(value, Pubkey):
            raise SeedError(ErrorCode.INVALID_VALUE, f"{path} must be a Pubkey")
        return PUBKEY_SIZE

    def write(self, w: Writer, value: Pubkey) -> None:
        w.write_pubkey(value)

    def read(self, r: Reader) -> Pubkey:
        return r.read_pubkey()

    def to_json(self, value: Pubkey) -> str:
        return str(value)

    def from_json(self, obj: Any, path: str) -> Pubkey:
        if isinstance(obj, Pubkey):
            return obj
        try:
            return Pubkey.from_string(obj)
        except (ValueError, TypeError):
            raise SeedError(ErrorCode.INVALID_VALUE, f"{path}: not a base58 address: {obj!r}") from None


PUBKEY = PubkeyKind()


def _check_bytes(value: Any, path: str) -> bytes:
    _require(value, path)
    if not isinstance(value, (bytes, bytearray)):
        raise SeedError(ErrorCode.INVALID_VALUE, f"{path} must be bytes")
    return bytes(value)


def _hex(obj: Any, path: str) -> bytes:
    try:
        return bytes.fromhex(obj)
    except (ValueError, TypeError):
        raise SeedError(ErrorCode.INVALID_VALUE, f"{path}: not a hex string") from None


class FixedBytes(Kind):
    def __init__(self, n: int):
        self.fixed = n

    def size(self, value: Any, path: str) -> int:
        if len(_check_bytes(value, path)) != self.fixed:
            raise SeedError(ErrorCode.INVALID_LENGTH, f"{path} must be {self.fixed} bytes")
        return self.fixed

    def write(self, w: Writer, value: bytes) -> None:
        w.write_bytes(value)

    def read(self, r: Reader) -> bytes:
        return r.read_bytes(self.fixed)

    def to_json(self, value: bytes) -> str:
        return bytes(value).hex()

    def from_json(self, obj: Any, path: str) -> bytes:
        return _hex(obj, path)


class Bytes(Kind):
    """u32 length prefix followed by raw bytes."""

    def size(self, value: Any, path: str) -> int:
        n = len(_check_bytes(value, path))
        if n > 0xFFFFFFFF:
            raise SeedError(ErrorCode.VALUE_OUT_OF_RANGE, f"{path}: length {n} does not fit in u32")
        return 4 + n

    def write(self, w: Writer, value: bytes) -> None:
        w.write_len_prefixed(bytes(value))

    def read(self, r: Reader) -> bytes:
        return r.read_len_prefixed()

    def to_json(self, value: bytes) -> str:
        return bytes(value).hex()

    def from_json(self, obj: Any, path: str) -> bytes:
        return _hex(obj, path)


BYTES = Bytes()


class String(Kind):
    """u32 length prefix followed by UTF-8 bytes."""

    def size(self, value: Any, path: str) -> int:
        _require(value, path)
        if not isinstance(value, str):
            raise SeedError(ErrorCode.INVALID_VALUE, f"{path} must be a str")
        return 4 + len(value.encode("utf-8"))

    def write(self, w: Writer, value: str) -> None:
        w.write_string(value)

    def read(self, r: Reader) -> str:
        return r.read_string()


STRING = String()


class FixedString(Kind):
    """UTF-8 text zero-padded to ``n`` bytes."""

    def __init__(self, n: int):
        self.fixed = n

    def size(self, value: Any, path: str) -> int:
        _require(value, path)
        if not isinstance(value, str):
            raise SeedError(ErrorCode.INVALID_VALUE, f"{path} must be a str")
        if "\x00" in value:
            raise SeedError(ErrorCode.INVALID_VALUE, f"{path} must not contain NUL")
        n = len(value.encode("utf-8"))
        if n > self.fixed:
            raise SeedError(ErrorCode.INVALID_LENGTH, f"{path} is {n} bytes, limit is {self.fixed}")
        return self.fixed

    def write(self, w: Writer, value: str) -> None:
        raw = value.encode("utf-8")
        w.write_bytes(raw)
        w.pad_zero(self.fixed - len(raw))

    def read(self, r: Reader) -> str:
        at = r.offset
        raw = r.read_bytes(self.fixed).rstrip(b"\x00")
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SeedError(ErrorCode.INVALID_UTF8, f"fixed string at offset {at}: {e}") from e


class Reserved(Kind):
    """Zero-filled run that is never surfaced on the record."""

    def __init__(self, n: int):
        self.fixed = n

    def size(self, value: Any, path: str) -> int:
        return self.fixed

    def write(self, w: Writer, value: Any) -> None:
        w.pad_zero(self.fixed)

    def read(self, r: Reader) -> None:
        r.skip(self.fixed)
        return None


class EnumKind(Kind):
    """Closed enumeration stored as its integer wire value."""

    def __init__(self, enum_cls: type[IntEnum], width: int = 1):
        self.enum_cls = enum_cls
        self.width = width
        self.fixed = width

    def size(self, value: Any, path: str) -> int:
        _require(value, path)
        try:
            self.enum_cls(value)
        except ValueError:
            raise SeedError(
                ErrorCode.INVALID_VALUE, f"{path}: {value!r} is not a {self.enum_cls.__name__}"
            ) from None
        return self.width

    def write(self, w: Writer, value: IntEnum) -> None:
        w.write_int(int(value), self.width)

    def read(self, r: Reader) -> IntEnum:
        at = r.offset
        raw = r.read_int(self.width)
        try:
            return self.enum_cls(raw)
        except ValueError:
            raise SeedError(
                ErrorCode.INVALID_TAG, f"{self.enum_cls.__name__} at offset {at} is {raw}"
            ) from None

    def to_json(self, value: IntEnum) -> str:
        return self.enum_cls(value).name

    def from_json(self, obj: Any, path: str) -> IntEnum:
        try:
            if isinstance(obj, str):
                return self.enum_cls[obj]
            return self.enum_cls(obj)
        except (KeyError, ValueError):
            raise SeedError(
                ErrorCode.INVALID_VALUE, f"{path}: {obj!r} is not a {self.enum_cls.__name__}"
            ) from None


class Option(Kind):
    """Borsh option: u8 presence tag, payload only when present."""

    def __init__(self, inner: Kind):
        self.inner = inner

    def size(self, value: Any, path: str) -> int:
        if value is None:
            return 1
        return 1 + self.inner.size(value, path)

    def write(self, w: Writer, value: Any) -> None:
        w.write_option(value is not None, lambda w: self.inner.write(w, value))

    def read(self, r: Reader) -> Any:
        return r.read_option(self.inner.read)

    def to_json(self, value: Any) -> Any:
        return None if value is None else self.inner.to_json(value)

    def from_json(self, obj: Any, path: str) -> Any:
        return None if obj is None else self.inner.from_json(obj, path)


class COption(Kind):
    """SPL token option: u32 tag, payload bytes always present."""

    def __init__(self, inner: Kind):
        if inner.fixed is None:
            raise TypeError("COption payload must have a fixed width")
        self.inner = inner
        self.fixed = 4 + inner.fixed

    def size(self, value: Any, path: str) -> int:
        if value is not None:
            self.inner.size(value, path)
        return self.fixed

    def write(self, w: Writer, value: Any) -> None:
        if value is None:
            w.write_u32(0)
            w.pad_zero(self.inner.fixed)
        else:
            w.write_u32(1)
            self.inner.write(w, value)

    def read(self, r: Reader) -> Any:
        at = r.offset
        tag = r.read_u32()
        if tag == 0:
            r.skip(self.inner.fixed)
            return None
        if tag != 1:
            raise SeedError(ErrorCode.INVALID_TAG, f"coption tag at offset {at} is {tag}")
        return self.inner.read(r)

    def to_json(self, value: Any) -> Any:
        return None if value is None else self.inner.to_json(value)

    def from_json(self, obj: Any, path: str) -> Any:
        return None if obj is None else self.inner.from_json(obj, path)


def _check_list(value: Any, path: str) -> list:
    _require(value, path)
    if not isinstance(value, (list, tuple)):
        raise SeedError(ErrorCode.INVALID_VALUE, f"{path} must be a list")
    return list(value)


class Vec(Kind):
    """u32 element count followed by the elements."""

    def __init__(self, inner: Kind):
        self.inner = inner

    def size(self, value: Any, path: str) -> int:
        items = _check_list(value, path)
        if len(items) > 0xFFFFFFFF:
            raise SeedError(ErrorCode.VALUE_OUT_OF_RANGE, f"{path}: {len(items)} items do not fit in u32")
        return 4 + sum(self.inner.size(item, f"{path}[{i}]") for i, item in enumerate(items))

    def write(self, w: Writer, value: Sequence[Any]) -> None:
        w.write_vec(value, self.inner.write)

    def read(self, r: Reader) -> list:
        return r.read_vec(self.inner.read)

    def to_json(self, value: Sequence[Any]) -> list:
        return [self.inner.to_json(v) for v in value]

    def from_json(self, obj: Any, path: str) -> list:
        items = _check_list(obj, path)
        return [self.inner.from_json(v, f"{path}[{i}]") for i, v in enumerate(items)]


class Array(Kind):
    """Exactly ``n`` elements, no count prefix."""

    def __init__(self, inner: Kind, n: int):
        if inner.fixed is None:
            raise TypeError("Array element must have a fixed width")
        self.inner = inner
        self.n = n
        self.fixed = inner.fixed * n

    def size(self, value: Any, path: str) -> int:
        items = _check_list(value, path)
        if len(items) != self.n:
            raise SeedError(ErrorCode.INVALID_LENGTH, f"{path} must have {self.n} items, got {len(items)}")
        for i, item in enumerate(items):
            self.inner.size(item, f"{path}[{i}]")
        return self.fixed

    def write(self, w: Writer, value: Sequence[Any]) -> None:
        for item in value:
            self.inner.write(w, item)

    def read(self, r: Reader) -> list:
        return [self.inner.read(r) for _ in range(self.n)]

    def to_json(self, value: Sequence[Any]) -> list:
        return [self.inner.to_json(v) for v in value]

    def from_json(self, obj: Any, path: str) -> list:
        items = _check_list(obj, path)
        return [self.inner.from_json(v, f"{path}[{i}]") for i, v in enumerate(items)]


class SlotArray(Array):
    """Fixed ``n`` slots holding a list of at most ``n`` entries.

    Unused slots are filled with ``empty()``. Decoding trims trailing empty
    slots only; an empty slot between used ones keeps its position. A list
    ending in an empty entry is rejected since it would not decode back.
    """

    def __init__(self, inner: Kind, n: int, empty: Callable[[], Any]):
        super().__init__(inner, n)
        self.empty = empty

    def size(self, value: Any, path: str) -> int:
        items = _check_list(value, path)
        if len(items) > self.n:
            raise SeedError(ErrorCode.TOO_MANY_ITEMS, f"{path} holds at most {self.n} items, got {len(items)}")
        if items and items[-1] == self.empty():
            raise SeedError(ErrorCode.INVALID_VALUE, f"{path} must not end with an empty slot")
        for i, item in enumerate(items):
            self.inner.size(item, f"{path}[{i}]")
        return self.fixed

    def write(self, w: Writer, value: Sequence[Any]) -> None:
        for item in value:
            self.inner.write(w, item)
        blank = self.empty()
        for _ in range(self.n - len(value)):
            self.inner.write(w, blank)

    def read(self, r: Reader) -> list:
        items = super().read(r)
        blank = self.empty()
        while items and items[-1] == blank:
            items.pop()
        return items


class Variant(Kind):
    """Tagged union: u8 tag, then the payload bound to that tag (if any).

    Values are objects exposing ``variant`` and ``value`` attributes and are
    rebuilt with ``cls(variant=..., value=...)``.
    """

    def __init__(self, enum_cls: type[IntEnum], payloads: dict[IntEnum, Optional[Kind]], cls: type):
        self.tag = EnumKind(enum_cls)
        self.payloads = payloads
        self.cls = cls
        widths = {0 if k is None else k.fixed for k in payloads.values()}
        if len(widths) == 1 and None not in widths:
            self.fixed = 1 + widths.pop()

    def _payload(self, variant: IntEnum) -> Optional[Kind]:
        return self.payloads.get(self.tag.enum_cls(variant))

    def size(self, value: Any, path: str) -> int:
        _require(value, path)
        self.tag.size(getattr(value, "variant", None), f"{path}.variant")
        payload = self._payload(value.variant)
        if payload is None:
            if value.value is not None:
                raise SeedError(
                    ErrorCode.INVALID_VALUE, f"{path}: {self.tag.enum_cls(value.variant).name} carries no value"
                )
            return 1
        return 1 + payload.size(value.value, f"{path}.value")

    def write(self, w: Writer, value: Any) -> None:
        self.tag.write(w, value.variant)
        payload = self._payload(value.variant)
        if payload is not None:
            payload.write(w, value.value)

    def read(self, r: Reader) -> Any:
        variant = self.tag.read(r)
        payload = self.payloads.get(variant)
        return self.cls(variant=variant, value=None if payload is None else payload.read(r))

    def to_json(self, value: Any) -> dict:
        payload = self._payload(value.variant)
        return {
            "variant": self.tag.to_json(value.variant),
            "value": None if payload is None else payload.to_json(value.value),
        }

    def from_json(self, obj: Any, path: str) -> Any:
        if not isinstance(obj, dict):
            raise SeedError(ErrorCode.INVALID_VALUE, f"{path} must be a mapping")
        variant = self.tag.from_json(obj.get("variant"), f"{path}.variant")
        payload = self.payloads.get(variant)
        raw = obj.get("value")
        value = None if payload is None or raw is None else payload.from_json(raw, f"{path}.value")
        return self.cls(variant=variant, value=value)


class Field(NamedTuple):
    name: Optional[str]
    kind: Kind


def reserved(n: int) -> Field:
    return Field(None, Reserved(n))


class Struct(Kind):
    """Dataclass fields in declared wire order."""

    def __init__(self, cls: type, fields: Sequence[Field]):
        self.cls = cls
        self.fields = tuple(fields)
        widths = [f.kind.fixed for f in self.fields]
        if None not in widths:
            self.fixed = sum(widths)

    def size(self, value: Any, path: str) -> int:
        _require(value, path)
        if not isinstance(value, self.cls):
            raise SeedError(
                ErrorCode.INVALID_VALUE, f"{path} must be a {self.cls.__name__}, got {type(value).__name__}"
            )
        total = 0
        for f in self.fields:
            if f.name is None:
                total += f.kind.size(None, path)
            else:
                total += f.kind.size(getattr(value, f.name, None), f"{path}.{f.name}")
        return total

    def write(self, w: Writer, value: Any) -> None:
        for f in self.fields:
            f.kind.write(w, None if f.name is None else getattr(value, f.name))

    def read(self, r: Reader) -> Any:
        kwargs = {}
        for f in self.fields:
            v = f.kind.read(r)
            if f.name is not None:
                kwargs[f.name] = v
        return self.cls(**kwargs)

    def to_json(self, value: Any) -> dict:
        return {f.name: f.kind.to_json(getattr(value, f.name)) for f in self.fields if f.name is not None}

    def from_json(self, obj: Any, path: str) -> Any:
        if not isinstance(obj, dict):
            raise SeedError(ErrorCode.INVALID_VALUE, f"{path} must be a mapping")
        kinds = {f.name: f.kind for f in self.fields if f.name is not None}
        unknown = set(obj) - set(kinds)
        if unknown:
            raise SeedError(ErrorCode.INVALID_VALUE, f"{path}: unknown fields {sorted(unknown)}")
        kwargs = {name: kinds[name].from_json(v, f"{path}.{name}") for name, v in obj.items()}
        try:
            return self.cls(**kwargs)
        except TypeError as e:
            raise SeedError(ErrorCode.MISSING_FIELD, f"{path}: {e}") from e


class RecordLayout:
    """Wire layout of one account kind: discriminator, fields, owner, size.

    ``account_size`` is set for kinds the owning program allocates at a fixed
    length; the encoded record is zero-padded up to it and may never exceed
    it. Without it the encoded size is exact.
    """

    def __init__(
        self,
        kind: RecordKind,
        record_type: type,
        discriminator: bytes,
        fields: Sequence[Field],
        owner: Pubkey,
        account_size: Optional[int] = None,
    ):
        self.kind = kind
        self.record_type = record_type
        self.discriminator = bytes(discriminator)
        self.owner = owner
        self.account_size = account_size
        self.body = Struct(record_type, fields)

    @property
    def name(self) -> str:
        return self.kind.value

    def encoded_size(self, record: Any) -> int:
        """Validate ``record`` and return the bytes it occupies before padding."""
        return len(self.discriminator) + self.body.size(record, self.name)

    def encode(self, record: Any) -> bytes:
        needed = self.encoded_size(record)
        capacity = needed
        if self.account_size is not None:
            if needed > self.account_size:
                raise SeedError(
                    ErrorCode.BUFFER_OVERFLOW,
                    f"{self.name} needs {needed} bytes, account holds {self.account_size}",
                )
            capacity = self.account_size

        w = Writer(capacity)
        w.write_bytes(self.discriminator)
        self.body.write(w, record)
        if w.offset != needed:
            raise SeedError(
                ErrorCode.INTERNAL_ERROR, f"{self.name} wrote {w.offset} bytes, sized {needed}"
            )
        return w.getvalue()

    def decode(self, data: bytes) -> Any:
        data = bytes(data)
        if not self.discriminator and self.account_size is not None and len(data) != self.account_size:
            raise SeedError(
                ErrorCode.SIZE_MISMATCH,
                f"{self.name} is {self.account_size} bytes, got {len(data)}",
            )
        r = Reader(data)
        disc = r.read_bytes(len(self.discriminator))
        if disc != self.discriminator:
            raise SeedError(
                ErrorCode.DISCRIMINATOR_MISMATCH,
                f"expected {self.name} discriminator {self.discriminator.hex()}, got {disc.hex()}",
            )
        return self.body.read(r)

    def field_offsets(self, record: Any) -> list[tuple[str, int, int]]:
        """(field, offset, size) rows for each top-level field of ``record``."""
        self.encoded_size(record)
        rows: list[tuple[str, int, int]] = []
        offset = len(self.discriminator)
        if self.discriminator:
            rows.append(("discriminator", 0, offset))
        for f in self.body.fields:
            value = None if f.name is None else getattr(record, f.name)
            n = f.kind.size(value, self.name)
            rows.append((f.name or "reserved", offset, n))
            offset += n
        if self.account_size is not None and offset < self.account_size:
            rows.append(("padding", offset, self.account_size - offset))
        return rows

    def to_json(self, record: Any) -> dict:
        return self.body.to_json(record)

    def from_json(self, obj: Any) -> Any:
        return self.body.from_json(obj, self.name)
