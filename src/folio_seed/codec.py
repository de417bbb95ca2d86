"""Record codec: layout registry, kind detection and JSON views."""

from __future__ import annotations

from typing import Any, Optional, Union

from .errors import ErrorCode, SeedError
from .records import admin, folio, governance, loader, rewards, token
from .schema import RecordLayout
from .types import RecordKind

LAYOUTS: dict[RecordKind, RecordLayout] = {
    layout.kind: layout
    for module in (governance, token, folio, rewards, admin, loader)
    for layout in module.LAYOUTS
}

_BY_TYPE: dict[type, RecordLayout] = {layout.record_type: layout for layout in LAYOUTS.values()}


def layout_for(target: Union[RecordKind, str, type, Any]) -> RecordLayout:
    """Resolve a layout from a kind, kind name, record type or record."""
    if isinstance(target, str):
        try:
            target = RecordKind(target)
        except ValueError:
            raise SeedError(ErrorCode.UNKNOWN_RECORD_KIND, f"unknown record kind {target!r}") from None
    if isinstance(target, RecordKind):
        return LAYOUTS[target]
    record_type = target if isinstance(target, type) else type(target)
    layout = _BY_TYPE.get(record_type)
    if layout is None:
        raise SeedError(ErrorCode.UNKNOWN_RECORD_KIND, f"no layout for {record_type.__name__}")
    return layout


def encode_record(record: Any) -> bytes:
    return layout_for(record).encode(record)


def decode_record(data: bytes, kind: Optional[Union[RecordKind, str, type]] = None) -> Any:
    """Decode ``data`` as ``kind``, or as whatever :func:`identify_kind` finds."""
    if kind is None:
        kind = identify_kind(data)
    return layout_for(kind).decode(data)


def identify_kind(data: bytes) -> RecordKind:
    """Name the record kind held in ``data`` from its discriminator or size.

    Multi-byte discriminators (Anchor, loader state) are tried first. Token
    accounts and mints come next, by exact length, because their first byte is
    an arbitrary address byte that can collide with a single-byte governance
    tag. Governance tags are tried last, so a variable-length governance record
    that happens to be 82 or 165 bytes long needs an explicit kind.
    """
    data = bytes(data)
    for layout in LAYOUTS.values():
        if len(layout.discriminator) > 1 and data.startswith(layout.discriminator):
            return layout.kind
    for layout in LAYOUTS.values():
        if not layout.discriminator and len(data) == layout.account_size:
            return layout.kind
    for layout in LAYOUTS.values():
        if len(layout.discriminator) == 1 and data.startswith(layout.discriminator):
            return layout.kind
    raise SeedError(
        ErrorCode.UNKNOWN_RECORD_KIND,
        f"no record kind matches {len(data)} bytes starting {data[:8].hex()}",
    )


def field_offsets(record: Any) -> list[tuple[str, int, int]]:
    return layout_for(record).field_offsets(record)


def record_to_json(record: Any) -> dict[str, Any]:
    layout = layout_for(record)
    return {"kind": layout.name, "record": layout.to_json(record)}


def record_from_json(obj: dict[str, Any], kind: Optional[Union[RecordKind, str]] = None) -> Any:
    """Inverse of :func:`record_to_json`; ``kind`` overrides ``obj["kind"]``."""
    if kind is None:
        if "kind" not in obj:
            raise SeedError(ErrorCode.MISSING_FIELD, "record document has no kind")
        kind = obj["kind"]
        obj = obj.get("record", {})
    elif "record" in obj and "kind" in obj:
        obj = obj["record"]
    return layout_for(kind).from_json(obj)
