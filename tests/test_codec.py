"""Codec registry: kind lookup, detection and JSON documents."""

from __future__ import annotations

import pytest

from folio_seed.codec import (
    LAYOUTS,
    decode_record,
    encode_record,
    field_offsets,
    identify_kind,
    layout_for,
    record_from_json,
    record_to_json,
)
from folio_seed.errors import ErrorCode, SeedError
from folio_seed.records.governance import Realm
from folio_seed.types import RecordKind


def test_every_kind_registered() -> None:
    assert set(LAYOUTS) == set(RecordKind)


def test_discriminators_unique() -> None:
    discs = [layout.discriminator for layout in LAYOUTS.values() if layout.discriminator]
    assert len(discs) == len(set(discs))


def test_layout_lookup() -> None:
    by_kind = layout_for(RecordKind.REALM)
    assert layout_for("realm") is by_kind
    assert layout_for(Realm) is by_kind

    with pytest.raises(SeedError) as exc:
        layout_for("vote_record")
    assert exc.value.code == ErrorCode.UNKNOWN_RECORD_KIND

    with pytest.raises(SeedError) as exc:
        layout_for(object())
    assert exc.value.code == ErrorCode.UNKNOWN_RECORD_KIND


@pytest.mark.parametrize("kind", list(RecordKind), ids=lambda k: k.value)
def test_roundtrip_every_kind(kind, samples, layout_vector) -> None:
    record = samples[kind]
    data = encode_record(record)
    assert data == encode_record(record)
    assert decode_record(data, kind) == record
    assert identify_kind(data) == kind
    assert decode_record(data) == record
    layout_vector(f"{kind.value}_sample", record)


@pytest.mark.parametrize("kind", list(RecordKind), ids=lambda k: k.value)
def test_json_roundtrip_every_kind(kind, samples) -> None:
    record = samples[kind]
    doc = record_to_json(record)
    assert doc["kind"] == kind.value
    assert record_from_json(doc) == record
    assert record_from_json(doc["record"], kind) == record


@pytest.mark.parametrize("kind", list(RecordKind), ids=lambda k: k.value)
def test_offsets_cover_account(kind, samples) -> None:
    record = samples[kind]
    rows = field_offsets(record)
    end = 0
    for _, offset, size in rows:
        assert offset == end
        end += size
    assert end == len(encode_record(record))


def test_identify_unknown() -> None:
    with pytest.raises(SeedError) as exc:
        identify_kind(b"\xee" * 10)
    assert exc.value.code == ErrorCode.UNKNOWN_RECORD_KIND


def test_decode_as_wrong_kind(samples) -> None:
    data = encode_record(samples[RecordKind.FOLIO])
    with pytest.raises(SeedError) as exc:
        decode_record(data, RecordKind.ACTOR)
    assert exc.value.code == ErrorCode.DISCRIMINATOR_MISMATCH


def test_record_document_needs_kind() -> None:
    with pytest.raises(SeedError) as exc:
        record_from_json({"record": {}})
    assert exc.value.code == ErrorCode.MISSING_FIELD


def test_json_enum_by_name(samples) -> None:
    doc = record_to_json(samples[RecordKind.PROPOSAL])
    assert doc["record"]["state"] == "EXECUTING"
    assert doc["record"]["vote_type"] == {"variant": "SINGLE_CHOICE", "value": None}
    assert doc["record"]["options"][0]["vote_result"] == "SUCCEEDED"
