"""Ledger snapshot documents (JSON/YAML)."""

from __future__ import annotations

import json

import pytest
import yaml
from solders.pubkey import Pubkey

from folio_seed.errors import ErrorCode, SeedError
from folio_seed.fixtures_io import (
    account_from_json,
    dump_yaml,
    ledger_from_json,
    ledger_to_json,
    load_document,
    write_yaml,
)
from folio_seed.records.governance import Realm
from folio_seed.records.token import TokenAccount
from folio_seed.state_digest import compute_ledger_digest


def _key(b: int) -> Pubkey:
    return Pubkey(bytes([b]) * 32)


def _seed_some(seeder) -> None:
    seeder.seed_realm(_key(1), Realm(community_mint=_key(2), name="Snapshot Realm"))
    seeder.seed_token_account(_key(3), TokenAccount(mint=_key(2), owner=_key(4), amount=9))
    seeder.seed(_key(5), b"\xde\xad\xbe\xef", _key(6), lamports=17)


def test_snapshot_roundtrip(seeder, ledger) -> None:
    _seed_some(seeder)
    doc = ledger_to_json(ledger)
    restored = ledger_from_json(json.loads(json.dumps(doc)))
    assert compute_ledger_digest(restored) == compute_ledger_digest(ledger)
    assert restored.get_clock() == ledger.get_clock()


def test_snapshot_decoded_views(seeder, ledger) -> None:
    _seed_some(seeder)
    entries = {entry["address"]: entry for entry in ledger_to_json(ledger)["accounts"]}
    assert entries[str(_key(1))]["decoded"]["kind"] == "realm"
    assert entries[str(_key(1))]["decoded"]["record"]["name"] == "Snapshot Realm"
    assert entries[str(_key(3))]["decoded"]["kind"] == "token_account"
    # unrecognised bytes stay raw
    assert "decoded" not in entries[str(_key(5))]
    assert entries[str(_key(5))]["data"] == "deadbeef"

    plain = ledger_to_json(ledger, decode=False)
    assert all("decoded" not in entry for entry in plain["accounts"])


def test_yaml_file_roundtrip(tmp_path, seeder, ledger) -> None:
    _seed_some(seeder)
    path = tmp_path / "ledger.yaml"
    write_yaml(path, ledger_to_json(ledger))
    restored = ledger_from_json(load_document(path))
    assert compute_ledger_digest(restored) == compute_ledger_digest(ledger)

    json_path = tmp_path / "ledger.json"
    json_path.write_text(json.dumps(ledger_to_json(ledger)))
    assert compute_ledger_digest(ledger_from_json(load_document(json_path))) == compute_ledger_digest(ledger)


def test_dump_yaml_keeps_order() -> None:
    text = dump_yaml({"b": 1, "a": "x"})
    assert text.index("b:") < text.index("a:")
    assert yaml.safe_load(text) == {"b": 1, "a": "x"}


def test_account_from_json_errors() -> None:
    with pytest.raises(SeedError) as exc:
        account_from_json({"address": "nope", "owner": str(_key(1))})
    assert exc.value.code == ErrorCode.INVALID_ADDRESS

    with pytest.raises(SeedError) as exc:
        account_from_json({"address": str(_key(1)), "owner": str(_key(2)), "data": "zz"})
    assert exc.value.code == ErrorCode.INVALID_VALUE
