"""Helpers to serialize/deserialize ledger snapshots and records."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import yaml
from solders.pubkey import Pubkey

from .codec import decode_record, identify_kind, record_to_json
from .errors import ErrorCode, SeedError
from .ledger import Account, Clock, SimulatedLedger


class PlainDumper(yaml.SafeDumper):
    pass


def _str_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style=None)


PlainDumper.add_representer(str, _str_representer)


def dump_yaml(data: dict) -> str:
    return yaml.dump(data, Dumper=PlainDumper, sort_keys=False, width=4096)


def write_yaml(path: Path, data: dict) -> None:
    path.write_text(dump_yaml(data))


def load_document(path: Path) -> Any:
    """Load a YAML or JSON document (JSON is valid YAML, suffix picks the parser)."""
    text = Path(path).read_text()
    if Path(path).suffix == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def _pubkey(value: Any, what: str) -> Pubkey:
    try:
        return Pubkey.from_string(value)
    except (ValueError, TypeError):
        raise SeedError(ErrorCode.INVALID_ADDRESS, f"{what}: not a base58 address: {value!r}") from None


def _decoded(data: bytes) -> Optional[dict[str, Any]]:
    # Decoded views are informational; raw bytes stay authoritative.
    if not data:
        return None
    try:
        return record_to_json(decode_record(data, identify_kind(data)))
    except SeedError:
        return None


def account_to_json(address: Pubkey, account: Account, decode: bool = True) -> dict[str, Any]:
    out: dict[str, Any] = {
        "address": str(address),
        "lamports": account.lamports,
        "owner": str(account.owner),
        "executable": account.executable,
        "rent_epoch": account.rent_epoch,
        "data": account.data.hex(),
    }
    if decode:
        decoded = _decoded(account.data)
        if decoded is not None:
            out["decoded"] = decoded
    return out


def account_from_json(obj: dict[str, Any]) -> tuple[Pubkey, Account]:
    address = _pubkey(obj.get("address"), "address")
    try:
        data = bytes.fromhex(obj.get("data", ""))
    except ValueError:
        raise SeedError(ErrorCode.INVALID_VALUE, f"{address}: data is not hex") from None
    account = Account(
        lamports=int(obj.get("lamports", 0)),
        data=data,
        owner=_pubkey(obj.get("owner"), f"{address} owner"),
        executable=bool(obj.get("executable", False)),
        rent_epoch=int(obj.get("rent_epoch", 0)),
    )
    return address, account


def clock_to_json(clock: Clock) -> dict[str, int]:
    return {
        "slot": clock.slot,
        "epoch_start_timestamp": clock.epoch_start_timestamp,
        "epoch": clock.epoch,
        "leader_schedule_epoch": clock.leader_schedule_epoch,
        "unix_timestamp": clock.unix_timestamp,
    }


def ledger_to_json(ledger: SimulatedLedger, decode: bool = True) -> dict[str, Any]:
    return {
        "clock": clock_to_json(ledger.get_clock()),
        "accounts": [account_to_json(a, acc, decode) for a, acc in ledger.accounts()],
    }


def ledger_from_json(obj: dict[str, Any]) -> SimulatedLedger:
    clock = Clock(**{k: int(v) for k, v in obj.get("clock", {}).items()})
    ledger = SimulatedLedger(clock)
    for entry in obj.get("accounts", []):
        address, account = account_from_json(entry)
        ledger.set_account(address, account)
    return ledger
