"""Canonical ledger digest (v1)."""
from __future__ import annotations

from blake3 import blake3

from .ledger import Clock, SimulatedLedger


def _u64_be(value: int) -> bytes:
    if value < 0:
        raise ValueError("u64 must be non-negative")
    return int(value).to_bytes(8, "big", signed=False)


def _i64_be(value: int) -> bytes:
    return int(value).to_bytes(8, "big", signed=True)


def _clock_bytes(clock: Clock) -> bytes:
    buf = bytearray()
    for field in ("slot", "epoch", "leader_schedule_epoch"):
        buf += _u64_be(getattr(clock, field))
    buf += _i64_be(clock.epoch_start_timestamp)
    buf += _i64_be(clock.unix_timestamp)
    return bytes(buf)


def compute_ledger_digest(ledger: SimulatedLedger) -> str:
    """Compute digest v1 over the clock and every stored account.

    Accounts are taken in address byte order and hashed with BLAKE3-256, so
    two ledgers seeded with the same content in any order share a digest.
    """
    buf = bytearray(_clock_bytes(ledger.get_clock()))
    for address, account in ledger.accounts():
        buf += bytes(address)
        buf += _u64_be(account.lamports)
        buf += bytes(account.owner)
        buf += b"\x01" if account.executable else b"\x00"
        buf += _u64_be(account.rent_epoch)
        buf += _u64_be(len(account.data))
        buf += account.data
    return blake3(buf).hexdigest()
