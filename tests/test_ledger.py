"""Simulated ledger storage and clock."""

from __future__ import annotations

import pytest
from solders.pubkey import Pubkey

from folio_seed.config import TOKEN_PROGRAM_ID
from folio_seed.errors import ErrorCode, SeedError
from folio_seed.ledger import Account, Clock, SimulatedLedger


def _key(b: int) -> Pubkey:
    return Pubkey(bytes([b]) * 32)


def test_set_and_get() -> None:
    ledger = SimulatedLedger()
    account = Account(lamports=10, data=b"\x01", owner=TOKEN_PROGRAM_ID)
    ledger.set_account(_key(1), account)
    assert ledger.get_account(_key(1)) == account
    assert ledger.get_account(_key(2)) is None
    assert _key(1) in ledger
    assert len(ledger) == 1


def test_zero_lamports_removes() -> None:
    ledger = SimulatedLedger()
    ledger.set_account(_key(1), Account(lamports=10, data=b"", owner=TOKEN_PROGRAM_ID))
    ledger.set_account(_key(1), Account(lamports=0, data=b"", owner=TOKEN_PROGRAM_ID))
    assert ledger.get_account(_key(1)) is None
    assert len(ledger) == 0


def test_accounts_in_address_order() -> None:
    ledger = SimulatedLedger()
    for b in (9, 3, 5):
        ledger.set_account(_key(b), Account(lamports=b, data=b"", owner=TOKEN_PROGRAM_ID))
    assert [address for address, _ in ledger.accounts()] == [_key(3), _key(5), _key(9)]


def test_clock_is_copied() -> None:
    ledger = SimulatedLedger(Clock(slot=5, unix_timestamp=100))
    clock = ledger.get_clock()
    clock.slot = 99
    assert ledger.get_clock().slot == 5


def test_advance_and_warp() -> None:
    ledger = SimulatedLedger(Clock(slot=5, unix_timestamp=100))
    clock = ledger.advance_time(60, slots=2)
    assert clock.unix_timestamp == 160
    assert clock.slot == 7

    ledger.warp_to_slot(50)
    assert ledger.get_clock().slot == 50

    with pytest.raises(SeedError) as exc:
        ledger.warp_to_slot(10)
    assert exc.value.code == ErrorCode.INVALID_CLOCK

    with pytest.raises(SeedError) as exc:
        ledger.advance_time(-1)
    assert exc.value.code == ErrorCode.INVALID_CLOCK
