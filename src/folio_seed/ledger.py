"""Ledger collaborator: account storage and clock.

:class:`SimulatedLedger` is the in-memory backend tests seed into. Anything
else offering the same four calls (a bankrun context, a local validator
wrapper) can stand in through :class:`LedgerBackend`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, Optional, Protocol

from solders.pubkey import Pubkey

from .errors import ErrorCode, SeedError


@dataclass(frozen=True)
class Account:
    lamports: int
    data: bytes
    owner: Pubkey
    executable: bool = False
    rent_epoch: int = 0


@dataclass
class Clock:
    slot: int = 0
    epoch_start_timestamp: int = 0
    epoch: int = 0
    leader_schedule_epoch: int = 0
    unix_timestamp: int = 0


class LedgerBackend(Protocol):
    def set_account(self, address: Pubkey, account: Account) -> None: ...

    def get_account(self, address: Pubkey) -> Optional[Account]: ...

    def get_clock(self) -> Clock: ...

    def set_clock(self, clock: Clock) -> None: ...


class SimulatedLedger:
    """In-memory accounts keyed by address, plus a settable clock.

    Accounts with zero lamports are not stored: closing an account and never
    creating it read back the same way.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._accounts: dict[Pubkey, Account] = {}
        self._clock = clock or Clock()

    def set_account(self, address: Pubkey, account: Account) -> None:
        if account.lamports == 0:
            self._accounts.pop(address, None)
        else:
            self._accounts[address] = account

    def get_account(self, address: Pubkey) -> Optional[Account]:
        return self._accounts.get(address)

    def get_clock(self) -> Clock:
        return replace(self._clock)

    def set_clock(self, clock: Clock) -> None:
        self._clock = replace(clock)

    def warp_to_slot(self, slot: int) -> None:
        if slot < self._clock.slot:
            raise SeedError(
                ErrorCode.INVALID_CLOCK, f"cannot warp back from slot {self._clock.slot} to {slot}"
            )
        self._clock.slot = slot

    def advance_time(self, seconds: int, slots: int = 1) -> Clock:
        """Move the clock forward by ``seconds`` and ``slots``; returns the new clock."""
        if seconds < 0 or slots < 0:
            raise SeedError(ErrorCode.INVALID_CLOCK, "clock can only move forward")
        self._clock.unix_timestamp += seconds
        self._clock.slot += slots
        return self.get_clock()

    def accounts(self) -> Iterator[tuple[Pubkey, Account]]:
        """Stored accounts in address byte order."""
        for address in sorted(self._accounts, key=bytes):
            yield address, self._accounts[address]

    def __contains__(self, address: Pubkey) -> bool:
        return address in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)
