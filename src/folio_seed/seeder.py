"""Ledger state seeder.

Writes whole accounts into a ledger backend, bypassing instruction
execution. A seed either lands completely or, when the record or the
account parameters are invalid, not at all: everything is validated and
encoded before the backend is called.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional, TypeVar

from solders.pubkey import Pubkey

from .codec import layout_for
from .config import SYSTEM_PROGRAM_ID, SeederConfig
from .errors import ErrorCode, SeedError
from .ledger import Account, Clock, LedgerBackend
from .records.admin import DAOFeeConfig, FolioFeeConfig, ProgramRegistrar
from .records.folio import (
    Actor,
    Auction,
    AuctionEnds,
    FeeDistribution,
    FeeRecipients,
    Folio,
    FolioBasket,
    Rebalance,
    UserPendingBasket,
)
from .records.governance import Governance, Proposal, ProposalTransaction, Realm, TokenOwnerRecord
from .records.loader import ProgramData
from .records.rewards import RewardInfo, RewardTokens, UserRewardInfo
from .records.token import Mint, TokenAccount

logger = logging.getLogger(__name__)

T = TypeVar("T")

_U64_MAX = (1 << 64) - 1


def _check_pubkey(name: str, value: Any) -> None:
    if not isinstance(value, Pubkey):
        raise SeedError(ErrorCode.INVALID_ADDRESS, f"{name} must be a Pubkey, got {type(value).__name__}")


class LedgerSeeder:
    def __init__(self, ledger: LedgerBackend, config: Optional[SeederConfig] = None):
        self.ledger = ledger
        self.config = config or SeederConfig()

    # Raw accounts

    def seed(
        self,
        address: Pubkey,
        data: bytes,
        owner: Pubkey,
        lamports: Optional[int] = None,
        executable: bool = False,
    ) -> Account:
        """Replace the account at ``address`` with ``data`` owned by ``owner``."""
        if lamports is None:
            lamports = self.config.default_lamports
        _check_pubkey("address", address)
        _check_pubkey("owner", owner)
        if not isinstance(data, (bytes, bytearray)):
            raise SeedError(ErrorCode.INVALID_VALUE, f"account data must be bytes, got {type(data).__name__}")
        if data and owner == SYSTEM_PROGRAM_ID:
            raise SeedError(
                ErrorCode.INVALID_OWNER, f"{address}: data account cannot be owned by the system program"
            )
        if isinstance(lamports, bool) or not isinstance(lamports, int) or not 0 < lamports <= _U64_MAX:
            raise SeedError(ErrorCode.INVALID_LAMPORTS, f"{address}: lamports {lamports!r} out of range")

        account = Account(lamports=lamports, data=bytes(data), owner=owner, executable=executable)
        self.ledger.set_account(address, account)
        logger.debug("seeded %s: %d bytes owned by %s", address, len(data), owner)
        return account

    def seed_record(
        self,
        address: Pubkey,
        record: Any,
        lamports: Optional[int] = None,
        owner: Optional[Pubkey] = None,
    ) -> Account:
        """Encode ``record`` and seed it under its kind's owning program.

        ``owner`` overrides the program for kinds deployed more than once.
        """
        layout = layout_for(record)
        data = layout.encode(record)
        logger.debug("encoded %s for %s", layout.name, address)
        return self.seed(address, data, owner or layout.owner, lamports)

    def close(self, address: Pubkey) -> None:
        """Drain and empty ``address``; it then reads back as missing."""
        _check_pubkey("address", address)
        self.ledger.set_account(address, Account(lamports=0, data=b"", owner=SYSTEM_PROGRAM_ID))
        logger.debug("closed %s", address)

    def fetch_raw(self, address: Pubkey) -> Optional[Account]:
        return self.ledger.get_account(address)

    def fetch(self, address: Pubkey, record_type: type[T], owner: Optional[Pubkey] = None) -> T:
        """Read ``address`` back and decode it as ``record_type``."""
        account = self.ledger.get_account(address)
        if account is None:
            raise SeedError(ErrorCode.ACCOUNT_NOT_FOUND, f"no account at {address}")
        layout = layout_for(record_type)
        expected = owner or layout.owner
        if account.owner != expected:
            raise SeedError(
                ErrorCode.OWNER_MISMATCH,
                f"{address} is owned by {account.owner}, expected {expected} for {layout.name}",
            )
        return layout.decode(account.data)

    # Clock

    def now(self) -> int:
        return self.ledger.get_clock().unix_timestamp

    def set_clock(self, **fields: int) -> Clock:
        """Overwrite the named clock fields, keeping the rest."""
        try:
            clock = replace(self.ledger.get_clock(), **fields)
        except TypeError as e:
            raise SeedError(ErrorCode.INVALID_CLOCK, str(e)) from e
        self.ledger.set_clock(clock)
        logger.debug("clock set to slot %d, unix %d", clock.slot, clock.unix_timestamp)
        return clock

    # Per-kind entry points

    def seed_realm(self, address: Pubkey, realm: Realm, lamports: Optional[int] = None) -> Account:
        return self.seed_record(address, realm, lamports)

    def seed_governance(self, address: Pubkey, governance: Governance, lamports: Optional[int] = None) -> Account:
        return self.seed_record(address, governance, lamports)

    def seed_proposal(self, address: Pubkey, proposal: Proposal, lamports: Optional[int] = None) -> Account:
        return self.seed_record(address, proposal, lamports)

    def seed_proposal_transaction(
        self, address: Pubkey, tx: ProposalTransaction, lamports: Optional[int] = None
    ) -> Account:
        return self.seed_record(address, tx, lamports)

    def seed_token_owner_record(
        self, address: Pubkey, record: TokenOwnerRecord, lamports: Optional[int] = None
    ) -> Account:
        return self.seed_record(address, record, lamports)

    def seed_token_account(self, address: Pubkey, account: TokenAccount, lamports: Optional[int] = None) -> Account:
        return self.seed_record(address, account, lamports)

    def seed_mint(self, address: Pubkey, mint: Mint, lamports: Optional[int] = None) -> Account:
        return self.seed_record(address, mint, lamports)

    def seed_folio(self, address: Pubkey, folio: Folio, lamports: Optional[int] = None) -> Account:
        return self.seed_record(address, folio, lamports)

    def seed_actor(self, address: Pubkey, actor: Actor, lamports: Optional[int] = None) -> Account:
        return self.seed_record(address, actor, lamports)

    def seed_rebalance(self, address: Pubkey, rebalance: Rebalance, lamports: Optional[int] = None) -> Account:
        return self.seed_record(address, rebalance, lamports)

    def seed_auction(self, address: Pubkey, auction: Auction, lamports: Optional[int] = None) -> Account:
        return self.seed_record(address, auction, lamports)

    def seed_auction_ends(self, address: Pubkey, auction_ends: AuctionEnds, lamports: Optional[int] = None) -> Account:
        return self.seed_record(address, auction_ends, lamports)

    def seed_fee_recipients(
        self, address: Pubkey, fee_recipients: FeeRecipients, lamports: Optional[int] = None
    ) -> Account:
        return self.seed_record(address, fee_recipients, lamports)

    def seed_fee_distribution(
        self, address: Pubkey, fee_distribution: FeeDistribution, lamports: Optional[int] = None
    ) -> Account:
        return self.seed_record(address, fee_distribution, lamports)

    def seed_folio_basket(self, address: Pubkey, basket: FolioBasket, lamports: Optional[int] = None) -> Account:
        return self.seed_record(address, basket, lamports)

    def seed_user_pending_basket(
        self, address: Pubkey, basket: UserPendingBasket, lamports: Optional[int] = None
    ) -> Account:
        return self.seed_record(address, basket, lamports)

    def seed_reward_tokens(
        self, address: Pubkey, reward_tokens: RewardTokens, lamports: Optional[int] = None
    ) -> Account:
        return self.seed_record(address, reward_tokens, lamports)

    def seed_reward_info(self, address: Pubkey, info: RewardInfo, lamports: Optional[int] = None) -> Account:
        return self.seed_record(address, info, lamports)

    def seed_user_reward_info(self, address: Pubkey, info: UserRewardInfo, lamports: Optional[int] = None) -> Account:
        return self.seed_record(address, info, lamports)

    def seed_program_registrar(
        self, address: Pubkey, registrar: ProgramRegistrar, lamports: Optional[int] = None
    ) -> Account:
        return self.seed_record(address, registrar, lamports)

    def seed_dao_fee_config(self, address: Pubkey, config: DAOFeeConfig, lamports: Optional[int] = None) -> Account:
        return self.seed_record(address, config, lamports)

    def seed_folio_fee_config(
        self, address: Pubkey, config: FolioFeeConfig, lamports: Optional[int] = None
    ) -> Account:
        return self.seed_record(address, config, lamports)

    def seed_program_data(self, address: Pubkey, program_data: ProgramData, lamports: Optional[int] = None) -> Account:
        return self.seed_record(address, program_data, lamports)
