"""Pytest fixtures and hooks to collect layout vectors."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest
from solders.pubkey import Pubkey

from folio_seed.codec import encode_record, field_offsets, layout_for, record_to_json
from folio_seed.config import D18, FOLIO_PROGRAM_ID
from folio_seed.ledger import Clock, SimulatedLedger
from folio_seed.records.admin import DAOFeeConfig, FolioFeeConfig, ProgramRegistrar
from folio_seed.records.folio import (
    Actor,
    Auction,
    AuctionEnds,
    AuctionPrices,
    BasketRange,
    FeeDistribution,
    FeeRecipient,
    FeeRecipients,
    Folio,
    FolioBasket,
    FolioTokenAmount,
    Rebalance,
    RebalanceDetailsToken,
    RebalancePrices,
    Role,
    UserPendingBasket,
    UserTokenAmount,
)
from folio_seed.records.governance import (
    AccountMetaData,
    Governance,
    InstructionData,
    ProposalTransaction,
    Realm,
    RealmConfig,
    TokenOwnerRecord,
)
from folio_seed.records.loader import ProgramData
from folio_seed.records.rewards import RewardInfo, RewardTokens, UserRewardInfo
from folio_seed.records.token import Mint, TokenAccount
from folio_seed.scenarios import mocked_proposal
from folio_seed.seeder import LedgerSeeder
from folio_seed.types import RecordKind

NOW = 1_700_000_000
SLOT = 250


def key(b: int) -> Pubkey:
    return Pubkey(bytes([b]) * 32)


def sample_records() -> dict[RecordKind, Any]:
    """One populated record per kind, with options present where the kind has them."""
    return {
        RecordKind.REALM: Realm(
            community_mint=key(1),
            name="Test Realm",
            config=RealmConfig(min_community_weight_to_create_governance=5, council_mint=key(2)),
            authority=key(3),
        ),
        RecordKind.GOVERNANCE: Governance(realm=key(4), governance_seed=key(5), active_proposal_count=2),
        RecordKind.PROPOSAL: mocked_proposal(key(6), key(1), key(7), now=NOW),
        RecordKind.PROPOSAL_TRANSACTION: ProposalTransaction(
            proposal=key(8),
            instructions=[
                InstructionData(
                    program_id=key(9),
                    accounts=[
                        AccountMetaData(key(10), is_signer=True, is_writable=False),
                        AccountMetaData(key(11), is_signer=False, is_writable=True),
                    ],
                    data=b"\x01\x02\x03\x04",
                )
            ],
        ),
        RecordKind.TOKEN_OWNER_RECORD: TokenOwnerRecord(
            realm=key(4),
            governing_token_mint=key(1),
            governing_token_owner=key(12),
            governing_token_deposit_amount=1_000,
            governance_delegate=key(13),
        ),
        RecordKind.TOKEN_ACCOUNT: TokenAccount(
            mint=key(1), owner=key(12), amount=5, delegate=key(13), delegated_amount=2
        ),
        RecordKind.MINT: Mint(mint_authority=key(12), supply=1_000),
        RecordKind.FOLIO: Folio(
            folio_token_mint=key(14),
            bump=254,
            tvl_fee=D18 // 100,
            mint_fee=D18 // 1000,
            auction_length=3600,
            last_poke=NOW,
            mandate="Track the index",
        ),
        RecordKind.ACTOR: Actor(
            authority=key(12), folio=key(15), bump=253, roles=Role.OWNER | Role.AUCTION_LAUNCHER
        ),
        RecordKind.REBALANCE: Rebalance(
            folio=key(15),
            nonce=3,
            current_auction_id=1,
            details=[
                RebalanceDetailsToken(
                    mint=key(16),
                    limits=BasketRange(spot=D18, low=D18 // 2, high=2 * D18),
                    prices=RebalancePrices(low=1, high=10),
                )
            ],
        ),
        RecordKind.AUCTION: Auction(
            folio=key(15),
            sell_mint=key(16),
            buy_mint=key(17),
            id=1,
            nonce=3,
            prices=AuctionPrices(start=2 * D18, end=D18),
            start=NOW,
            end=NOW + 3600,
        ),
        RecordKind.AUCTION_ENDS: AuctionEnds.for_pair(key(17), key(16), rebalance_nonce=3, end_time=NOW + 3600),
        RecordKind.FEE_RECIPIENTS: FeeRecipients(
            folio=key(15),
            fee_recipients=[FeeRecipient(key(18), D18 // 2), FeeRecipient(key(19), D18 // 2)],
        ),
        RecordKind.FEE_DISTRIBUTION: FeeDistribution(
            folio=key(15),
            cranker=key(20),
            index=2,
            amount_to_distribute=10**20,
            fee_recipients_state=[
                FeeRecipient(key(18), D18 // 2),
                FeeRecipient(),
                FeeRecipient(key(19), D18 // 2),
            ],
        ),
        RecordKind.FOLIO_BASKET: FolioBasket(
            folio=key(15), token_amounts=[FolioTokenAmount(key(16), 1_000), FolioTokenAmount(key(17), 2_000)]
        ),
        RecordKind.USER_PENDING_BASKET: UserPendingBasket(
            owner=key(12), folio=key(15), token_amounts=[UserTokenAmount(key(16), 10, 0)]
        ),
        RecordKind.REWARD_TOKENS: RewardTokens(
            realm=key(4), rewards_admin=key(5), reward_ratio=10**15, reward_tokens=[key(21)]
        ),
        RecordKind.REWARD_INFO: RewardInfo(
            realm=key(4), reward_token=key(21), payout_last_paid=NOW, reward_index=D18, total_claimed=7
        ),
        RecordKind.USER_REWARD_INFO: UserRewardInfo(
            realm=key(4), reward_token=key(21), last_reward_index=5, accrued_rewards=7
        ),
        RecordKind.PROGRAM_REGISTRAR: ProgramRegistrar(bump=255, accepted_programs=[FOLIO_PROGRAM_ID]),
        RecordKind.DAO_FEE_CONFIG: DAOFeeConfig(
            fee_recipient=key(22), default_fee_numerator=5 * 10**16, default_fee_floor=15 * 10**14
        ),
        RecordKind.FOLIO_FEE_CONFIG: FolioFeeConfig(bump=250, fee_numerator=10**16, fee_floor=10**15),
        RecordKind.PROGRAM_DATA: ProgramData(slot=SLOT, upgrade_authority=key(12)),
    }


_LAYOUT_VECTORS: list[dict[str, Any]] = []


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--output",
        action="store",
        default=None,
        help="Output directory for generated layout vectors",
    )


@pytest.fixture
def ledger() -> SimulatedLedger:
    return SimulatedLedger(Clock(slot=SLOT, unix_timestamp=NOW))


@pytest.fixture
def seeder(ledger: SimulatedLedger) -> LedgerSeeder:
    return LedgerSeeder(ledger)


@pytest.fixture
def samples() -> dict[RecordKind, Any]:
    return sample_records()


@pytest.fixture
def layout_vector() -> Callable[[str, Any], None]:
    """Collect an encoded record with its offset table."""

    def _layout_vector(name: str, record: Any) -> None:
        _LAYOUT_VECTORS.append(
            {
                "name": name,
                "kind": layout_for(record).name,
                "record": record_to_json(record)["record"],
                "offsets": [list(row) for row in field_offsets(record)],
                "hex": encode_record(record).hex(),
            }
        )

    return _layout_vector


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    output_dir = session.config.getoption("--output")
    if not output_dir or not _LAYOUT_VECTORS:
        return

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    (out / "layouts.json").write_text(json.dumps({"vectors": _LAYOUT_VECTORS}, indent=2))
