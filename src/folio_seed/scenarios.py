"""Multi-account preconditions built from the per-kind helpers.

Timestamps come from the ledger clock, so a scenario seeded twice against the
same clock produces the same bytes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from solders.instruction import Instruction
from solders.pubkey import Pubkey

from . import accounts, pda, test_keys
from .codec import encode_record
from .config import DEFAULT_VOTE_THRESHOLD_PERCENT, SPL_GOVERNANCE_PROGRAM_ID
from .errors import ErrorCode, SeedError
from .records.folio import (
    Auction,
    AuctionPrices,
    BasketRange,
    FeeRecipient,
    FolioTokenAmount,
    RebalanceDetailsToken,
    RebalancePrices,
    Role,
)
from .records.governance import (
    GovernanceConfig,
    InstructionData,
    OptionVoteResult,
    Proposal,
    ProposalOption,
    ProposalState,
    ProposalTransaction,
    VoteThreshold,
)
from .seeder import LedgerSeeder

logger = logging.getLogger(__name__)

DEFAULT_REALM_NAME = "Test Realm"


@dataclass
class GovernanceSetup:
    realm: Pubkey
    governance_mint: Pubkey
    folio_owner: Pubkey
    rewards_admin: Pubkey
    token_owner_record: Pubkey


@dataclass
class ProposalSetup:
    proposal: Pubkey
    proposal_transaction: Pubkey


@dataclass
class FolioSetup:
    folio: Pubkey
    folio_token_mint: Pubkey
    owner_actor: Pubkey
    basket: Pubkey
    rebalance: Pubkey
    auction: Pubkey
    auction_ends: Pubkey
    token_mints: list[Pubkey] = field(default_factory=list)


def setup_governance_accounts(
    seeder: LedgerSeeder,
    owner: Pubkey,
    governance_mint: Pubkey,
    realm_name: str = DEFAULT_REALM_NAME,
    owner_deposit: int = 0,
    governance_config: Optional[GovernanceConfig] = None,
    folio_owner_seed: Pubkey = test_keys.FOLIO_OWNER,
    rewards_admin_seed: Pubkey = test_keys.REWARDS_ADMIN,
) -> GovernanceSetup:
    """Seed a realm over ``governance_mint`` with two governances under it.

    One governance stands in as a folio owner, the other as a rewards admin.
    ``owner`` gets a token owner record carrying ``owner_deposit`` votes.
    """
    accounts.init_mint(seeder, governance_mint, mint_authority=owner)
    realm = accounts.create_and_set_realm(seeder, governance_mint, realm_name, authority=owner)
    folio_owner = accounts.create_and_set_governance(
        seeder, realm, folio_owner_seed, config=governance_config
    )
    rewards_admin = accounts.create_and_set_governance(
        seeder, realm, rewards_admin_seed, config=governance_config
    )
    token_owner_record = accounts.create_and_set_token_owner_record(
        seeder, realm, governance_mint, owner, deposit_amount=owner_deposit
    )
    logger.info("seeded realm %s with governances %s, %s", realm, folio_owner, rewards_admin)
    return GovernanceSetup(
        realm=realm,
        governance_mint=governance_mint,
        folio_owner=folio_owner,
        rewards_admin=rewards_admin,
        token_owner_record=token_owner_record,
    )


def mocked_proposal(
    governance: Pubkey,
    governing_token_mint: Pubkey,
    token_owner_record: Pubkey,
    now: int,
    yes_votes: int = 100,
    no_votes: int = 0,
    state: ProposalState = ProposalState.EXECUTING,
    transactions_count: int = 1,
) -> Proposal:
    """A proposal that has passed voting and is ready to execute its transactions.

    Voting milestones are spaced 20 seconds apart, ending 40 seconds before
    ``now``.
    """
    return Proposal(
        governance=governance,
        governing_token_mint=governing_token_mint,
        token_owner_record=token_owner_record,
        name="Mocked Proposal",
        description_link="https://mock.proposal",
        state=state,
        signatories_count=1,
        signatories_signed_off_count=1,
        options=[
            ProposalOption(
                label="Yes",
                vote_weight=yes_votes,
                vote_result=OptionVoteResult.SUCCEEDED,
                transactions_count=transactions_count,
            )
        ],
        deny_vote_weight=no_votes,
        draft_at=now - 100,
        signing_off_at=now - 80,
        voting_at=now - 60,
        voting_completed_at=now - 40,
        max_vote_weight=yes_votes + no_votes,
        vote_threshold=VoteThreshold.quorum(DEFAULT_VOTE_THRESHOLD_PERCENT),
    )


def create_proposal_with_instructions(
    seeder: LedgerSeeder,
    governance: Pubkey,
    token_owner_record: Pubkey,
    governing_token_mint: Pubkey,
    instructions: Sequence[Union[Instruction, InstructionData]],
    proposal_seed: Pubkey = test_keys.ADMIN,
    yes_votes: int = 100,
    no_votes: int = 0,
    state: ProposalState = ProposalState.EXECUTING,
    hold_up_time: int = 0,
) -> ProposalSetup:
    """Seed an approved proposal whose first transaction carries ``instructions``."""
    proposal_address, _ = pda.proposal_pda(governance, governing_token_mint, proposal_seed)
    proposal = mocked_proposal(
        governance,
        governing_token_mint,
        token_owner_record,
        now=seeder.now(),
        yes_votes=yes_votes,
        no_votes=no_votes,
        state=state,
        transactions_count=len(instructions),
    )
    transaction = ProposalTransaction(
        proposal=proposal_address,
        hold_up_time=hold_up_time,
        instructions=[
            ix if isinstance(ix, InstructionData) else InstructionData.from_instruction(ix)
            for ix in instructions
        ],
    )
    transaction_address, _ = pda.proposal_transaction_pda(proposal_address, 0, 0)

    # Encode both first; a bad instruction list must leave the ledger untouched.
    transaction_data = encode_record(transaction)
    proposal_data = encode_record(proposal)
    seeder.seed(transaction_address, transaction_data, SPL_GOVERNANCE_PROGRAM_ID)
    seeder.seed(proposal_address, proposal_data, SPL_GOVERNANCE_PROGRAM_ID)
    logger.info(
        "seeded proposal %s with %d instruction(s) at %s",
        proposal_address,
        len(transaction.instructions),
        transaction_address,
    )
    return ProposalSetup(proposal=proposal_address, proposal_transaction=transaction_address)


def setup_folio_with_auction(
    seeder: LedgerSeeder,
    folio_owner: Pubkey,
    folio_token_mint: Pubkey,
    basket: Sequence[FolioTokenAmount],
    sell_limit_spot: int = 0,
    buy_limit_spot: int = 0,
    prices: Optional[AuctionPrices] = None,
    auction_length: int = 3600,
    rebalance_nonce: int = 1,
) -> FolioSetup:
    """Seed a folio mid-rebalance with one open auction.

    The auction sells the first basket token for the second and is open from
    the current clock time for ``auction_length`` seconds.
    """
    if len(basket) < 2:
        raise SeedError(ErrorCode.INVALID_VALUE, "an auction needs at least two basket tokens")

    now = seeder.now()
    accounts.init_mint(seeder, folio_token_mint)
    folio = accounts.create_and_set_folio(seeder, folio_token_mint, auction_length=auction_length)
    owner_actor = accounts.create_and_set_actor(
        seeder, folio_owner, folio, Role.OWNER | Role.REBALANCE_MANAGER | Role.AUCTION_LAUNCHER
    )
    for token in basket:
        accounts.init_mint(seeder, token.mint)
        accounts.mint_to(seeder, token.mint, folio, token.amount)
    basket_address = accounts.create_and_set_folio_basket(seeder, folio, basket)

    sell, buy = basket[0].mint, basket[1].mint
    rebalance = accounts.create_and_set_rebalance(
        seeder,
        folio,
        nonce=rebalance_nonce,
        current_auction_id=1,
        all_rebalance_details_added=True,
        started_at=now,
        restricted_until=now,
        available_until=now + auction_length,
        details=[
            RebalanceDetailsToken(mint=t.mint, limits=BasketRange(), prices=RebalancePrices())
            for t in basket
        ],
    )
    auction = Auction(
        folio=folio,
        sell_mint=sell,
        buy_mint=buy,
        id=1,
        nonce=rebalance_nonce,
        sell_limit_spot=sell_limit_spot,
        buy_limit_spot=buy_limit_spot,
        prices=prices or AuctionPrices(),
        start=now,
        end=now + auction_length,
    )
    auction_address = accounts.create_and_set_auction(seeder, auction)
    auction_ends = accounts.create_and_set_auction_ends(
        seeder, folio, rebalance_nonce, sell, buy, end_time=auction.end
    )
    logger.info("seeded folio %s with auction %s (%s -> %s)", folio, auction_address, sell, buy)
    return FolioSetup(
        folio=folio,
        folio_token_mint=folio_token_mint,
        owner_actor=owner_actor,
        basket=basket_address,
        rebalance=rebalance,
        auction=auction_address,
        auction_ends=auction_ends,
        token_mints=[t.mint for t in basket],
    )


def setup_fee_distribution(
    seeder: LedgerSeeder,
    folio: Pubkey,
    recipients: Sequence[FeeRecipient],
    amount_to_distribute: int,
    index: int = 1,
    cranker: Pubkey = test_keys.CRANKER,
    paid: Sequence[Pubkey] = (),
) -> Pubkey:
    """Seed distribution ``index`` with the recipients in ``paid`` already cleared.

    Paid recipients become empty slots in place, matching what the program
    leaves behind after a partial crank. Trailing empty slots are dropped.
    """
    paid_set = set(paid)
    state = [FeeRecipient() if r.recipient in paid_set else r for r in recipients]
    while state and state[-1] == FeeRecipient():
        state.pop()
    return accounts.create_and_set_fee_distribution(
        seeder, folio, cranker, index, amount_to_distribute, state
    )
