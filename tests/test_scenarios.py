"""Per-kind helpers and multi-account scenarios."""

from __future__ import annotations

import pytest
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from folio_seed import accounts, pda, test_keys
from folio_seed.config import (
    D18,
    FOLIO_PROGRAM_ID,
    FOLIO_SECOND_INSTANCE_PROGRAM_ID,
    TOKEN_2022_PROGRAM_ID,
)
from folio_seed.errors import ErrorCode, SeedError
from folio_seed.records.folio import (
    Actor,
    Auction,
    AuctionEnds,
    FeeDistribution,
    FeeRecipient,
    Folio,
    FolioBasket,
    FolioTokenAmount,
    Rebalance,
    Role,
)
from folio_seed.records.governance import (
    Governance,
    Proposal,
    ProposalState,
    ProposalTransaction,
    Realm,
    TokenOwnerRecord,
)
from folio_seed.records.loader import ProgramData
from folio_seed.records.token import Mint, TokenAccount
from folio_seed.scenarios import (
    create_proposal_with_instructions,
    setup_fee_distribution,
    setup_folio_with_auction,
    setup_governance_accounts,
)


def _key(b: int) -> Pubkey:
    return Pubkey(bytes([b]) * 32)


# --- helpers ---


def test_token_balance_helpers(seeder) -> None:
    accounts.init_mint(seeder, _key(1), mint_authority=_key(2))
    ata = accounts.mint_to(seeder, _key(1), test_keys.USER_1, 500)
    assert ata == pda.associated_token_address(test_keys.USER_1, _key(1))
    assert accounts.get_token_balance(seeder, ata) == 500

    accounts.set_token_balance(seeder, ata, 42)
    account = accounts.get_token_account(seeder, ata)
    assert account.amount == 42
    assert account.owner == test_keys.USER_1
    assert seeder.fetch(_key(1), Mint).mint_authority == _key(2)


def test_token_2022_accounts(seeder) -> None:
    accounts.init_mint(seeder, _key(1), token_program=TOKEN_2022_PROGRAM_ID)
    ata = accounts.mint_to(seeder, _key(1), test_keys.USER_1, 5, token_program=TOKEN_2022_PROGRAM_ID)
    assert ata == pda.associated_token_address(test_keys.USER_1, _key(1), TOKEN_2022_PROGRAM_ID)
    assert seeder.fetch_raw(_key(1)).owner == TOKEN_2022_PROGRAM_ID
    assert seeder.fetch_raw(ata).owner == TOKEN_2022_PROGRAM_ID

    accounts.set_token_balance(seeder, ata, 9, token_program=TOKEN_2022_PROGRAM_ID)
    assert accounts.get_token_balance(seeder, ata, TOKEN_2022_PROGRAM_ID) == 9
    assert seeder.fetch_raw(ata).owner == TOKEN_2022_PROGRAM_ID
    with pytest.raises(SeedError) as exc:
        accounts.get_token_account(seeder, ata)
    assert exc.value.code == ErrorCode.OWNER_MISMATCH


def test_folio_on_second_instance(seeder) -> None:
    address = accounts.create_and_set_folio(
        seeder, _key(1), program_id=FOLIO_SECOND_INSTANCE_PROGRAM_ID, mandate="second"
    )
    assert address == pda.folio_pda(_key(1), FOLIO_SECOND_INSTANCE_PROGRAM_ID)[0]
    folio = seeder.fetch(address, Folio, owner=FOLIO_SECOND_INSTANCE_PROGRAM_ID)
    assert folio.bump == pda.folio_pda(_key(1), FOLIO_SECOND_INSTANCE_PROGRAM_ID)[1]
    assert folio.mandate == "second"


def test_mock_program_data(seeder) -> None:
    address = accounts.mock_program_data(seeder, FOLIO_PROGRAM_ID, upgrade_authority=test_keys.ADMIN)
    assert address == pda.program_data_address(FOLIO_PROGRAM_ID)
    assert seeder.fetch(address, ProgramData).upgrade_authority == test_keys.ADMIN


def test_admin_and_rewards_helpers(seeder) -> None:
    registrar = accounts.create_and_set_program_registrar(seeder, [FOLIO_PROGRAM_ID])
    dao = accounts.create_and_set_dao_fee_config(seeder, test_keys.FEE_RECIPIENT, 5 * 10**16, 15 * 10**14)
    realm = _key(4)
    reward_tokens = accounts.create_and_set_reward_tokens(seeder, realm, test_keys.REWARDS_ADMIN, 10**15, [_key(21)])
    user_info = accounts.create_and_set_user_reward_info(seeder, realm, _key(21), test_keys.USER_1, accrued_rewards=9)

    assert len(seeder.ledger) == 4
    for address in (registrar, dao, reward_tokens, user_info):
        assert seeder.fetch_raw(address) is not None


# --- governance ---


def test_setup_governance_accounts(seeder) -> None:
    setup = setup_governance_accounts(seeder, test_keys.ADMIN, _key(1), owner_deposit=1_000)

    realm = seeder.fetch(setup.realm, Realm)
    assert realm.name == "Test Realm"
    assert realm.community_mint == _key(1)
    assert realm.authority == test_keys.ADMIN

    folio_owner = seeder.fetch(setup.folio_owner, Governance)
    rewards_admin = seeder.fetch(setup.rewards_admin, Governance)
    assert folio_owner.realm == setup.realm
    assert folio_owner.governance_seed == test_keys.FOLIO_OWNER
    assert rewards_admin.governance_seed == test_keys.REWARDS_ADMIN

    record = seeder.fetch(setup.token_owner_record, TokenOwnerRecord)
    assert record.governing_token_owner == test_keys.ADMIN
    assert record.governing_token_deposit_amount == 1_000


def test_create_proposal_with_instructions(seeder) -> None:
    setup = setup_governance_accounts(seeder, test_keys.ADMIN, _key(1))
    ix = Instruction(FOLIO_PROGRAM_ID, b"\x07", [AccountMeta(setup.folio_owner, True, True)])
    result = create_proposal_with_instructions(
        seeder, setup.folio_owner, setup.token_owner_record, _key(1), [ix]
    )

    proposal = seeder.fetch(result.proposal, Proposal)
    assert proposal.state == ProposalState.EXECUTING
    assert proposal.options[0].vote_weight == 100
    assert proposal.options[0].transactions_count == 1
    assert proposal.voting_completed_at == seeder.now() - 40

    tx = seeder.fetch(result.proposal_transaction, ProposalTransaction)
    assert tx.proposal == result.proposal
    assert tx.instructions[0].to_instruction() == ix
    assert result.proposal_transaction == pda.proposal_transaction_pda(result.proposal, 0, 0)[0]


def test_proposal_counts_every_instruction(seeder) -> None:
    setup = setup_governance_accounts(seeder, test_keys.ADMIN, _key(1))
    ixs = [Instruction(FOLIO_PROGRAM_ID, bytes([n]), []) for n in range(3)]
    result = create_proposal_with_instructions(
        seeder, setup.folio_owner, setup.token_owner_record, _key(1), ixs, proposal_seed=_key(9)
    )
    assert seeder.fetch(result.proposal, Proposal).options[0].transactions_count == 3
    assert len(seeder.fetch(result.proposal_transaction, ProposalTransaction).instructions) == 3


def test_bad_instruction_seeds_nothing(seeder, ledger) -> None:
    bad = Instruction(FOLIO_PROGRAM_ID, b"", [])
    before = len(ledger)
    with pytest.raises(SeedError) as exc:
        create_proposal_with_instructions(seeder, _key(5), _key(6), _key(1), [bad], hold_up_time=-1)
    assert exc.value.code == ErrorCode.VALUE_OUT_OF_RANGE
    assert len(ledger) == before


# --- folio ---


def test_setup_folio_with_auction(seeder) -> None:
    basket = [FolioTokenAmount(_key(30), 1_000), FolioTokenAmount(_key(31), 2_000)]
    setup = setup_folio_with_auction(seeder, test_keys.FOLIO_OWNER, _key(29), basket, auction_length=600)
    now = seeder.now()

    folio = seeder.fetch(setup.folio, Folio)
    assert folio.folio_token_mint == _key(29)
    assert folio.auction_length == 600

    actor = seeder.fetch(setup.owner_actor, Actor)
    assert actor.has_role(Role.OWNER)
    assert actor.has_role(Role.AUCTION_LAUNCHER)

    assert seeder.fetch(setup.basket, FolioBasket).token_amounts == basket
    for token in basket:
        ata = pda.associated_token_address(setup.folio, token.mint)
        assert seeder.fetch(ata, TokenAccount).amount == token.amount

    rebalance = seeder.fetch(setup.rebalance, Rebalance)
    assert [d.mint for d in rebalance.details] == [_key(30), _key(31)]

    auction = seeder.fetch(setup.auction, Auction)
    assert auction.sell_mint == _key(30)
    assert auction.buy_mint == _key(31)
    assert auction.is_open(now)
    assert not auction.is_open(now + 601)

    ends = seeder.fetch(setup.auction_ends, AuctionEnds)
    assert ends.end_time == auction.end
    assert setup.token_mints == [_key(30), _key(31)]


def test_auction_needs_two_tokens(seeder, ledger) -> None:
    with pytest.raises(SeedError) as exc:
        setup_folio_with_auction(seeder, test_keys.FOLIO_OWNER, _key(29), [FolioTokenAmount(_key(30), 1)])
    assert exc.value.code == ErrorCode.INVALID_VALUE
    assert len(ledger) == 0


def test_setup_fee_distribution_half_paid(seeder) -> None:
    recipients = [FeeRecipient(test_keys.USER_1, D18 // 2), FeeRecipient(test_keys.USER_2, D18 // 2)]
    folio = _key(15)
    address = setup_fee_distribution(seeder, folio, recipients, 10**20, index=3, paid=[test_keys.USER_1])

    assert address == pda.fee_distribution_pda(folio, 3)[0]
    record = seeder.fetch(address, FeeDistribution)
    assert record.cranker == test_keys.CRANKER
    assert record.fee_recipients_state[0] == FeeRecipient()
    assert record.fee_recipients_state[1].recipient == test_keys.USER_2
    assert not record.is_fully_distributed()


def test_setup_fee_distribution_last_paid(seeder) -> None:
    recipients = [FeeRecipient(test_keys.USER_1, D18 // 2), FeeRecipient(test_keys.USER_2, D18 // 2)]
    address = setup_fee_distribution(seeder, _key(15), recipients, 10**20, paid=[test_keys.USER_2])
    record = seeder.fetch(address, FeeDistribution)
    assert record.fee_recipients_state == [recipients[0]]

    everyone = setup_fee_distribution(
        seeder, _key(15), recipients, 10**20, index=2, paid=[test_keys.USER_1, test_keys.USER_2]
    )
    assert seeder.fetch(everyone, FeeDistribution).is_fully_distributed()
