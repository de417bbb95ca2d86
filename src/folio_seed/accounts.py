"""Derive-and-seed helpers, one per account kind.

Each ``create_and_set_*`` derives the canonical address, stamps the bump into
the record where the kind carries one, seeds it and returns the address.
Extra keyword arguments go straight to the record's dataclass.
"""

from __future__ import annotations

from typing import Optional, Sequence

from solders.pubkey import Pubkey

from . import pda
from .config import DEFAULT_DECIMALS, FOLIO_PROGRAM_ID, TOKEN_PROGRAM_ID
from .records.admin import DAOFeeConfig, FolioFeeConfig, ProgramRegistrar
from .records.folio import (
    Actor,
    Auction,
    AuctionEnds,
    FeeDistribution,
    FeeRecipient,
    FeeRecipients,
    Folio,
    FolioBasket,
    FolioTokenAmount,
    Rebalance,
    Role,
    UserPendingBasket,
    UserTokenAmount,
)
from .records.governance import Governance, GovernanceConfig, Realm, RealmConfig, TokenOwnerRecord
from .records.loader import ProgramData
from .records.rewards import RewardInfo, RewardTokens, UserRewardInfo
from .records.token import Mint, TokenAccount
from .seeder import LedgerSeeder

# Token accounts


def init_mint(
    seeder: LedgerSeeder,
    mint: Pubkey,
    mint_authority: Optional[Pubkey] = None,
    decimals: int = DEFAULT_DECIMALS,
    supply: int = 0,
    freeze_authority: Optional[Pubkey] = None,
    token_program: Pubkey = TOKEN_PROGRAM_ID,
) -> Pubkey:
    seeder.seed_record(
        mint,
        Mint(
            mint_authority=mint_authority,
            supply=supply,
            decimals=decimals,
            freeze_authority=freeze_authority,
        ),
        owner=token_program,
    )
    return mint


def mint_to(
    seeder: LedgerSeeder,
    mint: Pubkey,
    owner: Pubkey,
    amount: int,
    token_program: Pubkey = TOKEN_PROGRAM_ID,
) -> Pubkey:
    """Seed ``owner``'s associated token account holding ``amount`` base units.

    The account is owned by ``token_program``, which also picks the ATA address.
    """
    ata = pda.associated_token_address(owner, mint, token_program)
    seeder.seed_record(ata, TokenAccount(mint=mint, owner=owner, amount=amount), owner=token_program)
    return ata


def get_token_account(
    seeder: LedgerSeeder, token_account: Pubkey, token_program: Pubkey = TOKEN_PROGRAM_ID
) -> TokenAccount:
    return seeder.fetch(token_account, TokenAccount, owner=token_program)


def get_token_balance(
    seeder: LedgerSeeder, token_account: Pubkey, token_program: Pubkey = TOKEN_PROGRAM_ID
) -> int:
    return get_token_account(seeder, token_account, token_program).amount


def set_token_balance(
    seeder: LedgerSeeder,
    token_account: Pubkey,
    amount: int,
    token_program: Pubkey = TOKEN_PROGRAM_ID,
) -> None:
    """Re-seed an existing token account with a new balance, keeping its other fields."""
    account = get_token_account(seeder, token_account, token_program)
    account.amount = amount
    seeder.seed_record(token_account, account, owner=token_program)


# Governance


def create_and_set_realm(
    seeder: LedgerSeeder,
    community_mint: Pubkey,
    name: str = "Folio Realm",
    council_mint: Optional[Pubkey] = None,
    authority: Optional[Pubkey] = None,
    min_community_weight_to_create_governance: int = 0,
) -> Pubkey:
    address, _ = pda.realm_pda(name)
    realm = Realm(
        community_mint=community_mint,
        name=name,
        config=RealmConfig(
            min_community_weight_to_create_governance=min_community_weight_to_create_governance,
            council_mint=council_mint,
        ),
        authority=authority,
    )
    seeder.seed_realm(address, realm)
    return address


def create_and_set_governance(
    seeder: LedgerSeeder,
    realm: Pubkey,
    governance_seed: Pubkey,
    config: Optional[GovernanceConfig] = None,
    **fields,
) -> Pubkey:
    address, _ = pda.governance_pda(realm, governance_seed)
    governance = Governance(
        realm=realm,
        governance_seed=governance_seed,
        config=config or GovernanceConfig(),
        **fields,
    )
    seeder.seed_governance(address, governance)
    return address


def create_and_set_token_owner_record(
    seeder: LedgerSeeder,
    realm: Pubkey,
    governing_token_mint: Pubkey,
    owner: Pubkey,
    deposit_amount: int = 0,
    **fields,
) -> Pubkey:
    address, _ = pda.token_owner_record_pda(realm, governing_token_mint, owner)
    record = TokenOwnerRecord(
        realm=realm,
        governing_token_mint=governing_token_mint,
        governing_token_owner=owner,
        governing_token_deposit_amount=deposit_amount,
        **fields,
    )
    seeder.seed_token_owner_record(address, record)
    return address


def create_and_set_governance_holding(
    seeder: LedgerSeeder, realm: Pubkey, governing_token_mint: Pubkey, amount: int
) -> Pubkey:
    """Seed the realm's token holding account (self-owned PDA token account)."""
    address, _ = pda.governing_token_holding_pda(realm, governing_token_mint)
    seeder.seed_token_account(
        address, TokenAccount(mint=governing_token_mint, owner=address, amount=amount)
    )
    return address


# Folio


def create_and_set_folio(
    seeder: LedgerSeeder,
    folio_token_mint: Pubkey,
    program_id: Pubkey = FOLIO_PROGRAM_ID,
    **fields,
) -> Pubkey:
    address, bump = pda.folio_pda(folio_token_mint, program_id)
    folio = Folio(folio_token_mint=folio_token_mint, bump=bump, **fields)
    seeder.seed_record(address, folio, owner=program_id)
    return address


def create_and_set_actor(
    seeder: LedgerSeeder,
    authority: Pubkey,
    folio: Pubkey,
    roles: int = Role.OWNER,
) -> Pubkey:
    address, bump = pda.actor_pda(authority, folio)
    seeder.seed_actor(address, Actor(authority=authority, folio=folio, bump=bump, roles=int(roles)))
    return address


def create_and_set_rebalance(seeder: LedgerSeeder, folio: Pubkey, **fields) -> Pubkey:
    address, bump = pda.rebalance_pda(folio)
    seeder.seed_rebalance(address, Rebalance(folio=folio, bump=bump, **fields))
    return address


def create_and_set_auction(seeder: LedgerSeeder, auction: Auction) -> Pubkey:
    """Seed ``auction`` at the PDA given by its folio, nonce and id."""
    address, bump = pda.auction_pda(auction.folio, auction.nonce, auction.id)
    auction.bump = bump
    seeder.seed_auction(address, auction)
    return address


def create_and_set_auction_ends(
    seeder: LedgerSeeder,
    folio: Pubkey,
    rebalance_nonce: int,
    mint_a: Pubkey,
    mint_b: Pubkey,
    end_time: int,
) -> Pubkey:
    address, bump = pda.auction_ends_pda(folio, rebalance_nonce, mint_a, mint_b)
    record = AuctionEnds.for_pair(
        mint_a, mint_b, bump=bump, rebalance_nonce=rebalance_nonce, end_time=end_time
    )
    seeder.seed_auction_ends(address, record)
    return address


def create_and_set_fee_recipients(
    seeder: LedgerSeeder,
    folio: Pubkey,
    recipients: Sequence[FeeRecipient],
    distribution_index: int = 0,
) -> Pubkey:
    address, bump = pda.fee_recipients_pda(folio)
    record = FeeRecipients(
        folio=folio,
        bump=bump,
        distribution_index=distribution_index,
        fee_recipients=list(recipients),
    )
    seeder.seed_fee_recipients(address, record)
    return address


def create_and_set_fee_distribution(
    seeder: LedgerSeeder,
    folio: Pubkey,
    cranker: Pubkey,
    index: int,
    amount_to_distribute: int,
    recipients: Sequence[FeeRecipient],
) -> Pubkey:
    address, bump = pda.fee_distribution_pda(folio, index)
    record = FeeDistribution(
        folio=folio,
        cranker=cranker,
        bump=bump,
        index=index,
        amount_to_distribute=amount_to_distribute,
        fee_recipients_state=list(recipients),
    )
    seeder.seed_fee_distribution(address, record)
    return address


def create_and_set_folio_basket(
    seeder: LedgerSeeder, folio: Pubkey, token_amounts: Sequence[FolioTokenAmount]
) -> Pubkey:
    address, bump = pda.folio_basket_pda(folio)
    seeder.seed_folio_basket(
        address, FolioBasket(folio=folio, bump=bump, token_amounts=list(token_amounts))
    )
    return address


def create_and_set_user_pending_basket(
    seeder: LedgerSeeder,
    folio: Pubkey,
    owner: Pubkey,
    token_amounts: Sequence[UserTokenAmount],
) -> Pubkey:
    address, bump = pda.user_pending_basket_pda(folio, owner)
    seeder.seed_user_pending_basket(
        address,
        UserPendingBasket(owner=owner, folio=folio, bump=bump, token_amounts=list(token_amounts)),
    )
    return address


# Folio admin


def create_and_set_program_registrar(seeder: LedgerSeeder, programs: Sequence[Pubkey]) -> Pubkey:
    address, bump = pda.program_registrar_pda()
    seeder.seed_program_registrar(
        address, ProgramRegistrar(bump=bump, accepted_programs=list(programs))
    )
    return address


def create_and_set_dao_fee_config(
    seeder: LedgerSeeder,
    fee_recipient: Pubkey,
    default_fee_numerator: int,
    default_fee_floor: int,
) -> Pubkey:
    address, bump = pda.dao_fee_config_pda()
    seeder.seed_dao_fee_config(
        address,
        DAOFeeConfig(
            fee_recipient=fee_recipient,
            bump=bump,
            default_fee_numerator=default_fee_numerator,
            default_fee_floor=default_fee_floor,
        ),
    )
    return address


def create_and_set_folio_fee_config(
    seeder: LedgerSeeder, folio: Pubkey, fee_numerator: int, fee_floor: int
) -> Pubkey:
    address, bump = pda.folio_fee_config_pda(folio)
    seeder.seed_folio_fee_config(
        address, FolioFeeConfig(bump=bump, fee_numerator=fee_numerator, fee_floor=fee_floor)
    )
    return address


# Rewards


def create_and_set_reward_tokens(
    seeder: LedgerSeeder,
    realm: Pubkey,
    rewards_admin: Pubkey,
    reward_ratio: int,
    reward_tokens: Sequence[Pubkey],
) -> Pubkey:
    address, bump = pda.reward_tokens_pda(realm)
    seeder.seed_reward_tokens(
        address,
        RewardTokens(
            realm=realm,
            rewards_admin=rewards_admin,
            bump=bump,
            reward_ratio=reward_ratio,
            reward_tokens=list(reward_tokens),
        ),
    )
    return address


def create_and_set_reward_info(
    seeder: LedgerSeeder, realm: Pubkey, reward_token: Pubkey, **fields
) -> Pubkey:
    address, bump = pda.reward_info_pda(realm, reward_token)
    seeder.seed_reward_info(
        address, RewardInfo(realm=realm, reward_token=reward_token, bump=bump, **fields)
    )
    return address


def create_and_set_user_reward_info(
    seeder: LedgerSeeder, realm: Pubkey, reward_token: Pubkey, user: Pubkey, **fields
) -> Pubkey:
    address, bump = pda.user_reward_info_pda(realm, reward_token, user)
    seeder.seed_user_reward_info(
        address, UserRewardInfo(realm=realm, reward_token=reward_token, bump=bump, **fields)
    )
    return address


# Loader


def mock_program_data(
    seeder: LedgerSeeder,
    program_id: Pubkey,
    slot: int = 0,
    upgrade_authority: Optional[Pubkey] = None,
) -> Pubkey:
    """Seed the ProgramData header the folio admin program checks for its upgrade authority."""
    address = pda.program_data_address(program_id)
    seeder.seed_program_data(address, ProgramData(slot=slot, upgrade_authority=upgrade_authority))
    return address

