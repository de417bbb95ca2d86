"""Program-derived addresses for every seeded account kind.

Each helper returns ``(address, bump)`` from ``Pubkey.find_program_address``.
"""

from __future__ import annotations

from solders.pubkey import Pubkey

from .config import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    BPF_LOADER_UPGRADEABLE_ID,
    FOLIO_ADMIN_PROGRAM_ID,
    FOLIO_PROGRAM_ID,
    REWARDS_PROGRAM_ID,
    SPL_GOVERNANCE_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)

Pda = tuple[Pubkey, int]


def _le(value: int, width: int) -> bytes:
    return int(value).to_bytes(width, "little", signed=False)


def _find(seeds: list[bytes], program_id: Pubkey) -> Pda:
    return Pubkey.find_program_address(seeds, program_id)


# spl-governance


def realm_pda(name: str) -> Pda:
    return _find([b"governance", name.encode()], SPL_GOVERNANCE_PROGRAM_ID)


def governance_pda(realm: Pubkey, seed: Pubkey) -> Pda:
    return _find([b"account-governance", bytes(realm), bytes(seed)], SPL_GOVERNANCE_PROGRAM_ID)


def proposal_pda(governance: Pubkey, governing_token_mint: Pubkey, seed: Pubkey) -> Pda:
    return _find(
        [b"governance", bytes(governance), bytes(governing_token_mint), bytes(seed)],
        SPL_GOVERNANCE_PROGRAM_ID,
    )


def proposal_transaction_pda(proposal: Pubkey, option_index: int, index: int) -> Pda:
    return _find(
        [b"governance", bytes(proposal), _le(option_index, 1), _le(index, 2)],
        SPL_GOVERNANCE_PROGRAM_ID,
    )


def token_owner_record_pda(realm: Pubkey, governing_token_mint: Pubkey, owner: Pubkey) -> Pda:
    return _find(
        [b"governance", bytes(realm), bytes(governing_token_mint), bytes(owner)],
        SPL_GOVERNANCE_PROGRAM_ID,
    )


def governing_token_holding_pda(realm: Pubkey, governing_token_mint: Pubkey) -> Pda:
    return _find([b"governance", bytes(realm), bytes(governing_token_mint)], SPL_GOVERNANCE_PROGRAM_ID)


# folio


def folio_pda(folio_token_mint: Pubkey, program_id: Pubkey = FOLIO_PROGRAM_ID) -> Pda:
    return _find([b"folio", bytes(folio_token_mint)], program_id)


def actor_pda(authority: Pubkey, folio: Pubkey, program_id: Pubkey = FOLIO_PROGRAM_ID) -> Pda:
    return _find([b"actor", bytes(authority), bytes(folio)], program_id)


def rebalance_pda(folio: Pubkey, program_id: Pubkey = FOLIO_PROGRAM_ID) -> Pda:
    return _find([b"rebalance", bytes(folio)], program_id)


def auction_pda(folio: Pubkey, rebalance_nonce: int, auction_id: int, program_id: Pubkey = FOLIO_PROGRAM_ID) -> Pda:
    return _find(
        [b"auction", bytes(folio), _le(rebalance_nonce, 8), _le(auction_id, 8)],
        program_id,
    )


def auction_ends_pda(
    folio: Pubkey,
    rebalance_nonce: int,
    mint_a: Pubkey,
    mint_b: Pubkey,
    program_id: Pubkey = FOLIO_PROGRAM_ID,
) -> Pda:
    first, second = sorted((mint_a, mint_b), key=bytes)
    return _find(
        [b"auction_ends", bytes(folio), _le(rebalance_nonce, 8), bytes(first), bytes(second)],
        program_id,
    )


def fee_recipients_pda(folio: Pubkey, program_id: Pubkey = FOLIO_PROGRAM_ID) -> Pda:
    return _find([b"fee_recipients", bytes(folio)], program_id)


def fee_distribution_pda(folio: Pubkey, index: int, program_id: Pubkey = FOLIO_PROGRAM_ID) -> Pda:
    return _find([b"fee_distribution", bytes(folio), _le(index, 8)], program_id)


def folio_basket_pda(folio: Pubkey, program_id: Pubkey = FOLIO_PROGRAM_ID) -> Pda:
    return _find([b"folio_basket", bytes(folio)], program_id)


def user_pending_basket_pda(folio: Pubkey, user: Pubkey, program_id: Pubkey = FOLIO_PROGRAM_ID) -> Pda:
    return _find([b"user_pending_basket", bytes(folio), bytes(user)], program_id)


# folio admin


def program_registrar_pda() -> Pda:
    return _find([b"program_registrar"], FOLIO_ADMIN_PROGRAM_ID)


def dao_fee_config_pda() -> Pda:
    return _find([b"dao_fee_config"], FOLIO_ADMIN_PROGRAM_ID)


def folio_fee_config_pda(folio: Pubkey) -> Pda:
    return _find([b"folio_fee_config", bytes(folio)], FOLIO_ADMIN_PROGRAM_ID)


# rewards


def reward_tokens_pda(realm: Pubkey) -> Pda:
    return _find([b"reward_tokens", bytes(realm)], REWARDS_PROGRAM_ID)


def reward_info_pda(realm: Pubkey, reward_token: Pubkey) -> Pda:
    return _find([b"reward_info", bytes(realm), bytes(reward_token)], REWARDS_PROGRAM_ID)


def user_reward_info_pda(realm: Pubkey, reward_token: Pubkey, user: Pubkey) -> Pda:
    return _find([b"user_reward_info", bytes(realm), bytes(reward_token), bytes(user)], REWARDS_PROGRAM_ID)


# token / loader


def associated_token_address(owner: Pubkey, mint: Pubkey, token_program: Pubkey = TOKEN_PROGRAM_ID) -> Pubkey:
    address, _ = _find([bytes(owner), bytes(token_program), bytes(mint)], ASSOCIATED_TOKEN_PROGRAM_ID)
    return address


def program_data_address(program_id: Pubkey) -> Pubkey:
    address, _ = _find([bytes(program_id)], BPF_LOADER_UPGRADEABLE_ID)
    return address
