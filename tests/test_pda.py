"""Address derivation and named test keys."""

from __future__ import annotations

from solders.pubkey import Pubkey

from folio_seed import pda, test_keys
from folio_seed.config import (
    FOLIO_PROGRAM_ID,
    FOLIO_SECOND_INSTANCE_PROGRAM_ID,
    SPL_GOVERNANCE_PROGRAM_ID,
    TOKEN_2022_PROGRAM_ID,
)


def _key(b: int) -> Pubkey:
    return Pubkey(bytes([b]) * 32)


def test_realm_pda_matches_seeds() -> None:
    address, bump = pda.realm_pda("Test Realm")
    expected = Pubkey.find_program_address([b"governance", b"Test Realm"], SPL_GOVERNANCE_PROGRAM_ID)
    assert (address, bump) == expected
    assert 0 <= bump <= 255
    assert not address.is_on_curve()


def test_folio_pda_per_program() -> None:
    first, _ = pda.folio_pda(_key(1))
    second, _ = pda.folio_pda(_key(1), FOLIO_SECOND_INSTANCE_PROGRAM_ID)
    assert first != second
    assert first == Pubkey.find_program_address([b"folio", bytes(_key(1))], FOLIO_PROGRAM_ID)[0]


def test_auction_ends_mint_order() -> None:
    folio = _key(9)
    assert pda.auction_ends_pda(folio, 1, _key(2), _key(3)) == pda.auction_ends_pda(folio, 1, _key(3), _key(2))
    assert pda.auction_ends_pda(folio, 1, _key(2), _key(3)) != pda.auction_ends_pda(folio, 2, _key(2), _key(3))


def test_indexed_pdas_differ() -> None:
    folio = _key(9)
    assert pda.fee_distribution_pda(folio, 1) != pda.fee_distribution_pda(folio, 2)
    assert pda.auction_pda(folio, 1, 1) != pda.auction_pda(folio, 1, 2)
    assert pda.proposal_transaction_pda(_key(1), 0, 0) != pda.proposal_transaction_pda(_key(1), 0, 1)


def test_associated_token_address_per_program() -> None:
    classic = pda.associated_token_address(_key(1), _key(2))
    token_2022 = pda.associated_token_address(_key(1), _key(2), TOKEN_2022_PROGRAM_ID)
    assert classic != token_2022


def test_named_keys_are_stable() -> None:
    assert test_keys.pubkey_for("admin") == test_keys.ADMIN
    assert test_keys.keypair_for("admin").pubkey() == test_keys.ADMIN
    named = [
        test_keys.ADMIN,
        test_keys.FOLIO_OWNER,
        test_keys.REWARDS_ADMIN,
        test_keys.USER_1,
        test_keys.USER_2,
        test_keys.CRANKER,
        test_keys.FEE_RECIPIENT,
        test_keys.AUCTION_LAUNCHER,
    ]
    assert len(set(named)) == len(named)
