"""SPL token account and mint records.

Neither carries a discriminator; the token program tells them apart by
account length, so both layouts are fixed-size and decoded by size.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from solders.pubkey import Pubkey

from ..config import DEFAULT_DECIMALS, MINT_ACCOUNT_SIZE, TOKEN_ACCOUNT_SIZE, TOKEN_PROGRAM_ID
from ..schema import BOOL, PUBKEY, U8, U64, COption, EnumKind, Field, RecordLayout
from ..types import RecordKind


class TokenAccountState(IntEnum):
    UNINITIALIZED = 0
    INITIALIZED = 1
    FROZEN = 2


@dataclass
class TokenAccount:
    mint: Pubkey
    owner: Pubkey
    amount: int = 0
    delegate: Optional[Pubkey] = None
    state: TokenAccountState = TokenAccountState.INITIALIZED
    is_native: Optional[int] = None
    delegated_amount: int = 0
    close_authority: Optional[Pubkey] = None


@dataclass
class Mint:
    mint_authority: Optional[Pubkey] = None
    supply: int = 0
    decimals: int = DEFAULT_DECIMALS
    is_initialized: bool = True
    freeze_authority: Optional[Pubkey] = None


TOKEN_ACCOUNT_LAYOUT = RecordLayout(
    RecordKind.TOKEN_ACCOUNT,
    TokenAccount,
    b"",
    [
        Field("mint", PUBKEY),
        Field("owner", PUBKEY),
        Field("amount", U64),
        Field("delegate", COption(PUBKEY)),
        Field("state", EnumKind(TokenAccountState)),
        Field("is_native", COption(U64)),
        Field("delegated_amount", U64),
        Field("close_authority", COption(PUBKEY)),
    ],
    TOKEN_PROGRAM_ID,
    account_size=TOKEN_ACCOUNT_SIZE,
)

MINT_LAYOUT = RecordLayout(
    RecordKind.MINT,
    Mint,
    b"",
    [
        Field("mint_authority", COption(PUBKEY)),
        Field("supply", U64),
        Field("decimals", U8),
        Field("is_initialized", BOOL),
        Field("freeze_authority", COption(PUBKEY)),
    ],
    TOKEN_PROGRAM_ID,
    account_size=MINT_ACCOUNT_SIZE,
)


def encode_token_account(account: TokenAccount) -> bytes:
    return TOKEN_ACCOUNT_LAYOUT.encode(account)


def decode_token_account(data: bytes) -> TokenAccount:
    return TOKEN_ACCOUNT_LAYOUT.decode(data)


def encode_mint(mint: Mint) -> bytes:
    return MINT_LAYOUT.encode(mint)


def decode_mint(data: bytes) -> Mint:
    return MINT_LAYOUT.decode(data)


LAYOUTS = (TOKEN_ACCOUNT_LAYOUT, MINT_LAYOUT)
