"""Folio program accounts.

All of these are Anchor zero-copy or borsh accounts behind an 8-byte
``sha256("account:<Name>")`` discriminator. Zero-copy layouts spell their
padding out as reserved runs so every u64/u128 stays 8-byte aligned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import List

from solders.pubkey import Pubkey

from ..config import (
    ANCHOR_DISCRIMINATOR_SIZE,
    FOLIO_PROGRAM_ID,
    MAX_FEE_RECIPIENTS,
    MAX_FOLIO_TOKEN_AMOUNTS,
    MAX_PADDED_STRING_LENGTH,
    MAX_REBALANCE_DETAILS_TOKENS,
    MAX_USER_PENDING_BASKET_TOKEN_AMOUNTS,
)
from ..schema import (
    BOOL,
    I64,
    PUBKEY,
    U8,
    U64,
    U128,
    EnumKind,
    Field,
    FixedString,
    RecordLayout,
    SlotArray,
    Struct,
    anchor_discriminator,
    reserved,
)
from ..types import RecordKind


class FolioStatus(IntEnum):
    INITIALIZING = 0
    INITIALIZED = 1
    KILLED = 2
    MIGRATING = 3


class Role(IntFlag):
    OWNER = 1
    REBALANCE_MANAGER = 2
    AUCTION_LAUNCHER = 4
    BRAND_MANAGER = 8


@dataclass
class Folio:
    folio_token_mint: Pubkey
    bump: int = 0
    status: FolioStatus = FolioStatus.INITIALIZED
    tvl_fee: int = 0
    mint_fee: int = 0
    dao_pending_fee_shares: int = 0
    fee_recipients_pending_fee_shares: int = 0
    auction_length: int = 0
    last_poke: int = 0
    mandate: str = ""
    fee_recipients_pending_fee_shares_to_be_minted: int = 0


@dataclass
class Actor:
    authority: Pubkey
    folio: Pubkey
    bump: int = 0
    roles: int = Role.OWNER

    def has_role(self, role: Role) -> bool:
        return bool(self.roles & role)


@dataclass
class BasketRange:
    spot: int = 0
    low: int = 0
    high: int = 0


@dataclass
class RebalancePrices:
    low: int = 0
    high: int = 0


@dataclass
class RebalanceDetailsToken:
    mint: Pubkey = field(default_factory=Pubkey.default)
    limits: BasketRange = field(default_factory=BasketRange)
    prices: RebalancePrices = field(default_factory=RebalancePrices)


@dataclass
class Rebalance:
    folio: Pubkey
    bump: int = 0
    all_rebalance_details_added: bool = False
    current_auction_id: int = 0
    nonce: int = 0
    started_at: int = 0
    restricted_until: int = 0
    available_until: int = 0
    details: List[RebalanceDetailsToken] = field(default_factory=list)


@dataclass
class AuctionEnds:
    token_mint_1: Pubkey
    token_mint_2: Pubkey
    bump: int = 0
    rebalance_nonce: int = 0
    end_time: int = 0

    @classmethod
    def for_pair(cls, mint_a: Pubkey, mint_b: Pubkey, **kwargs) -> "AuctionEnds":
        """Build the record with its mint pair in canonical byte order."""
        first, second = sorted((mint_a, mint_b), key=bytes)
        return cls(token_mint_1=first, token_mint_2=second, **kwargs)


@dataclass
class AuctionPrices:
    start: int = 0
    end: int = 0


@dataclass
class Auction:
    folio: Pubkey
    sell_mint: Pubkey
    buy_mint: Pubkey
    bump: int = 0
    id: int = 0
    nonce: int = 0
    sell_limit_spot: int = 0
    buy_limit_spot: int = 0
    prices: AuctionPrices = field(default_factory=AuctionPrices)
    start: int = 0
    end: int = 0

    def is_open(self, now: int) -> bool:
        return self.start <= now <= self.end


@dataclass
class FeeRecipient:
    recipient: Pubkey = field(default_factory=Pubkey.default)
    portion: int = 0


@dataclass
class FeeRecipients:
    folio: Pubkey
    bump: int = 0
    distribution_index: int = 0
    fee_recipients: List[FeeRecipient] = field(default_factory=list)


@dataclass
class FeeDistribution:
    folio: Pubkey
    cranker: Pubkey
    bump: int = 0
    index: int = 0
    amount_to_distribute: int = 0
    fee_recipients_state: List[FeeRecipient] = field(default_factory=list)

    def is_fully_distributed(self) -> bool:
        return all(r == FeeRecipient() for r in self.fee_recipients_state)


@dataclass
class FolioTokenAmount:
    mint: Pubkey = field(default_factory=Pubkey.default)
    amount: int = 0


@dataclass
class FolioBasket:
    folio: Pubkey
    bump: int = 0
    token_amounts: List[FolioTokenAmount] = field(default_factory=list)


@dataclass
class UserTokenAmount:
    mint: Pubkey = field(default_factory=Pubkey.default)
    amount_for_minting: int = 0
    amount_for_redeeming: int = 0


@dataclass
class UserPendingBasket:
    owner: Pubkey
    folio: Pubkey
    bump: int = 0
    token_amounts: List[UserTokenAmount] = field(default_factory=list)


FEE_RECIPIENT = Struct(FeeRecipient, [Field("recipient", PUBKEY), Field("portion", U128)])

FOLIO_LAYOUT = RecordLayout(
    RecordKind.FOLIO,
    Folio,
    anchor_discriminator("Folio"),
    [
        Field("bump", U8),
        Field("status", EnumKind(FolioStatus)),
        reserved(6),
        Field("folio_token_mint", PUBKEY),
        Field("tvl_fee", U128),
        Field("mint_fee", U128),
        Field("dao_pending_fee_shares", U128),
        Field("fee_recipients_pending_fee_shares", U128),
        Field("auction_length", U64),
        Field("last_poke", I64),
        Field("mandate", FixedString(MAX_PADDED_STRING_LENGTH)),
        Field("fee_recipients_pending_fee_shares_to_be_minted", U128),
    ],
    FOLIO_PROGRAM_ID,
    account_size=ANCHOR_DISCRIMINATOR_SIZE + 264,
)

ACTOR_LAYOUT = RecordLayout(
    RecordKind.ACTOR,
    Actor,
    anchor_discriminator("Actor"),
    [
        Field("bump", U8),
        Field("authority", PUBKEY),
        Field("folio", PUBKEY),
        Field("roles", U8),
    ],
    FOLIO_PROGRAM_ID,
    account_size=ANCHOR_DISCRIMINATOR_SIZE + 66,
)

REBALANCE_DETAILS_TOKEN = Struct(
    RebalanceDetailsToken,
    [
        Field("mint", PUBKEY),
        Field(
            "limits",
            Struct(BasketRange, [Field("spot", U128), Field("low", U128), Field("high", U128)]),
        ),
        Field("prices", Struct(RebalancePrices, [Field("low", U128), Field("high", U128)])),
    ],
)

REBALANCE_LAYOUT = RecordLayout(
    RecordKind.REBALANCE,
    Rebalance,
    anchor_discriminator("Rebalance"),
    [
        Field("bump", U8),
        Field("all_rebalance_details_added", BOOL),
        reserved(6),
        Field("folio", PUBKEY),
        Field("current_auction_id", U64),
        Field("nonce", U64),
        Field("started_at", U64),
        Field("restricted_until", U64),
        Field("available_until", U64),
        Field(
            "details",
            SlotArray(REBALANCE_DETAILS_TOKEN, MAX_REBALANCE_DETAILS_TOKENS, RebalanceDetailsToken),
        ),
    ],
    FOLIO_PROGRAM_ID,
    account_size=ANCHOR_DISCRIMINATOR_SIZE + 3440,
)

AUCTION_ENDS_LAYOUT = RecordLayout(
    RecordKind.AUCTION_ENDS,
    AuctionEnds,
    anchor_discriminator("AuctionEnds"),
    [
        Field("bump", U8),
        reserved(7),
        Field("rebalance_nonce", U64),
        Field("token_mint_1", PUBKEY),
        Field("token_mint_2", PUBKEY),
        Field("end_time", U64),
    ],
    FOLIO_PROGRAM_ID,
    account_size=ANCHOR_DISCRIMINATOR_SIZE + 88,
)

AUCTION_LAYOUT = RecordLayout(
    RecordKind.AUCTION,
    Auction,
    anchor_discriminator("Auction"),
    [
        Field("bump", U8),
        reserved(7),
        Field("id", U64),
        Field("nonce", U64),
        Field("folio", PUBKEY),
        Field("sell_mint", PUBKEY),
        Field("buy_mint", PUBKEY),
        Field("sell_limit_spot", U128),
        Field("buy_limit_spot", U128),
        Field("prices", Struct(AuctionPrices, [Field("start", U128), Field("end", U128)])),
        Field("start", U64),
        Field("end", U64),
    ],
    FOLIO_PROGRAM_ID,
    account_size=ANCHOR_DISCRIMINATOR_SIZE + 200,
)

FEE_RECIPIENTS_LAYOUT = RecordLayout(
    RecordKind.FEE_RECIPIENTS,
    FeeRecipients,
    anchor_discriminator("FeeRecipients"),
    [
        Field("bump", U8),
        reserved(7),
        Field("distribution_index", U64),
        Field("folio", PUBKEY),
        Field("fee_recipients", SlotArray(FEE_RECIPIENT, MAX_FEE_RECIPIENTS, FeeRecipient)),
    ],
    FOLIO_PROGRAM_ID,
    account_size=ANCHOR_DISCRIMINATOR_SIZE + 3120,
)

FEE_DISTRIBUTION_LAYOUT = RecordLayout(
    RecordKind.FEE_DISTRIBUTION,
    FeeDistribution,
    anchor_discriminator("FeeDistribution"),
    [
        Field("bump", U8),
        reserved(7),
        Field("index", U64),
        Field("folio", PUBKEY),
        Field("cranker", PUBKEY),
        Field("amount_to_distribute", U128),
        Field("fee_recipients_state", SlotArray(FEE_RECIPIENT, MAX_FEE_RECIPIENTS, FeeRecipient)),
    ],
    FOLIO_PROGRAM_ID,
    account_size=ANCHOR_DISCRIMINATOR_SIZE + 3168,
)

FOLIO_BASKET_LAYOUT = RecordLayout(
    RecordKind.FOLIO_BASKET,
    FolioBasket,
    anchor_discriminator("FolioBasket"),
    [
        Field("bump", U8),
        reserved(7),
        Field("folio", PUBKEY),
        Field(
            "token_amounts",
            SlotArray(
                Struct(FolioTokenAmount, [Field("mint", PUBKEY), Field("amount", U64)]),
                MAX_FOLIO_TOKEN_AMOUNTS,
                FolioTokenAmount,
            ),
        ),
    ],
    FOLIO_PROGRAM_ID,
    account_size=ANCHOR_DISCRIMINATOR_SIZE + 4040,
)

USER_PENDING_BASKET_LAYOUT = RecordLayout(
    RecordKind.USER_PENDING_BASKET,
    UserPendingBasket,
    anchor_discriminator("UserPendingBasket"),
    [
        Field("bump", U8),
        reserved(7),
        Field("owner", PUBKEY),
        Field("folio", PUBKEY),
        Field(
            "token_amounts",
            SlotArray(
                Struct(
                    UserTokenAmount,
                    [
                        Field("mint", PUBKEY),
                        Field("amount_for_minting", U64),
                        Field("amount_for_redeeming", U64),
                    ],
                ),
                MAX_USER_PENDING_BASKET_TOKEN_AMOUNTS,
                UserTokenAmount,
            ),
        ),
    ],
    FOLIO_PROGRAM_ID,
    account_size=ANCHOR_DISCRIMINATOR_SIZE + 5352,
)


def encode_folio(folio: Folio) -> bytes:
    return FOLIO_LAYOUT.encode(folio)


def decode_folio(data: bytes) -> Folio:
    return FOLIO_LAYOUT.decode(data)


def encode_actor(actor: Actor) -> bytes:
    return ACTOR_LAYOUT.encode(actor)


def decode_actor(data: bytes) -> Actor:
    return ACTOR_LAYOUT.decode(data)


def encode_rebalance(rebalance: Rebalance) -> bytes:
    return REBALANCE_LAYOUT.encode(rebalance)


def decode_rebalance(data: bytes) -> Rebalance:
    return REBALANCE_LAYOUT.decode(data)


def encode_auction_ends(auction_ends: AuctionEnds) -> bytes:
    return AUCTION_ENDS_LAYOUT.encode(auction_ends)


def decode_auction_ends(data: bytes) -> AuctionEnds:
    return AUCTION_ENDS_LAYOUT.decode(data)


def encode_auction(auction: Auction) -> bytes:
    return AUCTION_LAYOUT.encode(auction)


def decode_auction(data: bytes) -> Auction:
    return AUCTION_LAYOUT.decode(data)


def encode_fee_recipients(fee_recipients: FeeRecipients) -> bytes:
    return FEE_RECIPIENTS_LAYOUT.encode(fee_recipients)


def decode_fee_recipients(data: bytes) -> FeeRecipients:
    return FEE_RECIPIENTS_LAYOUT.decode(data)


def encode_fee_distribution(fee_distribution: FeeDistribution) -> bytes:
    return FEE_DISTRIBUTION_LAYOUT.encode(fee_distribution)


def decode_fee_distribution(data: bytes) -> FeeDistribution:
    return FEE_DISTRIBUTION_LAYOUT.decode(data)


def encode_folio_basket(basket: FolioBasket) -> bytes:
    return FOLIO_BASKET_LAYOUT.encode(basket)


def decode_folio_basket(data: bytes) -> FolioBasket:
    return FOLIO_BASKET_LAYOUT.decode(data)


def encode_user_pending_basket(basket: UserPendingBasket) -> bytes:
    return USER_PENDING_BASKET_LAYOUT.encode(basket)


def decode_user_pending_basket(data: bytes) -> UserPendingBasket:
    return USER_PENDING_BASKET_LAYOUT.decode(data)


LAYOUTS = (
    FOLIO_LAYOUT,
    ACTOR_LAYOUT,
    REBALANCE_LAYOUT,
    AUCTION_ENDS_LAYOUT,
    AUCTION_LAYOUT,
    FEE_RECIPIENTS_LAYOUT,
    FEE_DISTRIBUTION_LAYOUT,
    FOLIO_BASKET_LAYOUT,
    USER_PENDING_BASKET_LAYOUT,
)
