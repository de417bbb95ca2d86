"""Rewards program accounts (realm-scoped staking rewards)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from solders.pubkey import Pubkey

from ..config import ANCHOR_DISCRIMINATOR_SIZE, MAX_REWARD_TOKENS, REWARDS_PROGRAM_ID
from ..schema import (
    BOOL,
    PUBKEY,
    U8,
    U64,
    U128,
    Field,
    RecordLayout,
    SlotArray,
    anchor_discriminator,
    reserved,
)
from ..types import RecordKind


@dataclass
class RewardTokens:
    realm: Pubkey
    rewards_admin: Pubkey
    bump: int = 0
    reward_ratio: int = 0
    reward_tokens: List[Pubkey] = field(default_factory=list)


@dataclass
class RewardInfo:
    realm: Pubkey
    reward_token: Pubkey
    bump: int = 0
    payout_last_paid: int = 0
    reward_index: int = 0
    balance_accounted: int = 0
    balance_last_known: int = 0
    total_claimed: int = 0
    is_disallowed: bool = False


@dataclass
class UserRewardInfo:
    realm: Pubkey
    reward_token: Pubkey
    bump: int = 0
    last_reward_index: int = 0
    accrued_rewards: int = 0


REWARD_TOKENS_LAYOUT = RecordLayout(
    RecordKind.REWARD_TOKENS,
    RewardTokens,
    anchor_discriminator("RewardTokens"),
    [
        Field("bump", U8),
        reserved(15),
        Field("realm", PUBKEY),
        Field("rewards_admin", PUBKEY),
        Field("reward_ratio", U128),
        Field("reward_tokens", SlotArray(PUBKEY, MAX_REWARD_TOKENS, Pubkey.default)),
    ],
    REWARDS_PROGRAM_ID,
    account_size=ANCHOR_DISCRIMINATOR_SIZE + 224,
)

REWARD_INFO_LAYOUT = RecordLayout(
    RecordKind.REWARD_INFO,
    RewardInfo,
    anchor_discriminator("RewardInfo"),
    [
        Field("bump", U8),
        Field("realm", PUBKEY),
        Field("reward_token", PUBKEY),
        Field("payout_last_paid", U64),
        Field("reward_index", U128),
        Field("balance_accounted", U128),
        Field("balance_last_known", U128),
        Field("total_claimed", U128),
        Field("is_disallowed", BOOL),
    ],
    REWARDS_PROGRAM_ID,
    account_size=ANCHOR_DISCRIMINATOR_SIZE + 138,
)

USER_REWARD_INFO_LAYOUT = RecordLayout(
    RecordKind.USER_REWARD_INFO,
    UserRewardInfo,
    anchor_discriminator("UserRewardInfo"),
    [
        Field("bump", U8),
        Field("realm", PUBKEY),
        Field("reward_token", PUBKEY),
        Field("last_reward_index", U128),
        Field("accrued_rewards", U128),
    ],
    REWARDS_PROGRAM_ID,
    account_size=ANCHOR_DISCRIMINATOR_SIZE + 97,
)


def encode_reward_tokens(reward_tokens: RewardTokens) -> bytes:
    return REWARD_TOKENS_LAYOUT.encode(reward_tokens)


def decode_reward_tokens(data: bytes) -> RewardTokens:
    return REWARD_TOKENS_LAYOUT.decode(data)


def encode_reward_info(info: RewardInfo) -> bytes:
    return REWARD_INFO_LAYOUT.encode(info)


def decode_reward_info(data: bytes) -> RewardInfo:
    return REWARD_INFO_LAYOUT.decode(data)


def encode_user_reward_info(info: UserRewardInfo) -> bytes:
    return USER_REWARD_INFO_LAYOUT.encode(info)


def decode_user_reward_info(data: bytes) -> UserRewardInfo:
    return USER_REWARD_INFO_LAYOUT.decode(data)


LAYOUTS = (REWARD_TOKENS_LAYOUT, REWARD_INFO_LAYOUT, USER_REWARD_INFO_LAYOUT)
