"""spl-governance v3 account records: realm, governance, proposal,
proposal transaction and token owner record."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from ..config import (
    DEFAULT_COMMUNITY_VETO_THRESHOLD_PERCENT,
    DEFAULT_COUNCIL_VETO_THRESHOLD_PERCENT,
    DEFAULT_VOTE_THRESHOLD_PERCENT,
    GOVERNANCE_ACCOUNT_SIZE,
    REALM_ACCOUNT_SIZE,
    SPL_GOVERNANCE_PROGRAM_ID,
)
from ..schema import (
    BOOL,
    BYTES,
    I64,
    PUBKEY,
    STRING,
    U8,
    U16,
    U32,
    U64,
    EnumKind,
    Field,
    Option,
    RecordLayout,
    Struct,
    Variant,
    Vec,
    reserved,
)
from ..types import RecordKind


class GovernanceAccountType(IntEnum):
    UNINITIALIZED = 0
    REALM_V1 = 1
    TOKEN_OWNER_RECORD_V1 = 2
    GOVERNANCE_V1 = 3
    PROGRAM_GOVERNANCE_V1 = 4
    PROPOSAL_V1 = 5
    SIGNATORY_RECORD_V1 = 6
    VOTE_RECORD_V1 = 7
    PROPOSAL_INSTRUCTION_V1 = 8
    MINT_GOVERNANCE_V1 = 9
    TOKEN_GOVERNANCE_V1 = 10
    REALM_CONFIG = 11
    VOTE_RECORD_V2 = 12
    PROPOSAL_TRANSACTION_V2 = 13
    PROPOSAL_V2 = 14
    PROGRAM_METADATA = 15
    REALM_V2 = 16
    TOKEN_OWNER_RECORD_V2 = 17
    GOVERNANCE_V2 = 18


class MintMaxVoterWeightSourceType(IntEnum):
    SUPPLY_FRACTION = 0
    ABSOLUTE = 1


class VoteThresholdType(IntEnum):
    YES_VOTE_PERCENTAGE = 0
    QUORUM_PERCENTAGE = 1
    DISABLED = 2


class VoteTipping(IntEnum):
    STRICT = 0
    EARLY = 1
    DISABLED = 2


class ProposalState(IntEnum):
    DRAFT = 0
    SIGNING_OFF = 1
    VOTING = 2
    SUCCEEDED = 3
    EXECUTING = 4
    COMPLETED = 5
    CANCELLED = 6
    DEFEATED = 7
    EXECUTING_WITH_ERRORS = 8
    VETOED = 9


class VoteKind(IntEnum):
    SINGLE_CHOICE = 0
    MULTI_CHOICE = 1


class MultiChoiceType(IntEnum):
    FULL_WEIGHT = 0
    WEIGHTED = 1


class OptionVoteResult(IntEnum):
    NONE = 0
    SUCCEEDED = 1
    DEFEATED = 2


class InstructionExecutionFlags(IntEnum):
    NONE = 0
    ORDERED = 1
    USE_TRANSACTION = 2


class TransactionExecutionStatus(IntEnum):
    NONE = 0
    SUCCESS = 1
    ERROR = 2


# Full supply fraction, in the 1e10 scale spl-governance uses.
FULL_SUPPLY_FRACTION = 10_000_000_000


@dataclass
class MaxVoterWeightSource:
    variant: MintMaxVoterWeightSourceType = MintMaxVoterWeightSourceType.SUPPLY_FRACTION
    value: int = FULL_SUPPLY_FRACTION


@dataclass
class VoteThreshold:
    # Seeded fixtures carry tag 1 (quorum percentage) unless told otherwise.
    variant: VoteThresholdType = VoteThresholdType.QUORUM_PERCENTAGE
    value: Optional[int] = DEFAULT_VOTE_THRESHOLD_PERCENT

    @classmethod
    def yes_percentage(cls, percent: int) -> "VoteThreshold":
        return cls(VoteThresholdType.YES_VOTE_PERCENTAGE, percent)

    @classmethod
    def quorum(cls, percent: int) -> "VoteThreshold":
        return cls(VoteThresholdType.QUORUM_PERCENTAGE, percent)

    @classmethod
    def disabled(cls) -> "VoteThreshold":
        return cls(VoteThresholdType.DISABLED, None)


@dataclass
class MultiChoiceConfig:
    choice_type: MultiChoiceType = MultiChoiceType.FULL_WEIGHT
    min_voter_options: int = 1
    max_voter_options: int = 1
    max_winning_options: int = 1


@dataclass
class VoteType:
    variant: VoteKind = VoteKind.SINGLE_CHOICE
    value: Optional[MultiChoiceConfig] = None


@dataclass
class RealmConfig:
    legacy1: int = 0
    legacy2: int = 0
    min_community_weight_to_create_governance: int = 0
    community_mint_max_voter_weight_source: MaxVoterWeightSource = field(
        default_factory=MaxVoterWeightSource
    )
    council_mint: Optional[Pubkey] = None


@dataclass
class Realm:
    community_mint: Pubkey
    name: str
    config: RealmConfig = field(default_factory=RealmConfig)
    legacy1: int = 0
    authority: Optional[Pubkey] = None


@dataclass
class GovernanceConfig:
    community_vote_threshold: VoteThreshold = field(default_factory=VoteThreshold)
    min_community_weight_to_create_proposal: int = 5
    transactions_hold_up_time: int = 10
    voting_base_time: int = 5
    community_vote_tipping: VoteTipping = VoteTipping.STRICT
    council_vote_threshold: VoteThreshold = field(default_factory=VoteThreshold)
    council_veto_vote_threshold: VoteThreshold = field(
        default_factory=lambda: VoteThreshold.quorum(DEFAULT_COUNCIL_VETO_THRESHOLD_PERCENT)
    )
    min_council_weight_to_create_proposal: int = 1
    council_vote_tipping: VoteTipping = VoteTipping.STRICT
    community_veto_vote_threshold: VoteThreshold = field(
        default_factory=lambda: VoteThreshold.quorum(DEFAULT_COMMUNITY_VETO_THRESHOLD_PERCENT)
    )
    voting_cool_off_time: int = 2
    deposit_exempt_proposal_count: int = 10


@dataclass
class Governance:
    realm: Pubkey
    governance_seed: Pubkey
    config: GovernanceConfig = field(default_factory=GovernanceConfig)
    required_signatories_count: int = 0
    active_proposal_count: int = 0


@dataclass
class ProposalOption:
    label: str
    vote_weight: int = 0
    vote_result: OptionVoteResult = OptionVoteResult.NONE
    transactions_executed_count: int = 0
    transactions_count: int = 0
    transactions_next_index: int = 0


@dataclass
class Proposal:
    governance: Pubkey
    governing_token_mint: Pubkey
    token_owner_record: Pubkey
    name: str
    description_link: str = ""
    state: ProposalState = ProposalState.DRAFT
    signatories_count: int = 0
    signatories_signed_off_count: int = 0
    vote_type: VoteType = field(default_factory=VoteType)
    options: List[ProposalOption] = field(default_factory=list)
    deny_vote_weight: Optional[int] = None
    abstain_vote_weight: Optional[int] = None
    start_voting_at: Optional[int] = None
    draft_at: int = 0
    signing_off_at: Optional[int] = None
    voting_at: Optional[int] = None
    voting_at_slot: Optional[int] = None
    voting_completed_at: Optional[int] = None
    executing_at: Optional[int] = None
    closed_at: Optional[int] = None
    execution_flags: InstructionExecutionFlags = InstructionExecutionFlags.NONE
    max_vote_weight: Optional[int] = None
    max_voting_time: Optional[int] = None
    vote_threshold: Optional[VoteThreshold] = None
    veto_vote_weight: int = 0


@dataclass
class AccountMetaData:
    pubkey: Pubkey
    is_signer: bool = False
    is_writable: bool = False


@dataclass
class InstructionData:
    """Instruction as stored inside a proposal transaction."""
    program_id: Pubkey
    accounts: List[AccountMetaData] = field(default_factory=list)
    data: bytes = b""

    @classmethod
    def from_instruction(cls, ix: Instruction) -> "InstructionData":
        return cls(
            program_id=ix.program_id,
            accounts=[AccountMetaData(m.pubkey, m.is_signer, m.is_writable) for m in ix.accounts],
            data=bytes(ix.data),
        )

    def to_instruction(self) -> Instruction:
        metas = [AccountMeta(m.pubkey, m.is_signer, m.is_writable) for m in self.accounts]
        return Instruction(self.program_id, self.data, metas)


@dataclass
class ProposalTransaction:
    proposal: Pubkey
    option_index: int = 0
    transaction_index: int = 0
    hold_up_time: int = 0
    instructions: List[InstructionData] = field(default_factory=list)
    executed_at: Optional[int] = None
    execution_status: TransactionExecutionStatus = TransactionExecutionStatus.NONE


@dataclass
class TokenOwnerRecord:
    realm: Pubkey
    governing_token_mint: Pubkey
    governing_token_owner: Pubkey
    governing_token_deposit_amount: int = 0
    unrelinquished_votes_count: int = 0
    outstanding_proposal_count: int = 0
    version: int = 1
    governance_delegate: Optional[Pubkey] = None


def _tag(account_type: GovernanceAccountType) -> bytes:
    return bytes([account_type])


VOTE_THRESHOLD = Variant(
    VoteThresholdType,
    {
        VoteThresholdType.YES_VOTE_PERCENTAGE: U8,
        VoteThresholdType.QUORUM_PERCENTAGE: U8,
        VoteThresholdType.DISABLED: None,
    },
    VoteThreshold,
)

MAX_VOTER_WEIGHT_SOURCE = Variant(
    MintMaxVoterWeightSourceType,
    {
        MintMaxVoterWeightSourceType.SUPPLY_FRACTION: U64,
        MintMaxVoterWeightSourceType.ABSOLUTE: U64,
    },
    MaxVoterWeightSource,
)

MULTI_CHOICE_CONFIG = Struct(
    MultiChoiceConfig,
    [
        Field("choice_type", EnumKind(MultiChoiceType)),
        Field("min_voter_options", U8),
        Field("max_voter_options", U8),
        Field("max_winning_options", U8),
    ],
)

VOTE_TYPE = Variant(
    VoteKind,
    {VoteKind.SINGLE_CHOICE: None, VoteKind.MULTI_CHOICE: MULTI_CHOICE_CONFIG},
    VoteType,
)

REALM_LAYOUT = RecordLayout(
    RecordKind.REALM,
    Realm,
    _tag(GovernanceAccountType.REALM_V2),
    [
        Field("community_mint", PUBKEY),
        Field(
            "config",
            Struct(
                RealmConfig,
                [
                    Field("legacy1", U8),
                    Field("legacy2", U8),
                    reserved(6),
                    Field("min_community_weight_to_create_governance", U64),
                    Field("community_mint_max_voter_weight_source", MAX_VOTER_WEIGHT_SOURCE),
                    Field("council_mint", Option(PUBKEY)),
                ],
            ),
        ),
        reserved(6),
        Field("legacy1", U16),
        Field("authority", Option(PUBKEY)),
        Field("name", STRING),
        reserved(128),
    ],
    SPL_GOVERNANCE_PROGRAM_ID,
    account_size=REALM_ACCOUNT_SIZE,
)

GOVERNANCE_LAYOUT = RecordLayout(
    RecordKind.GOVERNANCE,
    Governance,
    _tag(GovernanceAccountType.GOVERNANCE_V2),
    [
        Field("realm", PUBKEY),
        Field("governance_seed", PUBKEY),
        reserved(4),
        Field(
            "config",
            Struct(
                GovernanceConfig,
                [
                    Field("community_vote_threshold", VOTE_THRESHOLD),
                    Field("min_community_weight_to_create_proposal", U64),
                    Field("transactions_hold_up_time", U32),
                    Field("voting_base_time", U32),
                    Field("community_vote_tipping", EnumKind(VoteTipping)),
                    Field("council_vote_threshold", VOTE_THRESHOLD),
                    Field("council_veto_vote_threshold", VOTE_THRESHOLD),
                    Field("min_council_weight_to_create_proposal", U64),
                    Field("council_vote_tipping", EnumKind(VoteTipping)),
                    Field("community_veto_vote_threshold", VOTE_THRESHOLD),
                    Field("voting_cool_off_time", U32),
                    Field("deposit_exempt_proposal_count", U8),
                ],
            ),
        ),
        reserved(119),
        Field("required_signatories_count", U8),
        Field("active_proposal_count", U64),
    ],
    SPL_GOVERNANCE_PROGRAM_ID,
    account_size=GOVERNANCE_ACCOUNT_SIZE,
)

PROPOSAL_OPTION = Struct(
    ProposalOption,
    [
        Field("label", STRING),
        Field("vote_weight", U64),
        Field("vote_result", EnumKind(OptionVoteResult)),
        Field("transactions_executed_count", U16),
        Field("transactions_count", U16),
        Field("transactions_next_index", U16),
    ],
)

PROPOSAL_LAYOUT = RecordLayout(
    RecordKind.PROPOSAL,
    Proposal,
    _tag(GovernanceAccountType.PROPOSAL_V2),
    [
        Field("governance", PUBKEY),
        Field("governing_token_mint", PUBKEY),
        Field("state", EnumKind(ProposalState)),
        Field("token_owner_record", PUBKEY),
        Field("signatories_count", U8),
        Field("signatories_signed_off_count", U8),
        Field("vote_type", VOTE_TYPE),
        Field("options", Vec(PROPOSAL_OPTION)),
        Field("deny_vote_weight", Option(U64)),
        reserved(1),
        Field("abstain_vote_weight", Option(U64)),
        Field("start_voting_at", Option(I64)),
        Field("draft_at", I64),
        Field("signing_off_at", Option(I64)),
        Field("voting_at", Option(I64)),
        Field("voting_at_slot", Option(U64)),
        Field("voting_completed_at", Option(I64)),
        Field("executing_at", Option(I64)),
        Field("closed_at", Option(I64)),
        Field("execution_flags", EnumKind(InstructionExecutionFlags)),
        Field("max_vote_weight", Option(U64)),
        Field("max_voting_time", Option(U32)),
        Field("vote_threshold", Option(VOTE_THRESHOLD)),
        reserved(64),
        Field("name", STRING),
        Field("description_link", STRING),
        Field("veto_vote_weight", U64),
    ],
    SPL_GOVERNANCE_PROGRAM_ID,
)

INSTRUCTION_DATA = Struct(
    InstructionData,
    [
        Field("program_id", PUBKEY),
        Field(
            "accounts",
            Vec(
                Struct(
                    AccountMetaData,
                    [
                        Field("pubkey", PUBKEY),
                        Field("is_signer", BOOL),
                        Field("is_writable", BOOL),
                    ],
                )
            ),
        ),
        Field("data", BYTES),
    ],
)

PROPOSAL_TRANSACTION_LAYOUT = RecordLayout(
    RecordKind.PROPOSAL_TRANSACTION,
    ProposalTransaction,
    _tag(GovernanceAccountType.PROPOSAL_TRANSACTION_V2),
    [
        Field("proposal", PUBKEY),
        Field("option_index", U8),
        Field("transaction_index", U16),
        Field("hold_up_time", U32),
        Field("instructions", Vec(INSTRUCTION_DATA)),
        Field("executed_at", Option(I64)),
        Field("execution_status", EnumKind(TransactionExecutionStatus)),
        reserved(8),
    ],
    SPL_GOVERNANCE_PROGRAM_ID,
)

TOKEN_OWNER_RECORD_LAYOUT = RecordLayout(
    RecordKind.TOKEN_OWNER_RECORD,
    TokenOwnerRecord,
    _tag(GovernanceAccountType.TOKEN_OWNER_RECORD_V1),
    [
        Field("realm", PUBKEY),
        Field("governing_token_mint", PUBKEY),
        Field("governing_token_owner", PUBKEY),
        Field("governing_token_deposit_amount", U64),
        Field("unrelinquished_votes_count", U64),
        Field("outstanding_proposal_count", U8),
        Field("version", U8),
        reserved(6),
        Field("governance_delegate", Option(PUBKEY)),
        reserved(128),
    ],
    SPL_GOVERNANCE_PROGRAM_ID,
)


def encode_realm(realm: Realm) -> bytes:
    return REALM_LAYOUT.encode(realm)


def decode_realm(data: bytes) -> Realm:
    return REALM_LAYOUT.decode(data)


def encode_governance(governance: Governance) -> bytes:
    return GOVERNANCE_LAYOUT.encode(governance)


def decode_governance(data: bytes) -> Governance:
    return GOVERNANCE_LAYOUT.decode(data)


def encode_proposal(proposal: Proposal) -> bytes:
    return PROPOSAL_LAYOUT.encode(proposal)


def decode_proposal(data: bytes) -> Proposal:
    return PROPOSAL_LAYOUT.decode(data)


def encode_proposal_transaction(tx: ProposalTransaction) -> bytes:
    return PROPOSAL_TRANSACTION_LAYOUT.encode(tx)


def decode_proposal_transaction(data: bytes) -> ProposalTransaction:
    return PROPOSAL_TRANSACTION_LAYOUT.decode(data)


def encode_token_owner_record(record: TokenOwnerRecord) -> bytes:
    return TOKEN_OWNER_RECORD_LAYOUT.encode(record)


def decode_token_owner_record(data: bytes) -> TokenOwnerRecord:
    return TOKEN_OWNER_RECORD_LAYOUT.decode(data)


LAYOUTS = (
    REALM_LAYOUT,
    GOVERNANCE_LAYOUT,
    PROPOSAL_LAYOUT,
    PROPOSAL_TRANSACTION_LAYOUT,
    TOKEN_OWNER_RECORD_LAYOUT,
)
