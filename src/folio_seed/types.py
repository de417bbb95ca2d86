"""Record kinds known to the codec.

Wire discriminators are bound to each kind once, in the record layouts; call
sites name kinds through this enumeration only.
"""

from __future__ import annotations

from enum import Enum


class RecordKind(Enum):
    # spl-governance
    REALM = "realm"
    GOVERNANCE = "governance"
    PROPOSAL = "proposal"
    PROPOSAL_TRANSACTION = "proposal_transaction"
    TOKEN_OWNER_RECORD = "token_owner_record"

    # spl-token
    TOKEN_ACCOUNT = "token_account"
    MINT = "mint"

    # folio program
    FOLIO = "folio"
    ACTOR = "actor"
    REBALANCE = "rebalance"
    AUCTION = "auction"
    AUCTION_ENDS = "auction_ends"
    FEE_RECIPIENTS = "fee_recipients"
    FEE_DISTRIBUTION = "fee_distribution"
    FOLIO_BASKET = "folio_basket"
    USER_PENDING_BASKET = "user_pending_basket"

    # rewards program
    REWARD_TOKENS = "reward_tokens"
    REWARD_INFO = "reward_info"
    USER_REWARD_INFO = "user_reward_info"

    # folio admin program
    PROGRAM_REGISTRAR = "program_registrar"
    DAO_FEE_CONFIG = "dao_fee_config"
    FOLIO_FEE_CONFIG = "folio_fee_config"

    # bpf upgradeable loader
    PROGRAM_DATA = "program_data"
