"""Folio seed configuration constants.

Keep program IDs and account bounds aligned with the deployed folio, folio
admin and rewards programs and with spl-governance v3.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from solders.pubkey import Pubkey

from .errors import ErrorCode, SeedError

# Program IDs
SYSTEM_PROGRAM_ID = Pubkey.from_string("11111111111111111111111111111111")
TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
TOKEN_2022_PROGRAM_ID = Pubkey.from_string("TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb")
ASSOCIATED_TOKEN_PROGRAM_ID = Pubkey.from_string("ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL")
SPL_GOVERNANCE_PROGRAM_ID = Pubkey.from_string("GovER5Lthms3bLBqWub97yVrMmEogzX7xNjdXpPPCVZw")
FOLIO_PROGRAM_ID = Pubkey.from_string("n6sR7Eg5LMg5SGorxK9q3ZePHs9e8gjoQ7TgUW2YCaG")
FOLIO_SECOND_INSTANCE_PROGRAM_ID = Pubkey.from_string("7ApLyZSzV9jHseZnSLmyHJjsbNWzd85DYx2qe8cSCLWt")
FOLIO_ADMIN_PROGRAM_ID = Pubkey.from_string("7ZqvG9KKhzA3ykto2WMYuw3waWuaydKwYKHYSf7SiFbn")
REWARDS_PROGRAM_ID = Pubkey.from_string("7GiMvNDHVY8PXWQLHjSf1REGKpiDsVzRr4p7Y3xGbSuf")
BPF_LOADER_UPGRADEABLE_ID = Pubkey.from_string("BPFLoaderUpgradeab1e11111111111111111111111")

# Funding and units
DEFAULT_LAMPORTS = 1_000_000_000
DEFAULT_DECIMALS = 9
D9 = 10**9
D18 = 10**18

# Fixed account sizes
ANCHOR_DISCRIMINATOR_SIZE = 8
REALM_ACCOUNT_SIZE = 304
GOVERNANCE_ACCOUNT_SIZE = 236
TOKEN_ACCOUNT_SIZE = 165
MINT_ACCOUNT_SIZE = 82
PROGRAM_DATA_METADATA_SIZE = 45

# Folio program bounds
MAX_FEE_RECIPIENTS = 64
MAX_FOLIO_TOKEN_AMOUNTS = 100
MAX_USER_PENDING_BASKET_TOKEN_AMOUNTS = 110
MAX_REBALANCE_DETAILS_TOKENS = 30
MAX_PADDED_STRING_LENGTH = 128

# Rewards / admin bounds
MAX_REWARD_TOKENS = 4
MAX_ACCEPTED_PROGRAMS = 10

# Governance fixture defaults
DEFAULT_VOTE_THRESHOLD_PERCENT = 60
DEFAULT_COUNCIL_VETO_THRESHOLD_PERCENT = 50
DEFAULT_COMMUNITY_VETO_THRESHOLD_PERCENT = 40

_TRUTHY = ("true", "1", "yes")


def _env_number(name: str, parse):
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        return parse(raw)
    except ValueError as e:
        raise SeedError(ErrorCode.INVALID_VALUE, f"{name}={raw!r}: {e}") from e


@dataclass
class SeederConfig:
    """Runtime settings for the seeder, CLI and remote push."""
    default_lamports: int = DEFAULT_LAMPORTS

    # Remote validator
    rpc_endpoint: str = "http://127.0.0.1:8899"
    rpc_timeout: float = 30.0
    set_account_method: str = "surfnet_setAccount"

    verbose: bool = False

    @classmethod
    def from_env(cls) -> "SeederConfig":
        """Load configuration from environment variables."""
        config = cls()

        lamports = _env_number("FOLIO_SEED_LAMPORTS", int)
        if lamports is not None:
            config.default_lamports = lamports

        config.rpc_endpoint = os.environ.get("FOLIO_SEED_RPC_URL", config.rpc_endpoint)
        timeout = _env_number("FOLIO_SEED_RPC_TIMEOUT", float)
        if timeout is not None:
            config.rpc_timeout = timeout
        config.set_account_method = os.environ.get(
            "FOLIO_SEED_SET_ACCOUNT_METHOD", config.set_account_method
        )

        config.verbose = os.environ.get("VERBOSE", "").lower() in _TRUTHY
        return config
