"""Deterministic named keypairs for test scenarios.

Each keypair comes from a fixed 32-byte seed so addresses (and every PDA
derived from them) are stable across runs and machines.
"""

from __future__ import annotations

from solders.keypair import Keypair
from solders.pubkey import Pubkey

_SEED_BYTES = {
    "admin": 1,
    "folio_owner": 2,
    "rewards_admin": 3,
    "user_1": 4,
    "user_2": 5,
    "cranker": 6,
    "fee_recipient": 7,
    "auction_launcher": 8,
}


def keypair_for(name: str) -> Keypair:
    """Keypair seeded by ``name``'s fixed byte repeated 32 times."""
    return Keypair.from_seed(bytes([_SEED_BYTES[name]]) * 32)


def pubkey_for(name: str) -> Pubkey:
    return keypair_for(name).pubkey()


# Named constants
ADMIN = pubkey_for("admin")
FOLIO_OWNER = pubkey_for("folio_owner")
REWARDS_ADMIN = pubkey_for("rewards_admin")
USER_1 = pubkey_for("user_1")
USER_2 = pubkey_for("user_2")
CRANKER = pubkey_for("cranker")
FEE_RECIPIENT = pubkey_for("fee_recipient")
AUCTION_LAUNCHER = pubkey_for("auction_launcher")
