"""Upgradeable-loader ProgramData metadata.

Only the 45-byte header is modelled: a u32 state tag (3 = ProgramData), the
deploy slot and the optional upgrade authority. Programs that check their own
upgrade authority read nothing past it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from solders.pubkey import Pubkey

from ..config import BPF_LOADER_UPGRADEABLE_ID, PROGRAM_DATA_METADATA_SIZE
from ..schema import PUBKEY, U64, Field, Option, RecordLayout
from ..types import RecordKind

PROGRAM_DATA_STATE = 3


@dataclass
class ProgramData:
    slot: int = 0
    upgrade_authority: Optional[Pubkey] = None


PROGRAM_DATA_LAYOUT = RecordLayout(
    RecordKind.PROGRAM_DATA,
    ProgramData,
    PROGRAM_DATA_STATE.to_bytes(4, "little"),
    [
        Field("slot", U64),
        Field("upgrade_authority", Option(PUBKEY)),
    ],
    BPF_LOADER_UPGRADEABLE_ID,
    account_size=PROGRAM_DATA_METADATA_SIZE,
)


def encode_program_data(program_data: ProgramData) -> bytes:
    return PROGRAM_DATA_LAYOUT.encode(program_data)


def decode_program_data(data: bytes) -> ProgramData:
    return PROGRAM_DATA_LAYOUT.decode(data)


LAYOUTS = (PROGRAM_DATA_LAYOUT,)
