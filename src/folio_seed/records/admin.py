"""Folio admin program accounts: program registrar and fee configs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from solders.pubkey import Pubkey

from ..config import ANCHOR_DISCRIMINATOR_SIZE, FOLIO_ADMIN_PROGRAM_ID, MAX_ACCEPTED_PROGRAMS
from ..schema import PUBKEY, U8, U128, Field, RecordLayout, SlotArray, anchor_discriminator
from ..types import RecordKind


@dataclass
class ProgramRegistrar:
    bump: int = 0
    accepted_programs: List[Pubkey] = field(default_factory=list)


@dataclass
class DAOFeeConfig:
    fee_recipient: Pubkey
    bump: int = 0
    default_fee_numerator: int = 0
    default_fee_floor: int = 0


@dataclass
class FolioFeeConfig:
    bump: int = 0
    fee_numerator: int = 0
    fee_floor: int = 0


PROGRAM_REGISTRAR_LAYOUT = RecordLayout(
    RecordKind.PROGRAM_REGISTRAR,
    ProgramRegistrar,
    anchor_discriminator("ProgramRegistrar"),
    [
        Field("bump", U8),
        Field("accepted_programs", SlotArray(PUBKEY, MAX_ACCEPTED_PROGRAMS, Pubkey.default)),
    ],
    FOLIO_ADMIN_PROGRAM_ID,
    account_size=ANCHOR_DISCRIMINATOR_SIZE + 321,
)

DAO_FEE_CONFIG_LAYOUT = RecordLayout(
    RecordKind.DAO_FEE_CONFIG,
    DAOFeeConfig,
    anchor_discriminator("DAOFeeConfig"),
    [
        Field("bump", U8),
        Field("fee_recipient", PUBKEY),
        Field("default_fee_numerator", U128),
        Field("default_fee_floor", U128),
    ],
    FOLIO_ADMIN_PROGRAM_ID,
    account_size=ANCHOR_DISCRIMINATOR_SIZE + 65,
)

FOLIO_FEE_CONFIG_LAYOUT = RecordLayout(
    RecordKind.FOLIO_FEE_CONFIG,
    FolioFeeConfig,
    anchor_discriminator("FolioFeeConfig"),
    [
        Field("bump", U8),
        Field("fee_numerator", U128),
        Field("fee_floor", U128),
    ],
    FOLIO_ADMIN_PROGRAM_ID,
    account_size=ANCHOR_DISCRIMINATOR_SIZE + 33,
)


def encode_program_registrar(registrar: ProgramRegistrar) -> bytes:
    return PROGRAM_REGISTRAR_LAYOUT.encode(registrar)


def decode_program_registrar(data: bytes) -> ProgramRegistrar:
    return PROGRAM_REGISTRAR_LAYOUT.decode(data)


def encode_dao_fee_config(config: DAOFeeConfig) -> bytes:
    return DAO_FEE_CONFIG_LAYOUT.encode(config)


def decode_dao_fee_config(data: bytes) -> DAOFeeConfig:
    return DAO_FEE_CONFIG_LAYOUT.decode(data)


def encode_folio_fee_config(config: FolioFeeConfig) -> bytes:
    return FOLIO_FEE_CONFIG_LAYOUT.encode(config)


def decode_folio_fee_config(data: bytes) -> FolioFeeConfig:
    return FOLIO_FEE_CONFIG_LAYOUT.decode(data)


LAYOUTS = (PROGRAM_REGISTRAR_LAYOUT, DAO_FEE_CONFIG_LAYOUT, FOLIO_FEE_CONFIG_LAYOUT)
