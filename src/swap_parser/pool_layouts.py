"""Where each AMM keeps its pool and vault accounts inside a swap instruction.

Positions index the instruction's own account list; negative positions count
from its end. Programs reusing one instruction shape for swaps and liquidity
changes carry overrides keyed by exact opcode or by the semantic add/remove
opcode tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

from solders.pubkey import Pubkey

from . import constants as c
from .discriminators import INITIALIZE, TxType, add_discriminators, remove_discriminators


@dataclass(frozen=True)
class PoolPositions:
    pool: int
    pool_in: int
    pool_out: int

    def resolve(self, account_count: int) -> Tuple[int, int, int]:
        return tuple(p + account_count if p < 0 else p for p in (self.pool, self.pool_in, self.pool_out))  # type: ignore[return-value]


@dataclass(frozen=True)
class PoolLayout:
    protocol: str
    positions: PoolPositions
    opcode_len: int = 8
    whitelist: FrozenSet[bytes] = frozenset()
    by_account_count: Mapping[int, PoolPositions] = field(default_factory=dict)
    by_opcode: Mapping[bytes, Tuple[TxType, PoolPositions]] = field(default_factory=dict)
    add: Optional[PoolPositions] = None
    remove: Optional[PoolPositions] = None

    def select(self, data: bytes, account_count: int) -> Tuple[TxType, PoolPositions]:
        positions = self.by_account_count.get(account_count, self.positions)
        if len(data) < self.opcode_len:
            return TxType.SWAP, positions
        opcode = bytes(data[: self.opcode_len])
        if opcode in self.by_opcode:
            return self.by_opcode[opcode]
        if self.remove is not None and opcode in remove_discriminators():
            return TxType.REMOVE, self.remove
        if self.add is not None and opcode in add_discriminators():
            return TxType.ADD, self.add
        return TxType.SWAP, positions


def _single_byte(*opcodes: int) -> FrozenSet[bytes]:
    return frozenset(bytes([opcode]) for opcode in opcodes)


def _token_swap(protocol: str) -> PoolLayout:
    # SPL token-swap forks: swap is instruction 1, vaults at 4/5
    return PoolLayout(protocol, PoolPositions(0, 4, 5), opcode_len=1, whitelist=_single_byte(1))


_STABLE_WEIGHTED = dict(
    positions=PoolPositions(6, 3, 4),
    by_account_count={15: PoolPositions(8, 5, 6)},
)

POOL_LAYOUTS: Dict[Pubkey, PoolLayout] = {
    c.RAYDIUM_V4_PROGRAM_ID: PoolLayout(
        "Raydium",
        PoolPositions(1, 4, 5),
        opcode_len=1,
        whitelist=_single_byte(1, 3, 4, 9, 11),
        by_account_count={18: PoolPositions(1, 5, 6)},
        by_opcode={
            b"\x01": (TxType.ADD, PoolPositions(4, 10, 11)),
            b"\x03": (TxType.ADD, PoolPositions(1, 6, 7)),
            b"\x04": (TxType.REMOVE, PoolPositions(1, 6, 7)),
        },
    ),
    c.ORCA_WHIRLPOOL_PROGRAM_ID: PoolLayout(
        "Orca",
        PoolPositions(2, 4, 6),
        add=PoolPositions(0, -4, -3),
        remove=PoolPositions(0, -4, -3),
    ),
    c.RAYDIUM_CPMM_PROGRAM_ID: PoolLayout(
        "Raydium",
        PoolPositions(3, 6, 7),
        by_opcode={INITIALIZE: (TxType.ADD, PoolPositions(3, 10, 11))},
        add=PoolPositions(2, 6, 7),
        remove=PoolPositions(2, 6, 7),
    ),
    c.RAYDIUM_CLMM_PROGRAM_ID: PoolLayout(
        "Raydium",
        PoolPositions(2, 5, 6),
        add=PoolPositions(2, 9, 10),
        remove=PoolPositions(3, 5, 6),
    ),
    c.METEORA_DLMM_PROGRAM_ID: PoolLayout(
        "Meteora",
        PoolPositions(0, 2, 3),
        add=PoolPositions(1, 5, 6),
        remove=PoolPositions(1, 5, 6),
    ),
    c.METEORA_POOLS_PROGRAM_ID: PoolLayout("Meteora Pools Program", PoolPositions(0, 5, 6)),
    c.METEORA_DAMM_V2_PROGRAM_ID: PoolLayout("Meteora DAMM V2", PoolPositions(1, 4, 5)),
    c.METEORA_DBC_PROGRAM_ID: PoolLayout("Meteora Dynamic Bonding Curve", PoolPositions(2, 5, 6)),
    c.PUMPFUN_AMM_PROGRAM_ID: PoolLayout("Pumpfun", PoolPositions(0, 7, 8)),
    c.STABLE_WEIGHTED_PROGRAM_ID: PoolLayout("StableWeighted", **_STABLE_WEIGHTED),
    c.STABBLE_STABLE_SWAP_PROGRAM_ID: PoolLayout("stabble Stable Swap", **_STABLE_WEIGHTED),
    c.SOLFI_PROGRAM_ID: PoolLayout("SolFi", PoolPositions(1, 2, 3), opcode_len=1, whitelist=_single_byte(7)),
    c.LIFINITY_V2_PROGRAM_ID: PoolLayout("Lifinity Swap V2", PoolPositions(1, 5, 6)),
    c.ORCA_TOKEN_SWAP_V2_PROGRAM_ID: _token_swap("Orca Token Swap V2"),
    c.ORCA_TOKEN_SWAP_PROGRAM_ID: _token_swap("Orca Token Swap"),
    c.PHOENIX_PROGRAM_ID: PoolLayout("Phoenix", PoolPositions(2, 6, 7), opcode_len=1, whitelist=_single_byte(0)),
    c.ONE_DEX_PROGRAM_ID: PoolLayout("1Dex", PoolPositions(2, 3, 4)),
    c.CROPPER_PROGRAM_ID: PoolLayout("Cropper", PoolPositions(2, 4, 6)),
    c.INVARIANT_PROGRAM_ID: PoolLayout("Invariant", PoolPositions(1, 5, 6)),
    c.SABER_PROGRAM_ID: _token_swap("Saber Stable Swap"),
    c.SAROS_PROGRAM_ID: _token_swap("Saros"),
    c.FLUXBEAM_PROGRAM_ID: _token_swap("Fluxbeam"),
    c.GUAC_PROGRAM_ID: PoolLayout("Guac", PoolPositions(1, 4, 5)),
    c.BONKSWAP_PROGRAM_ID: PoolLayout("BonkSwap", PoolPositions(1, 4, 5)),
    c.DEXLAB_PROGRAM_ID: _token_swap("DexlabSwap"),
    c.ALDRIN_V1_PROGRAM_ID: PoolLayout("Aldrin", PoolPositions(0, 3, 4)),
    c.ALDRIN_V2_PROGRAM_ID: PoolLayout("Aldrin", PoolPositions(0, 3, 4)),
    c.SWAP_PROGRAM_ID: _token_swap("Swap Program"),
    c.DAOFUN_PROGRAM_ID: PoolLayout("DaoFun", PoolPositions(4, 7, 8)),
    c.CREMA_PROGRAM_ID: PoolLayout("Crema Finance Program", PoolPositions(1, 6, 7)),
    c.STEPN_DOOAR_PROGRAM_ID: _token_swap("StepN DOOAR Swap"),
    c.HELIUM_TREASURY_PROGRAM_ID: PoolLayout("Helium Treasury Management", PoolPositions(0, 3, 4)),
    c.PENGUIN_PROGRAM_ID: _token_swap("Penguin Finance"),
    c.ZEROFI_PROGRAM_ID: PoolLayout("ZeroFi", PoolPositions(0, 2, 4), opcode_len=1, whitelist=_single_byte(6)),
}


def layout_for(program_id: Pubkey) -> Optional[PoolLayout]:
    return POOL_LAYOUTS.get(program_id)
