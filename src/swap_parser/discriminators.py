"""Anchor opcode and event discriminators.

Instruction discriminators are the first eight bytes of
``sha256("global:<instruction_name>")``. Events emitted through the Anchor
self-CPI log instruction carry a sixteen byte prefix: a fixed eight byte tag
followed by the first eight bytes of ``sha256("event:<EventName>")``.
"""

from __future__ import annotations

import hashlib
from enum import Enum
from functools import lru_cache
from typing import FrozenSet, Optional

DISCRIMINATOR_LEN = 8
EVENT_DISCRIMINATOR_LEN = 16
EVENT_IX_TAG = bytes([228, 69, 165, 46, 81, 203, 154, 29])

SWAP_INSTRUCTIONS = (
    "swap",
    "swap_exact_out",
    "swap_exact_in",
    "swap_base_input",
    "swap_base_output",
    "swap_v2",
    "swap_with_price_impact",
    "swap_exact_amount_in",
    "sell_token",
    "swap_with_partner",
    "redeem_v0",
    "sell",
    "buy",
)

REMOVE_LIQUIDITY_INSTRUCTIONS = (
    "remove_liquidity_by_range",
    "remove_liquidity",
    "remove_all_liquidity",
    "decrease_liquidity",
    "decrease_liquidity_v2",
    "withdraw",
)

ADD_LIQUIDITY_INSTRUCTIONS = (
    "add_liquidity",
    "add_liquidity_by_weight",
    "add_liquidity_by_strategy",
    "increase_liquidity",
    "increase_liquidity_v2",
    "deposit",
    "initialize",
)


class TxType(str, Enum):
    SWAP = "swap"
    ADD = "add"
    REMOVE = "remove"


@lru_cache(maxsize=None)
def compute_discriminator(name: str, namespace: str = "global") -> bytes:
    return hashlib.sha256(f"{namespace}:{name}".encode("utf-8")).digest()[:DISCRIMINATOR_LEN]


def event_discriminator(event_name: str) -> bytes:
    return EVENT_IX_TAG + compute_discriminator(event_name, namespace="event")


@lru_cache(maxsize=None)
def swap_discriminators() -> FrozenSet[bytes]:
    return frozenset(compute_discriminator(name) for name in SWAP_INSTRUCTIONS)


@lru_cache(maxsize=None)
def remove_discriminators() -> FrozenSet[bytes]:
    return frozenset(compute_discriminator(name) for name in REMOVE_LIQUIDITY_INSTRUCTIONS)


@lru_cache(maxsize=None)
def add_discriminators() -> FrozenSet[bytes]:
    return frozenset(compute_discriminator(name) for name in ADD_LIQUIDITY_INSTRUCTIONS)


def classify(data: bytes) -> Optional[TxType]:
    """Map an instruction's leading eight bytes onto its semantic bucket."""
    opcode = bytes(data[:DISCRIMINATOR_LEN])
    if len(opcode) < DISCRIMINATOR_LEN:
        return None
    if opcode in swap_discriminators():
        return TxType.SWAP
    if opcode in remove_discriminators():
        return TxType.REMOVE
    if opcode in add_discriminators():
        return TxType.ADD
    return None


def is_event_instruction(data: bytes) -> bool:
    return len(data) >= EVENT_DISCRIMINATOR_LEN and bytes(data[:DISCRIMINATOR_LEN]) == EVENT_IX_TAG


SWAP = compute_discriminator("swap")
BUY = compute_discriminator("buy")
SELL = compute_discriminator("sell")
INITIALIZE = compute_discriminator("initialize")
