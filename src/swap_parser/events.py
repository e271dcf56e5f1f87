"""Protocol event records and instruction argument structs.

Each record declares its sixteen byte event discriminator and its field
``construct`` layout; ``decode`` strips the discriminator and parses the rest.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Sequence, Type, TypeVar

from construct import Int8ul, Int64sl, Int64ul, Struct
from solders.pubkey import Pubkey

from .codec import U128, Bool, PublicKey, parse_struct
from .discriminators import EVENT_DISCRIMINATOR_LEN, EVENT_IX_TAG
from .errors import PayloadError

E = TypeVar("E", bound="EventRecord")


class EventRecord:
    DISCRIMINATOR: ClassVar[bytes] = b""
    LAYOUT: ClassVar[Struct] = Struct()

    @classmethod
    def matches(cls, data: bytes) -> bool:
        return bytes(data[:EVENT_DISCRIMINATOR_LEN]) == cls.DISCRIMINATOR

    @classmethod
    def decode(cls: Type[E], data: bytes) -> E:
        if not cls.matches(data):
            raise PayloadError(f"{cls.__name__}: discriminator mismatch")
        fields = parse_struct(cls.LAYOUT, data, EVENT_DISCRIMINATOR_LEN)
        return cls(**fields)  # type: ignore[call-arg]


@dataclass(frozen=True)
class PumpfunTradeEvent(EventRecord):
    DISCRIMINATOR: ClassVar[bytes] = EVENT_IX_TAG + bytes.fromhex("bddb7fd34ee661ee")
    LAYOUT: ClassVar[Struct] = Struct(
        "mint" / PublicKey,
        "sol_amount" / Int64ul,
        "token_amount" / Int64ul,
        "is_buy" / Bool,
        "user" / PublicKey,
        "timestamp" / Int64sl,
        "virtual_sol_reserves" / Int64ul,
        "virtual_token_reserves" / Int64ul,
    )

    mint: Pubkey
    sol_amount: int
    token_amount: int
    is_buy: bool
    user: Pubkey
    timestamp: int
    virtual_sol_reserves: int
    virtual_token_reserves: int


@dataclass(frozen=True)
class PumpAmmBuyEvent(EventRecord):
    DISCRIMINATOR: ClassVar[bytes] = EVENT_IX_TAG + bytes.fromhex("67f4521f2cf57777")
    LAYOUT: ClassVar[Struct] = Struct(
        "timestamp" / Int64sl,
        "base_amount_out" / Int64ul,
        "max_quote_amount_in" / Int64ul,
        "user_base_token_reserves" / Int64ul,
        "user_quote_token_reserves" / Int64ul,
        "pool_base_token_reserves" / Int64ul,
        "pool_quote_token_reserves" / Int64ul,
        "quote_amount_in" / Int64ul,
        "lp_fee_basis_points" / Int64ul,
        "lp_fee" / Int64ul,
        "protocol_fee_basis_points" / Int64ul,
        "protocol_fee" / Int64ul,
        "quote_amount_in_with_lp_fee" / Int64ul,
        "user_quote_amount_in" / Int64ul,
        "pool" / PublicKey,
        "user" / PublicKey,
        "user_base_token_account" / PublicKey,
        "user_quote_token_account" / PublicKey,
        "protocol_fee_recipient" / PublicKey,
        "protocol_fee_recipient_token_account" / PublicKey,
        "coin_creator" / PublicKey,
        "coin_creator_fee_basis_points" / Int64ul,
        "coin_creator_fee" / Int64ul,
        "track_volume" / Bool,
        "total_unclaimed_tokens" / Int64ul,
        "total_claimed_tokens" / Int64ul,
        "current_sol_volume" / Int64ul,
        "last_update_timestamp" / Int64sl,
    )

    timestamp: int
    base_amount_out: int
    max_quote_amount_in: int
    user_base_token_reserves: int
    user_quote_token_reserves: int
    pool_base_token_reserves: int
    pool_quote_token_reserves: int
    quote_amount_in: int
    lp_fee_basis_points: int
    lp_fee: int
    protocol_fee_basis_points: int
    protocol_fee: int
    quote_amount_in_with_lp_fee: int
    user_quote_amount_in: int
    pool: Pubkey
    user: Pubkey
    user_base_token_account: Pubkey
    user_quote_token_account: Pubkey
    protocol_fee_recipient: Pubkey
    protocol_fee_recipient_token_account: Pubkey
    coin_creator: Pubkey
    coin_creator_fee_basis_points: int
    coin_creator_fee: int
    track_volume: bool
    total_unclaimed_tokens: int
    total_claimed_tokens: int
    current_sol_volume: int
    last_update_timestamp: int


@dataclass(frozen=True)
class PumpAmmSellEvent(EventRecord):
    DISCRIMINATOR: ClassVar[bytes] = EVENT_IX_TAG + bytes.fromhex("3e2f370aa503dc2a")
    LAYOUT: ClassVar[Struct] = Struct(
        "timestamp" / Int64sl,
        "base_amount_in" / Int64ul,
        "min_quote_amount_out" / Int64ul,
        "user_base_token_reserves" / Int64ul,
        "user_quote_token_reserves" / Int64ul,
        "pool_base_token_reserves" / Int64ul,
        "pool_quote_token_reserves" / Int64ul,
        "quote_amount_out" / Int64ul,
        "lp_fee_basis_points" / Int64ul,
        "lp_fee" / Int64ul,
        "protocol_fee_basis_points" / Int64ul,
        "protocol_fee" / Int64ul,
        "quote_amount_out_without_lp_fee" / Int64ul,
        "user_quote_amount_out" / Int64ul,
        "pool" / PublicKey,
        "user" / PublicKey,
        "user_base_token_account" / PublicKey,
        "user_quote_token_account" / PublicKey,
        "protocol_fee_recipient" / PublicKey,
        "protocol_fee_recipient_token_account" / PublicKey,
    )

    timestamp: int
    base_amount_in: int
    min_quote_amount_out: int
    user_base_token_reserves: int
    user_quote_token_reserves: int
    pool_base_token_reserves: int
    pool_quote_token_reserves: int
    quote_amount_out: int
    lp_fee_basis_points: int
    lp_fee: int
    protocol_fee_basis_points: int
    protocol_fee: int
    quote_amount_out_without_lp_fee: int
    user_quote_amount_out: int
    pool: Pubkey
    user: Pubkey
    user_base_token_account: Pubkey
    user_quote_token_account: Pubkey
    protocol_fee_recipient: Pubkey
    protocol_fee_recipient_token_account: Pubkey


# Meteora DAMM v2 and the dynamic bonding curve both name their event EvtSwap,
# so the discriminators collide and the emitting program picks the layout.
METEORA_EVT_SWAP = EVENT_IX_TAG + bytes.fromhex("1b3c15d58aaabb93")


@dataclass(frozen=True)
class DammV2SwapEvent(EventRecord):
    DISCRIMINATOR: ClassVar[bytes] = METEORA_EVT_SWAP
    LAYOUT: ClassVar[Struct] = Struct(
        "pool" / PublicKey,
        "trade_direction" / Int8ul,
        "has_referral" / Bool,
        "amount_in" / Int64ul,
        "minimum_amount_out" / Int64ul,
        "output_amount" / Int64ul,
        "next_sqrt_price" / U128,
        "lp_fee" / Int64ul,
        "protocol_fee" / Int64ul,
        "partner_fee" / Int64ul,
        "referral_fee" / Int64ul,
        "actual_amount_in" / Int64ul,
        "current_timestamp" / Int64ul,
    )

    pool: Pubkey
    trade_direction: int
    has_referral: bool
    amount_in: int
    minimum_amount_out: int
    output_amount: int
    next_sqrt_price: int
    lp_fee: int
    protocol_fee: int
    partner_fee: int
    referral_fee: int
    actual_amount_in: int
    current_timestamp: int


@dataclass(frozen=True)
class DbcSwapEvent(EventRecord):
    DISCRIMINATOR: ClassVar[bytes] = METEORA_EVT_SWAP
    LAYOUT: ClassVar[Struct] = Struct(
        "pool" / PublicKey,
        "config" / PublicKey,
        "trade_direction" / Int8ul,
        "has_referral" / Bool,
        "amount_in" / Int64ul,
        "minimum_amount_out" / Int64ul,
        "actual_input_amount" / Int64ul,
        "output_amount" / Int64ul,
        "next_sqrt_price" / U128,
        "trading_fee" / Int64ul,
        "protocol_fee" / Int64ul,
        "referral_fee" / Int64ul,
        "swap_amount_in" / Int64ul,
        "current_timestamp" / Int64ul,
    )

    pool: Pubkey
    config: Pubkey
    trade_direction: int
    has_referral: bool
    amount_in: int
    minimum_amount_out: int
    actual_input_amount: int
    output_amount: int
    next_sqrt_price: int
    trading_fee: int
    protocol_fee: int
    referral_fee: int
    swap_amount_in: int
    current_timestamp: int


@dataclass(frozen=True)
class JupiterSwapEvent(EventRecord):
    DISCRIMINATOR: ClassVar[bytes] = EVENT_IX_TAG + bytes.fromhex("40c6cde8260871e2")
    LAYOUT: ClassVar[Struct] = Struct(
        "amm" / PublicKey,
        "input_mint" / PublicKey,
        "input_amount" / Int64ul,
        "output_mint" / PublicKey,
        "output_amount" / Int64ul,
    )

    amm: Pubkey
    input_mint: Pubkey
    input_amount: int
    output_mint: Pubkey
    output_amount: int


@dataclass(frozen=True)
class RaydiumInitLiquidity:
    """Arguments of the Raydium v4 ``initialize2`` instruction (opcode 1)."""

    LAYOUT: ClassVar[Struct] = Struct(
        "nonce" / Int8ul,
        "open_time" / Int64ul,
        "init_pc_amount" / Int64ul,
        "init_coin_amount" / Int64ul,
    )

    nonce: int
    open_time: int
    init_pc_amount: int
    init_coin_amount: int

    @classmethod
    def decode(cls, data: bytes) -> "RaydiumInitLiquidity":
        return cls(**parse_struct(cls.LAYOUT, data, 1))


def decode_event(data: bytes, candidates: Sequence[Type[EventRecord]]) -> Optional[EventRecord]:
    """Decode the first candidate whose discriminator prefixes ``data``."""
    for candidate in candidates:
        if candidate.matches(data):
            return candidate.decode(data)
    return None
