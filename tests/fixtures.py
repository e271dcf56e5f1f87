"""Builders for synthetic ``getTransaction`` payloads."""

import struct
from typing import Any, Dict, List, Optional, Sequence, Tuple

import base58
from solders.pubkey import Pubkey
from solders.signature import Signature

from swap_parser.constants import (
    METEORA_DAMM_V2_PROGRAM_ID,
    PUMPFUN_PROGRAM_ID,
    RAYDIUM_V4_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from swap_parser.discriminators import BUY, SELL, SWAP
from swap_parser.events import (
    DammV2SwapEvent,
    DbcSwapEvent,
    JupiterSwapEvent,
    PumpAmmBuyEvent,
    PumpAmmSellEvent,
    PumpfunTradeEvent,
)

BLOCK_TIME = 1_700_000_000


def pack(*fields: Tuple[str, Any]) -> bytes:
    out = b""
    for kind, value in fields:
        if kind == "u8":
            out += struct.pack("<B", value)
        elif kind == "bool":
            out += b"\x01" if value else b"\x00"
        elif kind == "u64":
            out += struct.pack("<Q", value)
        elif kind == "i64":
            out += struct.pack("<q", value)
        elif kind == "u128":
            out += value.to_bytes(16, "little")
        elif kind == "pubkey":
            out += bytes(value)
        else:
            raise ValueError(kind)
    return out


def transfer_data(amount: int) -> bytes:
    return bytes([3]) + struct.pack("<Q", amount)


def checked_transfer_data(amount: int, decimals: int) -> bytes:
    return bytes([12]) + struct.pack("<Q", amount) + bytes([decimals])


class TxBuilder:
    def __init__(self) -> None:
        self.keys: List[Pubkey] = []
        self.payer = Pubkey.new_unique()
        self.key(self.payer)
        self.instructions: List[Dict[str, Any]] = []
        self.inner: Dict[int, List[Dict[str, Any]]] = {}
        self.pre_balances: List[Dict[str, Any]] = []
        self.post_balances: List[Dict[str, Any]] = []
        self.loaded_writable: List[Pubkey] = []
        self.loaded_readonly: List[Pubkey] = []
        self.block_time: Optional[int] = BLOCK_TIME
        self.signature = Signature.new_unique()
        self.with_meta = True

    def key(self, pubkey: Pubkey) -> int:
        if pubkey not in self.keys:
            self.keys.append(pubkey)
        return self.keys.index(pubkey)

    def accounts(self, count: int) -> List[Pubkey]:
        return [Pubkey.new_unique() for _ in range(count)]

    def _compile(
        self, program: Pubkey, accounts: Sequence[Pubkey], data: bytes, stack_height: Optional[int]
    ) -> Dict[str, Any]:
        compiled: Dict[str, Any] = {
            "programIdIndex": self.key(program),
            "accounts": [self.key(account) for account in accounts],
            "data": base58.b58encode(data).decode("ascii"),
        }
        if stack_height is not None:
            compiled["stackHeight"] = stack_height
        return compiled

    def outer(self, program: Pubkey, accounts: Sequence[Pubkey], data: bytes) -> int:
        self.instructions.append(self._compile(program, accounts, data, 1))
        return len(self.instructions) - 1

    def inner_ix(
        self,
        outer_index: int,
        program: Pubkey,
        accounts: Sequence[Pubkey],
        data: bytes,
        stack_height: Optional[int] = 2,
    ) -> None:
        self.inner.setdefault(outer_index, []).append(self._compile(program, accounts, data, stack_height))

    def transfer(
        self,
        outer_index: int,
        source: Pubkey,
        destination: Pubkey,
        authority: Pubkey,
        amount: int,
        stack_height: Optional[int] = 2,
    ) -> None:
        self.inner_ix(outer_index, TOKEN_PROGRAM_ID, [source, destination, authority], transfer_data(amount), stack_height)

    def checked_transfer(
        self,
        outer_index: int,
        source: Pubkey,
        mint: Pubkey,
        destination: Pubkey,
        authority: Pubkey,
        amount: int,
        decimals: int,
        stack_height: Optional[int] = 2,
    ) -> None:
        self.inner_ix(
            outer_index,
            TOKEN_PROGRAM_ID,
            [source, mint, destination, authority],
            checked_transfer_data(amount, decimals),
            stack_height,
        )

    def balance(self, account: Pubkey, mint: Pubkey, amount: int, decimals: int, pre: bool = False) -> None:
        entry = {
            "accountIndex": self.key(account),
            "mint": str(mint),
            "owner": str(self.payer),
            "uiTokenAmount": {
                "amount": str(amount),
                "decimals": decimals,
                "uiAmountString": str(amount / 10 ** decimals),
            },
        }
        (self.pre_balances if pre else self.post_balances).append(entry)

    def build(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "slot": 250_000_000,
            "blockTime": self.block_time,
            "transaction": {
                "signatures": [str(self.signature)],
                "message": {
                    "accountKeys": [str(key) for key in self.keys],
                    "header": {
                        "numRequiredSignatures": 1,
                        "numReadonlySignedAccounts": 0,
                        "numReadonlyUnsignedAccounts": 0,
                    },
                    "instructions": self.instructions,
                },
            },
            "meta": None,
        }
        if self.with_meta:
            payload["meta"] = {
                "err": None,
                "innerInstructions": [
                    {"index": index, "instructions": instructions}
                    for index, instructions in sorted(self.inner.items())
                ],
                "preTokenBalances": self.pre_balances,
                "postTokenBalances": self.post_balances,
                "loadedAddresses": {
                    "writable": [str(key) for key in self.loaded_writable],
                    "readonly": [str(key) for key in self.loaded_readonly],
                },
                "logMessages": [],
            }
        return payload


def trade_event_data(
    mint: Pubkey,
    sol_amount: int,
    token_amount: int,
    is_buy: bool,
    user: Pubkey,
    timestamp: int = BLOCK_TIME + 5,
) -> bytes:
    return PumpfunTradeEvent.DISCRIMINATOR + pack(
        ("pubkey", mint),
        ("u64", sol_amount),
        ("u64", token_amount),
        ("bool", is_buy),
        ("pubkey", user),
        ("i64", timestamp),
        ("u64", 30_000_000_000),
        ("u64", 1_000_000_000_000_000),
    )


def jupiter_event_data(amm: Pubkey, input_mint: Pubkey, input_amount: int, output_mint: Pubkey, output_amount: int) -> bytes:
    return JupiterSwapEvent.DISCRIMINATOR + pack(
        ("pubkey", amm),
        ("pubkey", input_mint),
        ("u64", input_amount),
        ("pubkey", output_mint),
        ("u64", output_amount),
    )


def pump_amm_buy_event_data(base_amount_out: int, quote_amount_in_with_lp_fee: int, pool: Pubkey, user: Pubkey) -> bytes:
    return PumpAmmBuyEvent.DISCRIMINATOR + pack(
        ("i64", BLOCK_TIME),
        ("u64", base_amount_out),
        ("u64", quote_amount_in_with_lp_fee * 2),
        ("u64", 0),
        ("u64", 0),
        ("u64", 800_000_000_000),
        ("u64", 90_000_000_000),
        ("u64", quote_amount_in_with_lp_fee - 100),
        ("u64", 20),
        ("u64", 100),
        ("u64", 5),
        ("u64", 25),
        ("u64", quote_amount_in_with_lp_fee),
        ("u64", quote_amount_in_with_lp_fee + 25),
        ("pubkey", pool),
        ("pubkey", user),
        ("pubkey", Pubkey.new_unique()),
        ("pubkey", Pubkey.new_unique()),
        ("pubkey", Pubkey.new_unique()),
        ("pubkey", Pubkey.new_unique()),
        ("pubkey", Pubkey.new_unique()),
        ("u64", 0),
        ("u64", 0),
        ("bool", False),
        ("u64", 0),
        ("u64", 0),
        ("u64", 0),
        ("i64", BLOCK_TIME),
    )


def pump_amm_sell_event_data(base_amount_in: int, user_quote_amount_out: int, pool: Pubkey, user: Pubkey) -> bytes:
    return PumpAmmSellEvent.DISCRIMINATOR + pack(
        ("i64", BLOCK_TIME),
        ("u64", base_amount_in),
        ("u64", user_quote_amount_out // 2),
        ("u64", base_amount_in),
        ("u64", 0),
        ("u64", 800_000_000_000),
        ("u64", 90_000_000_000),
        ("u64", user_quote_amount_out + 125),
        ("u64", 20),
        ("u64", 100),
        ("u64", 5),
        ("u64", 25),
        ("u64", user_quote_amount_out + 25),
        ("u64", user_quote_amount_out),
        ("pubkey", pool),
        ("pubkey", user),
        ("pubkey", Pubkey.new_unique()),
        ("pubkey", Pubkey.new_unique()),
        ("pubkey", Pubkey.new_unique()),
        ("pubkey", Pubkey.new_unique()),
    )


def damm_v2_event_data(pool: Pubkey, trade_direction: int, amount_in: int, output_amount: int) -> bytes:
    return DammV2SwapEvent.DISCRIMINATOR + pack(
        ("pubkey", pool),
        ("u8", trade_direction),
        ("bool", False),
        ("u64", amount_in),
        ("u64", 1),
        ("u64", output_amount),
        ("u128", 2 ** 64),
        ("u64", 30),
        ("u64", 10),
        ("u64", 0),
        ("u64", 0),
        ("u64", amount_in),
        ("u64", BLOCK_TIME),
    )


def dbc_event_data(pool: Pubkey, trade_direction: int, amount_in: int, actual_input_amount: int, output_amount: int) -> bytes:
    return DbcSwapEvent.DISCRIMINATOR + pack(
        ("pubkey", pool),
        ("pubkey", Pubkey.new_unique()),
        ("u8", trade_direction),
        ("bool", False),
        ("u64", amount_in),
        ("u64", 1),
        ("u64", actual_input_amount),
        ("u64", output_amount),
        ("u128", 2 ** 70),
        ("u64", amount_in - actual_input_amount),
        ("u64", 0),
        ("u64", 0),
        ("u64", actual_input_amount),
        ("u64", BLOCK_TIME),
    )


def add_damm_v2_swap(
    builder: TxBuilder,
    mint_in: Pubkey,
    mint_out: Pubkey,
    amount_in: int,
    amount_out: int,
) -> List[Pubkey]:
    """An outer DAMM v2 swap reported only through its EvtSwap log."""
    accounts = builder.accounts(14)
    pool, vault_a, vault_b = accounts[1], accounts[4], accounts[5]
    accounts[6], accounts[7] = mint_in, mint_out
    builder.balance(vault_a, mint_in, 10_000_000, 9)
    builder.balance(vault_b, mint_out, 20_000_000, 6)
    outer = builder.outer(METEORA_DAMM_V2_PROGRAM_ID, accounts, SWAP + pack(("u64", amount_in), ("u64", 1)))
    builder.inner_ix(outer, METEORA_DAMM_V2_PROGRAM_ID, [accounts[12]], damm_v2_event_data(pool, 0, amount_in, amount_out))
    return accounts


def add_raydium_v4_swap(
    builder: TxBuilder,
    mint_in: Pubkey,
    mint_out: Pubkey,
    amount_in: int,
    amount_out: int,
    parent: Optional[int] = None,
    height: int = 2,
) -> List[Pubkey]:
    """A 17-account swap (opcode 9) with coin/pc vaults at positions 4 and 5."""
    accounts = builder.accounts(17)
    accounts[0] = TOKEN_PROGRAM_ID
    accounts[16] = builder.payer
    authority, coin_vault, pc_vault = accounts[2], accounts[4], accounts[5]
    user_source, user_destination = accounts[14], accounts[15]
    builder.balance(coin_vault, mint_in, 50_000_000, 6)
    builder.balance(pc_vault, mint_out, 70_000_000, 9)
    builder.balance(user_source, mint_in, 0, 6)
    builder.balance(user_destination, mint_out, amount_out, 9)
    data = pack(("u8", 9), ("u64", amount_in), ("u64", 1))
    if parent is None:
        group = builder.outer(RAYDIUM_V4_PROGRAM_ID, accounts, data)
        transfer_height = 2
    else:
        builder.inner_ix(parent, RAYDIUM_V4_PROGRAM_ID, accounts, data, stack_height=height)
        group = parent
        transfer_height = height + 1
    builder.transfer(group, user_source, coin_vault, builder.payer, amount_in, transfer_height)
    builder.transfer(group, pc_vault, user_destination, authority, amount_out, transfer_height)
    return accounts


def add_pumpfun_trade(
    builder: TxBuilder,
    mint: Pubkey,
    sol_amount: int,
    token_amount: int,
    is_buy: bool = True,
    parent: Optional[int] = None,
    height: int = 2,
) -> List[Pubkey]:
    accounts = builder.accounts(12)
    accounts[2] = mint
    accounts[6] = builder.payer
    accounts[11] = PUMPFUN_PROGRAM_ID
    event_authority = accounts[10]
    opcode = BUY if is_buy else SELL
    data = opcode + pack(("u64", token_amount), ("u64", sol_amount))
    if parent is None:
        group = builder.outer(PUMPFUN_PROGRAM_ID, accounts, data)
        event_height = 2
    else:
        builder.inner_ix(parent, PUMPFUN_PROGRAM_ID, accounts, data, stack_height=height)
        group = parent
        event_height = height + 1
    builder.inner_ix(
        group,
        PUMPFUN_PROGRAM_ID,
        [event_authority],
        trade_event_data(mint, sol_amount, token_amount, is_buy, builder.payer),
        stack_height=event_height,
    )
    return accounts
