"""SPL token ``transfer`` / ``transferChecked`` decoding."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from solders.pubkey import Pubkey

from .codec import read_u64
from .constants import TOKEN_PROGRAM_IDS

if TYPE_CHECKING:
    from .context import TransactionContext
    from .transaction import CompiledInstruction

TRANSFER_OPCODE = 3
TRANSFER_CHECKED_OPCODE = 12


@dataclass(frozen=True)
class TransferRecord:
    amount: int
    source: Pubkey
    destination: Pubkey
    authority: Pubkey
    mint: Optional[Pubkey]
    decimals: int


@dataclass(frozen=True)
class CheckedTransferRecord:
    amount: int
    source: Pubkey
    mint: Pubkey
    destination: Pubkey
    authority: Pubkey
    decimals: int


AnyTransfer = Union[TransferRecord, CheckedTransferRecord]


def _is_token_instruction(context: "TransactionContext", instruction: "CompiledInstruction") -> bool:
    return instruction.program_id_index < len(context.account_keys) and (
        context.account_keys[instruction.program_id_index] in TOKEN_PROGRAM_IDS
    )


def is_transfer(context: "TransactionContext", instruction: "CompiledInstruction") -> bool:
    data = instruction.data
    return (
        _is_token_instruction(context, instruction)
        and len(data) >= 9
        and data[0] == TRANSFER_OPCODE
        and len(instruction.accounts) >= 3
    )


def is_checked_transfer(context: "TransactionContext", instruction: "CompiledInstruction") -> bool:
    data = instruction.data
    return (
        _is_token_instruction(context, instruction)
        and len(data) >= 9
        and data[0] == TRANSFER_CHECKED_OPCODE
        and len(instruction.accounts) >= 4
    )


def decode_transfer(context: "TransactionContext", instruction: "CompiledInstruction") -> TransferRecord:
    destination_index = context.account_index(instruction, 1)
    info = context.token_info_for(destination_index)
    return TransferRecord(
        amount=read_u64(instruction.data, 1),
        source=context.account(instruction, 0),
        destination=context.key(destination_index),
        authority=context.account(instruction, 2),
        mint=info.mint if info else None,
        decimals=info.decimals if info else 0,
    )


def decode_checked_transfer(context: "TransactionContext", instruction: "CompiledInstruction") -> CheckedTransferRecord:
    mint = context.account(instruction, 1)
    data = instruction.data
    decimals = data[9] if len(data) > 9 else context.decimals_of(mint)
    return CheckedTransferRecord(
        amount=read_u64(data, 1),
        source=context.account(instruction, 0),
        mint=mint,
        destination=context.account(instruction, 2),
        authority=context.account(instruction, 3),
        decimals=decimals,
    )
