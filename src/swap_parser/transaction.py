"""Typed view over a ``getTransaction`` JSON result (``encoding=json``)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import base58
from solders.pubkey import Pubkey
from solders.signature import Signature

from .errors import TransactionFormatError


@dataclass(frozen=True)
class CompiledInstruction:
    program_id_index: int
    accounts: Tuple[int, ...]
    data: bytes
    stack_height: Optional[int] = None

    @classmethod
    def from_rpc(cls, raw: Mapping[str, Any]) -> "CompiledInstruction":
        try:
            data = base58.b58decode(raw.get("data") or "")
            return cls(
                program_id_index=int(raw["programIdIndex"]),
                accounts=tuple(int(index) for index in raw.get("accounts", [])),
                data=data,
                stack_height=raw.get("stackHeight"),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise TransactionFormatError(f"malformed instruction: {exc}") from exc


@dataclass(frozen=True)
class InnerInstructionSet:
    index: int
    instructions: Tuple[CompiledInstruction, ...]


@dataclass(frozen=True)
class UiTokenAmount:
    amount: str
    decimals: int
    ui_amount_string: str = ""

    @property
    def raw(self) -> int:
        try:
            return int(self.amount)
        except ValueError:
            return 0


@dataclass(frozen=True)
class TokenBalance:
    account_index: int
    mint: Pubkey
    ui_token_amount: UiTokenAmount
    owner: Optional[Pubkey] = None

    @classmethod
    def from_rpc(cls, raw: Mapping[str, Any]) -> "TokenBalance":
        ui = raw.get("uiTokenAmount") or {}
        owner = raw.get("owner")
        return cls(
            account_index=int(raw["accountIndex"]),
            mint=Pubkey.from_string(raw["mint"]),
            ui_token_amount=UiTokenAmount(
                amount=str(ui.get("amount", "0")),
                decimals=int(ui.get("decimals", 0)),
                ui_amount_string=str(ui.get("uiAmountString") or ""),
            ),
            owner=Pubkey.from_string(owner) if owner else None,
        )


@dataclass(frozen=True)
class LoadedAddresses:
    writable: Tuple[Pubkey, ...] = ()
    readonly: Tuple[Pubkey, ...] = ()


@dataclass(frozen=True)
class TransactionMeta:
    inner_instructions: Tuple[InnerInstructionSet, ...] = ()
    pre_token_balances: Tuple[TokenBalance, ...] = ()
    post_token_balances: Tuple[TokenBalance, ...] = ()
    loaded_addresses: LoadedAddresses = field(default_factory=LoadedAddresses)
    log_messages: Tuple[str, ...] = ()
    err: Optional[Any] = None


@dataclass(frozen=True)
class Message:
    account_keys: Tuple[Pubkey, ...]
    num_required_signatures: int
    instructions: Tuple[CompiledInstruction, ...]

    @property
    def signers(self) -> Tuple[Pubkey, ...]:
        return self.account_keys[: self.num_required_signatures]


@dataclass(frozen=True)
class Transaction:
    signatures: Tuple[Signature, ...]
    message: Message
    meta: Optional[TransactionMeta] = None
    block_time: Optional[int] = None
    slot: Optional[int] = None

    @classmethod
    def from_rpc(cls, payload: Mapping[str, Any]) -> "Transaction":
        if "result" in payload and "transaction" not in payload:
            payload = payload["result"] or {}
        body = payload.get("transaction")
        if not isinstance(body, Mapping):
            # base64/base58 encodings arrive as [data, encoding] lists
            raise TransactionFormatError("transaction must be fetched with encoding=json")
        message = body.get("message") or {}
        try:
            header = message.get("header") or {}
            parsed_message = Message(
                account_keys=tuple(_account_key(key) for key in message.get("accountKeys", [])),
                num_required_signatures=int(header.get("numRequiredSignatures", 1)),
                instructions=tuple(CompiledInstruction.from_rpc(ix) for ix in message.get("instructions", [])),
            )
            signatures = tuple(Signature.from_string(sig) for sig in body.get("signatures", []))
            meta = _parse_meta(payload.get("meta"))
        except (KeyError, TypeError, ValueError) as exc:
            raise TransactionFormatError(f"malformed transaction payload: {exc}") from exc
        return cls(
            signatures=signatures,
            message=parsed_message,
            meta=meta,
            block_time=payload.get("blockTime"),
            slot=payload.get("slot"),
        )


def _account_key(raw: Any) -> Pubkey:
    # jsonParsed payloads wrap keys as {"pubkey": ..., "signer": ...}
    if isinstance(raw, Mapping):
        raw = raw.get("pubkey")
    return Pubkey.from_string(str(raw))


def _parse_meta(raw: Optional[Mapping[str, Any]]) -> Optional[TransactionMeta]:
    if not raw:
        return None
    inner: List[InnerInstructionSet] = []
    for group in raw.get("innerInstructions") or []:
        inner.append(
            InnerInstructionSet(
                index=int(group["index"]),
                instructions=tuple(CompiledInstruction.from_rpc(ix) for ix in group.get("instructions", [])),
            )
        )
    loaded: Dict[str, Any] = raw.get("loadedAddresses") or {}
    return TransactionMeta(
        inner_instructions=tuple(inner),
        pre_token_balances=tuple(TokenBalance.from_rpc(b) for b in raw.get("preTokenBalances") or []),
        post_token_balances=tuple(TokenBalance.from_rpc(b) for b in raw.get("postTokenBalances") or []),
        loaded_addresses=LoadedAddresses(
            writable=tuple(Pubkey.from_string(key) for key in loaded.get("writable", [])),
            readonly=tuple(Pubkey.from_string(key) for key in loaded.get("readonly", [])),
        ),
        log_messages=tuple(raw.get("logMessages") or []),
        err=raw.get("err"),
    )
