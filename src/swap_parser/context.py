"""Per-transaction lookup tables shared by every protocol decoder."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from solders.pubkey import Pubkey

from .constants import NATIVE_SOL_DECIMALS, NATIVE_SOL_MINT, TOKEN_PROGRAM_IDS
from .errors import AccountIndexError
from .transaction import CompiledInstruction, TokenBalance, Transaction
from .transfers import TRANSFER_CHECKED_OPCODE, TRANSFER_OPCODE

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenInfo:
    mint: Pubkey
    decimals: int


@dataclass(frozen=True)
class InstructionSite:
    """Where an instruction sits in the tree: an outer position plus an optional inner position."""

    outer_index: int
    instruction: CompiledInstruction
    inner_index: Optional[int] = None

    @property
    def is_inner(self) -> bool:
        return self.inner_index is not None

    @property
    def ordering_index(self) -> int:
        return self.outer_index * 256 + (self.inner_index or 0)


class TransactionContext:
    def __init__(self, transaction: Transaction) -> None:
        self.transaction = transaction
        meta = transaction.meta
        keys: List[Pubkey] = list(transaction.message.account_keys)
        if meta is not None:
            keys.extend(meta.loaded_addresses.writable)
            keys.extend(meta.loaded_addresses.readonly)
        self.account_keys: Tuple[Pubkey, ...] = tuple(keys)
        self._inner: Dict[int, Tuple[CompiledInstruction, ...]] = {}
        if meta is not None:
            for group in meta.inner_instructions:
                self._inner[group.index] = group.instructions
        self.post_balances: Dict[int, TokenBalance] = self._collect_post_balances()
        self.decimals_by_mint: Dict[Pubkey, int] = self._collect_decimals()
        self.token_info: Dict[int, TokenInfo] = self._collect_token_info()

    @property
    def signers(self) -> Tuple[Pubkey, ...]:
        return self.transaction.message.signers

    @property
    def owner(self) -> Optional[Pubkey]:
        signers = self.signers
        return signers[-1] if signers else None

    def key(self, index: int) -> Pubkey:
        if index < 0 or index >= len(self.account_keys):
            raise AccountIndexError(index, len(self.account_keys))
        return self.account_keys[index]

    def account_index(self, instruction: CompiledInstruction, position: int) -> int:
        """Resolve an instruction-relative account position to a table index."""
        if position < 0 or position >= len(instruction.accounts):
            raise AccountIndexError(position, len(instruction.accounts))
        return instruction.accounts[position]

    def account(self, instruction: CompiledInstruction, position: int) -> Pubkey:
        return self.key(self.account_index(instruction, position))

    def program_id(self, instruction: CompiledInstruction) -> Pubkey:
        return self.key(instruction.program_id_index)

    def try_program_id(self, instruction: CompiledInstruction) -> Optional[Pubkey]:
        """``program_id`` for scans that skip instructions with a bad program index."""
        try:
            return self.program_id(instruction)
        except AccountIndexError:
            return None

    def has_account(self, key: Pubkey) -> bool:
        return key in self.account_keys

    def token_info_for(self, index: int) -> Optional[TokenInfo]:
        return self.token_info.get(index)

    def decimals_of(self, mint: Optional[Pubkey], default: int = 0) -> int:
        if mint is None:
            return default
        return self.decimals_by_mint.get(mint, default)

    @property
    def outer_instructions(self) -> Tuple[CompiledInstruction, ...]:
        return self.transaction.message.instructions

    def inner_instructions(self, outer_index: int) -> Tuple[CompiledInstruction, ...]:
        return self._inner.get(outer_index, ())

    def inner_sites(self, outer_index: int) -> Iterator[InstructionSite]:
        for position, instruction in enumerate(self.inner_instructions(outer_index)):
            yield InstructionSite(outer_index=outer_index, instruction=instruction, inner_index=position)

    def beneath(
        self,
        site: InstructionSite,
        is_boundary: Optional[Callable[[CompiledInstruction], bool]] = None,
    ) -> List[InstructionSite]:
        """Instructions invoked, directly or not, by the instruction at ``site``.

        An outer instruction owns its whole inner group. For an inner
        instruction the following siblings are taken while their stack height
        is deeper; payloads without stack heights fall back to stopping at the
        first sibling ``is_boundary`` accepts.
        """
        sites = list(self.inner_sites(site.outer_index))
        if not site.is_inner:
            return sites
        following = sites[site.inner_index + 1:]
        height = site.instruction.stack_height
        nested: List[InstructionSite] = []
        for candidate in following:
            candidate_height = candidate.instruction.stack_height
            if height is not None and candidate_height is not None:
                if candidate_height <= height:
                    break
            elif is_boundary is not None and is_boundary(candidate.instruction):
                break
            nested.append(candidate)
        return nested

    def _all_instructions(self) -> Iterable[CompiledInstruction]:
        yield from self.outer_instructions
        for group in self._inner.values():
            yield from group

    def _collect_post_balances(self) -> Dict[int, TokenBalance]:
        meta = self.transaction.meta
        if meta is None:
            return {}
        return {balance.account_index: balance for balance in meta.post_token_balances}

    def _collect_decimals(self) -> Dict[Pubkey, int]:
        decimals: Dict[Pubkey, int] = {NATIVE_SOL_MINT: NATIVE_SOL_DECIMALS}
        meta = self.transaction.meta
        if meta is None:
            return decimals
        for balance in meta.pre_token_balances + meta.post_token_balances:
            decimals.setdefault(balance.mint, balance.ui_token_amount.decimals)
        return decimals

    def _collect_token_info(self) -> Dict[int, TokenInfo]:
        info: Dict[int, TokenInfo] = {}
        for index, balance in self.post_balances.items():
            if balance.mint != Pubkey.default():
                info[index] = TokenInfo(mint=balance.mint, decimals=balance.ui_token_amount.decimals)

        placeholders: Dict[int, Optional[TokenInfo]] = {}
        for instruction in self._all_instructions():
            for index, inferred in self._transfer_accounts(instruction):
                if index in info:
                    continue
                if placeholders.get(index) is None:
                    placeholders[index] = inferred

        native = TokenInfo(mint=NATIVE_SOL_MINT, decimals=NATIVE_SOL_DECIMALS)
        for index, inferred in placeholders.items():
            info[index] = inferred or native
        if placeholders:
            LOG.debug("inferred token info for %d transfer accounts", len(placeholders))
        return info

    def _transfer_accounts(self, instruction: CompiledInstruction) -> List[Tuple[int, Optional[TokenInfo]]]:
        data = instruction.data
        if not data or data[0] not in (TRANSFER_OPCODE, TRANSFER_CHECKED_OPCODE):
            return []
        try:
            program = self.program_id(instruction)
        except AccountIndexError:
            return []
        if program not in TOKEN_PROGRAM_IDS:
            return []
        accounts = instruction.accounts
        if data[0] == TRANSFER_OPCODE:
            if len(accounts) < 3:
                return []
            return [(accounts[0], None), (accounts[1], None)]
        if len(accounts) < 4 or len(data) < 10 or accounts[1] >= len(self.account_keys):
            return []
        # checked transfers name their mint and decimals explicitly
        inferred = TokenInfo(mint=self.account_keys[accounts[1]], decimals=data[9])
        return [(accounts[0], inferred), (accounts[2], inferred)]
