"""Two-phase instruction router for one transaction."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Set, Tuple

from solders.pubkey import Pubkey

from .aggregator import SwapAggregator
from .base import ProtocolDecoder
from .context import InstructionSite, TransactionContext
from .discriminators import is_event_instruction
from .errors import AccountIndexError, SwapParserError
from .models import PayloadKind, SwapData, SwapLeg, SwapSummary
from .registry import DecoderRegistry, default_registry
from .transaction import CompiledInstruction, Transaction

LOG = logging.getLogger(__name__)


class SwapParser:
    """Holds one transaction's lookup state; build a fresh instance per transaction."""

    def __init__(self, transaction: Transaction, registry: Optional[DecoderRegistry] = None) -> None:
        self.transaction = transaction
        self.context = TransactionContext(transaction)
        self.registry = registry or default_registry()

    @classmethod
    def from_rpc(cls, payload: Mapping[str, Any], registry: Optional[DecoderRegistry] = None) -> "SwapParser":
        return cls(Transaction.from_rpc(payload), registry=registry)

    def parse_transaction(self) -> List[SwapData]:
        swaps: List[SwapData] = []
        exclusive = False
        outer = self.context.outer_instructions

        for index, instruction in enumerate(outer):
            program_id = self._program_id(instruction)
            decoder = self.registry.aggregator(program_id) if program_id else None
            if decoder is None:
                continue
            exclusive = exclusive or decoder.exclusive
            site = InstructionSite(outer_index=index, instruction=instruction)
            swaps.extend(self._invoke(decoder, site, router=program_id))
        if exclusive:
            return swaps

        for index, instruction in enumerate(outer):
            program_id = self._program_id(instruction)
            decoder = self.registry.amm(program_id) if program_id else None
            if decoder is None:
                continue
            site = InstructionSite(outer_index=index, instruction=instruction)
            swaps.extend(self._invoke(decoder, site, router=None))
        return swaps

    def process_swap_data(self, swaps: List[SwapData]) -> Tuple[SwapSummary, Optional[SwapLeg]]:
        summary = SwapAggregator(self.context).aggregate(swaps)
        legs = [swap.payload for swap in swaps if swap.kind is PayloadKind.LEG]
        leg = legs[0] if len(legs) == 1 else None
        return summary, leg  # type: ignore[return-value]

    def parse(self) -> Tuple[List[SwapData], SwapSummary]:
        swaps = self.parse_transaction()
        summary, _ = self.process_swap_data(swaps)
        return swaps, summary

    def is_boundary(self, instruction: CompiledInstruction) -> bool:
        """True for an instruction that starts another AMM hop rather than logging one."""
        program_id = self._program_id(instruction)
        if program_id is None or self.registry.amm(program_id) is None:
            return False
        return not is_event_instruction(instruction.data)

    def dispatch_nested(self, site: InstructionSite, router: Optional[Pubkey], once_per_family: bool) -> List[SwapData]:
        """Decode the AMM instructions a router or relay invoked beneath ``site``."""
        swaps: List[SwapData] = []
        seen_families: Set[str] = set()
        claimed: Set[int] = set()
        for nested in self.context.beneath(site, self.is_boundary):
            if nested.inner_index in claimed or is_event_instruction(nested.instruction.data):
                continue
            program_id = self._program_id(nested.instruction)
            decoder = self.registry.amm(program_id) if program_id else None
            if decoder is None:
                continue
            if once_per_family and decoder.family in seen_families:
                continue
            seen_families.add(decoder.family)
            # a hop's own CPIs belong to it, not to the router
            claimed.update(inner.inner_index for inner in self.context.beneath(nested, self.is_boundary))
            swaps.extend(self._invoke(decoder, nested, router=router))
        return swaps

    def _program_id(self, instruction: CompiledInstruction) -> Optional[Pubkey]:
        try:
            return self.context.program_id(instruction)
        except AccountIndexError as exc:
            LOG.warning("skipping instruction with unresolvable program: %s", exc)
            return None

    def _invoke(self, decoder: ProtocolDecoder, site: InstructionSite, router: Optional[Pubkey]) -> List[SwapData]:
        try:
            return decoder.decode(self, site, router)
        except SwapParserError as exc:
            LOG.warning("%s decoder skipped instruction %d: %s", decoder.family, site.ordering_index, exc)
            return []
