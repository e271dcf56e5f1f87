"""Shared plumbing for protocol decoders."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, FrozenSet, Iterable, List, Optional, Sequence

from solders.pubkey import Pubkey

from .context import InstructionSite
from .errors import AccountIndexError, PayloadError, ReconciliationError
from .models import PayloadKind, SwapData, SwapLeg, SwapSource
from .pool_layouts import layout_for
from .reconcile import set_tx_pool_info
from .transfers import (
    AnyTransfer,
    decode_checked_transfer,
    decode_transfer,
    is_checked_transfer,
    is_transfer,
)

if TYPE_CHECKING:
    from .parser import SwapParser

LOG = logging.getLogger(__name__)


class ProtocolDecoder:
    """Turns one instruction of a known program into swap payloads."""

    source: SwapSource
    family: str = ""
    program_ids: FrozenSet[Pubkey] = frozenset()
    # tier-one decoders that own the whole transaction once they match
    exclusive: bool = False

    def handles(self, program_id: Pubkey) -> bool:
        return program_id in self.program_ids

    def decode(self, parser: "SwapParser", site: InstructionSite, router: Optional[Pubkey]) -> List[SwapData]:
        raise NotImplementedError

    def new_leg(self, parser: "SwapParser", site: InstructionSite, router: Optional[Pubkey]) -> SwapLeg:
        return SwapLeg(
            amm=parser.context.program_id(site.instruction),
            router=router,
            owner=parser.context.owner,
            index=site.ordering_index,
            protocol=self.source.value,
        )


def collect_transfers(
    parser: "SwapParser",
    sites: Iterable[InstructionSite],
    source: SwapSource,
    limit: Optional[int] = None,
) -> List[SwapData]:
    context = parser.context
    swaps: List[SwapData] = []
    for site in sites:
        instruction = site.instruction
        try:
            if is_checked_transfer(context, instruction):
                swaps.append(SwapData.checked_transfer(source, decode_checked_transfer(context, instruction)))
            elif is_transfer(context, instruction):
                swaps.append(SwapData.transfer(source, decode_transfer(context, instruction)))
        except (PayloadError, AccountIndexError) as exc:
            LOG.warning("skipping malformed token transfer at %d: %s", site.ordering_index, exc)
        if limit is not None and len(swaps) >= limit:
            break
    return swaps


def transfer_payloads(swaps: Sequence[SwapData]) -> List[AnyTransfer]:
    return [
        swap.payload  # type: ignore[misc]
        for swap in swaps
        if swap.kind in (PayloadKind.TRANSFER, PayloadKind.CHECKED_TRANSFER)
    ]


def fill_from_transfers(leg: SwapLeg, transfers: Sequence[AnyTransfer]) -> SwapLeg:
    """First transfer is the input; the last one in another mint is the output.

    Later transfers in the input mint replace the input amount, matching
    pools that move the fee and the trade in separate transfers.
    """
    known = [transfer for transfer in transfers if transfer.mint is not None]
    if not known:
        return leg
    first = known[0]
    leg.input_mint = first.mint
    leg.input_amount = first.amount
    leg.input_decimals = first.decimals
    for transfer in known[1:]:
        if transfer.mint == leg.input_mint:
            leg.input_amount = transfer.amount
            continue
        leg.output_mint = transfer.mint
        leg.output_amount = transfer.amount
        leg.output_decimals = transfer.decimals
    return leg


def reconcile_leg(
    parser: "SwapParser",
    site: InstructionSite,
    leg: SwapLeg,
    source: SwapSource,
) -> Optional[SwapData]:
    """Run the balance fallback; a leg that fails it is dropped."""
    if not leg.is_resolved:
        LOG.debug("leg at %d has no distinct input/output mints", site.ordering_index)
        return None
    program_id = parser.context.program_id(site.instruction)
    try:
        set_tx_pool_info(parser.context, program_id, leg, site.instruction)
    except ReconciliationError as exc:
        LOG.debug("dropping leg at %d: %s", site.ordering_index, exc)
        return None
    return SwapData.leg(source, leg)


class TransferSwapDecoder(ProtocolDecoder):
    """AMMs whose trade is visible only as the token transfers they invoke."""

    transfer_limit: Optional[int] = None

    def decode(self, parser: "SwapParser", site: InstructionSite, router: Optional[Pubkey]) -> List[SwapData]:
        nested = parser.context.beneath(site, parser.is_boundary)
        swaps = collect_transfers(parser, nested, self.source, limit=self.transfer_limit)
        program_id = parser.context.program_id(site.instruction)
        if layout_for(program_id) is None:
            return swaps
        leg = fill_from_transfers(self.new_leg(parser, site, router), transfer_payloads(swaps))
        self.prepare_leg(parser, site, leg)
        resolved = reconcile_leg(parser, site, leg, self.source)
        if resolved is not None:
            swaps.append(resolved)
        return swaps

    def prepare_leg(self, parser: "SwapParser", site: InstructionSite, leg: SwapLeg) -> None:
        """Hook for protocol specific fixups before reconciliation."""
