"""Jupiter-style aggregators: route decoding and multi-hop event consolidation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence

from solders.pubkey import Pubkey

from . import constants as c
from .base import ProtocolDecoder
from .context import InstructionSite, TransactionContext
from .errors import NoSwapFoundError, PayloadError
from .events import JupiterSwapEvent
from .models import PayloadKind, SwapData, SwapSource

if TYPE_CHECKING:
    from .parser import SwapParser

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class JupiterSummary:
    token_in_mint: Pubkey
    token_in_amount: int
    token_in_decimals: int
    token_out_mint: Pubkey
    token_out_amount: int
    token_out_decimals: int
    amms: List[str]


class JupiterDecoder(ProtocolDecoder):
    """Collects the SwapEvent logged for every hop of an aggregated route.

    DFlow and DCA fills share the event; routes that log nothing are decoded
    hop by hop through the direct AMM decoders instead.
    """

    source = SwapSource.JUPITER
    family = "jupiter"
    program_ids = frozenset(
        {c.JUPITER_PROGRAM_ID, c.DFLOW_AGGREGATOR_V4_PROGRAM_ID, c.JUPITER_DCA_PROGRAM_ID}
    )
    exclusive = True

    def decode(self, parser: "SwapParser", site: InstructionSite, router: Optional[Pubkey]) -> List[SwapData]:
        context = parser.context
        swaps: List[SwapData] = []
        for nested in context.beneath(site, parser.is_boundary):
            instruction = nested.instruction
            if context.try_program_id(instruction) != c.JUPITER_PROGRAM_ID:
                continue
            if not JupiterSwapEvent.matches(instruction.data):
                continue
            try:
                swaps.append(SwapData.event(self.source, JupiterSwapEvent.decode(instruction.data)))
            except PayloadError as exc:
                LOG.warning("malformed Jupiter swap event at %d: %s", nested.ordering_index, exc)
        if swaps:
            return swaps
        return parser.dispatch_nested(site, router=router, once_per_family=False)


def summarize_jupiter_events(context: TransactionContext, swaps: Sequence[SwapData]) -> JupiterSummary:
    events = [
        swap.payload
        for swap in swaps
        if swap.kind is PayloadKind.EVENT and isinstance(swap.payload, JupiterSwapEvent)
    ]
    if not events:
        raise NoSwapFoundError("no Jupiter swap events found")

    input_mint = events[0].input_mint
    output_mint = events[-1].output_mint
    input_amount = sum(event.input_amount for event in events if event.input_mint == input_mint)
    output_amount = sum(event.output_amount for event in events if event.output_mint == output_mint)

    amms: List[str] = []
    for event in events:
        label = c.program_label(event.amm)
        if label not in amms:
            amms.append(label)

    return JupiterSummary(
        token_in_mint=input_mint,
        token_in_amount=input_amount,
        token_in_decimals=context.decimals_of(input_mint),
        token_out_mint=output_mint,
        token_out_amount=output_amount,
        token_out_decimals=context.decimals_of(output_mint),
        amms=amms,
    )
