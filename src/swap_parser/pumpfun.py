import logging
from typing import TYPE_CHECKING, List, Optional, Union

from solders.pubkey import Pubkey

from . import constants as c
from .base import ProtocolDecoder, reconcile_leg
from .context import InstructionSite
from .discriminators import BUY, SELL
from .errors import AccountIndexError, PayloadError
from .events import PumpAmmBuyEvent, PumpAmmSellEvent, PumpfunTradeEvent, decode_event
from .models import SwapData, SwapLeg, SwapSource

if TYPE_CHECKING:
    from .parser import SwapParser

LOG = logging.getLogger(__name__)

# Pump AMM buy/sell mint positions; pool and vaults come from the pool layout
AMM_BASE_MINT, AMM_QUOTE_MINT = 3, 4


class PumpfunDecoder(ProtocolDecoder):
    """Bonding-curve trades, reported through the program's TradeEvent log."""

    source = SwapSource.PUMPFUN
    family = "pumpfun"
    program_ids = frozenset({c.PUMPFUN_PROGRAM_ID, c.PUMPFUN_RELAY_PROGRAM_ID})

    def decode(self, parser: "SwapParser", site: InstructionSite, router: Optional[Pubkey]) -> List[SwapData]:
        context = parser.context
        swaps: List[SwapData] = []
        for nested in context.beneath(site, parser.is_boundary):
            instruction = nested.instruction
            if context.try_program_id(instruction) not in self.program_ids:
                continue
            if not PumpfunTradeEvent.matches(instruction.data):
                continue
            try:
                event = PumpfunTradeEvent.decode(instruction.data)
            except PayloadError as exc:
                LOG.warning("error processing Pumpfun trade event at %d: %s", nested.ordering_index, exc)
                continue
            swaps.append(SwapData.event(self.source, event))
        return swaps


class PumpAmmDecoder(ProtocolDecoder):
    """Pump AMM buy/sell; direction comes from the opcode, amounts from the event.

    The leg is then pinned to the pool vaults like any other AMM leg, so a
    leg whose vaults do not hold its mints is dropped.
    """

    source = SwapSource.PUMPFUN
    family = "pumpfun"
    program_ids = frozenset({c.PUMPFUN_AMM_PROGRAM_ID})

    def decode(self, parser: "SwapParser", site: InstructionSite, router: Optional[Pubkey]) -> List[SwapData]:
        opcode = bytes(site.instruction.data[:8])
        if opcode not in (BUY, SELL):
            return []
        try:
            leg = self._leg(parser, site, router, is_buy=opcode == BUY)
        except AccountIndexError as exc:
            LOG.debug("Pump AMM instruction at %d has a short account list: %s", site.ordering_index, exc)
            return []

        context = parser.context
        for nested in context.beneath(site, parser.is_boundary):
            instruction = nested.instruction
            if context.try_program_id(instruction) != c.PUMPFUN_AMM_PROGRAM_ID:
                continue
            try:
                event = decode_event(instruction.data, (PumpAmmBuyEvent, PumpAmmSellEvent))
            except PayloadError as exc:
                LOG.warning("error processing Pump AMM swap event at %d: %s", nested.ordering_index, exc)
                return []
            if event is None:
                continue
            self._apply_event(leg, event)
            # pool, vaults and reserves come from the vault post balances
            resolved = reconcile_leg(parser, site, leg, self.source)
            return [resolved] if resolved is not None else []
        LOG.debug("Pump AMM instruction at %d emitted no swap event", site.ordering_index)
        return []

    def _leg(self, parser: "SwapParser", site: InstructionSite, router: Optional[Pubkey], is_buy: bool) -> SwapLeg:
        context = parser.context
        instruction = site.instruction
        base_mint = context.account(instruction, AMM_BASE_MINT)
        quote_mint = context.account(instruction, AMM_QUOTE_MINT)
        leg = self.new_leg(parser, site, router)
        if is_buy:
            leg.input_mint, leg.output_mint = quote_mint, base_mint
        else:
            leg.input_mint, leg.output_mint = base_mint, quote_mint
        leg.input_decimals = context.decimals_of(leg.input_mint)
        leg.output_decimals = context.decimals_of(leg.output_mint)
        return leg

    @staticmethod
    def _apply_event(leg: SwapLeg, event: Union[PumpAmmBuyEvent, PumpAmmSellEvent]) -> None:
        if isinstance(event, PumpAmmBuyEvent):
            leg.input_amount = event.quote_amount_in_with_lp_fee
            leg.output_amount = event.base_amount_out
        else:
            leg.input_amount = event.base_amount_in
            leg.output_amount = event.user_quote_amount_out
