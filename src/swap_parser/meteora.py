"""Meteora DLMM, legacy pools, DAMM v2 and the dynamic bonding curve."""

import logging
from typing import TYPE_CHECKING, List, Optional, Type, Union

from solders.pubkey import Pubkey

from . import constants as c
from .base import TransferSwapDecoder, collect_transfers, fill_from_transfers, reconcile_leg, transfer_payloads
from .context import InstructionSite
from .discriminators import SWAP, add_discriminators, remove_discriminators
from .errors import AccountIndexError, PayloadError
from .events import DammV2SwapEvent, DbcSwapEvent
from .models import SwapData, SwapLeg, SwapSource

if TYPE_CHECKING:
    from .parser import SwapParser

LOG = logging.getLogger(__name__)

SwapEvent = Union[DammV2SwapEvent, DbcSwapEvent]

# swap instruction account positions
DLMM_RESERVE_X, DLMM_RESERVE_Y = 5, 6
DLMM_TOKEN_X_MINT, DLMM_TOKEN_Y_MINT = 7, 8
DAMM_V2_TOKEN_A_MINT, DAMM_V2_TOKEN_B_MINT = 6, 7
DAMM_V2_EVENT_AUTHORITY = 12
DBC_BASE_MINT, DBC_QUOTE_MINT = 7, 8
DBC_EVENT_AUTHORITY = 13


class MeteoraDecoder(TransferSwapDecoder):
    source = SwapSource.METEORA
    family = "meteora"
    program_ids = frozenset(
        {
            c.METEORA_DLMM_PROGRAM_ID,
            c.METEORA_POOLS_PROGRAM_ID,
            c.METEORA_DAMM_V2_PROGRAM_ID,
            c.METEORA_DBC_PROGRAM_ID,
        }
    )

    def decode(self, parser: "SwapParser", site: InstructionSite, router: Optional[Pubkey]) -> List[SwapData]:
        program_id = parser.context.program_id(site.instruction)
        if program_id == c.METEORA_DLMM_PROGRAM_ID:
            return super().decode(parser, site, router)
        if site.instruction.data[:8] != SWAP:
            return []
        if program_id == c.METEORA_POOLS_PROGRAM_ID:
            return self._decode_pools(parser, site, router)
        if program_id == c.METEORA_DAMM_V2_PROGRAM_ID:
            return self._decode_event_swap(
                parser, site, router, DammV2SwapEvent,
                DAMM_V2_EVENT_AUTHORITY, DAMM_V2_TOKEN_A_MINT, DAMM_V2_TOKEN_B_MINT,
            )
        return self._decode_event_swap(
            parser, site, router, DbcSwapEvent,
            DBC_EVENT_AUTHORITY, DBC_BASE_MINT, DBC_QUOTE_MINT,
        )

    def prepare_leg(self, parser: "SwapParser", site: InstructionSite, leg: SwapLeg) -> None:
        # DLMM liquidity changes may move a single side; the other mint comes from the pair accounts
        opcode = bytes(site.instruction.data[:8])
        if opcode not in add_discriminators() and opcode not in remove_discriminators():
            return
        if leg.output_amount or leg.input_mint is None:
            return
        context = parser.context
        instruction = site.instruction
        try:
            mint_x = context.account(instruction, DLMM_TOKEN_X_MINT)
            if leg.input_mint == mint_x:
                leg.output_mint = context.account(instruction, DLMM_TOKEN_Y_MINT)
                reserve = context.account_index(instruction, DLMM_RESERVE_Y)
            else:
                leg.output_mint = mint_x
                reserve = context.account_index(instruction, DLMM_RESERVE_X)
        except AccountIndexError as exc:
            LOG.debug("cannot infer DLMM output mint: %s", exc)
            return
        info = context.token_info_for(reserve)
        leg.output_decimals = info.decimals if info else context.decimals_of(leg.output_mint)

    def _decode_pools(self, parser: "SwapParser", site: InstructionSite, router: Optional[Pubkey]) -> List[SwapData]:
        nested = parser.context.beneath(site, parser.is_boundary)
        swaps = collect_transfers(parser, nested, self.source, limit=3)
        leg = fill_from_transfers(self.new_leg(parser, site, router), transfer_payloads(swaps))
        resolved = reconcile_leg(parser, site, leg, self.source)
        if resolved is not None:
            swaps.append(resolved)
        return swaps

    def _decode_event_swap(
        self,
        parser: "SwapParser",
        site: InstructionSite,
        router: Optional[Pubkey],
        event_type: Type[SwapEvent],
        authority_position: int,
        mint_a_position: int,
        mint_b_position: int,
    ) -> List[SwapData]:
        context = parser.context
        instruction = site.instruction
        try:
            program_id = context.program_id(instruction)
            authority = context.account(instruction, authority_position)
            mint_a = context.account(instruction, mint_a_position)
            mint_b = context.account(instruction, mint_b_position)
        except AccountIndexError as exc:
            LOG.debug("Meteora swap at %d has a short account list: %s", site.ordering_index, exc)
            return []

        nested = context.beneath(site, parser.is_boundary)
        event: Optional[SwapEvent] = None
        for candidate in nested:
            ix = candidate.instruction
            if context.try_program_id(ix) != program_id or len(ix.accounts) != 1:
                continue
            try:
                signer = context.key(ix.accounts[0])
            except AccountIndexError:
                continue
            if signer != authority or not event_type.matches(ix.data):
                continue
            try:
                event = event_type.decode(ix.data)
            except PayloadError as exc:
                LOG.warning("malformed %s at %d: %s", event_type.__name__, candidate.ordering_index, exc)
                return []
            break

        leg = self.new_leg(parser, site, router)
        swaps: List[SwapData] = []
        if event is None:
            # older bonding curve deployments do not emit EvtSwap
            swaps = collect_transfers(parser, nested, self.source, limit=3)
            fill_from_transfers(leg, transfer_payloads(swaps))
        else:
            swaps.append(SwapData.event(self.source, event))
            a_to_b = event.trade_direction == 0
            leg.input_mint, leg.output_mint = (mint_a, mint_b) if a_to_b else (mint_b, mint_a)
            leg.input_decimals = context.decimals_of(leg.input_mint)
            leg.output_decimals = context.decimals_of(leg.output_mint)
            if isinstance(event, DbcSwapEvent):
                leg.input_amount = event.actual_input_amount or event.amount_in
            else:
                leg.input_amount = event.amount_in
            leg.output_amount = event.output_amount

        resolved = reconcile_leg(parser, site, leg, self.source)
        if resolved is not None:
            swaps.append(resolved)
        return swaps
