import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Set, Tuple

from solders.pubkey import Pubkey

from .constants import JUPITER_DCA_PROGRAM_ID, NATIVE_SOL_DECIMALS, NATIVE_SOL_MINT, PUMPFUN_TOKEN_DECIMALS
from .context import TransactionContext
from .errors import NoSwapFoundError
from .events import PumpfunTradeEvent
from .jupiter import summarize_jupiter_events
from .models import PayloadKind, SwapData, SwapLeg, SwapSummary, TokenFlow

LOG = logging.getLogger(__name__)

# DCA fills are signed by the keeper; the position owner sits at index 2
DCA_OWNER_INDEX = 2


@dataclass
class Buckets:
    aggregator: List[SwapData]
    bonding_curve: List[SwapData]
    other: List[SwapData]


class SwapAggregator:
    def __init__(self, context: TransactionContext) -> None:
        self.context = context

    def aggregate(self, swaps: Sequence[SwapData]) -> SwapSummary:
        if not swaps:
            raise NoSwapFoundError()
        buckets = self.partition(swaps)

        if buckets.aggregator:
            jupiter = summarize_jupiter_events(self.context, buckets.aggregator)
            return self._summary(
                amms=jupiter.amms,
                timestamp=self._block_time(),
                token_in=TokenFlow(jupiter.token_in_mint, jupiter.token_in_amount, jupiter.token_in_decimals),
                token_out=TokenFlow(jupiter.token_out_mint, jupiter.token_out_amount, jupiter.token_out_decimals),
            )

        other = list(buckets.other)
        if buckets.bonding_curve:
            first = buckets.bonding_curve[0]
            if first.kind is PayloadKind.EVENT and isinstance(first.payload, PumpfunTradeEvent):
                return self._bonding_curve_summary(first)
            other.extend(buckets.bonding_curve)

        if other:
            summary = self._transfer_summary(other)
            if summary is not None:
                return summary
        raise NoSwapFoundError()

    @staticmethod
    def partition(swaps: Sequence[SwapData]) -> Buckets:
        buckets = Buckets(aggregator=[], bonding_curve=[], other=[])
        for swap in swaps:
            if swap.source.is_aggregator:
                buckets.aggregator.append(swap)
            elif swap.source.is_bonding_curve:
                buckets.bonding_curve.append(swap)
            else:
                buckets.other.append(swap)
        return buckets

    def signers(self) -> List[Pubkey]:
        keys = self.context.account_keys
        if self.context.has_account(JUPITER_DCA_PROGRAM_ID) and len(keys) > DCA_OWNER_INDEX:
            return [keys[DCA_OWNER_INDEX]]
        return [keys[0]] if keys else []

    def _bonding_curve_summary(self, swap: SwapData) -> SwapSummary:
        event: PumpfunTradeEvent = swap.payload  # type: ignore[assignment]
        native = TokenFlow(NATIVE_SOL_MINT, event.sol_amount, NATIVE_SOL_DECIMALS)
        token = TokenFlow(
            event.mint,
            event.token_amount,
            self.context.decimals_of(event.mint, default=PUMPFUN_TOKEN_DECIMALS),
        )
        token_in, token_out = (native, token) if event.is_buy else (token, native)
        return self._summary(
            amms=[swap.source.value],
            timestamp=datetime.fromtimestamp(event.timestamp, tz=timezone.utc),
            token_in=token_in,
            token_out=token_out,
        )

    def _transfer_summary(self, swaps: Sequence[SwapData]) -> Optional[SwapSummary]:
        flows = self.token_flows(swaps)
        distinct: List[TokenFlow] = []
        seen_mints: Set[Pubkey] = set()
        for flow in flows:
            if flow.mint not in seen_mints:
                seen_mints.add(flow.mint)
                distinct.append(flow)
        if len(distinct) < 2:
            LOG.debug("only %d distinct mints observed", len(distinct))
            return None

        # single-hop view: intermediate mints of a multi-hop route are not reported
        first, last = distinct[0], distinct[-1]
        seen_inputs: Set[Tuple[int, Pubkey]] = set()
        seen_outputs: Set[Tuple[int, Pubkey]] = set()
        total_in = total_out = 0
        for flow in flows:
            signature = (flow.amount, flow.mint)
            if flow.mint == first.mint and signature not in seen_inputs:
                seen_inputs.add(signature)
                total_in += flow.amount
            if flow.mint == last.mint and signature not in seen_outputs:
                seen_outputs.add(signature)
                total_out += flow.amount

        amms: List[str] = []
        for swap in swaps:
            if swap.source.value not in amms:
                amms.append(swap.source.value)

        return self._summary(
            amms=amms,
            timestamp=self._block_time(),
            token_in=TokenFlow(first.mint, total_in, first.decimals),
            token_out=TokenFlow(last.mint, total_out, last.decimals),
        )

    @staticmethod
    def token_flows(swaps: Sequence[SwapData]) -> List[TokenFlow]:
        """Token movements in hop order.

        A hop that decoded token transfers contributes those transfers; a hop
        that only produced a resolved leg, such as an event-reported swap,
        contributes the leg's input and output instead.
        """
        flows: List[TokenFlow] = []
        hop_has_transfers = False
        for swap in swaps:
            if swap.kind in (PayloadKind.TRANSFER, PayloadKind.CHECKED_TRANSFER):
                if swap.payload.mint is not None:
                    flows.append(TokenFlow(swap.payload.mint, swap.payload.amount, swap.payload.decimals))
                    hop_has_transfers = True
            elif swap.kind is PayloadKind.EVENT:
                # an event opens its own hop
                hop_has_transfers = False
            elif swap.kind is PayloadKind.LEG:
                leg: SwapLeg = swap.payload  # type: ignore[assignment]
                if not hop_has_transfers and leg.is_resolved:
                    flows.append(TokenFlow(leg.input_mint, leg.input_amount, leg.input_decimals))
                    flows.append(TokenFlow(leg.output_mint, leg.output_amount, leg.output_decimals))
                hop_has_transfers = False
        return flows

    def _block_time(self) -> Optional[datetime]:
        block_time = self.context.transaction.block_time
        if block_time is None:
            return None
        return datetime.fromtimestamp(block_time, tz=timezone.utc)

    def _summary(
        self,
        amms: List[str],
        timestamp: Optional[datetime],
        token_in: TokenFlow,
        token_out: TokenFlow,
    ) -> SwapSummary:
        return SwapSummary(
            signers=self.signers(),
            signatures=list(self.context.transaction.signatures),
            amms=amms,
            timestamp=timestamp,
            token_in_mint=token_in.mint,
            token_in_amount=token_in.amount,
            token_in_decimals=token_in.decimals,
            token_out_mint=token_out.mint,
            token_out_amount=token_out.amount,
            token_out_decimals=token_out.decimals,
        )
