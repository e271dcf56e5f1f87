import logging
from typing import TYPE_CHECKING, List, Optional

from solders.pubkey import Pubkey

from . import constants as c
from .base import TransferSwapDecoder, reconcile_leg
from .context import InstructionSite
from .discriminators import TxType
from .errors import AccountIndexError, PayloadError
from .events import RaydiumInitLiquidity
from .models import SwapData, SwapSource

if TYPE_CHECKING:
    from .parser import SwapParser

LOG = logging.getLogger(__name__)

INIT_LIQUIDITY_OPCODE = 1


class RaydiumDecoder(TransferSwapDecoder):
    source = SwapSource.RAYDIUM
    family = "raydium"
    program_ids = frozenset(
        {
            c.RAYDIUM_V4_PROGRAM_ID,
            c.RAYDIUM_CPMM_PROGRAM_ID,
            c.RAYDIUM_AMM_ROUTING_PROGRAM_ID,
            c.RAYDIUM_CLMM_PROGRAM_ID,
            c.RAYDIUM_LAUNCHLAB_PROGRAM_ID,
            c.RAYDIUM_AP51_PROGRAM_ID,
        }
    )

    def decode(self, parser: "SwapParser", site: InstructionSite, router: Optional[Pubkey]) -> List[SwapData]:
        instruction = site.instruction
        program_id = parser.context.program_id(instruction)
        if (
            program_id == c.RAYDIUM_V4_PROGRAM_ID
            and not site.is_inner
            and instruction.data[:1] == bytes([INIT_LIQUIDITY_OPCODE])
        ):
            return self._init_liquidity(parser, site, router)
        return super().decode(parser, site, router)

    def _init_liquidity(self, parser: "SwapParser", site: InstructionSite, router: Optional[Pubkey]) -> List[SwapData]:
        context = parser.context
        instruction = site.instruction
        try:
            args = RaydiumInitLiquidity.decode(instruction.data)
            coin_vault = context.token_info_for(context.account_index(instruction, 10))
            pc_vault = context.token_info_for(context.account_index(instruction, 11))
            leg = self.new_leg(parser, site, router)
            leg.tx_type = TxType.ADD
            leg.input_mint = context.account(instruction, 8)
            leg.input_amount = args.init_coin_amount
            leg.input_decimals = coin_vault.decimals if coin_vault else 0
            leg.output_mint = context.account(instruction, 9)
            leg.output_amount = args.init_pc_amount
            leg.output_decimals = pc_vault.decimals if pc_vault else 0
        except (PayloadError, AccountIndexError) as exc:
            LOG.warning("malformed Raydium pool initialisation at %d: %s", site.ordering_index, exc)
            return []
        resolved = reconcile_leg(parser, site, leg, self.source)
        return [resolved] if resolved is not None else []
