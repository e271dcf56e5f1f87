from typing import TYPE_CHECKING, List, Optional

from solders.pubkey import Pubkey

from . import constants as c
from .base import ProtocolDecoder
from .context import InstructionSite
from .models import SwapData

if TYPE_CHECKING:
    from .parser import SwapParser


class OkxRouterDecoder(ProtocolDecoder):
    """OKX DEX router: every AMM hop it invokes is decoded on its own."""

    family = "okx"
    program_ids = frozenset({c.OKX_DEX_ROUTER_PROGRAM_ID})
    exclusive = True

    def decode(self, parser: "SwapParser", site: InstructionSite, router: Optional[Pubkey]) -> List[SwapData]:
        return parser.dispatch_nested(site, router=router, once_per_family=False)


class BotRelayDecoder(ProtocolDecoder):
    """Trading-bot relays forward to a single AMM family per instruction."""

    family = "relay"
    program_ids = frozenset(
        {
            c.BANANA_GUN_PROGRAM_ID,
            c.MINTECH_PROGRAM_ID,
            c.BLOOM_PROGRAM_ID,
            c.NOVA_PROGRAM_ID,
            c.MAESTRO_PROGRAM_ID,
        }
    )

    def decode(self, parser: "SwapParser", site: InstructionSite, router: Optional[Pubkey]) -> List[SwapData]:
        return parser.dispatch_nested(site, router=router, once_per_family=True)
