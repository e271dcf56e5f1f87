"""Program identity to decoder lookup, split into the two routing tiers."""

from __future__ import annotations

from functools import lru_cache
from typing import Dict, Iterable, Optional

from solders.pubkey import Pubkey

from .base import ProtocolDecoder
from .jupiter import JupiterDecoder
from .meteora import MeteoraDecoder
from .orca import OrcaDecoder
from .pumpfun import PumpAmmDecoder, PumpfunDecoder
from .raydium import RaydiumDecoder
from .routers import BotRelayDecoder, OkxRouterDecoder

AGGREGATOR_TIER = 1
AMM_TIER = 2


class DecoderRegistry:
    def __init__(self) -> None:
        self._tiers: Dict[int, Dict[Pubkey, ProtocolDecoder]] = {AGGREGATOR_TIER: {}, AMM_TIER: {}}

    def register(self, decoder: ProtocolDecoder, tier: int = AMM_TIER) -> "DecoderRegistry":
        table = self._tiers[tier]
        for program_id in decoder.program_ids:
            if program_id in table:
                raise ValueError(f"program {program_id} already registered in tier {tier}")
            table[program_id] = decoder
        return self

    def aggregator(self, program_id: Pubkey) -> Optional[ProtocolDecoder]:
        return self._tiers[AGGREGATOR_TIER].get(program_id)

    def amm(self, program_id: Pubkey) -> Optional[ProtocolDecoder]:
        return self._tiers[AMM_TIER].get(program_id)

    def amm_programs(self) -> Iterable[Pubkey]:
        return self._tiers[AMM_TIER].keys()


def build_registry() -> DecoderRegistry:
    registry = DecoderRegistry()
    registry.register(JupiterDecoder(), AGGREGATOR_TIER)
    registry.register(OkxRouterDecoder(), AGGREGATOR_TIER)
    registry.register(BotRelayDecoder(), AGGREGATOR_TIER)
    registry.register(RaydiumDecoder())
    registry.register(OrcaDecoder())
    registry.register(MeteoraDecoder())
    registry.register(PumpfunDecoder())
    registry.register(PumpAmmDecoder())
    return registry


@lru_cache(maxsize=None)
def default_registry() -> DecoderRegistry:
    return build_registry()
