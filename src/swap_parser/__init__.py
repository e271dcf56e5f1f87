from .aggregator import SwapAggregator
from .config import AppConfig, RPCConfig, load_config
from .context import TransactionContext
from .errors import (
    NoSwapFoundError,
    PayloadError,
    ReconciliationError,
    SolanaRPCError,
    SwapParserError,
    TransactionFormatError,
    UnknownProgramError,
)
from .models import PayloadKind, SwapData, SwapLeg, SwapSource, SwapSummary
from .parser import SwapParser
from .registry import DecoderRegistry, default_registry
from .transaction import Transaction

__all__ = [
    "AppConfig",
    "RPCConfig",
    "load_config",
    "DecoderRegistry",
    "default_registry",
    "NoSwapFoundError",
    "PayloadError",
    "ReconciliationError",
    "SolanaRPCError",
    "SwapParserError",
    "TransactionFormatError",
    "UnknownProgramError",
    "PayloadKind",
    "SwapAggregator",
    "SwapData",
    "SwapLeg",
    "SwapParser",
    "SwapSource",
    "SwapSummary",
    "Transaction",
    "TransactionContext",
]
