from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from solders.pubkey import Pubkey
from solders.signature import Signature

from .discriminators import TxType
from .events import EventRecord
from .transfers import CheckedTransferRecord, TransferRecord


class SwapSource(str, Enum):
    JUPITER = "Jupiter"
    PUMPFUN = "Pumpfun"
    RAYDIUM = "Raydium"
    ORCA = "Orca"
    METEORA = "Meteora"

    @property
    def is_aggregator(self) -> bool:
        return self is SwapSource.JUPITER

    @property
    def is_bonding_curve(self) -> bool:
        return self is SwapSource.PUMPFUN


class PayloadKind(str, Enum):
    TRANSFER = "transfer"
    CHECKED_TRANSFER = "transferChecked"
    EVENT = "event"
    LEG = "leg"


@dataclass
class SwapLeg:
    """One decoded trade, filled in progressively by a decoder."""

    tx_type: TxType = TxType.SWAP
    amm: Optional[Pubkey] = None
    router: Optional[Pubkey] = None
    owner: Optional[Pubkey] = None
    index: int = 0
    protocol: str = ""
    input_mint: Optional[Pubkey] = None
    input_amount: int = 0
    input_decimals: int = 0
    output_mint: Optional[Pubkey] = None
    output_amount: int = 0
    output_decimals: int = 0
    pool: Optional[Pubkey] = None
    pool_in: Optional[Pubkey] = None
    pool_out: Optional[Pubkey] = None
    pool_in_amount: Optional[int] = None
    pool_out_amount: Optional[int] = None

    @property
    def is_resolved(self) -> bool:
        return (
            self.input_mint is not None
            and self.output_mint is not None
            and self.input_mint != self.output_mint
        )


Payload = Union[TransferRecord, CheckedTransferRecord, EventRecord, SwapLeg]


@dataclass(frozen=True)
class SwapData:
    kind: PayloadKind
    source: SwapSource
    payload: Payload

    @classmethod
    def transfer(cls, source: SwapSource, record: TransferRecord) -> "SwapData":
        return cls(kind=PayloadKind.TRANSFER, source=source, payload=record)

    @classmethod
    def checked_transfer(cls, source: SwapSource, record: CheckedTransferRecord) -> "SwapData":
        return cls(kind=PayloadKind.CHECKED_TRANSFER, source=source, payload=record)

    @classmethod
    def event(cls, source: SwapSource, event: EventRecord) -> "SwapData":
        return cls(kind=PayloadKind.EVENT, source=source, payload=event)

    @classmethod
    def leg(cls, source: SwapSource, leg: SwapLeg) -> "SwapData":
        return cls(kind=PayloadKind.LEG, source=source, payload=leg)


@dataclass(frozen=True)
class TokenFlow:
    mint: Pubkey
    amount: int
    decimals: int


@dataclass(frozen=True)
class SwapSummary:
    signers: List[Pubkey]
    signatures: List[Signature]
    amms: List[str]
    timestamp: Optional[datetime]
    token_in_mint: Pubkey
    token_in_amount: int
    token_in_decimals: int
    token_out_mint: Pubkey
    token_out_amount: int
    token_out_decimals: int
