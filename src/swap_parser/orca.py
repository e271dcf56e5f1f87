from . import constants as c
from .base import TransferSwapDecoder
from .models import SwapSource


class OrcaDecoder(TransferSwapDecoder):
    source = SwapSource.ORCA
    family = "orca"
    program_ids = frozenset({c.ORCA_WHIRLPOOL_PROGRAM_ID})
