"""Exception taxonomy shared by the parser, decoders and the RPC client."""

from __future__ import annotations

from typing import Optional


class SwapParserError(Exception):
    """Base class for every failure raised while decoding a transaction."""


class TransactionFormatError(SwapParserError):
    """The payload is not a decodable ``getTransaction`` result."""


class AccountIndexError(SwapParserError, IndexError):
    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"account index {index} out of range for table of {size}")
        self.index = index
        self.size = size


class PayloadError(SwapParserError, ValueError):
    """Instruction or event payload is too short or otherwise malformed."""


class ReconciliationError(SwapParserError):
    """Pool balances could not be reconciled with a leg's mints."""


class UnknownProgramError(ReconciliationError):
    def __init__(self, program_id: object) -> None:
        super().__init__(f"unknown program {program_id}")
        self.program_id = program_id


class NoSwapFoundError(SwapParserError):
    def __init__(self, message: str = "no valid swaps found") -> None:
        super().__init__(message)


class SolanaRPCError(Exception):
    """A ``getTransaction`` call failed before a payload reached the parser.

    Kept outside ``SwapParserError`` so callers can tell transport failures
    from undecodable transactions.
    """

    def __init__(
        self,
        message: str,
        http_status: Optional[int] = None,
        body: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.body = body
        self.cause = cause

    def __str__(self) -> str:
        text = self.message
        if self.http_status is not None:
            text = f"{text} [status={self.http_status}]"
        if self.cause is not None:
            text = f"{text}: {type(self.cause).__name__}: {self.cause}"
        if self.body:
            text = f"{text}\n{self.body[:200]}"
        return text
