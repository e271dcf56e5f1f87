"""Little-endian ``construct`` field types for instruction and event payloads.

Trailing bytes beyond a declared struct are ignored: programs append fields to
their events across upgrades and older layouts must keep decoding.
"""

from __future__ import annotations

from typing import Any, Dict

from construct import Adapter, Bytes, BytesInteger, ConstructError, ExprAdapter, Int64ul, Int8ul, OneOf, Struct
from solders.pubkey import Pubkey

from .errors import PayloadError


class PubkeyAdapter(Adapter):
    def _decode(self, obj, context, path):
        return Pubkey.from_bytes(obj)

    def _encode(self, obj, context, path):
        return bytes(obj)


PublicKey = PubkeyAdapter(Bytes(32))
U128 = BytesInteger(16, swapped=True)
# Borsh bools are a single 0/1 byte; anything else is a corrupt payload.
Bool = ExprAdapter(OneOf(Int8ul, [0, 1]), lambda obj, ctx: obj == 1, lambda obj, ctx: int(obj))


def parse_struct(layout: Struct, data: bytes, offset: int = 0) -> Dict[str, Any]:
    """Parse ``layout`` from ``data[offset:]`` into a plain field dict."""
    try:
        parsed = layout.parse(bytes(data[offset:]))
    except ConstructError as exc:
        raise PayloadError(f"payload does not fit layout: {exc}") from exc
    return {name: value for name, value in parsed.items() if not name.startswith("_")}


def read_u64(data: bytes, offset: int) -> int:
    try:
        return Int64ul.parse(bytes(data[offset:offset + 8]))
    except ConstructError as exc:
        raise PayloadError(f"payload too short for u64 at offset {offset}: have {len(data)} bytes") from exc
