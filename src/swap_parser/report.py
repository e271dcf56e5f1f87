import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from .models import PayloadKind, SwapData, SwapLeg, SwapSummary


@dataclass
class Report:
    legs: List[Dict[str, Any]]
    summary: Dict[str, Any]


def _key(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


class SwapReport:
    @staticmethod
    def leg_to_dict(leg: SwapLeg) -> Dict[str, Any]:
        return {
            "type": leg.tx_type.value,
            "protocol": leg.protocol,
            "amm": _key(leg.amm),
            "router": _key(leg.router),
            "pool": _key(leg.pool),
            "pool_in": _key(leg.pool_in),
            "pool_out": _key(leg.pool_out),
            "pool_in_amount": leg.pool_in_amount,
            "pool_out_amount": leg.pool_out_amount,
            "input_mint": _key(leg.input_mint),
            "input_amount": leg.input_amount,
            "input_decimals": leg.input_decimals,
            "output_mint": _key(leg.output_mint),
            "output_amount": leg.output_amount,
            "output_decimals": leg.output_decimals,
            "owner": _key(leg.owner),
            "index": leg.index,
        }

    @staticmethod
    def summary_to_dict(summary: SwapSummary) -> Dict[str, Any]:
        return {
            "signers": [str(signer) for signer in summary.signers],
            "signatures": [str(signature) for signature in summary.signatures],
            "amms": list(summary.amms),
            "timestamp": summary.timestamp.isoformat() if summary.timestamp else None,
            "token_in": {
                "mint": str(summary.token_in_mint),
                "amount": summary.token_in_amount,
                "decimals": summary.token_in_decimals,
            },
            "token_out": {
                "mint": str(summary.token_out_mint),
                "amount": summary.token_out_amount,
                "decimals": summary.token_out_decimals,
            },
        }

    @staticmethod
    def build(swaps: Sequence[SwapData], summary: SwapSummary, include_legs: bool = True) -> Report:
        legs: List[Dict[str, Any]] = []
        if include_legs:
            legs = [
                SwapReport.leg_to_dict(swap.payload)  # type: ignore[arg-type]
                for swap in sorted(
                    (s for s in swaps if s.kind is PayloadKind.LEG),
                    key=lambda s: s.payload.index,  # type: ignore[union-attr]
                )
            ]
        return Report(legs=legs, summary=SwapReport.summary_to_dict(summary))

    @staticmethod
    def to_json(report: Report) -> str:
        return json.dumps({"legs": report.legs, "summary": report.summary}, indent=2)
