import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

RPC_URL_ENV = "SOLANA_RPC_URL"


@dataclass(frozen=True)
class RPCConfig:
    endpoint: str = "https://api.mainnet-beta.solana.com"
    commitment: str = "confirmed"
    timeout: float = 10.0
    retries: int = 3
    max_supported_transaction_version: int = 0
    user_agent: str = "swap-parser/0.1"
    backoff_factor: float = 0.2
    retry_statuses: Tuple[int, ...] = (429, 500, 502, 503, 504)
    pool_size: int = 4


@dataclass(frozen=True)
class AppConfig:
    rpc: RPCConfig = field(default_factory=RPCConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None
    include_legs: bool = True


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    raw: Dict[str, Any] = {}
    if config_path is not None and config_path.exists():
        with config_path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}

    rpc_raw: Dict[str, Any] = dict(raw.get("rpc") or {})
    if "retry_statuses" in rpc_raw:
        rpc_raw["retry_statuses"] = tuple(int(status) for status in rpc_raw["retry_statuses"])
    endpoint = os.environ.get(RPC_URL_ENV)
    if endpoint:
        rpc_raw["endpoint"] = endpoint

    return AppConfig(
        rpc=RPCConfig(**rpc_raw),
        log_level=str(raw.get("log_level", "INFO")).upper(),
        log_file=raw.get("log_file"),
        include_legs=bool(raw.get("include_legs", True)),
    )
