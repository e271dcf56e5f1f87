"""JSON-RPC client used by the demo entry point to fetch transactions."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter, Retry

from .config import RPCConfig
from .errors import SolanaRPCError

LOG = logging.getLogger(__name__)


def build_session(config: RPCConfig) -> requests.Session:
    """A pooled session that retries throttled and failing RPC nodes."""
    retry_policy = Retry(
        total=config.retries,
        backoff_factor=config.backoff_factor,
        status_forcelist=config.retry_statuses,
        # JSON-RPC reads are POSTs
        allowed_methods=frozenset({"POST"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry_policy, pool_connections=config.pool_size, pool_maxsize=config.pool_size)
    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update({"User-Agent": config.user_agent, "Content-Type": "application/json"})
    return session


class SolanaRPCClient:
    def __init__(self, config: RPCConfig, session: Optional[requests.Session] = None) -> None:
        self.config = config
        self.session = session if session is not None else build_session(config)

    def _post(self, method: str, params: List[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        try:
            response = self.session.post(self.config.endpoint, json=payload, timeout=self.config.timeout)
        except (requests.Timeout, requests.ConnectionError) as exc:
            raise SolanaRPCError("RPC request failed", cause=exc) from exc

        status = response.status_code
        if status != 200:
            raise SolanaRPCError(
                "RPC request returned non-200 status",
                http_status=status,
                body=response.text,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise SolanaRPCError(
                "RPC response was not valid JSON",
                http_status=status,
                body=response.text,
                cause=exc,
            ) from exc

        if "error" in body:
            raise SolanaRPCError(f"RPC error for {method}", http_status=status, body=str(body["error"]))
        return body.get("result")

    def get_transaction(self, signature: str) -> Dict[str, Any]:
        LOG.debug("fetching transaction %s", signature)
        result = self._post(
            "getTransaction",
            [
                signature,
                {
                    "commitment": self.config.commitment,
                    "encoding": "json",
                    "maxSupportedTransactionVersion": self.config.max_supported_transaction_version,
                },
            ],
        )
        if result is None:
            raise SolanaRPCError(f"transaction {signature} not found")
        return result
