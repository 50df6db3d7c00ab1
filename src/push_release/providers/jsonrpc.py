"""
JSON-RPC ledger client for a Parity-compatible node.

Methods used:
  parity_netChain, parity_registryAddress, eth_call,
  eth_sendTransaction, personal_signAndSendTransaction
"""
from __future__ import annotations

import itertools
import logging
from typing import Any, Optional

import requests

from push_release.errors import LedgerRPCError

logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "http://localhost:8545"
HTTP_TIMEOUT_S = 30.0


class JsonRpcLedgerClient:
    """Thin JSON-RPC 2.0 transport over HTTP."""

    def __init__(
        self,
        url: str = DEFAULT_RPC_URL,
        *,
        timeout: float = HTTP_TIMEOUT_S,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()
        self._ids = itertools.count(1)

    def request(self, method: str, params: list[Any] | None = None) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }
        logger.debug("RPC %s -> %s", method, self.url)
        try:
            resp = self._session.post(self.url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
            body = resp.json()
        except requests.RequestException as exc:
            raise LedgerRPCError(method, f"{type(exc).__name__}: {exc}") from exc
        except ValueError as exc:
            raise LedgerRPCError(method, f"invalid JSON response: {exc}") from exc

        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            raise LedgerRPCError(
                method, str(error.get("message", error)), code=error.get("code")
            )
        if error:
            raise LedgerRPCError(method, str(error))
        if not isinstance(body, dict) or "result" not in body:
            raise LedgerRPCError(method, "response missing result")
        return body["result"]

    def net_chain(self) -> str:
        return str(self.request("parity_netChain"))

    def registry_address(self) -> str:
        return str(self.request("parity_registryAddress"))

    def call(self, to: str, data: str) -> str:
        return str(self.request("eth_call", [{"to": to, "data": data}, "latest"]))

    def send_transaction(self, tx: dict) -> str:
        return str(self.request("eth_sendTransaction", [tx]))

    def sign_and_send_transaction(self, tx: dict, password: str) -> str:
        return str(self.request("personal_signAndSendTransaction", [tx, password]))
