"""Canonical network keys for fork-block lookup."""

from __future__ import annotations

import logging

from push_release.providers.base import LedgerClient

logger = logging.getLogger(__name__)

FOUNDATION = "foundation"

# Names the node may report for the production chain.
FOUNDATION_ALIASES = frozenset({"foundation", "homestead", "mainnet", "ethereum"})


def normalize_network(chain: str) -> str:
    """Collapse node-reported chain names onto fork-lookup keys."""
    name = chain.strip().lower()
    if name in FOUNDATION_ALIASES:
        return FOUNDATION
    # Nodes started from a chain-spec file report its path.
    if "kovan.json" in name:
        return "kovan"
    return name


class NetworkResolver:
    def __init__(self, ledger: LedgerClient) -> None:
        self._ledger = ledger

    def resolve_network(self) -> str:
        chain = self._ledger.net_chain()
        network = normalize_network(chain)
        logger.info("On network %s (node reports %r)", network, chain)
        return network
