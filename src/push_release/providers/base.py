"""
Collaborator protocols.

Both collaborators are black boxes to the pipeline: it never retries their
calls and relies on them for any timeout policy.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetadataFetcher(Protocol):
    """Reads repository files at a given commit."""

    def fetch(self, commit: str, path: str) -> str:
        """Return the text of *path* at *commit*; raise ``MetadataFetchError`` if unavailable."""
        ...


@runtime_checkable
class LedgerClient(Protocol):
    """Minimal node RPC surface used by the relay."""

    def net_chain(self) -> str:
        """Name of the chain the node is connected to."""
        ...

    def registry_address(self) -> str:
        """Address of the node's name-registry contract."""
        ...

    def call(self, to: str, data: str) -> str:
        """Execute a read-only contract call, returning hex output."""
        ...

    def send_transaction(self, tx: dict) -> str:
        """Submit a transaction from an unlocked account, returning its hash."""
        ...

    def sign_and_send_transaction(self, tx: dict, password: str) -> str:
        """Sign with *password*, submit, and return the transaction hash."""
        ...
