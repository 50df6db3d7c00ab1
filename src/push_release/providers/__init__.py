"""
External collaborators of the push pipelines.

- MetadataFetcher: reads a file from the source host at a commit.
- LedgerClient: JSON-RPC access to the blockchain node.

Concrete implementations talk HTTP through ``requests``; tests substitute
in-memory fakes that satisfy the same protocols.
"""

from __future__ import annotations

from .base import LedgerClient, MetadataFetcher
from .github import GitHubRawFetcher
from .jsonrpc import JsonRpcLedgerClient

__all__ = [
    "LedgerClient",
    "MetadataFetcher",
    "GitHubRawFetcher",
    "JsonRpcLedgerClient",
]
