"""
push_release.api
================

Programmatic entrypoints: wire the orchestrators from a :class:`RelayConfig`.

Usage::

    from push_release.api import build_orchestrators
    from push_release.core.config import load_config

    orchestrators = build_orchestrators(load_config())
    summary = orchestrators.release.push_release(tag="v1.7.13", commit=..., secret=...)

Collaborators default to the GitHub raw fetcher and the JSON-RPC ledger
client; pass ``fetcher=`` / ``ledger=`` to substitute others.
"""

from __future__ import annotations

from typing import NamedTuple, Optional

from push_release.core.config import RelayConfig
from push_release.core.manifest import metadata_source
from push_release.core.network import NetworkResolver
from push_release.core.pipeline import BuildOrchestrator, ReleaseOrchestrator
from push_release.core.registry import RegistryClient
from push_release.providers.base import LedgerClient, MetadataFetcher
from push_release.providers.github import GitHubRawFetcher
from push_release.providers.jsonrpc import JsonRpcLedgerClient


class Orchestrators(NamedTuple):
    release: ReleaseOrchestrator
    build: BuildOrchestrator


def default_fetcher(config: RelayConfig) -> GitHubRawFetcher:
    return GitHubRawFetcher(
        config.github_repo,
        base_url=config.github_raw_url,
        timeout=config.fetch_timeout,
    )


def default_ledger(config: RelayConfig) -> JsonRpcLedgerClient:
    return JsonRpcLedgerClient(config.rpc_url, timeout=config.rpc_timeout)


def build_orchestrators(
    config: RelayConfig,
    *,
    fetcher: Optional[MetadataFetcher] = None,
    ledger: Optional[LedgerClient] = None,
) -> Orchestrators:
    """Build both orchestrators sharing one set of collaborators."""
    if fetcher is None:
        fetcher = default_fetcher(config)
    if ledger is None:
        ledger = default_ledger(config)

    source = metadata_source(config.metadata_source, fetcher, config.manifest_path)
    registry = RegistryClient(
        ledger,
        account_address=config.account_address,
        account_password=config.account_password,
        gas_price=config.gas_price,
        abi_dir=config.abi_dir,
    )
    network = NetworkResolver(ledger)
    return Orchestrators(
        release=ReleaseOrchestrator(config, source, registry, network),
        build=BuildOrchestrator(config, source, registry, network),
    )
