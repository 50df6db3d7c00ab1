"""Shared fixtures built on the in-memory fakes in ``fakes.py``."""

from __future__ import annotations

import pytest

from fakes import ACCOUNT, MANIFEST, SECRET, FakeFetcher, FakeLedger
from push_release.api import build_orchestrators
from push_release.core.config import RelayConfig
from push_release.core.validation import keccak_hex


@pytest.fixture
def secret_hash() -> str:
    return keccak_hex(SECRET)


@pytest.fixture
def relay_config(secret_hash: str) -> RelayConfig:
    return RelayConfig(secret_hash=secret_hash, account_address=ACCOUNT)


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher({"Cargo.toml": MANIFEST})


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def orchestrators(relay_config, fetcher, ledger):
    return build_orchestrators(relay_config, fetcher=fetcher, ledger=ledger)
