"""Relay configuration.

Load order: built-in defaults <- YAML file <- ``PUSH_RELEASE_*`` environment.
The YAML file is read from ``$PUSH_RELEASE_CONFIG`` or, when that is unset,
``./config.yaml`` if present.  The result is an immutable :class:`RelayConfig`
built once at startup and passed to every pipeline component.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from push_release.errors import ConfigError
from push_release.model import MetadataSourceKind

_HEX_ADDRESS = re.compile(r"^0x[0-9a-fA-F]{40}$")
_HEX_HASH = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")

_DEFAULTS: dict[str, Any] = {
    "secret_hash": "",
    "ledger": {
        "rpc_url": "http://localhost:8545",
        "timeout": 30.0,
        "account": {
            "address": "0x0066AC7A4608f350BF9a0323D60dDe211Dfb27c0",
            "password": None,
        },
        "gas_price": "0x4F9ACA000",
    },
    "github": {
        "repo": "paritytech/parity",
        "raw_url": "https://raw.githubusercontent.com",
        "timeout": 15.0,
        "manifest_path": "Cargo.toml",
        "metadata_source": "manifest",
    },
    "tracks": {"enabled": ["stable", "beta"]},
    "platforms": [
        "x86_64-apple-darwin",
        "x86_64-pc-windows-msvc",
        "x86_64-unknown-linux-gnu",
    ],
    "assets": {"base_url": "http://d1h4xl4cr1h0mo.cloudfront.net"},
    "registry": {
        "operations": "parityoperations",
        "githubhint": "githubhint",
        "abi_dir": None,
    },
}

# env var -> (section path, parser)
_ENV_KEYS: dict[str, tuple[tuple[str, ...], Any]] = {
    "PUSH_RELEASE_SECRET_HASH": (("secret_hash",), str),
    "PUSH_RELEASE_RPC_URL": (("ledger", "rpc_url"), str),
    "PUSH_RELEASE_RPC_TIMEOUT": (("ledger", "timeout"), float),
    "PUSH_RELEASE_ACCOUNT": (("ledger", "account", "address"), str),
    "PUSH_RELEASE_ACCOUNT_PASSWORD": (("ledger", "account", "password"), str),
    "PUSH_RELEASE_GAS_PRICE": (("ledger", "gas_price"), str),
    "PUSH_RELEASE_REPO": (("github", "repo"), str),
    "PUSH_RELEASE_RAW_URL": (("github", "raw_url"), str),
    "PUSH_RELEASE_FETCH_TIMEOUT": (("github", "timeout"), float),
    "PUSH_RELEASE_MANIFEST_PATH": (("github", "manifest_path"), str),
    "PUSH_RELEASE_METADATA_SOURCE": (("github", "metadata_source"), str),
    "PUSH_RELEASE_ENABLED_TRACKS": (("tracks", "enabled"), lambda v: _split_csv(v)),
    "PUSH_RELEASE_PLATFORMS": (("platforms",), lambda v: _split_csv(v)),
    "PUSH_RELEASE_ASSET_BASE_URL": (("assets", "base_url"), str),
    "PUSH_RELEASE_ABI_DIR": (("registry", "abi_dir"), str),
}


@dataclass(frozen=True)
class RelayConfig:
    """Process-wide, read-only relay settings."""

    secret_hash: str
    rpc_url: str = "http://localhost:8545"
    rpc_timeout: float = 30.0
    account_address: str = "0x0066AC7A4608f350BF9a0323D60dDe211Dfb27c0"
    account_password: str | None = None
    gas_price: str | None = "0x4F9ACA000"
    github_repo: str = "paritytech/parity"
    github_raw_url: str = "https://raw.githubusercontent.com"
    fetch_timeout: float = 15.0
    manifest_path: str = "Cargo.toml"
    metadata_source: MetadataSourceKind = MetadataSourceKind.MANIFEST
    enabled_tracks: frozenset[str] = frozenset({"stable", "beta"})
    supported_platforms: frozenset[str] = field(
        default_factory=lambda: frozenset(_DEFAULTS["platforms"])
    )
    asset_base_url: str = "http://d1h4xl4cr1h0mo.cloudfront.net"
    operations_name: str = "parityoperations"
    githubhint_name: str = "githubhint"
    abi_dir: Path | None = None

    def __post_init__(self) -> None:
        if not self.secret_hash:
            raise ConfigError("secret_hash is not configured")
        if not _HEX_HASH.match(self.secret_hash):
            raise ConfigError("secret_hash must be a 64-character keccak-256 hex digest")
        if not _HEX_ADDRESS.match(self.account_address):
            raise ConfigError(f"Invalid account address: {self.account_address!r}")
        # Normalize so the secret gate can compare plain lower-case hex.
        object.__setattr__(
            self, "secret_hash", self.secret_hash.lower().removeprefix("0x")
        )

    def asset_url(self, tag: str, platform: str, filename: str) -> str:
        return f"{self.asset_base_url.rstrip('/')}/{tag}/{platform}/{filename}"


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def _deep_merge(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _config_yaml_path(env: Mapping[str, str]) -> Path | None:
    explicit = env.get("PUSH_RELEASE_CONFIG")
    if explicit:
        path = Path(explicit)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        return path
    local = Path.cwd() / "config.yaml"
    return local if local.exists() else None


def _load_yaml(path: Path | None) -> dict:
    if path is None:
        return {}
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return data


def _env_overrides(env: Mapping[str, str]) -> dict:
    overrides: dict = {}
    for var, (keys, parse) in _ENV_KEYS.items():
        raw = env.get(var)
        if raw is None or raw == "":
            continue
        try:
            value = parse(raw)
        except ValueError as exc:
            raise ConfigError(f"{var}: {exc}") from exc
        node = overrides
        for key in keys[:-1]:
            node = node.setdefault(key, {})
        node[keys[-1]] = value
    return overrides


def _enabled_labels(raw: Any) -> frozenset[str]:
    """Accept either a list of labels or a ``label: bool`` mapping."""
    if isinstance(raw, Mapping):
        return frozenset(str(k).lower() for k, v in raw.items() if v)
    if isinstance(raw, (list, tuple, set, frozenset)):
        return frozenset(str(k).lower() for k in raw)
    raise ConfigError(f"tracks.enabled must be a list or mapping, got {type(raw).__name__}")


def config_from_dict(data: Mapping[str, Any]) -> RelayConfig:
    """Build a :class:`RelayConfig` from a merged configuration mapping."""
    merged = _deep_merge(_DEFAULTS, dict(data))
    ledger = merged["ledger"]
    github = merged["github"]
    registry = merged["registry"]

    try:
        source = MetadataSourceKind(str(github["metadata_source"]).lower())
    except ValueError:
        raise ConfigError(
            f"Unknown metadata_source {github['metadata_source']!r} "
            f"(expected one of: {', '.join(k.value for k in MetadataSourceKind)})"
        ) from None

    abi_dir = registry.get("abi_dir")
    return RelayConfig(
        secret_hash=str(merged.get("secret_hash") or ""),
        rpc_url=str(ledger["rpc_url"]),
        rpc_timeout=float(ledger["timeout"]),
        account_address=str(ledger["account"]["address"]),
        account_password=ledger["account"].get("password") or None,
        gas_price=ledger.get("gas_price") or None,
        github_repo=str(github["repo"]),
        github_raw_url=str(github["raw_url"]),
        fetch_timeout=float(github["timeout"]),
        manifest_path=str(github["manifest_path"]),
        metadata_source=source,
        enabled_tracks=_enabled_labels(merged["tracks"]["enabled"]),
        supported_platforms=frozenset(str(p) for p in merged["platforms"]),
        asset_base_url=str(merged["assets"]["base_url"]),
        operations_name=str(registry["operations"]),
        githubhint_name=str(registry["githubhint"]),
        abi_dir=Path(abi_dir) if abi_dir else None,
    )


def load_config(env: Mapping[str, str] | None = None) -> RelayConfig:
    """Return the merged config: defaults <- config.yaml <- env."""
    if env is None:
        env = os.environ
    merged = _load_yaml(_config_yaml_path(env))
    merged = _deep_merge(merged, _env_overrides(env))
    return config_from_dict(merged)
