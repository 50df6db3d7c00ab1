"""Release metadata: manifest parsing and the per-commit metadata sources.

The preferred source is one package manifest (``Cargo.toml``)::

    [package]
    version = "1.7.13"

    [package.metadata]
    track = "stable"
    critical = false

    [package.metadata.forks]
    foundation = 4370000
    kovan = 5067000

``[package.metadata.networks]`` with ``name = { forkBlock = n, critical = b }``
entries is accepted in place of (or alongside) ``forks``.

The legacy source scrapes three source files with regular expressions.  A
run uses exactly one source; results are never mixed.
"""

from __future__ import annotations

import logging
import re
import tomllib
from typing import Any, Protocol

from push_release.core.semver import parse_version
from push_release.errors import ManifestError
from push_release.model import MetadataSourceKind
from push_release.model.release import ReleaseMetadata
from push_release.providers.base import MetadataFetcher

logger = logging.getLogger(__name__)

# addRelease takes the fork block as uint32.
FORK_BLOCK_MAX = 2**32 - 1


# ── manifest parsing ────────────────────────────────────────────────


def _fork_block(network: str, value: Any) -> int:
    """Coerce a fork-block entry to a uint32, defaulting to 0."""
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= FORK_BLOCK_MAX:
        return value
    logger.warning("Unparseable fork block for %s: %r; using 0", network, value)
    return 0


def _manifest_version(doc: dict) -> str:
    package = doc.get("package")
    if not isinstance(package, dict):
        raise ManifestError("Manifest has no [package] table")
    version = package.get("version")
    # ``version.workspace = true`` inherits from [workspace.package].
    if isinstance(version, dict) and version.get("workspace"):
        version = doc.get("workspace", {}).get("package", {}).get("version")
    if not isinstance(version, str):
        raise ManifestError("Manifest has no package version")
    return version


def parse_manifest(text: str) -> ReleaseMetadata:
    """Parse manifest text into :class:`ReleaseMetadata`.

    Raises ``ManifestError`` if the document is not valid TOML or has no
    discoverable version.
    """
    try:
        doc = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ManifestError(f"Unable to parse manifest: {exc}") from exc

    version = parse_version(_manifest_version(doc))
    metadata = doc["package"].get("metadata") or {}
    if not isinstance(metadata, dict):
        metadata = {}

    track = metadata.get("track")
    if not isinstance(track, str):
        track = None

    critical = bool(metadata.get("critical", False))
    forks: dict[str, int] = {}

    raw_forks = metadata.get("forks") or {}
    if isinstance(raw_forks, dict):
        for name, value in raw_forks.items():
            forks[name.lower()] = _fork_block(name, value)

    networks = metadata.get("networks") or {}
    if isinstance(networks, dict):
        for name, entry in networks.items():
            if isinstance(entry, dict):
                forks[name.lower()] = _fork_block(name, entry.get("forkBlock"))
                critical = critical or entry.get("critical") is True
            else:
                forks[name.lower()] = _fork_block(name, entry)

    return ReleaseMetadata(version=version, track=track, forks=forks, critical=critical)


# ── legacy regex scraping ───────────────────────────────────────────

LEGACY_TRACK_PATH = "util/src/misc.rs"
LEGACY_FORKS_PATH = "ethcore/src/ethereum/mod.rs"
LEGACY_VERSION_PATH = "Cargo.toml"

_TRACK_RE = re.compile(r"const THIS_TRACK\s*:\s*&'static str\s*=\s*\"([a-z]*)\";")
_FORK_RE = re.compile(r"pub const FORK_SUPPORTED_([A-Z0-9_]+)\s*:\s*u64\s*=\s*(\d+);")
_VERSION_RE = re.compile(r'version\s*=\s*"([0-9]+\.[0-9]+\.[0-9]+)"')


def parse_legacy_track(text: str) -> str | None:
    m = _TRACK_RE.search(text)
    if m is None:
        logger.warning("No THIS_TRACK constant found; treating track as unknown")
        return None
    return m.group(1)


def parse_legacy_forks(text: str) -> dict[str, int]:
    return {name.lower(): _fork_block(name, block) for name, block in _FORK_RE.findall(text)}


def parse_legacy_version(text: str) -> str:
    m = _VERSION_RE.search(text)
    if m is None:
        raise ManifestError("Unable to find a version in Cargo.toml")
    return m.group(1)


# ── sources ─────────────────────────────────────────────────────────


class MetadataSource(Protocol):
    def load(self, commit: str) -> ReleaseMetadata: ...

    def load_track(self, commit: str) -> str | None: ...


class ManifestSource:
    """One fetch of one structured manifest."""

    def __init__(self, fetcher: MetadataFetcher, path: str = "Cargo.toml") -> None:
        self._fetcher = fetcher
        self.path = path

    def load(self, commit: str) -> ReleaseMetadata:
        return parse_manifest(self._fetcher.fetch(commit, self.path))

    def load_track(self, commit: str) -> str | None:
        return self.load(commit).track


class LegacySource:
    """Three fetches: track constant, fork constants, manifest version."""

    def __init__(self, fetcher: MetadataFetcher) -> None:
        self._fetcher = fetcher

    def load(self, commit: str) -> ReleaseMetadata:
        track = self.load_track(commit)
        forks = parse_legacy_forks(self._fetcher.fetch(commit, LEGACY_FORKS_PATH))
        if not forks:
            logger.warning("No FORK_SUPPORTED_* constants found in %s", LEGACY_FORKS_PATH)
        version = parse_version(
            parse_legacy_version(self._fetcher.fetch(commit, LEGACY_VERSION_PATH))
        )
        return ReleaseMetadata(version=version, track=track, forks=forks, critical=False)

    def load_track(self, commit: str) -> str | None:
        return parse_legacy_track(self._fetcher.fetch(commit, LEGACY_TRACK_PATH))


def metadata_source(
    kind: MetadataSourceKind, fetcher: MetadataFetcher, manifest_path: str = "Cargo.toml"
) -> MetadataSource:
    if kind is MetadataSourceKind.LEGACY:
        return LegacySource(fetcher)
    return ManifestSource(fetcher, manifest_path)
