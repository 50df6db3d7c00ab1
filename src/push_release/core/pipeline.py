"""Push orchestrators: secret gate, validation, metadata, track, ledger.

Both flows are linear with early exits.  Each step returns a value or raises
a :class:`~push_release.errors.PipelineError`; the only error that is logged
and swallowed is a missing fork block, which defaults to 0.  Nothing is
retried: a failed push must be re-sent by the caller.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, cast

from eth_abi.exceptions import EncodingError

from push_release.core.config import RelayConfig
from push_release.core.manifest import MetadataSource
from push_release.core.network import NetworkResolver
from push_release.core.registry import RegistryClient
from push_release.core.tracks import TrackResolver
from push_release.core.validation import RequestValidator, check_secret
from push_release.errors import (
    ContractLookupError,
    LedgerRPCError,
    ManifestError,
    MetadataFetchError,
    SoftDeclined,
    UpstreamFailed,
)
from push_release.model.release import TrackResolution

logger = logging.getLogger(__name__)

# Commits are 20 bytes; contract release ids are 32-byte words.
RELEASE_ID_PREFIX = "0x" + "00" * 12

_UPSTREAM_ERRORS = (
    MetadataFetchError,
    ManifestError,
    LedgerRPCError,
    ContractLookupError,
    EncodingError,
)


def release_id(commit: str) -> str:
    """Left-pad a 40-hex-char commit into a bytes32 release id."""
    return RELEASE_ID_PREFIX + commit.lower()


@contextmanager
def _upstream(what: str) -> Iterator[None]:
    try:
        yield
    except _UPSTREAM_ERRORS as exc:
        logger.warning("%s: %s", what, exc)
        raise UpstreamFailed(f"{what}: {exc}") from exc


class _Orchestrator:
    def __init__(
        self,
        config: RelayConfig,
        source: MetadataSource,
        registry: RegistryClient,
        network: NetworkResolver,
    ) -> None:
        self.config = config
        self.source = source
        self.registry = registry
        self.network = network
        self.validator = RequestValidator(config.supported_platforms)
        self.tracks = TrackResolver(config.enabled_tracks)

    def _require_enabled(self, track: TrackResolution) -> None:
        if not track.enabled:
            logger.info("Track %s is not enabled; nothing to register", track.label)
            raise SoftDeclined(
                f"Track {track.label} (from {track.raw_label!r}) is not enabled"
            )


class ReleaseOrchestrator(_Orchestrator):
    """Registers a release (commit, fork block, track, version) in operations."""

    def push_release(self, *, tag: str, commit: str, secret: str | None) -> str:
        check_secret(secret, self.config.secret_hash)
        self.validator.validate_release(tag=tag, commit=commit, secret=secret)
        logger.info("Pushing commit: %s (tag: %s)", commit, tag)

        with _upstream(f"Unable to read release metadata for {commit}"):
            metadata = self.source.load(commit)

        track = self.tracks.resolve(metadata.track)
        self._require_enabled(track)

        with _upstream("Unable to query network"):
            network = self.network.resolve_network()
        fork_block = metadata.fork_block(network)
        if fork_block is None:
            logger.warning("No fork block for network %s in release metadata; using 0", network)
            fork_block = 0
        logger.info("Fork supported: %d", fork_block)

        semver = metadata.version.encode()
        logger.info("Version: %s = %d", metadata.version, semver)

        with _upstream("Unable to register release"):
            registry = self.registry.registry_address()
            operations = self.registry.lookup(registry, self.config.operations_name)
            logger.info(
                "Registering release: %s, %d, %d, %d, %s",
                release_id(commit), fork_block, track.code, semver, metadata.critical,
            )
            self.registry.submit(
                self.registry.operations_abi,
                operations,
                "addRelease",
                [release_id(commit), fork_block, int(track.code), semver, metadata.critical],
            )

        return f"RELEASE: {commit}/{track.label}/{track.raw_label or ''}/{fork_block}"


class BuildOrchestrator(_Orchestrator):
    """Registers a platform binary: URL hint in githubhint, checksum in operations."""

    def push_build(
        self,
        *,
        tag: str,
        platform: str,
        secret: str | None,
        commit: str | None,
        filename: str | None,
        sha3: str | None,
    ) -> str:
        check_secret(secret, self.config.secret_hash)
        self.validator.validate_build(
            tag=tag,
            platform=platform,
            commit=commit,
            sha3=sha3,
            filename=filename,
            secret=secret,
        )
        # Validation guarantees these are present.
        commit, sha3, filename = cast(str, commit), cast(str, sha3), cast(str, filename)

        url = self.config.asset_url(tag, platform, filename)
        summary = f"BUILD: {platform}/{commit} -> {sha3}/{tag}/{filename} [{url}]"
        logger.info("%s", summary)

        with _upstream(f"Unable to read release track for {commit}"):
            raw_track = self.source.load_track(commit)

        track = self.tracks.resolve(raw_track)
        self._require_enabled(track)

        checksum = "0x" + sha3.lower()
        with _upstream("Unable to register build"):
            registry = self.registry.registry_address()
            githubhint = self.registry.lookup(registry, self.config.githubhint_name)
            logger.info("Registering on GithubHint: %s, %s", sha3, url)
            self.registry.submit(
                self.registry.githubhint_abi, githubhint, "hintURL", [checksum, url]
            )

            operations = self.registry.lookup(registry, self.config.operations_name)
            logger.info("Registering platform binary: %s, %s, %s", commit, platform, sha3)
            self.registry.submit(
                self.registry.operations_abi,
                operations,
                "addChecksum",
                [release_id(commit), platform, checksum],
            )

        return summary
