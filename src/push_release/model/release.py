"""Release records built fresh for each request."""

from __future__ import annotations

from dataclasses import dataclass, field

from . import TrackCode


@dataclass(frozen=True, slots=True)
class SemVer:
    """Three-part numeric version."""

    major: int
    minor: int
    patch: int

    def encode(self) -> int:
        """Pack into the single ordered integer the contract compares."""
        return self.major * 65536 + self.minor * 256 + self.patch

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True, slots=True)
class ReleaseMetadata:
    """Normalized release metadata for one commit.

    ``forks`` maps lower-cased network keys to fork-activation block numbers.
    ``track`` is the label exactly as found in the source, or ``None``.
    """

    version: SemVer
    track: str | None = None
    forks: dict[str, int] = field(default_factory=dict)
    critical: bool = False

    def fork_block(self, network: str) -> int | None:
        return self.forks.get(network.lower())


@dataclass(frozen=True, slots=True)
class TrackResolution:
    """Outcome of mapping a raw track label onto the track table."""

    raw_label: str | None
    label: str
    code: TrackCode
    enabled: bool
