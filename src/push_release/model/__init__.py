"""Enums shared across the pipeline and the HTTP layer."""

from __future__ import annotations

from enum import Enum, IntEnum


class TrackCode(IntEnum):
    """Numeric release-track codes stored by the operations contract."""

    STABLE = 1
    BETA = 2
    NIGHTLY = 3
    TESTING = 4


class MetadataSourceKind(str, Enum):
    """Where release metadata is read from for a commit."""

    MANIFEST = "manifest"
    LEGACY = "legacy"


# Label -> code.  ``master`` is an alias of ``nightly``.
TRACK_CODES: dict[str, TrackCode] = {
    "stable": TrackCode.STABLE,
    "beta": TrackCode.BETA,
    "nightly": TrackCode.NIGHTLY,
    "master": TrackCode.NIGHTLY,
    "testing": TrackCode.TESTING,
}

FALLBACK_TRACK = "testing"
