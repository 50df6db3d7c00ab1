"""Version encoding for on-chain comparison.

``major.minor.patch`` packs into ``major*65536 + minor*256 + patch``, the
24-bit ``semver`` argument of the operations contract.  Each component must
fit in one byte; anything larger would wrap into its neighbour.
"""

from __future__ import annotations

import re

from push_release.errors import ManifestError
from push_release.model.release import SemVer

_VERSION_RE = re.compile(r"^\s*v?([0-9]+)\.([0-9]+)\.([0-9]+)")
_COMPONENT_MAX = 255


def parse_version(text: str) -> SemVer:
    """Parse the leading ``x.y.z`` of *text* (pre-release suffixes are ignored)."""
    m = _VERSION_RE.match(text or "")
    if m is None:
        raise ManifestError(f"Unable to parse version from {text!r}")
    major, minor, patch = (int(g) for g in m.groups())
    for label, value in (("major", major), ("minor", minor), ("patch", patch)):
        if value > _COMPONENT_MAX:
            raise ManifestError(
                f"Version {text!r}: {label} component {value} exceeds {_COMPONENT_MAX}"
            )
    return SemVer(major, minor, patch)


def encode_version(text: str) -> int:
    """``encode_version("1.7.13") == 67341``."""
    return parse_version(text).encode()
