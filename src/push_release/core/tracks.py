"""Release-track resolution and enablement policy."""

from __future__ import annotations

import logging
from typing import Iterable

from push_release.model import FALLBACK_TRACK, TRACK_CODES
from push_release.model.release import TrackResolution

logger = logging.getLogger(__name__)


class TrackResolver:
    """Map raw track labels to codes and check them against the enabled set.

    Labels are matched exactly, so ``Stable`` is unknown.  Unknown or missing
    labels resolve to ``testing``.  Enablement is decided by the resolved
    label, so ``master`` must itself be enabled even though it
    shares the ``nightly`` code.
    """

    def __init__(self, enabled_tracks: Iterable[str]) -> None:
        self._enabled = frozenset(t.lower() for t in enabled_tracks)

    def resolve(self, raw_label: str | None) -> TrackResolution:
        if raw_label is not None and raw_label in TRACK_CODES:
            label = raw_label
        else:
            label = FALLBACK_TRACK
        code = TRACK_CODES[label]
        enabled = label in self._enabled
        logger.info(
            "Track: %s => %s (%d) [enabled: %s]", raw_label, label, code, enabled
        )
        return TrackResolution(raw_label=raw_label, label=label, code=code, enabled=enabled)
