"""
Upload progress reporting.

httpx has no upload-progress event, so the multipart body reports every file
chunk it hands to the transport (see ``uploads.multipart``). Percentages are
integers in 0..100; callers may only rely on 100 meaning completion is
imminent, not on strict monotonicity.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    ProgressCallback = Callable[[int], None]

logger = logging.getLogger(__name__)


def progress_percent(loaded: int, total: int) -> int:
    """Normalize a byte count to an integer percentage, rounding half up."""
    return min(100, math.floor(loaded / total * 100 + 0.5))


class ProgressReporter:
    """Fans byte counts out to a caller-supplied ``on_progress`` callback."""

    def __init__(self, on_progress: ProgressCallback | None = None) -> None:
        self.on_progress = on_progress
        self.last_percent: int | None = None

    def report(self, loaded: int, total: int | None) -> None:
        """Emit a percentage; silent when the total length is unknown."""
        if self.on_progress is None or not total:
            return
        percent = progress_percent(loaded, total)
        self.last_percent = percent
        self.on_progress(percent)
