"""Clock abstraction for cache freshness checks."""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Source of the current instant, in epoch seconds."""

    def now(self) -> float: ...


class SystemClock:
    """Wall-clock time via :func:`time.time`."""

    def now(self) -> float:
        return time.time()
