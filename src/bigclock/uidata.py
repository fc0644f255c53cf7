"""Double-buffered frame data used to skip redundant redraws."""

from __future__ import annotations

import logging
from datetime import datetime

from .timebar import DurationKind, Kind

logger = logging.getLogger("bigclock.uidata")


class FrameData:
    """Two slots (current and previous) toggled by XOR on every update."""

    def __init__(self, kind: DurationKind | None = None):
        self._kind = kind
        self._now: list[datetime | None] = [None, None]
        self._fdate: list[str] = ["", ""]
        self._ftime: list[str] = ["", ""]
        self._ratio: list[float | None] = [None, None]
        self._idx = 0

    def update(self, now: datetime, fdate: str, ftime: str, timebar_ratio: float | None) -> None:
        self._idx ^= 1
        self._now[self._idx] = now
        self._fdate[self._idx] = fdate
        self._ftime[self._idx] = ftime
        self._ratio[self._idx] = timebar_ratio
        if self.changed():
            logger.debug(f"update with change: {fdate} {ftime} ratio={timebar_ratio}")

    def changed(self) -> bool:
        """Did the displayed date or time change with the last update?"""
        # the ratio is left out so the ui only redraws when the second changes
        return self._fdate[0] != self._fdate[1] or self._ftime[0] != self._ftime[1]

    @property
    def index(self) -> int:
        return self._idx

    @property
    def fdate(self) -> str:
        return self._fdate[self._idx]

    @property
    def ftime(self) -> str:
        return self._ftime[self._idx]

    @property
    def now(self) -> datetime | None:
        return self._now[self._idx]

    @property
    def timebar_ratio(self) -> float | None:
        if self._kind is not None and self._kind.kind == Kind.TIMER:
            return 0.0
        return self._ratio[self._idx]
