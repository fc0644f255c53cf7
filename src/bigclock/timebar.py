"""Time bar lengths and the progress ratio. Pure logic, no I/O.

A time bar measures elapsed time inside a window. The window is one of a
closed set of kinds; every computation here branches over all of them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Kind(str, Enum):
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    CUSTOM = "custom"
    COUNTUP = "countup"
    TIMER = "timer"


FIXED_LENGTHS: dict[Kind, int] = {
    Kind.MINUTE: 60,
    Kind.HOUR: 60 * 60,
    Kind.DAY: 24 * 60 * 60,
}

DURATION_PART_RE = re.compile(r"(\d+)\s*([dhms])")
DURATION_FULL_RE = re.compile(r"^(?:\d+\s*[dhms]\s*)+$")
UNIT_SECONDS = {"d": 86400, "h": 3600, "m": 60, "s": 1}


@dataclass(frozen=True)
class DurationKind:
    """One time bar length. ``secs`` is only carried by custom and countup."""

    kind: Kind
    secs: int | None = None

    def __post_init__(self):
        if self.kind in (Kind.CUSTOM, Kind.COUNTUP):
            if self.secs is None or self.secs < 1:
                raise ValueError(f"{self.kind.value} length must be at least one second, got {self.secs}")

    @classmethod
    def minute(cls) -> DurationKind:
        return cls(Kind.MINUTE)

    @classmethod
    def hour(cls) -> DurationKind:
        return cls(Kind.HOUR)

    @classmethod
    def day(cls) -> DurationKind:
        return cls(Kind.DAY)

    @classmethod
    def custom(cls, secs: int) -> DurationKind:
        return cls(Kind.CUSTOM, secs)

    @classmethod
    def countup(cls, secs: int) -> DurationKind:
        return cls(Kind.COUNTUP, secs)

    @classmethod
    def timer(cls) -> DurationKind:
        return cls(Kind.TIMER)

    @property
    def repeats(self) -> bool:
        """Whether the window rolls forward once it is full."""
        return self.kind not in (Kind.COUNTUP, Kind.TIMER)

    def as_secs(self) -> int:
        """Canonical window length in seconds. Never zero."""
        if self.kind in FIXED_LENGTHS:
            return FIXED_LENGTHS[self.kind]
        if self.kind in (Kind.CUSTOM, Kind.COUNTUP):
            return int(self.secs)
        if self.kind == Kind.TIMER:
            return 1
        raise ValueError(f"Unknown time bar kind: {self.kind}")

    def __str__(self) -> str:
        return format_duration(self.as_secs())


def resolve_duration_kind(
    minute: bool = False,
    hour: bool = False,
    day: bool = False,
    custom: int | None = None,
    countup: int | None = None,
    timer: bool = False,
) -> DurationKind | None:
    """Map the time bar flags to a kind. ``None`` means no time bar.

    The flags are mutually exclusive; that is checked by the CLI, so here the
    first one set simply wins.
    """
    if minute:
        return DurationKind.minute()
    if day:
        return DurationKind.day()
    if hour:
        return DurationKind.hour()
    if custom is not None:
        return DurationKind.custom(custom)
    if countup is not None:
        return DurationKind.countup(countup)
    if timer:
        return DurationKind.timer()
    return None


def ratio(current_time: datetime, last_reset: datetime | None, kind: DurationKind | None) -> float | None:
    """Fraction of the window elapsed at ``current_time``, clamped to [0, 1].

    Elapsed time counts whole seconds, truncated toward zero like a signed
    seconds difference. Display callers pass ``now + 1s``.
    """
    if kind is None or last_reset is None:
        return None
    elapsed = int((current_time - last_reset).total_seconds())
    return min(1.0, max(0.0, elapsed / kind.as_secs()))


def parse_duration(text: str) -> int:
    """Parse '90', '45s', '5m', '1h30m' or '2d' into seconds."""
    value = text.strip().lower()
    if value.isdigit():
        secs = int(value)
    elif DURATION_FULL_RE.match(value):
        secs = sum(int(amount) * UNIT_SECONDS[unit] for amount, unit in DURATION_PART_RE.findall(value))
    else:
        raise ValueError(f"Invalid duration: {text!r}. Use seconds or a form like '90s', '5m', '1h30m', '2d'")
    if secs <= 0:
        raise ValueError(f"Duration must be at least one second: {text!r}")
    return secs


def format_duration(seconds: int | float) -> str:
    """Format seconds as '1d 2h 3m 4s', skipping zero parts."""
    total = max(0, int(seconds))
    if total == 0:
        return "0s"
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    parts = []
    for amount, unit in ((days, "d"), (hours, "h"), (minutes, "m"), (secs, "s")):
        if amount:
            parts.append(f"{amount}{unit}")
    return " ".join(parts)
