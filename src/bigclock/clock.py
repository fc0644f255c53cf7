"""Clock controller: anchor management, completion gate and bar label.

All state lives on one ``Clock`` object driven by the tick loop. The time
source is injected through ``now`` parameters for deterministic testing.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Optional

from .timebar import DurationKind, Kind, format_duration, ratio

logger = logging.getLogger("bigclock.clock")

TIME_FORMAT = "%H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"

ONE_SECOND = timedelta(seconds=1)
NOTIFY_EPSILON = 1e-6

# Minimum time since the last reset before a boundary may fire again.
# Tuned for a 10 Hz tick; rederive them if the tick rate changes.
CUSTOM_RESET_GUARD = timedelta(milliseconds=100)
MINUTE_RESET_GUARD = timedelta(seconds=1)
HOUR_RESET_GUARD = timedelta(minutes=1)
DAY_RESET_GUARD = timedelta(hours=1)

NotifyCallback = Callable[[DurationKind], object]


class ClockError(Exception):
    """Base error for the clock core."""


class ClockSetupError(ClockError):
    """The wall clock produced a time the anchor cannot be built from."""


def round_to_second(moment: datetime) -> datetime:
    """Round to the nearest whole second."""
    rounded = moment.replace(microsecond=0)
    if moment.microsecond >= 500_000:
        rounded += ONE_SECOND
    return rounded


class GateState(str, Enum):
    PENDING = "pending"
    NOTIFIED = "notified"


class NotificationGate:
    """Fires the countdown-complete alert exactly once per run."""

    def __init__(self, notifier: Optional[NotifyCallback] = None):
        self._notifier = notifier
        self._state = GateState.PENDING

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def did_notify(self) -> bool:
        return self._state == GateState.NOTIFIED

    def poll(self, kind: DurationKind | None, bar_ratio: float | None) -> bool:
        """Latch and notify if a countup just filled up. Returns True on the transition."""
        if self._state == GateState.NOTIFIED:
            return False
        if kind is None or kind.kind != Kind.COUNTUP or bar_ratio is None:
            return False
        if abs(bar_ratio - 1.0) >= NOTIFY_EPSILON:
            return False

        self._state = GateState.NOTIFIED
        logger.info(f"Countdown of {kind} finished")
        if self._notifier is not None:
            try:
                self._notifier(kind)
            except Exception as e:
                logger.error(f"could not notify: {e}")
                logger.debug("complete notification error", exc_info=True)
        return True


class Clock:
    """Owns the time bar anchor and the notification state for one run."""

    def __init__(self, kind: DurationKind | None, notifier: Optional[NotifyCallback] = None):
        self._kind = kind
        self._last_reset: datetime | None = None
        self._started_at: datetime | None = None
        self._gate = NotificationGate(notifier)

    # ---- Read-only properties ----

    @property
    def kind(self) -> DurationKind | None:
        return self._kind

    @property
    def last_reset(self) -> datetime | None:
        return self._last_reset

    @property
    def started_at(self) -> datetime | None:
        return self._started_at

    @property
    def gate(self) -> NotificationGate:
        return self._gate

    @property
    def did_notify(self) -> bool:
        return self._gate.did_notify

    # ---- Core methods ----

    def setup(self, now: datetime) -> None:
        """Place the initial anchor. Raises ClockSetupError on a corrupt clock."""
        kind = self._kind
        try:
            self._started_at = round_to_second(now)
            if kind is None or kind.kind in (Kind.CUSTOM, Kind.COUNTUP, Kind.TIMER):
                self._last_reset = now
            elif kind.kind == Kind.MINUTE:
                self._last_reset = now.replace(second=0, microsecond=0)
            elif kind.kind == Kind.HOUR:
                self._last_reset = now.replace(minute=0, second=0, microsecond=0)
            elif kind.kind == Kind.DAY:
                self._last_reset = now.replace(hour=0, minute=0, second=0, microsecond=0)
            else:
                raise ClockSetupError(f"Unknown time bar kind: {kind.kind}")
        except ValueError as e:
            raise ClockSetupError(f"tried to use a time that does not exist: {e}") from e
        logger.debug(f"set up initial last reset as {self._last_reset}")

    def maybe_reset(self, now: datetime) -> bool:
        """Roll the anchor forward at a window boundary. Returns True if it moved."""
        kind = self._kind
        if kind is None or self._last_reset is None:
            return False

        since_last_reset = now - self._last_reset

        if kind.kind in (Kind.COUNTUP, Kind.TIMER):
            return False

        if kind.kind == Kind.CUSTOM:
            if (since_last_reset >= CUSTOM_RESET_GUARD
                    and int(since_last_reset.total_seconds()) >= kind.as_secs()):
                self._last_reset = now
                logger.debug(f"reset the time of the time bar (custom {kind})")
                return True
            return False

        if kind.kind == Kind.MINUTE:
            if since_last_reset >= MINUTE_RESET_GUARD and now.second == 0:
                self._last_reset = now.replace(microsecond=0)
                logger.debug("reset the time of the time bar (minute)")
                return True
            return False

        if kind.kind == Kind.HOUR:
            if since_last_reset >= HOUR_RESET_GUARD and now.minute == 0:
                self._last_reset = now
                logger.debug("reset the time of the time bar (hour)")
                return True
            return False

        if kind.kind == Kind.DAY:
            if since_last_reset >= DAY_RESET_GUARD and now.hour == 0:
                self._last_reset = now
                logger.debug("reset the time of the time bar (day)")
                return True
            return False

        return False

    def timebar_ratio(self, now: datetime) -> float | None:
        """Ratio for display at wall-clock ``now``.

        Wall-clock seconds are whole completed seconds, so the display is
        evaluated one second ahead; otherwise it lags a tick behind at every
        boundary.
        """
        return ratio(now + ONE_SECOND, self._last_reset, self._kind)

    def on_tick(self, now: datetime) -> None:
        self.maybe_reset(now)
        self._gate.poll(self._kind, self.timebar_ratio(now))

    def label(self, now: datetime) -> str | None:
        if self._kind is None or self._last_reset is None:
            return None
        return format_label(
            self._kind,
            now,
            self._last_reset,
            self._started_at or round_to_second(self._last_reset),
            self.did_notify,
        )


def format_label(
    kind: DurationKind,
    now: datetime,
    last_reset: datetime,
    started_at: datetime,
    did_notify: bool = False,
) -> str:
    """Human readable text shown under the time bar."""
    anchor = round_to_second(last_reset)

    if kind.kind == Kind.COUNTUP and did_notify:
        elapsed = float(kind.as_secs())
    elif kind.kind == Kind.HOUR:
        elapsed = (now - anchor).total_seconds()
    else:
        elapsed = (round_to_second(now) - anchor).total_seconds()
    time_now = format_duration(elapsed)

    if kind.kind == Kind.TIMER:
        return f"{started_at.strftime(TIME_FORMAT)} + {time_now}"

    # Fixed windows start on a whole minute; otherwise the end time drifts
    # by the seconds the anchor was taken at.
    if kind.kind in (Kind.CUSTOM, Kind.COUNTUP):
        window_start = anchor
    else:
        window_start = anchor.replace(second=0)
    until = (window_start + timedelta(seconds=kind.as_secs())).strftime(TIME_FORMAT)

    return f"{time_now} / {kind} | {window_start.strftime(TIME_FORMAT)} -> {until}"
