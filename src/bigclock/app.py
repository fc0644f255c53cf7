"""The tick loop: sample time, update the frame, redraw on change, poll keys, tick."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Callable, Optional, Protocol

from rich.console import Console
from rich.live import Live
from rich.panel import Panel

from .clock import DATE_FORMAT, TIME_FORMAT, Clock, round_to_second
from .config import ClockConfig
from .terminal import KeyReader, is_exit_key
from .uidata import FrameData
from .ui import render_screen

logger = logging.getLogger("bigclock.app")

TICK_RATE = 0.1  # seconds; the reset guards in clock.py assume 10 Hz


class KeySource(Protocol):
    def __enter__(self) -> "KeySource": ...

    def __exit__(self, *exc_info) -> None: ...

    def poll(self, timeout: float) -> str | None: ...


class ClockApp:
    """Owns the loop. Clock, time source and key source are injectable."""

    def __init__(
        self,
        clock: Clock,
        config: ClockConfig,
        console: Optional[Console] = None,
        keys: Optional[KeySource] = None,
        now: Callable[[], datetime] = datetime.now,
        monotonic: Callable[[], float] = time.monotonic,
        tick_rate: float = TICK_RATE,
    ):
        self.clock = clock
        self.config = config
        self.console = console or Console()
        self.keys = keys if keys is not None else KeyReader()
        self.now = now
        self.monotonic = monotonic
        self.tick_rate = tick_rate
        self.frame = FrameData(clock.kind)
        self.renders = 0

    def sample(self) -> None:
        """Take the current time into the frame buffer."""
        now = self.now()
        shown = round_to_second(now)
        self.frame.update(
            now,
            shown.strftime(DATE_FORMAT),
            shown.strftime(TIME_FORMAT),
            self.clock.timebar_ratio(now),
        )

    def screen(self) -> Panel:
        frame = self.frame
        size = self.console.size
        return render_screen(
            frame.fdate,
            frame.ftime,
            frame.timebar_ratio,
            self.clock.label(frame.now) if frame.now is not None else None,
            self.clock.did_notify,
            self.config,
            size.width,
            size.height,
        )

    def run(self) -> None:
        """Run until an exit key is pressed. Raises ClockSetupError from setup."""
        self.clock.setup(self.now())
        logger.info(f"starting clock (time bar: {self.clock.kind.kind.value if self.clock.kind else 'none'})")

        last_tick = self.monotonic()
        with self.keys as keys, Live(console=self.console, screen=True, auto_refresh=False) as live:
            while True:
                self.sample()
                if self.frame.changed():
                    live.update(self.screen(), refresh=True)
                    self.renders += 1

                timeout = max(0.0, self.tick_rate - (self.monotonic() - last_tick))
                key = keys.poll(timeout)
                if is_exit_key(key):
                    logger.info(f"exit key {key!r} pressed")
                    return

                if self.monotonic() - last_tick >= self.tick_rate:
                    self.clock.on_tick(self.now())
                    last_tick = self.monotonic()
