"""Rich renderables for the clock screen.

Everything here is fed plain data (strings, a ratio, a label, an alert flag)
and returns a renderable; nothing reads the clock state directly.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.style import Style
from rich.table import Table
from rich.text import Text

from . import __version__
from .config import ClockConfig

APP_TITLE = "bigclock"
ALERT_STYLE = Style(color="yellow", bold=True, underline=True, blink=True, strike=True)

# Presets controlling both horizontal and vertical segment thickness, largest first
SIZE_PRESETS = (
    {"inner": 8, "vthick": 3, "gap": 2},
    {"inner": 6, "vthick": 2, "gap": 1},
    {"inner": 4, "vthick": 1, "gap": 1},
    {"inner": 2, "vthick": 1, "gap": 1},
)

# Seven-segment layout for digits 0-9.
#   a: top, b: upper-right, c: lower-right, d: bottom,
#   e: lower-left, f: upper-left, g: middle
SEGMENTS = {
    "0": {"a", "b", "c", "d", "e", "f"},
    "1": {"b", "c"},
    "2": {"a", "b", "g", "e", "d"},
    "3": {"a", "b", "g", "c", "d"},
    "4": {"f", "g", "b", "c"},
    "5": {"a", "f", "g", "c", "d"},
    "6": {"a", "f", "g", "e", "c", "d"},
    "7": {"a", "b", "c"},
    "8": {"a", "b", "c", "d", "e", "f", "g"},
    "9": {"a", "b", "c", "d", "f", "g"},
}

BLOCK = "█"


def _render_digit(segments: set[str], inner: int, vthick: int) -> list[str]:
    """One digit as ``2 * vthick + 3`` rows of width ``inner + 2``."""
    space_inner = " " * inner
    hbar = BLOCK * inner

    def horizontal(segment: str) -> str:
        return " " + (hbar if segment in segments else space_inner) + " "

    def vertical(left: str, right: str) -> str:
        return (BLOCK if left in segments else " ") + space_inner + (BLOCK if right in segments else " ")

    rows = [horizontal("a")]
    rows.extend(vertical("f", "b") for _ in range(vthick))
    rows.append(horizontal("g"))
    rows.extend(vertical("e", "c") for _ in range(vthick))
    rows.append(horizontal("d"))
    return rows


def _render_colon(inner: int, vthick: int) -> list[str]:
    """A colon with the same height as a digit, one dot per half."""
    width = 1 if inner <= 3 else 2
    rows = [" " * width for _ in range(2 * vthick + 3)]
    rows[1 + vthick // 2] = BLOCK * width
    rows[2 + vthick + vthick // 2] = BLOCK * width
    return rows


def big_time(timestr: str, inner: int = 6, vthick: int = 2, gap: int = 1) -> str:
    """Render a string of digits and colons as a multi-line banner."""
    glyphs: list[list[str]] = []
    for ch in timestr:
        if ch.isdigit():
            glyphs.append(_render_digit(SEGMENTS[ch], inner, vthick))
        elif ch == ":":
            glyphs.append(_render_colon(inner, vthick))

    if not glyphs:
        return ""

    spacer = " " * gap
    return "\n".join(spacer.join(g[r] for g in glyphs) for r in range(2 * vthick + 3))


def big_time_width(timestr: str, inner: int, gap: int) -> int:
    widths = [inner + 2 if ch.isdigit() else (1 if inner <= 3 else 2) for ch in timestr if ch.isdigit() or ch == ":"]
    return sum(widths) + gap * max(0, len(widths) - 1)


def pick_size(timestr: str, width: int) -> dict | None:
    """Largest preset that fits into ``width`` columns, or None."""
    for preset in SIZE_PRESETS:
        if big_time_width(timestr, preset["inner"], preset["gap"]) <= width:
            return preset
    return None


def timebar(ratio: float, alert: bool, color: str = "blue") -> ProgressBar:
    style = ALERT_STYLE if alert else Style(color=color)
    return ProgressBar(
        total=1.0,
        completed=min(1.0, max(0.0, ratio)),
        complete_style=style,
        finished_style=style,
        style="bar.back",
    )


def clock_face(ftime: str, width: int, color: str) -> RenderableType:
    preset = pick_size(ftime, width)
    if preset is None:
        return Align.center(Text(ftime, style=f"bold {color}"))
    banner = big_time(ftime, preset["inner"], preset["vthick"], preset["gap"])
    return Align.center(Text(banner, style=f"bold {color}"))


def render_screen(
    fdate: str,
    ftime: str,
    ratio: float | None,
    label: str | None,
    alert: bool,
    config: ClockConfig,
    width: int,
    height: int,
) -> Panel:
    """Compose the whole screen. The bar is only drawn when ``ratio`` is set."""
    pad_x = width // 8
    pad_y = height // 8
    inner_width = max(1, width - 2 - 2 * pad_x)

    bottom = Table.grid(expand=True, padding=(0, 1))
    bottom.add_column(ratio=1)
    bottom.add_column(ratio=1)

    date_text = Text(fdate, style=config.date_color)
    if ratio is None:
        bottom.add_row(date_text, "")
    else:
        # the bar does not end its line, so the label gets a row of its own
        bottom.add_row(date_text, timebar(ratio, alert, config.bar_color))
        if label:
            bottom.add_row("", Align.center(Text(label)))

    body = Group(clock_face(ftime, inner_width, config.time_color), Text(""), bottom)
    return Panel(
        body,
        title=Text(APP_TITLE, style="bold"),
        subtitle=Text(__version__),
        padding=(pad_y, pad_x),
    )
