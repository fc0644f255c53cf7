"""Countdown-complete alerts: terminal bell, desktop notification and a sound clip.

Every channel reports a result dict instead of raising; a failed alert must
never stop the clock.
"""

from __future__ import annotations

import logging
import platform
import shutil
import subprocess
import threading
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console

from .config import ClockConfig
from .timebar import DurationKind

logger = logging.getLogger("bigclock.notify")

APP_NAME = "bigclock"
NOTIFY_TIMEOUT_SECS = 5
SOUND_TIMEOUT_SECS = 30

SOUND_CANDIDATES: dict[str, tuple[Path, ...]] = {
    "Darwin": (
        Path("/System/Library/Sounds/Glass.aiff"),
        Path("/System/Library/Sounds/Ping.aiff"),
    ),
    "Linux": (
        Path("/usr/share/sounds/freedesktop/stereo/complete.oga"),
        Path("/usr/share/sounds/freedesktop/stereo/bell.oga"),
        Path("/usr/share/sounds/alsa/Front_Center.wav"),
    ),
}


def detect_sound_player() -> list[str] | None:
    """Return the command prefix of the first available audio player."""

    system = platform.system()

    if system == "Darwin":
        if shutil.which("afplay"):
            return ["afplay"]
        return None

    if system == "Linux":
        for candidate in ("paplay", "pw-play", "aplay"):
            if shutil.which(candidate):
                return [candidate, "-q"] if candidate == "aplay" else [candidate]
        return None

    return None


def default_sound_file() -> Path | None:
    for candidate in SOUND_CANDIDATES.get(platform.system(), ()):
        if candidate.exists():
            return candidate
    return None


def _notification_command(title: str, body: str) -> list[str] | None:
    system = platform.system()

    if system == "Linux":
        if shutil.which("notify-send"):
            return ["notify-send", "--app-name", APP_NAME, title, body]
        return None

    if system == "Darwin":
        if shutil.which("osascript"):
            title_literal = title.replace('"', '\\"')
            body_literal = body.replace('"', '\\"')
            return ["osascript", "-e", f'display notification "{body_literal}" with title "{title_literal}"']
        return None

    return None


def send_desktop_notification(title: str, body: str) -> dict:
    """Show an OS notification through the platform's command-line tool."""
    command = _notification_command(title, body)
    if command is None:
        return {"success": False, "error": f"no notification tool for {platform.system()}"}

    try:
        result = subprocess.run(command, capture_output=True, timeout=NOTIFY_TIMEOUT_SECS)
        if result.returncode == 0:
            return {"success": True, "method": command[0]}
        return {"success": False, "error": f"{command[0]} failed: {result.stderr.decode(errors='replace')[:100]}"}
    except subprocess.TimeoutExpired:
        return {"success": False, "error": "Notification timed out"}
    except OSError as e:
        return {"success": False, "error": str(e)}


def play_sound(sound_path: Path, player: Optional[Sequence[str]] = None) -> dict:
    """Play ``sound_path`` to completion. Blocks; see ``play_sound_async``."""
    command = list(player) if player else detect_sound_player()
    if command is None:
        return {"success": False, "error": f"no audio player for {platform.system()}"}
    if not sound_path.exists():
        return {"success": False, "error": f"sound file not found: {sound_path}"}

    try:
        result = subprocess.run([*command, str(sound_path)], capture_output=True, timeout=SOUND_TIMEOUT_SECS)
        if result.returncode == 0:
            return {"success": True, "method": command[0], "file": str(sound_path)}
        return {"success": False, "error": f"{command[0]} failed: {result.stderr.decode(errors='replace')[:100]}"}
    except subprocess.TimeoutExpired:
        return {"success": False, "error": "Sound playback timed out"}
    except OSError as e:
        return {"success": False, "error": str(e)}


def _notify_and_log(title: str, body: str) -> None:
    result = send_desktop_notification(title, body)
    if not result["success"]:
        logger.warning(f"could not send desktop notification: {result['error']}")


def send_desktop_notification_async(title: str, body: str) -> threading.Thread:
    """Like ``send_desktop_notification`` but on a daemon thread, so a slow tool never holds up a tick."""
    thread = threading.Thread(
        target=_notify_and_log,
        args=(title, body),
        name="bigclock-notify",
        daemon=True,
    )
    thread.start()
    return thread


def _play_and_log(sound_path: Path, player: Optional[Sequence[str]]) -> None:
    result = play_sound(sound_path, player)
    if not result["success"]:
        logger.warning(f"could not play sound: {result['error']}")


def play_sound_async(sound_path: Path, player: Optional[Sequence[str]] = None) -> threading.Thread:
    """Start playback on a daemon thread and return it without waiting."""
    thread = threading.Thread(
        target=_play_and_log,
        args=(sound_path, player),
        name="bigclock-sound",
        daemon=True,
    )
    thread.start()
    return thread


class Notifier:
    """Callable handed to the notification gate."""

    def __init__(self, config: ClockConfig, console: Optional[Console] = None):
        self.config = config
        self.console = console

    def __call__(self, kind: DurationKind) -> dict:
        title = APP_NAME
        body = f"countdown of {kind} finished"
        results: dict[str, dict] = {}

        if self.console is not None:
            self.console.bell()
            results["bell"] = {"success": True, "method": "bell"}

        if self.config.notify:
            send_desktop_notification_async(title, body)
            results["desktop"] = {"success": True, "method": "thread"}

        if self.config.sound:
            sound_path = self.config.sound_file or default_sound_file()
            if sound_path is None:
                results["sound"] = {"success": False, "error": "no sound file available"}
                logger.warning("could not play sound: no sound file available")
            else:
                play_sound_async(sound_path)
                results["sound"] = {"success": True, "method": "thread", "file": str(sound_path)}

        logger.debug(f"notification results: {results}")
        return results
