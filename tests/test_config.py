import os
from pathlib import Path

import pytest

from bigclock import config as config_mod
from bigclock.config import DEFAULT_LOG_FILE, ClockConfig, load_config


def test_defaults_from_empty_env():
    cfg = load_config({})
    assert cfg == ClockConfig()
    assert cfg.log_file == DEFAULT_LOG_FILE
    assert cfg.sound_file is None


def test_values_from_env(tmp_path: Path):
    cfg = load_config(
        {
            "BIGCLOCK_NOTIFY": "off",
            "BIGCLOCK_SOUND": "No",
            "BIGCLOCK_SOUND_FILE": str(tmp_path / "ding.wav"),
            "BIGCLOCK_LOG_FILE": str(tmp_path / "clock.log"),
            "BIGCLOCK_TIME_COLOR": "green",
            "BIGCLOCK_DATE_COLOR": "cyan",
            "BIGCLOCK_BAR_COLOR": "magenta",
        }
    )
    assert cfg.notify is False
    assert cfg.sound is False
    assert cfg.sound_file == tmp_path / "ding.wav"
    assert cfg.log_file == tmp_path / "clock.log"
    assert (cfg.time_color, cfg.date_color, cfg.bar_color) == ("green", "cyan", "magenta")


def test_blank_bool_keeps_default():
    assert load_config({"BIGCLOCK_NOTIFY": "  "}).notify is True


def test_invalid_bool_raises():
    with pytest.raises(ValueError, match="Expected a boolean"):
        load_config({"BIGCLOCK_SOUND": "maybe"})


def test_overrides_skip_none():
    cfg = ClockConfig().with_overrides(notify=False, sound=None, log_file=Path("/tmp/x.log"))
    assert cfg.notify is False
    assert cfg.sound is True
    assert cfg.log_file == Path("/tmp/x.log")


def test_dotenv_in_working_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    # register the variable so teardown removes whatever load_dotenv sets
    monkeypatch.setenv("BIGCLOCK_TIME_COLOR", "unset")
    monkeypatch.delenv("BIGCLOCK_TIME_COLOR")
    monkeypatch.setattr(config_mod, "CONFIG_DIR", tmp_path / "missing")
    (tmp_path / ".env").write_text("BIGCLOCK_TIME_COLOR=yellow\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    config_mod.load_dotenv_files()

    assert os.environ["BIGCLOCK_TIME_COLOR"] == "yellow"
    assert load_config().time_color == "yellow"


def test_environment_wins_over_dotenv(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("BIGCLOCK_TIME_COLOR", "white")
    monkeypatch.setattr(config_mod, "CONFIG_DIR", tmp_path / "missing")
    (tmp_path / ".env").write_text("BIGCLOCK_TIME_COLOR=yellow\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    config_mod.load_dotenv_files()

    assert load_config().time_color == "white"
