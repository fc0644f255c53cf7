"""Unit tests for time bar kinds, the ratio and duration helpers."""

from datetime import datetime, timedelta

import pytest

from bigclock.timebar import (
    DurationKind,
    Kind,
    format_duration,
    parse_duration,
    ratio,
    resolve_duration_kind,
)

ANCHOR = datetime(2026, 10, 19, 12, 34, 0)

ALL_KINDS = [
    DurationKind.minute(),
    DurationKind.hour(),
    DurationKind.day(),
    DurationKind.custom(90),
    DurationKind.countup(300),
    DurationKind.timer(),
]


# ---- DurationKind ----

class TestDurationKind:
    def test_fixed_lengths(self):
        assert DurationKind.minute().as_secs() == 60
        assert DurationKind.hour().as_secs() == 3600
        assert DurationKind.day().as_secs() == 86400

    def test_carried_lengths(self):
        assert DurationKind.custom(42).as_secs() == 42
        assert DurationKind.countup(7).as_secs() == 7

    def test_timer_never_divides_by_zero(self):
        assert DurationKind.timer().as_secs() == 1

    @pytest.mark.parametrize("factory", [DurationKind.custom, DurationKind.countup])
    @pytest.mark.parametrize("secs", [0, -5])
    def test_rejects_empty_window(self, factory, secs):
        with pytest.raises(ValueError, match="at least one second"):
            factory(secs)

    def test_resolve_rejects_zero_length(self):
        with pytest.raises(ValueError):
            resolve_duration_kind(countup=0)

    def test_repeats(self):
        assert DurationKind.minute().repeats
        assert DurationKind.custom(5).repeats
        assert not DurationKind.countup(5).repeats
        assert not DurationKind.timer().repeats

    def test_str_is_formatted_length(self):
        assert str(DurationKind.minute()) == "1m"
        assert str(DurationKind.custom(90)) == "1m 30s"
        assert str(DurationKind.day()) == "1d"


# ---- resolve_duration_kind ----

class TestResolve:
    def test_nothing_selected(self):
        assert resolve_duration_kind() is None

    @pytest.mark.parametrize(
        "kwargs, expected",
        [
            ({"minute": True}, DurationKind.minute()),
            ({"hour": True}, DurationKind.hour()),
            ({"day": True}, DurationKind.day()),
            ({"custom": 30}, DurationKind.custom(30)),
            ({"countup": 600}, DurationKind.countup(600)),
            ({"timer": True}, DurationKind.timer()),
        ],
    )
    def test_single_flag(self, kwargs, expected):
        assert resolve_duration_kind(**kwargs) == expected

    def test_kind_tags(self):
        assert resolve_duration_kind(countup=5).kind == Kind.COUNTUP


# ---- ratio ----

class TestRatio:
    def test_none_without_kind(self):
        assert ratio(ANCHOR, ANCHOR, None) is None

    def test_none_without_anchor(self):
        assert ratio(ANCHOR, None, DurationKind.minute()) is None

    def test_start_of_minute(self):
        assert ratio(ANCHOR, ANCHOR, DurationKind.minute()) == 0.0

    def test_half_minute(self):
        assert ratio(ANCHOR + timedelta(seconds=30), ANCHOR, DurationKind.minute()) == 0.5

    def test_last_second(self):
        value = ratio(ANCHOR + timedelta(seconds=59), ANCHOR, DurationKind.minute())
        assert value == pytest.approx(0.9833, abs=1e-4)

    def test_full_minute_clamps(self):
        assert ratio(ANCHOR + timedelta(seconds=60), ANCHOR, DurationKind.minute()) == 1.0
        assert ratio(ANCHOR + timedelta(seconds=600), ANCHOR, DurationKind.minute()) == 1.0

    def test_before_anchor_clamps_to_zero(self):
        assert ratio(ANCHOR - timedelta(seconds=5), ANCHOR, DurationKind.minute()) == 0.0

    def test_counts_whole_seconds(self):
        """Sub-second remainders are dropped."""
        now = ANCHOR + timedelta(seconds=29, milliseconds=999)
        assert ratio(now, ANCHOR, DurationKind.minute()) == pytest.approx(29 / 60)

    @pytest.mark.parametrize("kind", ALL_KINDS, ids=lambda k: k.kind.value)
    def test_always_within_bounds(self, kind):
        for offset in range(-120, 200_000, 97):
            value = ratio(ANCHOR + timedelta(seconds=offset), ANCHOR, kind)
            assert 0.0 <= value <= 1.0


# ---- parse_duration ----

class TestParseDuration:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("90", 90),
            ("45s", 45),
            ("5m", 300),
            ("1h30m", 5400),
            ("1h 30m", 5400),
            ("2d", 172_800),
            (" 10M ", 600),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_duration(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "5x", "m5", "1.5h", "-5"])
    def test_invalid(self, text):
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration(text)

    def test_zero_rejected(self):
        with pytest.raises(ValueError, match="at least one second"):
            parse_duration("0")


# ---- format_duration ----

class TestFormatDuration:
    def test_zero(self):
        assert format_duration(0) == "0s"

    def test_mixed(self):
        assert format_duration(3723) == "1h 2m 3s"

    def test_skips_zero_parts(self):
        assert format_duration(3600 + 5) == "1h 5s"

    def test_days(self):
        assert format_duration(90061) == "1d 1h 1m 1s"

    def test_negative_clamped(self):
        assert format_duration(-5) == "0s"

    def test_float_truncated(self):
        assert format_duration(59.9) == "59s"
