#!/usr/bin/env python3
"""
Unit tests for axis tick generation and calendar-aware labels
"""
import pytest
from datetime import datetime, timedelta, timezone
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from pi_chart.core.axis_labeler import (
    iso_week, month_end_label, price_ticks, resolve_timezone, time_label, time_ticks,
)
from pi_chart.core.bounds import compute_bounds
from pi_chart.shared.config import Margins
from pi_chart.shared.models import PriceSample, TimeframeMode


def _utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def _bounds(t0, t1, p0=1.0, p1=2.0):
    samples = [PriceSample(time=t0, price=p0), PriceSample(time=t1, price=p1)]
    return compute_bounds(samples, 900, 360, Margins())


class TestTimeLabels:
    def test_day_mode_short_month_and_day(self):
        assert time_label(_utc(2026, 1, 16, 12), TimeframeMode.DAY) == "Jan 16"
        assert time_label(_utc(2026, 3, 5), TimeframeMode.DAY) == "Mar 5"

    def test_week_mode_iso_week(self):
        assert time_label(_utc(2026, 1, 16), TimeframeMode.WEEK) == "Wk 3"

    def test_month_mode_uses_last_day_of_month(self):
        assert time_label(_utc(2026, 2, 10), TimeframeMode.MONTH) == "Feb 28"
        assert time_label(_utc(2026, 1, 2), TimeframeMode.MONTH) == "Jan 31"
        assert time_label(_utc(2026, 4, 30), TimeframeMode.MONTH) == "Apr 30"

    def test_month_end_leap_year(self):
        assert month_end_label(_utc(2028, 2, 3)) == "Feb 29"

    def test_year_mode_month_only(self):
        assert time_label(_utc(2025, 9, 14), TimeframeMode.YEAR) == "Sep"

    def test_all_mode_year_only(self):
        assert time_label(_utc(2025, 9, 14), TimeframeMode.ALL) == "2025"


class TestIsoWeek:
    @pytest.mark.parametrize("dt, expected", [
        (datetime(2026, 1, 1), 1),     # Thursday
        (datetime(2021, 1, 1), 53),    # Friday belongs to the previous ISO year
        (datetime(2024, 12, 30), 1),   # Monday of ISO week 1 of 2025
        (datetime(2025, 6, 15), 24),
    ])
    def test_iso_week(self, dt, expected):
        assert iso_week(dt) == expected


class TestPriceTicks:
    def test_evenly_spaced_with_four_decimals(self):
        b = _bounds(0, 100)
        ticks = price_ticks(b, count=5)

        assert len(ticks) == 6
        assert ticks[0].label == "$0.9400"
        assert ticks[-1].label == "$2.0600"
        assert ticks[0].position == pytest.approx(b.price_to_y(b.price_min))
        assert ticks[-1].position == pytest.approx(b.price_to_y(b.price_max))
        steps = [ticks[i].position - ticks[i + 1].position for i in range(5)]
        assert all(s == pytest.approx(steps[0]) for s in steps)

    def test_currency_symbol_is_passed_through(self):
        ticks = price_ticks(_bounds(0, 100), count=2, symbol="€")
        assert all(t.label.startswith("€") for t in ticks)


class TestTimeTicks:
    def test_seven_ticks_span_window(self):
        t0 = _utc(2026, 1, 10).timestamp()
        t1 = _utc(2026, 1, 16).timestamp()
        b = _bounds(t0, t1)
        ticks = time_ticks(b, TimeframeMode.DAY, count=6)

        assert len(ticks) == 7
        assert ticks[0].position == b.left
        assert ticks[-1].position == pytest.approx(b.width - b.right)
        assert [t.label for t in ticks] == [
            "Jan 10", "Jan 11", "Jan 12", "Jan 13", "Jan 14", "Jan 15", "Jan 16"
        ]

    def test_collapsed_window_does_not_raise(self):
        # single instant -> unit-square fallback; every tick on one spot
        b = compute_bounds([PriceSample(time=5.0, price=1.0)], 900, 360, Margins())
        ticks = time_ticks(b, TimeframeMode.MONTH, count=6)
        assert len(ticks) == 7

    def test_zero_width_domain_repeats_tick(self):
        from dataclasses import replace
        b = replace(_bounds(0, 100), time_min=50.0, time_max=50.0)
        ticks = time_ticks(b, TimeframeMode.ALL, count=6)
        assert len({t.position for t in ticks}) == 1
        assert len({t.label for t in ticks}) == 1

    def test_timezone_shifts_calendar_day(self):
        t = _utc(2026, 1, 16, 23, 30).timestamp()
        b = _bounds(t, t + 60)
        utc_plus_9 = timezone(timedelta(hours=9))
        assert time_ticks(b, TimeframeMode.DAY, count=1, tz=utc_plus_9)[0].label == "Jan 17"
        assert time_ticks(b, TimeframeMode.DAY, count=1)[0].label == "Jan 16"

    def test_utc_names_resolve_without_tz_database(self):
        assert resolve_timezone("UTC") is timezone.utc
        assert resolve_timezone(None) is timezone.utc
