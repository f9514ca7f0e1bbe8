#!/usr/bin/env python3
"""
Tests for render orchestration against a recording surface

Tests cover:
- Empty store clears and stops
- Axis, line and marker command sequence
- Marker placement on the nearest sample and direction colors
- Events outside the price window are dropped
- Matplotlib surface produces a PNG
"""
import pytest
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from pi_chart.core.bounds import compute_bounds
from pi_chart.core.renderer import ChartContext, render
from pi_chart.core.sample_store import EventSet, SampleStore
from pi_chart.core.surface import MatplotlibSurface, RecordingSurface
from pi_chart.shared.config import ChartStyle
from pi_chart.shared.models import Direction, LedgerEvent, PriceSample, TimeframeMode

ME = "GME"


def _context(samples, events=(), account=ME, width=900, **kw):
    store = SampleStore()
    store.load(samples)
    return ChartContext(
        store=store,
        events=EventSet(events),
        timeframe=kw.pop("timeframe", TimeframeMode.DAY),
        reference_account=account,
        viewport_width=width,
        style=kw.pop("style", ChartStyle()),
    )


def _series(*pairs):
    return [PriceSample(time=t, price=p) for t, p in pairs]


class TestEmptyChart:
    def test_empty_store_only_clears(self):
        surface = RecordingSurface()
        report = render(_context([]), surface)

        assert report.empty
        assert [c.op for c in surface.commands] == ["clear"]
        assert surface.commands[0].args == {"width": 900.0, "height": 360.0}

    def test_viewport_width_defaults_to_style(self):
        surface = RecordingSurface()
        render(_context([], width=None), surface)
        assert surface.width == ChartStyle().default_width


class TestCommandSequence:
    def test_axes_line_and_labels(self):
        surface = RecordingSurface()
        report = render(_context(_series((0, 1.0), (50, 1.5), (100, 2.0))), surface)

        assert not report.empty
        assert report.samples_drawn == 3
        strokes = surface.of("stroke")
        texts = surface.of("text")
        # 6 price gridlines + 7 time tick marks + 1 price line
        assert len(strokes) == 14
        assert len(texts) == 13
        assert texts[0].args["text"] == "$0.9400"
        assert texts[0].args["align"] == "right"
        assert texts[6].args["align"] == "center"

        line = strokes[-1]
        assert line.args["color"] == ChartStyle().line_color
        assert len(line.args["points"]) == 3
        assert line.args["points"][0] == (56.0, pytest.approx(300.0 - 290.0 * (0.06 / 1.12)))

    def test_time_tick_count_per_mode(self):
        style = ChartStyle(time_ticks_by_mode={"y": 4})
        surface = RecordingSurface()
        render(_context(_series((0, 1.0), (100, 2.0)), timeframe=TimeframeMode.YEAR, style=style), surface)
        # 6 price labels + 5 time labels
        assert len(surface.of("text")) == 11

    def test_non_finite_price_breaks_line(self):
        surface = RecordingSurface()
        report = render(_context(_series((0, 1.0), (50, float("nan")), (100, 2.0))), surface)
        assert report.samples_drawn == 2


class TestMarkers:
    def test_event_pinned_to_nearest_sample(self):
        samples = _series((0, 1.0), (100, 2.0))
        event = LedgerEvent(time=40, source_account="GOTHER", dest_account=ME)
        ctx = _context(samples, [event])
        surface = RecordingSurface()

        report = render(ctx, surface)

        b = compute_bounds(samples, 900, 360, ctx.style.margins)
        circles = surface.of("circle")
        assert len(circles) == 1
        assert circles[0].args["x"] == b.time_to_x(0)
        assert circles[0].args["y"] == b.price_to_y(1.0)
        assert circles[0].args["color"] == ctx.style.color_in
        assert report.markers[Direction.IN] == 1

    def test_colors_by_direction(self):
        samples = _series((0, 1.0), (100, 2.0))
        events = [
            LedgerEvent(time=10, source_account=ME, dest_account="GB"),
            LedgerEvent(time=20, source_account="GB", dest_account=ME),
            LedgerEvent(time=30, source_account=ME, dest_account=ME),
        ]
        style = ChartStyle()
        surface = RecordingSurface()
        report = render(_context(samples, events), surface)

        colors = [c.args["color"] for c in surface.of("circle")]
        assert colors == [style.color_out, style.color_in, style.color_self]
        assert report.markers_drawn == 3

    def test_events_outside_window_are_dropped(self):
        samples = _series((100, 1.0), (200, 2.0))
        events = [
            LedgerEvent(time=99, source_account=ME, dest_account="GB"),
            LedgerEvent(time=150, source_account=ME, dest_account="GB"),
            LedgerEvent(time=201, source_account=ME, dest_account="GB"),
        ]
        surface = RecordingSurface()
        report = render(_context(samples, events), surface)

        assert len(surface.of("circle")) == 1
        assert report.events_dropped == 2

    def test_reference_account_change_recolors_without_reload(self):
        samples = _series((0, 1.0), (100, 2.0))
        ctx = _context(samples, [LedgerEvent(time=50, source_account="GA", dest_account="GB")], account="GA")
        first = RecordingSurface()
        render(ctx, first)
        ctx.reference_account = "GB"
        second = RecordingSurface()
        render(ctx, second)

        assert first.of("circle")[0].args["color"] == ctx.style.color_out
        assert second.of("circle")[0].args["color"] == ctx.style.color_in

    def test_rendering_twice_is_identical(self):
        ctx = _context(_series((0, 1.0), (100, 2.0)), [LedgerEvent(time=70, source_account=ME, dest_account="GB")])
        a, b = RecordingSurface(), RecordingSurface()
        render(ctx, a)
        render(ctx, b)
        assert a.to_dicts() == b.to_dicts()


class TestMatplotlibSurface:
    def test_writes_png(self, tmp_path):
        ctx = _context(_series((0, 1.0), (50, 1.4), (100, 2.0)),
                       [LedgerEvent(time=40, source_account="GB", dest_account=ME)])
        surface = MatplotlibSurface(dpi=100)
        try:
            render(ctx, surface)
            out = surface.save(tmp_path / "chart.png")
        finally:
            surface.close()

        assert out.exists()
        assert out.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"

    def test_drawing_before_clear_raises(self):
        with pytest.raises(RuntimeError):
            MatplotlibSurface().fill_circle(1, 1, 1, "#fff")


class TestEventWindowing:
    def test_markers_come_from_event_set_window(self, monkeypatch):
        samples = _series((100, 1.0), (200, 2.0))
        inside = LedgerEvent(time=150, source_account=ME, dest_account="GB")
        outside = LedgerEvent(time=250, source_account=ME, dest_account="GB")
        ctx = _context(samples, [inside, outside])
        calls = []
        original = EventSet.in_window

        def spy(self, time_min, time_max):
            calls.append((time_min, time_max))
            return original(self, time_min, time_max)

        monkeypatch.setattr(EventSet, "in_window", spy)
        report = render(ctx, RecordingSurface())

        assert calls == [(100, 200)]
        assert report.markers[Direction.OUT] == 1
        assert report.events_dropped == 1
