#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Render orchestration: bounds -> axes -> price line -> event markers.

All chart state arrives through a host-owned ChartContext on every call;
the renderer keeps nothing between renders and does no geometry of its own
beyond sequencing the bounds, labeler and matcher.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Dict, Optional
import logging
import math

from ..shared.config import ChartStyle
from ..shared.models import Direction, TimeframeMode
from .axis_labeler import price_ticks, resolve_timezone, time_ticks
from .bounds import compute_bounds
from .classifier import classify_all
from .matcher import nearest_index
from .sample_store import EventSet, SampleStore
from .surface import DrawingSurface

log = logging.getLogger(__name__)


@dataclass
class ChartContext:
    store: SampleStore
    events: EventSet
    timeframe: TimeframeMode = TimeframeMode.DAY
    reference_account: Optional[str] = None
    viewport_width: Optional[float] = None
    style: ChartStyle = field(default_factory=ChartStyle)
    tz: Optional[tzinfo] = None


@dataclass
class RenderReport:
    width: float = 0.0
    height: float = 0.0
    samples_drawn: int = 0
    markers: Dict[Direction, int] = field(default_factory=lambda: {d: 0 for d in Direction})
    events_dropped: int = 0
    empty: bool = True

    @property
    def markers_drawn(self) -> int:
        return sum(self.markers.values())


def marker_color(direction: Direction, style: ChartStyle) -> str:
    if direction is Direction.IN:
        return style.color_in
    if direction is Direction.OUT:
        return style.color_out
    return style.color_self


def render(ctx: ChartContext, surface: DrawingSurface) -> RenderReport:
    style = ctx.style
    width = max(1.0, float(ctx.viewport_width or style.default_width))
    height = max(1.0, float(style.height))
    report = RenderReport(width=width, height=height)

    surface.clear(width, height)
    if ctx.store.is_empty:
        log.debug("Render: no samples loaded, surface cleared")
        return report
    report.empty = False

    samples = ctx.store.samples
    bounds = compute_bounds(samples, width, height, style.margins)
    m = style.margins
    tz = ctx.tz or resolve_timezone(style.timezone)

    # Axes: horizontal gridlines with price labels, then time tick marks with labels
    for tick in price_ticks(bounds, style.price_ticks, style.currency_symbol):
        surface.begin_path()
        surface.move_to(m.left, tick.position)
        surface.line_to(width - m.right, tick.position)
        surface.stroke(style.grid_color, 1.0)
        surface.fill_text(tick.label, m.left - 6, tick.position, align="right", baseline="middle",
                          color=style.label_color, size=style.label_font_size)

    axis_y = height - m.bottom
    n_time = style.time_ticks_for(ctx.timeframe.value)
    for tick in time_ticks(bounds, ctx.timeframe, n_time, tz):
        surface.begin_path()
        surface.move_to(tick.position, axis_y)
        surface.line_to(tick.position, axis_y + 4)
        surface.stroke(style.grid_color, 1.0)
        surface.fill_text(tick.label, tick.position, axis_y + 6, align="center", baseline="top",
                          color=style.label_color, size=style.label_font_size)

    # Price line; non-finite prices break the line
    surface.begin_path()
    pen_down = False
    for s in samples:
        if not math.isfinite(s.price):
            pen_down = False
            continue
        x, y = bounds.time_to_x(s.time), bounds.price_to_y(s.price)
        if pen_down:
            surface.line_to(x, y)
        else:
            surface.move_to(x, y)
            pen_down = True
        report.samples_drawn += 1
    surface.stroke(style.line_color, style.line_width)

    # Event markers, pinned to the nearest price sample
    window = ctx.store.window_bounds()
    times = ctx.store.times
    visible = ctx.events.in_window(*window)
    report.events_dropped = len(ctx.events) - len(visible)
    for event, direction in classify_all(visible, ctx.reference_account or ""):
        sample = samples[nearest_index(times, event.time)]
        if not math.isfinite(sample.price):
            report.events_dropped += 1
            continue
        surface.fill_circle(
            bounds.time_to_x(sample.time), bounds.price_to_y(sample.price), style.marker_radius,
            marker_color(direction, style),
            outline=style.marker_outline, outline_width=style.marker_outline_width,
        )
        report.markers[direction] += 1

    log.debug(
        f"Render {width:.0f}x{height:.0f}: {report.samples_drawn} samples, "
        f"{report.markers_drawn} markers, {report.events_dropped} events outside window"
    )
    return report
