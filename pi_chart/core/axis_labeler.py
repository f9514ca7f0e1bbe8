#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Tick positions and labels for both chart axes.

Price ticks are evenly spaced in (padded) price space. Time ticks are
evenly spaced over the window and labelled according to the timeframe:

    DAY    "Jan 16"   month + day of month
    WEEK   "Wk 3"     ISO-8601 week number
    MONTH  "Jan 31"   month + LAST day of that month, wherever the tick falls
    YEAR   "Jan"      month only
    ALL    "2025"     year only
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import List, Optional
from zoneinfo import ZoneInfo

from ..shared.models import TimeframeMode
from .bounds import Bounds

DEFAULT_PRICE_TICKS = 5
DEFAULT_TIME_TICKS = 6


@dataclass(frozen=True)
class Tick:
    position: float   # pixel coordinate along the axis
    label: str


def resolve_timezone(name: Optional[str]) -> tzinfo:
    if not name or name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def iso_week(dt: datetime) -> int:
    """ISO week number: the week holding the date's Thursday, counted in that Thursday's year."""
    return dt.isocalendar()[1]


def month_end_label(dt: datetime) -> str:
    last_day = calendar.monthrange(dt.year, dt.month)[1]
    return f"{dt:%b} {last_day}"


def time_label(dt: datetime, mode: TimeframeMode) -> str:
    if mode is TimeframeMode.DAY:
        return f"{dt:%b} {dt.day}"
    if mode is TimeframeMode.WEEK:
        return f"Wk {iso_week(dt)}"
    if mode is TimeframeMode.MONTH:
        return month_end_label(dt)
    if mode is TimeframeMode.YEAR:
        return f"{dt:%b}"
    return str(dt.year)


def price_ticks(bounds: Bounds, count: int = DEFAULT_PRICE_TICKS, symbol: str = "$",
                decimals: int = 4) -> List[Tick]:
    """count + 1 ticks from price_min to price_max, bottom to top."""
    span = bounds.price_max - bounds.price_min
    ticks = []
    for i in range(count + 1):
        v = bounds.price_min + (i * span) / count
        ticks.append(Tick(position=bounds.price_to_y(v), label=f"{symbol}{v:.{decimals}f}"))
    return ticks


def time_ticks(bounds: Bounds, mode: TimeframeMode, count: int = DEFAULT_TIME_TICKS,
               tz: Optional[tzinfo] = None) -> List[Tick]:
    """
    count + 1 ticks from time_min to time_max, left to right.

    A collapsed window yields count + 1 identical ticks.
    """
    tz = tz or timezone.utc
    span = bounds.time_max - bounds.time_min
    ticks = []
    for i in range(count + 1):
        t = bounds.time_min + (i * span) / count
        dt = datetime.fromtimestamp(t, tz=tz)
        ticks.append(Tick(position=bounds.time_to_x(t), label=time_label(dt, mode)))
    return ticks
