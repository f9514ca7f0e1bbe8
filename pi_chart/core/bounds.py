#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Affine mapping from the (time, price) domain of one price window to pixel
coordinates of the plotting rectangle.

Bounds are recomputed for every render and never cached. Degenerate input
(no samples, fewer than two distinct timestamps, no finite price) maps the
unit square instead, so the mapping functions never divide by zero.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..shared.config import Margins
from ..shared.models import PriceSample

PRICE_PAD_FRACTION = 0.06
MIN_PRICE_PAD = 0.001


@dataclass(frozen=True)
class Bounds:
    time_min: float
    time_max: float
    price_min: float       # padded
    price_max: float       # padded
    width: float
    height: float
    left: float
    right: float
    top: float
    bottom: float
    fallback: bool = False

    @property
    def plot_width(self) -> float:
        return self.width - self.left - self.right

    @property
    def plot_height(self) -> float:
        return self.height - self.top - self.bottom

    def time_to_x(self, t: float) -> float:
        # Fraction first, so the window edges land exactly on the margins
        frac = (t - self.time_min) / ((self.time_max - self.time_min) or 1.0)
        return self.left + self.plot_width * frac

    def price_to_y(self, p: float) -> float:
        frac = (p - self.price_min) / ((self.price_max - self.price_min) or 1.0)
        return self.height - self.bottom - self.plot_height * frac


def compute_bounds(samples: Sequence[PriceSample], width: float, height: float, margins: Margins) -> Bounds:
    """
    Scan the window once for time and price extrema and derive Bounds.

    Input order does not matter. Only the price axis is padded, by 6% of
    its span on each side with a floor of 0.001 price units.
    """
    geometry = dict(
        width=float(width), height=float(height),
        left=float(margins.left), right=float(margins.right),
        top=float(margins.top), bottom=float(margins.bottom),
    )
    if len(samples) == 0:
        return _unit_square(**geometry)

    times = np.fromiter((s.time for s in samples), dtype=float, count=len(samples))
    prices = np.fromiter((s.price for s in samples), dtype=float, count=len(samples))
    times = times[np.isfinite(times)]
    prices = prices[np.isfinite(prices)]
    if times.size == 0 or prices.size == 0:
        return _unit_square(**geometry)

    t_min, t_max = float(times.min()), float(times.max())
    if t_min == t_max:
        return _unit_square(**geometry)

    p_min, p_max = float(prices.min()), float(prices.max())
    pad = max((p_max - p_min) * PRICE_PAD_FRACTION, MIN_PRICE_PAD)
    return Bounds(
        time_min=t_min, time_max=t_max,
        price_min=p_min - pad, price_max=p_max + pad,
        **geometry,
    )


def _unit_square(**geometry) -> Bounds:
    return Bounds(time_min=0.0, time_max=1.0, price_min=0.0, price_max=1.0, fallback=True, **geometry)
