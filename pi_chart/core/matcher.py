#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Nearest-sample lookup used to pin ledger events onto the price line.
"""
from __future__ import annotations

from typing import Sequence


def nearest_index(times: Sequence[float], t: float) -> int:
    """
    Index of the sample whose timestamp is closest to `t`.

    `times` must be non-empty and ascending. Binary search keeps the nearest
    point inside [lo, hi] until the bracket is one step wide, then compares
    the two candidates. Equal distances resolve to the later sample (hi).
    Runs in O(log n) without allocating.
    """
    n = len(times)
    if n == 0:
        raise ValueError("nearest_index() requires at least one sample")
    lo, hi = 0, n - 1
    while hi - lo > 1:
        mid = (lo + hi) >> 1
        if times[mid] < t:
            lo = mid
        else:
            hi = mid
    return lo if abs(times[lo] - t) < abs(times[hi] - t) else hi
