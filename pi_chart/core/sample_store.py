#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
In-memory holders for the current price window and the ledger event set.

Both are replaced wholesale on every fetch, never merged. The price store
also sequences history requests: each timeframe switch takes a new request
number, and a response carrying an older number is dropped so that a slow,
superseded fetch cannot overwrite the newer window.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple
import logging

from ..shared.models import Direction, LedgerEvent, PriceSample
from .classifier import classify_all

log = logging.getLogger(__name__)


class SampleStore:
    def __init__(self) -> None:
        self._samples: List[PriceSample] = []
        self._times: List[float] = []
        self._latest_request = 0

    @property
    def samples(self) -> List[PriceSample]:
        return self._samples

    @property
    def times(self) -> List[float]:
        """Ascending timestamps, rebuilt once per load and shared by every match query."""
        return self._times

    @property
    def is_empty(self) -> bool:
        return not self._samples

    @property
    def latest_request(self) -> int:
        return self._latest_request

    def begin_request(self) -> int:
        self._latest_request += 1
        return self._latest_request

    def load(self, samples: Iterable[PriceSample], seq: Optional[int] = None) -> bool:
        """Replace the series. Returns False when `seq` belongs to a superseded request."""
        if seq is not None and seq != self._latest_request:
            log.info(f"Discarding stale price window (request {seq}, latest {self._latest_request})")
            return False
        # Provider order is not trusted; the matcher needs ascending times
        ordered = sorted(samples, key=lambda s: s.time)
        self._samples = ordered
        self._times = [s.time for s in ordered]
        return True

    def clear(self) -> None:
        self._samples = []
        self._times = []

    def window_bounds(self) -> Optional[Tuple[float, float]]:
        """(time_min, time_max) of the loaded series, or None when empty."""
        if not self._times:
            return None
        return self._times[0], self._times[-1]


class EventSet:
    def __init__(self, events: Optional[Iterable[LedgerEvent]] = None) -> None:
        self._events: List[LedgerEvent] = list(events or [])

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self):
        return iter(self._events)

    def replace(self, events: Iterable[LedgerEvent]) -> None:
        self._events = list(events)

    def clear(self) -> None:
        self._events = []

    def in_window(self, time_min: float, time_max: float) -> List[LedgerEvent]:
        return [e for e in self._events if time_min <= e.time <= time_max]

    def classified(self, reference_account: str) -> List[Tuple[LedgerEvent, Direction]]:
        return classify_all(self._events, reference_account)
