#!/usr/bin/env python3
"""
Unit tests for the price window store and the event set
"""
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from pi_chart.core.sample_store import EventSet, SampleStore
from pi_chart.shared.models import Direction, LedgerEvent, PriceSample


def _series(*pairs):
    return [PriceSample(time=t, price=p) for t, p in pairs]


class TestSampleStore:
    def test_empty_store_has_no_window(self):
        store = SampleStore()
        assert store.is_empty
        assert store.window_bounds() is None

    def test_load_replaces_instead_of_merging(self):
        store = SampleStore()
        store.load(_series((0, 1.0), (10, 1.1)))
        store.load(_series((100, 2.0), (110, 2.1), (120, 2.2)))

        assert [s.time for s in store.samples] == [100, 110, 120]
        assert store.window_bounds() == (100, 120)

    def test_unsorted_input_is_ordered(self):
        store = SampleStore()
        store.load(_series((30, 1.3), (10, 1.1), (20, 1.2)))
        assert store.times == [10, 20, 30]
        assert store.window_bounds() == (10, 30)

    def test_loading_empty_series_is_not_an_error(self):
        store = SampleStore()
        store.load(_series((0, 1.0)))
        assert store.load([]) is True
        assert store.window_bounds() is None

    def test_stale_response_is_discarded(self):
        store = SampleStore()
        week = store.begin_request()
        month = store.begin_request()

        assert store.load(_series((0, 1.0), (10, 1.0)), month) is True
        # the slower, superseded request resolves last
        assert store.load(_series((500, 9.0), (600, 9.0)), week) is False
        assert store.window_bounds() == (0, 10)

    def test_untagged_load_always_applies(self):
        store = SampleStore()
        store.begin_request()
        assert store.load(_series((0, 1.0))) is True

    def test_clear(self):
        store = SampleStore()
        store.load(_series((0, 1.0), (1, 1.0)))
        store.clear()
        assert store.is_empty


class TestEventSet:
    def test_in_window_is_inclusive(self):
        events = EventSet([
            LedgerEvent(time=t, source_account="A", dest_account="B") for t in (-1, 0, 50, 100, 101)
        ])
        assert [e.time for e in events.in_window(0, 100)] == [0, 50, 100]

    def test_classified_follows_reference_account(self):
        events = EventSet([LedgerEvent(time=0, source_account="A", dest_account="B")])
        assert events.classified("A")[0][1] is Direction.OUT
        assert events.classified("B")[0][1] is Direction.IN

    def test_replace(self):
        events = EventSet([LedgerEvent(time=0, source_account="A", dest_account="B")])
        events.replace([])
        assert len(events) == 0
