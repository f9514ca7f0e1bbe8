#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Chart session: the host-owned state behind one chart.

Holds the current timeframe, price window, ledger events, reference account
and latest quote, and turns provider outcomes into the short status strings
shown to the user. Every render receives a fresh ChartContext built from it.
"""
from __future__ import annotations

from typing import Dict, Optional, Union
import logging

from ..shared.coingecko_client import CoinGeckoClient, FEED_UNAVAILABLE
from ..shared.config import AppConfig
from ..shared.ledger_client import LedgerClient, is_valid_account, normalize_account
from ..shared.models import Quote, TimeframeMode
from .axis_labeler import resolve_timezone
from .event_loader import EventLoader, LoadReport
from .renderer import ChartContext, RenderReport, render
from .sample_store import EventSet, SampleStore
from .surface import DrawingSurface

log = logging.getLogger(__name__)

HISTORY_UNAVAILABLE = "chart history unavailable"
INVALID_ADDRESS = "Invalid Pi address (G..., 56 chars)"
WALLET_LOAD_FAILED = "Failed to load (check address or network)"


class ChartSession:
    def __init__(self, config: AppConfig, feed: CoinGeckoClient, ledger: LedgerClient,
                 exporter=None) -> None:
        self.config = config
        self.feed = feed
        self.ledger = ledger
        self.exporter = exporter
        self.store = SampleStore()
        self.events = EventSet()
        self.timeframe = TimeframeMode.parse(config.default_timeframe)
        self.account: Optional[str] = None
        self.quote: Optional[Quote] = None
        self.quote_status: str = ""
        self.chart_status: str = ""
        self.wallet_status: str = ""
        self.tz = resolve_timezone(config.chart.timezone)

    # ----- price window -----
    def select_timeframe(self, mode: Union[str, TimeframeMode]) -> bool:
        """Switch timeframe and fetch its window. Returns True if the store now holds it."""
        mode = TimeframeMode.parse(mode)
        if mode is not self.timeframe:
            # the previous window must never be drawn under the new mode's labels
            self.store.clear()
        self.timeframe = mode
        seq = self.store.begin_request()
        resp = self.feed.fetch_history(self.timeframe.window_days)
        return self.apply_history(resp, seq)

    def apply_history(self, resp, seq: int) -> bool:
        """Accept a history response tagged with its request number (stale ones are ignored)."""
        if not resp.success:
            if seq == self.store.latest_request:
                self.chart_status = HISTORY_UNAVAILABLE
                self.store.clear()
            self._feed_failed()
            return False
        accepted = self.store.load(resp.data, seq)
        if accepted:
            self.chart_status = ""
            if self.exporter is not None:
                self.exporter.record_samples(len(self.store.samples), self.timeframe)
        return accepted

    # ----- quote -----
    def refresh_quote(self) -> Optional[Quote]:
        resp = self.feed.fetch_current()
        if not resp.success:
            self.quote_status = FEED_UNAVAILABLE
            self._feed_failed()
            return None
        self.quote = resp.data
        self.quote_status = f"as of {self.quote.fetched_at.astimezone(self.tz):%H:%M:%S}"
        if self.exporter is not None:
            self.exporter.record_quote(self.quote)
        return self.quote

    def format_quote(self) -> Dict[str, str]:
        if self.quote is None:
            return {"price": "-", "change": "-", "volume": "-", "status": self.quote_status}
        q = self.quote
        return {
            "price": f"{q.price:.4f}",
            "change": f"{'+' if q.change_24h >= 0 else ''}{q.change_24h:.2f}%",
            "trend": "good" if q.change_24h >= 0 else "bad",
            "volume": f"${q.volume:,.0f}",
            "status": self.quote_status,
        }

    # ----- ledger events -----
    def load_wallet(self, account: str) -> Optional[LoadReport]:
        acct = normalize_account(account)
        if not is_valid_account(acct):
            self.wallet_status = INVALID_ADDRESS
            return None

        self.wallet_status = f"Loading wallet operations (from {self._cutoff_label()})..."
        self.account = acct
        self.events.clear()
        loader = EventLoader(
            self.ledger,
            cutoff=self.config.ledger.cutoff,
            max_events=self.config.ledger.max_events,
            max_pages=self.config.ledger.max_pages,
        )
        report = loader.load(acct)
        if not report.success and not report.events:
            self.wallet_status = WALLET_LOAD_FAILED
            log.warning(f"Wallet load failed: {'; '.join(report.errors)}")
            return report

        self.events.replace(report.events)
        self.wallet_status = (
            f"Loaded {len(report.events)} relevant Pi operations (from {self._cutoff_label()}) → dots on chart"
        )
        if self.exporter is not None:
            self.exporter.record_events(self.events, acct)
        return report

    def set_account(self, account: Optional[str]) -> None:
        """Change the reference account without refetching; directions follow on next render."""
        self.account = normalize_account(account) if account else None

    # ----- rendering -----
    def context(self, viewport_width: Optional[float] = None) -> ChartContext:
        return ChartContext(
            store=self.store,
            events=self.events,
            timeframe=self.timeframe,
            reference_account=self.account,
            viewport_width=viewport_width,
            style=self.config.chart,
            tz=self.tz,
        )

    def render(self, surface: DrawingSurface, viewport_width: Optional[float] = None) -> RenderReport:
        report = render(self.context(viewport_width), surface)
        if self.exporter is not None:
            self.exporter.record_render(report)
        return report

    def _cutoff_label(self) -> str:
        return f"{self.config.ledger.cutoff:%b %Y}"

    def _feed_failed(self) -> None:
        if self.exporter is not None:
            self.exporter.record_feed_failure()
