#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Prometheus exporter for the chart runner (prometheus_client).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional
import logging
import time

from prometheus_client import CollectorRegistry, Counter, Gauge, generate_latest, start_http_server

from ..shared.config import TelemetryConfig
from ..shared.models import Direction, LedgerEvent, Quote, TimeframeMode
from .classifier import count_directions


@dataclass
class MetricHandles:
    price: Gauge
    change_24h: Gauge
    volume_24h: Gauge
    samples_loaded: Gauge
    events_loaded: Gauge
    markers_drawn: Gauge
    feed_failures: Counter
    last_render_timestamp_seconds: Gauge


class MetricsExporter:
    def __init__(self, telemetry: TelemetryConfig, prefix: str = "pichart_") -> None:
        self.telemetry = telemetry
        self.registry = CollectorRegistry()
        self.log = logging.getLogger(__name__)
        self._server_started = False
        r = self.registry
        self.m = MetricHandles(
            price=Gauge(f"{prefix}price_usd", "Current Pi price", registry=r),
            change_24h=Gauge(f"{prefix}change_24h_percent", "24h price change in percent", registry=r),
            volume_24h=Gauge(f"{prefix}volume_24h_usd", "24h traded volume", registry=r),
            samples_loaded=Gauge(f"{prefix}samples_loaded", "Price samples in the current window",
                                 ["timeframe"], registry=r),
            events_loaded=Gauge(f"{prefix}events_loaded", "Ledger events loaded by direction",
                                ["direction"], registry=r),
            markers_drawn=Gauge(f"{prefix}markers_drawn", "Event markers drawn by the last render",
                                ["direction"], registry=r),
            feed_failures=Counter(f"{prefix}feed_failures", "Price feed failures", registry=r),
            last_render_timestamp_seconds=Gauge(f"{prefix}last_render_timestamp_seconds",
                                                "Last render time (UTC epoch)", registry=r),
        )

    def start_http(self) -> bool:
        if not self.telemetry.enabled or self._server_started:
            return False
        start_http_server(self.telemetry.listen_port, addr=self.telemetry.listen_address, registry=self.registry)
        self._server_started = True
        self.log.info(f"Metrics on http://{self.telemetry.listen_address}:{self.telemetry.listen_port}/metrics")
        return True

    def record_quote(self, quote: Quote) -> None:
        self.m.price.set(quote.price)
        self.m.change_24h.set(quote.change_24h)
        self.m.volume_24h.set(quote.volume)

    def record_samples(self, count: int, timeframe: TimeframeMode) -> None:
        self.m.samples_loaded.labels(timeframe=timeframe.name.lower()).set(count)

    def record_events(self, events: Iterable[LedgerEvent], account: str) -> None:
        for direction, n in count_directions(events, account).items():
            self.m.events_loaded.labels(direction=direction.value).set(n)

    def record_render(self, report, now: Optional[float] = None) -> None:
        for direction in Direction:
            self.m.markers_drawn.labels(direction=direction.value).set(report.markers.get(direction, 0))
        self.m.last_render_timestamp_seconds.set(now if now is not None else time.time())

    def record_feed_failure(self) -> None:
        self.m.feed_failures.inc()

    def render_text(self) -> str:
        return generate_latest(self.registry).decode("utf-8")
