#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pi price chart runner.
- Loads settings
- Fetches the current quote and the price window for the selected timeframe
- Optionally overlays a wallet's ledger operations
- Renders the chart to PNG (and optionally dumps the draw commands)
- In watch mode, refreshes the quote periodically and re-renders

Usage examples:
  python -m pi_chart.main --help
  python -m pi_chart.main --timeframe W --out output/pi_week.png
  python -m pi_chart.main --account GABC... --timeframe M --dump-commands output/month.json
  python -m pi_chart.main --watch  # refresh quote every feed.refresh_seconds
"""
from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional

from .core.chart_session import ChartSession
from .core.debug_dump import dump_render_commands
from .core.exporter import MetricsExporter
from .core.surface import MatplotlibSurface
from .shared.coingecko_client import CoinGeckoClient
from .shared.config import AppConfig, ConfigError, apply_cli_overrides, load_config, setup_logging, summary_lines
from .shared.ledger_client import LedgerClient

DEFAULT_CONFIG = Path(__file__).resolve().parents[1] / 'config' / 'chart_config.yaml'


def build_session(config: AppConfig, exporter: Optional[MetricsExporter] = None) -> ChartSession:
    feed = CoinGeckoClient(
        base_url=config.feed.base_url,
        coin_id=config.feed.coin_id,
        vs_currency=config.feed.vs_currency,
        timeout=config.feed.timeout,
        retries=config.feed.retries,
    )
    ledger = LedgerClient(
        base_url=config.ledger.base_url,
        page_limit=config.ledger.page_limit,
        timeout=config.ledger.timeout,
    )
    return ChartSession(config, feed, ledger, exporter=exporter)


def _render_png(session: ChartSession, out_path: Path, width: Optional[int]) -> None:
    surface = MatplotlibSurface(dpi=session.config.chart.dpi)
    try:
        report = session.render(surface, width)
        if report.empty:
            logging.getLogger(__name__).warning(f"No price data to draw ({session.chart_status or 'empty window'})")
        surface.save(out_path)
    finally:
        surface.close()
    logging.getLogger(__name__).info(
        f"Chart written to {out_path} ({report.samples_drawn} samples, {report.markers_drawn} markers)"
    )


def _print_quote(session: ChartSession) -> None:
    q = session.format_quote()
    print(f"Pi {q['price']}  24h {q['change']}  vol {q['volume']}  [{q['status']}]")


def main(config_path: Optional[str] = None, timeframe: Optional[str] = None, account: Optional[str] = None,
         out: Optional[str] = None, width: Optional[int] = None, watch: bool = False,
         dump_commands: Optional[str] = None, log_level: Optional[str] = None) -> int:
    try:
        if config_path is None and DEFAULT_CONFIG.exists():
            config_path = str(DEFAULT_CONFIG)
        config = load_config(config_path)
        config = apply_cli_overrides(config, timeframe=timeframe, log_level=log_level, width=width)
    except ConfigError as e:
        print(f"Failed to load configuration: {e}")
        return 1

    setup_logging(config)
    log = logging.getLogger(__name__)
    for line in summary_lines(config):
        log.debug(line)

    exporter = MetricsExporter(config.telemetry)
    if watch:
        exporter.start_http()
    session = build_session(config, exporter)

    session.refresh_quote()
    _print_quote(session)
    session.select_timeframe(config.default_timeframe)
    if session.chart_status:
        print(session.chart_status)

    if account:
        session.load_wallet(account)
        print(session.wallet_status)

    out_path = Path(out) if out else Path(config.output_dir) / f"pi_{session.timeframe.name.lower()}.png"
    _render_png(session, out_path, width)
    if dump_commands:
        dump_render_commands(session, dump_commands, width)

    if not watch:
        return 0

    interval = config.feed.refresh_seconds
    log.info(f"Watch mode: refreshing quote every {interval}s (Ctrl+C to stop)")
    try:
        while True:
            time.sleep(interval)
            session.refresh_quote()
            _print_quote(session)
            _render_png(session, out_path, width)
    except KeyboardInterrupt:
        log.info("Stopped")
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Pi price chart with ledger overlay')
    parser.add_argument('--config', type=str, default=None, help='Path to chart_config.yaml')
    parser.add_argument('--timeframe', type=str, default=None, help='D, W, M, Y or A (day/week/month/year/all)')
    parser.add_argument('--account', type=str, default=None, help='Pi account (G..., 56 chars) whose operations are overlaid')
    parser.add_argument('--out', type=str, default=None, help='PNG output path')
    parser.add_argument('--width', type=int, default=None, help='Canvas width in pixels')
    parser.add_argument('--watch', action='store_true', help='Keep refreshing the quote and re-rendering')
    parser.add_argument('--dump-commands', type=str, default=None, help='Write draw commands as JSON to this path')
    parser.add_argument('--log-level', type=str, default=None, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], help='Logging level')
    args = parser.parse_args()
    sys.exit(main(config_path=args.config, timeframe=args.timeframe, account=args.account, out=args.out,
                  width=args.width, watch=args.watch, dump_commands=args.dump_commands, log_level=args.log_level))
