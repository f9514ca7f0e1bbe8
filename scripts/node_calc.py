#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pi node profit calculator from the command line.

Usage:
  python scripts/node_calc.py --base 0.02 --boost 150 --rewards 1.2 --node 2.5 --watts 60 --kwh 0.18
  python scripts/node_calc.py ... --currency PHP --live

With --live the current Pi price comes from CoinGecko and USD rates from the
exchange-rate service; otherwise the fallback price and static rates are used.
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pi_chart.core.node_calculator import (  # noqa: E402
    NodeInputs, estimate, merged_rates, node_preview, summary_lines, symbol_for,
)
from pi_chart.shared.coingecko_client import CoinGeckoClient  # noqa: E402
from pi_chart.shared.colored_logging import setup_colored_logging  # noqa: E402
from pi_chart.shared.rates_client import RatesClient  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Pi node profit calculator")
    parser.add_argument("--base", type=float, required=True, help="Base mining rate (π/h)")
    parser.add_argument("--boost", type=float, default=100.0, help="Boost in percent")
    parser.add_argument("--rewards", type=float, default=1.0, help="Reward count without node")
    parser.add_argument("--node", type=float, default=0.0, help="Node bonus multiplier")
    parser.add_argument("--watts", type=float, default=60.0, help="Node power draw (W)")
    parser.add_argument("--kwh", type=float, default=0.18, help="Electricity cost (USD/kWh)")
    parser.add_argument("--price", type=float, default=None, help="Pi price in USD (overrides --live)")
    parser.add_argument("--currency", default="USD", help="Display currency (USD, EUR, PHP, VND, KRW, IDR, INR, NGN)")
    parser.add_argument("--live", action="store_true", help="Fetch live Pi price and FX rates")
    args = parser.parse_args()

    setup_colored_logging(level=logging.WARNING)

    price = args.price
    live_rates = None
    if args.live:
        if price is None:
            resp = CoinGeckoClient().fetch_current()
            if resp.success:
                price = resp.data.price
                print(f"Live: ${price:.4f}")
            else:
                print("Live price unavailable – using fallback")
        live_rates = RatesClient().fetch_usd_rates()
        if live_rates is None:
            print("Using static exchange rates")

    rates = merged_rates(live_rates)
    inputs = NodeInputs(
        base_rate=args.base, boost_pct=args.boost, rewards=args.rewards,
        node_multiplier=args.node, watts=args.watts, kwh_usd=args.kwh,
    )
    result = estimate(inputs, price)

    currency = args.currency.upper()
    print(f"Estimated Pi price ({symbol_for(currency)}): {result.pi_price_usd * rates.get(currency, 1.0):.4f}")
    print(f"Node adds ≈ +{node_preview(args.base, args.boost, args.node):.3f} π/day")
    for line in summary_lines(result, currency, rates):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
