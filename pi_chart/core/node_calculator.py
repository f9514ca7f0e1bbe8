#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pi node profit calculator

Closed-form daily estimate of the Pi earned with and without a node and of
the net result after electricity. Amounts are computed in USD and only
converted for display, by plain multiplication with a USD rate.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

FALLBACK_PI_PRICE_USD = 0.60
DEFAULT_WATTS = 60.0
DEFAULT_KWH_USD = 0.18

CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$", "EUR": "€", "PHP": "₱", "VND": "₫",
    "KRW": "₩", "IDR": "Rp", "INR": "₹", "NGN": "₦",
}

STATIC_FALLBACK_RATES: Dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.92, "PHP": 58.0,
    "VND": 25400.0, "KRW": 1420.0,
    "IDR": 16200.0, "INR": 86.0,
    "NGN": 1650.0,
}


@dataclass(frozen=True)
class NodeInputs:
    base_rate: float            # Pi per hour
    boost_pct: float            # percent, e.g. 150 for 1.5x
    rewards: float              # reward count without node
    node_multiplier: float
    watts: float = DEFAULT_WATTS
    kwh_usd: float = DEFAULT_KWH_USD


@dataclass(frozen=True)
class NodeEstimate:
    without_node: float          # Pi/day
    with_node: float             # Pi/day
    extra_pi: float              # Pi/day
    electricity_usd: float       # USD/day
    net_usd: float               # USD/day
    pi_price_usd: float

    @property
    def profitable(self) -> bool:
        return self.net_usd >= 0


def node_preview(base_rate: float, boost_pct: float, node_multiplier: float) -> float:
    """Extra Pi/day the node adds (shown next to the node slider)."""
    return base_rate * (boost_pct / 100.0) * node_multiplier * 24


def estimate(inputs: NodeInputs, pi_price_usd: Optional[float] = None) -> NodeEstimate:
    boost = (inputs.boost_pct or 0.0) / 100.0
    base = inputs.base_rate or 0.0
    rewards = inputs.rewards or 0.0
    node = inputs.node_multiplier or 0.0
    watts = inputs.watts or DEFAULT_WATTS
    kwh = inputs.kwh_usd or DEFAULT_KWH_USD
    price = pi_price_usd if pi_price_usd and pi_price_usd > 0 else FALLBACK_PI_PRICE_USD

    without_node = base * boost * rewards * 24
    with_node = base * boost * (rewards + node) * 24
    extra = with_node - without_node
    electricity = (watts * 24 / 1000) * kwh
    return NodeEstimate(
        without_node=without_node,
        with_node=with_node,
        extra_pi=extra,
        electricity_usd=electricity,
        net_usd=extra * price - electricity,
        pi_price_usd=price,
    )


def merged_rates(live: Optional[Dict[str, float]] = None) -> Dict[str, float]:
    rates = dict(STATIC_FALLBACK_RATES)
    if live:
        rates.update({k.upper(): float(v) for k, v in live.items()})
    return rates


def symbol_for(currency: str) -> str:
    return CURRENCY_SYMBOLS.get(currency.upper(), "$")


def usd_to_local(usd: float, currency: str, rates: Optional[Dict[str, float]] = None) -> float:
    rates = rates or STATIC_FALLBACK_RATES
    return usd * (rates.get(currency.upper()) or 1.0)


def format_local(usd: float, currency: str = "USD", rates: Optional[Dict[str, float]] = None,
                 decimals: int = 2) -> str:
    return f"{symbol_for(currency)}{usd_to_local(usd, currency, rates):.{decimals}f}"


def summary_lines(result: NodeEstimate, currency: str = "USD",
                  rates: Optional[Dict[str, float]] = None) -> list[str]:
    verdict = "Profit" if result.profitable else "Loss"
    return [
        f"Without node: {result.without_node:.3f} π/day",
        f"With node:    {result.with_node:.3f} π/day",
        f"Node adds:    +{result.extra_pi:.3f} π/day",
        f"Electricity:  {format_local(result.electricity_usd, currency, rates)}/day",
        f"{verdict}: {format_local(result.net_usd, currency, rates)}/day",
    ]
