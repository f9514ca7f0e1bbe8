#!/usr/bin/env python3
"""
Unit tests for the node profit calculator
"""
import pytest
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from pi_chart.core.node_calculator import (
    FALLBACK_PI_PRICE_USD,
    NodeInputs,
    estimate,
    format_local,
    merged_rates,
    node_preview,
    summary_lines,
    symbol_for,
)


class TestEstimate:
    def test_reference_example(self):
        result = estimate(NodeInputs(base_rate=0.02, boost_pct=150, rewards=1, node_multiplier=2,
                                     watts=60, kwh_usd=0.18), pi_price_usd=1.0)

        assert result.without_node == pytest.approx(0.72)
        assert result.with_node == pytest.approx(2.16)
        assert result.extra_pi == pytest.approx(1.44)
        assert result.electricity_usd == pytest.approx(0.2592)
        assert result.net_usd == pytest.approx(1.1808)
        assert result.profitable

    def test_missing_price_uses_fallback(self):
        result = estimate(NodeInputs(base_rate=0.02, boost_pct=100, rewards=0, node_multiplier=1))
        assert result.pi_price_usd == FALLBACK_PI_PRICE_USD
        assert result.extra_pi == pytest.approx(0.48)
        assert result.net_usd == pytest.approx(0.48 * 0.60 - 0.2592)

    def test_zero_watts_falls_back_to_default(self):
        result = estimate(NodeInputs(base_rate=0, boost_pct=0, rewards=0, node_multiplier=0, watts=0, kwh_usd=0))
        assert result.electricity_usd == pytest.approx(0.2592)
        assert not result.profitable

    def test_preview_matches_extra(self):
        inputs = NodeInputs(base_rate=0.03, boost_pct=200, rewards=4, node_multiplier=1.5)
        assert node_preview(0.03, 200, 1.5) == pytest.approx(estimate(inputs, 1.0).extra_pi)


class TestCurrency:
    def test_static_rates_without_live_data(self):
        assert format_local(1.0, "EUR") == "€0.92"
        assert format_local(2.5, "usd") == "$2.50"

    def test_live_rates_override_static(self):
        rates = merged_rates({"eur": 0.5, "GBP": 0.8})
        assert rates["EUR"] == 0.5
        assert rates["GBP"] == 0.8
        assert rates["PHP"] == 58.0
        assert format_local(2.0, "GBP", rates) == "$1.60"

    def test_unknown_currency_symbol(self):
        assert symbol_for("CHF") == "$"
        assert symbol_for("ngn") == "₦"

    def test_summary_lines(self):
        result = estimate(NodeInputs(base_rate=0.02, boost_pct=150, rewards=1, node_multiplier=2), 1.0)
        lines = summary_lines(result)
        assert lines[0] == "Without node: 0.720 π/day"
        assert lines[-1] == "Profit: $1.18/day"
