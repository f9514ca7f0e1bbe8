#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CoinGecko price feed client.

Fetches the current Pi quote (price, 24h change, 24h volume) and the daily
price history for a window of N days. Network and decoding failures never
raise: they come back as APIResponse(success=False) carrying the short
status string shown to the user.
"""
from __future__ import annotations

import time
from typing import Any, Dict, List, Optional, Union

import requests

from .models import APIResponse, PriceSample, Quote
from .logging_setup import get_logger

logger = get_logger(__name__)

FEED_UNAVAILABLE = "price feed unavailable"


class CoinGeckoClient:
    """Client for the CoinGecko public REST API"""

    def __init__(
        self,
        base_url: str = "https://api.coingecko.com/api/v3",
        coin_id: str = "pi-network",
        vs_currency: str = "usd",
        timeout: int = 10,
        retries: int = 0,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            base_url: API root
            coin_id: CoinGecko coin identifier
            vs_currency: Quote currency
            timeout: Request timeout in seconds
            retries: Extra attempts after the first failure (0 = fail fast)
            session: Optional pre-built requests session
        """
        self.base_url = base_url.rstrip("/")
        self.coin_id = coin_id
        self.vs_currency = vs_currency
        self.timeout = max(1, int(timeout))
        self.retries = max(0, int(retries))
        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
            'User-Agent': 'PiChart/1.0'
        })

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> APIResponse:
        url = f"{self.base_url}/{path.lstrip('/')}"
        last_error: Optional[str] = None
        status: Optional[int] = None
        logger.debug(f"CoinGecko GET path={path} params={params}")

        for attempt in range(self.retries + 1):
            try:
                response = self.session.get(url, params=params, timeout=self.timeout)
                status = response.status_code
                if response.status_code == 200:
                    return APIResponse(success=True, data=response.json(), status_code=200)
                last_error = f"HTTP {response.status_code}: {response.text[:200]}"
            except requests.exceptions.Timeout:
                last_error = f"Request timeout after {self.timeout}s"
            except requests.exceptions.RequestException as e:
                last_error = f"Connection error: {e}"
            except ValueError as e:
                last_error = f"Invalid JSON: {e}"

            if attempt < self.retries:
                time.sleep(0.5 * (2 ** attempt))

        logger.warning(f"CoinGecko GET FAILED path={path} error={last_error}")
        return APIResponse(success=False, error=last_error, status_code=status)

    def fetch_current(self) -> APIResponse:
        """
        Fetch the current quote from /coins/markets

        Returns:
            APIResponse whose data is a Quote on success
        """
        resp = self._get("coins/markets", params={
            "vs_currency": self.vs_currency,
            "ids": self.coin_id,
            "order": "market_cap_desc",
            "per_page": 1,
            "page": 1,
            "sparkline": "false",
            "price_change_percentage": "24h",
        })
        if not resp.success:
            return APIResponse(success=False, error=FEED_UNAVAILABLE, status_code=resp.status_code)

        rows = resp.data if isinstance(resp.data, list) else []
        if not rows or not isinstance(rows[0], dict):
            logger.warning(f"CoinGecko: no market row for coin={self.coin_id}")
            return APIResponse(success=False, error=FEED_UNAVAILABLE, status_code=resp.status_code)

        row = rows[0]
        try:
            quote = Quote(
                price=float(row.get("current_price") or 0.0),
                change_24h=float(row.get("price_change_percentage_24h") or 0.0),
                volume=float(row.get("total_volume") or 0.0),
            )
        except (TypeError, ValueError) as e:
            logger.warning(f"CoinGecko: malformed market row: {e}")
            return APIResponse(success=False, error=FEED_UNAVAILABLE, status_code=resp.status_code)

        logger.info(f"CoinGecko: {self.coin_id} price={quote.price:.4f} change24h={quote.change_24h:+.2f}%")
        return APIResponse(success=True, data=quote, status_code=resp.status_code)

    def fetch_history(self, window_days: Union[int, str] = 7) -> APIResponse:
        """
        Fetch daily price history from /coins/{id}/market_chart

        Args:
            window_days: Number of days, or "max"

        Returns:
            APIResponse whose data is a list of PriceSample (seconds, price)
        """
        resp = self._get(f"coins/{self.coin_id}/market_chart", params={
            "vs_currency": self.vs_currency,
            "days": window_days,
            "interval": "daily",
        })
        if not resp.success:
            return APIResponse(success=False, error=FEED_UNAVAILABLE, status_code=resp.status_code)

        raw = resp.data.get("prices") if isinstance(resp.data, dict) else None
        if not isinstance(raw, list):
            logger.warning("CoinGecko: market_chart response has no 'prices' array")
            return APIResponse(success=False, error=FEED_UNAVAILABLE, status_code=resp.status_code)

        samples = parse_price_pairs(raw)
        logger.info(f"CoinGecko: loaded {len(samples)} samples for days={window_days}")
        return APIResponse(success=True, data=samples, status_code=resp.status_code)


def parse_price_pairs(raw: List[Any]) -> List[PriceSample]:
    """Convert [[ms, price], ...] into PriceSamples, skipping malformed pairs."""
    samples: List[PriceSample] = []
    for pair in raw:
        try:
            t_ms, price = pair[0], pair[1]
            samples.append(PriceSample(time=float(t_ms) / 1000.0, price=float(price)))
        except (TypeError, ValueError, IndexError):
            continue
    return samples
