#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
USD exchange rates for the node calculator display currency.
"""
from __future__ import annotations

from typing import Dict, Optional
import logging

import requests

log = logging.getLogger(__name__)


class RatesClient:
    def __init__(self, *, url: str = "https://api.exchangerate-api.com/v4/latest/USD", timeout_s: int = 10,
                 session: Optional[requests.Session] = None) -> None:
        self.url = url
        self.timeout_s = max(1, int(timeout_s))
        self._session = session or requests.Session()

    def fetch_usd_rates(self) -> Optional[Dict[str, float]]:
        """Return {currency: units per USD}, or None when the service is unreachable."""
        try:
            r = self._session.get(self.url, timeout=self.timeout_s)
            if r.status_code != 200:
                log.warning(f"Rates GET FAILED status={r.status_code}")
                return None
            data = r.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            log.warning(f"Rates GET FAILED error={e}")
            return None
        rates = data.get("rates") if isinstance(data, dict) else None
        if not isinstance(rates, dict):
            return None
        out: Dict[str, float] = {}
        for code, value in rates.items():
            try:
                out[str(code).upper()] = float(value)
            except (TypeError, ValueError):
                continue
        log.info(f"Live FX rates loaded ({len(out)} currencies)")
        return out
