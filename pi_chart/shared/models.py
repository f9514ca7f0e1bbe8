#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Domain Models for the Pi price chart
Defines price samples, ledger events, timeframe modes and client results.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class PriceSample:
    """
    One (timestamp, price) observation of the historical series

    time is a POSIX timestamp in seconds.
    """
    time: float
    price: float


class Direction(str, Enum):
    """Direction of a ledger event relative to a reference account"""
    IN = "in"
    OUT = "out"
    SELF = "self"


@dataclass(frozen=True)
class LedgerEvent:
    """
    A ledger operation that can be overlaid on the chart

    Direction is not stored: it depends on the reference account and is
    derived by core.classifier each time the chart is drawn.
    """
    time: float
    source_account: str
    dest_account: str
    kind: str = "payment"
    op_id: Optional[str] = None


class TimeframeMode(str, Enum):
    """Selects the history window and the time-axis labelling rule"""
    DAY = "D"
    WEEK = "W"
    MONTH = "M"
    YEAR = "Y"
    ALL = "A"

    @property
    def window_days(self) -> Union[int, str]:
        return TIMEFRAME_WINDOW_DAYS[self]

    @classmethod
    def parse(cls, token: Union[str, "TimeframeMode"]) -> "TimeframeMode":
        """Accept 'D'/'W'/'M'/'Y'/'A' or the full mode name, case-insensitive."""
        if isinstance(token, TimeframeMode):
            return token
        key = str(token or "").strip().upper()
        for mode in cls:
            if key == mode.value or key == mode.name:
                return mode
        raise ValueError(f"Unknown timeframe '{token}'. Expected one of D, W, M, Y, A")


# "max" lets the provider decide the longest window it serves
TIMEFRAME_WINDOW_DAYS: Dict[TimeframeMode, Union[int, str]] = {
    TimeframeMode.DAY: 7,
    TimeframeMode.WEEK: 49,
    TimeframeMode.MONTH: 210,
    TimeframeMode.YEAR: 365,
    TimeframeMode.ALL: "max",
}


@dataclass
class Quote:
    """Current market snapshot (price, 24h change in %, 24h volume)"""
    price: float
    change_24h: float
    volume: float
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class OperationsPage:
    """One page of raw ledger records plus the cursor of the next page"""
    records: List[Dict[str, Any]]
    next_cursor: Optional[str] = None


@dataclass
class APIResponse:
    """Generic API response wrapper"""
    success: bool
    data: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None
