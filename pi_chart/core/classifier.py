#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Direction of a ledger event relative to a reference account.
"""
from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Tuple

from ..shared.models import Direction, LedgerEvent


def classify(event: LedgerEvent, reference_account: str) -> Direction:
    """OUT when the account sends to someone else, IN when it receives from
    someone else, SELF for everything else (including source == dest)."""
    src, dst = event.source_account, event.dest_account
    if src == reference_account and dst != reference_account:
        return Direction.OUT
    if dst == reference_account and src != reference_account:
        return Direction.IN
    return Direction.SELF


def count_directions(events: Iterable[LedgerEvent], reference_account: str) -> Dict[Direction, int]:
    counts = Counter(classify(e, reference_account) for e in events)
    return {d: counts.get(d, 0) for d in Direction}


def classify_all(events: Iterable[LedgerEvent], reference_account: str) -> List[Tuple[LedgerEvent, Direction]]:
    return [(e, classify(e, reference_account)) for e in events]
