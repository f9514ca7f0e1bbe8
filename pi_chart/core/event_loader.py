#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Ledger Event Loader

Walks an account's operations page by page (newest first), keeps the
native-asset payments and claimable-balance operations created at or after
the cutoff, and turns them into LedgerEvents for the chart overlay.

Pagination is strictly sequential and always terminates: it stops on an
empty page, a missing next link, the relevant-event cap, the page cap, or a
page that lies entirely before the cutoff.

Usage:
    loader = EventLoader(ledger_client, cutoff=..., max_events=2000)
    report = loader.load(account)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

from ..shared.ledger_client import LedgerClient
from ..shared.models import LedgerEvent


@dataclass
class LoadReport:
    """Report of one event load"""
    account: str
    timestamp: datetime
    events: List[LedgerEvent] = field(default_factory=list)
    pages_fetched: int = 0
    records_seen: int = 0
    skipped_irrelevant: int = 0
    truncated: bool = False
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """A load succeeded if no page request failed; hitting a cap is still success"""
        return len(self.errors) == 0

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization"""
        return {
            'account': self.account,
            'timestamp': self.timestamp.isoformat(),
            'events': len(self.events),
            'pages_fetched': self.pages_fetched,
            'records_seen': self.records_seen,
            'skipped_irrelevant': self.skipped_irrelevant,
            'truncated': self.truncated,
            'errors': self.errors,
            'success': self.success,
        }


def parse_created_at(value: Any) -> Optional[datetime]:
    """Horizon timestamps look like 2025-03-01T12:00:00Z"""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def is_relevant_type(op_type: str) -> bool:
    op_type = op_type or ""
    return op_type == "payment" or "claim" in op_type or "create_claimable" in op_type


def is_native(record: Dict[str, Any]) -> bool:
    # payments carry asset_type; claimable-balance operations carry asset
    return record.get("asset_type") == "native" or record.get("asset") == "native"


class EventLoader:
    """
    Loads ledger events for one account.

    Handles:
    - Sequential pagination through the ledger client
    - Cutoff, asset and type filtering
    - Safety caps on events and pages
    - Partial results when a page fails mid-walk
    """

    def __init__(
        self,
        ledger_client: LedgerClient,
        cutoff: datetime,
        max_events: int = 2000,
        max_pages: int = 100,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            ledger_client: Client for the operations endpoint
            cutoff: Oldest instant to keep (UTC)
            max_events: Cap on relevant events collected
            max_pages: Cap on pages requested
            logger: Logger instance
        """
        self.ledger = ledger_client
        self.cutoff = cutoff if cutoff.tzinfo else cutoff.replace(tzinfo=timezone.utc)
        self.max_events = max_events
        self.max_pages = max_pages
        self.logger = logger or logging.getLogger(__name__)

    def load(self, account: str) -> LoadReport:
        """
        Collect relevant events for `account`.

        Returns:
            LoadReport with events and walk statistics
        """
        self.logger.info(f"Loading ledger operations for {account[:12]}... (cutoff {self.cutoff.date()})")
        report = LoadReport(account=account, timestamp=datetime.now(timezone.utc))

        cursor: Optional[str] = None
        cap_hit = False
        while True:
            if len(report.events) >= self.max_events:
                cap_hit = True
                break
            if report.pages_fetched >= self.max_pages:
                self.logger.warning(f"Page cap reached ({self.max_pages}); stopping")
                report.truncated = True
                break

            resp = self.ledger.fetch_operations_page(account, cursor)
            if not resp.success:
                report.errors.append(f"Ledger API error: {resp.error or 'Unknown error'}")
                break
            page = resp.data
            report.pages_fetched += 1
            if not page.records:
                break

            older_than_cutoff = 0
            for record in page.records:
                report.records_seen += 1
                event = self._to_event(record)
                if event is None:
                    report.skipped_irrelevant += 1
                    created = parse_created_at(record.get("created_at"))
                    if created is not None and created < self.cutoff:
                        older_than_cutoff += 1
                    continue
                report.events.append(event)

            # Records arrive newest first: a page wholly before the cutoff ends the walk
            if older_than_cutoff == len(page.records):
                break
            cursor = page.next_cursor
            if not cursor:
                break

        # Exactly max_events on a walk that ended by itself is complete
        if cap_hit or len(report.events) > self.max_events:
            report.truncated = True
            report.events = report.events[:self.max_events]
            self.logger.info(f"Event cap reached ({self.max_events}); returning partial history")

        self.logger.info(
            f"Loaded {len(report.events)} relevant operations from {report.pages_fetched} pages "
            f"(skipped {report.skipped_irrelevant})"
        )
        return report

    def _to_event(self, record: Dict[str, Any]) -> Optional[LedgerEvent]:
        created = parse_created_at(record.get("created_at"))
        if created is None or created < self.cutoff:
            return None
        if not is_native(record) or not is_relevant_type(str(record.get("type", ""))):
            return None
        return LedgerEvent(
            time=created.timestamp(),
            source_account=str(record.get("from") or ""),
            dest_account=str(record.get("to") or ""),
            kind=str(record.get("type")),
            op_id=record.get("id"),
        )
