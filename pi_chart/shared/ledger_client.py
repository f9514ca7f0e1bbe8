#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pi mainnet Horizon client for paginated account operations.
"""

import re
import requests
from typing import Optional

from .models import APIResponse, OperationsPage
from .logging_setup import get_logger

logger = get_logger(__name__)

ACCOUNT_PATTERN = re.compile(r"^G[2-7A-Z0-9]{55}$")


def normalize_account(account: str) -> str:
    return (account or "").strip().upper()


def is_valid_account(account: str) -> bool:
    """Single pattern check: 'G' followed by 55 base32-ish characters."""
    return bool(ACCOUNT_PATTERN.match(normalize_account(account)))


class LedgerClient:
    """Client for the Horizon /accounts/{id}/operations endpoint"""

    def __init__(self, base_url: str = "https://api.mainnet.minepi.com", page_limit: int = 200,
                 timeout: int = 15, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.page_limit = page_limit
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/hal+json, application/json',
            'User-Agent': 'PiChart/1.0'
        })

    def first_page_url(self, account: str) -> str:
        return f"{self.base_url}/accounts/{account}/operations"

    def fetch_operations_page(self, account: str, cursor: Optional[str] = None) -> APIResponse:
        """
        Fetch one page of operations, newest first

        Args:
            account: Ledger account id
            cursor: The 'next' link returned by the previous page, or None for the first page

        Returns:
            APIResponse whose data is an OperationsPage
        """
        if cursor:
            url, params = cursor, None
        else:
            url = self.first_page_url(account)
            params = {"limit": self.page_limit, "order": "desc"}

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout:
            logger.warning(f"Ledger page timed out after {self.timeout}s")
            return APIResponse(success=False, error=f"Request timeout after {self.timeout}s")
        except requests.exceptions.RequestException as e:
            logger.warning(f"Ledger page request failed: {e}")
            return APIResponse(success=False, error=f"Connection error: {e}")

        if response.status_code != 200:
            error_msg = f"HTTP {response.status_code}: {response.text[:200]}"
            logger.warning(f"Ledger page failed: {error_msg}")
            return APIResponse(success=False, error=error_msg, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            return APIResponse(success=False, error=f"Invalid JSON: {e}", status_code=response.status_code)

        records = ((body.get("_embedded") or {}).get("records") or []) if isinstance(body, dict) else []
        next_link = ((body.get("_links") or {}).get("next") or {}).get("href") if isinstance(body, dict) else None
        # Horizon always returns a next link; an empty page ends the walk
        if not records:
            next_link = None

        logger.debug(f"Ledger page: {len(records)} records, next={'yes' if next_link else 'no'}")
        return APIResponse(
            success=True,
            data=OperationsPage(records=list(records), next_cursor=next_link),
            status_code=response.status_code,
        )
