"""
Thin client for the Serum fills indexer.

    GET https://stark-fjord-45757.herokuapp.com/trades/open_orders/<address>

Response shape (abridged)::

    {"data": [{"openOrders": "G5rZ...", "side": "sell", "size": 0.0017,
               "price": 54948.6, "nativeQuantityReleased": "93207112",
               "nativeQuantityPaid": "1700", ...}]}
"""

from __future__ import annotations

import logging
from typing import List, Optional

import requests

_BASE_URL = "https://stark-fjord-45757.herokuapp.com"
_OPEN_ORDERS_ENDPOINT = "/trades/open_orders/{address}"

_REQUEST_TIMEOUT = 10


class SerumFillsClient:

    def __init__(
        self,
        base_url: str = _BASE_URL,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)

    def fetch_fills(self, open_orders_address: str) -> List[dict]:
        """Raw fill dicts recorded for *open_orders_address*; ``[]`` when the payload has no data."""
        url = self._base_url + _OPEN_ORDERS_ENDPOINT.format(address=open_orders_address)
        response = self._session.get(url, timeout=_REQUEST_TIMEOUT)
        response.raise_for_status()

        payload = response.json() or {}
        fills = payload.get("data") or []
        self.logger.debug(f"{len(fills)} fills for open orders {open_orders_address}")
        return fills
