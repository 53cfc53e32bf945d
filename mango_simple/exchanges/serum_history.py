"""
Thin client for the Serum historical-bars (TradingView UDF) endpoint.

    GET https://serum-history.herokuapp.com/tv/history
        ?symbol=BTC/USDC&resolution=1&from=1620000000&to=1620001200
"""

from __future__ import annotations

import logging
from typing import List, Optional

import requests

from mango_simple.core.errors import InvalidInputError
from mango_simple.core.models import RESOLUTIONS, Ohlcv

_BASE_URL = "https://serum-history.herokuapp.com"
_HISTORY_ENDPOINT = "/tv/history"

_REQUEST_TIMEOUT = 10


class SerumHistoryClient:
    """
    Fetches OHLCV bars for a spot market symbol.

    Parameters
    ----------
    base_url : str
        Override the default base URL (useful for testing).
    session : requests.Session, optional
        Shared HTTP session.
    """

    def __init__(
        self,
        base_url: str = _BASE_URL,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)

    def fetch_ohlcv(
        self,
        symbol: str,
        resolution: str,
        from_epoch_ms: int,
        to_epoch_ms: int,
    ) -> List[Ohlcv]:
        """
        Fetch bars between two millisecond timestamps.

        Parameters
        ----------
        symbol : str
            Market name, e.g. ``"BTC/USDC"``.
        resolution : str
            One of ``RESOLUTIONS``, e.g. ``"1"`` or ``"1D"``.
        from_epoch_ms, to_epoch_ms : int
            Window bounds in epoch milliseconds; sent as seconds.

        Returns
        -------
        list[Ohlcv]
            Bars in the order the service returns them (ascending time).
        """
        if resolution not in RESOLUTIONS:
            raise InvalidInputError(f"invalid resolution {resolution}")

        params = {
            "symbol": symbol,
            "resolution": resolution,
            "from": int(from_epoch_ms // 1000),
            "to": int(to_epoch_ms // 1000),
        }
        response = self._session.get(
            self._base_url + _HISTORY_ENDPOINT,
            params=params,
            timeout=_REQUEST_TIMEOUT,
        )
        response.raise_for_status()

        payload = response.json()
        # no_data responses omit the arrays
        t = payload.get("t") or []
        o, h, l, c, v = (payload.get(k) or [] for k in ("o", "h", "l", "c", "v"))

        bars = [
            Ohlcv(
                time_s=int(t[i]),
                open=float(o[i]),
                high=float(h[i]),
                low=float(l[i]),
                close=float(c[i]),
                volume=float(v[i]),
            )
            for i in range(len(t))
        ]
        self.logger.debug(f"[{symbol}] {len(bars)} bars at resolution {resolution}")
        return bars
