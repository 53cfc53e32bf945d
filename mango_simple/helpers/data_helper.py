"""Helpers for turning client results into pandas objects."""

from __future__ import annotations

from dataclasses import asdict
from typing import Iterable

import pandas as pd

from mango_simple.core.models import Ohlcv

OHLCV_COLUMNS = ["open_time", "open", "high", "low", "close", "volume"]


def ohlcv_to_df(bars: Iterable[Ohlcv]) -> pd.DataFrame:
    """Bars as a DataFrame with a UTC ``open_time`` column, in the given order.

    An empty input yields an empty frame with the same columns.
    """
    rows = [asdict(bar) for bar in bars]
    if not rows:
        return pd.DataFrame(columns=OHLCV_COLUMNS)

    df = pd.DataFrame(rows)
    df["open_time"] = pd.to_datetime(df.pop("time_s"), unit="s", utc=True)
    return df[OHLCV_COLUMNS]
