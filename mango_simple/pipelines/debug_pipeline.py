"""
Manual smoke run against a live group.

    [1] INIT       : load config, setup logger, build the client
    [2] ORDERS     : place a small limit buy, list, cancel, list again
    [3] MARKET DATA: markets, tickers, last 20 minutes of one-minute bars

Not a supported interface. The caller supplies the order-book decoder and
trading client::

    from mango_simple.pipelines.debug_pipeline import run
    run(decoder, trading_client)
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

from mango_simple.exchanges.base import OrderBookDecoder, TradingClient
from mango_simple.exchanges.mango_client import TICKER_WINDOW_MS, SimpleClient
from mango_simple.helpers.config_helper import load_config
from mango_simple.helpers.data_helper import ohlcv_to_df
from mango_simple.utils.logger import setup_logger

SYMBOL = "BTC/USDC"


# ---------------------------------------------------------------------------
# STAGE 1 - INIT
# ---------------------------------------------------------------------------

def init(
    decoder: OrderBookDecoder,
    trading_client: TradingClient,
    config_path: Optional[Path] = None,
) -> tuple[SimpleClient, logging.Logger]:
    config = load_config(config_path)

    log_path = Path.cwd() / "logs" / "debug_pipeline.log"
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)

    logger = setup_logger("debug_pipeline", log_path, level=log_level)
    logger.info("========== Stage 1 ==========")
    logger.info(f"Cluster: {config.cluster} | Group: {config.group_name}")

    client = SimpleClient.create(config, decoder=decoder, trading_client=trading_client, logger=logger)
    return client, logger


# ---------------------------------------------------------------------------
# STAGE 2 - ORDER ROUND TRIP
# ---------------------------------------------------------------------------

def order_round_trip(client: SimpleClient, logger: logging.Logger) -> None:
    logger.info("========== Stage 2 ==========")
    client_id = client.place_order(SYMBOL, "limit", "buy", 0.0001, 20000)
    logger.info(f"Placed order {client_id}")

    logger.info(f"Open orders after place: {client.get_open_orders(SYMBOL)}")
    client.cancel_orders(SYMBOL)
    logger.info(f"Open orders after cancel: {client.get_open_orders(SYMBOL)}")


# ---------------------------------------------------------------------------
# STAGE 3 - MARKET DATA
# ---------------------------------------------------------------------------

def market_data(client: SimpleClient, logger: logging.Logger) -> None:
    logger.info("========== Stage 3 ==========")
    logger.info(f"Markets: {client.get_markets()}")
    logger.info(f"Tickers: {client.get_tickers()}")

    to_ms = int(time.time() * 1000)
    bars = client.get_ohlcv(SYMBOL, "1", to_ms - TICKER_WINDOW_MS, to_ms)
    logger.info(f"{SYMBOL} one-minute bars:\n{ohlcv_to_df(bars)}")


def run(
    decoder: OrderBookDecoder,
    trading_client: TradingClient,
    config_path: Optional[Path] = None,
) -> None:
    client, logger = init(decoder, trading_client, config_path)
    order_round_trip(client, logger)
    market_data(client, logger)
    logger.info("========== Done ==========")
