"""
CEX-style client over Mango Markets spot markets.

Usage::

    from mango_simple.exchanges.mango_client import SimpleClient

    client = SimpleClient.create(decoder=decoder, trading_client=trading_client)

    client_id = client.place_order("BTC/USDC", "limit", "buy", 0.0001, 20000)
    orders = client.get_open_orders("BTC/USDC")
    client.cancel_orders("BTC/USDC")

Order-book decoding and transaction signing are done by the injected
``OrderBookDecoder`` and ``TradingClient``; account buffers are read with
an ``AccountReader`` (Solana RPC by default).
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, List, Optional

from solders.keypair import Keypair

from mango_simple.core.errors import InvalidInputError, MarketNotFoundError, UpstreamError
from mango_simple.core.models import (
    Fill,
    GroupConfig,
    MangoAccount,
    MarketSymbol,
    Markets,
    Ohlcv,
    OrderKind,
    RestingOrder,
    Side,
    SpotMarketConfig,
    Ticker,
    TimeInForce,
)
from mango_simple.exchanges.base import AccountReader, OrderBookDecoder, TradingClient
from mango_simple.exchanges.serum_fills import SerumFillsClient
from mango_simple.exchanges.serum_history import SerumHistoryClient
from mango_simple.exchanges.solana_rpc import SolanaAccountReader
from mango_simple.execution.cancellation import CancellationEngine, filter_by_client_id
from mango_simple.execution.order_placement import discover_market_price, validate_order
from mango_simple.helpers.config_helper import ClientConfig, load_config, load_ids, read_keypair

TICKER_RESOLUTION = "1"
# wide enough to ride out gaps in the history service
TICKER_WINDOW_MS = 20 * 60 * 1000


@dataclass(frozen=True)
class Session:
    """Everything resolved once at construction and shared read-only afterwards."""
    config: ClientConfig
    group_config: GroupConfig
    group: Any
    owner: Keypair
    account_reader: AccountReader
    decoder: OrderBookDecoder
    trading_client: TradingClient


class SimpleClient:
    """
    A simpler, more CEX-style client with sensible defaults.

    Parameters
    ----------
    session : Session
        Resolved group, signer and collaborators.
    history_client, fills_client : optional
        HTTP clients for bars and fills; built from the session config when omitted.
    logger : logging.Logger, optional
    """

    def __init__(
        self,
        session: Session,
        history_client: Optional[SerumHistoryClient] = None,
        fills_client: Optional[SerumFillsClient] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.session = session
        self.history_client = history_client or SerumHistoryClient(session.config.history_url, logger=self.logger)
        self.fills_client = fills_client or SerumFillsClient(session.config.fills_url, logger=self.logger)
        self.cancellation = CancellationEngine(session.config.cancel_max_workers, logger=self.logger)

    @classmethod
    def create(
        cls,
        config: Optional[ClientConfig] = None,
        *,
        decoder: OrderBookDecoder,
        trading_client: TradingClient,
        account_reader: Optional[AccountReader] = None,
        owner: Optional[Keypair] = None,
        logger: Optional[logging.Logger] = None,
    ) -> SimpleClient:
        """
        Resolve registry, group, signer and RPC reader, then load the group.

        Raises FileNotFoundError when no key material is available and
        MarketNotFoundError when the configured group is not in the registry.
        """
        logger = logger or logging.getLogger(__name__)
        config = config or load_config()

        ids = load_ids(config.ids_path)
        group_config = ids.get_group(config.cluster, config.group_name)
        if account_reader is None:
            account_reader = SolanaAccountReader(ids.cluster_url(config.cluster), config.commitment, logger=logger)
        owner = owner or read_keypair(config.keypair_path)

        group = trading_client.load_group(group_config)
        logger.info(
            f"SimpleClient initialised: group={group_config.name}, "
            f"markets={len(group_config.spot_markets)}, owner={owner.pubkey()}"
        )

        session = Session(
            config=config,
            group_config=group_config,
            group=group,
            owner=owner,
            account_reader=account_reader,
            decoder=decoder,
            trading_client=trading_client,
        )
        return cls(session, logger=logger)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _market_for_symbol(self, symbol: str) -> SpotMarketConfig:
        for market in self.session.group_config.spot_markets:
            if market.name == symbol:
                return market
        raise MarketNotFoundError(f"market not found for {symbol}")

    def _mango_account(self) -> Optional[MangoAccount]:
        return self.session.trading_client.get_mango_account(self.session.group, self.session.owner)

    def _open_orders_address(self, symbol: str) -> Optional[str]:
        market = self._market_for_symbol(symbol)
        account = self._mango_account()
        if account is None:
            return None
        return account.open_orders_for(market.market_index)

    def _decode_side(self, market: SpotMarketConfig, address: str) -> List[RestingOrder]:
        data = self.session.account_reader.get_account_data(address)
        if not data:
            return []
        return self.session.decoder.decode(market, data)

    def _cancel_fn(self, account: MangoAccount, market: SpotMarketConfig):
        session = self.session

        def cancel(order: RestingOrder) -> str:
            return session.trading_client.cancel_spot_order(
                session.group, account, session.owner, market, order
            )

        return cancel

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def place_order(
        self,
        symbol: str,
        order_kind: OrderKind | str,
        side: Side | str,
        quantity: float,
        price: Optional[float] = None,
        time_in_force: Optional[TimeInForce | str] = None,
    ) -> str:
        """
        Place a market or limit order.

        Market orders are priced by walking the current book (see
        ``execution.order_placement``). Returns the client order id.

        Raises
        ------
        InvalidInputError
            Before any network call, on bad symbol, quantity or price.
        EmptyOrderBookError
            Market order against a book with no resting orders.
        MarketNotFoundError
            Unknown symbol, or no mango account for the owner.
        """
        request = validate_order(symbol, order_kind, side, quantity, price, time_in_force)

        price = request.price
        if request.kind is OrderKind.MARKET:
            book = self.get_order_book(request.symbol)
            price = discover_market_price(book, request.side, request.quantity)
            self.logger.debug(f"[{symbol}] market {request.side.value} priced at {price}")

        market = self._market_for_symbol(request.symbol)
        account = self._mango_account()
        if account is None:
            raise MarketNotFoundError(f"no mango account for owner {self.session.owner.pubkey()}")

        client_id = int(time.time() * 1000)

        signature = self.session.trading_client.place_spot_order(
            self.session.group,
            account,
            market,
            self.session.owner,
            request.side,
            price,
            request.quantity,
            request.time_in_force.value,
            client_id,
        )
        self.logger.info(
            f"[{symbol}] ORDER PLACED: {request.kind.value} {request.side.value} "
            f"qty={request.quantity}, price={price}, client_id={client_id}, tx={signature}"
        )
        return str(client_id)

    def get_order_book(self, symbol: str) -> List[RestingOrder]:
        """Bids followed by asks, as decoded from the market's two book accounts."""
        market = self._market_for_symbol(symbol)
        bids = self._decode_side(market, market.bids_key)
        asks = self._decode_side(market, market.asks_key)
        return [*bids, *asks]

    def get_open_orders(self, symbol: str, client_id: Optional[str] = None) -> List[RestingOrder]:
        """The owner's resting orders in *symbol*; ``[]`` without an open-orders account."""
        open_orders_address = self._open_orders_address(symbol)
        if open_orders_address is None:
            return []

        orders = [o for o in self.get_order_book(symbol) if o.open_orders_address == open_orders_address]
        if client_id:
            return filter_by_client_id(orders, client_id)
        return orders

    def cancel_orders(self, symbol: Optional[str] = None, client_id: Optional[str] = None) -> List[str]:
        """
        Cancel the owner's orders in one market, optionally only those
        tagged *client_id*, or in every configured market when *symbol* is
        omitted. Returns the cancellation signatures.
        """
        market = None if symbol is None else self._market_for_symbol(symbol)
        account = self._mango_account()
        if account is None:
            self.logger.info("No mango account for owner, nothing to cancel")
            return []

        if market is None:
            return self.cancellation.cancel_markets(
                self.session.group_config.market_symbols,
                self.get_open_orders,
                lambda s: self._cancel_fn(account, self._market_for_symbol(s)),
            )

        orders = self.get_open_orders(symbol)
        # client_id may belong to nobody's orders here, which cancels nothing
        to_cancel = filter_by_client_id(orders, client_id)
        return self.cancellation.cancel_batch(symbol, to_cancel, self._cancel_fn(account, market))

    def get_trade_history(self, symbol: str) -> List[Fill]:
        """Fills recorded for the owner's open-orders account in *symbol*."""
        if not isinstance(symbol, str) or not symbol.strip():
            raise InvalidInputError(f"invalid symbol {symbol}")

        open_orders_address = self._open_orders_address(symbol)
        if open_orders_address is None:
            return []

        fills = self.fills_client.fetch_fills(open_orders_address)
        return [
            Fill.from_dict(fill, market_name=symbol)
            for fill in fills
            if fill.get("openOrders") == open_orders_address
        ]

    def get_markets(self) -> Markets:
        """Configured market symbols; no network access."""
        return Markets([MarketSymbol(s) for s in self.session.group_config.market_symbols])

    def get_tickers(self, symbol: Optional[str] = None) -> List[Ticker]:
        """Symbol, closing price and close time of the latest one-minute bar."""
        symbols = self.session.group_config.market_symbols if symbol is None else [symbol]

        to_ms = int(time.time() * 1000)
        from_ms = to_ms - TICKER_WINDOW_MS

        tickers = []
        for s in symbols:
            bars = self.get_ohlcv(s, TICKER_RESOLUTION, from_ms, to_ms)
            if not bars:
                raise UpstreamError(f"no bars for {s} in the last {TICKER_WINDOW_MS // 60000} minutes")
            latest = bars[-1]
            tickers.append(Ticker(s, latest.close, latest.time_s * 1000))
        return tickers

    def get_ohlcv(self, symbol: str, resolution: str, from_epoch_ms: int, to_epoch_ms: int) -> List[Ohlcv]:
        """OHLCV bars in ascending time order, as served by the history service."""
        return self.history_client.fetch_ohlcv(symbol, resolution, from_epoch_ms, to_epoch_ms)
