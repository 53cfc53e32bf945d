from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


class Side(str, Enum):
    BUY = "buy"
    SELL = "sell"


class OrderKind(str, Enum):
    MARKET = "market"
    LIMIT = "limit"


class TimeInForce(str, Enum):
    IOC = "ioc"
    POST_ONLY = "postOnly"
    LIMIT = "limit"


# Bar widths accepted by the history service, minutes or daily
RESOLUTIONS = ("1", "3", "5", "15", "30", "60", "120", "180", "240", "1D")


@dataclass(frozen=True)
class SpotMarketConfig:
    name: str            # e.g. "BTC/USDC"
    public_key: str      # base58 market address
    market_index: int    # slot in the mango account's open-orders list
    base_symbol: str
    base_decimals: int
    quote_decimals: int
    bids_key: str
    asks_key: str
    events_key: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> SpotMarketConfig:
        return cls(
            name=data["name"],
            public_key=data["publicKey"],
            market_index=int(data["marketIndex"]),
            base_symbol=data["baseSymbol"],
            base_decimals=int(data["baseDecimals"]),
            quote_decimals=int(data["quoteDecimals"]),
            bids_key=data["bidsKey"],
            asks_key=data["asksKey"],
            events_key=data.get("eventsKey"),
        )


@dataclass(frozen=True)
class GroupConfig:
    cluster: str
    name: str
    public_key: str
    mango_program_id: str
    serum_program_id: str
    spot_markets: tuple[SpotMarketConfig, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> GroupConfig:
        return cls(
            cluster=data["cluster"],
            name=data["name"],
            public_key=data["publicKey"],
            mango_program_id=data["mangoProgramId"],
            serum_program_id=data["serumProgramId"],
            spot_markets=tuple(SpotMarketConfig.from_dict(m) for m in data.get("spotMarkets", [])),
        )

    @property
    def market_symbols(self) -> List[str]:
        return [m.name for m in self.spot_markets]


@dataclass(frozen=True)
class RestingOrder:
    """One resting order decoded from a bids or asks account."""
    price: float
    size: float
    side: Side
    open_orders_address: str
    client_id: Optional[int] = None
    order_id: Optional[int] = None


@dataclass(frozen=True)
class MangoAccount:
    address: str
    owner: str
    # indexed by SpotMarketConfig.market_index, None where no account exists
    spot_open_orders: tuple[Optional[str], ...] = ()

    def open_orders_for(self, market_index: int) -> Optional[str]:
        if 0 <= market_index < len(self.spot_open_orders):
            return self.spot_open_orders[market_index]
        return None


@dataclass(frozen=True)
class MarketSymbol:
    symbol: str


@dataclass(frozen=True)
class Markets:
    symbols: List[MarketSymbol]


@dataclass(frozen=True)
class Ticker:
    symbol: str
    price: float
    time_ms: int


@dataclass(frozen=True)
class Ohlcv:
    time_s: int      # bar open time, seconds since epoch
    open: float
    high: float
    low: float
    close: float
    volume: float


@dataclass
class Fill:
    native_quantity_released: int
    native_quantity_paid: int
    side: str
    size: float
    open_orders: str
    market_name: Optional[str] = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict, market_name: Optional[str] = None) -> Fill:
        # the indexer sends native quantities as strings
        return cls(
            native_quantity_released=int(data["nativeQuantityReleased"]),
            native_quantity_paid=int(data["nativeQuantityPaid"]),
            side=data["side"],
            size=float(data["size"]),
            open_orders=data["openOrders"],
            market_name=market_name,
            raw=dict(data),
        )
