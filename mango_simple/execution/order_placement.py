"""
Order validation and market-order price discovery.

The protocol only accepts limit-style orders, so a market order is placed as
a limit order priced past the depth needed to fill it::

    price = discover_market_price(book, Side.BUY, quantity=1.5)
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from mango_simple.core.errors import EmptyOrderBookError, InvalidInputError
from mango_simple.core.models import OrderKind, RestingOrder, Side, TimeInForce

BUY_SLIPPAGE = 1.05
SELL_SLIPPAGE = 0.95


@dataclass(frozen=True)
class OrderRequest:
    symbol: str
    kind: OrderKind
    side: Side
    quantity: float
    price: Optional[float]
    time_in_force: TimeInForce


def _is_positive_number(value) -> bool:
    # numpy scalars register as numbers.Real; Decimal does not
    if isinstance(value, bool) or not isinstance(value, (numbers.Real, Decimal)):
        return False
    return math.isfinite(value) and value > 0


def _as_enum(enum_cls, value, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidInputError(f"invalid {label} {value}") from None


def validate_order(
    symbol: str,
    kind: OrderKind | str,
    side: Side | str,
    quantity: float,
    price: Optional[float] = None,
    time_in_force: Optional[TimeInForce | str] = None,
) -> OrderRequest:
    """
    Check caller input before anything touches the network.

    Raises
    ------
    InvalidInputError
        Blank symbol, non-finite or non-positive quantity, a limit order
        without a finite positive price, any supplied price that is not
        finite and positive, or an unknown kind/side/time-in-force.
    """
    if not isinstance(symbol, str) or not symbol.strip():
        raise InvalidInputError(f"invalid symbol {symbol}")
    if not _is_positive_number(quantity):
        raise InvalidInputError(f"invalid quantity {quantity}")

    kind = _as_enum(OrderKind, kind, "order kind")
    side = _as_enum(Side, side, "side")

    if kind is OrderKind.LIMIT and price is None:
        raise InvalidInputError(f"invalid price {price}")
    if price is not None and not _is_positive_number(price):
        raise InvalidInputError(f"invalid price {price}")

    tif = TimeInForce.LIMIT if time_in_force is None else _as_enum(TimeInForce, time_in_force, "time in force")

    return OrderRequest(
        symbol=symbol,
        kind=kind,
        side=side,
        quantity=float(quantity),
        price=None if price is None else float(price),
        time_in_force=tif,
    )


def select_depth_order(book: Sequence[RestingOrder], quantity: float) -> RestingOrder:
    """
    Walk *book* in order, summing sizes until the total covers *quantity*.

    Returns the last order inspected; when the whole book is smaller than
    *quantity* that is the final order of the book.
    """
    if not book:
        raise EmptyOrderBookError("Empty order book encountered when placing a market order!")

    filled = 0.0
    selected = book[-1]
    for order in book:
        filled += order.size
        if filled >= quantity:
            selected = order
            break
    return selected


def discover_market_price(book: Sequence[RestingOrder], side: Side, quantity: float) -> float:
    """Limit price for a market order: 5% through the depth-exhausting level."""
    selected = select_depth_order(book, quantity)
    if Side(side) is Side.BUY:
        return selected.price * BUY_SLIPPAGE
    return selected.price * SELL_SLIPPAGE
