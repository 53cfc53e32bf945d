"""
Batch cancellation of resting orders.

Each market's cancellations are submitted concurrently on a thread pool and
the batch completes as a unit. Across markets the work is sequential: one
market's batch finishes before the next market starts.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, Sequence

from mango_simple.core.errors import UpstreamError
from mango_simple.core.models import RestingOrder

_DEFAULT_MAX_WORKERS = 8

CancelFn = Callable[[RestingOrder], str]


def filter_by_client_id(orders: Iterable[RestingOrder], client_id: Optional[str]) -> List[RestingOrder]:
    """Orders whose client id string-matches *client_id*; all of them when it is None.

    A client id that belongs to none of *orders* gives an empty list.
    """
    orders = list(orders)
    if client_id is None:
        return orders
    return [o for o in orders if o.client_id is not None and str(o.client_id) == str(client_id)]


class CancellationEngine:
    """
    Cancels batches of orders through a caller-supplied cancel function.

    Parameters
    ----------
    max_workers : int
        Upper bound on concurrent cancel submissions within one market.
    logger : logging.Logger, optional
    """

    def __init__(self, max_workers: int = _DEFAULT_MAX_WORKERS, logger: Optional[logging.Logger] = None) -> None:
        self.max_workers = max_workers
        self.logger = logger or logging.getLogger(__name__)

    def cancel_batch(self, symbol: str, orders: Sequence[RestingOrder], cancel: CancelFn) -> List[str]:
        """
        Submit every cancellation at once and wait for all of them.

        Returns the signatures in the order of *orders*. If any submission
        fails, the first failure is raised once the batch has finished;
        the other cancellations may already be on-chain.
        """
        if not orders:
            self.logger.info(f"[{symbol}] nothing to cancel")
            return []

        workers = max(1, min(self.max_workers, len(orders)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(cancel, order) for order in orders]

        # the pool has joined; every future is done
        errors = [f.exception() for f in futures if f.exception() is not None]
        if errors:
            self.logger.error(f"[{symbol}] {len(errors)}/{len(orders)} cancellations failed: {errors[0]}")
            raise errors[0]

        signatures = [f.result() for f in futures]
        self.logger.info(f"[{symbol}] cancelled {len(signatures)} orders")
        return signatures

    def cancel_markets(
        self,
        symbols: Sequence[str],
        load_orders: Callable[[str], Sequence[RestingOrder]],
        make_cancel: Callable[[str], CancelFn],
    ) -> List[str]:
        """
        Cancel every market in *symbols*, one market at a time.

        A market that fails is logged and skipped so the remaining markets
        are still attempted; an UpstreamError listing the failed markets is
        raised at the end.
        """
        signatures: List[str] = []
        failures: dict[str, Exception] = {}

        for symbol in symbols:
            try:
                orders = load_orders(symbol)
                signatures.extend(self.cancel_batch(symbol, orders, make_cancel(symbol)))
            except Exception as exc:
                self.logger.error(f"[{symbol}] cancellation failed: {exc}")
                failures[symbol] = exc

        if failures:
            first = next(iter(failures.values()))
            raise UpstreamError(
                f"cancellation failed for markets: {', '.join(failures)}"
            ) from first
        return signatures
