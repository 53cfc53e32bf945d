from abc import ABC, abstractmethod
from typing import Any, List, Optional

from solders.keypair import Keypair

from mango_simple.core.models import GroupConfig, MangoAccount, RestingOrder, Side, SpotMarketConfig


class AccountReader(ABC):

    @abstractmethod
    def get_account_data(self, address: str) -> Optional[bytes]:
        """Raw account buffer, or None when the account holds no data."""
        pass


class OrderBookDecoder(ABC):

    @abstractmethod
    def decode(self, market: SpotMarketConfig, data: bytes) -> List[RestingOrder]:
        """Decode one side (bids or asks) of a market's book, in book order."""
        pass


class TradingClient(ABC):
    """Signs and submits protocol transactions on behalf of an owner."""

    @abstractmethod
    def load_group(self, group_config: GroupConfig) -> Any:
        pass

    @abstractmethod
    def get_mango_account(self, group: Any, owner: Keypair) -> Optional[MangoAccount]:
        pass

    # Trading Methods
    @abstractmethod
    def place_spot_order(
        self,
        group: Any,
        account: MangoAccount,
        market: SpotMarketConfig,
        owner: Keypair,
        side: Side,
        price: float,
        quantity: float,
        order_type: str,
        client_id: int,
    ) -> str:
        pass

    @abstractmethod
    def cancel_spot_order(
        self,
        group: Any,
        account: MangoAccount,
        owner: Keypair,
        market: SpotMarketConfig,
        order: RestingOrder,
    ) -> str:
        pass
