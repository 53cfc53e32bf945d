"""
Account reader backed by a Solana JSON-RPC node.

    reader = SolanaAccountReader("https://api.mainnet-beta.solana.com")
    data = reader.get_account_data("<base58 bids address>")
"""

from __future__ import annotations

import logging
from typing import Optional

from solana.rpc.api import Client
from solana.rpc.commitment import Commitment
from solders.pubkey import Pubkey

from mango_simple.exchanges.base import AccountReader

_DEFAULT_COMMITMENT = "processed"


class SolanaAccountReader(AccountReader):
    """
    Reads raw account buffers through ``solana.rpc.api.Client``.

    Parameters
    ----------
    endpoint : str
        Cluster RPC URL.
    commitment : str
        Commitment level for every read, ``"processed"`` by default.
    client : solana.rpc.api.Client, optional
        Pre-built client (tests pass a mock here).
    """

    def __init__(
        self,
        endpoint: str,
        commitment: str = _DEFAULT_COMMITMENT,
        client: Optional[Client] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.endpoint = endpoint
        self.commitment = Commitment(commitment)
        self._client = client or Client(endpoint, commitment=self.commitment)

    def get_account_data(self, address: str) -> Optional[bytes]:
        resp = self._client.get_account_info(Pubkey.from_string(address), commitment=self.commitment)
        account = resp.value
        if account is None or not account.data:
            self.logger.debug(f"No data in account {address}")
            return None
        return bytes(account.data)
