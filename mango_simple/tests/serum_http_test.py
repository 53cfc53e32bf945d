"""Tests for the history and fills HTTP clients (no network; the session is mocked)."""

from unittest.mock import Mock

import pytest
import requests

from mango_simple.core.errors import InvalidInputError
from mango_simple.exchanges.serum_fills import SerumFillsClient
from mango_simple.exchanges.serum_history import SerumHistoryClient


def mock_session(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    session = Mock(spec=requests.Session)
    session.get.return_value = response
    return session


class TestSerumHistoryClient:

    def test_request_uses_epoch_seconds(self):
        session = mock_session({"s": "ok", "t": [], "o": [], "h": [], "l": [], "c": [], "v": []})
        client = SerumHistoryClient("https://history.example/", session=session)

        client.fetch_ohlcv("BTC/USDC", "1", 1620000000000, 1620001200999)

        url = session.get.call_args.args[0]
        params = session.get.call_args.kwargs["params"]
        assert url == "https://history.example/tv/history"
        assert params == {"symbol": "BTC/USDC", "resolution": "1", "from": 1620000000, "to": 1620001200}

    def test_parallel_arrays_to_bars(self):
        session = mock_session({
            "s": "ok",
            "t": [1620000000, 1620000060],
            "o": [1.0, 1.5],
            "h": [2.0, 2.5],
            "l": [0.5, 1.0],
            "c": [1.5, 2.0],
            "v": [10, 12],
        })
        bars = SerumHistoryClient(session=session).fetch_ohlcv("BTC/USDC", "1", 0, 1)

        assert [b.time_s for b in bars] == [1620000000, 1620000060]
        assert bars[1].close == 2.0
        assert bars[0].volume == 10.0
        assert all(a.time_s <= b.time_s for a, b in zip(bars, bars[1:]))

    def test_no_data_response(self):
        session = mock_session({"s": "no_data"})
        assert SerumHistoryClient(session=session).fetch_ohlcv("BTC/USDC", "1D", 0, 1) == []

    def test_unknown_resolution(self):
        session = mock_session({})
        with pytest.raises(InvalidInputError, match="invalid resolution"):
            SerumHistoryClient(session=session).fetch_ohlcv("BTC/USDC", "7", 0, 1)
        session.get.assert_not_called()

    def test_http_error_propagates(self):
        session = mock_session({})
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError("503")
        with pytest.raises(requests.HTTPError):
            SerumHistoryClient(session=session).fetch_ohlcv("BTC/USDC", "1", 0, 1)


class TestSerumFillsClient:

    def test_fetch_fills(self):
        fill = {"openOrders": "G5rZ", "side": "sell", "size": 0.0017}
        session = mock_session({"data": [fill]})
        client = SerumFillsClient("https://fills.example", session=session)

        assert client.fetch_fills("G5rZ") == [fill]
        assert session.get.call_args.args[0] == "https://fills.example/trades/open_orders/G5rZ"

    @pytest.mark.parametrize("payload", [{}, {"data": None}, None])
    def test_missing_data(self, payload):
        assert SerumFillsClient(session=mock_session(payload)).fetch_fills("G5rZ") == []
