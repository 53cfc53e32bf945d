"""Tests for configuration, registry and keypair loading."""

import json

import pytest
from solders.keypair import Keypair

from mango_simple.core.errors import MarketNotFoundError
from mango_simple.helpers.config_helper import (
    DEFAULT_CONFIG_PATH,
    PACKAGE_DIR,
    ClientConfig,
    load_config,
    load_ids,
    read_keypair,
)

IDS = {
    "cluster_urls": {"mainnet": "https://rpc.example", "devnet": "https://devnet.example"},
    "groups": [
        {
            "cluster": "mainnet",
            "name": "mainnet.0",
            "publicKey": "group0",
            "mangoProgramId": "mango",
            "serumProgramId": "serum",
            "spotMarkets": [
                {
                    "name": "BTC/USDC", "publicKey": "btc", "marketIndex": 0, "baseSymbol": "BTC",
                    "baseDecimals": 6, "quoteDecimals": 6, "bidsKey": "bids", "asksKey": "asks",
                    "eventsKey": "events",
                },
            ],
        },
        {
            "cluster": "devnet",
            "name": "devnet.2",
            "publicKey": "group2",
            "mangoProgramId": "mango-dev",
            "serumProgramId": "serum-dev",
        },
    ],
}


class TestLoadConfig:

    def test_load_valid_config(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MANGO_CLUSTER", raising=False)
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"cluster": "devnet", "cancel_max_workers": 2}))

        config = load_config(config_file)

        assert config.cluster == "devnet"
        assert config.cancel_max_workers == 2
        assert config.group_name == "mainnet.0"

    def test_env_overrides(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"cluster": "devnet"}))
        monkeypatch.setenv("MANGO_CLUSTER", "mainnet")
        monkeypatch.setenv("MANGO_HISTORY_URL", "https://history.example")

        config = load_config(config_file)

        assert config.cluster == "mainnet"
        assert config.history_url == "https://history.example"

    def test_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")

    def test_unknown_key(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"made_up": 1}))
        with pytest.raises(ValueError, match="Unsupported config keys"):
            load_config(config_file)

    def test_default_config_ships_inside_package(self, monkeypatch):
        for env in ("MANGO_CLUSTER", "MANGO_GROUP", "MANGO_IDS_PATH", "MANGO_HISTORY_URL", "MANGO_FILLS_URL"):
            monkeypatch.delenv(env, raising=False)

        assert DEFAULT_CONFIG_PATH.parent == PACKAGE_DIR / "config"
        assert PACKAGE_DIR.name == "mango_simple"

        config = load_config()

        assert config.cluster == "mainnet"
        assert config.group_name == "mainnet.0"
        assert config.cancel_max_workers == 8

    def test_config_is_immutable(self):
        with pytest.raises(AttributeError):
            ClientConfig().cluster = "devnet"


class TestIdsRegistry:

    def test_get_group(self, tmp_path):
        path = tmp_path / "ids.json"
        path.write_text(json.dumps(IDS))
        ids = load_ids(path)

        group = ids.get_group("mainnet", "mainnet.0")
        assert group.public_key == "group0"
        assert group.market_symbols == ["BTC/USDC"]
        assert group.spot_markets[0].events_key == "events"
        assert ids.get_group("devnet", "devnet.2").spot_markets == ()
        assert ids.cluster_url("devnet") == "https://devnet.example"

    def test_unknown_group_and_cluster(self, tmp_path):
        path = tmp_path / "ids.json"
        path.write_text(json.dumps(IDS))
        ids = load_ids(path)

        with pytest.raises(MarketNotFoundError):
            ids.get_group("mainnet", "mainnet.9")
        with pytest.raises(MarketNotFoundError):
            ids.cluster_url("testnet")

    def test_missing_registry(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_ids(tmp_path / "ids.json")


class TestReadKeypair:

    def test_from_env(self, monkeypatch, tmp_path):
        kp = Keypair()
        monkeypatch.setenv("KEYPAIR", json.dumps(list(bytes(kp))))
        assert read_keypair(tmp_path / "absent.json").pubkey() == kp.pubkey()

    def test_from_file(self, monkeypatch, tmp_path):
        monkeypatch.delenv("KEYPAIR", raising=False)
        kp = Keypair()
        path = tmp_path / "id.json"
        path.write_text(json.dumps(list(bytes(kp))))
        assert read_keypair(path).pubkey() == kp.pubkey()

    def test_missing_is_fatal(self, monkeypatch, tmp_path):
        monkeypatch.delenv("KEYPAIR", raising=False)
        with pytest.raises(FileNotFoundError, match="No KEYPAIR"):
            read_keypair(tmp_path / "absent.json")
