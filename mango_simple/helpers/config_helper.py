"""Configuration loading for the simple client.

This module provides:
- ClientConfig / load_config: runtime settings from JSON plus environment overrides.
- IdsRegistry / load_ids: the static cluster and group registry (mango ``ids.json``).
- read_keypair: the signer's key material from ``KEYPAIR`` or the local keypair file.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from solders.keypair import Keypair

from mango_simple.core.errors import MarketNotFoundError
from mango_simple.core.models import GroupConfig

PACKAGE_DIR = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = PACKAGE_DIR / "config" / "simple_client_config.json"
DEFAULT_KEYPAIR_PATH = Path.home() / ".config" / "solana" / "id.json"

_ENV_OVERRIDES = {
    "MANGO_CLUSTER": "cluster",
    "MANGO_GROUP": "group_name",
    "MANGO_IDS_PATH": "ids_path",
    "MANGO_HISTORY_URL": "history_url",
    "MANGO_FILLS_URL": "fills_url",
}


@dataclass(frozen=True)
class ClientConfig:
    cluster: str = "mainnet"
    group_name: str = "mainnet.0"
    commitment: str = "processed"
    ids_path: str = str(PACKAGE_DIR / "config" / "ids.json")
    history_url: str = "https://serum-history.herokuapp.com"
    fills_url: str = "https://stark-fjord-45757.herokuapp.com"
    keypair_path: str = str(DEFAULT_KEYPAIR_PATH)
    cancel_max_workers: int = 8
    log_level: str = "INFO"


def load_config(config_path: Optional[str | Path] = None) -> ClientConfig:
    """Load settings from JSON, then apply ``MANGO_*`` environment overrides.

    Args:
        config_path: Path to config JSON file, defaults to ``mango_simple/config/simple_client_config.json``

    Returns:
        Immutable ClientConfig

    Raises:
        FileNotFoundError: If the config file does not exist
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r') as f:
        data = json.load(f)

    known = set(ClientConfig.__dataclass_fields__)
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unsupported config keys: {', '.join(unknown)}")

    config = ClientConfig(**data)

    overrides = {attr: os.environ[env] for env, attr in _ENV_OVERRIDES.items() if os.getenv(env)}
    if overrides:
        config = replace(config, **overrides)
    return config


@dataclass(frozen=True)
class IdsRegistry:
    cluster_urls: dict[str, str] = field(default_factory=dict)
    groups: tuple[GroupConfig, ...] = ()

    def cluster_url(self, cluster: str) -> str:
        try:
            return self.cluster_urls[cluster]
        except KeyError:
            raise MarketNotFoundError(f"cluster not found: {cluster}") from None

    def get_group(self, cluster: str, name: str) -> GroupConfig:
        for group in self.groups:
            if group.cluster == cluster and group.name == name:
                return group
        raise MarketNotFoundError(f"group not found: {cluster}/{name}")


def load_ids(ids_path: str | Path) -> IdsRegistry:
    path = Path(ids_path)
    if not path.exists():
        raise FileNotFoundError(f"Ids registry not found: {path}")

    with open(path, 'r') as f:
        data = json.load(f)

    return IdsRegistry(
        cluster_urls=dict(data.get("cluster_urls", {})),
        groups=tuple(GroupConfig.from_dict(g) for g in data.get("groups", [])),
    )


def read_keypair(keypair_path: str | Path = DEFAULT_KEYPAIR_PATH) -> Keypair:
    """Signer from the ``KEYPAIR`` env var (JSON byte array), else from *keypair_path*."""
    raw = os.getenv("KEYPAIR")
    if not raw:
        path = Path(keypair_path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"No KEYPAIR in environment and no keypair file at {path}")
        raw = path.read_text(encoding="utf-8")

    secret = json.loads(raw)
    return Keypair.from_bytes(bytes(secret))
