from __future__ import annotations

import os
from dataclasses import dataclass

from .config import DEFAULT_CONFIRMATION_THRESHOLD, DEFAULT_REVERT_THRESHOLD, LauncherConfig, get_config


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    # Core
    docker_network: str = os.getenv("SOVANET_DOCKER_NETWORK", "sovanet")
    log_level: str = os.getenv("SOVANET_LOG_LEVEL", "INFO")
    api_url: str = os.getenv("SOVANET_API_URL", "http://localhost:8000")
    topology_path: str = os.getenv("SOVANET_TOPOLOGY", "network_params.yaml")

    # Sentinel defaults (used by the API when a request leaves them out)
    bitcoin_rpc_url: str | None = os.getenv("SOVANET_BITCOIN_RPC_URL")
    bitcoin_rpc_user: str | None = os.getenv("SOVANET_BITCOIN_RPC_USER")
    bitcoin_rpc_pass: str | None = os.getenv("SOVANET_BITCOIN_RPC_PASS")
    confirmation_threshold: int = _env_int("SOVANET_CONFIRMATION_THRESHOLD", DEFAULT_CONFIRMATION_THRESHOLD)
    revert_threshold: int = _env_int("SOVANET_REVERT_THRESHOLD", DEFAULT_REVERT_THRESHOLD)
    persistent: bool = _env_bool("SOVANET_PERSISTENT", False)

    def launcher_config(self) -> LauncherConfig:
        return get_config(
            bitcoin_rpc_url=self.bitcoin_rpc_url,
            bitcoin_rpc_user=self.bitcoin_rpc_user,
            bitcoin_rpc_pass=self.bitcoin_rpc_pass,
            confirmation_threshold=self.confirmation_threshold,
            revert_threshold=self.revert_threshold,
        )


settings = Settings()
