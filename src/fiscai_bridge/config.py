"""Runtime configuration.

Read once from the environment when the bridge is built and passed explicitly to the
components that need it, so tests can point the client at a fake server.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigError

DEFAULT_MCP_SERVER_URL = "https://fiscmcp.fastmcp.app"
DEFAULT_TIMEOUT = 30.0

@dataclass(frozen=True)
class BridgeConfig:
    base_url: str = DEFAULT_MCP_SERVER_URL
    timeout: float = DEFAULT_TIMEOUT
    environment: str = "production"
    user_agent: str = "FiscAI-Lambda-Bridge"

    @property
    def dev_mode(self) -> bool:
        return self.environment == "development"

def _to_timeout(v: Optional[str]) -> float:
    if v is None or not v.strip():
        return DEFAULT_TIMEOUT
    try:
        t = float(v)
    except ValueError:
        raise ConfigError(f"FISCAI_HTTP_TIMEOUT must be a number: {v!r}")
    if t <= 0:
        raise ConfigError(f"FISCAI_HTTP_TIMEOUT must be positive: {v!r}")
    return t

def load_config(env: Optional[Mapping[str, str]] = None) -> BridgeConfig:
    env = os.environ if env is None else env

    base_url = (env.get("MCP_SERVER_URL") or "").strip() or DEFAULT_MCP_SERVER_URL
    return BridgeConfig(
        base_url=base_url.rstrip("/"),
        timeout=_to_timeout(env.get("FISCAI_HTTP_TIMEOUT")),
        environment=(env.get("FISCAI_ENV") or "production").strip().lower(),
    )
