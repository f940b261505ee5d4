"""McpClient: one logical tool/prompt call against the MCP server.

Flow:
1) JSON-RPC envelope to /mcp (JSON or SSE response accepted).
2) If the server answers with JSON-RPC "invalid request" (-32600), retry once
   through the REST-shaped endpoint. Nothing else is retried.
"""
from __future__ import annotations

from typing import Any, Callable, Dict

from .adapters.base import UpstreamResponse
from .adapters.jsonrpc import PROMPTS_GET, TOOLS_CALL, JsonRpcAdapter, is_fallback_trigger, rpc_error
from .adapters.rest import RestAdapter
from .config import BridgeConfig
from .errors import FallbackError, UpstreamError
from .logging_util import get_logger
from .types import JsonValue

logger = get_logger(__name__)

class McpClient:
    def __init__(self, config: BridgeConfig):
        self.config = config
        self._rpc = JsonRpcAdapter(config)
        self._rest = RestAdapter(config)

    def call_tool(self, name: str, arguments: Dict[str, Any]) -> JsonValue:
        logger.info("calling tool %s", name)
        return self._invoke(TOOLS_CALL, name, arguments, self._rest.call_tool)

    def get_prompt(self, name: str, arguments: Dict[str, Any]) -> JsonValue:
        logger.info("getting prompt %s", name)
        return self._invoke(PROMPTS_GET, name, arguments, self._rest.get_prompt)

    def _invoke(
        self,
        method: str,
        name: str,
        arguments: Dict[str, Any],
        fallback: Callable[[str, Dict[str, Any]], UpstreamResponse],
    ) -> JsonValue:
        resp = self._rpc.send(method, name, arguments)

        if is_fallback_trigger(resp.body):
            logger.warning("%s %s rejected as invalid request, using REST fallback", method, name)
            alt = fallback(name, arguments)
            if not alt.ok:
                raise FallbackError(
                    f"fallback call for {name} failed: http {alt.status_code}: {alt.describe()}",
                    upstream_status=alt.status_code,
                    body=alt.body,
                )
            return alt.body

        if resp.ok and rpc_error(resp.body) is None:
            return self._unwrap(resp.body)

        raise UpstreamError(
            f"MCP error calling {name}: http {resp.status_code}: {resp.describe()}",
            upstream_status=resp.status_code,
            body=resp.body,
        )

    @staticmethod
    def _unwrap(body: JsonValue) -> JsonValue:
        if isinstance(body, dict) and body.get("result") is not None:
            return body["result"]
        return body
