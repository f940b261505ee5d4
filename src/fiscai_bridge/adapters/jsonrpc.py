"""JSON-RPC 2.0 adapter for the MCP streamable HTTP endpoint."""
from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

from .base import JSON_OR_SSE, BaseUpstreamAdapter, UpstreamResponse

MCP_PATH = "/mcp"

TOOLS_CALL = "tools/call"
PROMPTS_GET = "prompts/get"

# The only error code that sends us to the REST fallback.
INVALID_REQUEST = -32600

def build_envelope(method: str, name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": f"call-{uuid.uuid4().hex}",
        "method": method,
        "params": {"name": name, "arguments": arguments},
    }

def rpc_error(body: Any) -> Optional[Dict[str, Any]]:
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return body["error"]
    return None

def is_fallback_trigger(body: Any) -> bool:
    err = rpc_error(body)
    return err is not None and err.get("code") == INVALID_REQUEST

class JsonRpcAdapter(BaseUpstreamAdapter):
    def send(self, method: str, name: str, arguments: Dict[str, Any]) -> UpstreamResponse:
        return self.post(MCP_PATH, build_envelope(method, name, arguments), accept=JSON_OR_SSE)
