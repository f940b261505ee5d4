"""REST-shaped fallback for servers that reject the JSON-RPC envelope."""
from __future__ import annotations

from typing import Any, Dict

from .base import JSON_ONLY, BaseUpstreamAdapter, UpstreamResponse

class RestAdapter(BaseUpstreamAdapter):
    def call_tool(self, name: str, arguments: Dict[str, Any]) -> UpstreamResponse:
        return self.post(f"/tools/{name}/call", arguments, accept=JSON_ONLY)

    def get_prompt(self, name: str, arguments: Dict[str, Any]) -> UpstreamResponse:
        return self.post(f"/prompts/{name}", arguments, accept=JSON_ONLY)
