"""Shared HTTP plumbing for talking to the MCP server."""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from ..config import BridgeConfig
from ..errors import TransportError
from ..logging_util import get_logger
from ..types import JsonValue

logger = get_logger(__name__)

JSON_ONLY = "application/json"
JSON_OR_SSE = "application/json, text/event-stream"

@dataclass
class UpstreamResponse:
    status_code: int
    body: JsonValue

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    def describe(self) -> str:
        text = self.body if isinstance(self.body, str) else json.dumps(self.body, ensure_ascii=False)
        return text[:800]

def _sse_data(text: str) -> Optional[str]:
    # "event: message\ndata: {json}\n\n" -> first data payload
    for line in text.strip().splitlines():
        if line.startswith("data:"):
            return line[len("data:"):].strip()
    return None

def decode_body(text: str, content_type: str) -> JsonValue:
    """Parse an upstream body. Falls back to the raw text when it is not JSON."""
    try:
        if "text/event-stream" in (content_type or ""):
            data = _sse_data(text)
            if data:
                return json.loads(data)
        return json.loads(text)
    except ValueError:
        logger.debug("upstream body is not JSON (content-type=%s), keeping raw text", content_type)
        return text

class BaseUpstreamAdapter:
    def __init__(self, config: BridgeConfig):
        self.config = config

    def url(self, path: str) -> str:
        return f"{self.config.base_url}/{path.lstrip('/')}"

    def post(self, path: str, payload: Dict[str, Any], accept: str = JSON_ONLY) -> UpstreamResponse:
        url = self.url(path)
        headers = {
            "Content-Type": "application/json",
            "Accept": accept,
            "User-Agent": self.config.user_agent,
        }

        try:
            r = requests.post(url, headers=headers, json=payload, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise TransportError(f"request failed: {e}")

        content_type = r.headers.get("Content-Type", "")
        logger.info("POST %s -> %s (%s)", url, r.status_code, content_type or "no content-type")
        return UpstreamResponse(r.status_code, decode_body(r.text, content_type))
