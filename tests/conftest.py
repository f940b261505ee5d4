import json

import pytest

from src.fiscai_bridge.adapters import base
from src.fiscai_bridge.config import BridgeConfig

class FakeResponse:
    def __init__(self, status_code=200, body=None, content_type="application/json", text=None):
        self.status_code = status_code
        self.headers = {"Content-Type": content_type} if content_type else {}
        if text is None:
            text = json.dumps(body)
        self.text = text

class FakeServer:
    """Replaces requests.post; answers from a queue and records every call."""

    def __init__(self):
        self.responses = []
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def __call__(self, url, headers=None, json=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        r = self.responses.pop(0)
        if isinstance(r, Exception):
            raise r
        return r

@pytest.fixture
def config():
    return BridgeConfig(base_url="http://mcp.test", timeout=5)

@pytest.fixture
def server(monkeypatch):
    s = FakeServer()
    monkeypatch.setattr(base.requests, "post", s)
    return s
