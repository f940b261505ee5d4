import pytest

from src.fiscai_bridge.errors import ConfigError
from src.fiscai_bridge.registry import load_registry

@pytest.mark.parametrize("path,name", [
    ("/recommendation", "recommendation"),
    ("/prod/fiscal-advice", "fiscal-advice"),
    ("/fiscaladvice", "fiscal-advice"),
    ("/chat", "chat"),
    ("/risk-analysis", "risk-analysis"),
    ("/risk", "risk-analysis"),
    ("/risk-assessment", "risk-assessment"),
    ("/search", "search"),
    ("/map", "places"),
    ("/user-context", "user-context"),
    ("/fiscal-consultation", "fiscal-consultation"),
    ("/health", "health"),
    ("", "info"),
    ("/", "info"),
    ("/info", "info"),
])
def test_resolve(path, name):
    assert load_registry().resolve(path).name == name

def test_unknown_path():
    assert load_registry().resolve("/nope") is None

def test_available_paths_start_with_health():
    paths = load_registry().available_paths()
    assert paths[0] == "/health"
    assert "/recommendation" in paths

def test_missing_registry_fails(tmp_path):
    with pytest.raises(ConfigError):
        load_registry(tmp_path / "endpoints.yaml")

def test_tool_without_upstream_fails(tmp_path):
    p = tmp_path / "endpoints.yaml"
    p.write_text("endpoints:\n  - name: x\n    kind: tool\n    paths: [/x]\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_registry(p)

def test_custom_registry(tmp_path):
    p = tmp_path / "endpoints.yaml"
    p.write_text(
        "service: test\nversion: 9.9.9\nendpoints:\n"
        "  - name: echo\n    kind: tool\n    upstream: echo_tool\n    paths: [/echo]\n    required: [text]\n",
        encoding="utf-8",
    )
    reg = load_registry(p)
    assert reg.version == "9.9.9"
    assert reg.resolve("/api/echo").upstream == "echo_tool"

def test_unsupported_type_fails(tmp_path):
    p = tmp_path / "endpoints.yaml"
    p.write_text(
        "endpoints:\n  - name: x\n    kind: tool\n    upstream: x\n    paths: [/x]\n    types: {tags: list}\n",
        encoding="utf-8",
    )
    with pytest.raises(ConfigError):
        load_registry(p)
