import json

import pytest

from conftest import FakeResponse
from src.fiscai_bridge.bridge import FiscalBridge
from src.fiscai_bridge.config import BridgeConfig

def _event(path, body=None, method="POST", qs=None):
    return {
        "path": path,
        "httpMethod": method,
        "queryStringParameters": qs,
        "body": json.dumps(body) if body is not None else None,
    }

def _call(bridge, event):
    resp = bridge.handle(event)
    return resp["statusCode"], json.loads(resp["body"]), resp["headers"]

@pytest.fixture
def bridge(config):
    return FiscalBridge(config=config)

def test_options_preflight(bridge, server):
    status, body, headers = _call(bridge, {"path": "/chat", "httpMethod": "OPTIONS"})
    assert status == 200
    assert body == {"message": "OK"}
    assert headers["Access-Control-Allow-Origin"] == "*"
    assert headers["Access-Control-Allow-Methods"] == "GET, POST, OPTIONS"
    assert server.calls == []

def test_health(bridge):
    status, body, _ = _call(bridge, _event("/health", method="GET"))
    assert status == 200
    assert body["status"] == "healthy"
    assert body["mcp_server"] == "http://mcp.test"
    assert body["timestamp"].endswith("Z")

def test_info(bridge):
    status, body, _ = _call(bridge, {"rawPath": "/", "requestContext": {"http": {"method": "GET"}}})
    assert status == 200
    assert body["endpoints"]["recommendation"] == "/recommendation"
    assert body["usage"]["fiscal-advice"]["required"] == ["actividad"]

def test_unknown_path_is_404(bridge):
    status, body, _ = _call(bridge, _event("/nope"))
    assert status == 404
    assert "/health" in body["available_endpoints"]
    assert body["path"] == "/nope"
    assert body["method"] == "POST"

def test_missing_actividad_is_400(bridge, server):
    status, body, _ = _call(bridge, _event("/fiscal-advice", {"estado": "CDMX"}))
    assert status == 400
    assert body["required"] == ["actividad"]
    assert "ingresos_anuales" in body["optional"]
    assert server.calls == []

def test_user_context_400_has_no_optional(bridge):
    status, body, _ = _call(bridge, _event("/user-context", {}))
    assert status == 400
    assert body["required"] == ["user_id"]
    assert "optional" not in body

def test_invalid_number_is_400(bridge):
    status, body, _ = _call(bridge, _event("/search", {"query": "x", "limit": "muchos"}))
    assert status == 400
    assert "limit" in body["error"]

def test_chat_proxy_wraps_request(bridge, server):
    server.queue(FakeResponse(200, {"jsonrpc": "2.0", "id": "x", "result": {"data": {"response": "hola"}}}))

    status, body, _ = _call(bridge, _event("/chat", {"message": "¿Cómo saco mi RFC?"}))

    assert status == 200
    assert body["success"] is True
    assert body["source"] == "mcp_server"
    assert body["data"] == {"data": {"response": "hola"}}
    sent = server.calls[0]["json"]["params"]
    assert sent["name"] == "chat_with_fiscal_assistant"
    assert sent["arguments"] == {"request": {"message": "¿Cómo saco mi RFC?", "user_id": "lambda-user"}}

def test_prompt_proxy_sends_bare_arguments(bridge, server):
    server.queue(FakeResponse(200, {"jsonrpc": "2.0", "id": 1, "result": {"messages": []}}))

    status, _, _ = _call(bridge, _event("/fiscal-consultation", {"business_type": "tienda", "state": "Jalisco"}))

    assert status == 200
    assert server.calls[0]["json"]["params"]["arguments"] == {"business_type": "tienda", "state": "Jalisco"}

def test_upstream_error_is_500(bridge, server):
    server.queue(FakeResponse(502, {"message": "bad gateway"}))

    status, body, _ = _call(bridge, _event("/search", {"query": "RESICO"}))

    assert status == 500
    assert body["upstream_status"] == 502
    assert "bad gateway" in body["error"]
    assert "stack" not in body

def test_dev_mode_includes_stack(server):
    bridge = FiscalBridge(config=BridgeConfig(base_url="http://mcp.test", environment="development"))
    server.queue(FakeResponse(500, {"message": "boom"}))

    status, body, _ = _call(bridge, _event("/search", {"query": "RESICO"}))

    assert status == 500
    assert "Traceback" in body["stack"]

def test_recommendation_end_to_end(bridge, server):
    payload = {
        "success": True,
        "data": {
            "recommendation": "Te conviene RESICO.",
            "sources": [{"title": "LISR art. 113-E", "scope": "Federal", "similarity": 0.91}],
        },
    }
    server.queue(FakeResponse(200, {
        "jsonrpc": "2.0",
        "id": "x",
        "result": {"content": [{"type": "text", "text": json.dumps(payload)}]},
    }))

    status, body, _ = _call(bridge, _event("/recommendation", {"profile": {
        "actividad": "Diseñador gráfico freelance",
        "ingresos_anuales": 450000,
        "has_rfc": True,
        "has_efirma": True,
        "emite_cfdi": True,
    }}))

    assert status == 200
    assert body["recommendation"] == "Te conviene RESICO."
    assert body["risk"]["score"] == 75
    assert body["risk"]["level"] == "Amarillo"
    assert body["risk"]["issues"] == ["No presenta declaraciones mensuales"]
    assert body["matches_count"] == 1
    assert body["sources"][0] == {"title": "LISR art. 113-E", "scope": "Federal", "url": "Libro", "similarity": 0.91}
    assert body["profile"]["estado"] == "No especificado"
    assert body["profile"]["metodos_pago"] == []

    sent = server.calls[0]["json"]["params"]
    assert sent["name"] == "get_fiscal_advice"
    assert sent["arguments"]["request"]["tiene_rfc"] is True

def test_recommendation_survives_upstream_failure(bridge, server):
    server.queue(FakeResponse(500, {"message": "db down"}))

    status, body, _ = _call(bridge, _event("/recommendation", {"actividad": "Taquería"}))

    assert status == 200
    assert body["recommendation"].startswith("Error al generar recomendación:")
    assert body["sources"] == []
    assert body["matches_count"] == 0
    assert body["risk"]["score"] == 0
    assert body["risk"]["level"] == "Rojo"

def test_recommendation_missing_actividad(bridge):
    status, body, _ = _call(bridge, _event("/recommendation", {"profile": {"estado": "CDMX"}}))
    assert status == 400
    assert body["required"] == ["actividad"]

def test_lambda_handler():
    import lambda_function

    class Ctx:
        aws_request_id = "req-1"

    resp = lambda_function.lambda_handler({"path": "/health", "httpMethod": "GET"}, Ctx())
    assert resp["statusCode"] == 200
    assert json.loads(resp["body"])["status"] == "healthy"

@pytest.mark.parametrize("value", ["nan", "inf", "1e400"])
def test_non_finite_income_is_400(bridge, server, value):
    resp = bridge.handle(_event("/recommendation", {"actividad": "x", "ingresos_anuales": value}))

    assert resp["statusCode"] == 400
    body = json.loads(resp["body"], parse_constant=lambda c: pytest.fail(f"non-JSON constant {c}"))
    assert "ingresos_anuales" in body["error"]
    assert server.calls == []

def test_overflowing_employees_is_400(bridge, server):
    status, body, _ = _call(bridge, _event("/recommendation", {"actividad": "x", "empleados": "1e400"}))
    assert status == 400
    assert "empleados" in body["error"]
    assert server.calls == []

def test_recommendation_does_not_forward_defaults(bridge, server):
    server.queue(FakeResponse(200, {"jsonrpc": "2.0", "id": "x", "result": {"recommendation": "ok"}}))

    status, body, _ = _call(bridge, _event("/recommendation", {"actividad": "x"}))

    assert status == 200
    assert server.calls[0]["json"]["params"]["arguments"] == {"request": {"actividad": "x"}}
    assert body["profile"]["estado"] == "No especificado"
    assert body["profile"]["ingresos_anuales"] == 0.0

def test_lambda_handler_bad_timeout_is_json_500(monkeypatch, server):
    import lambda_function

    monkeypatch.setenv("FISCAI_HTTP_TIMEOUT", "soon")
    monkeypatch.setattr(lambda_function, "_bridge", None)

    resp = lambda_function.lambda_handler({"path": "/health", "httpMethod": "GET"}, None)

    assert resp["statusCode"] == 500
    assert resp["headers"]["Access-Control-Allow-Origin"] == "*"
    body = json.loads(resp["body"])
    assert "FISCAI_HTTP_TIMEOUT" in body["error"]
    assert lambda_function._bridge is None
    assert server.calls == []
