"""AWS Lambda entrypoint.

Design goals:
- Keep this file small and stable.
- Delegate all real logic to src/fiscai_bridge so that:
  - The same codebase can be used from the CLI and from Lambda.
  - New MCP tools are added in configs/endpoints.yaml without touching Lambda glue.

Expected event shapes:
1) API Gateway REST (body is a JSON string):
   {"path": "/recommendation", "httpMethod": "POST", "body": "{\"profile\": {\"actividad\": \"...\"}}"}

2) API Gateway HTTP API:
   {"rawPath": "/chat", "requestContext": {"http": {"method": "POST"}}, "body": "{\"message\": \"hola\"}"}

3) Direct invoke / local test (event itself is the parameter dict; routed to /info
   unless it carries a "path"):
   {"path": "/search", "query": "RESICO"}

Return:
- statusCode: 200 / 400 / 404 / 500
- headers: JSON content type + CORS
- body: JSON string
"""
from typing import Any, Dict, Optional

from src.fiscai_bridge.bridge import FiscalBridge, create_response
from src.fiscai_bridge.errors import BridgeError
from src.fiscai_bridge.logging_util import get_logger
from src.fiscai_bridge.types import utc_timestamp

logger = get_logger(__name__)

# Built on first invocation and reused while the container stays warm.
_bridge: Optional[FiscalBridge] = None

def _get_bridge() -> FiscalBridge:
    global _bridge
    if _bridge is None:
        _bridge = FiscalBridge()
    return _bridge

def lambda_handler(event: Dict[str, Any], context: Any):
    try:
        bridge = _get_bridge()
    except BridgeError as e:
        logger.exception("lambda_handler init error: %s", e)
        return create_response(500, {"error": str(e), "timestamp": utc_timestamp()})

    return bridge.handle(event or {}, request_id=getattr(context, "aws_request_id", None))
