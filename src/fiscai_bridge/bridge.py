"""FiscalBridge: routes one gateway event to a handler and builds the HTTP response."""
from __future__ import annotations

import json
import traceback
from pathlib import Path
from typing import Any, Dict, Optional

from . import handlers
from .client import McpClient
from .config import BridgeConfig, load_config
from .errors import BridgeError, MissingParameterError, UpstreamError
from .input_spec import extract_method, extract_params, extract_path
from .logging_util import get_logger, log_step
from .registry import Endpoint, Registry, load_registry
from .types import utc_timestamp

logger = get_logger(__name__)

CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

def create_response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": dict(CORS_HEADERS),
        "body": json.dumps(body, ensure_ascii=False, default=str),
    }

class FiscalBridge:
    def __init__(
        self,
        config: Optional[BridgeConfig] = None,
        registry: Optional[Registry] = None,
        client: Optional[McpClient] = None,
        registry_path: Optional[Path] = None,
    ):
        self.config = config or load_config()
        self.registry = registry or load_registry(registry_path)
        self.client = client or McpClient(self.config)

    def handle(self, event: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]:
        method = extract_method(event)
        if method == "OPTIONS":
            return create_response(200, {"message": "OK"})

        path = extract_path(event)
        log_step(logger, "1", "route %s %s (request_id=%s)", method or "-", path or "/", request_id)

        try:
            endpoint = self.registry.resolve(path)
            if endpoint is None:
                logger.warning("no endpoint for path %r", path)
                return create_response(404, self._not_found(event, method))

            log_step(logger, "2", "endpoint %s", endpoint.name)
            params = extract_params(event)

            log_step(logger, "3", "dispatch")
            status, body = self._dispatch(endpoint, params)
            return create_response(status, body)

        except MissingParameterError as e:
            missing: Dict[str, Any] = {"error": str(e), "required": e.required}
            if e.optional:
                missing["optional"] = e.optional
            return create_response(e.status_code, missing)

        except BridgeError as e:
            logger.error("request failed (%s): %s", type(e).__name__, e)
            return create_response(e.status_code, self._error_body(e))

        except Exception as e:
            logger.exception("FiscalBridge.handle fatal error: %s", e)
            return create_response(500, self._error_body(e))

    def _dispatch(self, endpoint: Endpoint, params: Dict[str, Any]) -> handlers.HandlerResult:
        name = endpoint.name
        if name == "health":
            return handlers.health(self.config, self.registry)
        if name == "info":
            return handlers.info(self.config, self.registry)
        if name == "recommendation":
            return handlers.recommendation(self.client, endpoint, params)
        return handlers.proxy(self.client, endpoint, params)

    def _error_body(self, e: Exception) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": str(e), "timestamp": utc_timestamp()}
        if isinstance(e, UpstreamError) and e.upstream_status is not None:
            body["upstream_status"] = e.upstream_status
        if self.config.dev_mode:
            body["stack"] = "".join(traceback.format_exception(type(e), e, e.__traceback__))
        return body

    def _not_found(self, event: Dict[str, Any], method: Optional[str]) -> Dict[str, Any]:
        return {
            "error": "Endpoint no encontrado",
            "endpoint_requested": "unknown",
            "path": event.get("path") or event.get("rawPath") or "N/A",
            "method": method or "N/A",
            "available_endpoints": self.registry.available_paths(),
            "tip": "Accede a / o /info para ver la documentación completa",
            "timestamp": utc_timestamp(),
        }
