"""Error taxonomy. Every error knows the HTTP status it maps to."""
from __future__ import annotations

from typing import Any, List, Optional


class BridgeError(Exception):
    status_code = 500


class ConfigError(BridgeError):
    pass


class ValidationError(BridgeError):
    status_code = 400


class MissingParameterError(ValidationError):
    def __init__(self, name: str, required: List[str], optional: Optional[List[str]] = None):
        super().__init__(f'Falta el parámetro "{name}"')
        self.name = name
        self.required = list(required)
        self.optional = list(optional or [])


class UpstreamError(BridgeError):
    def __init__(self, message: str, upstream_status: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.body = body


class TransportError(UpstreamError):
    pass


class FallbackError(UpstreamError):
    pass
