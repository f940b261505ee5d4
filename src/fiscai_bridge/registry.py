"""Endpoint registry.

Design:
- The endpoint table lives in configs/endpoints.yaml so adding a proxied MCP
  tool is a config change, not a code change.
- Routing is by substring on the request path, in file order.
- A missing or malformed table is a deployment error and fails at cold start.

endpoints.yaml supports:
- name, kind (tool | prompt | local), upstream
- paths (substring aliases) or exact_paths
- required / optional parameter names, types, defaults
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError
from .logging_util import get_logger

logger = get_logger(__name__)

DEFAULT_REGISTRY_PATH = Path(__file__).resolve().parent / "configs" / "endpoints.yaml"

KINDS = ("tool", "prompt", "local")
TYPES = ("bool", "int", "float")

@dataclass
class Endpoint:
    name: str
    kind: str
    upstream: Optional[str] = None
    paths: List[str] = field(default_factory=list)
    exact_paths: List[str] = field(default_factory=list)
    method: str = "POST"
    description: Optional[str] = None
    required: List[str] = field(default_factory=list)
    optional: List[str] = field(default_factory=list)
    types: Dict[str, str] = field(default_factory=dict)
    defaults: Dict[str, Any] = field(default_factory=dict)

    @property
    def public_path(self) -> str:
        if self.paths:
            return self.paths[0]
        return next((p for p in self.exact_paths if p), "/")

    def matches(self, path: str) -> bool:
        if path in self.exact_paths:
            return True
        return any(alias in path for alias in self.paths)

    def usage(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"method": self.method, "path": self.public_path}
        if self.description:
            out["description"] = self.description
        if self.required:
            out["required"] = list(self.required)
        if self.optional:
            out["optional"] = list(self.optional)
        return out

@dataclass
class Registry:
    service: str
    version: str
    description: str
    endpoints: List[Endpoint]

    def resolve(self, path: str) -> Optional[Endpoint]:
        return next((e for e in self.endpoints if e.matches(path)), None)

    def available_paths(self) -> List[str]:
        paths = [e.public_path for e in self.endpoints if e.paths]
        # /health first, it is what people probe
        return sorted(paths, key=lambda p: p != "/health")

def _load_yaml(path: Path) -> Dict:
    if not path.exists():
        raise ConfigError(f"endpoint registry not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to load YAML: {path} ({e})")
    if not isinstance(data, dict):
        raise ConfigError(f"endpoint registry must be a mapping: {path}")
    return data

def _parse_endpoint(raw: Any) -> Endpoint:
    if not isinstance(raw, dict) or not raw.get("name"):
        raise ConfigError(f"invalid endpoint entry: {raw!r}")

    kind = raw.get("kind") or "tool"
    if kind not in KINDS:
        raise ConfigError(f"endpoint {raw['name']}: unknown kind {kind!r}")
    if kind != "local" and not raw.get("upstream"):
        raise ConfigError(f"endpoint {raw['name']}: {kind} endpoints need an upstream name")
    if not raw.get("paths") and not raw.get("exact_paths"):
        raise ConfigError(f"endpoint {raw['name']}: no paths")

    types = dict(raw.get("types") or {})
    bad = sorted(k for k, t in types.items() if t not in TYPES)
    if bad:
        raise ConfigError(f"endpoint {raw['name']}: unsupported types for {bad}")

    return Endpoint(
        name=str(raw["name"]),
        kind=kind,
        upstream=raw.get("upstream"),
        paths=[str(p) for p in raw.get("paths") or []],
        exact_paths=[str(p) for p in raw.get("exact_paths") or []],
        method=str(raw.get("method") or "POST").upper(),
        description=raw.get("description"),
        required=list(raw.get("required") or []),
        optional=list(raw.get("optional") or []),
        types=types,
        defaults=dict(raw.get("defaults") or {}),
    )

def load_registry(path: Optional[Path] = None) -> Registry:
    path = path or DEFAULT_REGISTRY_PATH
    data = _load_yaml(path)

    endpoints = [_parse_endpoint(e) for e in data.get("endpoints") or []]
    if not endpoints:
        raise ConfigError(f"endpoint registry is empty: {path}")

    logger.debug("Loaded %d endpoints from %s", len(endpoints), path)
    return Registry(
        service=str(data.get("service") or "FiscAI Lambda MCP Bridge"),
        version=str(data.get("version") or "0.0.0"),
        description=str(data.get("description") or ""),
        endpoints=endpoints,
    )
