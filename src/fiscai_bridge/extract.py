"""Normalisation of MCP tool results.

FastMCP results arrive in several shapes:
- {"content": [{"type": "text", "text": "<json string>"}]}
- {"data": {"recommendation": ..., "sources": [...]}}
- a bare string (possibly JSON-encoded)

Each extractor is an ordered list of rules. A rule takes the raw value and
returns None when it does not apply; the first non-None answer wins. No rule
raises on unexpected shapes.
"""
from __future__ import annotations

import json
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .logging_util import get_logger
from .types import JsonValue, SourceDocument

logger = get_logger(__name__)

Rule = Tuple[str, Callable[[JsonValue], Optional[Any]]]

UNRECOGNISED_RESULT = "Error: No se pudo extraer la respuesta del servidor MCP"

# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------
def _get(value: JsonValue, *path: str) -> JsonValue:
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value

def _try_json(text: str) -> Tuple[bool, JsonValue]:
    try:
        return True, json.loads(text)
    except (TypeError, ValueError):
        return False, None

def _text_block(value: JsonValue) -> Optional[str]:
    content = _get(value, "content")
    if not isinstance(content, list):
        return None
    block = next((c for c in content if isinstance(c, dict) and c.get("type") == "text"), None)
    text = _get(block, "text")
    if isinstance(text, str) and text:
        return text
    return None

def _first_truthy(value: JsonValue, paths: Sequence[Tuple[str, ...]]) -> JsonValue:
    for path in paths:
        found = _get(value, *path)
        if found:
            return found
    return None

def _apply(rules: Sequence[Rule], value: JsonValue, what: str) -> Optional[Any]:
    for name, rule in rules:
        out = rule(value)
        if out is not None:
            logger.debug("%s matched rule %s", what, name)
            return out
    return None

# ----------------------------------------------------------------------
# Recommendation text
# ----------------------------------------------------------------------
_ANSWER_PATHS = (("data", "recommendation"), ("data", "response"), ("recommendation",))

def _from_content_text(value: JsonValue) -> JsonValue:
    text = _text_block(value)
    if text is None:
        return None
    ok, parsed = _try_json(text)
    if ok and isinstance(parsed, dict):
        return _first_truthy(parsed, _ANSWER_PATHS) or text
    return text

def _from_recommendation_field(value: JsonValue) -> JsonValue:
    return _first_truthy(value, (("data", "recommendation"), ("recommendation",)))

def _from_data_field(value: JsonValue) -> JsonValue:
    data = _get(value, "data")
    if isinstance(data, str) and data:
        return data
    return _get(data, "response") or None

def _from_string(value: JsonValue) -> JsonValue:
    if not isinstance(value, str):
        return None
    ok, parsed = _try_json(value)
    if ok and isinstance(parsed, dict):
        return _first_truthy(parsed, _ANSWER_PATHS) or value
    return value

RECOMMENDATION_RULES: List[Rule] = [
    ("content_text", _from_content_text),
    ("recommendation_field", _from_recommendation_field),
    ("data_field", _from_data_field),
    ("string_result", _from_string),
]

def extract_recommendation(result: JsonValue) -> str:
    found = _apply(RECOMMENDATION_RULES, result, "recommendation")
    if found is None:
        logger.warning("unrecognised MCP result shape: %.200s", _preview(result))
        return UNRECOGNISED_RESULT
    if isinstance(found, str):
        return found
    return json.dumps(found, ensure_ascii=False)

# ----------------------------------------------------------------------
# Source documents
# ----------------------------------------------------------------------
_DOCUMENT_PATHS = (("data", "sources"), ("data", "documents"), ("sources",), ("documents",))

def _document_list(value: JsonValue) -> Optional[List[JsonValue]]:
    for path in _DOCUMENT_PATHS:
        found = _get(value, *path)
        if isinstance(found, list) and found:
            return found
    return None

def _documents_from_content(value: JsonValue) -> Optional[List[JsonValue]]:
    text = _text_block(value)
    if text is None:
        return None
    ok, parsed = _try_json(text)
    if not ok:
        logger.debug("content text is not JSON, no documents there")
        return None
    return _document_list(parsed)

DOCUMENT_RULES: List[Rule] = [
    ("content_documents", _documents_from_content),
    ("direct_documents", _document_list),
]

def extract_documents(result: JsonValue) -> List[JsonValue]:
    return _apply(DOCUMENT_RULES, result, "documents") or []

def _similarity(v: Any) -> float:
    if isinstance(v, bool) or not isinstance(v, (int, float)) or not v:
        return 0.8
    return min(1.0, max(0.0, float(v)))

def to_source_documents(docs: Sequence[JsonValue]) -> List[SourceDocument]:
    out: List[SourceDocument] = []
    for doc in docs:
        if not isinstance(doc, dict):
            continue
        out.append(SourceDocument(
            title=str(doc.get("title") or "Documento fiscal"),
            scope=str(doc.get("scope") or "General"),
            url=str(doc.get("url") or doc.get("source_url") or "Libro"),
            similarity=_similarity(doc.get("similarity")),
        ))
    return out

def _preview(value: JsonValue) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)

