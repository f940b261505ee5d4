"""Endpoint handlers.

Every handler returns (status_code, body dict) or raises a BridgeError.
"""
from __future__ import annotations

from typing import Any, Dict, Tuple

from .client import McpClient
from .config import BridgeConfig
from .errors import BridgeError
from .extract import extract_documents, extract_recommendation, to_source_documents
from .input_spec import advice_request, build_arguments, build_profile
from .logging_util import get_logger, log_step
from .registry import Endpoint, Registry
from .risk import calculate_risk
from .types import RecommendationResponse, utc_timestamp

logger = get_logger(__name__)

HandlerResult = Tuple[int, Dict[str, Any]]

def proxy(client: McpClient, endpoint: Endpoint, params: Dict[str, Any]) -> HandlerResult:
    args = build_arguments(endpoint, params)

    if endpoint.kind == "prompt":
        result = client.get_prompt(endpoint.upstream, args)
    else:
        # FastMCP tools take a single pydantic model argument named "request"
        result = client.call_tool(endpoint.upstream, {"request": args})

    return 200, {
        "success": True,
        "data": result,
        "source": "mcp_server",
        "timestamp": utc_timestamp(),
    }

def recommendation(client: McpClient, endpoint: Endpoint, params: Dict[str, Any]) -> HandlerResult:
    """Combined endpoint for the mobile app: risk score + RAG advice + sources.

    The risk score is computed locally and always returned. A failing advice
    call degrades into an error message in the recommendation field.
    """
    profile = build_profile(endpoint, params)

    log_step(logger, "R1", "risk score")
    risk = calculate_risk(profile.has_rfc, profile.has_efirma, profile.emite_cfdi, profile.declara_mensual)
    logger.info("risk level=%s score=%d penalties=%d", risk.level, risk.score, risk.penalties)

    log_step(logger, "R2", "get_fiscal_advice")
    sources = []
    try:
        result = client.call_tool(endpoint.upstream, {"request": advice_request(profile, params)})
    except BridgeError as e:
        logger.error("advice call failed: %s", e)
        text = f"Error al generar recomendación: {e}"
    else:
        text = extract_recommendation(result)
        sources = to_source_documents(extract_documents(result))
        if not sources:
            logger.warning("advice returned no source documents; check the document index and match threshold")

    response = RecommendationResponse(profile=profile, risk=risk, recommendation=text, sources=sources)
    logger.info("recommendation built with %d sources", response.matches_count)
    return 200, response.to_dict()

def health(config: BridgeConfig, registry: Registry) -> HandlerResult:
    return 200, {
        "status": "healthy",
        "service": registry.service,
        "version": registry.version,
        "mcp_server": config.base_url,
        "timestamp": utc_timestamp(),
    }

def info(config: BridgeConfig, registry: Registry) -> HandlerResult:
    documented = [e for e in registry.endpoints if e.name != "info"]
    return 200, {
        "service": registry.service,
        "version": registry.version,
        "description": registry.description,
        "mcp_server": config.base_url,
        "endpoints": {e.name: e.public_path for e in documented},
        "usage": {e.name: e.usage() for e in documented if e.method == "POST"},
        "timestamp": utc_timestamp(),
    }
