"""Local CLI for the bridge.

Builds an API Gateway style event and runs it through the same code path as Lambda.

Usage examples:
- Health check:
  python cli.py /health

- JSON string body:
  python cli.py /chat "{\"message\":\"¿Cómo saco mi RFC?\"}"

- JSON file body (prefix with @):
  python cli.py /recommendation @profile.json --pretty

Notes:
- MCP_SERVER_URL / FISCAI_ENV are read from the environment, same as in Lambda.
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from src.fiscai_bridge.bridge import FiscalBridge
from src.fiscai_bridge.logging_util import get_logger

logger = get_logger(__name__)

def _load_body(spec: Optional[str]) -> Optional[Dict[str, Any]]:
    if not spec:
        return None
    if spec.startswith("@"):
        p = Path(spec[1:])
        return json.loads(p.read_text(encoding="utf-8"))

    return json.loads(spec)

def build_event(path: str, body: Optional[Dict[str, Any]], method: Optional[str] = None) -> Dict[str, Any]:
    return {
        "path": path,
        "httpMethod": method or ("POST" if body is not None else "GET"),
        "queryStringParameters": None,
        "body": json.dumps(body, ensure_ascii=False) if body is not None else None,
    }

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("path", help="Request path, e.g. /recommendation")
    ap.add_argument("body", nargs="?", help="JSON string or @path/to/json")
    ap.add_argument("--method", help="HTTP method (default: POST with a body, GET without)")
    ap.add_argument("--pretty", action="store_true", help="Pretty print the response body")
    args = ap.parse_args()

    try:
        body = _load_body(args.body)
    except (OSError, ValueError) as e:
        logger.error("Failed to parse input: %s", e)
        sys.exit(2)

    bridge = FiscalBridge()
    resp = bridge.handle(build_event(args.path, body, args.method), request_id="CLI")

    out = json.loads(resp["body"])
    print(f"HTTP {resp['statusCode']}", file=sys.stderr)
    if args.pretty:
        print(json.dumps(out, ensure_ascii=False, indent=2))
    else:
        print(json.dumps(out, ensure_ascii=False))

    if resp["statusCode"] >= 400:
        sys.exit(1)

if __name__ == "__main__":
    main()
