"""Event -> response glue shared by the Lambda entrypoint and the CLI.

Expected event shapes:
1) API Gateway REST / Netlify (body is a JSON string):
   {"httpMethod": "POST", "body": "{\"userQuery\": \"...\"}"}

2) API Gateway HTTP API v2:
   {"requestContext": {"http": {"method": "POST"}}, "body": "...", "isBase64Encoded": true}

3) Direct invoke / local test (event itself is the JSON dict, treated as POST):
   {"userQuery": "..."}
"""
from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Dict, Optional

from .errors import InvalidInput, MethodNotAllowed, RelayError
from .logging_util import get_logger
from .relay import QueryRelay
from .sanitize import is_fallback

logger = get_logger(__name__)

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

def _response(status: int, body: Any = None) -> Dict[str, Any]:
    headers = dict(CORS_HEADERS)
    if body is None:
        text = ""
    elif isinstance(body, str):
        text = body
    else:
        headers["Content-Type"] = "application/json"
        text = json.dumps(body, ensure_ascii=False)
    return {"statusCode": status, "headers": headers, "body": text}

def error_response(err: RelayError) -> Dict[str, Any]:
    if isinstance(err, MethodNotAllowed):
        return _response(err.status_code, "Method Not Allowed")
    return _response(err.status_code, {"error": err.message})

def request_method(event: Dict[str, Any]) -> Optional[str]:
    method = event.get("httpMethod")
    if not method:
        ctx = event.get("requestContext") or {}
        http = ctx.get("http") if isinstance(ctx, dict) else None
        method = http.get("method") if isinstance(http, dict) else None
    return str(method).upper() if method else None

def _safe_json_loads(s: Any) -> Dict[str, Any]:
    if isinstance(s, dict):
        return s
    if not isinstance(s, str):
        return {}
    s = s.strip()
    if not s:
        return {}
    try:
        obj = json.loads(s)
    except (ValueError, RecursionError):
        return {}
    return obj if isinstance(obj, dict) else {}

def parse_body(event: Dict[str, Any], direct: bool) -> Dict[str, Any]:
    if direct:
        return _safe_json_loads(event.get("body", event))

    body = event.get("body")
    if event.get("isBase64Encoded") and isinstance(body, str):
        try:
            body = base64.b64decode(body).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return {}
    return _safe_json_loads(body)

def handle_event(event: Any, relay: QueryRelay) -> Dict[str, Any]:
    if not isinstance(event, dict):
        event = {}

    method = request_method(event)
    if method == "OPTIONS":
        return _response(204)
    if method is not None and method != "POST":
        logger.warning("Received non-POST request: %s", method)
        return error_response(MethodNotAllowed("Method Not Allowed"))

    try:
        req = parse_body(event, direct=method is None)
        query = req.get("userQuery")
        if not isinstance(query, str) or not query.strip():
            logger.warning("userQuery is missing from the request body")
            raise InvalidInput("userQuery is required")

        logger.info("Received query (%d chars)", len(query))
        verdict = relay.handle(query)
        if is_fallback(verdict):
            logger.warning("Answering with fallback verdict (category=%s)", verdict.category)
        return _response(200, verdict.to_dict())

    except RelayError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("handle_event fatal error: %s", e)
        return _response(500, {"error": "Internal Server Error"})
