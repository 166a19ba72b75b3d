"""Serverless entrypoint (AWS Lambda, Netlify-style functions).

Design goals:
- Keep this file small and stable.
- Delegate all real logic to src/mythrelay so that the same code runs from the
  CLI, from tests and from the hosting platform.

Accepted methods:
- POST {"userQuery": "..."} -> 200 with the Verdict JSON
- OPTIONS -> 204 preflight, no body
- anything else -> 405

Return:
- statusCode, CORS headers and a JSON string body ({"error": ...} on failure)
"""
from typing import Any, Dict, Optional

from src.mythrelay.config import load_config
from src.mythrelay.gateway import handle_event
from src.mythrelay.logging_util import get_logger
from src.mythrelay.relay import QueryRelay

logger = get_logger(__name__)

_relay: Optional[QueryRelay] = None

def _get_relay() -> QueryRelay:
    # Config only; nothing request-specific survives between invocations.
    global _relay
    if _relay is None:
        _relay = QueryRelay(load_config())
    return _relay

def lambda_handler(event: Dict[str, Any], context: Any):
    logger.info("Function invoked (request_id=%s)", getattr(context, "aws_request_id", None))
    return handle_event(event, _get_relay())
