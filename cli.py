"""Simple CLI for the relay.

Usage examples:
- Plain query:
  python cli.py "El azúcar causa hiperactividad en los niños"

- Pretty print, other model:
  python cli.py "Hay que beber 2 litros de agua al día" --pretty --model gemini-2.5-flash-lite

Notes:
- Runs the exact same event path as the serverless function (one POST event).
- Exit code is 0 on HTTP 200, 1 otherwise.
"""
import argparse
import dataclasses
import json
import sys

from src.mythrelay.config import load_config
from src.mythrelay.gateway import handle_event
from src.mythrelay.logging_util import get_logger
from src.mythrelay.relay import QueryRelay

logger = get_logger(__name__)

def main(argv=None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("query", help="Myth / claim to verify")
    ap.add_argument("--pretty", action="store_true", help="Pretty print the output JSON")
    ap.add_argument("--model", default=None, help="Override GEMINI_MODEL")
    args = ap.parse_args(argv)

    config = load_config()
    if args.model:
        config = dataclasses.replace(config, model=args.model)

    event = {"httpMethod": "POST", "body": json.dumps({"userQuery": args.query}, ensure_ascii=False)}
    resp = handle_event(event, QueryRelay(config))

    body = resp.get("body") or ""
    try:
        out = json.loads(body)
    except ValueError:
        out = body

    if args.pretty:
        print(json.dumps(out, ensure_ascii=False, indent=2))
    else:
        print(json.dumps(out, ensure_ascii=False))

    if resp["statusCode"] != 200:
        logger.error("Request failed with status %s", resp["statusCode"])
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
