"""Logging utilities.

Key goal:
- Each relay step logs clearly so a failed invocation can be located from the
  platform log stream alone.
- Serverless runtimes (Lambda, Netlify) already put a handler on the root
  logger; ours is attached only when nothing upstream would print.
"""
from __future__ import annotations

import hashlib
import logging
import os

_DEFAULT_LEVEL = os.environ.get("MYTHRELAY_LOG_LEVEL", "INFO").upper()
_FORMAT = "[%(levelname)s] %(name)s:%(lineno)d - %(message)s"

def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(_DEFAULT_LEVEL)

    if logger.handlers or logging.getLogger().handlers:
        return logger

    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(h)
    return logger

def log_step(logger: logging.Logger, step: str, msg: str, **fields):
    if fields:
        msg = msg + " " + " ".join(f"{k}={v}" for k, v in fields.items())
    logger.info("[STEP %s] %s", step, msg)

def key_fingerprint(key: str) -> str:
    """len + sha256 prefix, safe to log."""
    sha8 = hashlib.sha256((key or "").encode("utf-8")).hexdigest()[:8]
    return f"len={len(key or '')} sha8={sha8}"
