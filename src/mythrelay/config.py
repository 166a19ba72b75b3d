"""Relay configuration.

Everything the relay needs from the process environment is read here, once,
into a frozen RelayConfig. The relay itself never touches os.environ, so tests
build a RelayConfig directly.

Env:
- GEMINI_API_KEY       upstream credential (checked at handle time, not here)
- GEMINI_MODEL         model override
- GEMINI_ENDPOINT      API base URL
- GEMINI_TIMEOUT       outbound timeout in seconds
- GEMINI_TEMPERATURE   sampling temperature
- MYTHRELAY_STRICT_MODELS  enforce src/configs/allowlist.yaml
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Optional

from .registry import load_allowed_models
from .types import DEFAULT_ENDPOINT, DEFAULT_MODEL, RelayConfig

def sanitize_api_key(raw: str) -> str:
    # Copy/paste from consoles often drags quotes along; headers must stay latin-1.
    k = (raw or "").strip()
    k = k.strip(' "\'`')
    k = k.strip("“”‘’")
    return k

def _to_bool(v: Any, default: bool = False) -> bool:
    if v is None:
        return default
    s = str(v).strip().lower()
    if s in ("1", "true", "y", "yes", "on"):
        return True
    if s in ("0", "false", "n", "no", "off"):
        return False
    return default

def _to_int(v: Any, default: int) -> int:
    if v is None:
        return default
    try:
        n = int(v)
    except (TypeError, ValueError):
        return default
    return n if n > 0 else default

def _to_float(v: Any, default: float) -> float:
    if v is None:
        return default
    try:
        return float(v)
    except (TypeError, ValueError):
        return default

def project_root() -> Path:
    # <root>/src/mythrelay/config.py -> parents[2] == <root>
    return Path(__file__).resolve().parents[2]

def load_config(environ: Optional[Mapping[str, str]] = None, root: Optional[Path] = None) -> RelayConfig:
    env = os.environ if environ is None else environ

    model = (env.get("GEMINI_MODEL") or "").strip() or DEFAULT_MODEL
    endpoint = (env.get("GEMINI_ENDPOINT") or "").strip().rstrip("/") or DEFAULT_ENDPOINT
    strict = _to_bool(env.get("MYTHRELAY_STRICT_MODELS"), False)

    return RelayConfig(
        api_key=sanitize_api_key(env.get("GEMINI_API_KEY") or ""),
        model=model,
        endpoint=endpoint,
        timeout=_to_int(env.get("GEMINI_TIMEOUT"), 30),
        temperature=_to_float(env.get("GEMINI_TEMPERATURE"), 0.2),
        strict_models=strict,
        allowed_models=load_allowed_models(root or project_root()) if strict else None,
    )
