"""Model allowlist.

Design:
- Strict mode means: "Only models listed in the allowlist may be targeted."
- If allowlist file is missing or empty and strict mode is on -> block.
- Non-strict mode: any model name is forwarded (the upstream rejects unknown ones).

allowlist.yaml:
- models:
    - gemini-2.5-flash
    - gemini-2.5-flash-lite
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

import yaml

from .logging_util import get_logger

logger = get_logger(__name__)

def allowlist_path(project_root: Path) -> Path:
    return project_root / "src" / "configs" / "allowlist.yaml"

def load_allowed_models(project_root: Path) -> List[str]:
    path = allowlist_path(project_root)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.info("No model allowlist at %s", path)
        return []
    except (OSError, yaml.YAMLError) as e:
        logger.error("Model allowlist unreadable: %s (%s)", path, e)
        return []

    models = data.get("models") if isinstance(data, dict) else None
    if not isinstance(models, list):
        return []
    return [str(m).strip() for m in models if str(m).strip()]

def is_allowed(model: str, strict: bool, allowed_models: Optional[List[str]]) -> Tuple[bool, str]:
    if not strict:
        return True, "strict=false"

    if not allowed_models:
        return False, "strict=true but allowlist missing or empty"

    if model not in allowed_models:
        return False, f"model not allowed: {model}"

    return True, "allowed"
