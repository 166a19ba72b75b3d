"""Request assembly for the upstream generateContent call.

Rules:
- The system instruction is fixed and lives in src/prompts/verdict_system.txt.
- The caller's query is the only user content; it is never merged into the
  system instruction.
- The response schema mirrors the Verdict fields and pins evidenceLevel to the
  closed enumeration.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from .config import project_root
from .logging_util import get_logger
from .types import EVIDENCE_LEVELS, GenerateRequest, RelayConfig

logger = get_logger(__name__)

_FALLBACK_SYSTEM = (
    "Eres un verificador de datos. Analiza la afirmación del usuario y devuelve SIEMPRE "
    "un único objeto JSON con los campos: myth, isTrue, explanation_simple, "
    "explanation_expert, evidenceLevel ('Alta', 'Moderada' o 'Baja'), sources "
    "(solo tipos genéricos de fuentes, sin citas ni URLs), category y relatedMyths."
)

RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "myth": {"type": "STRING"},
        "isTrue": {"type": "BOOLEAN"},
        "explanation_simple": {"type": "STRING"},
        "explanation_expert": {"type": "STRING"},
        "evidenceLevel": {"type": "STRING", "enum": list(EVIDENCE_LEVELS)},
        "sources": {"type": "ARRAY", "items": {"type": "STRING"}},
        "category": {"type": "STRING"},
        "relatedMyths": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": [
        "myth",
        "isTrue",
        "explanation_simple",
        "explanation_expert",
        "evidenceLevel",
        "sources",
        "category",
        "relatedMyths",
    ],
}

def load_system_instruction(root: Optional[Path] = None) -> str:
    p = (root or project_root()) / "src" / "prompts" / "verdict_system.txt"
    try:
        text = p.read_text(encoding="utf-8").strip()
    except OSError as e:
        logger.warning("System instruction not readable (%s), using built-in text", e)
        return _FALLBACK_SYSTEM
    return text or _FALLBACK_SYSTEM

def build_payload(query: str, system_text: str, temperature: float) -> Dict[str, Any]:
    return {
        "contents": [{"role": "user", "parts": [{"text": query}]}],
        "systemInstruction": {"parts": [{"text": system_text}]},
        "generationConfig": {
            "temperature": temperature,
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
        },
    }

def build_request(query: str, config: RelayConfig, system_text: Optional[str] = None) -> GenerateRequest:
    system_text = system_text if system_text is not None else load_system_instruction()
    return GenerateRequest(
        model=config.model,
        payload=build_payload(query, system_text, config.temperature),
    )
