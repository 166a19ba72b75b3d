"""Verdict normalization.

Whatever dict came out of coerce.py is turned into a Verdict here:
- every field gets a safe default instead of None / missing
- isTrue is coerced to bool
- evidenceLevel is pinned to the closed enumeration (lowest tier otherwise)
- URL-like substrings are stripped from every string and list item

The fallback Verdict for blocked or unparseable upstream output is also built here.
"""
from __future__ import annotations

import re
import unicodedata
from typing import Any, Dict, List

from .types import LOWEST_EVIDENCE, EvidenceLevel, Verdict

URL_RE = re.compile(r"(?:https?://|www\.)\S+", re.IGNORECASE)
_SPACES_RE = re.compile(r"[ \t]{2,}")

CATEGORY_BLOCKED = "Bloqueado"
CATEGORY_UNPARSEABLE = "No procesable"
FALLBACK_CATEGORIES = (CATEGORY_BLOCKED, CATEGORY_UNPARSEABLE)

FALLBACK_EXPLANATION = (
    "No se pudo generar una respuesta para esta consulta. "
    "Intenta reformularla o vuelve a intentarlo más tarde."
)

_TRUE_STRINGS = {"true", "verdadero", "cierto", "si", "yes", "1"}

_EVIDENCE_ALIASES: Dict[str, EvidenceLevel] = {
    "alta": "Alta",
    "high": "Alta",
    "moderada": "Moderada",
    "media": "Moderada",
    "moderate": "Moderada",
    "medium": "Moderada",
    "baja": "Baja",
    "low": "Baja",
}

def _fold(s: str) -> str:
    decomposed = unicodedata.normalize("NFKD", s)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).strip().lower()

def strip_urls(text: str) -> str:
    cleaned = URL_RE.sub("", text)
    cleaned = _SPACES_RE.sub(" ", cleaned)
    return cleaned.strip()

def clean_text(value: Any, default: str = "") -> str:
    if value is None or isinstance(value, (dict, list)):
        return default
    if not isinstance(value, str):
        value = str(value)
    return strip_urls(value)

def clean_list(value: Any) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    out: List[str] = []
    for item in value:
        if isinstance(item, (dict, list)) or item is None:
            continue
        s = clean_text(item)
        if s:
            out.append(s)
    return out

def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return _fold(value) in _TRUE_STRINGS
    return False

def to_evidence_level(value: Any) -> EvidenceLevel:
    if not isinstance(value, str):
        return LOWEST_EVIDENCE
    return _EVIDENCE_ALIASES.get(_fold(value), LOWEST_EVIDENCE)

def normalize_verdict(obj: Dict[str, Any], query: str) -> Verdict:
    myth = clean_text(obj.get("myth")) or strip_urls(query)
    return Verdict(
        myth=myth,
        isTrue=to_bool(obj.get("isTrue")),
        explanation_simple=clean_text(obj.get("explanation_simple")),
        explanation_expert=clean_text(obj.get("explanation_expert")),
        evidenceLevel=to_evidence_level(obj.get("evidenceLevel")),
        sources=clean_list(obj.get("sources")),
        category=clean_text(obj.get("category")),
        relatedMyths=clean_list(obj.get("relatedMyths")),
    )

def fallback_verdict(query: str, category: str = CATEGORY_UNPARSEABLE) -> Verdict:
    return Verdict(
        myth=strip_urls(query),
        isTrue=False,
        explanation_simple=FALLBACK_EXPLANATION,
        explanation_expert=FALLBACK_EXPLANATION,
        evidenceLevel=LOWEST_EVIDENCE,
        sources=[],
        category=category,
        relatedMyths=[],
    )

def is_fallback(verdict: Verdict) -> bool:
    return verdict.category in FALLBACK_CATEGORIES
