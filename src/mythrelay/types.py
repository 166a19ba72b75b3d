"""Shared types and lightweight data containers.

We avoid heavy frameworks here. The goal is:
- keep the relay portable between Lambda, Netlify-style functions and the CLI
- keep typing clear but not over-abstract
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

EvidenceLevel = Literal["Alta", "Moderada", "Baja"]

EVIDENCE_LEVELS = ("Alta", "Moderada", "Baja")
LOWEST_EVIDENCE: EvidenceLevel = "Baja"

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta"

@dataclass(frozen=True)
class RelayConfig:
    api_key: str = ""
    model: str = DEFAULT_MODEL
    endpoint: str = DEFAULT_ENDPOINT
    timeout: int = 30
    temperature: float = 0.2
    strict_models: bool = False
    allowed_models: Optional[List[str]] = None

@dataclass
class GenerateRequest:
    model: str
    payload: Dict[str, Any]

@dataclass
class GenerateResponse:
    status_code: int
    body: Any
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

@dataclass
class Verdict:
    myth: str = ""
    isTrue: bool = False
    explanation_simple: str = ""
    explanation_expert: str = ""
    evidenceLevel: EvidenceLevel = LOWEST_EVIDENCE
    sources: List[str] = field(default_factory=list)
    category: str = ""
    relatedMyths: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "myth": self.myth,
            "isTrue": self.isTrue,
            "explanation_simple": self.explanation_simple,
            "explanation_expert": self.explanation_expert,
            "evidenceLevel": self.evidenceLevel,
            "sources": list(self.sources),
            "category": self.category,
            "relatedMyths": list(self.relatedMyths),
        }
