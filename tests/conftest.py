import json

import pytest

from src.mythrelay.relay import QueryRelay
from src.mythrelay.sanitize import URL_RE
from src.mythrelay.types import GenerateResponse, RelayConfig

VERDICT = {
    "myth": "El azúcar causa hiperactividad",
    "isTrue": False,
    "explanation_simple": "No hay pruebas de que el azúcar vuelva hiperactivos a los niños.",
    "explanation_expert": "Los ensayos doble ciego no muestran efecto conductual del azúcar.",
    "evidenceLevel": "Alta",
    "sources": ["Metaanálisis", "Ensayos Clínicos Aleatorizados (RCTs)"],
    "category": "Nutrición",
    "relatedMyths": ["El chocolate produce acné"],
}

def has_url(text):
    return URL_RE.search(text) is not None

def gemini_body(text):
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}, "finishReason": "STOP"}]}

class FakeGenerator:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def generate(self, request):
        self.calls.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response

def ok_response(text):
    body = gemini_body(text)
    return GenerateResponse(status_code=200, body=body, text=json.dumps(body))

@pytest.fixture
def config():
    return RelayConfig(api_key="test-key")

@pytest.fixture
def make_relay(config):
    def _make(response, cfg=None):
        gen = FakeGenerator(response)
        return QueryRelay(cfg or config, generator=gen, system_text="sys"), gen
    return _make
