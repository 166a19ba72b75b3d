"""Gemini REST adapter (generateContent)."""
from __future__ import annotations

from typing import Any

import requests

from ..logging_util import get_logger, key_fingerprint
from ..types import GenerateRequest, GenerateResponse, RelayConfig
from .base import AdapterError, BaseGenerator

logger = get_logger(__name__)

def _decode_body(r: requests.Response) -> Any:
    try:
        return r.json()
    except ValueError:
        return None

class GeminiAdapter(BaseGenerator):
    def __init__(self, config: RelayConfig):
        self.config = config

    def url_for(self, model: str) -> str:
        return f"{self.config.endpoint}/models/{model}:generateContent"

    def generate(self, request: GenerateRequest) -> GenerateResponse:
        api_key = self.config.api_key
        if not api_key:
            raise AdapterError("Missing Gemini API key")
        logger.info("[GEMINI_KEY] %s", key_fingerprint(api_key))

        url = self.url_for(request.model)
        headers = {"Content-Type": "application/json", "x-goog-api-key": api_key}

        try:
            r = requests.post(url, headers=headers, json=request.payload, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise AdapterError(f"request failed: {e}") from e

        logger.info("Gemini responded with status: %d", r.status_code)
        return GenerateResponse(status_code=r.status_code, body=_decode_body(r), text=r.text)
