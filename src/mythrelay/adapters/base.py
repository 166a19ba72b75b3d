"""Adapter interface for the upstream generation service."""
from __future__ import annotations

from ..types import GenerateRequest, GenerateResponse

class AdapterError(Exception):
    """Transport-level failure: the upstream never produced an HTTP response."""

class BaseGenerator:
    def generate(self, request: GenerateRequest) -> GenerateResponse:
        raise NotImplementedError
