"""Error taxonomy.

Caller errors (4xx) and service errors (5xx / upstream status) both carry the
HTTP status they map to, so the HTTP glue never has to guess.
Malformed upstream output is not an error: the relay answers it with a
fallback Verdict.
"""
from __future__ import annotations

class RelayError(Exception):
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

class InvalidInput(RelayError):
    status_code = 400

class MethodNotAllowed(RelayError):
    status_code = 405

class ConfigurationMissing(RelayError):
    status_code = 500

class UpstreamError(RelayError):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code

class InternalError(RelayError):
    status_code = 500

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message)
