"""QueryRelay: validate -> build request -> one upstream call -> coerce -> normalize."""
from __future__ import annotations

from typing import Any, Optional, Tuple

from .adapters import AdapterError, BaseGenerator, GeminiAdapter
from .coerce import coerce_json_object_text
from .errors import ConfigurationMissing, InternalError, InvalidInput, RelayError, UpstreamError
from .logging_util import get_logger, log_step
from .prompts import build_request, load_system_instruction
from .registry import is_allowed
from .sanitize import CATEGORY_BLOCKED, CATEGORY_UNPARSEABLE, fallback_verdict, normalize_verdict
from .types import GenerateResponse, RelayConfig, Verdict

logger = get_logger(__name__)

def upstream_message(resp: GenerateResponse) -> str:
    body = resp.body
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
    return resp.text or f"upstream returned status {resp.status_code}"

def extract_candidate_text(body: Any) -> Tuple[Optional[str], Optional[str]]:
    """Return (text, None) or (None, reason) when no usable candidate exists."""
    if not isinstance(body, dict):
        return None, "response body is not a JSON object"

    candidates = body.get("candidates") or []
    if not isinstance(candidates, list) or not candidates:
        feedback = body.get("promptFeedback") or {}
        reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        return None, f"no candidates (blockReason={reason})" if reason else "no candidates"

    first = candidates[0] if isinstance(candidates[0], dict) else {}
    content = first.get("content") or {}
    parts = content.get("parts") if isinstance(content, dict) else None
    texts = [p["text"] for p in (parts or []) if isinstance(p, dict) and isinstance(p.get("text"), str)]
    if not texts:
        return None, f"candidate without text (finishReason={first.get('finishReason')})"

    return "".join(texts), None

class QueryRelay:
    def __init__(
        self,
        config: RelayConfig,
        generator: Optional[BaseGenerator] = None,
        system_text: Optional[str] = None,
    ):
        self.config = config
        self.generator = generator or GeminiAdapter(config)
        self.system_text = system_text if system_text is not None else load_system_instruction()

    def handle(self, query: Any) -> Verdict:
        try:
            return self._handle(query)
        except RelayError:
            raise
        except AdapterError as e:
            logger.error("Upstream transport failure: %s", e)
            raise InternalError() from e
        except Exception as e:
            logger.exception("QueryRelay.handle failed: %s", e)
            raise InternalError() from e

    def _handle(self, query: Any) -> Verdict:
        log_step(logger, "1", "validate input")
        if not isinstance(query, str) or not query.strip():
            raise InvalidInput("userQuery is required")
        query = query.strip()

        log_step(logger, "2", "check configuration")
        if not self.config.api_key:
            logger.error("CRITICAL: GEMINI_API_KEY is not set")
            raise ConfigurationMissing("La clave API de Gemini no está configurada en el servidor.")
        ok, reason = is_allowed(self.config.model, self.config.strict_models, self.config.allowed_models)
        if not ok:
            logger.error("Model rejected by allowlist: %s", reason)
            raise ConfigurationMissing(f"Modelo no permitido: {self.config.model}")

        log_step(logger, "3", "build request")
        request = build_request(query, self.config, system_text=self.system_text)

        log_step(logger, "4", "call upstream", model=request.model, timeout=self.config.timeout)
        resp = self.generator.generate(request)
        if not resp.ok:
            message = upstream_message(resp)
            logger.error("Upstream error %d: %s", resp.status_code, message)
            raise UpstreamError(resp.status_code, message)

        log_step(logger, "5", "extract and coerce")
        if not isinstance(resp.body, dict):
            logger.warning("Upstream body is not JSON: %.200s", resp.text)
            return fallback_verdict(query, category=CATEGORY_UNPARSEABLE)

        text, missing = extract_candidate_text(resp.body)
        if text is None:
            logger.warning("No usable candidate: %s", missing)
            return fallback_verdict(query, category=CATEGORY_BLOCKED)

        obj, parse_error = coerce_json_object_text(text)
        if obj is None:
            logger.warning("Unparseable upstream output: %s", parse_error)
            return fallback_verdict(query, category=CATEGORY_UNPARSEABLE)

        log_step(logger, "6", "normalize", chars=len(text))
        return normalize_verdict(obj, query)
