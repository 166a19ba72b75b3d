import base64
import json
import logging

import lambda_function
from src.mythrelay.gateway import CORS_HEADERS, handle_event
from src.mythrelay.types import GenerateResponse, RelayConfig

from conftest import VERDICT, ok_response

def _post(body, **extra):
    event = {"httpMethod": "POST", "body": body if isinstance(body, str) else json.dumps(body)}
    event.update(extra)
    return event

def _assert_cors(resp):
    for k, v in CORS_HEADERS.items():
        assert resp["headers"][k] == v

def test_options_preflight_no_call(make_relay):
    relay, gen = make_relay(ok_response("{}"))
    resp = handle_event({"httpMethod": "OPTIONS"}, relay)
    assert resp["statusCode"] == 204
    assert resp["body"] == ""
    _assert_cors(resp)
    assert gen.calls == []

def test_other_methods_not_allowed(make_relay):
    relay, gen = make_relay(ok_response("{}"))
    for method in ("GET", "PUT", "DELETE"):
        resp = handle_event({"httpMethod": method}, relay)
        assert resp["statusCode"] == 405
        assert resp["body"] == "Method Not Allowed"
        _assert_cors(resp)
    assert gen.calls == []

def test_http_api_v2_method(make_relay):
    relay, _ = make_relay(ok_response("{}"))
    resp = handle_event({"requestContext": {"http": {"method": "options"}}}, relay)
    assert resp["statusCode"] == 204

def test_bad_bodies_are_400(make_relay):
    relay, gen = make_relay(ok_response(json.dumps(VERDICT)))
    for body in ("", "not json", "[1,2]", "[" * 100000, {"userQuery": ""}, {"userQuery": 5}, {"other": "x"}):
        resp = handle_event(_post(body), relay)
        assert resp["statusCode"] == 400
        assert json.loads(resp["body"]) == {"error": "userQuery is required"}
        _assert_cors(resp)
    assert gen.calls == []

def test_post_success(make_relay):
    relay, gen = make_relay(ok_response(json.dumps(VERDICT)))
    resp = handle_event(_post({"userQuery": "El azúcar causa hiperactividad"}), relay)
    assert resp["statusCode"] == 200
    assert resp["headers"]["Content-Type"] == "application/json"
    _assert_cors(resp)
    assert json.loads(resp["body"]) == VERDICT
    assert "azúcar" in resp["body"]
    assert len(gen.calls) == 1

def test_base64_body(make_relay):
    relay, _ = make_relay(ok_response(json.dumps(VERDICT)))
    raw = base64.b64encode(json.dumps({"userQuery": "q"}).encode("utf-8")).decode("ascii")
    resp = handle_event(_post(raw, isBase64Encoded=True), relay)
    assert resp["statusCode"] == 200

def test_direct_invoke(make_relay):
    relay, _ = make_relay(ok_response(json.dumps(VERDICT)))
    resp = handle_event({"userQuery": "q"}, relay)
    assert resp["statusCode"] == 200

def test_upstream_status_passthrough(make_relay):
    body = {"error": {"code": 403, "message": "API key not valid"}}
    relay, _ = make_relay(GenerateResponse(status_code=403, body=body, text=json.dumps(body)))
    resp = handle_event(_post({"userQuery": "q"}), relay)
    assert resp["statusCode"] == 403
    assert json.loads(resp["body"]) == {"error": "API key not valid"}

def test_missing_key_is_500(make_relay):
    relay, _ = make_relay(ok_response("{}"), cfg=RelayConfig(api_key=""))
    resp = handle_event(_post({"userQuery": "q"}), relay)
    assert resp["statusCode"] == 500
    assert "error" in json.loads(resp["body"])

def test_unexpected_error_hides_details(make_relay):
    relay, _ = make_relay(RuntimeError("secret stack detail"))
    resp = handle_event(_post({"userQuery": "q"}), relay)
    assert resp["statusCode"] == 500
    assert "secret" not in resp["body"]

def test_fallback_is_still_200(make_relay, caplog):
    caplog.set_level(logging.WARNING)
    relay, _ = make_relay(GenerateResponse(status_code=200, body={"candidates": []}, text="{}"))
    resp = handle_event(_post({"userQuery": "q"}), relay)
    assert resp["statusCode"] == 200
    out = json.loads(resp["body"])
    assert out["evidenceLevel"] == "Baja"
    assert out["category"] == "Bloqueado"
    assert "fallback verdict (category=Bloqueado)" in caplog.text

def test_lambda_handler_uses_env_config(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setattr(lambda_function, "_relay", None)

    class Ctx:
        aws_request_id = "req-1"

    resp = lambda_function.lambda_handler(_post({"userQuery": "q"}), Ctx())
    assert resp["statusCode"] == 500
    assert lambda_function.lambda_handler({"httpMethod": "OPTIONS"}, Ctx())["statusCode"] == 204
