import json

import pytest
import requests

import cli

from conftest import VERDICT, gemini_body

class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload
        self.text = json.dumps(payload)

    def json(self):
        return self._payload

@pytest.fixture
def env(monkeypatch):
    for name in ("GEMINI_MODEL", "GEMINI_ENDPOINT", "GEMINI_TIMEOUT", "GEMINI_TEMPERATURE", "MYTHRELAY_STRICT_MODELS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GEMINI_API_KEY", "cli-key")
    return monkeypatch

def _fake_post(seen, status, payload):
    def fake_post(url, headers=None, json=None, timeout=None):
        seen.append(url)
        return FakeResponse(status, payload)
    return fake_post

def test_success_exit_zero_and_model_override(env, capsys):
    seen = []
    env.setattr(requests, "post", _fake_post(seen, 200, gemini_body(json.dumps(VERDICT))))

    code = cli.main(["El azúcar causa hiperactividad", "--model", "gemini-2.5-pro"])

    assert code == 0
    assert len(seen) == 1
    assert "/models/gemini-2.5-pro:generateContent" in seen[0]
    assert json.loads(capsys.readouterr().out) == VERDICT

def test_default_model_from_env(env):
    seen = []
    env.setenv("GEMINI_MODEL", "gemini-2.5-flash-lite")
    env.setattr(requests, "post", _fake_post(seen, 200, gemini_body(json.dumps(VERDICT))))
    assert cli.main(["q", "--pretty"]) == 0
    assert "/models/gemini-2.5-flash-lite:generateContent" in seen[0]

def test_upstream_failure_exit_one(env, capsys):
    seen = []
    env.setattr(requests, "post", _fake_post(seen, 429, {"error": {"message": "quota"}}))
    assert cli.main(["q"]) == 1
    assert json.loads(capsys.readouterr().out) == {"error": "quota"}

def test_missing_key_exit_one(env):
    env.delenv("GEMINI_API_KEY")
    seen = []
    env.setattr(requests, "post", _fake_post(seen, 200, {}))
    assert cli.main(["q"]) == 1
    assert seen == []
