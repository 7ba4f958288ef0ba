"""Shared fixtures: fake AI gateway transport and a TestClient wired to it."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List

import httpx
import pytest


def _append_repo_root() -> None:
    """Ensure repository root is present in import path."""
    repo_root = str(Path(__file__).resolve().parents[1])
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)


_append_repo_root()

from plant_insight.main import app, get_http_client  # noqa: E402


def completion_body(content: Any) -> Dict[str, Any]:
    """OpenAI-style completion envelope around `content`."""
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


class FakeGateway:
    """Records outbound requests and answers with a configurable response."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.body: Any = completion_body("{}")
        self.handler: Callable[[httpx.Request], httpx.Response] | None = None

    def reply_with(self, content: Any) -> None:
        self.status_code = 200
        self.body = completion_body(content)

    def fail_with(self, status_code: int, body: Any = "") -> None:
        self.status_code = status_code
        self.body = body

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, text=self.body)

    @property
    def last_payload(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def api_key(monkeypatch) -> str:
    monkeypatch.delenv("LOVABLE_API_KEY", raising=False)
    monkeypatch.setenv("AI_GATEWAY_API_KEY", "test-key")
    monkeypatch.setenv("AI_GATEWAY_URL", "https://gateway.test/v1/chat/completions")
    monkeypatch.setenv("AI_GATEWAY_MODEL", "test/vision-model")
    return "test-key"


@pytest.fixture
def no_api_key(monkeypatch) -> None:
    monkeypatch.delenv("AI_GATEWAY_API_KEY", raising=False)
    monkeypatch.delenv("LOVABLE_API_KEY", raising=False)


@pytest.fixture
def client(gateway):
    from fastapi.testclient import TestClient

    async def _override():
        async with httpx.AsyncClient(transport=httpx.MockTransport(gateway)) as http_client:
            yield http_client

    app.dependency_overrides[get_http_client] = _override
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_http_client, None)
