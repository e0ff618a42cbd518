from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from ollama_bridge.common.config import Settings
from ollama_bridge.upstream.client import OllamaClient

TAGS = {"models": [{"name": "deepseek-coder:14b", "size": 9000000000}]}


def ndjson(*records: dict[str, Any]) -> str:
    return "".join(json.dumps(r) + "\n" for r in records)


class FakeOllama:
    """Records requests and answers like Ollama's /api/tags and /api/generate."""

    def __init__(self, generate_body: str = "", tags: dict[str, Any] | None = None) -> None:
        self.generate_body = generate_body
        self.tags = TAGS if tags is None else tags
        self.requests: list[httpx.Request] = []
        self.fail: Callable[[httpx.Request], httpx.Response] | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail is not None:
            return self.fail(request)
        if request.url.path == "/api/tags":
            return httpx.Response(200, json=self.tags)
        if request.url.path == "/api/generate":
            return httpx.Response(200, text=self.generate_body)
        return httpx.Response(404, text="not found")

    def last_payload(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def settings() -> Settings:
    return Settings(ollama_host="http://ollama.test:11434", ollama_model="test-model", timeout_s=5.0)


@pytest.fixture
def fake_ollama() -> FakeOllama:
    return FakeOllama()


@pytest.fixture
def client(settings: Settings, fake_ollama: FakeOllama) -> OllamaClient:
    return OllamaClient(settings, transport=httpx.MockTransport(fake_ollama))
