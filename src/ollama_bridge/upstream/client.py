"""HTTP client for the Ollama inference server.

Endpoints used:
- GET  /api/tags      installed models (health probe and listing)
- POST /api/generate  newline-delimited JSON generation body
"""
from __future__ import annotations
import logging
import time
from typing import Any

import httpx

from ollama_bridge.common.config import Settings
from ollama_bridge.common.errors import UpstreamUnavailable
from ollama_bridge.common.schema import GenerationOptions

LOGGER = logging.getLogger("ollama_bridge.upstream.client")


def _read_until(response: httpx.Response, deadline: float, timeout_s: float) -> str:
    """Read a streamed body, failing once the whole call outlasts the timeout."""
    parts: list[str] = []
    for text in response.iter_text():
        parts.append(text)
        if time.monotonic() > deadline:
            raise httpx.ReadTimeout(f"generation exceeded {timeout_s:g}s timeout", request=response.request)
    return "".join(parts)


class OllamaClient:
    """
    One upstream call per operation, no retries.

    Args:
        settings: Base address, model name and timeout.
        transport: Optional httpx transport, used by tests to fake Ollama.
    """

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None) -> None:
        self.settings = settings
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.settings.ollama_host,
            timeout=self.settings.timeout_s,
            transport=self._transport,
        )

    def _tags(self) -> dict[str, Any]:
        start = time.time()
        with self._client() as client:
            r = client.get("/api/tags")
            r.raise_for_status()
            data = r.json()
        LOGGER.debug("GET /api/tags took %dms", int((time.time() - start) * 1000))
        return data

    def health(self) -> dict[str, Any]:
        """Probe the server; returns {"status": "ok", "models": <tags>}."""
        try:
            models = self._tags()
        except (httpx.HTTPError, ValueError) as e:
            LOGGER.error("Ollama health check failed: %s", e)
            raise UpstreamUnavailable(f"Failed to check health: {e}") from e
        return {"status": "ok", "models": models}

    def list_models(self) -> dict[str, Any]:
        """Return the /api/tags snapshot verbatim."""
        try:
            return self._tags()
        except (httpx.HTTPError, ValueError) as e:
            LOGGER.error("Ollama model listing failed: %s", e)
            raise UpstreamUnavailable(f"Failed to list models: {e}") from e

    def generate(self, prompt: str, options: GenerationOptions | None = None) -> str:
        """
        Issue the generation call and return the raw body text.

        Args:
            prompt: Final prompt string.
            options: Sampling options; defaults fill absent values.
        """
        options = options or GenerationOptions()
        payload = {
            "model": self.settings.ollama_model,
            "prompt": prompt,
            "options": options.to_upstream(),
        }
        start = time.time()
        deadline = time.monotonic() + self.settings.timeout_s
        try:
            with self._client() as client:
                with client.stream("POST", "/api/generate", json=payload) as r:
                    r.raise_for_status()
                    body = _read_until(r, deadline, self.settings.timeout_s)
        except httpx.HTTPError as e:
            LOGGER.error("Ollama generate request failed: %s", e)
            raise UpstreamUnavailable(f"Failed to generate text: {e}") from e
        LOGGER.debug(
            "POST /api/generate model=%s took %dms (%d bytes)",
            self.settings.ollama_model,
            int((time.time() - start) * 1000),
            len(body),
        )
        return body
