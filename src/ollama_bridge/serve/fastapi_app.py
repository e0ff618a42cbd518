"""FastAPI surface over the Ollama bridge.

Endpoints:
- GET  /api/ai/health
- GET  /api/ai/models
- POST /api/ai/generate  { "task": "...", "prompt": "...", "text": "...", "options": {...} }

Send `Accept: text/event-stream` on /generate to receive SSE chunks instead
of a single JSON object.
"""
from __future__ import annotations
import logging
from typing import Iterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, StreamingResponse

from ollama_bridge.common.config import Settings, load_settings
from ollama_bridge.common.errors import BridgeError, InvalidRequest, MalformedStreamRecord
from ollama_bridge.common.schema import GenerateIn, GenerateOut, GenerationRequest, TaskKind
from ollama_bridge.common.templates import format_prompt
from ollama_bridge.upstream.client import OllamaClient
from ollama_bridge.upstream.consume import aggregate, encode_sse, relay_events
from ollama_bridge.upstream.decoder import decode

LOGGER = logging.getLogger("ollama_bridge.serve.app")

EVENT_STREAM = "text/event-stream"
SSE_HEADERS = {"Cache-Control": "no-cache", "Connection": "keep-alive", "X-Accel-Buffering": "no"}


def build_request(body: GenerateIn) -> GenerationRequest:
    """Validate the HTTP body before any upstream call."""
    if not body.task:
        raise InvalidRequest("Task is required")
    return GenerationRequest(
        task=TaskKind.parse(body.task),
        prompt_text=body.prompt or "",
        context_text=body.text or "",
        options=body.options,
    )


def wants_stream(request: Request) -> bool:
    return EVENT_STREAM in request.headers.get("accept", "")


def _sse_body(raw_body: str) -> Iterator[bytes]:
    fragments = decode(raw_body)
    try:
        for event in relay_events(fragments):
            yield encode_sse(event)
    except MalformedStreamRecord as e:
        # already-sent chunks stay delivered; no sentinel
        LOGGER.error("Stream relay aborted after %d chunks: %s", fragments.emitted, e)


def create_app(settings: Settings | None = None, client: OllamaClient | None = None) -> FastAPI:
    settings = settings or load_settings()
    client = client or OllamaClient(settings)

    app = FastAPI(title="Ollama Bridge")
    app.state.settings = settings
    app.state.client = client

    @app.exception_handler(InvalidRequest)
    async def _invalid_request(request: Request, exc: InvalidRequest) -> JSONResponse:
        LOGGER.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(BridgeError)
    async def _bridge_error(request: Request, exc: BridgeError) -> JSONResponse:
        LOGGER.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.get("/api/ai/health")
    def health() -> dict:
        return app.state.client.health()

    @app.get("/api/ai/models")
    def models() -> dict:
        return app.state.client.list_models()

    @app.post("/api/ai/generate", response_model=GenerateOut)
    def generate(body: GenerateIn, request: Request):
        LOGGER.info("Received generate request task=%s", body.task)
        req = build_request(body)
        prompt = format_prompt(req.task, {"prompt": req.prompt_text, "text": req.context_text})
        LOGGER.debug("Formatted prompt: %s", prompt)

        raw_body = app.state.client.generate(prompt, req.options)

        if wants_stream(request):
            return StreamingResponse(_sse_body(raw_body), media_type=EVENT_STREAM, headers=SSE_HEADERS)

        result = aggregate(decode(raw_body))
        LOGGER.debug("Generated response: %s", result.text)
        return GenerateOut(response=result.text)

    return app
