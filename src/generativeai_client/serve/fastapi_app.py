"""FastAPI proxy for the generation endpoint.

Endpoints:
- GET /health
- POST /generate      { "input": "..." }
- POST /count-tokens  { "input": "..." }
"""
from __future__ import annotations
import logging
import time

import httpx
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from generativeai_client.client import api_client
from generativeai_client.common.config import load_settings
from generativeai_client.common.errors import (
    MalformedResponse,
    PromptBlocked,
    ServerError,
    UnexpectedResponse,
)
from generativeai_client.common.logging_setup import setup_logging

LOGGER = logging.getLogger("genai.serve.app")
setup_logging()

SETTINGS = load_settings()

class TextIn(BaseModel):
    input: str

class GenerateOut(BaseModel):
    text: str | None
    finish_reason: str | None = None
    latency_ms: int

class CountTokensOut(BaseModel):
    total_tokens: int
    latency_ms: int

app = FastAPI()

@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "model": SETTINGS.model}

def _to_http_error(e: Exception) -> HTTPException:
    """Map a client-layer failure to the HTTP error returned to callers."""
    if isinstance(e, ServerError):
        status = e.code if 400 <= e.code < 600 else 502
        return HTTPException(status_code=status, detail=e.error.message)
    if isinstance(e, PromptBlocked):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, (MalformedResponse, UnexpectedResponse)):
        return HTTPException(status_code=500, detail="Malformed upstream response")
    return HTTPException(status_code=502, detail="Upstream generation error")


@app.post("/generate", response_model=GenerateOut)
def generate(body: TextIn) -> GenerateOut:
    start = time.time()
    try:
        reply = api_client.generate_content(api_client.text_request(body.input), SETTINGS)
    except (ServerError, PromptBlocked, MalformedResponse, UnexpectedResponse, httpx.HTTPError) as e:
        LOGGER.error("generateContent failed: %s", e)
        raise _to_http_error(e)

    latency = int((time.time() - start) * 1000)
    finish_reason = reply.candidates[0].finish_reason if reply.candidates else None
    return GenerateOut(text=reply.text, finish_reason=finish_reason, latency_ms=latency)


@app.post("/count-tokens", response_model=CountTokensOut)
def count_tokens(body: TextIn) -> CountTokensOut:
    start = time.time()
    try:
        reply = api_client.count_tokens(api_client.text_request(body.input), SETTINGS)
    except (ServerError, MalformedResponse, UnexpectedResponse, httpx.HTTPError) as e:
        LOGGER.error("countTokens failed: %s", e)
        raise _to_http_error(e)

    latency = int((time.time() - start) * 1000)
    return CountTokensOut(total_tokens=reply.total_tokens, latency_ms=latency)
