"""Thin HTTP client for the generation endpoint.

Every call decodes the reply body into a Response variant and then hands it
to `unwrap`, which handles all three variants explicitly.
"""
from __future__ import annotations
import logging
import time
from typing import Any, TypeVar

import httpx

from generativeai_client.common.config import ClientSettings, load_settings
from generativeai_client.common.errors import (
    MalformedResponse,
    PromptBlocked,
    ServerError,
    UnexpectedResponse,
)
from generativeai_client.common.schema import (
    ErrorReply,
    GenerationReply,
    Response,
    TokenCountReply,
    decode,
)

LOGGER = logging.getLogger("genai.client")

R = TypeVar("R", GenerationReply, TokenCountReply)


def text_request(text: str) -> dict[str, Any]:
    """Request body for a single user turn."""
    return {"contents": [{"role": "user", "parts": [{"text": text}]}]}


def post_request(method: str, body: dict[str, Any], settings: ClientSettings | None = None) -> Response:
    """
    POST a request body to a model method and decode the reply.

    Error replies come back with 4xx/5xx statuses, so the body is decoded
    whatever the status. Transport failures (httpx.HTTPError) propagate.

    Args:
        method: Model method, e.g. ``generateContent``.
        body: JSON request body.
        settings: Client settings; loaded from config when omitted.
    """
    settings = settings or load_settings()
    url = settings.endpoint(method)
    headers = {"Content-Type": "application/json"}
    if settings.api_key:
        headers["x-goog-api-key"] = settings.api_key

    start = time.time()
    with httpx.Client(timeout=settings.timeout) as client:
        r = client.post(url, headers=headers, json=body)
    latency_ms = int((time.time() - start) * 1000)
    LOGGER.debug("POST %s -> %s in %sms", url, r.status_code, latency_ms)

    try:
        data = r.json()
    except ValueError as e:
        LOGGER.error("Non-JSON reply from %s (status %s)", url, r.status_code)
        raise MalformedResponse(f"reply body is not valid JSON: {e}", payload=r.text) from e
    return decode(data)


def unwrap(reply: Response, expected: type[R]) -> R:
    """
    Turn a decoded reply into the variant the caller asked for.

    Raises:
        ServerError: the reply is an ErrorReply.
        PromptBlocked: a generation reply has no candidates and a block reason.
        UnexpectedResponse: the reply is a different success variant.
    """
    if isinstance(reply, ErrorReply):
        LOGGER.warning("Service returned error %s: %s", reply.error.code, reply.error.message)
        raise ServerError(reply.error)
    if not isinstance(reply, (GenerationReply, TokenCountReply)):
        raise TypeError(f"unhandled response variant: {type(reply).__name__}")
    if not isinstance(reply, expected):
        raise UnexpectedResponse(expected.kind, reply.kind)
    if isinstance(reply, GenerationReply):
        feedback = reply.prompt_feedback
        if not reply.candidates and feedback is not None and feedback.block_reason:
            raise PromptBlocked(feedback)
    return reply


def generate_content(body: dict[str, Any], settings: ClientSettings | None = None) -> GenerationReply:
    return unwrap(post_request("generateContent", body, settings), GenerationReply)


def count_tokens(body: dict[str, Any], settings: ClientSettings | None = None) -> TokenCountReply:
    return unwrap(post_request("countTokens", body, settings), TokenCountReply)
