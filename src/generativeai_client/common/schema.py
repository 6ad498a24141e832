"""Pydantic models for replies from the generation endpoint.

A reply is exactly one of:
- GenerationReply  (candidates / promptFeedback)
- TokenCountReply  (totalTokens)
- ErrorReply       (error)

`decode` picks the variant by field presence: error first, then totalTokens,
then the generation shape. Anything else is a MalformedResponse.
"""
from __future__ import annotations
import copy
import json
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Any, ClassVar, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from generativeai_client.common.errors import MalformedResponse

LOGGER = logging.getLogger("genai.schema")


def _freeze(value: Any) -> Any:
    """Read-only copy of a JSON value: objects become mapping proxies, arrays tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


FrozenMapping = Annotated[Mapping[str, Any], AfterValidator(_freeze)]


class _Record(BaseModel):
    """Frozen record read from camelCase wire fields."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class _OpaqueRecord(_Record):
    """Nested server record; unknown fields are kept, read-only."""

    model_config = ConfigDict(extra="allow")

    @model_validator(mode="after")
    def freeze_extra(self) -> _OpaqueRecord:
        extra = self.__pydantic_extra__
        if extra:
            for key, value in extra.items():
                extra[key] = _freeze(value)
        return self


class Part(_OpaqueRecord):
    text: str | None = None


class Content(_OpaqueRecord):
    role: str | None = None
    parts: tuple[Part, ...] = ()


class SafetyRating(_OpaqueRecord):
    category: str | None = None
    probability: str | None = None


class Candidate(_OpaqueRecord):
    """One generated output option."""

    content: Content | None = None
    finish_reason: str | None = None
    safety_ratings: tuple[SafetyRating, ...] | None = None
    citation_metadata: FrozenMapping | None = None


class PromptFeedback(_OpaqueRecord):
    """Moderation feedback about the input prompt."""

    block_reason: str | None = None
    safety_ratings: tuple[SafetyRating, ...] | None = None


class ApplicationError(_OpaqueRecord):
    """Error record carried by an ErrorReply (google.rpc.Status shape)."""

    code: int
    message: str
    status: str | None = None
    details: tuple[FrozenMapping, ...] | None = None


class GenerationReply(_Record):
    kind: ClassVar[str] = "generation"

    candidates: tuple[Candidate, ...] | None = None
    prompt_feedback: PromptFeedback | None = None

    @property
    def text(self) -> str | None:
        """Concatenated text parts of the first candidate, if any."""
        if not self.candidates:
            return None
        content = self.candidates[0].content
        if content is None:
            return None
        texts = [p.text for p in content.parts if p.text is not None]
        return "".join(texts) if texts else None


class TokenCountReply(_Record):
    kind: ClassVar[str] = "token_count"

    total_tokens: int = Field(ge=0, strict=True)


class ErrorReply(_Record):
    kind: ClassVar[str] = "error"

    error: ApplicationError


Response = Union[GenerationReply, TokenCountReply, ErrorReply]

_GENERATION_FIELDS = ("candidates", "promptFeedback")


def _classify(raw: Mapping[str, Any]) -> type[Response] | None:
    if "error" in raw:
        return ErrorReply
    if "totalTokens" in raw:
        return TokenCountReply
    if any(name in raw for name in _GENERATION_FIELDS):
        return GenerationReply
    return None


def decode(raw: Mapping[str, Any]) -> Response:
    """
    Decode a parsed reply body into exactly one Response variant.

    Args:
        raw: Parsed JSON object as received from the endpoint.

    Returns:
        GenerationReply, TokenCountReply or ErrorReply.

    Raises:
        MalformedResponse: the payload matches none of the shapes, or a
            recognised field holds a value of the wrong shape.
    """
    if not isinstance(raw, Mapping):
        LOGGER.warning("Reply is not an object: %s", type(raw).__name__)
        raise MalformedResponse(f"expected a JSON object, got {type(raw).__name__}", payload=raw)

    variant = _classify(raw)
    if variant is None:
        LOGGER.warning("Reply has no recognised fields: %s", sorted(raw))
        raise MalformedResponse("reply matches no known response shape", payload=raw)

    try:
        reply = variant.model_validate(copy.deepcopy(dict(raw)))
    except ValidationError as e:
        LOGGER.warning("Reply failed %s validation: %s", variant.__name__, e.error_count())
        raise MalformedResponse(f"invalid {variant.__name__} payload: {e}", payload=raw) from e

    LOGGER.debug("Decoded reply as %s", reply.kind)
    return reply


def decode_json(body: str | bytes) -> Response:
    """Parse a JSON reply body and decode it."""
    try:
        raw = json.loads(body)
    except ValueError as e:
        raise MalformedResponse(f"reply body is not valid JSON: {e}", payload=body) from e
    return decode(raw)
