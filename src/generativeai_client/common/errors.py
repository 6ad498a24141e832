"""Exceptions raised by the client package."""
from __future__ import annotations
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from generativeai_client.common.schema import ApplicationError, PromptFeedback


class GenerativeAIError(Exception):
    """Base class for all errors raised by this package."""


class MalformedResponse(GenerativeAIError):
    """The reply body did not match any known response shape."""

    def __init__(self, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.payload = payload


class ServerError(GenerativeAIError):
    """The service answered with an error reply."""

    def __init__(self, error: ApplicationError) -> None:
        status = f" {error.status}" if error.status else ""
        super().__init__(f"{error.code}{status}: {error.message}")
        self.error = error

    @property
    def code(self) -> int:
        return self.error.code


class PromptBlocked(GenerativeAIError):
    """No candidates were returned because the prompt was blocked."""

    def __init__(self, feedback: PromptFeedback) -> None:
        super().__init__(f"prompt was blocked: {feedback.block_reason}")
        self.feedback = feedback


class UnexpectedResponse(GenerativeAIError):
    """A reply decoded to a different variant than the call expects."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"expected a {expected} reply, got {actual}")
        self.expected = expected
        self.actual = actual
