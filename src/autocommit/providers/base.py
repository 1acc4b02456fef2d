"""Provider protocol — the capability set every chat-completion backend implements.

A provider knows how to build a request body, where to send it, how to
authenticate, and how to turn the response body into a commit message or a
:class:`GenerationError`. It never performs I/O itself; the generator owns the
transport.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Union

from autocommit.config.schema import ProviderConfig
from autocommit.providers.errors import GenerationError, GenerationErrorKind

_RATE_LIMIT_PHRASE = "rate limit"
_AUTH_PHRASES = (
    "invalid api key",
    "Invalid API key",
    "Incorrect API key",
    "unauthorized",
    "Unauthorized",
)
_AUTH_CODES = ("invalid_api_key", "unauthorized")
_AUTH_STATUSES = (401, 403)
_TRIM_CHARS = " \n\r\t"


class ChatProvider(ABC):
    """Abstract base for chat-completion backends."""

    name: ClassVar[str]
    display_name: ClassVar[str]
    default_model: ClassVar[str]
    default_endpoint: ClassVar[str]
    api_key_placeholder: ClassVar[str] = "paste-key-here"
    temperature: ClassVar[float] = 0.7
    max_tokens: ClassVar[int] = 1000

    def __init__(self, config: ProviderConfig) -> None:
        self.config = config

    @abstractmethod
    def build_request(self, diff: str, system_prompt: str) -> Dict[str, Any]:
        """Return the JSON-serialisable request payload."""

    @abstractmethod
    def parse_response(self, body: Union[bytes, str]) -> str:
        """Return the commit message or raise GenerationError."""

    @abstractmethod
    def get_endpoint(self) -> str:
        pass

    @abstractmethod
    def get_auth_header(self) -> str:
        pass

    @property
    def model(self) -> str:
        return self.config.model or self.default_model


def _classify_error(error: Any) -> GenerationError:
    """Map an ``error`` member of a response body to a GenerationError.

    Providers do not document stable error bodies, so this leans on the
    ``message`` text. A rate-limit phrase wins over everything else.
    """
    if not isinstance(error, dict):
        return GenerationError(GenerationErrorKind.API_ERROR)

    structured_auth = error.get("code") in _AUTH_CODES
    status = error.get("status")
    if not structured_auth and isinstance(status, int) and not isinstance(status, bool):
        structured_auth = status in _AUTH_STATUSES

    message = error.get("message")
    if isinstance(message, str):
        if _RATE_LIMIT_PHRASE in message:
            return GenerationError(GenerationErrorKind.RATE_LIMITED, message)
        if any(phrase in message for phrase in _AUTH_PHRASES):
            return GenerationError(GenerationErrorKind.INVALID_API_KEY, message)

    if structured_auth:
        return GenerationError(GenerationErrorKind.INVALID_API_KEY)

    detail = message if isinstance(message, str) else ""
    return GenerationError(GenerationErrorKind.API_ERROR, detail)


class OpenAICompatibleProvider(ChatProvider):
    """Shared implementation for OpenAI-style ``/chat/completions`` APIs."""

    def build_request(self, diff: str, system_prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": f"Git diff:\n{diff}"},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    def get_endpoint(self) -> str:
        return self.config.endpoint or self.default_endpoint

    def get_auth_header(self) -> str:
        return f"Bearer {self.config.api_key}"

    def parse_response(self, body: Union[bytes, str]) -> str:
        try:
            root = json.loads(body)
        except (ValueError, TypeError, RecursionError) as exc:
            raise GenerationError(GenerationErrorKind.INVALID_RESPONSE, str(exc))

        if not isinstance(root, dict):
            raise GenerationError(GenerationErrorKind.INVALID_RESPONSE, "root is not an object")

        if "error" in root:
            raise _classify_error(root["error"])

        choices = root.get("choices")
        if not isinstance(choices, list):
            raise GenerationError(GenerationErrorKind.INVALID_RESPONSE, "missing choices")
        if not choices:
            raise GenerationError(GenerationErrorKind.EMPTY_CONTENT, "no choices")

        first = choices[0]
        if not isinstance(first, dict):
            raise GenerationError(GenerationErrorKind.INVALID_RESPONSE, "choice is not an object")
        message = first.get("message")
        if not isinstance(message, dict):
            raise GenerationError(GenerationErrorKind.INVALID_RESPONSE, "missing message")
        content = message.get("content")
        if not isinstance(content, str):
            raise GenerationError(GenerationErrorKind.INVALID_RESPONSE, "missing content")

        trimmed = content.strip(_TRIM_CHARS)
        if not trimmed:
            raise GenerationError(GenerationErrorKind.EMPTY_CONTENT)
        return trimmed
