"""Generation error taxonomy."""

from __future__ import annotations

from enum import Enum


class GenerationErrorKind(str, Enum):
    INVALID_API_KEY = "invalid_api_key"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    TIMEOUT = "timeout"
    INVALID_RESPONSE = "invalid_response"
    EMPTY_CONTENT = "empty_content"
    API_ERROR = "api_error"
    OUT_OF_MEMORY = "out_of_memory"


class GenerationError(Exception):
    """Raised when a commit message could not be produced."""

    def __init__(self, kind: GenerationErrorKind, detail: str = "") -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)


class UnknownProviderError(LookupError):
    """Raised when a provider name has no registered implementation."""
