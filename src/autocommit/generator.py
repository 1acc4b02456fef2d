"""Commit message generation — build request, send, classify the response."""

from __future__ import annotations

import json
from typing import Callable, Optional

from autocommit.providers.base import ChatProvider
from autocommit.providers.errors import GenerationError, GenerationErrorKind
from autocommit.transport import HttpResponse, HttpTransport, TransportError

DebugLog = Callable[[str], None]

_RESULT_LABELS = {
    GenerationErrorKind.EMPTY_CONTENT: "empty content",
    GenerationErrorKind.INVALID_RESPONSE: "invalid response",
    GenerationErrorKind.INVALID_API_KEY: "invalid API key",
    GenerationErrorKind.RATE_LIMITED: "rate limited",
    GenerationErrorKind.SERVER_ERROR: "server error",
    GenerationErrorKind.TIMEOUT: "timeout",
    GenerationErrorKind.API_ERROR: "API error",
    GenerationErrorKind.OUT_OF_MEMORY: "out of memory",
}


class CommitMessageGenerator:
    """Turns (diff, system prompt) into a commit message via a provider.

    *debug_log*, when given, receives informational events only; it never
    changes what is returned or raised.
    """

    def __init__(self, transport: Optional[HttpTransport] = None) -> None:
        self.transport = transport or HttpTransport()

    def generate(
        self,
        provider: ChatProvider,
        diff: str,
        system_prompt: str,
        debug_log: Optional[DebugLog] = None,
    ) -> str:
        def log(message: str) -> None:
            if debug_log is not None:
                debug_log(message)

        try:
            log("Building LLM request...")
            body = json.dumps(provider.build_request(diff, system_prompt)).encode("utf-8")
            log(f"Request body size: {len(body)} bytes")

            endpoint = provider.get_endpoint()
            log(f"Sending request to {endpoint}")
            response = self._send(endpoint, body, provider.get_auth_header())
            log(f"Response status: {response.status_code}")
            log(f"Raw LLM response: {response.body.decode('utf-8', errors='replace')}")

            message = self._parse(provider, response)
        except MemoryError:
            log("Parsed response: (out of memory)")
            raise GenerationError(GenerationErrorKind.OUT_OF_MEMORY)
        except GenerationError as exc:
            log(f"Parsed response: ({_RESULT_LABELS[exc.kind]})")
            raise

        log(f"Parsed commit message: {message}")
        return message

    def _send(self, endpoint: str, body: bytes, auth_header: str) -> HttpResponse:
        try:
            return self.transport.post_json(endpoint, body, auth_header)
        except TransportError as exc:
            kind = GenerationErrorKind.TIMEOUT if exc.timed_out else GenerationErrorKind.SERVER_ERROR
            raise GenerationError(kind, str(exc)) from exc

    @staticmethod
    def _parse(provider: ChatProvider, response: HttpResponse) -> str:
        try:
            return provider.parse_response(response.body)
        except GenerationError as exc:
            # gateways answer 5xx with HTML rather than a JSON error object
            if exc.kind == GenerationErrorKind.INVALID_RESPONSE and response.status_code >= 500:
                raise GenerationError(
                    GenerationErrorKind.SERVER_ERROR,
                    f"HTTP {response.status_code}",
                ) from exc
            raise
