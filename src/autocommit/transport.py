"""HTTP transport: one JSON POST with a fixed timeout and a response size cap."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import httpx

HTTP_TIMEOUT_SECONDS = 30.0
MAX_RESPONSE_BYTES = 1024 * 1024
USER_AGENT = "autocommit/1.0"


class TransportError(Exception):
    """Raised when the request could not complete (connection, TLS, timeout, size)."""

    def __init__(self, message: str, *, timed_out: bool = False) -> None:
        super().__init__(message)
        self.timed_out = timed_out


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    body: bytes


class HttpTransport:
    """POSTs JSON bodies with httpx. One request in flight at a time."""

    def __init__(
        self,
        *,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        max_response_bytes: int = MAX_RESPONSE_BYTES,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self.max_response_bytes = max_response_bytes
        self._transport = transport  # injectable for tests

    def _headers(self, auth_header: Optional[str]) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        if auth_header:
            headers["Authorization"] = auth_header
        return headers

    def post_json(self, url: str, body: bytes, auth_header: Optional[str] = None) -> HttpResponse:
        """Send *body* and return the status code and raw response body."""
        try:
            with httpx.Client(timeout=httpx.Timeout(self.timeout), transport=self._transport) as client:
                with client.stream("POST", url, content=body, headers=self._headers(auth_header)) as response:
                    chunks = []
                    received = 0
                    for chunk in response.iter_bytes():
                        received += len(chunk)
                        if received > self.max_response_bytes:
                            raise TransportError(
                                f"response exceeded {self.max_response_bytes} bytes"
                            )
                        chunks.append(chunk)
                    return HttpResponse(status_code=response.status_code, body=b"".join(chunks))
        except httpx.TimeoutException as exc:
            raise TransportError(f"request timed out after {self.timeout:g}s", timed_out=True) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"request failed: {exc}") from exc
        except (httpx.InvalidURL, UnicodeEncodeError) as exc:
            # bad endpoint or a non-ASCII api key; the request is never sent
            raise TransportError(f"invalid request: {exc}") from exc
