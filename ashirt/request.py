"""HTTP request building and execution."""

from __future__ import annotations

import http.client
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from enum import Enum


class RequestMethod(str, Enum):
    """Supported HTTP methods."""

    GET = "GET"
    POST = "POST"


@dataclass
class Response:
    """The outcome of an executed request.

    ``status`` is ``None`` when no HTTP response was received at all.
    ``error`` describes any transport or HTTP error; it is ``None`` on success.
    """

    status: int | None
    body: bytes = b""
    error: str | None = None


@dataclass
class Request:
    """An HTTP request to be sent to ``host`` + ``endpoint``."""

    method: RequestMethod
    host: str = ""
    endpoint: str = ""
    body: bytes = b""
    headers: list[tuple[str, str]] = field(default_factory=list)

    @classmethod
    def get(cls, host: str, endpoint: str) -> Request:
        """Build a GET request."""
        return cls(RequestMethod.GET, host, endpoint)

    @classmethod
    def json_post(cls, host: str, endpoint: str, body: bytes) -> Request:
        """Build a POST request carrying a JSON body."""
        request = cls(RequestMethod.POST, host, endpoint, body)
        return request.add_header("Content-Type", "application/json")

    @classmethod
    def form_post(cls, host: str, endpoint: str, body: bytes, boundary: str) -> Request:
        """Build a POST request carrying a multipart/form-data body."""
        request = cls(RequestMethod.POST, host, endpoint, body)
        return request.add_header("Content-Type", f"multipart/form-data; boundary={boundary}")

    def add_header(self, name: str, value: str) -> Request:
        """Add a header and return this request."""
        self.headers.append((name, value))
        return self

    def url(self) -> str:
        """Return the full URL, dropping one trailing slash from the host."""
        host = self.host[:-1] if self.host.endswith("/") else self.host
        return host + self.endpoint

    def execute(self, timeout: float = 30.0) -> Response:
        """Send the request and return the response; failures are reported in the response."""
        data = self.body if self.method is RequestMethod.POST else None
        try:
            outgoing = urllib.request.Request(self.url(), data=data, method=self.method.value)
            for name, value in self.headers:
                outgoing.add_header(name, value)
            with urllib.request.urlopen(outgoing, timeout=timeout) as reply:
                return Response(status=reply.status, body=reply.read())
        except urllib.error.HTTPError as exc:
            try:
                body = exc.read() if exc.fp is not None else b""
            except OSError:
                body = b""
            finally:
                exc.close()
            return Response(status=exc.code, body=body, error=str(exc))
        except (OSError, ValueError, http.client.HTTPException) as exc:
            return Response(status=None, error=str(exc) or type(exc).__name__)