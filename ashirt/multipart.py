"""Building multipart/form-data request bodies."""

from __future__ import annotations

import os

from .strings import random_string

_HEADER = "\r\n--{}\r\n"
_PARAM = 'Content-Disposition: form-data; name="{}"\r\n\r\n'
_FILE = 'Content-Disposition: form-data; name="{}"; filename="{}"\r\nContent-Type: {}\r\n\r\n'


def _content_type(filename: str) -> str:
    suffix = filename.partition(".")[2].lower()
    if suffix.endswith(("jpg", "jpeg")):
        return "image/jpeg"
    if suffix.endswith(("txt", "log")):
        return "text/plain"
    return "application/octet-stream"


def _read(path: str) -> bytes:
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except OSError:
        return b""


class MultipartBody:
    """A multipart/form-data body made of text parameters and files."""

    def __init__(self, boundary: str | None = None) -> None:
        self.boundary = boundary if boundary is not None else f"----ASHIRTTrayApp{random_string(16)}"
        self._params: list[tuple[str, str]] = []
        self._files: list[tuple[str, str]] = []

    def add_parameter(self, name: str = "", value: str = "") -> None:
        """Add a text field."""
        self._params.append((name, value))

    def add_file(self, name: str = "", path: str = "") -> None:
        """Add a file field; the file is read when the body is generated."""
        self._files.append((name, os.fspath(path)))

    def generate(self) -> bytes:
        """Return the encoded body. Unreadable files are sent empty."""
        parts: list[bytes] = []
        header = _HEADER.format(self.boundary).encode("utf-8")
        for name, value in self._params:
            parts.append(header)
            parts.append(_PARAM.format(name).encode("utf-8"))
            parts.append(value.encode("utf-8"))
        for name, path in self._files:
            filename = os.path.basename(path)
            parts.append(header)
            parts.append(_FILE.format(name, filename, _content_type(filename)).encode("utf-8"))
            parts.append(_read(path))
        parts.append(f"\r\n--{self.boundary}--\r\n".encode("utf-8"))
        return b"".join(parts)