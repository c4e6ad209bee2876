"""Response assembly: status line, headers and body for one request."""
from __future__ import annotations

import logging
import mimetypes
from http import HTTPStatus
from typing import Iterable, Mapping

from devserve.core.exceptions import ResponseStateError

from .models import DEFAULT_CONTENT_TYPE, RangeSpec
from .ranges import slice_range

logger = logging.getLogger(__name__)

SERVER_TAG = "(devserve)"

# Types that older platform mime tables get wrong or miss.
mimetypes.add_type("text/javascript", ".js")
mimetypes.add_type("text/javascript", ".mjs")
mimetypes.add_type("application/wasm", ".wasm")
mimetypes.add_type("application/json", ".map")
mimetypes.add_type("image/svg+xml", ".svg")
mimetypes.add_type("application/manifest+json", ".webmanifest")


def content_type_for(file_path: str, default: str = DEFAULT_CONTENT_TYPE) -> str:
    ctype, _encoding = mimetypes.guess_type(file_path, strict=False)
    return ctype or default


class HttpResponse:
    """Collects one HTTP/1.1 response and serializes it.

    Headers set with :meth:`set_header` before :meth:`write_head` are kept;
    headers passed to :meth:`write_head` are added on top. The response is
    terminated by exactly one call to :meth:`end`.
    """

    def __init__(self, *, version: str = "HTTP/1.1") -> None:
        self.version = version
        self.status = HTTPStatus.OK.value
        self._headers: dict[str, tuple[str, str]] = {}
        self.body = b""
        self.head_written = False
        self.finished = False

    def set_header(self, name: str, value: object) -> None:
        if self.head_written:
            raise ResponseStateError("headers already written", context={"header": name})
        self._headers[name.lower()] = (name, str(value))

    def get_header(self, name: str) -> str | None:
        entry = self._headers.get(name.lower())
        return entry[1] if entry else None

    def mark_connection_close(self) -> None:
        self._headers["connection"] = ("Connection", "close")

    @property
    def headers(self) -> dict[str, str]:
        return {name: value for name, value in self._headers.values()}

    def write_head(self, status: int, headers: Mapping[str, object] | None = None) -> None:
        if self.head_written:
            raise ResponseStateError("head already written", context={"status": status})
        for name, value in (headers or {}).items():
            self.set_header(name, value)
        self.status = int(status)
        self.head_written = True

    def end(self, body: bytes | str = b"") -> None:
        if self.finished:
            raise ResponseStateError("response already terminated", context={"status": self.status})
        if not self.head_written:
            self.write_head(self.status)
        self.body = body.encode("utf-8") if isinstance(body, str) else bytes(body)
        # Framing for keep-alive connections.
        self._headers.setdefault("content-length", ("Content-Length", str(len(self.body))))
        self.finished = True

    def header_lines(self) -> Iterable[str]:
        try:
            reason = HTTPStatus(self.status).phrase
        except ValueError:
            reason = ""
        yield f"{self.version} {self.status} {reason}".rstrip()
        for name, value in self._headers.values():
            yield f"{name}: {value}"

    def to_bytes(self) -> bytes:
        head = "\r\n".join(self.header_lines()) + "\r\n\r\n"
        return head.encode("latin-1") + self.body


def write_found(
    response: HttpResponse,
    file_path: str,
    content: bytes,
    byte_range: RangeSpec | None,
    *,
    default_content_type: str = DEFAULT_CONTENT_TYPE,
    strict_ranges: bool = False,
) -> None:
    """Write a 200 (full body) or 206 (single range) response for a file."""
    headers: dict[str, object] = {"Content-Type": content_type_for(file_path, default_content_type)}
    status = HTTPStatus.OK
    body = content
    if byte_range is not None:
        status = HTTPStatus.PARTIAL_CONTENT
        body, start, end = slice_range(content, byte_range, strict=strict_ranges)
        headers["Accept-Ranges"] = "bytes"
        headers["Content-Range"] = f"bytes {start}-{end}/{len(content)}"
    headers["Content-Length"] = len(body)
    response.write_head(status, headers)
    response.end(body)


def write_not_found(response: HttpResponse, file_path: str) -> None:
    response.write_head(HTTPStatus.NOT_FOUND)
    response.end(f"404 Not Found\n\n{file_path}\n\n{SERVER_TAG}")


def _error_fields(error: OSError) -> list[str]:
    fields = [error.errno, error.strerror, error.filename, getattr(error, "filename2", None)]
    return [str(value) for value in fields if value not in (None, "")]


def write_server_error(response: HttpResponse, file_path: str, error: OSError) -> None:
    """500 with the attempted path and the error's fields in the body."""
    logger.warning("I/O error reading %s: %s", file_path, error)
    details = "\n".join(_error_fields(error)) or repr(error)
    response.write_head(HTTPStatus.INTERNAL_SERVER_ERROR)
    response.end(f"500 Internal Server Error\n\n{file_path}\n\n{details}\n\n{SERVER_TAG}")


__all__ = [
    "HttpResponse",
    "SERVER_TAG",
    "content_type_for",
    "write_found",
    "write_not_found",
    "write_server_error",
]
