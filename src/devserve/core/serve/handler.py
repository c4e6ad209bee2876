"""HTTP/1.1 request handling over asyncio streams.

Each connection runs as one coroutine. Requests on a connection are served
one after another; the only suspension points inside a request are the file
reads done by the resolver.
"""
from __future__ import annotations

import asyncio
import logging
from http import HTTPStatus
from urllib.parse import unquote

from .fallback import handle_resolution
from .models import RequestContext, ServeConfig
from .ranges import parse_range
from .resolver import resolve
from .response import HttpResponse

logger = logging.getLogger(__name__)

MAX_HEADER_SIZE = 64 * 1024


class RequestParseError(ValueError):
    """Raised when a request head cannot be parsed."""


def decode_path(target: str) -> str:
    """Strip the query string and percent-decode the request target."""
    return unquote(target.split("?", 1)[0].split("#", 1)[0])


async def read_request(reader: asyncio.StreamReader) -> RequestContext | None:
    """Read one request head. Returns None on a clean EOF between requests."""
    lines: list[str] = []
    size = 0
    while True:
        try:
            line = await reader.readline()
        except ValueError as exc:
            raise RequestParseError("request header line too long") from exc
        if not line:
            if not lines:
                return None
            raise RequestParseError("connection closed inside request head")
        size += len(line)
        if size > MAX_HEADER_SIZE:
            raise RequestParseError(f"request head exceeds {MAX_HEADER_SIZE} bytes")
        if line in (b"\r\n", b"\n"):
            if not lines:
                # Tolerate stray CRLF between pipelined requests.
                continue
            break
        lines.append(line.decode("latin-1").rstrip("\r\n"))

    parts = lines[0].split()
    if len(parts) != 3 or not parts[2].startswith("HTTP/"):
        raise RequestParseError(f"malformed request line: {lines[0]!r}")
    method, target, version = parts

    headers: dict[str, str] = {}
    for raw in lines[1:]:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise RequestParseError(f"malformed header line: {raw!r}")
        headers[name.strip().lower()] = value.strip()

    return RequestContext(
        method=method,
        path=decode_path(target),
        range_header=headers.get("range"),
        headers=headers,
        version=version,
    )


async def discard_body(reader: asyncio.StreamReader, ctx: RequestContext) -> bool:
    """Skip a request body. Returns False when the connection cannot be reused."""
    if "chunked" in ctx.headers.get("transfer-encoding", "").lower():
        return False
    length = ctx.headers.get("content-length")
    if not length:
        return True
    try:
        remaining = int(length)
    except ValueError:
        return False
    if remaining < 0:
        return False
    if remaining > 0:
        await reader.readexactly(remaining)
    return True


async def serve_request(config: ServeConfig, ctx: RequestContext) -> HttpResponse:
    """Produce the complete response for one request. The method is not inspected."""
    response = HttpResponse()
    for name, value in config.headers.items():
        response.set_header(name, value)

    byte_range = parse_range(ctx.range_header)
    result = await resolve(config.content_base, ctx.path)
    await handle_resolution(response, config, result, byte_range)

    logger.debug("%s %s -> %s", ctx.method, ctx.path, response.status)
    return response


def _bad_request(message: str) -> HttpResponse:
    response = HttpResponse()
    response.write_head(HTTPStatus.BAD_REQUEST, {"Connection": "close"})
    response.end(f"400 Bad Request\n\n{message}")
    return response


class RequestHandler:
    """``asyncio.start_server`` client callback bound to one config."""

    def __init__(self, config: ServeConfig) -> None:
        self.config = config

    async def __call__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        peer = writer.get_extra_info("peername")
        try:
            while True:
                try:
                    ctx = await read_request(reader)
                except RequestParseError as exc:
                    logger.warning("bad request from %s: %s", peer, exc)
                    writer.write(_bad_request(str(exc)).to_bytes())
                    await writer.drain()
                    return
                if ctx is None:
                    return

                keep_alive = ctx.keep_alive and await discard_body(reader, ctx)
                response = await serve_request(self.config, ctx)
                if not keep_alive:
                    response.mark_connection_close()
                writer.write(response.to_bytes())
                await writer.drain()
                if not keep_alive:
                    return
        except (OSError, asyncio.IncompleteReadError) as exc:
            logger.debug("connection from %s dropped: %s", peer, exc)
        except Exception:
            logger.exception("Error handling request from %s", peer)
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError:
                pass


__all__ = [
    "MAX_HEADER_SIZE",
    "RequestHandler",
    "RequestParseError",
    "decode_path",
    "discard_body",
    "read_request",
    "serve_request",
]
