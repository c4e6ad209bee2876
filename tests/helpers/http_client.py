"""Minimal HTTP/1.1 client over asyncio streams for tests."""
from __future__ import annotations

import asyncio
import ssl
from dataclasses import dataclass, field


@dataclass
class FetchedResponse:
    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""


async def read_response(reader: asyncio.StreamReader) -> FetchedResponse:
    status_line = (await reader.readline()).decode("latin-1").rstrip("\r\n")
    status = int(status_line.split()[1])
    headers: dict[str, str] = {}
    while True:
        line = (await reader.readline()).decode("latin-1").rstrip("\r\n")
        if not line:
            break
        name, _, value = line.partition(":")
        headers[name.strip().lower()] = value.strip()
    length = int(headers.get("content-length", "0"))
    body = await reader.readexactly(length) if length else b""
    return FetchedResponse(status=status, headers=headers, body=body)


async def fetch(
    port: int,
    path: str,
    *,
    headers: dict[str, str] | None = None,
    host: str = "127.0.0.1",
    method: str = "GET",
    ssl_context: ssl.SSLContext | None = None,
) -> FetchedResponse:
    reader, writer = await asyncio.open_connection(host, port, ssl=ssl_context)
    try:
        lines = [f"{method} {path} HTTP/1.1", f"Host: {host}:{port}", "Connection: close"]
        lines.extend(f"{k}: {v}" for k, v in (headers or {}).items())
        writer.write(("\r\n".join(lines) + "\r\n\r\n").encode("latin-1"))
        await writer.drain()
        return await read_response(reader)
    finally:
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
