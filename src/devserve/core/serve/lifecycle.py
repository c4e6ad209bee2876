"""Listening socket ownership and shutdown.

A :class:`ServerHandle` owns at most one listening server. Starting it again
with a new config closes the previous listener before the new one binds, so a
build/watch orchestrator can reconfigure without leaking sockets.
"""
from __future__ import annotations

import asyncio
import logging
import signal
from typing import Callable, Optional

from devserve.core.exceptions import ServerStateError

from .announce import ReadyNotifier, announce_ready
from .handler import RequestHandler
from .models import ServeConfig

logger = logging.getLogger(__name__)

TERMINATION_SIGNALS = (signal.SIGINT, signal.SIGTERM)

AnnounceFn = Callable[..., None]


class TrackingRequestHandler(RequestHandler):
    """Request handler that remembers open connections so they can be dropped on close."""

    def __init__(self, config: ServeConfig) -> None:
        super().__init__(config)
        self.connections: set[asyncio.StreamWriter] = set()

    async def __call__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.connections.add(writer)
        try:
            await super().__call__(reader, writer)
        finally:
            self.connections.discard(writer)

    def close_connections(self) -> None:
        for writer in list(self.connections):
            writer.close()


class ServerHandle:
    """Caller-owned handle for the single live static file server."""

    def __init__(self, *, announce: AnnounceFn = announce_ready) -> None:
        self.config: Optional[ServeConfig] = None
        self._server: Optional[asyncio.AbstractServer] = None
        self._handler: Optional[TrackingRequestHandler] = None
        self._ready: Optional[ReadyNotifier] = None
        self._announce = announce
        self._shutdown = asyncio.Event()
        self._shutdown_task: Optional[asyncio.Task[None]] = None

    @property
    def is_serving(self) -> bool:
        return self._server is not None and self._server.is_serving()

    @property
    def port(self) -> Optional[int]:
        if self._server is None or not self._server.sockets:
            return None
        return int(self._server.sockets[0].getsockname()[1])

    @property
    def url(self) -> Optional[str]:
        if self.config is None:
            return None
        return f"{self.config.scheme}://{self.config.host}:{self.port or self.config.port}"

    async def start(self, config: ServeConfig) -> None:
        """Bind a listener for ``config``, closing any previous one first."""
        if self._server is not None:
            logger.info("closing previous server on %s before rebinding", self.url)
            await self.close()

        ssl_context = config.https.ssl_context() if config.https is not None else None
        handler = TrackingRequestHandler(config)
        self._server = await asyncio.start_server(handler, config.host, config.port, ssl=ssl_context)
        self._handler = handler
        self.config = config
        self._ready = ReadyNotifier(self._announce_ready)
        self._shutdown.clear()
        logger.info("serving %s on %s", ", ".join(config.content_base), self.url)

    def _announce_ready(self) -> None:
        assert self.config is not None
        self._announce(self.config, url=self.url)

    def build_complete(self) -> bool:
        """Lifecycle hook for build/watch collaborators.

        The first call per server instance announces the server; later calls
        are no-ops. Returns True when the announcement ran.
        """
        if self._ready is None:
            raise ServerStateError("build_complete() called before start()")
        return self._ready()

    async def close(self) -> None:
        """Close the listener and drop its open connections. Idempotent."""
        server, handler = self._server, self._handler
        if server is None:
            return
        self._server = None
        self._handler = None
        server.close()
        if handler is not None:
            handler.close_connections()
        await server.wait_closed()
        logger.info("server closed")

    async def shutdown(self) -> None:
        """Close the listener and release :meth:`wait_for_shutdown`."""
        await self.close()
        self._shutdown.set()

    async def wait_for_shutdown(self) -> None:
        await self._shutdown.wait()

    async def serve_forever(self) -> None:
        """Block until the handle is shut down."""
        if self._server is None:
            raise ServerStateError("serve_forever() called before start()")
        await self.wait_for_shutdown()

    def request_shutdown(self, signum: Optional[int] = None) -> None:
        if signum is not None:
            logger.info("received %s, shutting down", signal.Signals(signum).name)
        if self._shutdown_task is None or self._shutdown_task.done():
            self._shutdown_task = asyncio.get_running_loop().create_task(self.shutdown())


def install_termination_handlers(handle: ServerHandle, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
    """Close ``handle`` and stop serving on SIGINT/SIGTERM."""
    loop = loop or asyncio.get_running_loop()
    for sig in TERMINATION_SIGNALS:
        try:
            loop.add_signal_handler(sig, handle.request_shutdown, sig)
        except NotImplementedError:
            # Windows event loops have no add_signal_handler.
            signal.signal(
                sig,
                lambda signum, _frame: loop.call_soon_threadsafe(handle.request_shutdown, signum),
            )


async def serve(config: ServeConfig, *, handle: Optional[ServerHandle] = None) -> ServerHandle:
    """Start serving ``config`` and block until a termination signal arrives."""
    handle = handle or ServerHandle()
    await handle.start(config)
    install_termination_handlers(handle)
    handle.build_complete()
    await handle.serve_forever()
    return handle


def run(config: ServeConfig) -> None:
    asyncio.run(serve(config))


__all__ = [
    "ServerHandle",
    "TERMINATION_SIGNALS",
    "TrackingRequestHandler",
    "install_termination_handlers",
    "run",
    "serve",
]
