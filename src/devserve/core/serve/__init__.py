"""Static file serving for local development.

Resolution and response building are plain functions over immutable config:
- ``resolver``: ordered multi-root lookup with directory -> index.html
- ``ranges``: lenient single-range ``Range`` header parsing and slicing
- ``response``: status line, headers and body (200/206/404/500)
- ``fallback``: single-page-application fallback routing
- ``handler``: HTTP/1.1 framing over asyncio streams
- ``lifecycle``: the caller-owned listening server handle and shutdown
"""

from .announce import ReadyNotifier, announce_ready
from .fallback import handle_resolution
from .handler import RequestHandler, read_request, serve_request
from .lifecycle import ServerHandle, install_termination_handlers, run, serve
from .models import (
    DEFAULT_FALLBACK_PATH,
    DEFAULT_HOST,
    DEFAULT_PORT,
    RangeSpec,
    RequestContext,
    ResolutionResult,
    ServeConfig,
    TlsCredentials,
)
from .ranges import parse_range, slice_range
from .resolver import candidate_path, resolve
from .response import HttpResponse, write_found, write_not_found, write_server_error

__all__ = [
    "DEFAULT_FALLBACK_PATH",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "HttpResponse",
    "RangeSpec",
    "ReadyNotifier",
    "RequestContext",
    "RequestHandler",
    "ResolutionResult",
    "ServeConfig",
    "ServerHandle",
    "TlsCredentials",
    "announce_ready",
    "candidate_path",
    "handle_resolution",
    "install_termination_handlers",
    "parse_range",
    "read_request",
    "resolve",
    "run",
    "serve",
    "serve_request",
    "slice_range",
    "write_found",
    "write_not_found",
    "write_server_error",
]
