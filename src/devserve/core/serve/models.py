from __future__ import annotations

import os
import ssl
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Union

from devserve.core.exceptions import ConfigError

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 10001
DEFAULT_CONTENT_TYPE = "text/plain"
DEFAULT_FALLBACK_PATH = "/index.html"

FallbackSetting = Union[str, bool, None]


_LEGACY_SERVE_KEY_HINTS: dict[str, str] = {
    "contentBase": "content_base",
    "historyApiFallback": "history_api_fallback",
    "openPage": "open_page",
    "defaultContentType": "default_content_type",
    "strictRanges": "strict_ranges",
}


def _raise_on_legacy_keys(raw: Mapping[str, Any]) -> None:
    found = [key for key in _LEGACY_SERVE_KEY_HINTS if raw.get(key) is not None]
    if not found:
        return

    hints = ", ".join(f"{k} -> {_LEGACY_SERVE_KEY_HINTS[k]}" for k in found)
    raise ConfigError(f"Unsupported legacy serve keys: {hints}", context={"keys": found})


@dataclass(frozen=True)
class TlsCredentials:
    """Pre-supplied TLS material (PEM file paths)."""

    certfile: str
    keyfile: str
    cafile: str | None = None
    password: str | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> TlsCredentials | None:
        if raw is None or raw is False:
            return None
        if not isinstance(raw, Mapping):
            raise ConfigError("https must be a mapping with cert and key", context={"https": raw})
        cert = raw.get("cert")
        key = raw.get("key")
        if not cert or not key:
            raise ConfigError("https requires both cert and key", context={"https": dict(raw)})
        ca = raw.get("ca")
        password = raw.get("password")
        return cls(
            certfile=os.path.expandvars(str(cert)),
            keyfile=os.path.expandvars(str(key)),
            cafile=os.path.expandvars(str(ca)) if ca else None,
            password=str(password) if password is not None else None,
        )

    def ssl_context(self) -> ssl.SSLContext:
        ctx = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
        ctx.load_cert_chain(self.certfile, self.keyfile, password=self.password)
        if self.cafile:
            ctx.load_verify_locations(cafile=self.cafile)
        return ctx


@dataclass(frozen=True)
class ServeConfig:
    """Immutable configuration for one static file server instance."""

    content_base: tuple[str, ...] = (".",)
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    https: TlsCredentials | None = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    history_api_fallback: FallbackSetting = None
    open: bool = False
    open_page: str = ""
    verbose: bool = True
    default_content_type: str = DEFAULT_CONTENT_TYPE
    strict_ranges: bool = False

    def __post_init__(self) -> None:
        roots = tuple(str(r) if r else "." for r in self.content_base)
        if not roots:
            roots = (".",)
        object.__setattr__(self, "content_base", roots)
        object.__setattr__(
            self,
            "headers",
            MappingProxyType({str(k): str(v) for k, v in dict(self.headers).items()}),
        )

    @classmethod
    def from_raw(cls, raw: Any) -> ServeConfig:
        """Build a config from a mapping, a single root, or a list of roots."""
        if isinstance(raw, (str, list, tuple)):
            raw = {"content_base": raw}
        if raw is None:
            raw = {}
        if not isinstance(raw, Mapping):
            raise ConfigError(
                f"serve config must be a mapping, got {type(raw).__name__}",
                context={"type": type(raw).__name__},
            )

        _raise_on_legacy_keys(raw)

        content_base = raw.get("content_base", ".")
        if isinstance(content_base, str):
            roots = [content_base]
        elif isinstance(content_base, (list, tuple)):
            roots = [str(r) for r in content_base]
        else:
            raise ConfigError("content_base must be a string or a list of strings")

        port_raw = raw.get("port", DEFAULT_PORT)
        try:
            port = int(port_raw if port_raw is not None else DEFAULT_PORT)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"port must be an integer, got {port_raw!r}") from exc

        headers_raw = raw.get("headers") or {}
        if not isinstance(headers_raw, Mapping):
            raise ConfigError("headers must be a mapping of header name to value")

        fallback = raw.get("history_api_fallback")
        if fallback is not None and not isinstance(fallback, (str, bool)):
            raise ConfigError("history_api_fallback must be a path string or a boolean")

        return cls(
            content_base=tuple(os.path.expandvars(r) for r in roots),
            host=str(raw.get("host") or DEFAULT_HOST),
            port=port,
            https=TlsCredentials.from_raw(raw.get("https")),
            headers=headers_raw,
            history_api_fallback=fallback,
            open=bool(raw.get("open", False)),
            open_page=str(raw.get("open_page") or ""),
            verbose=bool(raw.get("verbose", True)),
            default_content_type=str(raw.get("default_content_type") or DEFAULT_CONTENT_TYPE),
            strict_ranges=bool(raw.get("strict_ranges", False)),
        )

    @property
    def scheme(self) -> str:
        return "https" if self.https is not None else "http"

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    @property
    def fallback_path(self) -> str | None:
        fallback = self.history_api_fallback
        if isinstance(fallback, str):
            return fallback or None
        if fallback is True:
            return DEFAULT_FALLBACK_PATH
        return None


@dataclass(frozen=True)
class RequestContext:
    """Per-request view of an incoming request."""

    method: str
    path: str
    range_header: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    version: str = "HTTP/1.1"

    @property
    def keep_alive(self) -> bool:
        connection = self.headers.get("connection", "").lower()
        if self.version == "HTTP/1.0":
            return connection == "keep-alive"
        return connection != "close"


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of resolving a URL path against the configured roots."""

    file_path: str
    content: bytes | None = None
    error: OSError | None = None

    @property
    def found(self) -> bool:
        return self.error is None and self.content is not None

    @property
    def not_found(self) -> bool:
        return isinstance(self.error, FileNotFoundError)


@dataclass(frozen=True)
class RangeSpec:
    """A single parsed byte range. ``end`` of None means open-ended."""

    start: int = 0
    end: int | None = None
