from __future__ import annotations

from typing import Any, Dict, Mapping


class DevServeError(Exception):
    """Base exception for devserve."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigError(DevServeError, ValueError):
    """Raised when serve configuration is malformed."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        DevServeError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ServerStateError(DevServeError, RuntimeError):
    """Raised when the server handle is used in an invalid state."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        DevServeError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class ResponseStateError(ServerStateError):
    """Raised when a response is written after it has been terminated."""


__all__ = [
    "DevServeError",
    "ConfigError",
    "ServerStateError",
    "ResponseStateError",
]
