"""Resolve request paths to files across an ordered list of roots."""
from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from .models import ResolutionResult

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.html"


def candidate_path(root: str, url_path: str) -> str:
    """Return the absolute file path ``url_path`` maps to under ``root``.

    Paths ending in ``/`` map to the directory's ``index.html``. ``..``
    segments are normalized the same way the filesystem path API does; no
    further sandboxing is applied.
    """
    file_path = os.path.abspath(os.path.join(root or ".", "." + url_path))
    if url_path.endswith("/"):
        file_path = os.path.join(file_path, INDEX_FILENAME)
    return file_path


async def read_file(file_path: str) -> bytes:
    return await asyncio.to_thread(Path(file_path).read_bytes)


async def resolve(roots: Sequence[str], url_path: str) -> ResolutionResult:
    """Find the first root holding ``url_path`` and return its bytes.

    Roots are tried in order and the first successful read wins. When every
    root fails, the result carries the last root's error and attempted path.
    """
    file_path = ""
    error: OSError | None = None
    for root in roots or (".",):
        file_path = candidate_path(root, url_path)
        try:
            content = await read_file(file_path)
        except OSError as exc:
            logger.debug("miss %s under %s: %s", url_path, root, exc.strerror or exc)
            error = exc
            continue
        return ResolutionResult(file_path=file_path, content=content)
    return ResolutionResult(file_path=file_path, error=error)


__all__ = ["INDEX_FILENAME", "candidate_path", "read_file", "resolve"]
