"""Byte-range header parsing and slicing."""
from __future__ import annotations

import re

from .models import RangeSpec

_RANGE_RE = re.compile(r"(\d*)-(\d*)")


def parse_range(header: str | None) -> RangeSpec | None:
    """Parse a ``Range`` header value such as ``bytes=0-5``.

    Only the first range is considered. Parsing is lenient: a header that
    carries no ``start-end`` pair, or one where both sides are empty, is
    treated as no range at all. ``bytes=0-`` asks for the whole file and is
    also treated as no range. ``start <= end`` is not checked here.
    """
    if header is None:
        return None
    match = _RANGE_RE.search(header)
    if match is None:
        return None
    start = int(match.group(1)) if match.group(1) else 0
    end = match.group(2)
    if start == 0 and not end:
        return None
    return RangeSpec(start=start, end=int(end) if end else None)


def slice_range(content: bytes, byte_range: RangeSpec, *, strict: bool = False) -> tuple[bytes, int, int]:
    """Return ``(body, start, end)`` for ``byte_range`` applied to ``content``.

    ``end`` is clamped to the last byte index and is what ``Content-Range``
    advertises. By default the slice stops before ``end`` (the advertised
    range is one byte longer than the body, kept for client compatibility);
    ``strict`` includes the byte at ``end``.
    """
    max_end = len(content) - 1
    end = max_end if byte_range.end is None else min(max_end, byte_range.end)
    start = byte_range.start
    stop = end + 1 if strict else end
    body = content[start:max(stop, 0)]
    return body, start, end


__all__ = ["parse_range", "slice_range"]
