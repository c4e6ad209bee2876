"""Ready announcement: log the served address and optionally open a browser."""
from __future__ import annotations

import os
import sys
import webbrowser
from typing import Callable, Optional, TextIO

from .models import ServeConfig


def green(text: str) -> str:
    return "\u001b[1m\u001b[32m" + text + "\u001b[39m\u001b[22m"


def announce_ready(
    config: ServeConfig,
    *,
    url: Optional[str] = None,
    stream: Optional[TextIO] = None,
    open_browser: Callable[[str], object] = webbrowser.open,
) -> None:
    """Print ``<url> -> <root>`` for every root and open the browser if asked.

    ``verbose=False`` silences the printed lines only; ``open`` still fires.
    """
    url = url or config.url
    if config.verbose:
        out = stream or sys.stdout
        for root in config.content_base:
            print(f"{green(url)} -> {os.path.abspath(root)}", file=out)
        out.flush()
    if config.open:
        open_browser(url + config.open_page)


class ReadyNotifier:
    """Runs its callback on the first call only."""

    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self.fired = False

    def __call__(self) -> bool:
        if self.fired:
            return False
        self.fired = True
        self._callback()
        return True


__all__ = ["ReadyNotifier", "announce_ready", "green"]
