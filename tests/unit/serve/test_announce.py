from __future__ import annotations

import io
import os

from devserve.core.serve.announce import ReadyNotifier, announce_ready, green
from devserve.core.serve.models import ServeConfig


def test_announce_prints_one_line_per_root() -> None:
    out = io.StringIO()
    opened: list[str] = []
    config = ServeConfig(content_base=("dist", "static"))

    announce_ready(config, stream=out, open_browser=opened.append)

    lines = out.getvalue().splitlines()
    assert lines == [
        f"{green('http://localhost:10001')} -> {os.path.abspath('dist')}",
        f"{green('http://localhost:10001')} -> {os.path.abspath('static')}",
    ]
    assert opened == []


def test_announce_opens_browser_with_open_page() -> None:
    opened: list[str] = []
    config = ServeConfig(open=True, open_page="/docs/")
    announce_ready(config, stream=io.StringIO(), open_browser=opened.append)
    assert opened == ["http://localhost:10001/docs/"]


def test_quiet_still_opens_browser() -> None:
    out = io.StringIO()
    opened: list[str] = []
    config = ServeConfig(verbose=False, open=True)
    announce_ready(config, url="http://localhost:4321", stream=out, open_browser=opened.append)
    assert out.getvalue() == ""
    assert opened == ["http://localhost:4321"]


def test_ready_notifier_fires_once() -> None:
    calls: list[int] = []
    notify = ReadyNotifier(lambda: calls.append(1))

    assert notify() is True
    assert notify() is False
    assert notify() is False
    assert calls == [1]
    assert notify.fired
