from __future__ import annotations

import asyncio
import os

from devserve.core.serve.fallback import handle_resolution
from devserve.core.serve.models import RangeSpec, ServeConfig
from devserve.core.serve.resolver import resolve
from devserve.core.serve.response import HttpResponse


def _run(config: ServeConfig, url_path: str, byte_range: RangeSpec | None = None) -> HttpResponse:
    async def go() -> HttpResponse:
        response = HttpResponse()
        result = await resolve(config.content_base, url_path)
        await handle_resolution(response, config, result, byte_range)
        return response

    return asyncio.run(go())


def test_found_file_is_written(site: dict) -> None:
    config = ServeConfig(content_base=(site["dist"], site["static"]))
    response = _run(config, "/only-static.txt")
    assert response.status == 200
    assert response.body == b"static only"


def test_found_file_honours_range(site: dict) -> None:
    config = ServeConfig(content_base=(site["static"],))
    response = _run(config, "/twenty.bin", RangeSpec(2, 6))
    assert response.status == 206
    assert response.body == bytes(range(2, 6))


def test_missing_without_fallback_is_404(site: dict) -> None:
    config = ServeConfig(content_base=(site["dist"], site["static"]))
    response = _run(config, "/app/route")
    assert response.status == 404
    assert os.path.join(site["static"], "app", "route").encode() in response.body


def test_fallback_true_serves_index_html(site: dict) -> None:
    config = ServeConfig(content_base=(site["dist"], site["static"]), history_api_fallback=True)
    response = _run(config, "/app/route")
    assert response.status == 200
    assert response.body == b"<html>static index</html>"
    assert response.get_header("Content-Type") == "text/html"


def test_fallback_custom_path(site: dict) -> None:
    config = ServeConfig(content_base=(site["dist"], site["static"]), history_api_fallback="/docs/index.html")
    response = _run(config, "/missing")
    assert response.status == 200
    assert response.body == b"<html>docs</html>"


def test_fallback_ignores_range(site: dict) -> None:
    config = ServeConfig(content_base=(site["static"],), history_api_fallback=True)
    response = _run(config, "/nowhere", RangeSpec(0, 3))
    assert response.status == 200
    assert response.body == b"<html>static index</html>"
    assert response.get_header("Content-Range") is None


def test_fallback_false_behaves_like_disabled(site: dict) -> None:
    config = ServeConfig(content_base=(site["static"],), history_api_fallback=False)
    assert _run(config, "/nowhere").status == 404


def test_missing_fallback_page_is_404_naming_fallback(site: dict) -> None:
    config = ServeConfig(content_base=(site["dist"],), history_api_fallback="/spa.html")
    response = _run(config, "/nowhere")
    assert response.status == 404
    assert os.path.join(site["dist"], "spa.html").encode() in response.body


def test_non_not_found_error_is_500_even_with_fallback(site: dict) -> None:
    config = ServeConfig(content_base=(site["dist"],), history_api_fallback=True)
    response = _run(config, "/a-directory.txt")
    assert response.status == 500
    assert b"500 Internal Server Error" in response.body
    assert os.path.join(site["dist"], "a-directory.txt").encode() in response.body


def test_last_root_error_decides_the_outcome(site: dict) -> None:
    # dist holds a directory with the requested name; static has nothing.
    roots = (site["dist"], site["static"])

    without_fallback = _run(ServeConfig(content_base=roots), "/a-directory.txt")
    assert without_fallback.status == 404
    assert os.path.join(site["static"], "a-directory.txt").encode() in without_fallback.body

    with_fallback = _run(ServeConfig(content_base=roots, history_api_fallback=True), "/a-directory.txt")
    assert with_fallback.status == 200
    assert with_fallback.body == b"<html>static index</html>"
