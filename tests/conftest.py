import os
import socket
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'devserve' and tests/ importable for 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from devserve.core.logging import reset_logging_for_tests


TWENTY_BYTES = bytes(range(20))


@pytest.fixture(autouse=True)
def _isolate_devserve_env(monkeypatch):
    """Keep DEVSERVE_* variables from the outer shell out of config loading."""
    for key in list(os.environ):
        if key.startswith("DEVSERVE_"):
            monkeypatch.delenv(key, raising=False)
    yield
    reset_logging_for_tests()


@pytest.fixture
def site(tmp_path: Path) -> dict:
    """Two overlaid roots: ``dist`` (build output) over ``static`` (assets).

    static/index.html           "<html>static index</html>"
    static/shared.txt           "from static"
    static/only-static.txt      "static only"
    static/twenty.bin           20 bytes 0x00..0x13
    static/app.js               "console.log(1);"
    static/notes.unknownext     "plain"
    dist/shared.txt             "from dist"
    dist/docs/index.html        "<html>docs</html>"
    dist/a-directory.txt/       a directory named like a file
    """
    static = tmp_path / "static"
    dist = tmp_path / "dist"
    static.mkdir()
    (dist / "docs").mkdir(parents=True)
    (dist / "a-directory.txt").mkdir()

    (static / "index.html").write_bytes(b"<html>static index</html>")
    (static / "shared.txt").write_bytes(b"from static")
    (static / "only-static.txt").write_bytes(b"static only")
    (static / "twenty.bin").write_bytes(TWENTY_BYTES)
    (static / "app.js").write_bytes(b"console.log(1);")
    (static / "notes.unknownext").write_bytes(b"plain")
    (dist / "shared.txt").write_bytes(b"from dist")
    (dist / "docs" / "index.html").write_bytes(b"<html>docs</html>")

    return {"root": tmp_path, "static": str(static), "dist": str(dist)}


@pytest.fixture
def free_port() -> int:
    sock = socket.socket()
    sock.bind(("127.0.0.1", 0))
    _host, port = sock.getsockname()
    sock.close()
    return int(port)
