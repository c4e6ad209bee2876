"""Test helper modules for the devserve test suite.

- http_client: minimal asyncio HTTP/1.1 client for socket-level tests
"""
from __future__ import annotations
