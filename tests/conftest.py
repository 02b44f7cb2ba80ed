"""Shared fixtures: an on-disk site, its config, and an HTTP client for it."""
from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine, Iterator
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from staticdir.domain.config import ServerConfig
from staticdir.main import create_app

INDEX_HTML = b"<!doctype html><title>home</title>\n"
DOCS_INDEX_HTML = b"<!doctype html><title>docs</title><a href=\"guide.txt\">guide</a>\n"
GUIDE_TXT = b"relative links land here\n"
SECRET = b"top secret, outside the root\n"
# Larger than the test chunk size so streaming spans several reads.
BLOB = bytes(range(256)) * 40


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """Build a small site under tmp_path/site, with a secret file beside it.

    site/
      index.html
      blob.bin
      hello world.txt
      café.txt
      docs/index.html
      docs/guide.txt
      empty/
      nested/index.html/index.html   (a directory named index.html)
    """
    (tmp_path / "secret.txt").write_bytes(SECRET)

    root = tmp_path / "site"
    (root / "docs").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "nested" / "index.html").mkdir(parents=True)

    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "blob.bin").write_bytes(BLOB)
    (root / "hello world.txt").write_bytes(b"spaced\n")
    (root / "café.txt").write_bytes("déjà vu\n".encode())
    (root / "docs" / "index.html").write_bytes(DOCS_INDEX_HTML)
    (root / "docs" / "guide.txt").write_bytes(GUIDE_TXT)
    (root / "nested" / "index.html" / "index.html").write_bytes(b"deep\n")
    return root


@pytest.fixture
def config(site: Path) -> ServerConfig:
    return ServerConfig.from_root(site, chunk_size=1024)


@pytest.fixture
def client(config: ServerConfig) -> Iterator[TestClient]:
    with TestClient(create_app(config)) as c:
        yield c


@pytest.fixture
def run_async() -> Callable[[Coroutine[Any, Any, Any]], Any]:
    """Run a service coroutine to completion on a fresh event loop."""

    def _run(coro: Coroutine[Any, Any, Any]) -> Any:
        return asyncio.run(coro)

    return _run
