"""Shared fixtures for the notes test suite.

``site_root`` lays out a throwaway blog (posts, assets, client bundle, and
favicon) under ``tmp_path`` and ``client`` serves it through the real
application factory, so route tests exercise the same wiring as production.
"""

from __future__ import annotations

import typing as typ

import pytest
from fastapi.testclient import TestClient

from notes.server import create_app
from notes.config import ServerSettings

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

HELLO_POST = (
    "---\n"
    "title: Hello\n"
    "description: First post\n"
    "slug: hello-world\n"
    "---\n"
    "# Body\n\n"
    "Some *emphasis* and a [link](/about).\n"
)


def write_post(root: Path, relative: str, text: str) -> Path:
    """Write ``text`` to ``root / relative``, creating parent folders."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Return a content root holding a minimal blog."""
    write_post(tmp_path, "posts/index.md", "# Index\n\nWelcome.\n")
    write_post(tmp_path, "posts/about.md", "---\ntitle: About\n---\nAbout me.\n")
    write_post(tmp_path, "posts/todo.md", "- [ ] write more\n")
    write_post(tmp_path, "posts/2024/01/01/hello.md", HELLO_POST)
    write_post(tmp_path, "posts/assets/diagram.svg", "<svg></svg>\n")
    write_post(tmp_path, "client/dist/main.css", "body { margin: 0; }\n")
    (tmp_path / "favicon.ico").write_bytes(b"\x00\x00\x01\x00")
    return tmp_path


@pytest.fixture
def client(site_root: Path) -> cabc.Iterator[TestClient]:
    """Yield a test client for an app rooted at ``site_root``."""
    app = create_app(ServerSettings(content_root=site_root))
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
