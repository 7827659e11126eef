"""HTTP-level tests for routing, static files, and error pages.

The ``client`` fixture from ``conftest.py`` serves a temporary blog through
:func:`notes.server.create_app`. Responses are parsed with BeautifulSoup so the
assertions target the rendered page rather than exact whitespace.
"""

from __future__ import annotations

import logging
import typing as typ

import pytest
from bs4 import BeautifulSoup
from fastapi.testclient import TestClient
from jinja2 import TemplateNotFound

from notes.server import create_app
from notes.config import ServerSettings
from notes.dependencies import get_settings
from notes.document import DocumentNotFoundError
from notes.routes import _source_path

if typ.TYPE_CHECKING:
    from pathlib import Path


def _article(html: str) -> BeautifulSoup:
    article = BeautifulSoup(html, "html.parser").find("article")
    assert article is not None, "expected the page template to wrap an <article>"
    return article


def test_post_route_renders_front_matter_and_body(client: TestClient) -> None:
    response = client.get("/posts/2024/01/01/hello")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    soup = BeautifulSoup(response.text, "html.parser")
    assert soup.title.get_text() == "Hello | notes"
    assert soup.find("link", rel="canonical")["href"] == "/posts/2024/01/01/hello"
    article = soup.find("article")
    assert article["id"] == "hello-world"
    assert [h1.get_text() for h1 in article.find_all("h1")] == ["Hello", "Body"]


@pytest.mark.parametrize(
    ("route", "expected"),
    [
        ("/", "Index"),
        ("/about", "About me."),
        ("/todo", "write more"),
    ],
)
def test_fixed_pages(client: TestClient, route: str, expected: str) -> None:
    response = client.get(route)
    assert response.status_code == 200
    assert expected in _article(response.text).get_text()


def test_missing_post_renders_404_page(client: TestClient) -> None:
    response = client.get("/posts/2024/01/01/missing")
    assert response.status_code == 404
    assert response.headers["content-type"].startswith("text/html")
    assert _article(response.text).get_text(strip=True) == "404 Not Found"


def test_unknown_route_renders_404_page(client: TestClient) -> None:
    response = client.get("/no/such/page")
    assert response.status_code == 404
    assert "404 Not Found" in response.text


def test_wrong_method_renders_405_page(client: TestClient) -> None:
    response = client.post("/about")
    assert response.status_code == 405
    assert "405 Method Not Allowed" in response.text
    assert "GET" in response.headers["allow"]


def test_malformed_front_matter_renders_500_page(
    client: TestClient, site_root: Path
) -> None:
    broken = site_root / "posts" / "2024" / "02" / "02" / "broken.md"
    broken.parent.mkdir(parents=True)
    broken.write_text("---\njustcontent\n---\nBody\n", encoding="utf-8")

    response = client.get("/posts/2024/02/02/broken")

    assert response.status_code == 500
    assert _article(response.text).get_text(strip=True) == "500 Internal Server Error"
    assert "justcontent" not in response.text, "raw error detail must not leak"


def test_unreadable_post_renders_500_page(client: TestClient, site_root: Path) -> None:
    (site_root / "posts" / "2024" / "01" / "01" / "binary.md").write_bytes(b"\xff\xfe")
    response = client.get("/posts/2024/01/01/binary")
    assert response.status_code == 500
    assert "500 Internal Server Error" in response.text


@pytest.mark.parametrize("segment", [".", ".."])
def test_dot_segments_are_not_resolved(site_root: Path, segment: str) -> None:
    settings = ServerSettings(content_root=site_root).resolve_paths()
    with pytest.raises(DocumentNotFoundError):
        _source_path(settings, "2024", segment, "01", "hello.md")


def test_symlink_outside_posts_is_not_served(
    client: TestClient, site_root: Path
) -> None:
    """A link under posts/ must not expose files elsewhere on disk."""
    secret = site_root / "private" / "secret.md"
    secret.parent.mkdir()
    secret.write_text("# SECRET\n", encoding="utf-8")
    (site_root / "posts" / "2024" / "01" / "01" / "leak.md").symlink_to(secret)

    response = client.get("/posts/2024/01/01/leak")

    assert response.status_code == 404
    assert "SECRET" not in response.text, "linked file contents must not be rendered"


def test_symlink_inside_posts_is_served(client: TestClient, site_root: Path) -> None:
    day = site_root / "posts" / "2024" / "01" / "01"
    (day / "alias.md").symlink_to(day / "hello.md")
    response = client.get("/posts/2024/01/01/alias")
    assert response.status_code == 200
    assert "Body" in _article(response.text).get_text()


def test_source_path_is_relative_to_content_root(site_root: Path) -> None:
    settings = ServerSettings(content_root=site_root).resolve_paths()
    source = _source_path(settings, "2024", "01", "01", "hello.md")
    assert source.as_posix() == "posts/2024/01/01/hello.md"


def test_unexpected_errors_render_500_page(client: TestClient) -> None:
    def _explode() -> None:
        msg = "boom"
        raise RuntimeError(msg)

    client.app.dependency_overrides[get_settings] = _explode
    try:
        response = client.get("/about")
    finally:
        client.app.dependency_overrides.clear()
    assert response.status_code == 500
    assert "500 Internal Server Error" in response.text
    assert "boom" not in response.text


def _access_lines(caplog: pytest.LogCaptureFixture) -> list[str]:
    return [r.getMessage() for r in caplog.records if r.name == "notes.access"]


def test_requests_are_access_logged(
    client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger="notes.access")
    client.get("/about")
    client.get("/posts/2024/01/01/missing")
    lines = _access_lines(caplog)
    assert [line.rsplit(" ", 1)[0] for line in lines] == [
        "GET /about 200",
        "GET /posts/2024/01/01/missing 404",
    ]
    assert all(line.endswith("ms") for line in lines)


def test_request_that_raises_is_access_logged_as_500(
    client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    """Handler crashes still produce an access line before the 500 page."""

    def _explode() -> None:
        msg = "boom"
        raise RuntimeError(msg)

    caplog.set_level(logging.INFO, logger="notes.access")
    client.app.dependency_overrides[get_settings] = _explode
    try:
        response = client.get("/todo")
    finally:
        client.app.dependency_overrides.clear()
    assert response.status_code == 500
    lines = _access_lines(caplog)
    assert len(lines) == 1, f"expected one access line, got {lines!r}"
    assert lines[0].startswith("GET /todo 500 ")


def test_health_check_bypasses_templates(client: TestClient) -> None:
    response = client.get("/health_check")
    assert response.status_code == 200
    assert response.content == b""


def test_static_assets_are_served_from_disk(client: TestClient) -> None:
    css = client.get("/static/main.css")
    assert css.status_code == 200
    assert css.text == "body { margin: 0; }\n"
    svg = client.get("/assets/diagram.svg")
    assert svg.status_code == 200
    assert svg.text == "<svg></svg>\n"
    favicon = client.get("/favicon.ico")
    assert favicon.status_code == 200
    assert favicon.content == b"\x00\x00\x01\x00"


def test_missing_static_file_renders_404_page(client: TestClient) -> None:
    response = client.get("/static/missing.css")
    assert response.status_code == 404
    assert "404 Not Found" in response.text


def test_missing_static_directories_are_skipped(tmp_path: Path) -> None:
    app = create_app(ServerSettings(content_root=tmp_path))
    with TestClient(app) as bare:
        assert bare.get("/static/main.css").status_code == 404
        assert bare.get("/favicon.ico").status_code == 404


def test_missing_template_prevents_startup(tmp_path: Path) -> None:
    with pytest.raises(TemplateNotFound):
        create_app(ServerSettings(content_root=tmp_path, template_dir=tmp_path))
