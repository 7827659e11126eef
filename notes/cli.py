"""Cyclopts CLI entrypoint for serving and previewing the notes blog.

The ``notes`` console script defined here runs the web server, renders a single
markdown post to stdout for previewing, and prints the Pygments stylesheet the
page template links to. Every option can also be supplied through a
``NOTES_*`` environment variable; ``serve`` additionally honours ``HOST`` and
``PORT`` so the server drops into container platforms unchanged.

Examples
--------
Serve the blog from the current directory:

>>> from notes.cli import main
>>> main()  # doctest: +SKIP

Preview a post:

>>> from notes.cli import app
>>> app(["render", "posts/about.md"])  # doctest: +SKIP
"""

from __future__ import annotations

import functools
import typing as typ
from pathlib import Path

import anyio
import cyclopts
import uvicorn
from cyclopts import App, Parameter

from notes import __version__
from notes.server import create_app
from notes.config import DEFAULT_HOST, DEFAULT_PORT, ServerSettings
from notes.document import load_document
from notes.log import configure_logging
from notes.markdown_renderer import HtmlContentRenderer
from notes.page_renderer import DEFAULT_TEMPLATE_DIR, TemplateRenderer

app = App(
    name="notes",
    version=__version__,
    config=cyclopts.config.Env("NOTES_", command=False),  # type: ignore[unknown-argument]
)


@app.command(help="Serve the blog over HTTP.")
def serve(  # noqa: PLR0913 - one keyword per setting
    *,
    host: typ.Annotated[
        str, Parameter(help="Bind address", env_var="HOST")
    ] = DEFAULT_HOST,
    port: typ.Annotated[
        int, Parameter(help="Bind port", env_var="PORT")
    ] = DEFAULT_PORT,
    content_root: typ.Annotated[
        Path, Parameter(help="Directory holding posts/, client/ and favicon.ico")
    ] = Path(),
    template_dir: typ.Annotated[
        Path, Parameter(help="Directory containing post.html")
    ] = DEFAULT_TEMPLATE_DIR,
    posts_dir: typ.Annotated[
        Path, Parameter(help="Directory holding the markdown posts")
    ] = Path("posts"),
    static_dir: typ.Annotated[
        Path, Parameter(help="Directory served under /static")
    ] = Path("client/dist"),
    assets_dir: typ.Annotated[
        Path, Parameter(help="Directory served under /assets")
    ] = Path("posts/assets"),
    favicon: typ.Annotated[
        Path, Parameter(help="File served at /favicon.ico")
    ] = Path("favicon.ico"),
    pygments_style: typ.Annotated[
        str, Parameter(help="Pygments style for code blocks")
    ] = "monokai",
    log_level: typ.Annotated[str, Parameter(help="Root log level")] = "INFO",
) -> None:
    """Run the notes server under uvicorn.

    Parameters
    ----------
    host : str, optional
        Address to bind; falls back to ``HOST`` and then ``0.0.0.0``.
    port : int, optional
        Port to bind; falls back to ``PORT`` and then ``7000``.
    content_root : Path, optional
        Root that ``posts/``, ``posts/assets/`` and ``favicon.ico`` are
        resolved against.
    posts_dir : Path, optional
        Directory the post routes read from; relative to ``content_root``.
    template_dir : Path, optional
        Directory holding ``post.html``; defaults to the packaged template.
    static_dir : Path, optional
        Directory served under ``/static``; relative to ``content_root``.
    assets_dir : Path, optional
        Directory served under ``/assets``; relative to ``content_root``.
    favicon : Path, optional
        File served at ``/favicon.ico``; relative to ``content_root``.
    pygments_style : str, optional
        Style used to highlight fenced code blocks.
    log_level : str, optional
        Level for the root logger and uvicorn.

    Raises
    ------
    SettingsError
        If ``port`` is outside the valid range.
    jinja2.TemplateNotFound
        If ``post.html`` cannot be loaded; the server never starts.
    """
    settings = ServerSettings(
        host=host,
        port=port,
        content_root=content_root,
        posts_dir=posts_dir,
        template_dir=template_dir,
        static_dir=static_dir,
        assets_dir=assets_dir,
        favicon=favicon,
        pygments_style=pygments_style,
        log_level=log_level,
    )
    configure_logging(settings.log_level)
    asgi_app = create_app(settings)
    uvicorn.run(
        asgi_app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


@app.command(help="Render a markdown post through post.html and print it.")
def render(
    path: Path,
    *,
    content_root: typ.Annotated[
        Path, Parameter(help="Directory the post path is relative to")
    ] = Path(),
    template_dir: typ.Annotated[
        Path, Parameter(help="Directory containing post.html")
    ] = DEFAULT_TEMPLATE_DIR,
    pygments_style: typ.Annotated[
        str, Parameter(help="Pygments style for code blocks")
    ] = "monokai",
) -> None:
    """Print the full HTML page for a single post."""
    renderer = TemplateRenderer(template_dir)
    loader = functools.partial(
        load_document,
        path,
        base_dir=content_root,
        renderer=HtmlContentRenderer(pygments_style),
    )
    document = anyio.run(loader)
    print(renderer.render(document), end="")


@app.command(help="Print the Pygments CSS used by highlighted code blocks.")
def stylesheet(
    *,
    pygments_style: typ.Annotated[
        str, Parameter(help="Pygments style for code blocks")
    ] = "monokai",
) -> None:
    """Print CSS for ``.codehilite`` blocks, e.g. into ``client/dist``."""
    print(HtmlContentRenderer(pygments_style).stylesheet)


def main() -> None:
    """Invoke the Cyclopts application behind the ``notes`` console command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
