"""Application factory wiring routes, static files, and error pages together.

:func:`create_app` builds every long-lived handle up front: the compiled
``post.html`` template and the markdown renderer are stored on ``app.state``
and reach handlers through :mod:`notes.dependencies`. A missing template
therefore fails here, before the server accepts a single request.

Examples
--------
>>> from pathlib import Path
>>> from notes.server import create_app
>>> from notes.config import ServerSettings
>>> app = create_app(ServerSettings(content_root=Path("site")))  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import time
import typing as typ
from http import HTTPStatus

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from notes import __version__
from notes.config import ServerSettings
from notes.errors import install_error_handlers
from notes.markdown_renderer import HtmlContentRenderer
from notes.routes import router
from notes.page_renderer import TemplateRenderer

if typ.TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from starlette.responses import Response

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("notes.access")


def _mount_static(app: FastAPI, settings: ServerSettings) -> None:
    """Serve client assets, post assets, and the favicon straight from disk."""
    for prefix, directory in (
        ("/static", settings.static_dir),
        ("/assets", settings.assets_dir),
    ):
        if not directory.is_dir():
            logger.warning("not serving %s: %s is not a directory", prefix, directory)
            continue
        app.mount(prefix, StaticFiles(directory=directory), name=prefix.strip("/"))
    favicon = settings.favicon

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon_ico() -> FileResponse:
        if not favicon.is_file():
            raise HTTPException(status_code=404)
        return FileResponse(favicon)


async def _log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Log one access line per request, including requests whose handler raised.

    Unexpected exceptions bypass the route's response and are answered with the
    500 page by the outermost error handler, so they are logged as 500 here.
    """
    started = time.perf_counter()
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        access_logger.info(
            "%s %s %d %.1fms",
            request.method,
            request.url.path,
            status_code,
            elapsed_ms,
        )


def create_app(settings: ServerSettings | None = None) -> FastAPI:
    """Build the notes ASGI application.

    Parameters
    ----------
    settings : ServerSettings, optional
        Server configuration; relative paths are resolved against
        ``settings.content_root``. Defaults to :class:`ServerSettings`.

    Returns
    -------
    FastAPI
        App with routes, static mounts, request logging, and error pages.

    Raises
    ------
    jinja2.TemplateNotFound
        If ``post.html`` is missing from ``settings.template_dir``.
    """
    resolved = (settings or ServerSettings()).resolve_paths()
    renderer = TemplateRenderer(resolved.template_dir)
    logger.info(
        "loaded template %s from %s", renderer.template_name, resolved.template_dir
    )

    app = FastAPI(
        title="notes",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = resolved
    app.state.renderer = renderer
    app.state.markdown = HtmlContentRenderer(resolved.pygments_style)

    _mount_static(app, resolved)
    app.middleware("http")(_log_requests)
    install_error_handlers(app)
    app.include_router(router)
    return app


__all__ = ["create_app"]
