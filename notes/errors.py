"""Map failures to status codes and render them through ``post.html``.

Every non-success response leaving the app goes through here. The page body
is the shared template with ``{"content": "<code> <reason>"}``, so visitors
never see a traceback or a raw I/O message.
"""

from __future__ import annotations

import logging
import typing as typ
from http import HTTPStatus

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from notes.dependencies import get_renderer
from notes.document import DocumentError

if typ.TYPE_CHECKING:
    from collections.abc import Mapping

    from fastapi.responses import HTMLResponse

logger = logging.getLogger(__name__)


def error_payload(status_code: int) -> dict[str, str]:
    """Return the template payload for ``status_code``.

    >>> error_payload(404)
    {'content': '404 Not Found'}
    """
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        return {"content": str(status_code)}
    return {"content": f"{status_code} {phrase}"}


def render_error(
    request: Request,
    status_code: int,
    headers: Mapping[str, str] | None = None,
) -> HTMLResponse:
    """Render the error page for ``status_code`` with the app's renderer."""
    response = get_renderer(request).response(
        error_payload(status_code), status_code=status_code
    )
    if headers:
        response.headers.update(headers)
    return response


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> HTMLResponse:
    """Render routing and static-file errors (404, 405, ...)."""
    return render_error(request, exc.status_code, exc.headers)


async def document_error_handler(request: Request, exc: DocumentError) -> HTMLResponse:
    """Render loader failures with the status their class declares."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.info("%s %s: %s", request.method, request.url.path, exc)
    return render_error(request, exc.status_code)


async def unhandled_exception_handler(request: Request, exc: Exception) -> HTMLResponse:
    """Log anything unexpected and answer with a 500 page."""
    logger.exception(
        "unhandled error for %s %s", request.method, request.url.path, exc_info=exc
    )
    return render_error(request, HTTPStatus.INTERNAL_SERVER_ERROR.value)


def install_error_handlers(app: FastAPI) -> None:
    """Register the error-page handlers on ``app``."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(DocumentError, document_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = [
    "document_error_handler",
    "error_payload",
    "http_exception_handler",
    "install_error_handlers",
    "render_error",
    "unhandled_exception_handler",
]
