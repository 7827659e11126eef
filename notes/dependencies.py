"""FastAPI dependencies exposing the handles built once at startup."""

from __future__ import annotations

from fastapi import Request

from notes.config import ServerSettings
from notes.markdown_renderer import HtmlContentRenderer
from notes.page_renderer import TemplateRenderer


def get_renderer(request: Request) -> TemplateRenderer:
    """Return the page renderer compiled by :func:`notes.server.create_app`."""
    return request.app.state.renderer


def get_markdown(request: Request) -> HtmlContentRenderer:
    return request.app.state.markdown


def get_settings(request: Request) -> ServerSettings:
    return request.app.state.settings


__all__ = ["get_markdown", "get_renderer", "get_settings"]
