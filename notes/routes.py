"""HTTP routes mapping blog URLs onto markdown files under ``posts/``.

========================================  ===================================
Route                                     Source file
========================================  ===================================
``/``                                     ``posts/index.md``
``/about``                                ``posts/about.md``
``/todo``                                 ``posts/todo.md``
``/posts/{year}/{month}/{day}/{id}``      ``posts/{year}/{month}/{day}/{id}.md``
``/health_check``                         none, answers 200 directly
========================================  ===================================
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from fastapi import APIRouter, Depends, Response
from fastapi.responses import HTMLResponse

from notes.config import ServerSettings  # noqa: TC001 - resolved by FastAPI at runtime
from notes.dependencies import get_markdown, get_renderer, get_settings
from notes.document import DocumentNotFoundError, load_document
from notes.markdown_renderer import HtmlContentRenderer  # noqa: TC001
from notes.page_renderer import TemplateRenderer  # noqa: TC001

SettingsDep = typ.Annotated[ServerSettings, Depends(get_settings)]
MarkdownDep = typ.Annotated[HtmlContentRenderer, Depends(get_markdown)]
RendererDep = typ.Annotated[TemplateRenderer, Depends(get_renderer)]

router = APIRouter()


def _source_path(settings: ServerSettings, *segments: str) -> Path:
    """Return the post path for ``segments``, relative to the content root."""
    label = "/".join(segments)
    if any(segment in {"", ".", ".."} for segment in segments):
        msg = f"Refusing to resolve post path '{label}'."
        raise DocumentNotFoundError(label, msg)
    source = settings.posts_dir.joinpath(*segments)
    # Symlinks may point anywhere; only serve files that land inside posts/.
    if not source.resolve().is_relative_to(settings.posts_dir.resolve()):
        msg = f"Post path '{label}' resolves outside {settings.posts_dir}."
        raise DocumentNotFoundError(label, msg)
    try:
        return source.relative_to(settings.content_root)
    except ValueError:
        return source


async def _render_post(
    settings: ServerSettings,
    markdown: HtmlContentRenderer,
    renderer: TemplateRenderer,
    *segments: str,
) -> HTMLResponse:
    source = _source_path(settings, *segments)
    document = await load_document(
        source, base_dir=settings.content_root, renderer=markdown
    )
    return renderer.response(document)


@router.get("/", response_class=HTMLResponse)
async def index(
    settings: SettingsDep, markdown: MarkdownDep, renderer: RendererDep
) -> HTMLResponse:
    return await _render_post(settings, markdown, renderer, "index.md")


@router.get("/about", response_class=HTMLResponse)
async def about(
    settings: SettingsDep, markdown: MarkdownDep, renderer: RendererDep
) -> HTMLResponse:
    return await _render_post(settings, markdown, renderer, "about.md")


@router.get("/todo", response_class=HTMLResponse)
async def todo(
    settings: SettingsDep, markdown: MarkdownDep, renderer: RendererDep
) -> HTMLResponse:
    return await _render_post(settings, markdown, renderer, "todo.md")


@router.get("/posts/{year}/{month}/{day}/{post_id}", response_class=HTMLResponse)
async def get_post(  # noqa: PLR0913 - one argument per path segment
    year: str,
    month: str,
    day: str,
    post_id: str,
    settings: SettingsDep,
    markdown: MarkdownDep,
    renderer: RendererDep,
) -> HTMLResponse:
    """Render ``posts/{year}/{month}/{day}/{post_id}.md``."""
    return await _render_post(
        settings, markdown, renderer, year, month, day, f"{post_id}.md"
    )


@router.get("/health_check")
async def health_check() -> Response:
    return Response(status_code=200)


__all__ = ["router"]
