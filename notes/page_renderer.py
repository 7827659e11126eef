"""Render posts and error payloads through the shared ``post.html`` template.

The template is compiled once when :class:`TemplateRenderer` is constructed,
so a missing or broken template stops the server at startup rather than on
the first request. After that the renderer is read-only and is shared by
every request handler through dependency injection.

Examples
--------
>>> from notes.page_renderer import TemplateRenderer
>>> renderer = TemplateRenderer()
>>> "404 Not Found" in renderer.render({"content": "404 Not Found"})
True
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import msgspec
from fastapi.responses import HTMLResponse
from jinja2 import Environment, FileSystemLoader, select_autoescape

from notes._constants import TEMPLATE_NAME

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
HTML_MEDIA_TYPE = "text/html"


class TemplateRenderer:
    """Compile ``post.html`` once and render payloads against it."""

    def __init__(
        self,
        template_dir: Path | None = None,
        *,
        template_name: str = TEMPLATE_NAME,
    ) -> None:
        """Load and compile the page template.

        Parameters
        ----------
        template_dir : Path, optional
            Directory holding the template; defaults to the package templates.
        template_name : str, optional
            File name of the page template. Defaults to ``"post.html"``.

        Raises
        ------
        jinja2.TemplateNotFound
            If the template does not exist in ``template_dir``.
        jinja2.TemplateSyntaxError
            If the template fails to compile.
        """
        self.template_dir = template_dir or DEFAULT_TEMPLATE_DIR
        self.template_name = template_name
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template(template_name)

    def render(self, data: typ.Any) -> str:
        """Render ``data`` into an HTML page.

        ``data`` may be a :class:`~notes.document.Document`, a mapping such as
        ``{"content": "404 Not Found"}``, or any value ``msgspec`` can turn
        into builtins. Keys the payload lacks render as empty strings.
        """
        context = msgspec.to_builtins(data)
        if not isinstance(context, dict):
            msg = f"Template context must be a mapping, got {type(context).__name__}."
            raise TypeError(msg)
        html = self.template.render(**context)
        if not html.endswith("\n"):
            html += "\n"
        return html

    def response(self, data: typ.Any, status_code: int = 200) -> HTMLResponse:
        """Render ``data`` and wrap it in a ``text/html`` response."""
        return HTMLResponse(
            self.render(data), status_code=status_code, media_type=HTML_MEDIA_TYPE
        )


__all__ = ["DEFAULT_TEMPLATE_DIR", "HTML_MEDIA_TYPE", "TemplateRenderer"]
