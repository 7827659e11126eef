"""Convert post markdown into HTML fragments with highlighted code.

The loader hands every post body to :class:`HtmlContentRenderer`, which runs
Python-Markdown with heading attributes (``## Title {#custom-id}``), tables,
and Pygments-backed fenced code enabled. The result is a fragment ready to be
dropped into ``post.html``; it never contains ``<html>`` or ``<body>``.

Example
-------
>>> from notes.markdown_renderer import HtmlContentRenderer
>>> HtmlContentRenderer().markdown("## Hello {#greeting}")
'<h2 id="greeting">Hello</h2>'
"""

from __future__ import annotations

import io
import re
import typing as typ
from html import escape

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

if typ.TYPE_CHECKING:
    from pygments.token import _TokenType

INDENTED_FENCE_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_ATTRIBUTES_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
LANGUAGE_PREFIX = "language-"

MARKDOWN_EXTENSIONS = (
    "attr_list",
    "fenced_code",
    "codehilite",
    "tables",
    "sane_lists",
)


class LanguageTaggedHtmlFormatter(HtmlFormatter):
    """Pygments HTML formatter that labels its wrapper with the block language.

    Python-Markdown's ``codehilite`` passes ``lang_str`` (``language-python``)
    to formatter classes given as ``pygments_formatter``. Fenced blocks carry
    their info-string language; blocks without one, including indented code,
    are ``text``.
    """

    def __init__(self, lang_str: str = "", **options: typ.Any) -> None:
        super().__init__(**options)
        self.language = lang_str.removeprefix(LANGUAGE_PREFIX) or "text"

    def format_unencoded(
        self,
        tokensource: typ.Iterable[tuple[_TokenType, str]],
        outfile: typ.TextIO,
    ) -> None:
        buffer = io.StringIO()
        super().format_unencoded(tokensource, buffer)
        opening = f'<div class="{self.cssclass}">'
        tagged = (
            f'<div class="{self.cssclass}" '
            f'data-language="{escape(self.language, quote=True)}">'
        )
        outfile.write(buffer.getvalue().replace(opening, tagged, 1))


class HtmlContentRenderer:
    """Render post markdown with heading attributes and highlighted code."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        """Initialize a renderer for the given Pygments style.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"monokai"``.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str) -> str:
        """Render markdown into an HTML fragment.

        A new ``Markdown`` instance is built on every call so concurrent
        requests never share parser state. Every highlighted block is a
        ``div.codehilite`` with a ``data-language`` attribute.
        """
        normalized = self._normalize_fences(text)
        if not normalized.strip():
            return ""
        md = Markdown(
            extensions=list(MARKDOWN_EXTENSIONS),
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                    "pygments_formatter": LanguageTaggedHtmlFormatter,
                    "lang_prefix": LANGUAGE_PREFIX,
                }
            },
        )
        return md.convert(normalized)

    @staticmethod
    def _normalize_fences(text: str) -> str:
        """Outdent fences and drop ``,attr`` suffixes from their info strings."""
        outdented = INDENTED_FENCE_PATTERN.sub(r"\1", text)

        def _strip_attributes(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            return f"{fence}{language or ''}"

        return FENCE_ATTRIBUTES_PATTERN.sub(_strip_attributes, outdented)


__all__ = ["HtmlContentRenderer", "LanguageTaggedHtmlFormatter", "MARKDOWN_EXTENSIONS"]
