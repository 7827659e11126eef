r"""Load markdown posts from disk into structured documents.

A post is a markdown file that may open with a front-matter block::

    ---
    title: Hello
    description: First post
    slug: hello
    ---
    # Body

:func:`load_document` reads the file asynchronously, folds the recognised
front-matter keys into a :class:`Document`, and converts the remaining body to
HTML with :class:`~notes.markdown_renderer.HtmlContentRenderer`. Failures are
raised as :class:`DocumentError` subclasses whose ``status_code`` tells the
HTTP layer how to answer.

Example
-------
>>> from notes.document import build_document
>>> doc = build_document("---\ntitle: Hello\n---\n# Body\n", "posts/hello.md")
>>> (doc.title, doc.url, doc.content)
('Hello', 'posts/hello', '<h1>Body</h1>')
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path, PurePath

import anyio

from notes._constants import (
    FRONT_MATTER_DELIMITER,
    FRONT_MATTER_KEYS,
    SOURCE_SUFFIXES,
)
from notes.markdown_renderer import HtmlContentRenderer

logger = logging.getLogger(__name__)

_DEFAULT_RENDERER = HtmlContentRenderer()


class DocumentError(Exception):
    """Base class for failures while loading a post."""

    status_code: typ.ClassVar[int] = 500

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path


class DocumentNotFoundError(DocumentError):
    """Raised when the source file is missing or cannot be opened."""

    status_code = 404


class DocumentReadError(DocumentError):
    """Raised when the source file opened but its contents could not be read."""


class MalformedFrontMatterError(DocumentError):
    """Raised when a front-matter block is present but structurally invalid."""


@dc.dataclass(frozen=True, slots=True)
class Document:
    """A rendered post ready to be substituted into ``post.html``.

    Attributes
    ----------
    url : str
        Source path with its markdown suffix removed.
    content : str
        HTML fragment converted from the markdown body; may be empty.
    slug : str
        Optional ``slug`` front-matter value.
    title : str
        Optional ``title`` front-matter value.
    description : str
        Optional ``description`` front-matter value.
    """

    url: str
    content: str = ""
    slug: str = ""
    title: str = ""
    description: str = ""


def split_front_matter(text: str, *, path: str = "<string>") -> tuple[str | None, str]:
    """Separate a leading front-matter block from the body.

    Parameters
    ----------
    text : str
        Full file contents.
    path : str, optional
        Source path, used only for error reporting.

    Returns
    -------
    tuple[str | None, str]
        The raw front-matter block (``None`` when the text does not start with
        the delimiter line) and the remaining body. Delimiters after the
        closing one are left untouched in the body.

    Raises
    ------
    MalformedFrontMatterError
        If the block is opened but never closed.
    """
    if not text.startswith(FRONT_MATTER_DELIMITER):
        return None, text
    segments = text.split(FRONT_MATTER_DELIMITER, 2)
    if len(segments) < 3:
        msg = f"Front matter in '{path}' is missing its closing delimiter."
        raise MalformedFrontMatterError(path, msg)
    _prefix, block, body = segments
    return block, body


def parse_front_matter(block: str, *, path: str = "<string>") -> dict[str, str]:
    r"""Parse ``key: value`` lines, keeping only recognised keys.

    Lines end at ``\n`` only. A trailing ``\r`` is dropped, and other Unicode
    line separators stay part of the value. Blank lines are skipped, keys and
    values are trimmed, and a repeated key keeps its last value.

    Raises
    ------
    MalformedFrontMatterError
        If a non-blank line has no colon.
    """
    values: dict[str, str] = {}
    for lineno, raw_line in enumerate(block.split("\n"), start=1):
        line = raw_line.removesuffix("\r")
        if not line.strip():
            continue
        key, sep, value = line.partition(":")
        if not sep:
            msg = f"Front matter line {lineno} in '{path}' is not 'key: value': {line!r}"
            raise MalformedFrontMatterError(path, msg)
        key = key.strip()
        if key in FRONT_MATTER_KEYS:
            values[key] = value.strip()
    return values


def source_url(path: str | PurePath) -> str:
    """Return ``path`` in POSIX form with its markdown suffix removed."""
    text = PurePath(path).as_posix()
    for suffix in SOURCE_SUFFIXES:
        if text.endswith(suffix):
            return text.removesuffix(suffix)
    return text


def build_document(
    text: str,
    path: str | PurePath,
    *,
    renderer: HtmlContentRenderer | None = None,
) -> Document:
    """Assemble a :class:`Document` from already-read file contents."""
    label = str(path)
    block, body = split_front_matter(text, path=label)
    meta: dict[str, str] = {}
    if block is not None:
        logger.info("front matter declared in %s: %s", label, block.strip())
        meta = parse_front_matter(block, path=label)

    logger.debug("converting markdown to html for %s", label)
    content = (renderer or _DEFAULT_RENDERER).markdown(body)
    return Document(url=source_url(path), content=content, **meta)


async def load_document(
    path: str | PurePath,
    *,
    base_dir: Path | None = None,
    renderer: HtmlContentRenderer | None = None,
) -> Document:
    """Read a markdown post and return it as a rendered :class:`Document`.

    Parameters
    ----------
    path : str or PurePath
        Source path; the document ``url`` is derived from it.
    base_dir : Path, optional
        Directory ``path`` is resolved against when opening the file.
    renderer : HtmlContentRenderer, optional
        Markdown renderer; defaults to a module-level Monokai renderer.

    Returns
    -------
    Document
        A freshly built document. Nothing is cached between calls.

    Raises
    ------
    DocumentNotFoundError
        If the file does not exist or cannot be opened.
    DocumentReadError
        If the file opened but reading or decoding it failed.
    MalformedFrontMatterError
        If the front-matter block is invalid.

    Notes
    -----
    Cancelling the caller while the file is being read raises the backend's
    cancellation exception; no document is built from a partial read.
    """
    label = PurePath(path).as_posix()
    target = base_dir / path if base_dir is not None else Path(path)
    logger.info("reading markdown file %s", label)
    try:
        handle = await anyio.open_file(target, encoding="utf-8", newline="")
    except OSError as exc:
        msg = f"Post '{label}' could not be opened: {exc.strerror or exc}"
        raise DocumentNotFoundError(label, msg) from exc

    try:
        text = await handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Post '{label}' could not be read: {exc}"
        raise DocumentReadError(label, msg) from exc
    finally:
        # Close even when the read was cancelled.
        with anyio.CancelScope(shield=True):
            await handle.aclose()

    return build_document(text, path, renderer=renderer)


__all__ = [
    "Document",
    "DocumentError",
    "DocumentNotFoundError",
    "DocumentReadError",
    "MalformedFrontMatterError",
    "build_document",
    "load_document",
    "parse_front_matter",
    "source_url",
    "split_front_matter",
]
