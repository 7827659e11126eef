"""A small markdown blog server.

Posts live as markdown files under ``posts/``; each request reads one file,
folds its front matter into a :class:`~notes.document.Document`, and renders
it through the shared ``post.html`` template.

Exports
-------
- ``app``: Cyclopts application behind the ``notes`` console script.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``create_app``: FastAPI application factory.

Examples
--------
>>> from notes import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

__version__ = "0.1.0"

from .server import create_app  # noqa: E402
from .cli import app, main  # noqa: E402

__all__ = ["__version__", "app", "create_app", "main"]
