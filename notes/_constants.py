"""Common literal values used across notes.

These constants keep the front-matter marker, template name, and source
suffixes in one place so the loader, the router, and tests agree on them.

Examples
--------
>>> from notes import _constants
>>> "---\n" == _constants.FRONT_MATTER_DELIMITER
True
>>> _constants.TEMPLATE_NAME
'post.html'
"""

FRONT_MATTER_DELIMITER = "---\n"
FRONT_MATTER_KEYS = frozenset({"title", "description", "slug"})
SOURCE_SUFFIXES = (".md", ".markdown")
TEMPLATE_NAME = "post.html"
