"""Typed settings describing where the server listens and finds its files."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from notes.page_renderer import DEFAULT_TEMPLATE_DIR

DEFAULT_HOST = "0.0.0.0"  # noqa: S104 - the server is meant to run in a container
DEFAULT_PORT = 7000


class SettingsError(ValueError):
    """Raised when server settings are invalid."""


@dc.dataclass(slots=True)
class ServerSettings:
    """Process configuration for the notes server.

    Relative directories are interpreted against ``content_root``; call
    :meth:`resolve_paths` to obtain a copy with absolute paths.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    content_root: Path = Path()
    posts_dir: Path = Path("posts")
    template_dir: Path = DEFAULT_TEMPLATE_DIR
    static_dir: Path = Path("client/dist")
    assets_dir: Path = Path("posts/assets")
    favicon: Path = Path("favicon.ico")
    pygments_style: str = "monokai"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            msg = f"Port must be between 1 and 65535, got {self.port}."
            raise SettingsError(msg)
        self.log_level = self.log_level.upper()

    def resolve_paths(self) -> ServerSettings:
        """Return a copy whose directories are absolute."""
        root = self.content_root.resolve()

        def _under_root(path: Path) -> Path:
            return path if path.is_absolute() else root / path

        return dc.replace(
            self,
            content_root=root,
            posts_dir=_under_root(self.posts_dir),
            template_dir=_under_root(self.template_dir),
            static_dir=_under_root(self.static_dir),
            assets_dir=_under_root(self.assets_dir),
            favicon=_under_root(self.favicon),
        )


__all__ = ["DEFAULT_HOST", "DEFAULT_PORT", "ServerSettings", "SettingsError"]
