"""Fatal build-time errors raised by the resolution layer."""

from __future__ import annotations


class BuildError(Exception):
    """Base class for failures that must stop a site build."""


class TranslationLoadError(BuildError):
    """A registered locale has no dictionary, or its dictionary is malformed."""

    def __init__(self, locale: str, message: str) -> None:
        super().__init__(f"[{locale}] {message}")
        self.locale = locale


class RedirectConflictError(BuildError):
    """Redirect rules disagree about a source path or form a loop."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source


class SitemapConsistencyError(BuildError):
    """Sitemap entries advertise a locale set that differs from the registry."""

    def __init__(self, page: str, message: str) -> None:
        super().__init__(f"{page or '/'}: {message}")
        self.page = page


__all__ = [
    "BuildError",
    "RedirectConflictError",
    "SitemapConsistencyError",
    "TranslationLoadError",
]
