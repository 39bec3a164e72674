"""Infer the active locale from a request or page path."""

from __future__ import annotations

from typing import Protocol, Sequence
from urllib.parse import urlsplit


class _RegisteredLocales(Protocol):
    locales: Sequence[str]
    default_locale: str


def locale_from_url(url: str | None, registry: _RegisteredLocales) -> str:
    """Return the locale named by the first non-empty path segment.

    Anything that is not exactly a registered code (an empty path, a page
    name, an unknown or differently-cased code) resolves to the default.
    """

    if not url:
        return registry.default_locale

    path = urlsplit(url).path if "://" in url else url.split("?", 1)[0].split("#", 1)[0]
    first = next((segment for segment in path.split("/") if segment), "")
    if first in registry.locales:
        return first
    return registry.default_locale


__all__ = ["locale_from_url"]
