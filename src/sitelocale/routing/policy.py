"""Locale-prefixed URL generation for logical pages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from sitelocale.config.schema import LogicalPage, RoutePolicyConfig, normalise_path

X_DEFAULT = "x-default"


@dataclass(frozen=True)
class LocalizedUrl:
    """Concrete path at which one locale variant of a page is published.

    ``locale`` is ``None`` for locale-neutral pages.
    """

    page: LogicalPage
    locale: str | None
    path: str


@dataclass(frozen=True)
class AlternateLink:
    """One ``<link rel="alternate" hreflang=...>`` annotation."""

    hreflang: str
    href: str


class RoutingPolicy:
    """Deterministic mapping from logical pages to published URLs."""

    def __init__(self, config: RoutePolicyConfig) -> None:
        self.config = config

    @property
    def default_locale(self) -> str:
        return self.config.default_locale

    @property
    def locales(self) -> tuple[str, ...]:
        return self.config.locales

    def _join(self, *segments: str, directory: bool = False) -> str:
        parts = [segment.strip("/") for segment in segments if segment.strip("/")]
        if not parts:
            return "/"
        path = "/" + "/".join(parts)
        if directory or self.config.trailing_slash:
            path += "/"
        return path

    def is_prefixed(self, locale: str) -> bool:
        return locale != self.default_locale or self.config.prefix_default_locale

    def localized_path(self, page: LogicalPage, locale: str) -> str:
        """Return the published path of ``page`` in ``locale``."""

        home = page.path == ""
        if not page.localized:
            return self._join(page.path)
        if self.is_prefixed(locale):
            return self._join(locale, page.path, directory=home)
        return self._join(page.path)

    def unprefixed_path(self, page: LogicalPage) -> str:
        return self._join(page.path)

    def page_urls(self, page: LogicalPage) -> tuple[LocalizedUrl, ...]:
        """One URL per registered locale, or a single URL for neutral pages."""

        if not page.localized:
            return (LocalizedUrl(page=page, locale=None, path=self.localized_path(page, self.default_locale)),)
        return tuple(
            LocalizedUrl(page=page, locale=locale, path=self.localized_path(page, locale))
            for locale in self.locales
        )

    def generated_paths(self, pages: Iterable[LogicalPage]) -> dict[str, LocalizedUrl]:
        """Map every normalised published path to the URL that produces it."""

        generated: dict[str, LocalizedUrl] = {}
        for page in pages:
            for url in self.page_urls(page):
                generated[normalise_path(url.path)] = url
        return generated

    def redirects_bare_paths(self) -> bool:
        return self.config.prefix_default_locale and self.config.redirect_to_default_locale

    def alternates(self, page: LogicalPage) -> tuple[AlternateLink, ...]:
        """Alternate-locale links for ``page`` (paths, not absolute URLs).

        Neutral pages have no language variants and advertise none.
        """

        if not page.localized:
            return ()
        links = [
            AlternateLink(hreflang=self.config.hreflang_for(url.locale or ""), href=url.path)
            for url in self.page_urls(page)
        ]
        links.append(
            AlternateLink(hreflang=X_DEFAULT, href=self.localized_path(page, self.default_locale))
        )
        return tuple(links)


__all__ = ["AlternateLink", "LocalizedUrl", "RoutingPolicy", "X_DEFAULT"]
