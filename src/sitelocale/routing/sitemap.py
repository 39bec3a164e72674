"""Sitemap entries with ``hreflang`` alternates, checked against the registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable
from xml.sax.saxutils import escape as xml_escape
from xml.sax.saxutils import quoteattr

from sitelocale.config.schema import LogicalPage, normalise_path
from sitelocale.errors import SitemapConsistencyError

from .policy import X_DEFAULT, AlternateLink, RoutingPolicy

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
XHTML_NAMESPACE = "http://www.w3.org/1999/xhtml"


@dataclass(frozen=True)
class SitemapEntry:
    """One ``<url>`` element: a published URL and its alternates."""

    page: LogicalPage
    locale: str | None
    loc: str
    alternates: tuple[AlternateLink, ...]


def absolute_url(site: str, path: str) -> str:
    return site.rstrip("/") + path


def build_sitemap(
    policy: RoutingPolicy,
    pages: Iterable[LogicalPage],
    site: str,
) -> tuple[SitemapEntry, ...]:
    """Return one entry per published URL, in page then locale order."""

    entries: list[SitemapEntry] = []
    for page in pages:
        alternates = tuple(
            AlternateLink(hreflang=link.hreflang, href=absolute_url(site, link.href))
            for link in policy.alternates(page)
        )
        for url in policy.page_urls(page):
            entries.append(
                SitemapEntry(
                    page=page,
                    locale=url.locale,
                    loc=absolute_url(site, url.path),
                    alternates=alternates,
                )
            )
    return tuple(entries)


def verify_sitemap(
    entries: Iterable[SitemapEntry],
    policy: RoutingPolicy,
    site: str,
) -> None:
    """Raise :class:`SitemapConsistencyError` when the sitemap drifts from routing.

    Each localized page must be advertised in exactly the registered locales,
    each advertised URL must be a published path, and ``x-default`` must name
    the default locale's URL.
    """

    by_page: dict[str, list[SitemapEntry]] = {}
    pages: dict[str, LogicalPage] = {}
    for entry in entries:
        by_page.setdefault(entry.page.path, []).append(entry)
        pages[entry.page.path] = entry.page

    generated = policy.generated_paths(pages.values())
    prefix = site.rstrip("/")
    expected_locales = set(policy.locales)
    expected_hreflang = {policy.config.hreflang_for(locale) for locale in policy.locales} | {X_DEFAULT}

    for page_path, page_entries in by_page.items():
        page = pages[page_path]

        for entry in page_entries:
            if not entry.loc.startswith(prefix):
                raise SitemapConsistencyError(page_path, f"'{entry.loc}' is outside {site}")
            if normalise_path(entry.loc[len(prefix):]) not in generated:
                raise SitemapConsistencyError(page_path, f"'{entry.loc}' is not a generated page")

        if not page.localized:
            continue

        advertised = [entry.locale for entry in page_entries]
        if len(advertised) != len(set(advertised)) or set(advertised) != expected_locales:
            raise SitemapConsistencyError(
                page_path,
                f"advertised locales {sorted(map(str, advertised))} differ from registry {sorted(expected_locales)}",
            )

        for entry in page_entries:
            hreflangs = [link.hreflang for link in entry.alternates]
            if len(hreflangs) != len(set(hreflangs)) or set(hreflangs) != expected_hreflang:
                raise SitemapConsistencyError(
                    page_path, f"alternates {sorted(hreflangs)} differ from registry"
                )
            x_default = next(link for link in entry.alternates if link.hreflang == X_DEFAULT)
            expected_default = absolute_url(site, policy.localized_path(page, policy.default_locale))
            if x_default.href != expected_default:
                raise SitemapConsistencyError(
                    page_path, f"x-default points at '{x_default.href}' instead of '{expected_default}'"
                )


def _url_element(entry: SitemapEntry) -> str:
    lines = ["  <url>", f"    <loc>{xml_escape(entry.loc)}</loc>"]
    for link in entry.alternates:
        lines.append(
            f"    <xhtml:link rel=\"alternate\" hreflang={quoteattr(link.hreflang)} href={quoteattr(link.href)}/>"
        )
    lines.append("  </url>")
    return "\n".join(lines)


def render_sitemap(entries: Iterable[SitemapEntry]) -> str:
    """Serialise entries as a ``urlset`` document, preserving their order."""

    body = "\n".join(_url_element(entry) for entry in entries)
    header = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<urlset xmlns="{SITEMAP_NAMESPACE}" xmlns:xhtml="{XHTML_NAMESPACE}">\n'
    )
    return header + (body + "\n" if body else "") + "</urlset>\n"


def alternate_link_tags(policy: RoutingPolicy, page: LogicalPage, site: str) -> list[str]:
    """``<link rel="alternate">`` tags for a rendered page's ``<head>``."""

    return [
        f"<link rel=\"alternate\" hreflang={quoteattr(link.hreflang)} href={quoteattr(absolute_url(site, link.href))} />"
        for link in policy.alternates(page)
    ]


__all__ = [
    "SitemapEntry",
    "absolute_url",
    "alternate_link_tags",
    "build_sitemap",
    "render_sitemap",
    "verify_sitemap",
]
