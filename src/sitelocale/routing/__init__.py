"""Routing policy: localized URLs, redirects and sitemap alternates."""

from .policy import X_DEFAULT, AlternateLink, LocalizedUrl, RoutingPolicy
from .redirects import RedirectRule, RedirectTable, build_redirect_table
from .sitemap import (
    SitemapEntry,
    alternate_link_tags,
    build_sitemap,
    render_sitemap,
    verify_sitemap,
)

__all__ = [
    "AlternateLink",
    "LocalizedUrl",
    "RedirectRule",
    "RedirectTable",
    "RoutingPolicy",
    "SitemapEntry",
    "X_DEFAULT",
    "alternate_link_tags",
    "build_redirect_table",
    "build_sitemap",
    "render_sitemap",
    "verify_sitemap",
]
