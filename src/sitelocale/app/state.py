"""Per-application resolution state, computed once at startup."""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from sitelocale.build import BuildPlan
from sitelocale.config.site_config import SiteConfiguration
from sitelocale.localization.catalog import TranslationBundle
from sitelocale.routing import RoutingPolicy

EXTENSION_KEY = "sitelocale"


@dataclass(frozen=True)
class SiteState:
    """Read-only resolution state shared by every request."""

    config: SiteConfiguration
    bundle: TranslationBundle
    policy: RoutingPolicy
    plan: BuildPlan


def get_site_state() -> SiteState:
    return current_app.extensions[EXTENSION_KEY]


__all__ = ["EXTENSION_KEY", "SiteState", "get_site_state"]
