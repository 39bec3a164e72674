"""Application factory for the localized site preview server."""

from __future__ import annotations

from pathlib import Path

from flask import Flask, jsonify

from sitelocale.config.site_config import SiteConfiguration, load_site_configuration
from sitelocale.localization.catalog import TranslationBundle, load_bundle
from sitelocale.version import get_project_version
from sitelocale.build import plan_build
from sitelocale.routing import RoutingPolicy

from .http import problem_response
from .routes import register_routes
from .state import EXTENSION_KEY, SiteState, get_site_state


def create_app(
    config: SiteConfiguration | None = None,
    bundle: TranslationBundle | None = None,
    *,
    translations_dir: str | Path | None = None,
) -> Flask:
    """Create the preview application with the site resolved once at startup."""

    app = Flask(__name__)

    site_config = config or load_site_configuration()
    site_bundle = bundle or load_bundle(site_config.i18n, translations_dir)
    app.extensions[EXTENSION_KEY] = SiteState(
        config=site_config,
        bundle=site_bundle,
        policy=RoutingPolicy(site_config.route_policy),
        plan=plan_build(site_config, site_bundle),
    )

    @app.route("/health", methods=["GET"])
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        state = get_site_state()
        return jsonify(
            {
                "status": "ok",
                "version": get_project_version(),
                "locales": list(state.config.i18n.locales),
                "default_locale": state.config.i18n.default_locale,
            }
        )

    @app.errorhandler(404)
    def handle_not_found(error):
        return problem_response("not_found", status=404, message="No page or redirect for this path").to_response()

    register_routes(app)

    return app


__all__ = ["EXTENSION_KEY", "SiteState", "create_app", "get_site_state"]
