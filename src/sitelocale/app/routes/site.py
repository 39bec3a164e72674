"""Serve the resolved site: sitemap, redirects and per-page descriptors.

The preview answers every path exactly as the emitted artifacts say the
hosting layer will: redirect table entries first, then published pages,
otherwise a 404. Requests never negotiate a locale from headers.
"""

from __future__ import annotations

from flask import Blueprint, Response, abort, jsonify, redirect, request

from sitelocale.app.state import get_site_state
from sitelocale.build import PageRender
from sitelocale.config.schema import normalise_path
from sitelocale.localization import locale_from_url
from sitelocale.routing import alternate_link_tags

blueprint = Blueprint("site", __name__)


def _find_render(path: str) -> PageRender | None:
    target = normalise_path(path)
    for render in get_site_state().plan.renders:
        if normalise_path(render.path) == target:
            return render
    return None


@blueprint.get("/sitemap.xml")
def sitemap():
    """Return the sitemap generated for the configured pages."""

    body = get_site_state().plan.render_sitemap()
    return Response(body, mimetype="application/xml")


@blueprint.get("/_redirects")
def redirect_table():
    """Expose the flattened redirect table in host ``_redirects`` format."""

    return Response(get_site_state().plan.redirects.render(), mimetype="text/plain")


@blueprint.get("/", defaults={"subpath": ""})
@blueprint.get("/<path:subpath>")
def resolve_path(subpath: str):
    """Redirect or describe the page published at ``subpath``."""

    state = get_site_state()
    path = "/" + subpath

    rule = state.plan.redirects.lookup(path)
    if rule is not None:
        return redirect(rule.target, code=rule.status)

    render = _find_render(path)
    if render is None:
        abort(404)

    site = state.config.site
    payload = {
        "page": render.page.path,
        "localized": render.page.localized,
        "locale": render.locale,
        "url_locale": locale_from_url(request.path, state.config.i18n),
        "path": render.path,
        "title": render.translate("meta.title"),
        "description": render.translate("meta.description"),
        "alternates": [
            {"hreflang": link.hreflang, "href": link.href} for link in render.alternates
        ],
        "head": alternate_link_tags(state.policy, render.page, site),
    }
    return jsonify(payload), 200
