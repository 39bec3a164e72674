"""Expose translation dictionaries to front-end consumers."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request

from sitelocale.app.state import get_site_state
from sitelocale.localization import load_translations

blueprint = Blueprint("translations", __name__, url_prefix="/api/v1/translations")


def _payload(locale: str | None) -> dict[str, Any]:
    state = get_site_state()
    payload = load_translations(state.bundle, locale)
    payload["default_locale"] = state.config.i18n.default_locale
    payload["display_names"] = {
        code: state.config.i18n.display_name(code) for code in state.config.i18n.locales
    }
    return payload


@blueprint.get("/")
def get_default_translations():
    """Return translations for the requested or default locale."""

    return jsonify(_payload(request.args.get("locale"))), 200


@blueprint.get("/<locale>")
def get_locale_translations(locale: str):
    """Return translations for a locale slug; unknown slugs get the default."""

    return jsonify(_payload(locale)), 200
