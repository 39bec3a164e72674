"""Integration tests for the translations API."""

from __future__ import annotations

import json
from pathlib import Path

from flask.testing import FlaskClient

TRANSLATIONS_ROOT = Path(__file__).resolve().parents[2] / "src" / "sitelocale" / "translations"


def _load_value(locale: str, *key_parts: str) -> str:
    cursor = json.loads(TRANSLATIONS_ROOT.joinpath(f"{locale}.json").read_text(encoding="utf-8"))
    for part in key_parts:
        if not isinstance(cursor, dict) or part not in cursor:
            raise AssertionError(f"Missing key for locale {locale}: {'.'.join(key_parts)}")
        cursor = cursor[part]
    return str(cursor)


def test_translations_endpoint_returns_default_dictionary(client: FlaskClient) -> None:
    response = client.get("/api/v1/translations/")
    assert response.status_code == 200
    payload = response.get_json()

    assert payload["locale"] == "en"
    assert payload["default_locale"] == "en"
    assert payload["available_locales"] == ["en", "fr", "de", "es"]
    assert payload["display_names"]["de"] == "Deutsch"
    assert payload["messages"]["home"]["hero"]["title"] == _load_value("en", "home", "hero", "title")
    assert payload["fallback"]["locale"] == "en"


def test_translations_endpoint_respects_locale_path(client: FlaskClient) -> None:
    response = client.get("/api/v1/translations/fr")
    assert response.status_code == 200
    payload = response.get_json()

    assert payload["locale"] == "fr"
    assert payload["messages"]["home"]["hero"]["title"] == _load_value("fr", "home", "hero", "title")
    assert payload["fallback"]["messages"]["nav"]["home"] == _load_value("en", "nav", "home")


def test_translations_endpoint_accepts_query_hint(client: FlaskClient) -> None:
    payload = client.get("/api/v1/translations/?locale=es").get_json()

    assert payload["locale"] == "es"


def test_unknown_locale_falls_back_without_error(client: FlaskClient) -> None:
    response = client.get("/api/v1/translations/xx")

    assert response.status_code == 200
    assert response.get_json()["locale"] == "en"
