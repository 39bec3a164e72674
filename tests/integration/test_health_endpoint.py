"""Integration coverage for the health endpoint."""

from flask.testing import FlaskClient

from sitelocale.version import get_project_version


def test_health_endpoint_returns_ok(client: FlaskClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["status"] == "ok"
    assert payload["version"] == get_project_version()
    assert payload["locales"] == ["en", "fr", "de", "es"]
    assert payload["default_locale"] == "en"
