"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from sitelocale.app import create_app  # noqa: E402
from sitelocale.config.schema import LogicalPage, RoutePolicyConfig  # noqa: E402
from sitelocale.config.site_config import SiteConfiguration, load_site_configuration  # noqa: E402
from sitelocale.localization.catalog import TranslationBundle, load_bundle  # noqa: E402
from sitelocale.routing import RoutingPolicy  # noqa: E402

TRANSLATIONS_DIR = SRC / "sitelocale" / "translations"
LOCALES = ("en", "fr", "de", "es")


@pytest.fixture()
def site_config() -> SiteConfiguration:
    """Return the packaged reference site configuration."""

    load_site_configuration.cache_clear()
    return load_site_configuration()


@pytest.fixture()
def bundle(site_config: SiteConfiguration) -> TranslationBundle:
    return load_bundle(site_config.i18n)


@pytest.fixture()
def policy_config() -> RoutePolicyConfig:
    """Four prefixed locales with the trademarks page moved out of ``/fr``."""

    return RoutePolicyConfig(
        default_locale="en",
        locales=LOCALES,
        prefix_default_locale=True,
        redirect_to_default_locale=True,
        legacy_redirects={"/fr/trademarks": "/trademarks"},
    )


@pytest.fixture()
def policy(policy_config: RoutePolicyConfig) -> RoutingPolicy:
    return RoutingPolicy(policy_config)


@pytest.fixture()
def pages() -> tuple[LogicalPage, ...]:
    return tuple(LogicalPage.model_validate(path) for path in ("", "pricing", "trademarks", "blog/launch"))


@pytest.fixture()
def app(site_config: SiteConfiguration, bundle: TranslationBundle) -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app(site_config, bundle)
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()
