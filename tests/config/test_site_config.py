"""Unit coverage for site configuration discovery and parsing."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from sitelocale.config import site_config
from sitelocale.config.schema import LegacyRedirect, LocaleRegistry, RoutePolicyConfig, SiteConfiguration


@pytest.fixture()
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Copy the reference configuration and point ``SITELOCALE_CONFIG`` at it."""

    path = tmp_path / "site.yaml"
    path.write_text(site_config.SITE_CONFIG_FILE.read_text(encoding="utf-8"), encoding="utf-8")
    monkeypatch.setenv(site_config.CONFIG_ENV_VAR, str(path))
    site_config.load_site_configuration.cache_clear()

    yield path

    site_config.load_site_configuration.cache_clear()


def _rewrite(path: Path, **changes) -> None:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    data.update(changes)
    path.write_text(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), encoding="utf-8")
    site_config.load_site_configuration.cache_clear()


def test_reference_configuration(site_config: SiteConfiguration) -> None:
    assert site_config.i18n.locales == ("en", "fr", "de", "es")
    assert site_config.i18n.default_locale == "en"
    assert site_config.i18n.display_name("es") == "Español"

    policy = site_config.route_policy
    assert policy.prefix_default_locale is True
    assert policy.redirect_to_default_locale is True
    assert [(r.source, r.target) for r in policy.legacy_redirects] == [
        ("/fr/trademarks", "/trademarks"),
        ("/de/trademarks", "/trademarks"),
        ("/es/trademarks", "/trademarks"),
    ]


def test_environment_variable_selects_configuration(isolated_config: Path) -> None:
    _rewrite(isolated_config, site="https://docs.example.org")

    assert site_config.load_site_configuration().site == "https://docs.example.org"


def test_unregistered_default_locale_is_rejected(isolated_config: Path) -> None:
    data = yaml.safe_load(isolated_config.read_text(encoding="utf-8"))
    data["i18n"]["defaultLocale"] = "it"
    _rewrite(isolated_config, **data)

    with pytest.raises(site_config.ConfigurationError, match="Default locale 'it'"):
        site_config.load_site_configuration()


def test_page_starting_with_locale_code_is_rejected(isolated_config: Path) -> None:
    _rewrite(isolated_config, pages=["pricing", "fr/pricing"])

    with pytest.raises(site_config.ConfigurationError, match="must not start with a locale code"):
        site_config.load_site_configuration()


def test_duplicate_pages_are_rejected(isolated_config: Path) -> None:
    _rewrite(isolated_config, pages=["pricing", "/pricing/"])

    with pytest.raises(site_config.ConfigurationError, match="Duplicate logical page"):
        site_config.load_site_configuration()


def test_malformed_yaml_is_reported(isolated_config: Path) -> None:
    isolated_config.write_text("site: [unterminated\n", encoding="utf-8")

    with pytest.raises(site_config.ConfigurationError, match="Unable to parse"):
        site_config.load_site_configuration()


def test_missing_configuration_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        site_config.load_site_configuration(tmp_path / "absent.yaml")


def test_registry_rejects_duplicates_and_unknown_names() -> None:
    with pytest.raises(ValidationError, match="Duplicate locale"):
        LocaleRegistry(locales=("en", "en"), default_locale="en")
    with pytest.raises(ValidationError, match="unregistered"):
        LocaleRegistry(locales=("en",), default_locale="en", display_names={"fr": "Français"})


def test_route_policy_accepts_camel_case_names() -> None:
    config = RoutePolicyConfig.model_validate(
        {
            "defaultLocale": "en",
            "locales": ["en", "fr"],
            "prefixDefaultLocale": False,
            "redirectToDefaultLocale": False,
            "legacyRedirects": {"/old": "/fr/new"},
        }
    )

    assert config.locales == ("en", "fr")
    assert config.prefix_default_locale is False
    assert config.legacy_redirects == (LegacyRedirect(source="/old", target="/fr/new"),)


def test_route_policy_is_immutable(policy_config: RoutePolicyConfig) -> None:
    with pytest.raises(ValidationError):
        policy_config.default_locale = "fr"  # type: ignore[misc]


def test_legacy_redirect_validation() -> None:
    with pytest.raises(ValidationError, match="absolute path or URL"):
        LegacyRedirect(source="/old", target="relative")
    with pytest.raises(ValidationError, match="not a redirect code"):
        LegacyRedirect(source="/old", target="/new", status=200)
    assert LegacyRedirect(source="old/", target="/new").source == "/old"
