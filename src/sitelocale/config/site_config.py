"""Configuration loader wrapping the shared schema models."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .schema import (
    ConfigurationError,
    I18nConfig,
    LegacyRedirect,
    LocaleRegistry,
    LogicalPage,
    RoutePolicyConfig,
    RoutingFlags,
    SiteConfiguration,
    normalise_path,
)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
SITE_CONFIG_FILE = CONFIG_DIRECTORY / "site.yaml"
CONFIG_ENV_VAR = "SITELOCALE_CONFIG"


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as error:
            raise ConfigurationError(f"Unable to parse {path.name}: {error}") from error
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Return the site configuration path, honouring ``SITELOCALE_CONFIG``."""

    if path is not None:
        return Path(path)
    override = os.getenv(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return SITE_CONFIG_FILE


@lru_cache(maxsize=8)
def load_site_configuration(path: str | Path | None = None) -> SiteConfiguration:
    """Load and cache the site configuration from disk."""

    config_file = resolve_config_path(path)
    if not config_file.exists():
        raise FileNotFoundError(f"Site configuration not found: {config_file}")

    raw_config = _load_yaml(config_file)

    try:
        return SiteConfiguration.model_validate(raw_config)
    except ValidationError as error:
        raise ConfigurationError(
            f"Site configuration validation failed for {config_file.name}: {error}"
        ) from error


__all__ = [
    "CONFIG_DIRECTORY",
    "CONFIG_ENV_VAR",
    "ConfigurationError",
    "I18nConfig",
    "LegacyRedirect",
    "LocaleRegistry",
    "LogicalPage",
    "RoutePolicyConfig",
    "RoutingFlags",
    "SITE_CONFIG_FILE",
    "SiteConfiguration",
    "load_site_configuration",
    "normalise_path",
    "resolve_config_path",
]
