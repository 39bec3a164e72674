"""Utilities for validating site configuration and dictionaries before a build."""

from __future__ import annotations

import argparse
import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from sitelocale.errors import BuildError, RedirectConflictError, SitemapConsistencyError
from sitelocale.localization.catalog import TranslationBundle, load_bundle
from sitelocale.localization.coverage import missing_keys, unexpected_keys
from sitelocale.routing import RoutingPolicy, build_redirect_table, build_sitemap, verify_sitemap

from .site_config import ConfigurationError, SiteConfiguration, load_site_configuration


@dataclass
class ValidationReport:
    """Errors stop a build; warnings are surfaced but tolerated."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_registry(config: SiteConfiguration) -> list[str]:
    errors: list[str] = []
    i18n = config.i18n

    missing_names = [code for code in i18n.locales if code not in i18n.display_names]
    if missing_names:
        errors.append(
            _format_scope(
                "i18n.display_names",
                f"no display name for locale(s): {', '.join(missing_names)}",
            )
        )

    hreflang_values = [i18n.hreflang_for(code) for code in i18n.locales]
    duplicates = sorted(value for value, count in Counter(hreflang_values).items() if count > 1)
    if duplicates:
        errors.append(
            _format_scope("i18n.hreflang", f"duplicate hreflang values: {', '.join(duplicates)}")
        )

    if i18n.routing.redirect_to_default_locale and not i18n.routing.prefix_default_locale:
        errors.append(
            _format_scope(
                "i18n.routing",
                "redirectToDefaultLocale has no effect unless prefixDefaultLocale is enabled",
            )
        )

    return errors


def _validate_dictionaries(bundle: TranslationBundle, strict: bool) -> tuple[list[str], list[str]]:
    errors: list[str] = []
    warnings: list[str] = []

    for locale, keys in unexpected_keys(bundle).items():
        errors.append(
            _format_scope(
                f"translations.{locale}",
                f"{len(keys)} key(s) absent from the default locale: {', '.join(keys)}",
            )
        )

    for locale, keys in missing_keys(bundle).items():
        message = _format_scope(
            f"translations.{locale}",
            f"missing {len(keys)} key(s), default locale text will be shown: {', '.join(keys)}",
        )
        (errors if strict else warnings).append(message)

    return errors, warnings


def validate_site(
    config: SiteConfiguration,
    bundle: TranslationBundle,
    *,
    strict: bool = False,
) -> ValidationReport:
    """Return every issue found in ``config`` and ``bundle``.

    With ``strict`` set, locales that fall back to the default locale for some
    keys are reported as errors instead of warnings.
    """

    report = ValidationReport()
    report.errors.extend(_validate_registry(config))

    if set(bundle.locales) != set(config.i18n.locales):
        report.errors.append(
            _format_scope(
                "translations",
                f"bundle locales {sorted(bundle.locales)} differ from registry {sorted(config.i18n.locales)}",
            )
        )
    else:
        errors, warnings = _validate_dictionaries(bundle, strict)
        report.errors.extend(errors)
        report.warnings.extend(warnings)

    policy = RoutingPolicy(config.route_policy)
    try:
        table = build_redirect_table(policy, config.pages)
    except RedirectConflictError as error:
        report.errors.append(_format_scope("redirects", str(error)))
    else:
        report.warnings.extend(_format_scope("redirects", warning) for warning in table.warnings)

    try:
        verify_sitemap(build_sitemap(policy, config.pages, config.site), policy, config.site)
    except SitemapConsistencyError as error:
        report.errors.append(_format_scope("sitemap", str(error)))

    return report


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate the site configuration and translation dictionaries."
    )
    parser.add_argument("--config", type=Path, default=None, help="Site configuration file")
    parser.add_argument(
        "--translations",
        type=Path,
        default=None,
        help="Directory holding <locale>.json dictionaries (defaults to the packaged set)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat keys missing from a locale as errors",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.ERROR, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_site_configuration(args.config)
        bundle = load_bundle(config.i18n, args.translations)
    except (FileNotFoundError, ConfigurationError, BuildError) as error:
        print(f"[load] {error}")
        return 1

    report = validate_site(config, bundle, strict=args.strict)

    for warning in report.warnings:
        print(f"[warning] {warning}")
    for error in report.errors:
        print(f"[error] {error}")

    if report.ok:
        print(f"[ok] {len(config.pages)} page(s), {len(config.i18n.locales)} locale(s)")
        return 0
    return 1


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
