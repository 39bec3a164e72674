"""Plan a site build: page renders, redirect table and sitemap."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from sitelocale.config.site_config import ConfigurationError, LogicalPage, SiteConfiguration, load_site_configuration
from sitelocale.config.validator import validate_site
from sitelocale.errors import BuildError
from sitelocale.localization.catalog import TranslationBundle, Translator, load_bundle, make_translator
from sitelocale.routing import (
    AlternateLink,
    RedirectTable,
    RoutingPolicy,
    SitemapEntry,
    build_redirect_table,
    build_sitemap,
    render_sitemap,
    verify_sitemap,
)

_LOGGER = logging.getLogger(__name__)

SITEMAP_FILENAME = "sitemap.xml"
REDIRECTS_FILENAME = "_redirects"
REDIRECTS_JSON_FILENAME = "redirects.json"


@dataclass(frozen=True)
class PageRender:
    """Everything the page pipeline needs to render one (page, locale) pair."""

    page: LogicalPage
    locale: str
    path: str
    translate: Translator
    alternates: tuple[AlternateLink, ...]


@dataclass(frozen=True)
class BuildPlan:
    renders: tuple[PageRender, ...]
    redirects: RedirectTable
    sitemap: tuple[SitemapEntry, ...]

    def render_sitemap(self) -> str:
        return render_sitemap(self.sitemap)


def plan_build(
    config: SiteConfiguration,
    bundle: TranslationBundle,
    pages: Iterable[LogicalPage] | None = None,
) -> BuildPlan:
    """Resolve every output URL, redirect and sitemap entry for ``pages``.

    ``pages`` defaults to the pages declared in the site configuration. The
    bundle is only read; every render shares it.
    """

    page_list = tuple(config.pages if pages is None else pages)
    policy = RoutingPolicy(config.route_policy)

    renders: list[PageRender] = []
    for page in page_list:
        alternates = policy.alternates(page)
        for url in policy.page_urls(page):
            locale = url.locale or config.i18n.default_locale
            renders.append(
                PageRender(
                    page=page,
                    locale=locale,
                    path=url.path,
                    translate=make_translator(bundle, locale),
                    alternates=alternates,
                )
            )

    redirects = build_redirect_table(policy, page_list)
    sitemap = build_sitemap(policy, page_list, config.site)
    verify_sitemap(sitemap, policy, config.site)

    _LOGGER.info(
        "Planned %d render(s), %d redirect(s), %d sitemap entries",
        len(renders),
        len(redirects),
        len(sitemap),
    )
    return BuildPlan(renders=tuple(renders), redirects=redirects, sitemap=sitemap)


def write_artifacts(plan: BuildPlan, output_dir: str | Path) -> list[Path]:
    """Write the sitemap and redirect table into ``output_dir``."""

    target = Path(output_dir)
    target.mkdir(parents=True, exist_ok=True)

    outputs = {
        SITEMAP_FILENAME: plan.render_sitemap(),
        REDIRECTS_FILENAME: plan.redirects.render(),
        REDIRECTS_JSON_FILENAME: plan.redirects.to_json(),
    }
    written: list[Path] = []
    for filename, content in outputs.items():
        path = target / filename
        path.write_text(content, encoding="utf-8")
        written.append(path)
    return written


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Emit the sitemap and redirect table for the configured site."
    )
    parser.add_argument("--config", type=Path, default=None, help="Site configuration file")
    parser.add_argument("--translations", type=Path, default=None, help="Dictionary directory")
    parser.add_argument("--output", type=Path, default=Path("dist"), help="Output directory")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when a locale is missing keys from the default dictionary",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log build progress")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_site_configuration(args.config)
        bundle = load_bundle(config.i18n, args.translations)
    except (FileNotFoundError, ConfigurationError, BuildError) as error:
        print(f"[load] {error}")
        return 1

    report = validate_site(config, bundle, strict=args.strict)
    for warning in report.warnings:
        print(f"[warning] {warning}")
    if not report.ok:
        for error in report.errors:
            print(f"[error] {error}")
        return 1

    try:
        plan = plan_build(config, bundle)
    except BuildError as error:
        print(f"[build] {error}")
        return 1

    for path in write_artifacts(plan, args.output):
        print(f"[write] {path}")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
