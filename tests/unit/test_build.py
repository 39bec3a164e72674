"""Unit coverage for build planning and artifact output."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from sitelocale.build import main, plan_build, write_artifacts
from sitelocale.config.schema import LogicalPage
from sitelocale.errors import RedirectConflictError


def test_plan_covers_every_page_and_locale(site_config, bundle) -> None:
    plan = plan_build(site_config, bundle)

    localized = [page for page in site_config.pages if page.localized]
    neutral = [page for page in site_config.pages if not page.localized]
    assert len(plan.renders) == len(localized) * 4 + len(neutral)
    assert len(plan.sitemap) == len(plan.renders)


def test_renders_carry_locale_translator(site_config, bundle) -> None:
    plan = plan_build(site_config, bundle)

    fr_pricing = next(r for r in plan.renders if r.path == "/fr/pricing")
    assert fr_pricing.locale == "fr"
    assert fr_pricing.translate("nav.pricing") == "Tarifs"
    assert len(fr_pricing.alternates) == 5

    trademarks = next(r for r in plan.renders if r.page.path == "trademarks")
    assert trademarks.path == "/trademarks"
    assert trademarks.locale == "en"
    assert trademarks.alternates == ()


def test_reference_redirect_table(site_config, bundle) -> None:
    plan = plan_build(site_config, bundle)

    assert plan.redirects.lookup("/").target == "/en/"
    assert plan.redirects.lookup("/pricing").target == "/en/pricing"
    assert plan.redirects.lookup("/de/trademarks").target == "/trademarks"
    assert plan.redirects.lookup("/trademarks") is None
    assert plan.redirects.warnings == ()


def test_plan_accepts_explicit_pages(site_config, bundle) -> None:
    plan = plan_build(site_config, bundle, [LogicalPage(path="changelog")])

    assert [r.path for r in plan.renders] == ["/en/changelog", "/fr/changelog", "/de/changelog", "/es/changelog"]


def test_plan_fails_on_redirect_conflict(site_config, bundle) -> None:
    pages = [LogicalPage(path="pricing"), LogicalPage(path="pricing", localized=False)]

    with pytest.raises(RedirectConflictError):
        plan_build(site_config, bundle, pages)


def test_write_artifacts_is_byte_identical_across_runs(site_config, bundle, tmp_path: Path) -> None:
    first = write_artifacts(plan_build(site_config, bundle), tmp_path / "one")
    second = write_artifacts(plan_build(site_config, bundle), tmp_path / "two")

    assert [path.name for path in first] == ["sitemap.xml", "_redirects", "redirects.json"]
    for left, right in zip(first, second):
        assert left.read_bytes() == right.read_bytes()

    redirects = json.loads((tmp_path / "one" / "redirects.json").read_text(encoding="utf-8"))
    assert {"source": "/fr/trademarks", "target": "/trademarks", "status": 301} in redirects


def test_cli_writes_artifacts(tmp_path: Path, capsys) -> None:
    exit_code = main(["--output", str(tmp_path)])

    assert exit_code == 0
    assert (tmp_path / "sitemap.xml").is_file()
    assert "/es/trademarks /trademarks 301" in (tmp_path / "_redirects").read_text(encoding="utf-8")


def test_cli_reports_missing_dictionary(tmp_path: Path, capsys) -> None:
    (tmp_path / "en.json").write_text("{}", encoding="utf-8")

    exit_code = main(["--translations", str(tmp_path), "--output", str(tmp_path / "dist")])

    assert exit_code == 1
    assert "[load] [fr]" in capsys.readouterr().out
    assert not (tmp_path / "dist").exists()


def test_cli_reports_undecodable_dictionary(tmp_path: Path, capsys) -> None:
    (tmp_path / "en.json").write_bytes(b'{"nav": "\xff\xfe"}')

    exit_code = main(["--translations", str(tmp_path), "--output", str(tmp_path / "dist")])

    assert exit_code == 1
    assert "[load] [en] Malformed dictionary en.json" in capsys.readouterr().out
