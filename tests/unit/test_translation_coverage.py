"""Unit coverage for dictionary completeness reporting."""

from __future__ import annotations

import json
from pathlib import Path

from sitelocale.localization import bundle_from_mappings
from sitelocale.localization.coverage import (
    coverage_metadata,
    coverage_ratio,
    flatten,
    main,
    missing_keys,
    unexpected_keys,
)


def _drift_bundle():
    return bundle_from_mappings(
        "en",
        {
            "en": {"nav": {"home": "Home", "docs": "Docs"}, "footer": "Footer"},
            "fr": {"nav": {"home": "Accueil"}, "footer": {"rights": "Droits"}},
            "de": {"nav": {"home": "Start", "docs": "Doku"}, "footer": "Fuss"},
        },
    )


def test_flatten_produces_dotted_keys() -> None:
    assert flatten({"a": {"b": "x", "c": {"d": "y"}}, "e": "z"}) == {
        "a.b": "x",
        "a.c.d": "y",
        "e": "z",
    }


def test_missing_and_unexpected_keys() -> None:
    bundle = _drift_bundle()

    assert missing_keys(bundle) == {"fr": ("footer", "nav.docs")}
    assert unexpected_keys(bundle) == {"fr": ("footer.rights",)}


def test_coverage_ratio() -> None:
    ratios = coverage_ratio(_drift_bundle())

    assert ratios["en"] == 1.0
    assert ratios["de"] == 1.0
    assert ratios["fr"] == 1 / 3


def test_packaged_dictionaries_are_complete(bundle) -> None:
    assert missing_keys(bundle) == {}
    assert unexpected_keys(bundle) == {}
    assert coverage_metadata(bundle)["base_locale"] == "en"


def test_cli_writes_metadata_snapshot(tmp_path: Path, capsys) -> None:
    metadata_path = tmp_path / "out" / "metadata.json"

    exit_code = main(["--metadata", str(metadata_path)])

    assert exit_code == 0
    metadata = json.loads(metadata_path.read_text(encoding="utf-8"))
    assert metadata["locales"] == ["en", "fr", "de", "es"]
    assert "home.hero.title" in metadata["keys"]
    assert "[fr] 100.0%" in capsys.readouterr().out


def test_cli_fails_on_missing_keys_when_requested(tmp_path: Path, capsys) -> None:
    translations = Path(__file__).resolve().parents[2] / "src" / "sitelocale" / "translations"
    for locale in ("en", "de", "es"):
        (tmp_path / f"{locale}.json").write_text(
            (translations / f"{locale}.json").read_text(encoding="utf-8"), encoding="utf-8"
        )
    (tmp_path / "fr.json").write_text(json.dumps({"nav": {"home": "Accueil"}}), encoding="utf-8")

    assert main(["--translations", str(tmp_path)]) == 0
    assert main(["--translations", str(tmp_path), "--fail-on-missing"]) == 1
    assert "missing nav.pricing" in capsys.readouterr().out
