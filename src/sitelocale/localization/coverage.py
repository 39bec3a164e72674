"""Completeness checks comparing each locale's dictionary to the default tree."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Mapping, Sequence

from sitelocale.config.site_config import load_site_configuration

from .catalog import TranslationBundle, TranslationNode, load_bundle


def flatten(tree: Mapping[str, TranslationNode], prefix: str = "") -> dict[str, str]:
    """Return ``{dotted.key: leaf}`` for every leaf string in ``tree``."""

    items: dict[str, str] = {}
    for key, value in tree.items():
        path = f"{prefix}.{key}" if prefix else key
        if isinstance(value, Mapping):
            items.update(flatten(value, path))
        else:
            items[path] = value
    return items


def _flat_catalogues(bundle: TranslationBundle) -> dict[str, dict[str, Any]]:
    return {locale: flatten(bundle.dictionaries[locale]) for locale in bundle.locales}


def missing_keys(bundle: TranslationBundle) -> dict[str, tuple[str, ...]]:
    """Keys present in the default tree but absent from a locale, per locale."""

    catalogues = _flat_catalogues(bundle)
    expected = set(catalogues[bundle.default_locale])
    issues: dict[str, tuple[str, ...]] = {}
    for locale, catalogue in catalogues.items():
        missing = expected - set(catalogue)
        if missing:
            issues[locale] = tuple(sorted(missing))
    return issues


def unexpected_keys(bundle: TranslationBundle) -> dict[str, tuple[str, ...]]:
    """Keys a locale defines that the default tree does not.

    A key that is a leaf in one tree and an internal node in the other shows
    up here as well, since the flattened paths differ.
    """

    catalogues = _flat_catalogues(bundle)
    expected = set(catalogues[bundle.default_locale])
    issues: dict[str, tuple[str, ...]] = {}
    for locale, catalogue in catalogues.items():
        extra = set(catalogue) - expected
        if extra:
            issues[locale] = tuple(sorted(extra))
    return issues


def coverage_ratio(bundle: TranslationBundle) -> dict[str, float]:
    """Share of the default tree's keys that each locale translates itself."""

    catalogues = _flat_catalogues(bundle)
    expected = set(catalogues[bundle.default_locale])
    if not expected:
        return {locale: 1.0 for locale in catalogues}
    return {
        locale: len(expected & set(catalogue)) / len(expected)
        for locale, catalogue in catalogues.items()
    }


def coverage_metadata(bundle: TranslationBundle) -> dict[str, Any]:
    """Snapshot of the canonical key set and per-locale coverage."""

    ratios = coverage_ratio(bundle)
    missing = missing_keys(bundle)
    return {
        "locales": list(bundle.locales),
        "base_locale": bundle.default_locale,
        "keys": sorted(flatten(bundle.dictionaries[bundle.default_locale])),
        "coverage": {locale: round(ratios[locale], 4) for locale in bundle.locales},
        "missing": {locale: list(keys) for locale, keys in sorted(missing.items())},
    }


def main(argv: Sequence[str] | None = None) -> int:
    """Print per-locale translation coverage and optionally write a snapshot."""

    parser = argparse.ArgumentParser(description="Report translation coverage per locale.")
    parser.add_argument("--config", type=Path, default=None, help="Site configuration file")
    parser.add_argument("--translations", type=Path, default=None, help="Dictionary directory")
    parser.add_argument("--metadata", type=Path, default=None, help="Write a JSON snapshot here")
    parser.add_argument(
        "--fail-on-missing",
        action="store_true",
        help="Exit with an error if any locale is missing keys",
    )
    args = parser.parse_args(argv)

    config = load_site_configuration(args.config)
    bundle = load_bundle(config.i18n, args.translations)
    metadata = coverage_metadata(bundle)

    for locale in bundle.locales:
        print(f"[{locale}] {metadata['coverage'][locale]:.1%}")
        for key in metadata["missing"].get(locale, []):
            print(f"  - missing {key}")

    extra = unexpected_keys(bundle)
    for locale, keys in sorted(extra.items()):
        for key in keys:
            print(f"[{locale}] unexpected {key}")

    if args.metadata is not None:
        args.metadata.parent.mkdir(parents=True, exist_ok=True)
        args.metadata.write_text(
            json.dumps(metadata, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
            encoding="utf-8",
        )

    if extra or (metadata["missing"] and args.fail_on_missing):
        return 1
    return 0


__all__ = [
    "coverage_metadata",
    "coverage_ratio",
    "flatten",
    "main",
    "missing_keys",
    "unexpected_keys",
]
