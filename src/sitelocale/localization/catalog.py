"""Translation dictionaries backed by per-locale JSON or YAML resources."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Union

import yaml

from sitelocale.config.schema import LocaleRegistry
from sitelocale.errors import TranslationLoadError

_LOGGER = logging.getLogger(__name__)

_TRANSLATIONS_PACKAGE = "sitelocale.translations"
_SUFFIXES = (".json", ".yaml", ".yml")

TranslationNode = Union[str, Mapping[str, "TranslationNode"]]


@dataclass(frozen=True)
class Found:
    """Successful lookup of a leaf string."""

    value: str


@dataclass(frozen=True)
class NotFound:
    """Lookup that did not end on a leaf string."""

    key: str


LookupResult = Union[Found, NotFound]


@dataclass(frozen=True)
class TranslationBundle:
    """Read-only dictionaries for every registered locale.

    Built once at the start of a build and shared by reference afterwards.
    Every internal node is a :class:`types.MappingProxyType`, so consumers
    cannot mutate the dictionaries they are handed.
    """

    default_locale: str
    dictionaries: Mapping[str, Mapping[str, TranslationNode]]

    @property
    def locales(self) -> tuple[str, ...]:
        return tuple(self.dictionaries)

    def __contains__(self, locale: object) -> bool:
        return locale in self.dictionaries

    def dictionary(self, locale: str) -> Mapping[str, TranslationNode]:
        """Return the dictionary for ``locale`` or the default dictionary."""

        if locale in self.dictionaries:
            return self.dictionaries[locale]
        return self.dictionaries[self.default_locale]


def lookup(tree: Mapping[str, TranslationNode], key: str) -> LookupResult:
    """Walk the dot-separated ``key`` into ``tree``.

    Walking stops at the first segment that is absent; a key that ends on an
    internal node is not a match.
    """

    node: Any = tree
    for segment in key.split("."):
        if not isinstance(node, Mapping) or segment not in node:
            return NotFound(key)
        node = node[segment]
    if isinstance(node, str):
        return Found(node)
    return NotFound(key)


@dataclass(frozen=True)
class Translator:
    """Callable helper resolving keys for one locale with default fallback."""

    locale: str
    _messages: Mapping[str, TranslationNode]
    _fallback: Mapping[str, TranslationNode]

    def resolve(self, key: str) -> LookupResult:
        result = lookup(self._messages, key)
        if isinstance(result, Found) or self._fallback is self._messages:
            return result

        result = lookup(self._fallback, key)
        if isinstance(result, Found):
            _LOGGER.debug("Key '%s' missing for locale '%s'; using default locale", key, self.locale)
        return result

    def __call__(self, key: str) -> str:
        result = self.resolve(key)
        if isinstance(result, Found):
            return result.value
        _LOGGER.warning("Missing translation '%s' for locale '%s'; rendering key", key, self.locale)
        return key


def make_translator(bundle: TranslationBundle, locale: str) -> Translator:
    """Return a translator for ``locale``, falling back to the default locale."""

    effective = locale if locale in bundle else bundle.default_locale
    messages = bundle.dictionary(effective)
    fallback = bundle.dictionary(bundle.default_locale)
    return Translator(locale=effective, _messages=messages, _fallback=fallback)


def _freeze(node: Any, locale: str, path: str = "") -> TranslationNode:
    if isinstance(node, str):
        return node
    if isinstance(node, Mapping):
        frozen: dict[str, TranslationNode] = {}
        for key, value in node.items():
            if not isinstance(key, str) or not key or "." in key:
                raise TranslationLoadError(locale, f"Invalid key {key!r} under '{path or '<root>'}'")
            child_path = f"{path}.{key}" if path else key
            frozen[key] = _freeze(value, locale, child_path)
        return MappingProxyType(frozen)
    raise TranslationLoadError(
        locale,
        f"Value at '{path or '<root>'}' must be a string or a mapping, got {type(node).__name__}",
    )


def thaw(node: TranslationNode) -> Any:
    """Return a plain ``dict`` copy of a frozen dictionary for serialisation."""

    if isinstance(node, Mapping):
        return {key: thaw(value) for key, value in node.items()}
    return node


def _translation_root(directory: str | Path | None) -> Traversable:
    if directory is not None:
        return Path(directory)
    return resources.files(_TRANSLATIONS_PACKAGE)


def _find_document(root: Traversable, locale: str) -> Traversable | None:
    for suffix in _SUFFIXES:
        candidate = root.joinpath(f"{locale}{suffix}")
        if candidate.is_file():
            return candidate
    return None


def _unique_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise ValueError(f"duplicate key '{key}'")
        result[key] = value
    return result


def _parse_document(document: Traversable, locale: str) -> Any:
    try:
        text = document.read_text(encoding="utf-8")
        if document.name.endswith(".json"):
            return json.loads(text, object_pairs_hook=_unique_keys)
        return yaml.safe_load(text)
    except (OSError, ValueError, yaml.YAMLError) as error:
        raise TranslationLoadError(locale, f"Malformed dictionary {document.name}: {error}") from error


def load_dictionary(locale: str, directory: str | Path | None = None) -> Mapping[str, TranslationNode]:
    """Load and freeze the dictionary document for a single locale."""

    root = _translation_root(directory)
    document = _find_document(root, locale)
    if document is None:
        raise TranslationLoadError(locale, "No dictionary file found for registered locale")

    payload = _parse_document(document, locale)
    if not isinstance(payload, Mapping):
        raise TranslationLoadError(locale, f"{document.name} must define a mapping at the top level")

    return _freeze(payload, locale)  # type: ignore[return-value]


def load_bundle(
    registry: LocaleRegistry,
    directory: str | Path | None = None,
) -> TranslationBundle:
    """Load every registered locale's dictionary into an immutable bundle."""

    dictionaries: dict[str, Mapping[str, TranslationNode]] = {}
    for locale in registry.locales:
        dictionaries[locale] = load_dictionary(locale, directory)
        _LOGGER.debug("Loaded dictionary for locale '%s'", locale)

    return TranslationBundle(
        default_locale=registry.default_locale,
        dictionaries=MappingProxyType(dictionaries),
    )


def bundle_from_mappings(
    default_locale: str,
    dictionaries: Mapping[str, Mapping[str, Any]],
) -> TranslationBundle:
    """Build a bundle from already-parsed dictionaries (no I/O)."""

    if default_locale not in dictionaries:
        raise TranslationLoadError(default_locale, "Default locale has no dictionary")
    frozen = {locale: _freeze(tree, locale) for locale, tree in dictionaries.items()}
    return TranslationBundle(
        default_locale=default_locale,
        dictionaries=MappingProxyType(frozen),  # type: ignore[arg-type]
    )


def load_translations(bundle: TranslationBundle, locale: str | None = None) -> dict[str, Any]:
    """Expose a locale's dictionary and its fallback for API consumers."""

    translator = make_translator(bundle, locale or bundle.default_locale)
    return {
        "locale": translator.locale,
        "available_locales": list(bundle.locales),
        "messages": thaw(bundle.dictionary(translator.locale)),
        "fallback": {
            "locale": bundle.default_locale,
            "messages": thaw(bundle.dictionary(bundle.default_locale)),
        },
    }


__all__ = [
    "Found",
    "LookupResult",
    "NotFound",
    "TranslationBundle",
    "TranslationNode",
    "Translator",
    "bundle_from_mappings",
    "load_bundle",
    "load_dictionary",
    "load_translations",
    "lookup",
    "make_translator",
    "thaw",
]
