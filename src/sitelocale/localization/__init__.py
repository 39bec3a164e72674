"""Translation store, translator and URL locale inference."""

from .catalog import (
    Found,
    NotFound,
    TranslationBundle,
    Translator,
    bundle_from_mappings,
    load_bundle,
    load_translations,
    lookup,
    make_translator,
)
from .urls import locale_from_url

__all__ = [
    "Found",
    "NotFound",
    "TranslationBundle",
    "Translator",
    "bundle_from_mappings",
    "load_bundle",
    "load_translations",
    "locale_from_url",
    "lookup",
    "make_translator",
]
