"""Pydantic models describing the site localisation and routing configuration."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def normalise_path(path: str) -> str:
    """Return ``path`` with a single leading slash and no trailing slash.

    The root path is returned as ``/``. Query strings and fragments are not
    expected here and are kept verbatim.
    """

    stripped = path.strip()
    if not stripped.startswith("/"):
        stripped = "/" + stripped
    while "//" in stripped:
        stripped = stripped.replace("//", "/")
    if len(stripped) > 1:
        stripped = stripped.rstrip("/") or "/"
    return stripped


def _is_external(target: str) -> bool:
    return target.startswith(("http://", "https://"))


class LocaleRegistry(ImmutableModel):
    """Closed, ordered set of supported locales with exactly one default."""

    locales: tuple[str, ...]
    default_locale: str = Field(alias="defaultLocale")
    display_names: Mapping[str, str] = Field(default_factory=dict, alias="displayNames")
    hreflang: Mapping[str, str] = Field(default_factory=dict)

    @field_validator("locales", mode="before")
    @classmethod
    def _coerce_locales(cls, value: Any) -> tuple[str, ...]:
        if isinstance(value, str) or not isinstance(value, Sequence):
            raise ConfigurationError("'locales' must be a list of locale codes")
        return tuple(str(entry) for entry in value)

    @model_validator(mode="after")
    def _validate_registry(self) -> LocaleRegistry:
        if not self.locales:
            raise ConfigurationError("At least one locale must be registered")
        seen: set[str] = set()
        for code in self.locales:
            if not code or "/" in code or code != code.strip():
                raise ConfigurationError(f"Invalid locale code {code!r}")
            if code in seen:
                raise ConfigurationError(f"Duplicate locale '{code}' declared")
            seen.add(code)
        if self.default_locale not in seen:
            raise ConfigurationError(
                f"Default locale '{self.default_locale}' is not a registered locale"
            )
        for label, mapping in (("display name", self.display_names), ("hreflang", self.hreflang)):
            unknown = sorted(set(mapping) - seen)
            if unknown:
                raise ConfigurationError(
                    f"{label} declared for unregistered locale(s): {', '.join(unknown)}"
                )
        return self

    def is_valid_locale(self, code: str) -> bool:
        """Return ``True`` when ``code`` is exactly one of the registered locales."""

        return code in self.locales

    def display_name(self, code: str) -> str:
        return self.display_names.get(code, code)

    def hreflang_for(self, code: str) -> str:
        return self.hreflang.get(code, code)


class LegacyRedirect(ImmutableModel):
    """A fixed, unconditional redirect from an old path to a new one."""

    source: str
    target: str = Field(alias="destination")
    status: int = 301

    @field_validator("source", mode="before")
    @classmethod
    def _normalise_source(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError("Redirect sources must be non-empty paths")
        return normalise_path(value)

    @model_validator(mode="after")
    def _validate_redirect(self) -> LegacyRedirect:
        if not self.target.startswith("/") and not _is_external(self.target):
            raise ConfigurationError(
                f"Redirect target for '{self.source}' must be an absolute path or URL"
            )
        if self.status not in REDIRECT_STATUSES:
            raise ConfigurationError(
                f"Redirect status {self.status} for '{self.source}' is not a redirect code"
            )
        return self

    @property
    def is_external(self) -> bool:
        return _is_external(self.target)


def _coerce_redirects(value: Any) -> Any:
    """Accept either a ``source -> target`` mapping or a list of entries."""

    if value is None:
        return ()
    if isinstance(value, Mapping):
        entries = []
        for source, target in value.items():
            if isinstance(target, Mapping):
                entries.append({"source": source, **target})
            else:
                entries.append({"source": source, "target": target})
        return tuple(entries)
    return value


class RoutePolicyConfig(ImmutableModel):
    """Declarative input consumed by the routing policy."""

    default_locale: str = Field(alias="defaultLocale")
    locales: tuple[str, ...]
    prefix_default_locale: bool = Field(default=True, alias="prefixDefaultLocale")
    redirect_to_default_locale: bool = Field(default=True, alias="redirectToDefaultLocale")
    legacy_redirects: tuple[LegacyRedirect, ...] = Field(default=(), alias="legacyRedirects")
    default_redirect_status: int = Field(default=302, alias="defaultRedirectStatus")
    trailing_slash: bool = Field(default=False, alias="trailingSlash")
    hreflang: Mapping[str, str] = Field(default_factory=dict)

    @field_validator("legacy_redirects", mode="before")
    @classmethod
    def _coerce_legacy(cls, value: Any) -> Any:
        return _coerce_redirects(value)

    @model_validator(mode="after")
    def _validate_policy(self) -> RoutePolicyConfig:
        if not self.locales:
            raise ConfigurationError("Routing policy requires at least one locale")
        if len(set(self.locales)) != len(self.locales):
            raise ConfigurationError("Routing policy locales must be unique")
        if self.default_locale not in self.locales:
            raise ConfigurationError(
                f"Default locale '{self.default_locale}' is not listed in 'locales'"
            )
        if self.default_redirect_status not in REDIRECT_STATUSES:
            raise ConfigurationError(
                f"Default-locale redirect status {self.default_redirect_status} is not a redirect code"
            )
        return self

    def hreflang_for(self, code: str) -> str:
        return self.hreflang.get(code, code)


class RoutingFlags(ImmutableModel):
    """Routing switches nested under ``i18n.routing`` in the site file."""

    prefix_default_locale: bool = Field(default=True, alias="prefixDefaultLocale")
    redirect_to_default_locale: bool = Field(default=True, alias="redirectToDefaultLocale")
    redirect_status: int = Field(default=302, alias="redirectStatus")


class I18nConfig(LocaleRegistry):
    """Locale registry plus the routing switches that apply to it."""

    routing: RoutingFlags = Field(default_factory=RoutingFlags)


class LogicalPage(ImmutableModel):
    """Locale-independent identity of a page, e.g. ``pricing`` or ``blog/<slug>``."""

    path: str
    localized: bool = True

    @model_validator(mode="before")
    @classmethod
    def _coerce_scalar(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"path": data}
        return data

    @field_validator("path", mode="before")
    @classmethod
    def _strip_slashes(cls, value: Any) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ConfigurationError("Page paths must be strings")
        return "/".join(segment for segment in value.strip().split("/") if segment)

    @property
    def first_segment(self) -> str:
        return self.path.split("/", 1)[0]


class SiteConfiguration(ImmutableModel):
    """Top-level document describing a multi-locale site deployment."""

    site: str
    trailing_slash: bool = Field(default=False, alias="trailingSlash")
    i18n: I18nConfig
    redirects: tuple[LegacyRedirect, ...] = ()
    pages: tuple[LogicalPage, ...] = ()

    @field_validator("redirects", mode="before")
    @classmethod
    def _coerce_site_redirects(cls, value: Any) -> Any:
        return _coerce_redirects(value)

    @model_validator(mode="after")
    def _validate_site(self) -> SiteConfiguration:
        if not _is_external(self.site):
            raise ConfigurationError(f"Site URL '{self.site}' must be absolute")

        seen: set[str] = set()
        for page in self.pages:
            if page.path in seen:
                raise ConfigurationError(f"Duplicate logical page '{page.path or '/'}'")
            seen.add(page.path)
            if self.i18n.is_valid_locale(page.first_segment):
                raise ConfigurationError(
                    f"Logical page '{page.path}' must not start with a locale code"
                )
        return self

    @property
    def route_policy(self) -> RoutePolicyConfig:
        routing = self.i18n.routing
        return RoutePolicyConfig(
            default_locale=self.i18n.default_locale,
            locales=self.i18n.locales,
            prefix_default_locale=routing.prefix_default_locale,
            redirect_to_default_locale=routing.redirect_to_default_locale,
            legacy_redirects=self.redirects,
            default_redirect_status=routing.redirect_status,
            trailing_slash=self.trailing_slash,
            hreflang=dict(self.i18n.hreflang),
        )


__all__ = [
    "ConfigurationError",
    "I18nConfig",
    "ImmutableModel",
    "LegacyRedirect",
    "LocaleRegistry",
    "LogicalPage",
    "REDIRECT_STATUSES",
    "RoutePolicyConfig",
    "RoutingFlags",
    "SiteConfiguration",
    "normalise_path",
]
