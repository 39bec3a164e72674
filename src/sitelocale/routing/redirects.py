"""Flatten default-locale and legacy redirect rules into one static table."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Iterable

from sitelocale.config.schema import LegacyRedirect, LogicalPage, normalise_path
from sitelocale.errors import RedirectConflictError

from .policy import RoutingPolicy

_LOGGER = logging.getLogger(__name__)

ORIGIN_DEFAULT_LOCALE = "default-locale"
ORIGIN_LEGACY = "legacy"


@dataclass(frozen=True)
class RedirectRule:
    """A single static ``source -> target`` redirect emitted to the host."""

    source: str
    target: str
    status: int
    origin: str

    def as_dict(self) -> dict[str, object]:
        return {"source": self.source, "target": self.target, "status": self.status}


@dataclass(frozen=True)
class RedirectTable:
    """Ordered, conflict-free redirect rules plus non-fatal consistency notes."""

    rules: tuple[RedirectRule, ...]
    warnings: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.rules)

    def lookup(self, path: str) -> RedirectRule | None:
        normalised = normalise_path(path)
        for rule in self.rules:
            if rule.source == normalised:
                return rule
        return None

    def sources(self) -> frozenset[str]:
        return frozenset(rule.source for rule in self.rules)

    def render(self) -> str:
        """Return the table in ``_redirects`` format: ``source target status``."""

        lines = [f"{rule.source} {rule.target} {rule.status}" for rule in self.rules]
        return "\n".join(lines) + "\n" if lines else ""

    def to_json(self) -> str:
        payload = [rule.as_dict() for rule in self.rules]
        return json.dumps(payload, ensure_ascii=False, indent=2) + "\n"


def _legacy_rules(redirects: Iterable[LegacyRedirect]) -> dict[str, RedirectRule]:
    rules: dict[str, RedirectRule] = {}
    for entry in redirects:
        rule = RedirectRule(
            source=entry.source,
            target=entry.target,
            status=entry.status,
            origin=ORIGIN_LEGACY,
        )
        existing = rules.get(rule.source)
        if existing is not None:
            if (existing.target, existing.status) != (rule.target, rule.status):
                raise RedirectConflictError(
                    rule.source,
                    f"conflicting legacy redirects to '{existing.target}' and '{rule.target}'",
                )
            continue
        if not entry.is_external and normalise_path(entry.target) == rule.source:
            raise RedirectConflictError(rule.source, "redirect points at itself")
        rules[rule.source] = rule
    return rules


def _check_cycles(rules: dict[str, RedirectRule]) -> list[str]:
    chains: list[str] = []
    for source in rules:
        visited = [source]
        current = rules[source]
        while True:
            if current.target.startswith(("http://", "https://")):
                break
            following = normalise_path(current.target)
            if following in visited:
                raise RedirectConflictError(
                    source, f"redirect loop {' -> '.join([*visited, following])}"
                )
            if following not in rules:
                break
            visited.append(following)
            current = rules[following]
        if len(visited) > 1:
            chains.append(" -> ".join([*visited, normalise_path(current.target)]))
    return chains


def build_redirect_table(
    policy: RoutingPolicy,
    pages: Iterable[LogicalPage],
) -> RedirectTable:
    """Combine the default-locale rule and explicit legacy redirects.

    Legacy entries win over the default-locale rule for the same source path.
    Any other disagreement about a source path raises
    :class:`~sitelocale.errors.RedirectConflictError`, as does a loop.
    """

    pages = tuple(pages)
    generated = policy.generated_paths(pages)
    rules = _legacy_rules(policy.config.legacy_redirects)
    warnings: list[str] = []

    if policy.redirects_bare_paths():
        for page in pages:
            if not page.localized:
                continue
            source = normalise_path(policy.unprefixed_path(page))
            target = policy.localized_path(page, policy.default_locale)
            if source in rules:
                _LOGGER.info(
                    "Legacy redirect for %s overrides default-locale redirect to %s",
                    source,
                    target,
                )
                continue
            if source in generated:
                raise RedirectConflictError(
                    source, f"default-locale redirect would shadow published page '{generated[source].path}'"
                )
            rules[source] = RedirectRule(
                source=source,
                target=target,
                status=policy.config.default_redirect_status,
                origin=ORIGIN_DEFAULT_LOCALE,
            )

    for rule in rules.values():
        if rule.origin != ORIGIN_LEGACY:
            continue
        if rule.source in generated:
            warnings.append(f"{rule.source}: legacy redirect shadows a generated page")
        if rule.target.startswith(("http://", "https://")):
            continue
        target = normalise_path(rule.target)
        if target not in generated and target not in rules:
            warnings.append(
                f"{rule.source}: target '{rule.target}' does not correspond to any generated page"
            )

    for chain in _check_cycles(rules):
        warnings.append(f"{chain.split(' -> ', 1)[0]}: redirect chain {chain}")

    for warning in warnings:
        _LOGGER.warning("Redirect consistency: %s", warning)

    ordered = tuple(rules[source] for source in sorted(rules))
    return RedirectTable(rules=ordered, warnings=tuple(warnings))


__all__ = [
    "ORIGIN_DEFAULT_LOCALE",
    "ORIGIN_LEGACY",
    "RedirectRule",
    "RedirectTable",
    "build_redirect_table",
]
