"""Build service filters from category and title search terms.

A term prefixed with ``:`` excludes matches instead of selecting them. Terms
are compared after stripping everything but letters and digits, ignoring case,
so ``scr.im``, ``SCRIM`` and ``:scrim`` all refer to the same service.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from claimcheck.registry.registry import ServiceFilter
from claimcheck.services.base import ServiceDescriptor

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")


def sanitize(value: str) -> str:
    return _NON_ALPHANUMERIC.sub("", value).upper()


def _split_terms(values: Iterable[str]) -> tuple[set[str], set[str]]:
    includes: set[str] = set()
    excludes: set[str] = set()
    for raw in values:
        value = raw.strip()
        if not value:
            continue
        if value.startswith(":"):
            excludes.add(sanitize(value))
        else:
            includes.add(sanitize(value))
    return includes, excludes


def create_filter(
    categories: Iterable[str] = (),
    services: Iterable[str] = (),
) -> ServiceFilter | None:
    """Return a descriptor predicate for the given terms, or None when there are none."""
    included_categories, excluded_categories = _split_terms(categories)
    included_services, excluded_services = _split_terms(services)

    if not (included_categories or excluded_categories or included_services or excluded_services):
        return None

    def _filter(descriptor: ServiceDescriptor) -> bool:
        category = sanitize(descriptor.category)
        title = sanitize(descriptor.title)
        if category in excluded_categories or title in excluded_services:
            return False
        if included_categories and category not in included_categories:
            return False
        if included_services and title not in included_services:
            return False
        return True

    return _filter
