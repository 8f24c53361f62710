"""Service registry and filtering."""

from claimcheck.registry.filters import create_filter
from claimcheck.registry.registry import ServiceFilter, ServiceRegistry, get_registry, reset_registry

__all__ = [
    "ServiceFilter",
    "ServiceRegistry",
    "create_filter",
    "get_registry",
    "reset_registry",
]
