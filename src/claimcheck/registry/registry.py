"""Service registry: builds, sorts, caches and filters the service set."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence

from claimcheck.errors import RegistryLoadError
from claimcheck.services import SERVICE_CATALOG, StrategyFactory
from claimcheck.services.base import HttpService, ServiceDescriptor, ServiceStrategy

logger = logging.getLogger(__name__)

ServiceFilter = Callable[[ServiceDescriptor], bool]


def _sort_key(service: HttpService) -> tuple[str, str]:
    return service.category.upper(), service.title.upper()


class ServiceRegistry:
    """Registry of checkable services, loaded lazily from a category catalog."""

    def __init__(self, catalog: Mapping[str, Sequence[StrategyFactory]] | None = None) -> None:
        self._catalog = SERVICE_CATALOG if catalog is None else catalog
        self._services: list[HttpService] | None = None

    @property
    def is_loaded(self) -> bool:
        return self._services is not None

    def _discover(self) -> list[HttpService]:
        services: list[HttpService] = []
        for category, factories in self._catalog.items():
            for factory in factories:
                try:
                    strategy = factory()
                except Exception as exc:
                    raise RegistryLoadError(
                        f"Failed to load service {factory!r} under {category} category: {exc}"
                    ) from exc
                if not isinstance(strategy, ServiceStrategy):
                    raise RegistryLoadError(f"{factory!r} under {category} category is not a service strategy")
                if not isinstance(strategy.title, str) or not strategy.title.strip():
                    raise RegistryLoadError(f"{factory!r} under {category} category has no title")

                service = HttpService(category, strategy)
                logger.debug("Loaded %s service under %s category", service.title, service.category)
                services.append(service)

        services.sort(key=_sort_key)
        return services

    def load(self) -> list[HttpService]:
        """Return every service sorted by category then title, discovering them once."""
        if self._services is not None:
            logger.debug("%d services have previously been loaded", len(self._services))
            return list(self._services)

        logger.debug("Loading available services")
        services = self._discover()
        logger.debug(
            "Loaded %d services within %d categories",
            len(services),
            len({s.category for s in services}),
        )
        self._services = services
        return list(services)

    def get(self, filter: ServiceFilter | None = None) -> list[HttpService]:
        services = self.load()
        if filter is not None:
            services = [s for s in services if filter(s.descriptor)]
        return services

    def unload(self) -> None:
        self._services = None
        logger.debug("Unloaded all services")


_default_registry: ServiceRegistry | None = None


def get_registry() -> ServiceRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry
    if _default_registry is None:
        _default_registry = ServiceRegistry()
    return _default_registry


def reset_registry() -> None:
    global _default_registry
    _default_registry = None
