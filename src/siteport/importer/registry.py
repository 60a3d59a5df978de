"""Registry of content-category handlers.

Handlers are registered explicitly, either with the decorator::

    @register_portable_service
    class PagesService(CollectionCountService):
        category = "Pages"
        collection = "pages"

or by a composition root calling :meth:`PortableServiceRegistry.register`.
Modules that only contain registrations can be listed in the configuration
and imported with :func:`load_handler_modules`.
"""

import importlib
import logging
from typing import Callable, Dict, Iterable, List, Optional, TypeVar

from .errors import DuplicateCategoryError, HandlerRegistryError
from .portable import BasePortableService

logger = logging.getLogger(__name__)

ServiceFactory = Callable[[], BasePortableService]
F = TypeVar('F', bound=ServiceFactory)


def _qualified_name(factory: ServiceFactory) -> str:
    module = getattr(factory, "__module__", None) or "<unknown>"
    name = getattr(factory, "__qualname__", None) or repr(factory)
    return f"{module}.{name}"


class PortableServiceRegistry:
    """Ordered mapping of category label to handler factory."""

    def __init__(self) -> None:
        self._factories: Dict[str, ServiceFactory] = {}

    def register(self, factory: F, category: Optional[str] = None) -> F:
        """
        Register a handler factory.

        Args:
            factory: Zero-argument callable returning a handler, usually the
                handler class itself
            category: Category label; defaults to ``factory.category``

        Returns:
            The factory, so this method can be used as a class decorator

        Raises:
            HandlerRegistryError: If no category label can be determined
            DuplicateCategoryError: If the category is already registered
        """
        label = category if category is not None else getattr(factory, "category", None)
        if not isinstance(label, str) or not label:
            raise HandlerRegistryError(
                f"Handler {_qualified_name(factory)} has no category",
                factory=_qualified_name(factory),
            )

        existing = self._factories.get(label)
        if existing is not None:
            raise DuplicateCategoryError(
                f"Category {label!r} is already handled by {_qualified_name(existing)}",
                category=label,
                factory=_qualified_name(factory),
            )

        self._factories[label] = factory
        logger.debug(f"Registered handler: {{'category': {label!r}, 'factory': {_qualified_name(factory)!r}}}")
        return factory

    def unregister(self, category: str) -> None:
        """Remove the handler for a category, if registered."""
        self._factories.pop(category, None)

    def categories(self) -> List[str]:
        """Registered category labels in registration order."""
        return list(self._factories)

    def __len__(self) -> int:
        return len(self._factories)

    def __contains__(self, category: object) -> bool:
        return category in self._factories

    def discover(self) -> List[BasePortableService]:
        """
        Create one instance of every registered handler.

        Each factory is called in isolation: a factory that raises, returns
        something other than a handler, or returns a handler for another
        category is logged and skipped so the remaining handlers are still
        returned. Instances are never cached;
        every call builds a new set.

        Returns:
            Handler instances in registration order
        """
        services: List[BasePortableService] = []
        for label, factory in self._factories.items():
            try:
                service = factory()
            except Exception as e:
                logger.error(
                    f"Unable to create {_qualified_name(factory)} while creating portable "
                    f"service implementors: {e}"
                )
                continue

            if not isinstance(service, BasePortableService):
                logger.error(
                    f"Unable to create {_qualified_name(factory)} while creating portable "
                    f"service implementors: returned {type(service).__name__}, "
                    f"not a portable service"
                )
                continue

            if service.category != label:
                logger.error(
                    f"Skipping {_qualified_name(factory)}: registered for {label!r} "
                    f"but reports category {service.category!r}"
                )
                continue

            services.append(service)

        return services


default_registry = PortableServiceRegistry()


def register_portable_service(factory: F) -> F:
    """Class decorator registering a handler with the default registry."""
    return default_registry.register(factory)


def load_handler_modules(module_names: Iterable[str]) -> List[str]:
    """
    Import modules whose import registers handlers.

    A module that fails to import is logged and skipped.

    Args:
        module_names: Dotted module names

    Returns:
        Names of the modules that were imported
    """
    loaded = []
    for module_name in module_names:
        try:
            importlib.import_module(module_name)
        except Exception as e:
            logger.error(f"Unable to load handler module {module_name}: {e}")
            continue
        loaded.append(module_name)
    return loaded
