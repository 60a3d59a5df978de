"""Contract for content-category handlers.

Each category of importable content (pages, users, profile properties, ...)
is handled by a subclass of :class:`BasePortableService`. Handlers are
registered with a :class:`~siteport.importer.registry.PortableServiceRegistry`
and created fresh for every verification, so they must be constructible
without arguments and must not keep state between calls.
"""

from abc import ABC, abstractmethod
from typing import ClassVar, Optional

from .repository import ExportImportRepository


class BasePortableService(ABC):
    """Imports one category of content from an export package."""

    #: Category label, matched against the categories an export requested
    category: ClassVar[str] = ""

    def __init__(self) -> None:
        # Bound by the caller for the duration of one verification or import
        self.repository: Optional[ExportImportRepository] = None

    def _require_repository(self) -> ExportImportRepository:
        if self.repository is None:
            raise RuntimeError(f"{type(self).__name__} is not bound to a data store")
        return self.repository

    @abstractmethod
    def get_import_total(self) -> int:
        """Number of items this handler would import from the bound store."""


class CollectionCountService(BasePortableService):
    """Handler whose import total is the size of one data store collection."""

    collection: ClassVar[str] = ""

    def get_import_total(self) -> int:
        return self._require_repository().get_count(self.collection)
