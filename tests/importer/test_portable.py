"""Tests for the content handler base classes."""

import pytest

from siteport.importer.portable import BasePortableService, CollectionCountService
from siteport.importer.repository import ExportImportRepository


class PagesService(CollectionCountService):
    category = "Pages"
    collection = "pages"


class TestBasePortableService:

    def test_cannot_instantiate_abstract_base(self):
        with pytest.raises(TypeError):
            BasePortableService()

    def test_new_instance_is_unbound(self):
        assert PagesService().repository is None


class TestCollectionCountService:

    def test_counts_collection(self, tmp_path, make_export_db):
        path = make_export_db(tmp_path / "export.dnndb", {"pages": [{}, {}]})
        service = PagesService()

        with ExportImportRepository(path) as repository:
            service.repository = repository
            assert service.get_import_total() == 2

    def test_requires_repository(self):
        with pytest.raises(RuntimeError):
            PagesService().get_import_total()
