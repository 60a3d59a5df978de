"""Verification and summaries of site-export packages before import."""

from .controller import ImportController
from .manifest import parse_import_manifest
from .locator import is_valid_import_folder, list_package_folders
from .unpacker import ensure_unpacked
from .repository import ExportImportRepository
from .portable import BasePortableService, CollectionCountService
from .registry import (
    PortableServiceRegistry,
    default_registry,
    register_portable_service,
    load_handler_modules,
)
from .summary import build_import_summary
from .models import (
    CollisionResolution,
    ExportMetadata,
    ImportExportSummary,
    ImportPackageInfo,
    ImportRequest,
    SummaryItem,
    VerificationResult,
)

__all__ = [
    'ImportController',
    'parse_import_manifest',
    'is_valid_import_folder',
    'list_package_folders',
    'ensure_unpacked',
    'ExportImportRepository',
    'BasePortableService',
    'CollectionCountService',
    'PortableServiceRegistry',
    'default_registry',
    'register_portable_service',
    'load_handler_modules',
    'build_import_summary',
    'CollisionResolution',
    'ExportMetadata',
    'ImportExportSummary',
    'ImportPackageInfo',
    'ImportRequest',
    'SummaryItem',
    'VerificationResult',
]
