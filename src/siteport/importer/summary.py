"""Import summary generation."""

import logging
from typing import List

from .constants import CATEGORY_PROFILE_PROPERTIES
from .errors import MetadataRecordError, RecordCountError
from .models import ExportMetadata, ImportExportSummary, SummaryItem
from .registry import PortableServiceRegistry, default_registry
from .repository import ExportImportRepository

logger = logging.getLogger(__name__)


def build_import_summary(
    repository: ExportImportRepository,
    registry: PortableServiceRegistry = default_registry,
) -> ImportExportSummary:
    """
    Count what every registered handler would import from a package.

    Each handler is bound to ``repository`` and asked for its import total.
    A row is shown when the original export requested its category.
    ``include_profile_properties`` is derived from the export's requested
    categories, not from the profile-properties row.

    Args:
        repository: Open data store of the package
        registry: Registry supplying the handlers

    Returns:
        New summary with one item per handler, in registry order

    Raises:
        MetadataRecordError: If the store does not hold exactly one
            export metadata record
    """
    try:
        export_metadata = repository.get_single_item(ExportMetadata)
    except RecordCountError as e:
        raise MetadataRecordError(e.message, **e.context) from e

    requested = set(export_metadata.items_to_export)

    summary_items: List[SummaryItem] = []
    for service in registry.discover():
        service.repository = repository
        try:
            summary_items.append(SummaryItem(
                category=service.category,
                total_items=service.get_import_total(),
                show_item=service.category in requested,
            ))
        finally:
            service.repository = None

    logger.debug(f"Built import summary: {{'categories': {len(summary_items)}, 'requested': {sorted(requested)}}}")

    return ImportExportSummary(
        summary_items=tuple(summary_items),
        include_deletions=export_metadata.include_deletions,
        include_profile_properties=CATEGORY_PROFILE_PROPERTIES in requested,
    )
