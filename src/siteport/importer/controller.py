"""Listing, verifying and queueing site-export packages for import."""

import logging
from pathlib import Path
from typing import List, Optional

from siteport.common import ConfigurationError, LogContext
from .constants import EXPORT_MANIFEST_NAME, INVALID_PACKAGE_MESSAGE, LOG_TYPE_SITE_IMPORT
from .jobs import JobQueue, JobType
from .locator import is_valid_import_folder, list_package_folders
from .manifest import parse_import_manifest
from .models import ImportPackageInfo, ImportRequest, VerificationResult
from .registry import PortableServiceRegistry, default_registry
from .repository import ExportImportRepository
from .summary import build_import_summary
from .unpacker import ensure_unpacked

logger = logging.getLogger(__name__)


class ImportController:
    """
    Entry point for callers preparing a site import.

    Args:
        export_folder: Folder that holds one subfolder per export package
        registry: Registry supplying content handlers for summaries
        job_queue: Queue that accepted import requests are written to
    """

    def __init__(
        self,
        export_folder: Path,
        registry: PortableServiceRegistry = default_registry,
        job_queue: Optional[JobQueue] = None,
    ) -> None:
        self.export_folder = Path(export_folder)
        self.registry = registry
        self.job_queue = job_queue

    def get_import_packages(self) -> List[ImportPackageInfo]:
        """
        Describe every package in the export folder.

        Raises:
            ManifestError: If a package manifest is malformed or ambiguous
        """
        packages = [
            parse_import_manifest(folder / EXPORT_MANIFEST_NAME, folder.name)
            for folder in list_package_folders(self.export_folder)
        ]
        logger.info(f"Found {len(packages)} import package(s) in {self.export_folder}")
        return packages

    def verify_import_package(self, package_id: str, include_summary: bool = True) -> VerificationResult:
        """
        Check that a package can be imported.

        A folder that is not a package gives ``(False, "")``; nothing is
        unpacked or opened. Any failure while unpacking, opening or
        summarizing a package gives ``False`` and a message starting with
        :data:`~siteport.importer.constants.INVALID_PACKAGE_MESSAGE`. The
        data store is always closed before returning.

        Args:
            package_id: Name of the package folder
            include_summary: Build the per-category import summary

        Returns:
            Verification result; ``summary`` is set only for valid packages
            when requested
        """
        package_folder = self._package_folder(package_id)
        if package_folder is None or not is_valid_import_folder(package_folder):
            logger.info(f"Not an import package: {{'package_id': {package_id!r}}}")
            return VerificationResult(is_valid=False)

        try:
            db_path = ensure_unpacked(package_folder)
            with ExportImportRepository(db_path) as repository:
                summary = (
                    build_import_summary(repository, self.registry)
                    if include_summary else None
                )
        except Exception as e:
            logger.warning(f"Package verification failed: {{'package_id': {package_id!r}, 'error': {str(e)!r}}}")
            return VerificationResult(
                is_valid=False,
                error_message=INVALID_PACKAGE_MESSAGE + str(e),
            )

        logger.info(f"Package verified: {{'package_id': {package_id!r}}}")
        return VerificationResult(is_valid=True, summary=summary)

    def queue_operation(self, user_id: int, import_request: ImportRequest) -> int:
        """
        Queue an import job and record an audit event.

        Returns:
            Id of the queued job

        Raises:
            ConfigurationError: If no job queue was provided
        """
        if self.job_queue is None:
            raise ConfigurationError("No job queue configured for import requests")

        job_id = self.job_queue.add_new_job(
            import_request.portal_id,
            user_id,
            JobType.IMPORT,
            import_request.package_id,
            import_request.model_dump_json(),
        )

        with LogContext(
            logger,
            event_type=LOG_TYPE_SITE_IMPORT,
            portal_id=import_request.portal_id,
            user_id=user_id,
            job_id=job_id,
        ):
            logger.info(f"Site import queued: {{'job_id': {job_id}, 'package_id': {import_request.package_id!r}}}")

        return job_id

    def _package_folder(self, package_id: str) -> Optional[Path]:
        """Map a package id to its folder; ids that leave the export folder map to None."""
        if not package_id or package_id in (".", "..") or "/" in package_id or "\\" in package_id:
            return None
        return self.export_folder / package_id
