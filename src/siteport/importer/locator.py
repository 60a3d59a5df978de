"""Locating package folders inside the export folder."""

import logging
from pathlib import Path
from typing import List

from .constants import EXPORT_MANIFEST_NAME, EXPORT_ZIP_DB_NAME

logger = logging.getLogger(__name__)


def is_valid_import_folder(folder_path: Path) -> bool:
    """Check whether a folder holds a manifest and a compressed data store.

    Only file existence is checked; nothing is opened or parsed.

    Args:
        folder_path: Candidate package folder

    Returns:
        True if both package files exist, False otherwise (including when the
        folder is missing or cannot be accessed)
    """
    folder_path = Path(folder_path)
    try:
        return (
            (folder_path / EXPORT_MANIFEST_NAME).is_file()
            and (folder_path / EXPORT_ZIP_DB_NAME).is_file()
        )
    except OSError as e:
        logger.debug(f"Cannot access package folder: {{'path': {str(folder_path)!r}, 'error': {str(e)!r}}}")
        return False


def list_package_folders(export_folder: Path) -> List[Path]:
    """List the immediate subfolders of the export folder that are packages.

    Args:
        export_folder: Root folder that exports are written to

    Returns:
        Valid package folders sorted by name; empty if the export folder
        does not exist or cannot be read
    """
    export_folder = Path(export_folder)
    try:
        candidates = sorted(p for p in export_folder.iterdir() if p.is_dir())
    except OSError as e:
        logger.warning(f"Cannot list export folder: {{'path': {str(export_folder)!r}, 'error': {str(e)!r}}}")
        return []

    folders = [p for p in candidates if is_valid_import_folder(p)]
    logger.debug(f"Found {len(folders)} package folder(s) out of {len(candidates)} in {export_folder}")
    return folders
