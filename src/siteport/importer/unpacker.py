"""Unpacking the compressed data store of an export package."""

import logging
import os
import shutil
import tempfile
import zipfile
import zlib
from pathlib import Path

from .constants import EXPORT_DB_NAME, EXPORT_ZIP_DB_NAME
from .errors import (
    ArchiveEntryNotFoundError,
    ArchiveNotFoundError,
    CorruptedArchiveError,
    UnpackError,
)

logger = logging.getLogger(__name__)

COPY_CHUNK_SIZE = 1024 * 1024  # 1 MB
DB_FILE_MODE = 0o666


def ensure_unpacked(package_dir: Path) -> Path:
    """Make sure the package's data store exists on disk in unpacked form.

    If the database file is already present it is returned untouched.
    Otherwise the single database entry is extracted from the package
    archive. Extraction writes to a temporary file in the package folder and
    renames it into place, so a reader never sees a partially written store
    and concurrent first-time calls cannot interleave their writes.

    Args:
        package_dir: Package folder

    Returns:
        Path to the unpacked database file

    Raises:
        ArchiveNotFoundError: If neither the database nor the archive exist
        ArchiveEntryNotFoundError: If the archive has no database entry
        CorruptedArchiveError: If the archive cannot be decompressed
        UnpackError: If the extracted file cannot be written
    """
    package_dir = Path(package_dir)
    db_path = package_dir / EXPORT_DB_NAME
    if db_path.is_file():
        return db_path

    zip_path = package_dir / EXPORT_ZIP_DB_NAME
    if not zip_path.is_file():
        raise ArchiveNotFoundError(
            f"Archive not found: {zip_path}", path=str(zip_path)
        )

    logger.info(f"Unpacking data store: {{'archive': {str(zip_path)!r}, 'entry': {EXPORT_DB_NAME!r}}}")
    _extract_entry(zip_path, EXPORT_DB_NAME, db_path)
    return db_path


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


def _extract_entry(zip_path: Path, entry_name: str, destination: Path) -> None:
    """Extract one archive entry to ``destination`` atomically."""
    temp_path = None
    try:
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{destination.name}.", suffix=".tmp", dir=destination.parent
        )
        temp_path = Path(temp_name)
        with os.fdopen(fd, "wb") as out:
            try:
                with zipfile.ZipFile(zip_path) as zf:
                    with zf.open(entry_name) as src:
                        shutil.copyfileobj(src, out, COPY_CHUNK_SIZE)
            except KeyError as e:
                raise ArchiveEntryNotFoundError(
                    f"Archive {zip_path.name} has no entry {entry_name}",
                    path=str(zip_path),
                    entry=entry_name,
                ) from e
            except (zipfile.BadZipFile, zlib.error, EOFError) as e:
                raise CorruptedArchiveError(
                    f"Archive {zip_path.name} is corrupted: {e}",
                    path=str(zip_path),
                ) from e

        # mkstemp creates 0600; the store gets the mode of a regular new file
        os.chmod(temp_path, DB_FILE_MODE & ~_current_umask())
        os.replace(temp_path, destination)
    except OSError as e:
        raise UnpackError(
            f"Failed to unpack {entry_name}: {e}", path=str(destination)
        ) from e
    finally:
        if temp_path is not None and temp_path.exists():
            temp_path.unlink()

    logger.debug(f"Unpacked {entry_name} to {destination}")
