"""Shared fixtures for building export packages on disk."""

import json
import sqlite3
import zipfile
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from siteport.importer.constants import (
    EXPORT_DB_NAME,
    EXPORT_MANIFEST_NAME,
    EXPORT_ZIP_DB_NAME,
)
from siteport.importer.registry import PortableServiceRegistry


DEFAULT_METADATA = {
    "portal_id": 0,
    "export_name": "Nightly",
    "items_to_export": ["Pages", "Users"],
    "include_deletions": True,
}


def manifest_xml(package_id: Optional[str] = None, name: Optional[str] = None,
                 description: Optional[str] = None) -> str:
    """Build a manifest document with the given optional values."""
    parts = []
    if package_id is not None:
        parts.append(f"<PackageId>{package_id}</PackageId>")
    if name is not None:
        parts.append(f"<PackageName>{name}</PackageName>")
    if description is not None:
        parts.append(f"<PackageDescription>{description}</PackageDescription>")
    return f"<export><package>{''.join(parts)}</package></export>"


def write_export_db(db_path: Path, collections: Dict[str, List[dict]]) -> Path:
    """Write a package database with one table per collection."""
    conn = sqlite3.connect(str(db_path))
    try:
        for collection, records in collections.items():
            conn.execute(
                f'CREATE TABLE "{collection}" '
                "(id INTEGER PRIMARY KEY AUTOINCREMENT, data TEXT NOT NULL)"
            )
            conn.executemany(
                f'INSERT INTO "{collection}" (data) VALUES (?)',
                [(json.dumps(record),) for record in records],
            )
        conn.commit()
    finally:
        conn.close()
    return db_path


def write_package(
    folder: Path,
    collections: Optional[Dict[str, List[dict]]] = None,
    manifest: Optional[str] = None,
    db_bytes: Optional[bytes] = None,
) -> Path:
    """Create a complete package folder: manifest plus zipped database.

    Args:
        folder: Package folder to create
        collections: Database contents; defaults to a single metadata record
        manifest: Manifest document; defaults to one declaring every field
        db_bytes: Raw bytes to zip instead of a real database
    """
    folder.mkdir(parents=True, exist_ok=True)
    if manifest is None:
        manifest = manifest_xml(folder.name, f"{folder.name} name", f"{folder.name} description")
    (folder / EXPORT_MANIFEST_NAME).write_text(manifest, encoding="utf-8")

    if db_bytes is None:
        if collections is None:
            collections = {"export_metadata": [DEFAULT_METADATA]}
        staging = folder / "staging.db"
        write_export_db(staging, collections)
        db_bytes = staging.read_bytes()
        staging.unlink()

    with zipfile.ZipFile(folder / EXPORT_ZIP_DB_NAME, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(EXPORT_DB_NAME, db_bytes)

    return folder


@pytest.fixture
def export_folder(tmp_path):
    """Empty export folder."""
    folder = tmp_path / "exports"
    folder.mkdir()
    return folder


@pytest.fixture
def registry():
    """Registry isolated from the process-wide default."""
    return PortableServiceRegistry()


@pytest.fixture
def make_package():
    """Factory fixture for package folders, see :func:`write_package`."""
    return write_package


@pytest.fixture
def make_export_db():
    """Factory fixture for package databases, see :func:`write_export_db`."""
    return write_export_db


@pytest.fixture
def make_manifest():
    """Factory fixture for manifest documents, see :func:`manifest_xml`."""
    return manifest_xml
