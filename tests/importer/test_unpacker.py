"""Tests for unpacking the package data store."""

import os
import stat
import sys
import zipfile
from unittest.mock import patch

import pytest

from siteport.importer import unpacker
from siteport.importer.constants import EXPORT_DB_NAME, EXPORT_ZIP_DB_NAME
from siteport.importer.errors import (
    ArchiveEntryNotFoundError,
    ArchiveNotFoundError,
    CorruptedArchiveError,
    UnpackError,
)
from siteport.importer.unpacker import ensure_unpacked


class TestEnsureUnpacked:
    """Test on-demand extraction of the database entry."""

    def test_extracts_database(self, export_folder, make_package):
        package = make_package(export_folder / "site")

        db_path = ensure_unpacked(package)

        assert db_path == package / EXPORT_DB_NAME
        assert db_path.is_file()
        with zipfile.ZipFile(package / EXPORT_ZIP_DB_NAME) as zf:
            assert db_path.read_bytes() == zf.read(EXPORT_DB_NAME)

    def test_idempotent(self, export_folder, make_package):
        """The second call returns the same path without extracting again."""
        package = make_package(export_folder / "site")

        with patch.object(unpacker, "_extract_entry", wraps=unpacker._extract_entry) as extract:
            first = ensure_unpacked(package)
            second = ensure_unpacked(package)

        assert first == second
        assert extract.call_count == 1

    def test_existing_database_is_returned_unchanged(self, tmp_path):
        """An unpacked store is used even if the archive is unreadable."""
        package = tmp_path / "site"
        package.mkdir()
        (package / EXPORT_DB_NAME).write_bytes(b"already here")
        (package / EXPORT_ZIP_DB_NAME).write_bytes(b"not a zip")

        db_path = ensure_unpacked(package)

        assert db_path.read_bytes() == b"already here"

    def test_extracts_only_database_entry(self, tmp_path):
        """Other archive entries are not written and unrelated files survive."""
        package = tmp_path / "site"
        package.mkdir()
        (package / "notes.txt").write_text("keep me")
        with zipfile.ZipFile(package / EXPORT_ZIP_DB_NAME, "w") as zf:
            zf.writestr(EXPORT_DB_NAME, b"db")
            zf.writestr("notes.txt", "from archive")
            zf.writestr("extra/file.bin", b"extra")

        ensure_unpacked(package)

        assert (package / "notes.txt").read_text() == "keep me"
        assert not (package / "extra").exists()
        assert sorted(p.name for p in package.iterdir()) == sorted(
            [EXPORT_DB_NAME, EXPORT_ZIP_DB_NAME, "notes.txt"]
        )

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ArchiveNotFoundError):
            ensure_unpacked(tmp_path)

    def test_missing_entry(self, tmp_path):
        with zipfile.ZipFile(tmp_path / EXPORT_ZIP_DB_NAME, "w") as zf:
            zf.writestr("something_else.db", b"db")

        with pytest.raises(ArchiveEntryNotFoundError):
            ensure_unpacked(tmp_path)

        assert not (tmp_path / EXPORT_DB_NAME).exists()

    def test_corrupted_archive(self, tmp_path):
        (tmp_path / EXPORT_ZIP_DB_NAME).write_bytes(b"PK\x03\x04 truncated")

        with pytest.raises(CorruptedArchiveError):
            ensure_unpacked(tmp_path)

        assert not (tmp_path / EXPORT_DB_NAME).exists()

    def test_unpack_errors_share_base(self):
        assert issubclass(ArchiveNotFoundError, UnpackError)
        assert issubclass(CorruptedArchiveError, UnpackError)

    def test_no_temporary_files_left(self, tmp_path):
        """Both successful and failed extractions clean up their temp file."""
        good = tmp_path / "good"
        good.mkdir()
        with zipfile.ZipFile(good / EXPORT_ZIP_DB_NAME, "w") as zf:
            zf.writestr(EXPORT_DB_NAME, b"db")
        bad = tmp_path / "bad"
        bad.mkdir()
        with zipfile.ZipFile(bad / EXPORT_ZIP_DB_NAME, "w") as zf:
            zf.writestr("other", b"db")

        ensure_unpacked(good)
        with pytest.raises(ArchiveEntryNotFoundError):
            ensure_unpacked(bad)

        assert not list(good.glob("*.tmp"))
        assert not list(bad.glob("*.tmp"))

    def test_destination_appears_only_when_complete(self, tmp_path):
        """The database is written under a temporary name and renamed into place."""
        with zipfile.ZipFile(tmp_path / EXPORT_ZIP_DB_NAME, "w") as zf:
            zf.writestr(EXPORT_DB_NAME, b"db" * 1000)

        seen = []
        real_replace = unpacker.os.replace

        def spy_replace(src, dst):
            seen.append((src, dst, (tmp_path / EXPORT_DB_NAME).exists()))
            return real_replace(src, dst)

        with patch.object(unpacker.os, "replace", side_effect=spy_replace):
            ensure_unpacked(tmp_path)

        assert len(seen) == 1
        src, dst, existed_before = seen[0]
        assert str(dst) == str(tmp_path / EXPORT_DB_NAME)
        assert str(src) != str(dst)
        assert existed_before is False

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_unpacked_database_follows_umask(self, tmp_path):
        """The store is created like a regular file, not private to the unpacking user."""
        with zipfile.ZipFile(tmp_path / EXPORT_ZIP_DB_NAME, "w") as zf:
            zf.writestr(EXPORT_DB_NAME, b"db")

        previous = os.umask(0o022)
        try:
            db_path = ensure_unpacked(tmp_path)
        finally:
            os.umask(previous)

        assert stat.S_IMODE(db_path.stat().st_mode) == 0o644

    def test_unwritable_package_folder(self, tmp_path):
        """Failing to create the temporary file is reported as an unpack error."""
        with zipfile.ZipFile(tmp_path / EXPORT_ZIP_DB_NAME, "w") as zf:
            zf.writestr(EXPORT_DB_NAME, b"db")

        with patch.object(unpacker.tempfile, "mkstemp", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(UnpackError) as exc_info:
                ensure_unpacked(tmp_path)

        assert isinstance(exc_info.value.__cause__, PermissionError)
        assert not (tmp_path / EXPORT_DB_NAME).exists()
