"""Import-specific errors."""

from siteport.common import SitePortError


class PackageError(SitePortError):
    """Export package could not be processed."""
    pass


class ManifestError(PackageError):
    """Package manifest could not be read."""
    pass


class ManifestParseError(ManifestError):
    """Manifest is not a well-formed document."""
    pass


class AmbiguousManifestError(ManifestError):
    """Manifest declares the same value more than once."""
    pass


class UnpackError(PackageError):
    """Packaged data store could not be unpacked."""
    pass


class ArchiveNotFoundError(UnpackError):
    """Compressed data store is missing."""
    pass


class ArchiveEntryNotFoundError(UnpackError):
    """Compressed data store does not contain the database entry."""
    pass


class CorruptedArchiveError(UnpackError):
    """Compressed data store is corrupted."""
    pass


class DataStoreError(PackageError):
    """Unpacked data store could not be queried."""
    pass


class RecordCountError(DataStoreError):
    """Collection does not hold exactly one record."""
    pass


class MetadataRecordError(RecordCountError):
    """Data store does not hold exactly one export metadata record."""
    pass


class HandlerRegistryError(SitePortError):
    """Content handler registration failed."""
    pass


class DuplicateCategoryError(HandlerRegistryError):
    """A handler is already registered for the category."""
    pass
