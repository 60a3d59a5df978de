"""Package manifest parsing.

A manifest is a small XML document written next to the data store when a
site is exported::

    <export>
      <package>
        <PackageId>site-2017-06-01</PackageId>
        <PackageName>Main site</PackageName>
        <PackageDescription>Nightly export</PackageDescription>
      </package>
    </export>

Every value is optional. A value that is missing (or empty) falls back to the
name of the package folder.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from .constants import (
    MANIFEST_PACKAGE_DESCRIPTION_TAG,
    MANIFEST_PACKAGE_ID_TAG,
    MANIFEST_PACKAGE_NAME_TAG,
    MANIFEST_PACKAGE_TAG,
)
from .errors import AmbiguousManifestError, ManifestError, ManifestParseError
from .models import ImportPackageInfo

logger = logging.getLogger(__name__)


def parse_import_manifest(manifest_path: Path, fallback_name: str) -> ImportPackageInfo:
    """Read package identity from a manifest file.

    Args:
        manifest_path: Path to the manifest file
        fallback_name: Value used for any field the manifest does not declare,
            normally the package folder name

    Returns:
        Parsed package info

    Raises:
        ManifestParseError: If the manifest is not well-formed XML
        AmbiguousManifestError: If a field is declared more than once
        ManifestError: If the manifest cannot be read
    """
    manifest_path = Path(manifest_path)
    try:
        root = ET.parse(manifest_path).getroot()
    except ET.ParseError as e:
        raise ManifestParseError(
            f"Malformed manifest: {e}", path=str(manifest_path)
        ) from e
    except OSError as e:
        raise ManifestError(
            f"Cannot read manifest: {e}", path=str(manifest_path)
        ) from e

    package_id = _get_tag_value(root, MANIFEST_PACKAGE_ID_TAG, manifest_path)
    name = _get_tag_value(root, MANIFEST_PACKAGE_NAME_TAG, manifest_path)
    description = _get_tag_value(root, MANIFEST_PACKAGE_DESCRIPTION_TAG, manifest_path)

    return ImportPackageInfo(
        package_id=package_id or fallback_name,
        name=name or fallback_name,
        description=description or fallback_name,
    )


def _get_tag_value(root: ET.Element, tag: str, manifest_path: Path) -> Optional[str]:
    """Return the text of the single ``<package>/<tag>`` element, if any."""
    # iter() includes root itself, so a bare <package> document also matches
    matches = [
        child
        for package in root.iter(MANIFEST_PACKAGE_TAG)
        for child in package.findall(tag)
    ]

    if len(matches) > 1:
        raise AmbiguousManifestError(
            f"Manifest declares {tag} {len(matches)} times",
            path=str(manifest_path),
            tag=tag,
        )

    if not matches:
        logger.debug(f"Manifest has no {tag}: {manifest_path}")
        return None

    text = (matches[0].text or "").strip()
    return text or None
