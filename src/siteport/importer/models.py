"""Data model for package listing, verification and import requests."""

from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, List, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class ImportPackageInfo:
    """Identity of an export package as declared by its manifest."""
    package_id: str
    name: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SummaryItem:
    """Import total for one content category."""
    category: str
    total_items: int
    show_item: bool  # category was requested by the original export


@dataclass(frozen=True)
class ImportExportSummary:
    """Per-category accounting for a package about to be imported."""
    summary_items: Tuple[SummaryItem, ...] = ()
    include_deletions: bool = False
    include_profile_properties: bool = False
    # TODO: copy include_permissions/include_extensions from ExportMetadata once
    # the import engine honours them; they are never set from a package today.
    include_permissions: bool = False
    include_extensions: bool = False

    def get_item(self, category: str) -> Optional[SummaryItem]:
        """Return the summary row for a category, if a handler produced one."""
        for item in self.summary_items:
            if item.category == category:
                return item
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["summary_items"] = [asdict(item) for item in self.summary_items]
        return data


class ExportMode(str, Enum):
    """How the original export selected its records."""
    COMPLETE = "complete"
    DIFFERENTIAL = "differential"


class ExportMetadata(BaseModel):
    """The single record describing what an export package contains."""

    model_config = ConfigDict(extra='ignore')

    collection: ClassVar[str] = "export_metadata"

    portal_id: int = 0
    export_name: str = ""
    export_description: str = ""
    items_to_export: List[str] = Field(default_factory=list)
    include_deletions: bool = False
    include_users: bool = False
    include_content: bool = False
    include_permissions: bool = False
    include_extensions: bool = False
    export_mode: ExportMode = ExportMode.COMPLETE
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None


class CollisionResolution(str, Enum):
    """What the import engine does when an imported item already exists."""
    IGNORE = "ignore"
    OVERWRITE = "overwrite"


class ImportRequest(BaseModel):
    """A request to import one package into a portal."""

    model_config = ConfigDict(extra='forbid')

    portal_id: int = Field(ge=0)
    package_id: str = Field(min_length=1)
    collision_resolution: CollisionResolution = CollisionResolution.IGNORE
    run_now: bool = False


class VerificationResult(NamedTuple):
    """Outcome of verifying a package before import.

    ``error_message`` is empty when the package is valid and also when the
    folder is simply not a package; it is only set for corrupt packages.
    """
    is_valid: bool
    error_message: str = ""
    summary: Optional[ImportExportSummary] = None
