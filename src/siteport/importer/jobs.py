"""Interface of the queue that import and export jobs are persisted to."""

from enum import Enum
from typing import Optional, Protocol, runtime_checkable


class JobType(str, Enum):
    EXPORT = "export"
    IMPORT = "import"


@runtime_checkable
class JobQueue(Protocol):
    """Persists job requests for the background engine that runs them."""

    def add_new_job(
        self,
        portal_id: int,
        user_id: int,
        job_type: JobType,
        package_id: Optional[str],
        job_object: str,
    ) -> int:
        """Store a job and return its id. ``job_object`` is the JSON request."""
        ...
