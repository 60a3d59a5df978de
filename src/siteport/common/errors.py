"""Base error definitions for siteport packages."""

from typing import Any, Dict


class SitePortError(Exception):
    """Base exception for all siteport errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context


class ConfigurationError(SitePortError):
    """Configuration is invalid or missing."""
    pass
