"""Common utilities for siteport components."""

from .config import ConfigLoader
from .logging import setup_logging, LogContext
from .logging_config import LoggingConfig
from .errors import SitePortError, ConfigurationError

__all__ = [
    'ConfigLoader',
    'LoggingConfig',
    'setup_logging',
    'LogContext',
    'SitePortError',
    'ConfigurationError',
]
