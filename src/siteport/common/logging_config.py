"""Logging section of the siteport configuration."""

import os
from typing import Literal

from pydantic import BaseModel, Field, ConfigDict, field_validator


class LoggingConfig(BaseModel):
    """Console level/format and an optional JSON log file."""

    model_config = ConfigDict(extra='forbid')

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level"
    )
    format: Literal["simple", "detailed", "json"] = Field(
        default="simple",
        description="Console log format"
    )
    file: str | None = Field(
        default=None,
        description="Optional log file path; ~ and environment variables are expanded"
    )

    @field_validator('level', 'format', mode='before')
    @classmethod
    def normalize_case(cls, v, info):
        """Accept levels and formats in any case."""
        if not isinstance(v, str):
            return v
        return v.upper() if info.field_name == 'level' else v.lower()

    @field_validator('file')
    @classmethod
    def expand_file(cls, v: str | None) -> str | None:
        if not v:
            return None
        return os.path.expandvars(os.path.expanduser(v))
