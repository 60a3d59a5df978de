"""Configuration schema for package import."""

from typing import List

from pydantic import BaseModel, Field, ConfigDict, field_validator
from siteport.common import LoggingConfig


class PackagesConfig(BaseModel):
    """Where export packages are read from."""
    
    model_config = ConfigDict(extra='forbid')
    
    export_folder: str = Field(
        default="./exports",
        description="Folder containing one subfolder per export package"
    )


class HandlersConfig(BaseModel):
    """Content handler plugins."""
    
    model_config = ConfigDict(extra='forbid')
    
    modules: List[str] = Field(
        default_factory=list,
        description="Modules imported at startup so their handlers register themselves"
    )
    
    @field_validator('modules', mode='before')
    @classmethod
    def split_modules(cls, v):
        """Accept a single comma-separated string (e.g. from the environment)."""
        if isinstance(v, str):
            return [m.strip() for m in v.split(",") if m.strip()]
        return v


class SitePortConfig(BaseModel):
    """Root configuration for package import."""
    
    model_config = ConfigDict(extra='forbid')
    
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    packages: PackagesConfig = Field(default_factory=PackagesConfig)
    handlers: HandlersConfig = Field(default_factory=HandlersConfig)
