"""Configuration schema for zipmeta-arrow."""

from typing import Literal, Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator

from .config_loader import ConfigLoader


class LoggingConfig(BaseModel):
    """Console and file logging."""
    
    model_config = ConfigDict(extra='forbid')
    
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level"
    )
    format: Literal["simple", "detailed", "json"] = Field(
        default="simple",
        description="Console log format; the log file is always JSON"
    )
    file: Optional[str] = Field(default=None, description="Optional log file path")
    
    @field_validator('level', 'format', mode='before')
    @classmethod
    def normalize_case(cls, v, info):
        """Accept level and format in any case."""
        if isinstance(v, str):
            return v.upper() if info.field_name == 'level' else v.lower()
        return v


class SourceConfig(BaseModel):
    """Where the archive to convert comes from."""
    
    model_config = ConfigDict(extra='forbid')
    
    zip_filename: Optional[str] = Field(
        default=None,
        description="Path of the ZIP archive to convert"
    )
    filename_env_var: str = Field(
        default="ZIP_FILENAME",
        min_length=1,
        description="Environment variable consulted for the archive path"
    )


class OutputConfig(BaseModel):
    """How the resulting table is printed."""
    
    model_config = ConfigDict(extra='forbid')
    
    max_rows: int = Field(
        default=0,
        ge=0,
        description="Maximum rows to print (0 prints every row)"
    )
    show_schema: bool = Field(
        default=True,
        description="Print the table schema before the rows"
    )


class ZipMetaArrowConfig(BaseModel):
    """Root configuration for zipmeta-arrow."""
    
    model_config = ConfigDict(extra='forbid')
    
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    source: SourceConfig = Field(default_factory=SourceConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


__all__ = [
    "ConfigLoader",
    "LoggingConfig",
    "SourceConfig",
    "OutputConfig",
    "ZipMetaArrowConfig",
]
