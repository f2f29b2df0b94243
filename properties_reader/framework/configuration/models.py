"""
Configuration data models with validation.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..conversion.flattener import DEFAULT_MAX_DEPTH
from ..conversion.properties_parser import DEFAULT_ENCODING
from ..resources import has_supported_extension

EXTENSION_HINT = "'.properties', '.yml' or '.yaml'"


class ReadPropertiesConfiguration(BaseModel):
    """Parameters of one read-properties run."""
    files: List[Path] = Field(default_factory=list)
    urls: List[str] = Field(default_factory=list)
    quiet: bool = False
    key_prefix: Optional[str] = None
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1, le=100000)
    classpath: Optional[List[str]] = None
    properties_encoding: str = Field(default=DEFAULT_ENCODING, min_length=1)

    @field_validator('files')
    def validate_file_extensions(cls, v):
        """Every file must be a properties or YAML file."""
        for path in v:
            if not has_supported_extension(path.name):
                raise ValueError(
                    f"File name must end with {EXTENSION_HINT}, while file '{path.name}' was found"
                )
        return v

    @field_validator('urls')
    def validate_url_extensions(cls, v):
        """Every URL must point at a properties or YAML resource."""
        for url in v:
            if not has_supported_extension(url):
                raise ValueError(f"Url must end with {EXTENSION_HINT}, while url '{url}' was found")
        return v

    @model_validator(mode='after')
    def validate_single_source_kind(self):
        """Files and URLs cannot be mixed: their relative precedence would be undefined."""
        if self.files and self.urls:
            raise ValueError(
                "Set files or URLs but not both - otherwise no order of precedence can be guaranteed"
            )
        return self
