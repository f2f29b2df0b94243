"""
Configuration Management

Typed read-properties settings with YAML, environment variable and in-memory
sources, and validation into a typed model.
"""

from .models import ReadPropertiesConfiguration

from .sources import (
    ConfigurationSource,
    YAMLConfigurationSource,
    EnvironmentConfigurationSource,
    DictConfigurationSource,
    merge_sources
)

from .validation import (
    ConfigurationValidator,
    ConfigurationValidationError
)

__all__ = [
    'ReadPropertiesConfiguration',

    'ConfigurationSource',
    'YAMLConfigurationSource',
    'EnvironmentConfigurationSource',
    'DictConfigurationSource',
    'merge_sources',

    'ConfigurationValidator',
    'ConfigurationValidationError',
]
