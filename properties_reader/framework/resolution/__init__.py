"""
Placeholder resolution against a property store and the environment.
"""

from .resolver import PLACEHOLDER_PATTERN, ENV_PREFIX, PropertyResolver
from .environment import (
    ENV_PLACEHOLDER_MARKER, EnvironmentSnapshot, needs_environment, load_system_environment
)

__all__ = [
    'PLACEHOLDER_PATTERN',
    'ENV_PREFIX',
    'PropertyResolver',
    'ENV_PLACEHOLDER_MARKER',
    'EnvironmentSnapshot',
    'needs_environment',
    'load_system_environment',
]
