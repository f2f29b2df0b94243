"""
properties-reader - read properties and YAML files into a property store

Loads ``.properties`` and YAML resources from files or URLs, flattens nested
YAML into dotted keys, merges everything into a caller-supplied store and
resolves ``${key}`` and ``${env.NAME}`` placeholders in place.
"""

__version__ = "1.0.0"

from .framework import (
    ReadPropertiesGoal,
    ReadPropertiesBuilder,
    ReadPropertiesConfiguration,
    read_project_properties,
)
from .framework.conversion import flatten, convert_to_properties, load_properties
from .framework.resolution import PropertyResolver
from .infrastructure.exceptions import PropertiesReaderException

__all__ = [
    "ReadPropertiesGoal",
    "ReadPropertiesBuilder",
    "ReadPropertiesConfiguration",
    "read_project_properties",
    "flatten",
    "convert_to_properties",
    "load_properties",
    "PropertyResolver",
    "PropertiesReaderException",
]
