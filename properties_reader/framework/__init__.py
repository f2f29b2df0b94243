"""
Framework Layer - loading, flattening, resolution and the read-properties goal.
"""

from .read_properties import ReadPropertiesGoal, read_project_properties
from .builder import ReadPropertiesBuilder
from .configuration import ReadPropertiesConfiguration
from .resources import FileResource, UrlResource

__all__ = [
    "ReadPropertiesGoal",
    "read_project_properties",
    "ReadPropertiesBuilder",
    "ReadPropertiesConfiguration",
    "FileResource",
    "UrlResource",
]
