"""
Domain Layer - value objects and interfaces shared by every component.
"""

from .models import (
    FlatProperties, PropertyStore, ResourceType, NodeKind, node_kind, render_scalar
)
from .interfaces import Resource

__all__ = [
    "FlatProperties",
    "PropertyStore",
    "ResourceType",
    "NodeKind",
    "node_kind",
    "render_scalar",
    "Resource",
]
