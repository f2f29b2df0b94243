"""
Core Domain Models

Value objects shared by the loaders, the flattener and the resolver.
"""

import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, MutableMapping, Optional, Set


# Insertion-ordered dotted key -> string value.
FlatProperties = Dict[str, str]

# Caller-owned target store; only read and overwritten by key.
PropertyStore = MutableMapping[str, str]


class ResourceType(Enum):
    """Kind of resource, identified by the file name suffix."""
    PROPERTIES = (".properties",)
    YAML = (".yml", ".yaml")

    @property
    def file_extensions(self) -> FrozenSet[str]:
        return frozenset(self.value)

    @classmethod
    def from_file_name(cls, file_name: str) -> Optional["ResourceType"]:
        """Return the type whose extension ends ``file_name`` (case-insensitive), or None."""
        lowered = file_name.lower()
        for resource_type in cls:
            for extension in resource_type.value:
                if lowered.endswith(extension):
                    return resource_type
        return None

    @staticmethod
    def all_file_extensions(*resource_types: "ResourceType") -> Set[str]:
        extensions: Set[str] = set()
        for resource_type in resource_types:
            extensions.update(resource_type.file_extensions)
        return extensions


class NodeKind(Enum):
    """Closed set of node kinds a parsed document may contain."""
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SCALAR = "scalar"


_SCALAR_TYPES = (str, int, float, bool, date, datetime, type(None))


def node_kind(value: Any) -> Optional[NodeKind]:
    """Classify a parsed value; None means the value is not a supported node."""
    if isinstance(value, dict):
        return NodeKind.MAPPING
    if isinstance(value, list):
        return NodeKind.SEQUENCE
    if isinstance(value, _SCALAR_TYPES):
        return NodeKind.SCALAR
    return None


def _render_float(value: float) -> str:
    """Java's ``Double.toString`` form: plain between 1e-3 and 1e7, else ``d.dddE<n>``."""
    if value == 0 or 1e-3 <= abs(value) < 1e7:
        return repr(value)
    sign = "-" if value < 0 else ""
    mantissa, _, exponent = repr(abs(value)).partition("e")
    whole, _, fraction = mantissa.partition(".")
    digits = whole + fraction
    point = len(whole) + int(exponent or 0)
    stripped = digits.lstrip("0")
    point -= len(digits) - len(stripped)
    digits = stripped.rstrip("0") or "0"
    return f"{sign}{digits[0]}.{digits[1:] or '0'}E{point - 1}"


def render_scalar(value: Any) -> str:
    """
    Render a scalar the way the properties format expects it.

    None renders as an empty string and booleans in lower case, so that
    ``enabled: true`` reads back as ``true`` and ``empty:`` as ``""``.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return _render_float(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)
