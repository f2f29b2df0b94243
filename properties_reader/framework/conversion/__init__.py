"""
Conversion of resource content into flat properties.
"""

from .flattener import DEFAULT_MAX_DEPTH, StructuralFlattener, flatten, join_scalar_sequence
from .yaml_loader import SingleDocumentLoader, load_yaml_document, convert_to_properties
from .properties_parser import DEFAULT_ENCODING, parse_properties, load_properties

__all__ = [
    'DEFAULT_MAX_DEPTH',
    'StructuralFlattener',
    'flatten',
    'join_scalar_sequence',
    'SingleDocumentLoader',
    'load_yaml_document',
    'convert_to_properties',
    'DEFAULT_ENCODING',
    'parse_properties',
    'load_properties',
]
