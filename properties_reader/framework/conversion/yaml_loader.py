"""
Single-document YAML loading.
"""

from typing import Any, BinaryIO, Optional, Union

import yaml

from ...domain.models import FlatProperties
from ...infrastructure.exceptions import HierarchyTooDeepError, MultiDocumentError, ParseError
from .flattener import DEFAULT_MAX_DEPTH, StructuralFlattener


class SingleDocumentLoader(yaml.SafeLoader):
    """SafeLoader that reports a second document with a dedicated error."""

    def get_single_node(self):
        # Drop the STREAM-START event.
        self.get_event()
        document = None
        if not self.check_event(yaml.StreamEndEvent):
            document = self.compose_document()
        if not self.check_event(yaml.StreamEndEvent):
            event = self.get_event()
            raise MultiDocumentError(
                "Expected a single document in the YAML stream but found another document",
                line=event.start_mark.line + 1
            )
        # Drop the STREAM-END event.
        self.get_event()
        return document


def load_yaml_document(stream: Union[BinaryIO, bytes, str], source: Optional[str] = None) -> Any:
    """
    Parse exactly one YAML document.

    Byte input is decoded by PyYAML, which honours a UTF-8 or UTF-16 byte
    order mark and defaults to UTF-8.

    Args:
        stream: Binary stream, bytes or text holding the document
        source: Resource description used in error context

    Returns:
        The parsed document, or None for an empty stream or a ``null`` document

    Raises:
        MultiDocumentError: if the stream holds more than one document
        ParseError: if the content is not valid YAML
        HierarchyTooDeepError: if the parser runs out of stack on deep nesting
    """
    loader = SingleDocumentLoader(stream)
    try:
        return loader.get_single_data()
    except MultiDocumentError as e:
        if source:
            e.context['resource'] = source
        raise
    except yaml.MarkedYAMLError as e:
        mark = e.problem_mark or e.context_mark
        raise ParseError(
            f"Invalid YAML content: {e.problem or e}",
            resource=source,
            line=mark.line + 1 if mark else None,
            cause=e
        ) from e
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML content: {e}", resource=source, cause=e) from e
    except RecursionError as e:
        raise HierarchyTooDeepError(
            "The YAML document has too many hierarchies to be parsed",
            context={'resource': source} if source else None,
            cause=e
        ) from e
    finally:
        loader.dispose()


def convert_to_properties(
    stream: Union[BinaryIO, bytes, str],
    max_depth: int = DEFAULT_MAX_DEPTH,
    source: Optional[str] = None
) -> FlatProperties:
    """Parse one YAML document and flatten it into dotted-key properties."""
    document = load_yaml_document(stream, source)
    try:
        return StructuralFlattener(max_depth).flatten(document)
    except (HierarchyTooDeepError, ParseError) as e:
        if source:
            e.context.setdefault('resource', source)
        raise
