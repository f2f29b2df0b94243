"""
Structural flattening of parsed documents into dotted-key properties.

Nested mappings become dotted paths (``{a: {b: v}}`` -> ``a.b=v``). Traversal
uses an explicit work stack, so document depth is limited by ``max_depth``
rather than by the interpreter's recursion limit.

Sequences follow the historical format of the properties plugin:

* a sequence of scalars is stored as one value made of a comma followed by the
  concatenation of every element, e.g. ``[x, y]`` -> ``",xy"``. Consumers parse
  this exact format, so it is reproduced as-is;
* a sequence of mappings keeps only its last element, flattened under the
  sequence key; earlier elements are discarded entirely;
* anything else (mixed elements, nested sequences) is rejected.
"""

from typing import Any, List, Optional, Tuple

from ...domain.models import FlatProperties, NodeKind, node_kind, render_scalar
from ...infrastructure.exceptions import HierarchyTooDeepError, UnsupportedStructureError

DEFAULT_MAX_DEPTH = 256

SEQUENCE_LEADING_SEPARATOR = ","


def _child_path(prefix: Optional[str], key: str) -> str:
    return key if prefix is None else f"{prefix}.{key}"


def _render_key(key: Any, prefix: Optional[str]) -> str:
    if node_kind(key) is not NodeKind.SCALAR:
        raise UnsupportedStructureError(
            f"Mapping keys must be scalars, found {type(key).__name__}",
            path=prefix
        )
    return render_scalar(key)


def join_scalar_sequence(elements: List[Any]) -> str:
    """Render a sequence of scalars: separator before the first element only."""
    if not elements:
        return ""
    return SEQUENCE_LEADING_SEPARATOR + "".join(render_scalar(element) for element in elements)


class StructuralFlattener:
    """Converts a parsed hierarchical document into insertion-ordered flat properties."""

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.max_depth = max_depth

    def flatten(self, root: Any) -> FlatProperties:
        """
        Flatten ``root`` into dotted keys.

        Args:
            root: Parsed document; anything but a mapping yields no properties

        Returns:
            FlatProperties: dotted key -> string value, in traversal order

        Raises:
            HierarchyTooDeepError: if mappings nest deeper than ``max_depth``
            UnsupportedStructureError: for node types the format cannot express
        """
        flattened: FlatProperties = {}
        if node_kind(root) is not NodeKind.MAPPING:
            return flattened

        # (path, node, depth); only the root has no path.
        # Children are pushed reversed to keep document order.
        stack: List[Tuple[Optional[str], Any, int]] = [(None, root, 1)]

        while stack:
            path, node, depth = stack.pop()
            kind = node_kind(node)

            if kind is NodeKind.MAPPING:
                if depth > self.max_depth:
                    raise HierarchyTooDeepError(
                        f"The document has too many hierarchies (more than {self.max_depth} levels)",
                        max_depth=self.max_depth,
                        path=path
                    )
                children = [
                    (_child_path(path, _render_key(key, path)), value, depth + 1)
                    for key, value in node.items()
                ]
                stack.extend(reversed(children))

            elif kind is NodeKind.SEQUENCE:
                stack.extend(reversed(self._expand_sequence(path, node, depth)))

            elif kind is NodeKind.SCALAR:
                flattened[path] = render_scalar(node)

            else:
                raise UnsupportedStructureError(
                    f"Unsupported value of type {type(node).__name__} at '{path}'",
                    path=path
                )

        return flattened

    def _expand_sequence(self, path: str, elements: List[Any], depth: int) -> List[Tuple[str, Any, int]]:
        kinds = {node_kind(element) for element in elements}

        if not kinds or kinds == {NodeKind.SCALAR}:
            # Stored as a pre-rendered scalar so it lands at the sequence's position.
            return [(path, join_scalar_sequence(elements), depth)]

        if kinds == {NodeKind.MAPPING}:
            return [(path, elements[-1], depth)]

        if NodeKind.SEQUENCE in kinds:
            message = f"Nested sequences are not supported at '{path}'"
        elif None in kinds:
            message = f"Unsupported sequence element at '{path}'"
        else:
            message = f"Sequence at '{path}' mixes scalars and mappings"
        raise UnsupportedStructureError(message, path=path)


def flatten(root: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> FlatProperties:
    """Flatten ``root`` with a one-off :class:`StructuralFlattener`."""
    return StructuralFlattener(max_depth).flatten(root)
