"""
Placeholder resolution.

A value may reference other properties as ``${name}`` and environment
variables as ``${env.NAME}``. References are expanded recursively; a reference
back to a name that is still being expanded is a circular definition.
"""

import re
from typing import List, Mapping, Optional, Set, Tuple

from ...domain.models import PropertyStore
from ...infrastructure.exceptions import CircularReferenceError, UnresolvableReferenceError
from ...infrastructure.observability import get_logger

PLACEHOLDER_PATTERN = re.compile(r"\$\{([^}]*)\}")
ENV_PREFIX = "env."

logger = get_logger(__name__)


class _Expansion:
    """A value whose placeholders are being substituted one by one."""

    __slots__ = ("name", "value", "matches", "index", "last_end", "parts")

    def __init__(self, name: str, value: str):
        self.name = name
        self.value = value
        self.matches = list(PLACEHOLDER_PATTERN.finditer(value))
        self.index = 0
        self.last_end = 0
        self.parts: List[str] = []

    def pending_reference(self) -> Optional[str]:
        if self.index < len(self.matches):
            return self.matches[self.index].group(1)
        return None

    def substitute(self, replacement: str) -> None:
        match = self.matches[self.index]
        self.parts.append(self.value[self.last_end:match.start()])
        self.parts.append(replacement)
        self.last_end = match.end()
        self.index += 1

    def result(self) -> str:
        return "".join(self.parts) + self.value[self.last_end:]


class PropertyResolver:
    """
    Resolves ``${...}`` placeholders against a property store.

    ``resolve`` is a pure function of its arguments: the store is never
    modified and nothing is cached between calls.
    """

    def resolve(self, key: str, store: Mapping[str, str], environment: Optional[Mapping[str, str]] = None) -> str:
        """
        Return the value of ``key`` with every placeholder expanded.

        Names are looked up in ``store`` first; ``env.NAME`` falls back to
        ``environment`` when one is given.

        Raises:
            CircularReferenceError: if a value refers back to itself, directly or not
            UnresolvableReferenceError: if a placeholder names nothing known
        """
        if key not in store:
            raise UnresolvableReferenceError(
                f"Property '{key}' is not defined",
                key=key,
                placeholder=key
            )

        resolved: dict = {}
        stack = [_Expansion(key, store[key])]
        active: Set[str] = {key}

        while True:
            current = stack[-1]
            reference = current.pending_reference()

            if reference is None:
                stack.pop()
                active.discard(current.name)
                resolved[current.name] = current.result()
                if not stack:
                    return resolved[current.name]
                stack[-1].substitute(resolved[current.name])
                continue

            if reference in resolved:
                current.substitute(resolved[reference])
                continue

            if reference in active:
                chain = [expansion.name for expansion in stack] + [reference]
                raise CircularReferenceError(
                    f"Circular property definition detected for '{key}': {' -> '.join(chain)}",
                    key=key,
                    chain=chain
                )

            found, value = self._lookup(reference, store, environment)
            if not found:
                raise UnresolvableReferenceError(
                    f"Unable to resolve placeholder '${{{reference}}}' in property '{current.name}'",
                    key=key,
                    placeholder=reference,
                    context={'referenced_from': current.name}
                )

            stack.append(_Expansion(reference, value))
            active.add(reference)

    def _lookup(
        self,
        name: str,
        store: Mapping[str, str],
        environment: Optional[Mapping[str, str]]
    ) -> Tuple[bool, str]:
        if name in store:
            return True, store[name]
        if environment is not None and name.startswith(ENV_PREFIX):
            variable = name[len(ENV_PREFIX):]
            if variable in environment:
                return True, environment[variable]
        return False, ""

    def resolve_all(self, store: PropertyStore, environment: Optional[Mapping[str, str]] = None) -> PropertyStore:
        """Overwrite every value in ``store`` with its resolved form, in store order."""
        for key in list(store.keys()):
            store[key] = self.resolve(key, store, environment)
        logger.debug("Resolved property placeholders", extra={'properties': len(store)})
        return store
