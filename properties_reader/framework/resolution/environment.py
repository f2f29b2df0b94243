"""
Environment snapshot used for ``${env.NAME}`` placeholders.
"""

import os
from typing import Iterator, Mapping, Optional

ENV_PLACEHOLDER_MARKER = "${env."


class EnvironmentSnapshot(Mapping[str, str]):
    """
    Immutable copy of environment variables.

    Windows treats variable names case-insensitively, so there the names are
    stored and looked up in upper case.
    """

    def __init__(self, variables: Mapping[str, str], case_sensitive: Optional[bool] = None):
        if case_sensitive is None:
            case_sensitive = os.name != "nt"
        self.case_sensitive = case_sensitive
        self._variables = {self._normalize(name): value for name, value in variables.items()}

    def _normalize(self, name: str) -> str:
        return name if self.case_sensitive else name.upper()

    def __getitem__(self, name: str) -> str:
        return self._variables[self._normalize(name)]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._normalize(name) in self._variables

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def __repr__(self) -> str:
        return f"EnvironmentSnapshot({len(self)} variables, case_sensitive={self.case_sensitive})"


def needs_environment(store: Mapping[str, str]) -> bool:
    """True if any value literally contains ``${env.``."""
    return any(
        isinstance(value, str) and ENV_PLACEHOLDER_MARKER in value
        for value in store.values()
    )


def load_system_environment() -> EnvironmentSnapshot:
    """Snapshot the process environment."""
    return EnvironmentSnapshot(dict(os.environ))
