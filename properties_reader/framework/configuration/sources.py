"""
Where read-properties settings come from.

Every source yields a plain dictionary of settings and has a priority;
:func:`merge_sources` layers them so that higher priorities win key by key.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import yaml

from ...infrastructure.exceptions import ConfigurationError


class ConfigurationSource(ABC):
    """A provider of raw settings."""

    @abstractmethod
    def load(self) -> Dict[str, Any]:
        """Return the settings this source defines; absent keys are left to other sources."""
        pass

    @abstractmethod
    def get_priority(self) -> int:
        """Rank among sources; a larger number overrides a smaller one."""
        pass


class YAMLConfigurationSource(ConfigurationSource):
    """
    Settings file in YAML.

    Example:
        files:
          - config/application.yml
        quiet: true
        key_prefix: app.
    """

    def __init__(self, file_path: Union[str, Path], priority: int = 100):
        self.file_path = Path(file_path)
        self.priority = priority

    def _error(self, message: str, error_code: str, cause: Optional[Exception] = None) -> ConfigurationError:
        context = {"file_path": str(self.file_path)}
        if cause is not None:
            context["error"] = str(cause)
        return ConfigurationError(f"{message}: {self.file_path}", error_code=error_code, context=context, cause=cause)

    def load(self) -> Dict[str, Any]:
        if not self.file_path.is_file():
            raise self._error("Configuration file not found", "CONFIG_FILE_NOT_FOUND")

        try:
            text = self.file_path.read_text(encoding='utf-8')
        except OSError as e:
            raise self._error("Error reading configuration file", "CONFIG_READ_ERROR", e) from e

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise self._error("Invalid YAML in configuration file", "INVALID_YAML", e) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise self._error("Configuration file must contain a mapping", "INVALID_YAML")
        return data

    def get_priority(self) -> int:
        return self.priority


def _parse_bool(value: str) -> Any:
    lowered = value.strip().lower()
    if lowered in ('true', 'yes', 'on', '1'):
        return True
    if lowered in ('false', 'no', 'off', '0'):
        return False
    return value


def _parse_int(value: str) -> Any:
    try:
        return int(value.strip())
    except ValueError:
        return value


def _parse_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(',') if item.strip()]


class EnvironmentConfigurationSource(ConfigurationSource):
    """
    Environment variable configuration source.

    ``PROPERTIES_READER_FILES=a.yml,b.properties`` sets ``files`` and so on.
    Values that cannot be parsed are passed through unchanged so that model
    validation reports them.
    """

    FIELD_PARSERS: Dict[str, Callable[[str], Any]] = {
        'files': _parse_list,
        'urls': _parse_list,
        'classpath': _parse_list,
        'quiet': _parse_bool,
        'max_depth': _parse_int,
        'key_prefix': str,
        'properties_encoding': str,
    }

    def __init__(self, prefix: str = "PROPERTIES_READER_", priority: int = 200,
                 environ: Optional[Dict[str, str]] = None):
        self.prefix = prefix.upper()
        self.priority = priority
        self._environ = environ

    def load(self) -> Dict[str, Any]:
        environ = self._environ if self._environ is not None else os.environ
        settings: Dict[str, Any] = {}

        for name, raw in environ.items():
            if not name.startswith(self.prefix):
                continue
            setting = name[len(self.prefix):].lower()
            parser = self.FIELD_PARSERS.get(setting)
            if parser is not None:
                settings[setting] = parser(raw)

        return settings

    def get_priority(self) -> int:
        return self.priority


class DictConfigurationSource(ConfigurationSource):
    """In-memory settings, e.g. values given on the command line."""

    def __init__(self, data: Dict[str, Any], priority: int = 300):
        self.data = dict(data)
        self.priority = priority

    def load(self) -> Dict[str, Any]:
        return dict(self.data)

    def get_priority(self) -> int:
        return self.priority


def merge_sources(sources: List[ConfigurationSource]) -> Dict[str, Any]:
    """Merge sources lowest priority first; later values replace earlier ones."""
    merged: Dict[str, Any] = {}
    for source in sorted(sources, key=lambda s: s.get_priority()):
        merged.update(source.load())
    return merged
