"""
Builder for read-properties goals.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..domain.models import PropertyStore
from .read_properties import EnvironmentProvider, ReadPropertiesGoal
from .resolution.environment import load_system_environment
from .configuration.models import ReadPropertiesConfiguration
from .configuration.sources import (
    ConfigurationSource, DictConfigurationSource, EnvironmentConfigurationSource,
    YAMLConfigurationSource, merge_sources
)
from .configuration.validation import ConfigurationValidator


class ReadPropertiesBuilder:
    """
    Builder for creating ReadPropertiesGoal instances from several sources.

    Settings given directly on the builder take precedence over every added
    source; among sources a higher priority wins.
    """

    def __init__(self):
        self._sources: List[ConfigurationSource] = []
        self._settings: Dict[str, Any] = {}
        self._environment_provider: EnvironmentProvider = load_system_environment

    def add_file(self, path: Union[str, Path]) -> 'ReadPropertiesBuilder':
        self._settings.setdefault('files', []).append(path)
        return self

    def add_url(self, url: str) -> 'ReadPropertiesBuilder':
        self._settings.setdefault('urls', []).append(url)
        return self

    def quiet(self, enable: bool = True) -> 'ReadPropertiesBuilder':
        """Skip resources that cannot be opened instead of failing."""
        self._settings['quiet'] = enable
        return self

    def key_prefix(self, prefix: Optional[str]) -> 'ReadPropertiesBuilder':
        self._settings['key_prefix'] = prefix
        return self

    def max_depth(self, depth: int) -> 'ReadPropertiesBuilder':
        self._settings['max_depth'] = depth
        return self

    def classpath(self, roots: List[Union[str, Path]]) -> 'ReadPropertiesBuilder':
        self._settings['classpath'] = [str(root) for root in roots]
        return self

    def add_yaml_source(self, path: Union[str, Path], priority: int = 100) -> 'ReadPropertiesBuilder':
        """
        Add a YAML settings file.

        Args:
            path: Path to the YAML settings file
            priority: Priority of this source (higher = more important)
        """
        self._sources.append(YAMLConfigurationSource(path, priority))
        return self

    def add_environment_source(self, prefix: str = "PROPERTIES_READER_", priority: int = 200) -> 'ReadPropertiesBuilder':
        """
        Add environment variable settings.

        Args:
            prefix: Environment variable prefix (default: PROPERTIES_READER_)
            priority: Priority of this source (higher = more important)
        """
        self._sources.append(EnvironmentConfigurationSource(prefix, priority))
        return self

    def add_source(self, source: ConfigurationSource) -> 'ReadPropertiesBuilder':
        """Add a custom configuration source."""
        self._sources.append(source)
        return self

    def environment_provider(self, provider: EnvironmentProvider) -> 'ReadPropertiesBuilder':
        """Replace the environment used for ``${env.*}`` placeholders."""
        self._environment_provider = provider
        return self

    def build_configuration(self) -> ReadPropertiesConfiguration:
        sources = list(self._sources)
        if self._settings:
            highest = max((source.get_priority() for source in sources), default=0)
            sources.append(DictConfigurationSource(self._settings, max(highest + 1, 300)))
        return ConfigurationValidator.build_configuration(merge_sources(sources))

    def build(self, store: Optional[PropertyStore] = None) -> ReadPropertiesGoal:
        """
        Build the goal with all added sources merged.

        Raises:
            ConfigurationValidationError: if the merged settings are invalid
        """
        return ReadPropertiesGoal(
            self.build_configuration(),
            store=store,
            environment_provider=self._environment_provider
        )
