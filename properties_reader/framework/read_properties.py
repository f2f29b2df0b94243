"""
The read-properties goal.

Reads property files or URLs into a caller-owned property store, then resolves
every ``${...}`` placeholder in that store.
"""

from contextlib import closing
from typing import BinaryIO, Callable, List, Mapping, Optional

from ..domain.interfaces import Resource
from ..domain.models import FlatProperties, PropertyStore, ResourceType
from ..infrastructure.exceptions import ConfigurationError, ResourceUnavailableError
from ..infrastructure.observability import get_logger
from .configuration.models import ReadPropertiesConfiguration
from .configuration.validation import ConfigurationValidator
from .conversion.properties_parser import load_properties
from .conversion.yaml_loader import convert_to_properties
from .resolution.environment import load_system_environment, needs_environment
from .resolution.resolver import PropertyResolver
from .resources import FileResource, UrlResource

logger = get_logger(__name__)

EnvironmentProvider = Callable[[], Mapping[str, str]]


class ReadPropertiesGoal:
    """
    Loads the configured resources into ``store`` and resolves placeholders.

    Resources are processed in declaration order, so a key defined by a later
    resource overwrites the same key from an earlier one. Keys already in the
    store before ``execute`` are kept and resolved as well.
    """

    def __init__(
        self,
        configuration: ReadPropertiesConfiguration,
        store: Optional[PropertyStore] = None,
        resolver: Optional[PropertyResolver] = None,
        environment_provider: EnvironmentProvider = load_system_environment
    ):
        self.configuration = configuration
        self.store: PropertyStore = store if store is not None else {}
        self.resolver = resolver or PropertyResolver()
        self.environment_provider = environment_provider

    def execute(self) -> PropertyStore:
        """
        Run the goal.

        Returns:
            The target store, updated in place

        Raises:
            ConfigurationError: invalid parameters, reported before any I/O
            ResourceUnavailableError: a resource cannot be opened and quiet is off
            ParseError: malformed or multi-document content
            HierarchyTooDeepError: a YAML document nests too deeply
            ResolutionError: circular or unresolvable placeholders
        """
        with logger.correlation_context():
            resources = self.check_parameters()

            for resource in resources:
                self._load(resource)

            self._resolve_properties()

            logger.info(
                "Read project properties",
                extra={'resources': len(resources), 'properties': len(self.store)}
            )
        return self.store

    def check_parameters(self) -> List[Resource]:
        """Validate the parameters and build the resources without touching them."""
        configuration = ConfigurationValidator.build_configuration(self.configuration.model_dump())

        resources: List[Resource] = [FileResource(path) for path in configuration.files]
        resources.extend(UrlResource(url, configuration.classpath) for url in configuration.urls)
        return resources

    def _load(self, resource: Resource) -> None:
        try:
            stream = resource.open_stream()
        except ResourceUnavailableError as e:
            self._missing(resource, e)
            return

        with logger.resource_context(resource.describe()):
            logger.debug("Loading properties")
            with closing(stream):
                properties = self._read(resource, stream)
            self._merge(properties)
            logger.debug("Loaded properties", extra={'count': len(properties)})

    def _read(self, resource: Resource, stream: BinaryIO) -> FlatProperties:
        source = resource.describe()
        if resource.resource_type is ResourceType.PROPERTIES:
            return load_properties(stream, self.configuration.properties_encoding, source)
        if resource.resource_type is ResourceType.YAML:
            return convert_to_properties(stream, self.configuration.max_depth, source)
        raise ConfigurationError(
            f"Error reading properties from {resource}: resource type {resource.resource_type} is unknown",
            parameter=source
        )

    def _merge(self, properties: FlatProperties) -> None:
        prefix = self.configuration.key_prefix or ""
        for key, value in properties.items():
            self.store[prefix + key] = value

    def _missing(self, resource: Resource, error: ResourceUnavailableError) -> None:
        if self.configuration.quiet:
            logger.info(
                "Quiet processing - ignoring properties that cannot be loaded",
                extra={'resource': resource.describe(), 'reason': error.message}
            )
            return
        raise ResourceUnavailableError(
            f"Properties could not be loaded from {resource}",
            resource=resource.describe(),
            context={'reason': error.message},
            cause=error
        ) from error

    def _resolve_properties(self) -> None:
        # The environment is only read when some value actually references it.
        environment = self.environment_provider() if needs_environment(self.store) else None
        self.resolver.resolve_all(self.store, environment)


def read_project_properties(
    store: Optional[PropertyStore] = None,
    files: Optional[List[str]] = None,
    urls: Optional[List[str]] = None,
    quiet: bool = False,
    key_prefix: Optional[str] = None,
    **settings
) -> PropertyStore:
    """Validate the given parameters, run the goal once and return the store."""
    configuration = ConfigurationValidator.build_configuration({
        'files': files or [],
        'urls': urls or [],
        'quiet': quiet,
        'key_prefix': key_prefix,
        **settings
    })
    return ReadPropertiesGoal(configuration, store).execute()
