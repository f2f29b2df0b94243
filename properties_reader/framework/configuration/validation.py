"""
Validation of raw read-properties settings.

Settings arrive as plain dictionaries (merged sources, keyword arguments)
and leave as a :class:`ReadPropertiesConfiguration`, or as a
:class:`ConfigurationValidationError` listing every problem pydantic found.
"""

import os
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from ...infrastructure.exceptions import ConfigurationError
from .models import ReadPropertiesConfiguration

ENVIRONMENT_PREFIX = "PROPERTIES_READER_"


class ConfigurationValidationError(ConfigurationError):
    """Settings rejected by the configuration model; one entry per failed field."""

    def __init__(self, message: str, validation_errors: List[Dict[str, Any]]):
        super().__init__(
            message,
            validation_errors=validation_errors,
            error_code="CONFIGURATION_VALIDATION_ERROR"
        )
        self.validation_errors = validation_errors

    def get_detailed_message(self) -> str:
        """The summary followed by one ``- location: message`` line per error."""
        details = [
            f"- {' -> '.join(str(part) for part in error.get('loc', [])) or 'root'}: "
            f"{error.get('msg', 'Unknown error')}"
            for error in self.validation_errors
        ]
        return "\n".join([self.message, "Validation errors:", *details])


def _error_entries(error: ValidationError) -> List[Dict[str, Any]]:
    return [
        {'loc': list(detail['loc']), 'msg': detail['msg'], 'type': detail['type']}
        for detail in error.errors()
    ]


def _unknown(names: Iterable[str]) -> List[str]:
    return [name for name in names if name not in ConfigurationValidator.KNOWN_KEYS]


class ConfigurationValidator:
    """Builds configurations from raw settings and reports keys it does not know."""

    KNOWN_KEYS = frozenset(ReadPropertiesConfiguration.model_fields)

    @staticmethod
    def build_configuration(config_data: Mapping[str, Any]) -> ReadPropertiesConfiguration:
        """
        Validate ``config_data`` and build the configuration model.

        Keys the model does not define are dropped; ``validate_configuration``
        reports them.

        Raises:
            ConfigurationValidationError: if any known setting is invalid
        """
        settings = {
            key: value for key, value in config_data.items()
            if key in ConfigurationValidator.KNOWN_KEYS
        }
        try:
            return ReadPropertiesConfiguration(**settings)
        except ValidationError as e:
            entries = _error_entries(e)
            raise ConfigurationValidationError(
                "Invalid read-properties configuration: " + "; ".join(entry['msg'] for entry in entries),
                entries
            ) from e

    @staticmethod
    def validate_configuration(config_data: Mapping[str, Any]) -> List[str]:
        """
        Check ``config_data`` and list the keys that would be ignored.

        Returns:
            One ``Unknown configuration key`` warning per unknown key

        Raises:
            ConfigurationValidationError: if any known setting is invalid
        """
        ConfigurationValidator.build_configuration(config_data)
        return [f"Unknown configuration key: {key}" for key in _unknown(config_data)]

    @staticmethod
    def validate_environment_variables(
        prefix: str = ENVIRONMENT_PREFIX,
        environ: Optional[Mapping[str, str]] = None
    ) -> List[str]:
        """List variables carrying ``prefix`` that name no setting."""
        prefix = prefix.upper()
        environ = os.environ if environ is None else environ
        variables = {
            name[len(prefix):].lower(): name
            for name in environ
            if name.startswith(prefix)
        }
        return [f"Unknown environment variable: {variables[key]}" for key in _unknown(variables)]
