"""
Core Domain Interfaces

A resource is anything that yields a byte stream of properties or YAML data.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO

from .models import ResourceType


class Resource(ABC):
    """
    Abstract source of bytes classified by a declared resource type.

    Implementations must not perform I/O when constructed; opening happens in
    ``open_stream`` so that parameter problems are reported before any read.
    """

    def __init__(self, resource_type: ResourceType):
        self._resource_type = resource_type

    @property
    def resource_type(self) -> ResourceType:
        return self._resource_type

    @abstractmethod
    def open_stream(self) -> BinaryIO:
        """
        Open the resource for reading.

        Returns:
            BinaryIO: a binary stream the caller is responsible for closing

        Raises:
            ResourceUnavailableError: if the resource cannot be opened
        """
        pass

    @abstractmethod
    def describe(self) -> str:
        """Human-readable location used in log records and error messages."""
        pass

    def __str__(self) -> str:
        return self.describe()
