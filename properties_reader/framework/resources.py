"""
File and URL resources.

Resources are classified and syntax-checked when constructed; nothing is read
until ``open_stream`` is called.
"""

import io
import sys
import urllib.request
from pathlib import Path
from typing import BinaryIO, Iterable, List, Optional, Sequence, Union
from urllib.parse import ParseResult, urlparse

import httpx

from ..domain.interfaces import Resource
from ..domain.models import ResourceType
from ..infrastructure.exceptions import ConfigurationError, ResourceUnavailableError

CLASSPATH_PREFIX = "classpath:"
HTTP_SCHEMES = frozenset({"http", "https"})
SUPPORTED_URL_SCHEMES = frozenset({"file", "ftp"}) | HTTP_SCHEMES
SUPPORTED_RESOURCE_TYPES = (ResourceType.PROPERTIES, ResourceType.YAML)

DEFAULT_HTTP_TIMEOUT = 30.0


def identify_resource_type(name: str) -> ResourceType:
    """Classify ``name`` by suffix; an unknown suffix is a configuration error."""
    resource_type = ResourceType.from_file_name(name)
    if resource_type is None or resource_type not in SUPPORTED_RESOURCE_TYPES:
        raise ConfigurationError(f"Cannot find a resource type for {name}", parameter=name)
    return resource_type


def has_supported_extension(name: str) -> bool:
    lowered = name.lower()
    return any(
        lowered.endswith(extension)
        for extension in ResourceType.all_file_extensions(*SUPPORTED_RESOURCE_TYPES)
    )


def _open_local_file(path: Path, resource: str) -> BinaryIO:
    if not path.exists():
        raise ResourceUnavailableError(f"File not found: {path}", resource=resource)
    if not path.is_file():
        raise ResourceUnavailableError(f"File expected, but {path} is not a file", resource=resource)
    try:
        return open(path, "rb")
    except OSError as e:
        raise ResourceUnavailableError(f"Cannot open {path}: {e}", resource=resource, cause=e) from e


class FileResource(Resource):
    """A properties or YAML file on the local file system."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(identify_resource_type(self.path.name))

    def open_stream(self) -> BinaryIO:
        return _open_local_file(self.path, self.describe())

    def describe(self) -> str:
        return f"File: {self.path}"


class UrlResource(Resource):
    """
    A resource addressed by URL.

    ``http`` and ``https`` are fetched with httpx, ``file`` URLs are opened
    from the local file system and ``ftp`` goes through ``urllib``.
    ``classpath:path/to/file.yml`` (an optional leading ``/`` is ignored) is
    looked up relative to each classpath root in turn, ``sys.path`` by default.
    """

    def __init__(
        self,
        url: str,
        classpath: Optional[Sequence[Union[str, Path]]] = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT
    ):
        super().__init__(identify_resource_type(url))
        self.url = url
        self.timeout = timeout
        self.classpath_entry: Optional[str] = None
        self._classpath = classpath
        self._parsed: Optional[ParseResult] = None

        if url.startswith(CLASSPATH_PREFIX):
            entry = url[len(CLASSPATH_PREFIX):]
            if entry.startswith("/"):
                entry = entry[1:]
            self.classpath_entry = entry
            return

        try:
            parsed = urlparse(url)
        except ValueError as e:
            raise ConfigurationError(f"Badly formed URL {url} - {e}", parameter=url, cause=e) from e
        scheme = parsed.scheme.lower()
        if not scheme:
            raise ConfigurationError(f"Badly formed URL {url} - no protocol", parameter=url)
        if scheme not in SUPPORTED_URL_SCHEMES:
            raise ConfigurationError(f"Badly formed URL {url} - unknown protocol: {scheme}", parameter=url)
        self._parsed = parsed._replace(scheme=scheme)

    def _classpath_roots(self) -> List[Path]:
        roots: Iterable[Union[str, Path]] = self._classpath if self._classpath is not None else sys.path
        return [Path(root) if root else Path.cwd() for root in roots]

    def locate_classpath_entry(self) -> Optional[Path]:
        """First classpath root containing the entry, or None."""
        if self.classpath_entry is None:
            return None
        for root in self._classpath_roots():
            candidate = root / self.classpath_entry
            if candidate.is_file():
                return candidate
        return None

    def open_stream(self) -> BinaryIO:
        if self.classpath_entry is not None:
            location = self.locate_classpath_entry()
            if location is None:
                raise ResourceUnavailableError(
                    f"Classpath resource not found: {self.classpath_entry}",
                    resource=self.describe()
                )
            return _open_local_file(location, self.describe())

        if self._parsed.scheme in HTTP_SCHEMES:
            return self._fetch_http()
        if self._parsed.scheme == "file":
            return self._open_file_url()
        return self._open_with_urllib()

    def _fetch_http(self) -> BinaryIO:
        try:
            with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                response = client.get(self.url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise ResourceUnavailableError(
                f"Cannot open URL {self.url}: {e}",
                resource=self.describe(),
                cause=e
            ) from e
        return io.BytesIO(response.content)

    def _open_file_url(self) -> BinaryIO:
        if self._parsed.netloc not in ("", "localhost"):
            raise ResourceUnavailableError(
                f"Cannot open URL {self.url}: remote host {self._parsed.netloc} in file URL",
                resource=self.describe()
            )
        path = Path(urllib.request.url2pathname(self._parsed.path))
        return _open_local_file(path, self.describe())

    def _open_with_urllib(self) -> BinaryIO:
        try:
            return urllib.request.urlopen(self.url, timeout=self.timeout)
        except (OSError, ValueError) as e:
            raise ResourceUnavailableError(
                f"Cannot open URL {self.url}: {e}",
                resource=self.describe(),
                cause=e
            ) from e

    def describe(self) -> str:
        if self.classpath_entry is not None:
            return self.url
        return f"URL {self.url}"
