"""Resources: locatable documents on disk, over HTTP or in memory."""

from __future__ import annotations

import glob
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urljoin, urlsplit
from urllib.request import url2pathname

import requests

from blueprint.config import HTTP_TIMEOUT

URL_SCHEMES = ("http", "https", "file")
GLOB_CHARACTERS = ("*", "?")
FOLDER_SEPARATOR = "/"


class Resource(ABC):
    """A readable document identified by a location."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human readable description used in problem reports."""

    @property
    @abstractmethod
    def url(self) -> str:
        """Absolute URL of this resource.

        Raises:
            OSError: If the resource cannot be expressed as a URL
        """

    @abstractmethod
    def exists(self) -> bool: ...

    @abstractmethod
    def read_bytes(self) -> bytes:
        """Read the full content.

        Raises:
            OSError: If the content cannot be read
        """

    @abstractmethod
    def create_relative(self, relative_path: str) -> Resource:
        """Create a resource for a path relative to this one.

        Raises:
            OSError: If this kind of resource has no notion of relative paths
        """

    def __str__(self) -> str:
        return self.description


@dataclass(frozen=True)
class FileResource(Resource):
    """A document on the local filesystem."""

    path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(os.path.abspath(self.path)))

    @property
    def description(self) -> str:
        return f"file [{self.path}]"

    @property
    def url(self) -> str:
        return self.path.as_uri()

    def exists(self) -> bool:
        return self.path.is_file()

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()

    def create_relative(self, relative_path: str) -> FileResource:
        return FileResource(self.path.parent / relative_path)


@dataclass(frozen=True)
class UrlResource(Resource):
    """A document fetched over HTTP(S)."""

    location: str

    @property
    def description(self) -> str:
        return f"URL [{self.location}]"

    @property
    def url(self) -> str:
        return self.location

    def exists(self) -> bool:
        try:
            response = requests.head(
                self.location, timeout=HTTP_TIMEOUT, allow_redirects=True
            )
        except requests.RequestException:
            return False
        return response.status_code < 400

    def read_bytes(self) -> bytes:
        response = requests.get(self.location, timeout=HTTP_TIMEOUT, allow_redirects=True)
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise OSError(f"Failed to download {self.location}: {e}") from e
        return response.content

    def create_relative(self, relative_path: str) -> UrlResource:
        return UrlResource(urljoin(self.location, relative_path.lstrip(FOLDER_SEPARATOR)))


@dataclass(frozen=True)
class InMemoryResource(Resource):
    """A document held in memory, e.g. loaded from a string."""

    content: bytes
    name: str = "in-memory document"

    @property
    def description(self) -> str:
        return self.name

    @property
    def url(self) -> str:
        raise FileNotFoundError(f"{self.description} cannot be resolved to URL")

    def exists(self) -> bool:
        return True

    def read_bytes(self) -> bytes:
        return self.content

    def create_relative(self, relative_path: str) -> Resource:
        raise FileNotFoundError(
            f"Cannot create a relative resource for {self.description}"
        )


def is_url(location: str) -> bool:
    """Check whether location is a URL with a supported scheme."""
    try:
        scheme = urlsplit(location).scheme
    except ValueError:
        return False
    return scheme in URL_SCHEMES


def is_absolute_location(location: str) -> bool:
    """Classify an import location as absolute or relative.

    Absolute locations are URLs, other URIs with a scheme, and absolute
    filesystem paths. Locations that fail to parse count as relative.

    Example:
        >>> is_absolute_location("https://example.com/app.xml")  # True
        >>> is_absolute_location("/etc/app/components.xml")      # True
        >>> is_absolute_location("services.xml")                 # False
    """
    if is_url(location) or Path(location).is_absolute():
        return True
    try:
        scheme = urlsplit(location.replace(" ", "%20")).scheme
    except ValueError:
        return False
    # Single letters are Windows drive prefixes, handled by Path above
    return len(scheme) > 1


def apply_relative_path(path: str, relative_path: str) -> str:
    """Apply a relative path to a base path ending in a file name.

    Example:
        >>> apply_relative_path("file:///app/conf/main.xml", "db.xml")
        'file:///app/conf/db.xml'
    """
    separator_index = path.rfind(FOLDER_SEPARATOR)
    if separator_index == -1:
        return relative_path
    new_path = path[:separator_index]
    if not relative_path.startswith(FOLDER_SEPARATOR):
        new_path += FOLDER_SEPARATOR
    return new_path + relative_path


def has_glob(location: str) -> bool:
    return any(char in location for char in GLOB_CHARACTERS)


class ResourceResolver:
    """Resolve location strings into one or more resources.

    File locations may contain the wildcards `*` and `?`, in which case every
    matching file is returned in sorted order. Brackets are always literal,
    and a path naming an existing file is never treated as a pattern.
    """

    def __init__(self, base_dir: Path | None = None) -> None:
        self._base_dir = base_dir

    def get_resources(self, location: str) -> list[Resource]:
        """Resolve a location.

        Args:
            location: A URL, file: URL or filesystem path (glob allowed)

        Returns:
            Matching resources; an unmatched wildcard pattern yields an
            empty list
        """
        parts = urlsplit(location) if is_url(location) else None
        if parts is not None and parts.scheme in ("http", "https"):
            return [UrlResource(location)]

        if parts is not None:
            path = url2pathname(parts.path)
        else:
            path = location

        if self._base_dir is not None and not Path(path).is_absolute():
            path = str(self._base_dir / path)

        if Path(path).exists() or not has_glob(path):
            return [FileResource(Path(path))]
        pattern = path.replace("[", "[[]")
        return [FileResource(Path(match)) for match in sorted(glob.glob(pattern))]
