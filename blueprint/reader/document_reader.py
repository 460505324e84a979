"""Reader that loads XML documents and registers their definitions."""

from __future__ import annotations

from pathlib import Path

from lxml import etree

from blueprint.environment import Environment
from blueprint.errors import ResourceLoadError
from blueprint.logging_config import logger
from blueprint.reader.element_parser import DefaultElementParser
from blueprint.reader.problems import CollectingProblemReporter, EmptyReaderEventListener
from blueprint.reader.protocols import (
    DefinitionRegistry,
    ElementParser,
    ProblemReporter,
    ReaderContext,
    ReaderEventListener,
)
from blueprint.reader.registrar import DocumentRegistrar
from blueprint.resources import FileResource, InMemoryResource, Resource, ResourceResolver


def _xml_parser() -> etree.XMLParser:
    # No entity expansion and no network access while parsing
    return etree.XMLParser(resolve_entities=False, no_network=True)


class DocumentReader:
    """Loads documents from locations or resources into a registry.

    Implements the ResourceLoader protocol: imports declared inside a
    document come back through :meth:`load_by_location` and
    :meth:`load_by_resource`, sharing this reader's registry, reporter and
    listener.
    """

    def __init__(
        self,
        registry: DefinitionRegistry,
        registrar: DocumentRegistrar,
        environment: Environment | None = None,
        element_parser: ElementParser | None = None,
        reporter: ProblemReporter | None = None,
        listener: ReaderEventListener | None = None,
        resolver: ResourceResolver | None = None,
    ) -> None:
        self.registry = registry
        self.registrar = registrar
        self.environment = environment or Environment()
        self.element_parser = element_parser or DefaultElementParser()
        self.reporter = reporter if reporter is not None else CollectingProblemReporter()
        self.listener = listener or EmptyReaderEventListener()
        self.resolver = resolver or ResourceResolver()
        # Resources being loaded, outermost first
        self._loading: list[Resource] = []

    @property
    def current_resource(self) -> Resource | None:
        """The innermost resource being loaded, if any."""
        return self._loading[-1] if self._loading else None

    def load_by_location(self, location: str) -> tuple[int, list[Resource]]:
        """Load every document a location resolves to.

        Args:
            location: URL, file: URL or filesystem path (glob allowed)

        Returns:
            Tuple of (number of definitions registered, resources loaded)

        Raises:
            ResourceLoadError: If one of the documents cannot be loaded
        """
        resources = self.resolver.get_resources(location)
        count = 0
        for resource in resources:
            count += self.load_by_resource(resource)
        logger.debug(f"Loaded {count} component definitions from location [{location}]")
        return count, resources

    def load_by_resource(self, resource: Resource) -> int:
        """Load a single document.

        Args:
            resource: The document to load

        Returns:
            Number of definitions registered by the document and its imports

        Raises:
            ResourceLoadError: If the document cannot be read or parsed, or
                is already being loaded further up the import chain
        """
        if resource in self._loading:
            raise ResourceLoadError(
                f"Detected cyclic loading of {resource.description} - check your import definitions!"
            )

        self._loading.append(resource)
        try:
            root = self._read_document(resource)
            count_before = self.registry.definition_count
            self.registrar.register_document(root, self.create_context(resource))
            return self.registry.definition_count - count_before
        finally:
            self._loading.pop()

    def load_path(self, path: str | Path) -> int:
        """Load a document from the filesystem."""
        return self.load_by_resource(FileResource(Path(path)))

    def load_string(self, text: str | bytes, name: str = "in-memory document") -> int:
        """Load a document from a string.

        Relative imports are not available for in-memory documents.
        """
        content = text.encode("utf-8") if isinstance(text, str) else text
        return self.load_by_resource(InMemoryResource(content, name))

    def create_context(self, resource: Resource) -> ReaderContext:
        return ReaderContext(
            resource=resource,
            registry=self.registry,
            reporter=self.reporter,
            listener=self.listener,
            environment=self.environment,
            loader=self,
            element_parser=self.element_parser,
        )

    def _read_document(self, resource: Resource) -> etree._Element:
        try:
            content = resource.read_bytes()
        except OSError as e:
            raise ResourceLoadError(
                f"Could not read document from {resource.description}: {e}"
            ) from e

        try:
            return etree.fromstring(content, parser=_xml_parser())
        except etree.XMLSyntaxError as e:
            raise ResourceLoadError(
                f"Line {e.lineno} in XML document from {resource.description} is invalid: {e.msg}"
            ) from e
