"""Protocol definitions for the document reader."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Protocol

from blueprint.models import (
    AliasEvent,
    ComponentDefinition,
    ComponentEvent,
    DefaultsEvent,
    DefinitionHolder,
    ImportEvent,
    SourceLocation,
)
from blueprint.reader.problems import Problem

if TYPE_CHECKING:
    from lxml import etree

    from blueprint.resources import Resource
    from blueprint.scope import ScopeContext


class ElementParser(Protocol):
    """Turns single elements into component definitions.

    The registrar knows only this interface; the set of custom namespaces
    it can handle is open-ended.
    """

    def is_default_namespace(self, elem: etree._Element) -> bool:
        """Return True if elem belongs to the built-in vocabulary."""
        ...

    def parse_component(
        self, elem: etree._Element, context: ReaderContext, scope: ScopeContext
    ) -> DefinitionHolder | None:
        """Parse a <component> element.

        Returns:
            The definition with its name and aliases, or None if the element
            should not produce a registration (problems already reported)
        """
        ...

    def decorate(
        self,
        elem: etree._Element,
        holder: DefinitionHolder,
        context: ReaderContext,
        scope: ScopeContext,
    ) -> DefinitionHolder:
        """Apply custom-namespace attributes and elements to a definition."""
        ...

    def parse_custom_element(
        self, elem: etree._Element, context: ReaderContext, scope: ScopeContext
    ) -> None:
        """Handle an element outside the built-in vocabulary."""
        ...


class DefinitionRegistry(Protocol):
    """Stores definitions and aliases."""

    def register_definition(self, name: str, definition: ComponentDefinition) -> None: ...

    def register_alias(self, name: str, alias: str) -> None: ...

    def contains_definition(self, name: str) -> bool: ...

    @property
    def definition_count(self) -> int: ...


class ResourceLoader(Protocol):
    """Loads (and registers) the documents behind a location or resource."""

    @property
    def current_resource(self) -> Resource | None:
        """The document being registered, or None outside of a load."""
        ...

    def load_by_location(self, location: str) -> tuple[int, list[Resource]]:
        """Load every document a location resolves to.

        Returns:
            Tuple of (number of definitions registered, resources loaded)

        Raises:
            ResourceLoadError: If a document cannot be loaded
        """
        ...

    def load_by_resource(self, resource: Resource) -> int:
        """Load one document.

        Returns:
            Number of definitions registered

        Raises:
            ResourceLoadError: If the document cannot be loaded
        """
        ...


class ProfileEvaluator(Protocol):
    """Decides whether a set of profiles is active."""

    def accepts_profiles(self, profiles: Iterable[str]) -> bool: ...

    def resolve_required_placeholders(self, text: str) -> str: ...


class ProblemReporter(Protocol):
    """Receives problems found while reading documents."""

    def error(self, problem: Problem) -> None: ...

    def warning(self, problem: Problem) -> None: ...


class ReaderEventListener(Protocol):
    """Observes registrations as they happen."""

    def defaults_registered(self, event: DefaultsEvent) -> None: ...

    def import_processed(self, event: ImportEvent) -> None: ...

    def alias_registered(self, event: AliasEvent) -> None: ...

    def component_registered(self, event: ComponentEvent) -> None: ...


@dataclass
class ReaderContext:
    """Context passed through the registration of one document.

    The resource is specific to the document; the registry, reporter,
    listener, environment, loader and element parser are shared by every
    document of a load, imported documents included.

    While a document is registered, resource is the same object as
    loader.current_resource.
    """

    resource: Resource
    """The document currently being registered."""

    registry: DefinitionRegistry
    reporter: ProblemReporter
    listener: ReaderEventListener
    environment: ProfileEvaluator
    loader: ResourceLoader
    element_parser: ElementParser

    def extract_source(self, elem: etree._Element | None) -> SourceLocation:
        line = elem.sourceline if elem is not None else None
        return SourceLocation(self.resource.description, line)

    def error(
        self,
        message: str,
        elem: etree._Element | None,
        cause: BaseException | None = None,
    ) -> None:
        """Report an error against an element and carry on."""
        self.reporter.error(Problem(message, self.extract_source(elem), cause))

    def warning(
        self,
        message: str,
        elem: etree._Element | None,
        cause: BaseException | None = None,
    ) -> None:
        self.reporter.warning(Problem(message, self.extract_source(elem), cause))

    def fire_defaults_registered(self, scope: ScopeContext, elem: etree._Element) -> None:
        self.listener.defaults_registered(DefaultsEvent(scope, self.extract_source(elem)))

    def fire_import_processed(
        self,
        location: str,
        resolved_location: str,
        resources: list[Resource],
        elem: etree._Element,
    ) -> None:
        self.listener.import_processed(
            ImportEvent(location, resolved_location, tuple(resources), self.extract_source(elem))
        )

    def fire_alias_registered(self, name: str, alias: str, elem: etree._Element) -> None:
        self.listener.alias_registered(AliasEvent(name, alias, self.extract_source(elem)))

    def fire_component_registered(self, holder: DefinitionHolder, elem: etree._Element) -> None:
        self.listener.component_registered(ComponentEvent(holder, self.extract_source(elem)))


# Recursive registration entry point handed to element handlers
RecurseFn = Callable[["etree._Element", ReaderContext, "ScopeContext"], "ScopeContext"]
