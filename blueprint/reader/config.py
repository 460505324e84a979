"""Default wiring for the document reader."""

from blueprint.config import (
    ALIAS_ELEMENT,
    COMPONENT_ELEMENT,
    IMPORT_ELEMENT,
    NESTED_SCOPE_ELEMENT,
)
from blueprint.environment import Environment
from blueprint.reader.dispatch import ElementHandlerRegistry
from blueprint.reader.document_reader import DocumentReader
from blueprint.reader.element_parser import DefaultElementParser
from blueprint.reader.handlers import (
    AliasHandler,
    ComponentHandler,
    ImportHandler,
    NestedScopeHandler,
)
from blueprint.reader.problems import FailFastProblemReporter
from blueprint.reader.protocols import (
    DefinitionRegistry,
    ElementParser,
    ProblemReporter,
    ReaderEventListener,
)
from blueprint.reader.registrar import DocumentRegistrar
from blueprint.registry import ComponentDefinitionRegistry


def create_default_dispatcher() -> ElementHandlerRegistry:
    """Create a handler registry for the built-in vocabulary.

    Returns:
        ElementHandlerRegistry with import, alias, component and nested
        scope handlers registered
    """
    dispatcher = ElementHandlerRegistry()
    dispatcher.register(IMPORT_ELEMENT, ImportHandler())
    dispatcher.register(ALIAS_ELEMENT, AliasHandler())
    dispatcher.register(COMPONENT_ELEMENT, ComponentHandler())
    dispatcher.register(NESTED_SCOPE_ELEMENT, NestedScopeHandler())
    return dispatcher


def create_registrar() -> DocumentRegistrar:
    """Create a DocumentRegistrar with the default dispatcher."""
    return DocumentRegistrar(create_default_dispatcher())


def create_reader(
    registry: DefinitionRegistry | None = None,
    environment: Environment | None = None,
    element_parser: ElementParser | None = None,
    reporter: ProblemReporter | None = None,
    listener: ReaderEventListener | None = None,
    fail_fast: bool = False,
) -> DocumentReader:
    """Create a DocumentReader with default collaborators.

    Args:
        registry: Target registry (default: a new ComponentDefinitionRegistry)
        environment: Profiles and properties (default: from the process)
        element_parser: Parser for element contents
        reporter: Problem reporter (default: collecting)
        listener: Event listener (default: ignores events)
        fail_fast: Raise on the first problem instead of collecting

    Returns:
        A ready-to-use DocumentReader
    """
    if reporter is None and fail_fast:
        reporter = FailFastProblemReporter()
    return DocumentReader(
        registry=registry if registry is not None else ComponentDefinitionRegistry(),
        registrar=create_registrar(),
        environment=environment,
        element_parser=element_parser or DefaultElementParser(),
        reporter=reporter,
        listener=listener,
    )
