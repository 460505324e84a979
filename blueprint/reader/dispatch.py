"""Handler registry for the built-in element vocabulary."""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol

from lxml import etree

if TYPE_CHECKING:
    from blueprint.reader.protocols import ReaderContext, RecurseFn
    from blueprint.scope import ScopeContext


class ElementKind(Enum):
    """Classification of default-vocabulary elements."""

    IMPORT = auto()  # <import resource="..."/>
    ALIAS = auto()  # <alias name="..." alias="..."/>
    COMPONENT = auto()  # <component .../>
    NESTED_SCOPE = auto()  # nested <components>


def get_local_name(elem: etree._Element) -> str:
    """Get tag name without namespace.

    Args:
        elem: XML element

    Returns:
        Local name (e.g., "component" not "{ns}component"); "" for comments
        and processing instructions
    """
    if not isinstance(elem.tag, str):
        return ""
    return etree.QName(elem).localname


def get_namespace(elem: etree._Element) -> str | None:
    """Get the namespace URI of an element, or None if it has none."""
    if not isinstance(elem.tag, str):
        return None
    return etree.QName(elem).namespace


def is_element(node: etree._Element) -> bool:
    """Return True for element nodes, False for comments, PIs and entities."""
    return isinstance(node.tag, str)


class ElementHandler(Protocol):
    """Protocol for default-vocabulary element handlers."""

    @property
    def element_kind(self) -> ElementKind:
        """Return the kind of element this handler processes."""
        ...

    def handle(
        self,
        elem: etree._Element,
        context: ReaderContext,
        scope: ScopeContext,
        recurse: RecurseFn,
    ) -> None:
        """Process the element.

        Args:
            elem: The element to process
            context: Reader context of the current document
            scope: Default settings in effect for the element
            recurse: Registrar entry point for nested sub-trees
        """
        ...


class ElementHandlerRegistry:
    """Registry mapping default-vocabulary local names to handlers.

    Names without a handler are not an error; the registrar simply skips
    them.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, ElementHandler] = {}

    def register(self, local_name: str, handler: ElementHandler) -> None:
        """Register a handler for a local element name.

        Args:
            local_name: The element name (without namespace)
            handler: The handler to use for this name
        """
        self._handlers[local_name] = handler

    def get_handler(self, elem: etree._Element) -> ElementHandler | None:
        """Get the handler for an element.

        Args:
            elem: A default-vocabulary element

        Returns:
            The handler, or None if the element should be ignored
        """
        return self._handlers.get(get_local_name(elem))

    def classify(self, elem: etree._Element) -> ElementKind | None:
        """Return the kind of element, or None for unrecognized names."""
        handler = self.get_handler(elem)
        return handler.element_kind if handler is not None else None

    def has_handler(self, local_name: str) -> bool:
        return local_name in self._handlers

    def registered_names(self) -> set[str]:
        """Return set of all registered element names."""
        return set(self._handlers.keys())
