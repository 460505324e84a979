"""Registrar that walks a document and registers what it declares."""

from __future__ import annotations

from typing import TYPE_CHECKING

from blueprint.config import PROFILE_ATTRIBUTE, has_text, tokenize
from blueprint.errors import ReaderContextError
from blueprint.logging_config import logger
from blueprint.reader.dispatch import ElementHandlerRegistry, get_local_name, is_element
from blueprint.scope import ScopeContext

if TYPE_CHECKING:
    from lxml import etree

    from blueprint.reader.protocols import ReaderContext


class DocumentRegistrar:
    """Walks a document tree and dispatches each element.

    For every <components> sub-tree the registrar creates a new
    ScopeContext, applies profile filtering, and routes each child either to
    the handler registered for its name (default vocabulary) or to the
    element parser (custom vocabulary). Nested <components> elements recurse
    back into :meth:`register` with the enclosing scope as parent.

    The registrar holds no per-load state: the reader context and the scope
    travel as arguments, so one instance can serve any number of loads,
    including the nested loads triggered by imports.
    """

    def __init__(self, dispatcher: ElementHandlerRegistry) -> None:
        """Initialize the registrar with a handler registry.

        Args:
            dispatcher: Handlers for the default-vocabulary element names
        """
        self._dispatcher = dispatcher

    def register_document(
        self, root: etree._Element, context: ReaderContext | None
    ) -> ScopeContext:
        """Register everything declared by a document root.

        Args:
            root: The document element
            context: Reader context for the document

        Returns:
            The root scope of the document

        Raises:
            ReaderContextError: If no reader context is given
        """
        if context is None:
            raise ReaderContextError("No ReaderContext available")
        logger.debug(f"Loading component definitions from {context.resource.description}")
        return self.register(root, context)

    def register(
        self,
        root: etree._Element,
        context: ReaderContext,
        parent_scope: ScopeContext | None = None,
    ) -> ScopeContext:
        """Register one <components> sub-tree.

        Problems are reported through the context; nothing here raises for
        bad data.

        Args:
            root: The <components> element (or a custom-vocabulary root)
            context: Reader context of the current document
            parent_scope: Scope of the enclosing sub-tree, if any

        Returns:
            The scope created for this sub-tree. Callers keep their own scope;
            the returned one is informational.
        """
        scope = ScopeContext.from_element(root, parent_scope)
        context.fire_defaults_registered(scope, root)
        parser = context.element_parser

        if parser.is_default_namespace(root):
            profile_spec = root.get(PROFILE_ATTRIBUTE)
            if has_text(profile_spec):
                profiles = tokenize(profile_spec)
                try:
                    accepted = context.environment.accepts_profiles(profiles)
                except ValueError as e:
                    context.error(f"Invalid profile specification [{profile_spec}]", root, e)
                    return scope
                if not accepted:
                    logger.info(
                        f"Skipped component definitions due to specified profiles [{profile_spec}] "
                        f"not matching: {context.resource.description}"
                    )
                    return scope

        with logger.indent_block(f"<{get_local_name(root)}> depth {scope.depth}"):
            self.pre_process(root, context, scope)
            self.parse_definitions(root, context, scope)
            self.post_process(root, context, scope)

        return scope

    def parse_definitions(
        self, root: etree._Element, context: ReaderContext, scope: ScopeContext
    ) -> None:
        """Dispatch the children of a default root, or the root itself if custom.

        Args:
            root: The sub-tree root
            context: Reader context of the current document
            scope: Scope in effect for the children
        """
        parser = context.element_parser
        if not parser.is_default_namespace(root):
            parser.parse_custom_element(root, context, scope)
            return

        for child in root:
            if not is_element(child):
                continue
            if parser.is_default_namespace(child):
                self.parse_default_element(child, context, scope)
            else:
                parser.parse_custom_element(child, context, scope)

    def parse_default_element(
        self, elem: etree._Element, context: ReaderContext, scope: ScopeContext
    ) -> None:
        handler = self._dispatcher.get_handler(elem)
        if handler is None:
            logger.debug(f"Ignoring unrecognized element <{get_local_name(elem)}>")
            return
        handler.handle(elem, context, scope, self.register)

    def pre_process(
        self, root: etree._Element, context: ReaderContext, scope: ScopeContext
    ) -> None:
        """Hook invoked before the children of a sub-tree are processed.

        Does nothing by default. Subclasses may override it to rewrite custom
        elements into default ones.
        """

    def post_process(
        self, root: etree._Element, context: ReaderContext, scope: ScopeContext
    ) -> None:
        """Hook invoked after the children of a sub-tree are processed.

        Does nothing by default.
        """
