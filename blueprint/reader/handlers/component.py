"""Handler for <component> elements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from blueprint.errors import AliasConflictError, DefinitionStoreError
from blueprint.logging_config import logger
from blueprint.reader.dispatch import ElementKind
from blueprint.registry import register_holder

if TYPE_CHECKING:
    from lxml import etree

    from blueprint.reader.protocols import ReaderContext, RecurseFn
    from blueprint.scope import ScopeContext


@dataclass
class ComponentHandler:
    """Handler for <component> elements.

    Parsing and decoration are delegated to the context's element parser.
    A parser that returns None has decided there is nothing to register;
    that is not treated as a failure here.
    """

    @property
    def element_kind(self) -> ElementKind:
        return ElementKind.COMPONENT

    def handle(
        self,
        elem: etree._Element,
        context: ReaderContext,
        scope: ScopeContext,
        recurse: RecurseFn,
    ) -> None:
        parser = context.element_parser
        holder = parser.parse_component(elem, context, scope)
        if holder is None:
            return

        holder = parser.decorate(elem, holder, context, scope)
        try:
            register_holder(holder, context.registry)
        except (DefinitionStoreError, AliasConflictError, ValueError) as e:
            context.error(
                f"Failed to register component definition with name '{holder.name}'", elem, e
            )
            return

        logger.debug(f"Registered component '{holder.name}'")
        context.fire_component_registered(holder, elem)
