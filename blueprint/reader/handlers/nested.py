"""Handler for nested <components> elements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from blueprint.reader.dispatch import ElementKind

if TYPE_CHECKING:
    from lxml import etree

    from blueprint.reader.protocols import ReaderContext, RecurseFn
    from blueprint.scope import ScopeContext


@dataclass
class NestedScopeHandler:
    """Handler for <components> nested inside another <components>.

    Recurses into the registrar with the current scope as parent. The
    nested scope is discarded on return.
    """

    @property
    def element_kind(self) -> ElementKind:
        return ElementKind.NESTED_SCOPE

    def handle(
        self,
        elem: etree._Element,
        context: ReaderContext,
        scope: ScopeContext,
        recurse: RecurseFn,
    ) -> None:
        recurse(elem, context, scope)
