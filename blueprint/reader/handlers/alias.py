"""Handler for <alias> elements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from blueprint.config import ALIAS_ATTRIBUTE, NAME_ATTRIBUTE, has_text
from blueprint.errors import BlueprintError
from blueprint.models import AliasRecord
from blueprint.reader.dispatch import ElementKind

if TYPE_CHECKING:
    from lxml import etree

    from blueprint.reader.protocols import ReaderContext, RecurseFn
    from blueprint.scope import ScopeContext


@dataclass
class AliasHandler:
    """Handler for <alias name="..." alias="..."/> elements.

    Both attributes are validated before anything is registered, so a bare
    <alias/> reports two problems rather than one.
    """

    @property
    def element_kind(self) -> ElementKind:
        return ElementKind.ALIAS

    def handle(
        self,
        elem: etree._Element,
        context: ReaderContext,
        scope: ScopeContext,
        recurse: RecurseFn,
    ) -> None:
        record = AliasRecord(elem.get(NAME_ATTRIBUTE, ""), elem.get(ALIAS_ATTRIBUTE, ""))

        valid = True
        if not has_text(record.name):
            context.error("Name must not be empty", elem)
            valid = False
        if not has_text(record.alias):
            context.error("Alias must not be empty", elem)
            valid = False
        if not valid:
            return

        try:
            context.registry.register_alias(record.name, record.alias)
        except (BlueprintError, ValueError) as e:
            context.error(
                f"Failed to register alias '{record.alias}' for component with name '{record.name}'",
                elem,
                e,
            )
            return
        context.fire_alias_registered(record.name, record.alias, elem)
