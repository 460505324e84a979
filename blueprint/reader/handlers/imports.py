"""Handler for <import> elements.

An import loads further documents into the same registry. The location may
contain ${...} placeholders and is either absolute (a URL, a URI with a
scheme or an absolute path) or relative to the document that declares the
import.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from blueprint.config import RESOURCE_ATTRIBUTE, has_text
from blueprint.errors import PlaceholderResolutionError, ResourceLoadError
from blueprint.logging_config import logger
from blueprint.models import ImportRecord
from blueprint.reader.dispatch import ElementKind
from blueprint.resources import apply_relative_path, is_absolute_location

if TYPE_CHECKING:
    from lxml import etree

    from blueprint.reader.protocols import ReaderContext, RecurseFn
    from blueprint.scope import ScopeContext


@dataclass
class ImportHandler:
    """Handler for <import resource="..."/> elements."""

    @property
    def element_kind(self) -> ElementKind:
        return ElementKind.IMPORT

    def handle(
        self,
        elem: etree._Element,
        context: ReaderContext,
        scope: ScopeContext,
        recurse: RecurseFn,
    ) -> None:
        location = elem.get(RESOURCE_ATTRIBUTE)
        if not has_text(location):
            context.error("Resource location must not be empty", elem)
            return

        try:
            resolved = context.environment.resolve_required_placeholders(location)
        except PlaceholderResolutionError as e:
            context.error(
                f"Could not resolve placeholder in resource location [{location}]", elem, e
            )
            return

        record = ImportRecord(location, resolved, is_absolute_location(resolved))

        if record.is_absolute:
            self._import_absolute(record, elem, context)
        else:
            self._import_relative(record, elem, context)

        context.fire_import_processed(
            record.location, record.resolved_location, record.resources, elem
        )

    def _import_absolute(
        self, record: ImportRecord, elem: etree._Element, context: ReaderContext
    ) -> None:
        location = record.resolved_location
        try:
            count, resources = context.loader.load_by_location(location)
        except ResourceLoadError as e:
            context.error(
                f"Failed to import component definitions from URL location [{location}]",
                elem,
                e,
            )
            return
        record.add_resources(resources)
        logger.debug(f"Imported {count} component definitions from URL location [{location}]")

    def _import_relative(
        self, record: ImportRecord, elem: etree._Element, context: ReaderContext
    ) -> None:
        location = record.resolved_location
        try:
            relative = context.resource.create_relative(location)
            if relative.exists():
                count = context.loader.load_by_resource(relative)
                record.add_resource(relative)
            else:
                base_location = context.resource.url
                count, resources = context.loader.load_by_location(
                    apply_relative_path(base_location, location)
                )
                record.add_resources(resources)
        except ResourceLoadError as e:
            context.error(
                f"Failed to import component definitions from relative location [{location}]",
                elem,
                e,
            )
            return
        except OSError as e:
            context.error("Failed to resolve current resource location", elem, e)
            return
        logger.debug(
            f"Imported {count} component definitions from relative location [{location}]"
        )
