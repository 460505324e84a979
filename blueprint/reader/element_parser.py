"""Default element parser for <component> elements and custom namespaces."""

from __future__ import annotations

from fnmatch import fnmatchcase
from typing import TYPE_CHECKING, Protocol

from lxml import etree

from blueprint.config import (
    DEFAULT_NAMESPACE,
    DEFAULT_VALUE,
    PROPERTY_NAMESPACE,
    has_text,
    tokenize,
)
from blueprint.models import (
    ComponentDefinition,
    ComponentReference,
    ConstructorArgument,
    DefinitionHolder,
    PropertyValue,
)
from blueprint.reader.dispatch import get_local_name, get_namespace, is_element

if TYPE_CHECKING:
    from blueprint.reader.protocols import ReaderContext
    from blueprint.scope import ScopeContext


AUTOWIRE_MODES = {"no", "byName", "byType", "constructor"}

GENERATED_NAME_SEPARATOR = "#"

REF_SUFFIX = "-ref"

# Attribute namespaces that never need a handler
IGNORED_NAMESPACES = {
    "http://www.w3.org/XML/1998/namespace",
    "http://www.w3.org/2001/XMLSchema-instance",
}


class NamespaceHandler(Protocol):
    """Handles the elements and attributes of one custom namespace."""

    def parse(
        self, elem: etree._Element, context: ReaderContext, scope: ScopeContext
    ) -> None:
        """Handle a top-level custom element."""
        ...

    def decorate(
        self,
        elem: etree._Element,
        attribute: str | None,
        holder: DefinitionHolder,
        context: ReaderContext,
    ) -> DefinitionHolder:
        """Decorate a definition from a custom attribute or nested element.

        Args:
            elem: The <component> element when decorating from an attribute,
                otherwise the custom element nested inside it
            attribute: Qualified attribute name, or None for elements
            holder: The definition parsed so far
            context: Reader context of the current document

        Returns:
            The decorated holder (may be the same object)
        """
        ...


class NamespaceHandlerResolver:
    """Maps namespace URIs to their handlers."""

    def __init__(self) -> None:
        self._handlers: dict[str, NamespaceHandler] = {}

    def register(self, namespace: str, handler: NamespaceHandler) -> None:
        self._handlers[namespace] = handler

    def resolve(self, namespace: str | None) -> NamespaceHandler | None:
        if namespace is None:
            return None
        return self._handlers.get(namespace)

    def registered_namespaces(self) -> set[str]:
        return set(self._handlers.keys())


class PropertyNamespaceHandler:
    """Inline property values as attributes: p:host="db" or p:pool-ref="pool"."""

    def parse(
        self, elem: etree._Element, context: ReaderContext, scope: ScopeContext
    ) -> None:
        context.error(
            f"Namespace [{PROPERTY_NAMESPACE}] defines attributes only, "
            f"found element <{get_local_name(elem)}>",
            elem,
        )

    def decorate(
        self,
        elem: etree._Element,
        attribute: str | None,
        holder: DefinitionHolder,
        context: ReaderContext,
    ) -> DefinitionHolder:
        if attribute is None:
            context.error(
                f"Namespace [{PROPERTY_NAMESPACE}] defines attributes only, "
                f"found element <{get_local_name(elem)}>",
                elem,
            )
            return holder

        name = etree.QName(attribute).localname
        value: str | ComponentReference = elem.get(attribute)
        if name.endswith(REF_SUFFIX):
            name = name[: -len(REF_SUFFIX)]
            value = ComponentReference(value)

        try:
            holder.definition.add_property(PropertyValue(name, value))
        except ValueError:
            context.error(
                f"Property '{name}' is already defined using both <property> and inline syntax. "
                "Only one approach may be used per property.",
                elem,
            )
        return holder


def create_default_namespace_resolver() -> NamespaceHandlerResolver:
    """Create a resolver with the built-in namespaces registered."""
    resolver = NamespaceHandlerResolver()
    resolver.register(PROPERTY_NAMESPACE, PropertyNamespaceHandler())
    return resolver


class DefaultElementParser:
    """Parses <component> elements and delegates custom namespaces.

    Component attributes left unset, or set to "default", take their value
    from the ScopeContext of the enclosing <components> element.
    """

    def __init__(self, namespace_resolver: NamespaceHandlerResolver | None = None) -> None:
        self.namespace_resolver = namespace_resolver or create_default_namespace_resolver()

    def is_default_namespace(self, elem: etree._Element) -> bool:
        namespace = get_namespace(elem)
        return not namespace or namespace == DEFAULT_NAMESPACE

    def parse_component(
        self, elem: etree._Element, context: ReaderContext, scope: ScopeContext
    ) -> DefinitionHolder | None:
        aliases = tokenize(elem.get("name"))
        name = (elem.get("id") or "").strip()
        if not name and aliases:
            name = aliases.pop(0)

        definition = self._parse_definition(elem, name, context, scope)
        if definition is None:
            return None

        if not name:
            name = self._generate_name(definition, context)
        return DefinitionHolder(definition, name, tuple(aliases))

    def _parse_definition(
        self,
        elem: etree._Element,
        name: str,
        context: ReaderContext,
        scope: ScopeContext,
    ) -> ComponentDefinition | None:
        class_name = elem.get("class")
        parent_name = elem.get("parent")
        if not has_text(class_name) and not has_text(parent_name):
            context.error(
                f"Component '{name or '(anonymous)'}' must declare a 'class' or 'parent' attribute",
                elem,
            )
            return None

        autowire = _attribute_or_default(elem, "autowire", scope.autowire)
        if autowire not in AUTOWIRE_MODES:
            context.error(
                f"Invalid autowire mode '{autowire}': expected one of {sorted(AUTOWIRE_MODES)}",
                elem,
            )
            return None

        definition = ComponentDefinition(
            class_name=class_name.strip() if has_text(class_name) else None,
            parent_name=parent_name.strip() if has_text(parent_name) else None,
            lazy_init=_attribute_or_default(elem, "lazy-init", str(scope.lazy_init).lower())
            == "true",
            autowire=autowire,
            autowire_candidate=self._autowire_candidate(elem, name, scope),
            depends_on=tokenize(elem.get("depends-on")),
            init_method=_attribute_or_default(elem, "init-method", scope.init_method),
            destroy_method=_attribute_or_default(elem, "destroy-method", scope.destroy_method),
            primary=elem.get("primary") == "true",
            source=context.extract_source(elem),
        )

        for child in elem:
            if not is_element(child) or not self.is_default_namespace(child):
                continue
            local_name = get_local_name(child)
            if local_name == "description":
                definition.description = (child.text or "").strip()
            elif local_name == "property":
                self._parse_property(child, definition, context)
            elif local_name == "constructor-arg":
                self._parse_constructor_argument(child, definition, context)

        return definition

    def _autowire_candidate(
        self, elem: etree._Element, name: str, scope: ScopeContext
    ) -> bool:
        value = elem.get("autowire-candidate", DEFAULT_VALUE)
        if value != DEFAULT_VALUE:
            return value == "true"
        patterns = scope.autowire_candidates
        if not patterns:
            return True
        return bool(name) and any(fnmatchcase(name, pattern) for pattern in patterns)

    def _parse_property(
        self, elem: etree._Element, definition: ComponentDefinition, context: ReaderContext
    ) -> None:
        name = elem.get("name")
        if not has_text(name):
            context.error("Tag 'property' must have a 'name' attribute", elem)
            return

        value = _parse_value(elem, f"<property> element for property '{name}'", context)
        if value is _INVALID:
            return

        try:
            definition.add_property(PropertyValue(name, value))
        except ValueError:
            context.error(f"Multiple 'property' definitions for property '{name}'", elem)

    def _parse_constructor_argument(
        self, elem: etree._Element, definition: ComponentDefinition, context: ReaderContext
    ) -> None:
        index = None
        index_attr = elem.get("index")
        if has_text(index_attr):
            try:
                index = int(index_attr)
            except ValueError:
                index = -1
            if index < 0:
                context.error(
                    f"'index' of <constructor-arg> must be a non-negative integer, got '{index_attr}'",
                    elem,
                )
                return

        value = _parse_value(elem, "<constructor-arg> element", context)
        if value is _INVALID:
            return
        definition.constructor_arguments.append(
            ConstructorArgument(value, index, elem.get("name"))
        )

    def _generate_name(self, definition: ComponentDefinition, context: ReaderContext) -> str:
        """Generate a unique name such as "app.Service#0"."""
        prefix = definition.class_name or f"{definition.parent_name}$child"
        counter = 0
        candidate = f"{prefix}{GENERATED_NAME_SEPARATOR}{counter}"
        while context.registry.contains_definition(candidate):
            counter += 1
            candidate = f"{prefix}{GENERATED_NAME_SEPARATOR}{counter}"
        return candidate

    def decorate(
        self,
        elem: etree._Element,
        holder: DefinitionHolder,
        context: ReaderContext,
        scope: ScopeContext,
    ) -> DefinitionHolder:
        for attribute in elem.attrib:
            namespace = etree.QName(attribute).namespace
            if not namespace or namespace == DEFAULT_NAMESPACE:
                continue
            if namespace in IGNORED_NAMESPACES:
                continue
            handler = self._resolve_handler(namespace, elem, context)
            if handler is not None:
                holder = handler.decorate(elem, attribute, holder, context)

        for child in elem:
            if not is_element(child) or self.is_default_namespace(child):
                continue
            handler = self._resolve_handler(get_namespace(child), child, context)
            if handler is not None:
                holder = handler.decorate(child, None, holder, context)

        return holder

    def parse_custom_element(
        self, elem: etree._Element, context: ReaderContext, scope: ScopeContext
    ) -> None:
        handler = self._resolve_handler(get_namespace(elem), elem, context)
        if handler is not None:
            handler.parse(elem, context, scope)

    def _resolve_handler(
        self, namespace: str | None, elem: etree._Element, context: ReaderContext
    ) -> NamespaceHandler | None:
        handler = self.namespace_resolver.resolve(namespace)
        if handler is None:
            context.error(
                f"Unable to locate namespace handler for namespace [{namespace}]", elem
            )
        return handler


# Marker for a value element that failed validation
_INVALID = object()


def _attribute_or_default(elem: etree._Element, attribute: str, fallback):
    value = elem.get(attribute)
    if not has_text(value) or value.strip() == DEFAULT_VALUE:
        return fallback
    return value.strip()


def _parse_value(elem: etree._Element, description: str, context: ReaderContext):
    """Read the value or ref attribute of a <property> or <constructor-arg>."""
    has_value = elem.get("value") is not None
    has_ref = elem.get("ref") is not None
    if has_value and has_ref:
        context.error(
            f"{description} is only allowed to contain either 'ref' attribute OR 'value' attribute",
            elem,
        )
        return _INVALID
    if has_ref:
        ref = elem.get("ref")
        if not has_text(ref):
            context.error(f"{description} contains empty 'ref' attribute", elem)
            return _INVALID
        return ComponentReference(ref.strip())
    if has_value:
        return elem.get("value")
    context.error(f"{description} must specify a ref or value", elem)
    return _INVALID
