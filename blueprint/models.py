"""Data models for component definitions, registration records and events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from blueprint.resources import Resource
    from blueprint.scope import ScopeContext


@dataclass(frozen=True)
class SourceLocation:
    """Where an element was declared."""

    resource: str
    """Description of the document resource."""

    line: int | None = None
    """Line number of the element, if the parser recorded one."""

    def __str__(self) -> str:
        if self.line is None:
            return self.resource
        return f"{self.resource}, line {self.line}"


@dataclass(frozen=True)
class ComponentReference:
    """A property or argument value that refers to another component by name."""

    name: str


@dataclass(frozen=True)
class PropertyValue:
    """A named property on a component definition."""

    name: str
    value: str | ComponentReference | None


@dataclass(frozen=True)
class ConstructorArgument:
    """A constructor argument, addressed by index and/or name."""

    value: str | ComponentReference | None
    index: int | None = None
    name: str | None = None


@dataclass
class ComponentDefinition:
    """Declared metadata for one component, independent of instantiation."""

    class_name: str | None = None
    parent_name: str | None = None
    lazy_init: bool = False
    autowire: str = "no"
    autowire_candidate: bool = True
    depends_on: list[str] = field(default_factory=list)
    init_method: str | None = None
    destroy_method: str | None = None
    primary: bool = False
    description: str | None = None
    property_values: dict[str, PropertyValue] = field(default_factory=dict)
    constructor_arguments: list[ConstructorArgument] = field(default_factory=list)
    source: SourceLocation | None = None

    def add_property(self, value: PropertyValue) -> None:
        """Add a property value, keeping declaration order.

        Raises:
            ValueError: If the property is already defined
        """
        if value.name in self.property_values:
            raise ValueError(f"Property '{value.name}' is already defined")
        self.property_values[value.name] = value

    def __str__(self) -> str:
        kind = self.class_name or f"child of '{self.parent_name}'"
        where = f" defined in {self.source}" if self.source else ""
        return f"Component [{kind}]; lazy-init={str(self.lazy_init).lower()}{where}"


@dataclass(frozen=True)
class DefinitionHolder:
    """A component definition paired with its name and aliases."""

    definition: ComponentDefinition
    name: str
    aliases: tuple[str, ...] = ()

    def matches_name(self, candidate: str) -> bool:
        return candidate == self.name or candidate in self.aliases


@dataclass(frozen=True)
class AliasRecord:
    """A (name, alias) pair declared by an <alias> element."""

    name: str
    alias: str


@dataclass
class ImportRecord:
    """State of one <import> element as it is processed."""

    location: str
    """Location exactly as written in the resource attribute."""

    resolved_location: str = ""
    """Location after placeholder resolution."""

    is_absolute: bool = False

    resources: list[Resource] = field(default_factory=list)
    """Resources actually loaded, in load order, without duplicates."""

    def add_resource(self, resource: Resource) -> None:
        if resource not in self.resources:
            self.resources.append(resource)

    def add_resources(self, resources: list[Resource]) -> None:
        for resource in resources:
            self.add_resource(resource)


@dataclass(frozen=True)
class ImportEvent:
    """Fired after an <import> element has been processed."""

    location: str
    resolved_location: str
    resources: tuple[Resource, ...]
    source: SourceLocation | None = None


@dataclass(frozen=True)
class AliasEvent:
    """Fired after an alias has been registered."""

    name: str
    alias: str
    source: SourceLocation | None = None


@dataclass(frozen=True)
class ComponentEvent:
    """Fired after a component definition has been registered."""

    holder: DefinitionHolder
    source: SourceLocation | None = None

    @property
    def name(self) -> str:
        return self.holder.name

    @property
    def aliases(self) -> tuple[str, ...]:
        return self.holder.aliases

    @property
    def definition(self) -> ComponentDefinition:
        return self.holder.definition


@dataclass(frozen=True)
class DefaultsEvent:
    """Fired when a <components> element establishes a new scope."""

    scope: ScopeContext
    source: SourceLocation | None = None
