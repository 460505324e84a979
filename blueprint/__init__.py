"""Registration of component definitions from XML configuration documents.

Documents are read into a ComponentDefinitionRegistry by a DocumentReader.
Nested <components> elements open a ScopeContext whose default-* settings
apply to the components declared inside them.

Example:
    >>> from blueprint import ComponentDefinitionRegistry, create_reader
    >>> registry = ComponentDefinitionRegistry()
    >>> reader = create_reader(registry)
    >>> reader.load_path("config/components.xml")
"""

from blueprint.environment import Environment
from blueprint.models import ComponentDefinition, DefinitionHolder
from blueprint.reader import DocumentReader, create_reader
from blueprint.registry import ComponentDefinitionRegistry
from blueprint.scope import ScopeContext

__all__ = [
    "ComponentDefinition",
    "ComponentDefinitionRegistry",
    "DefinitionHolder",
    "DocumentReader",
    "Environment",
    "ScopeContext",
    "create_reader",
]
