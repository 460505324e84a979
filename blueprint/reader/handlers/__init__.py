"""Handlers for the built-in element vocabulary."""

from blueprint.reader.handlers.alias import AliasHandler
from blueprint.reader.handlers.component import ComponentHandler
from blueprint.reader.handlers.imports import ImportHandler
from blueprint.reader.handlers.nested import NestedScopeHandler

__all__ = [
    "AliasHandler",
    "ComponentHandler",
    "ImportHandler",
    "NestedScopeHandler",
]
