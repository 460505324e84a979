"""Registry of component definitions and aliases."""

from __future__ import annotations

from typing import TYPE_CHECKING

from blueprint.config import has_text
from blueprint.errors import (
    AliasConflictError,
    DefinitionOverrideError,
    DefinitionStoreError,
)
from blueprint.logging_config import logger
from blueprint.models import ComponentDefinition, DefinitionHolder

if TYPE_CHECKING:
    from blueprint.reader.protocols import DefinitionRegistry


class ComponentDefinitionRegistry:
    """Registry mapping component names to definitions.

    Aliases map an alternative name onto a registered name (or onto another
    alias). Lookups by alias resolve to the canonical name.
    """

    def __init__(self, allow_overriding: bool = True, allow_alias_overriding: bool = True) -> None:
        """Initialize an empty registry.

        Args:
            allow_overriding: Whether a definition may replace one registered
                earlier under the same name
            allow_alias_overriding: Whether an alias may be re-pointed at a
                different name
        """
        self.allow_overriding = allow_overriding
        self.allow_alias_overriding = allow_alias_overriding
        self._definitions: dict[str, ComponentDefinition] = {}
        self._aliases: dict[str, str] = {}

    def register_definition(self, name: str, definition: ComponentDefinition) -> None:
        """Register a definition under a name.

        Raises:
            DefinitionStoreError: If name is empty
            DefinitionOverrideError: If name is taken and overriding is disabled
        """
        if not has_text(name):
            raise DefinitionStoreError("Component definition name must not be empty")

        existing = self._definitions.get(name)
        if existing is not None:
            if not self.allow_overriding:
                raise DefinitionOverrideError(name, existing, definition)
            if existing is not definition:
                logger.warning(
                    f"Overriding component definition for '{name}': replacing [{existing}] with [{definition}]"
                )
        self._definitions[name] = definition

    def remove_definition(self, name: str) -> None:
        """Remove a definition.

        Raises:
            KeyError: If no definition is registered under name
        """
        del self._definitions[name]

    def register_alias(self, name: str, alias: str) -> None:
        """Register an alias for a name.

        An alias equal to the name is removed rather than registered.

        Raises:
            ValueError: If name or alias is empty
            AliasConflictError: If the alias already points elsewhere and
                overriding is disabled, or if the alias would form a cycle
        """
        if not has_text(name):
            raise ValueError("'name' must not be empty")
        if not has_text(alias):
            raise ValueError("'alias' must not be empty")

        if alias == name:
            self._aliases.pop(alias, None)
            return

        registered = self._aliases.get(alias)
        if registered is not None:
            if registered == name:
                return
            if not self.allow_alias_overriding:
                raise AliasConflictError(
                    f"Cannot define alias '{alias}' for name '{name}': "
                    f"it is already registered for name '{registered}'."
                )
            logger.debug(
                f"Overriding alias '{alias}' definition for registered name '{registered}' with new target name '{name}'"
            )

        if self.has_alias(alias, name):
            raise AliasConflictError(
                f"Cannot register alias '{alias}' for name '{name}': "
                f"circular reference - '{name}' is a direct or indirect alias for '{alias}' already"
            )
        self._aliases[alias] = name

    def remove_alias(self, alias: str) -> None:
        """Remove an alias.

        Raises:
            KeyError: If alias is not registered
        """
        del self._aliases[alias]

    def has_alias(self, name: str, alias: str) -> bool:
        """Check whether alias resolves, directly or transitively, to name."""
        for registered_alias, registered_name in self._aliases.items():
            if registered_name == name and (
                registered_alias == alias or self.has_alias(registered_alias, alias)
            ):
                return True
        return False

    def is_alias(self, name: str) -> bool:
        return name in self._aliases

    def canonical_name(self, name: str) -> str:
        """Follow aliases until reaching a name that is not an alias."""
        canonical = name
        while canonical in self._aliases:
            canonical = self._aliases[canonical]
        return canonical

    def aliases_of(self, name: str) -> list[str]:
        """Return every alias that resolves to name, in registration order."""
        result: list[str] = []
        for alias, registered_name in self._aliases.items():
            if registered_name == name:
                result.append(alias)
                result.extend(self.aliases_of(alias))
        return result

    def get_definition(self, name: str) -> ComponentDefinition:
        """Get a definition by name or alias.

        Raises:
            KeyError: If nothing is registered under name
        """
        return self._definitions[self.canonical_name(name)]

    def contains_definition(self, name: str) -> bool:
        return self.canonical_name(name) in self._definitions

    def definition_names(self) -> list[str]:
        return list(self._definitions.keys())

    @property
    def definition_count(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: str) -> bool:
        return self.contains_definition(name)

    def __len__(self) -> int:
        return self.definition_count


def register_holder(holder: DefinitionHolder, registry: DefinitionRegistry) -> None:
    """Register a holder's definition under its name, then its aliases.

    Args:
        holder: The definition with its name and aliases
        registry: Target registry

    Raises:
        DefinitionStoreError: If the definition cannot be registered
        AliasConflictError: If one of the aliases conflicts
    """
    registry.register_definition(holder.name, holder.definition)
    for alias in holder.aliases:
        registry.register_alias(holder.name, alias)
