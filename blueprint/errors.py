"""Exceptions raised by the blueprint package."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from blueprint.reader.problems import Problem


class BlueprintError(Exception):
    """Base class for all blueprint errors."""


class ReaderContextError(BlueprintError):
    """Raised when a document is registered without a reader context.

    This is a usage error, not a data error, and aborts the load.
    """


class PlaceholderResolutionError(BlueprintError):
    """Raised when a ${...} placeholder cannot be resolved."""

    def __init__(self, placeholder: str, text: str = "") -> None:
        """Initialize the error.

        Args:
            placeholder: The unresolvable placeholder key
            text: The text being resolved when the failure occurred
        """
        self.placeholder = placeholder
        msg = f"Could not resolve placeholder '{placeholder}'"
        if text:
            msg = f"{msg} in value \"{text}\""
        super().__init__(msg)


class AliasConflictError(BlueprintError):
    """Raised when an alias cannot be registered for a name."""


class DefinitionStoreError(BlueprintError):
    """Raised when component definitions cannot be stored or loaded."""

    def __init__(
        self,
        message: str,
        resource_description: str | None = None,
        name: str | None = None,
    ) -> None:
        self.resource_description = resource_description
        self.name = name
        if resource_description:
            message = f"{message} [{resource_description}]"
        super().__init__(message)


class DefinitionOverrideError(DefinitionStoreError):
    """Raised when a definition name is already taken and overriding is disabled."""

    def __init__(self, name: str, existing: object, replacement: object) -> None:
        self.existing = existing
        self.replacement = replacement
        super().__init__(
            f"Cannot register component definition [{replacement}] for name '{name}': "
            f"there is already [{existing}] bound",
            name=name,
        )


class ResourceLoadError(DefinitionStoreError):
    """Raised when a document cannot be read, parsed or imported."""


class DefinitionParsingError(DefinitionStoreError):
    """Raised by a fail-fast problem reporter on the first reported error."""

    def __init__(self, problem: Problem) -> None:
        self.problem = problem
        super().__init__(str(problem))
