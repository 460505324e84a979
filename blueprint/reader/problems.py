"""Problem reporting and event listeners for the document reader."""

from __future__ import annotations

from dataclasses import dataclass, field

from blueprint.errors import DefinitionParsingError
from blueprint.logging_config import logger
from blueprint.models import (
    AliasEvent,
    ComponentEvent,
    DefaultsEvent,
    ImportEvent,
    SourceLocation,
)


@dataclass(frozen=True)
class Problem:
    """A problem found in a document, reported against an element."""

    message: str
    source: SourceLocation | None = None
    cause: BaseException | None = None

    def __str__(self) -> str:
        text = f"Configuration problem: {self.message}"
        if self.source is not None:
            text = f"{text}\nOffending resource: {self.source}"
        if self.cause is not None:
            text = f"{text}\nCaused by: {self.cause}"
        return text


@dataclass
class CollectingProblemReporter:
    """Accumulates problems so a whole load can be reported at once."""

    errors: list[Problem] = field(default_factory=list)
    warnings: list[Problem] = field(default_factory=list)

    def error(self, problem: Problem) -> None:
        logger.error(f"{problem.message} ({problem.source})")
        self.errors.append(problem)

    def warning(self, problem: Problem) -> None:
        logger.warning(f"{problem.message} ({problem.source})")
        self.warnings.append(problem)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def messages(self) -> list[str]:
        """Return error messages in the order they were reported."""
        return [problem.message for problem in self.errors]


class FailFastProblemReporter:
    """Raises on the first error; warnings are only logged."""

    def error(self, problem: Problem) -> None:
        raise DefinitionParsingError(problem)

    def warning(self, problem: Problem) -> None:
        logger.warning(str(problem))


class EmptyReaderEventListener:
    """Listener that ignores every event."""

    def defaults_registered(self, event: DefaultsEvent) -> None:
        pass

    def import_processed(self, event: ImportEvent) -> None:
        pass

    def alias_registered(self, event: AliasEvent) -> None:
        pass

    def component_registered(self, event: ComponentEvent) -> None:
        pass


@dataclass
class CollectingReaderEventListener:
    """Listener that records every event, mostly for diagnostics and tests."""

    defaults: list[DefaultsEvent] = field(default_factory=list)
    imports: list[ImportEvent] = field(default_factory=list)
    aliases: list[AliasEvent] = field(default_factory=list)
    components: list[ComponentEvent] = field(default_factory=list)

    def defaults_registered(self, event: DefaultsEvent) -> None:
        self.defaults.append(event)

    def import_processed(self, event: ImportEvent) -> None:
        self.imports.append(event)

    def alias_registered(self, event: AliasEvent) -> None:
        self.aliases.append(event)

    def component_registered(self, event: ComponentEvent) -> None:
        self.components.append(event)

    def component_names(self) -> list[str]:
        return [event.name for event in self.components]
