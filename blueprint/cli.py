"""Command-line interface for loading component definition documents."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from blueprint.config import validate_property_definition
from blueprint.environment import Environment
from blueprint.errors import BlueprintError
from blueprint.logging_config import setup_logging
from blueprint.reader import CollectingProblemReporter, create_reader
from blueprint.registry import ComponentDefinitionRegistry
from blueprint.storage.yaml_writer import save_yaml

__version__ = "0.1.0"

app = typer.Typer(
    name="blueprint",
    help="Load XML component definition documents into a registry.",
)
console = Console()


def _definitions_table(registry: ComponentDefinitionRegistry) -> Table:
    table = Table(title=f"{registry.definition_count} component definitions")
    table.add_column("Name", style="bold")
    table.add_column("Class")
    table.add_column("Aliases")
    table.add_column("Lazy")
    table.add_column("Source", style="dim")
    for name in registry.definition_names():
        definition = registry.get_definition(name)
        table.add_row(
            escape(name),
            escape(definition.class_name or f"(parent: {definition.parent_name})"),
            escape(", ".join(registry.aliases_of(name))),
            "yes" if definition.lazy_init else "no",
            escape(str(definition.source or "")),
        )
    return table


@app.command()
def load(
    paths: list[str] = typer.Argument(
        ...,
        help="Document locations: file paths, glob patterns or URLs",
    ),
    profile: list[str] = typer.Option(
        [],
        "--profile",
        "-p",
        help="Active profile (repeatable; default: from environment)",
    ),
    define: list[str] = typer.Option(
        [],
        "--define",
        "-D",
        help="Property for placeholder resolution, as key=value (repeatable)",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Reject definitions and aliases that override earlier ones",
    ),
    yaml_output: Path | None = typer.Option(
        None,
        "--yaml",
        help="Write the loaded definitions to this YAML file",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Load documents and show the registered component definitions."""
    if verbose:
        setup_logging(logging.DEBUG)

    # Validate inputs before reading any document
    try:
        properties = dict(validate_property_definition(item) for item in define)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e

    environment = Environment(active_profiles=profile or None, properties=properties)
    registry = ComponentDefinitionRegistry(
        allow_overriding=not strict, allow_alias_overriding=not strict
    )
    reporter = CollectingProblemReporter()
    reader = create_reader(registry=registry, environment=environment, reporter=reporter)

    for location in paths:
        console.print(f"[dim]Loading {escape(location)}...[/dim]")
        try:
            count, resources = reader.load_by_location(location)
        except BlueprintError as e:
            console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
            raise typer.Exit(1) from e
        if not resources:
            console.print(f"  [yellow]No documents found for {escape(location)}[/yellow]")
        else:
            console.print(f"  Documents: {len(resources)}, definitions: {count}")

    console.print()
    console.print(_definitions_table(registry))

    for problem in reporter.warnings:
        console.print(f"[bold yellow]Warning:[/bold yellow] {escape(str(problem))}")
    for problem in reporter.errors:
        console.print(f"[bold red]Error:[/bold red] {escape(str(problem))}")

    if yaml_output is not None:
        output_path = save_yaml(registry, yaml_output)
        console.print(f"[bold green]Saved to:[/bold green] {escape(str(output_path))}")

    if reporter.has_errors:
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"blueprint {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
