"""YAML writer for registered component definitions."""

import io
from pathlib import Path

import ruamel.yaml
from ruamel.yaml.scalarstring import LiteralScalarString

from blueprint.models import ComponentDefinition, ComponentReference
from blueprint.registry import ComponentDefinitionRegistry

YAML_WIDTH = 100


def _value_to_yaml(value):
    """Render a property or argument value; references become {ref: name}."""
    if isinstance(value, ComponentReference):
        return {"ref": value.name}
    if isinstance(value, str) and "\n" in value:
        return LiteralScalarString(value)
    return value


def _definition_to_dict(name: str, definition: ComponentDefinition, aliases: list[str]) -> dict:
    """Convert a definition to a dictionary, leaving out unset optional fields."""
    result: dict = {"name": name}
    if aliases:
        result["aliases"] = aliases
    if definition.class_name:
        result["class"] = definition.class_name
    if definition.parent_name:
        result["parent"] = definition.parent_name

    result["lazy_init"] = definition.lazy_init
    result["autowire"] = definition.autowire
    if not definition.autowire_candidate:
        result["autowire_candidate"] = False
    if definition.primary:
        result["primary"] = True
    if definition.depends_on:
        result["depends_on"] = list(definition.depends_on)
    if definition.init_method:
        result["init_method"] = definition.init_method
    if definition.destroy_method:
        result["destroy_method"] = definition.destroy_method
    if definition.description:
        result["description"] = definition.description

    if definition.property_values:
        result["properties"] = {
            prop.name: _value_to_yaml(prop.value)
            for prop in definition.property_values.values()
        }
    if definition.constructor_arguments:
        arguments = []
        for arg in definition.constructor_arguments:
            entry: dict = {}
            if arg.index is not None:
                entry["index"] = arg.index
            if arg.name:
                entry["name"] = arg.name
            entry["value"] = _value_to_yaml(arg.value)
            arguments.append(entry)
        result["constructor_args"] = arguments

    if definition.source is not None:
        result["source"] = str(definition.source)
    return result


def generate_yaml_dict(registry: ComponentDefinitionRegistry) -> dict:
    """Generate a dictionary describing every definition in a registry.

    Args:
        registry: A ComponentDefinitionRegistry

    Returns:
        Dictionary ready for YAML serialization
    """
    return {
        "components": [
            _definition_to_dict(
                name, registry.get_definition(name), registry.aliases_of(name)
            )
            for name in registry.definition_names()
        ],
    }


def save_yaml(registry: ComponentDefinitionRegistry, output_path: Path) -> Path:
    """Save the definitions of a registry as a YAML file.

    Args:
        registry: A ComponentDefinitionRegistry
        output_path: File to write; parent directories are created

    Returns:
        Path to the saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    yaml = ruamel.yaml.YAML()
    yaml.default_flow_style = False
    yaml.indent(mapping=2, sequence=4, offset=2)
    yaml.width = YAML_WIDTH
    yaml.explicit_start = True

    # ruamel.yaml leaves trailing spaces when wrapping long values
    buffer = io.StringIO()
    yaml.dump(generate_yaml_dict(registry), buffer)
    content = "\n".join(line.rstrip() for line in buffer.getvalue().splitlines()) + "\n"

    with open(output_path, "w", encoding="utf-8", newline="\n") as f:
        f.write(content)

    return output_path
