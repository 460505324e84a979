"""Export of registered component definitions."""

from blueprint.storage.yaml_writer import generate_yaml_dict, save_yaml

__all__ = ["generate_yaml_dict", "save_yaml"]
