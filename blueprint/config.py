"""Shared configuration for the blueprint package."""

import re

# Namespace of the built-in element vocabulary
DEFAULT_NAMESPACE = "http://blueprint.dev/schema/components"

# Namespace for inline property decoration (p:name="value", p:name-ref="other")
PROPERTY_NAMESPACE = "http://blueprint.dev/schema/p"

# Default vocabulary element names
NESTED_SCOPE_ELEMENT = "components"
COMPONENT_ELEMENT = "component"
ALIAS_ELEMENT = "alias"
IMPORT_ELEMENT = "import"

# Attributes read by the registration driver
PROFILE_ATTRIBUTE = "profile"
RESOURCE_ATTRIBUTE = "resource"
NAME_ATTRIBUTE = "name"
ALIAS_ATTRIBUTE = "alias"

# Delimiters for multi-value attributes such as profile="dev, test"
MULTI_VALUE_ATTRIBUTE_DELIMITERS = ",; "

# Literal that means "inherit from the enclosing scope"
DEFAULT_VALUE = "default"

# Profiles considered active when none are set explicitly
DEFAULT_PROFILES = frozenset({"default"})

# Property / environment variable consulted for active profiles
ACTIVE_PROFILES_PROPERTY = "blueprint.profiles.active"
ACTIVE_PROFILES_ENV = "BLUEPRINT_PROFILES_ACTIVE"

# HTTP timeout in seconds for remote documents
HTTP_TIMEOUT = 10

# key=value, as passed with --define on the command line
PROPERTY_DEFINITION_PATTERN = re.compile(r"^([^=\s]+)=(.*)$")


def has_text(value: str | None) -> bool:
    """Return True if value contains at least one non-whitespace character."""
    return bool(value and value.strip())


def tokenize(
    value: str | None, delimiters: str = MULTI_VALUE_ATTRIBUTE_DELIMITERS
) -> list[str]:
    """Split a multi-value attribute into trimmed, non-empty tokens.

    Whitespace always acts as a delimiter in addition to the given ones.

    Args:
        value: The raw attribute value (may be None)
        delimiters: Characters that separate tokens

    Returns:
        Tokens in document order, e.g. "dev, test;prod" -> ["dev", "test", "prod"]
    """
    if not value:
        return []
    pattern = "[" + re.escape(delimiters) + r"\s]+"
    return [token for token in re.split(pattern, value) if token]


def validate_property_definition(definition: str) -> tuple[str, str]:
    """Validate and split a key=value property definition.

    Args:
        definition: String such as "db.url=jdbc:h2:mem"

    Returns:
        Tuple of (key, value)

    Raises:
        ValueError: If the definition is not in key=value form
    """
    match = PROPERTY_DEFINITION_PATTERN.match(definition)
    if not match:
        raise ValueError(
            f"Invalid property definition: '{definition}'. Expected key=value (e.g., db.host=localhost)"
        )
    return match.group(1), match.group(2)
