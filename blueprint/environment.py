"""Environment: active profiles and ${...} placeholder resolution."""

from __future__ import annotations

import os
from typing import Iterable, Mapping

from blueprint.config import (
    ACTIVE_PROFILES_ENV,
    ACTIVE_PROFILES_PROPERTY,
    DEFAULT_PROFILES,
    has_text,
    tokenize,
)
from blueprint.errors import PlaceholderResolutionError

PLACEHOLDER_PREFIX = "${"
PLACEHOLDER_SUFFIX = "}"
VALUE_SEPARATOR = ":"


class Environment:
    """Profiles and properties that documents are evaluated against.

    Property lookup consults the explicit properties first and then, unless
    disabled, the process environment.
    """

    def __init__(
        self,
        active_profiles: Iterable[str] | None = None,
        default_profiles: Iterable[str] | None = None,
        properties: Mapping[str, str] | None = None,
        use_os_environ: bool = True,
    ) -> None:
        self._properties = dict(properties or {})
        self._use_os_environ = use_os_environ
        if active_profiles is None:
            active_profiles = tokenize(
                self.get_property(ACTIVE_PROFILES_PROPERTY)
                or self.get_property(ACTIVE_PROFILES_ENV)
            )
        self._active_profiles = frozenset(active_profiles)
        self._default_profiles = frozenset(
            DEFAULT_PROFILES if default_profiles is None else default_profiles
        )

    @property
    def active_profiles(self) -> frozenset[str]:
        return self._active_profiles

    @property
    def default_profiles(self) -> frozenset[str]:
        return self._default_profiles

    def get_property(self, key: str) -> str | None:
        if key in self._properties:
            return self._properties[key]
        if self._use_os_environ:
            return os.environ.get(key)
        return None

    def accepts_profiles(self, profiles: Iterable[str]) -> bool:
        """Return True if any of the given profiles is accepted.

        A profile prefixed with "!" is accepted when the named profile is
        not active. When no profile is active, the default profiles count
        as active.

        Example:
            >>> env = Environment(["dev"])
            >>> env.accepts_profiles(["dev", "prod"])   # True
            >>> env.accepts_profiles(["!dev"])          # False
            >>> env.accepts_profiles(["!test"])         # True
        """
        for profile in profiles:
            if profile.startswith("!"):
                if not self._is_active(profile[1:]):
                    return True
            elif self._is_active(profile):
                return True
        return False

    def _is_active(self, profile: str) -> bool:
        if not has_text(profile):
            raise ValueError(f"Invalid profile [{profile}]: must contain text")
        current = self._active_profiles or self._default_profiles
        return profile in current

    def resolve_required_placeholders(self, text: str) -> str:
        """Replace ${key} and ${key:fallback} placeholders in text.

        Placeholders may be nested (``${db.${env}.url}``) and property values
        are themselves resolved.

        Raises:
            PlaceholderResolutionError: If a placeholder has no value and no
                fallback, or refers back to itself
        """
        return self._parse(text, set())

    def _parse(self, text: str, visiting: set[str]) -> str:
        result = text
        start = result.find(PLACEHOLDER_PREFIX)
        while start != -1:
            end = _find_placeholder_end(result, start)
            if end == -1:
                break

            placeholder = self._parse(
                result[start + len(PLACEHOLDER_PREFIX) : end], visiting
            )
            if placeholder in visiting:
                raise PlaceholderResolutionError(
                    placeholder, f"circular reference in {text}"
                )

            key, fallback = placeholder, None
            if VALUE_SEPARATOR in placeholder:
                key, fallback = placeholder.split(VALUE_SEPARATOR, 1)

            value = self.get_property(key)
            if value is None:
                value = fallback
            if value is None:
                raise PlaceholderResolutionError(placeholder, text)

            value = self._parse(value, visiting | {placeholder})
            result = result[:start] + value + result[end + len(PLACEHOLDER_SUFFIX) :]
            start = result.find(PLACEHOLDER_PREFIX, start + len(value))

        return result


def _find_placeholder_end(text: str, start: int) -> int:
    """Find the closing brace that matches the placeholder opened at start."""
    index = start + len(PLACEHOLDER_PREFIX)
    depth = 0
    while index < len(text):
        if text.startswith(PLACEHOLDER_SUFFIX, index):
            if depth == 0:
                return index
            depth -= 1
            index += len(PLACEHOLDER_SUFFIX)
        elif text.startswith(PLACEHOLDER_PREFIX, index):
            depth += 1
            index += len(PLACEHOLDER_PREFIX)
        else:
            index += 1
    return -1
