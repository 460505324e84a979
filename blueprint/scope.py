"""Default-setting scopes for nested <components> sub-trees.

Every <components> element (the document root included) establishes a
ScopeContext from its ``default-*`` attributes. Settings that are not
declared on the element fall back to the enclosing scope, and finally to
the built-in defaults. Scopes are never mutated after construction; the
registrar passes them down the recursion explicitly, so a nested scope
cannot leak into the siblings of its element.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from blueprint.config import DEFAULT_VALUE, has_text, tokenize

if TYPE_CHECKING:
    from lxml import etree


# Setting name -> built-in value used when no scope declares it
BUILTIN_DEFAULTS: Mapping[str, str | None] = MappingProxyType(
    {
        "lazy-init": "false",
        "autowire": "no",
        "merge": "false",
        "autowire-candidates": None,
        "init-method": None,
        "destroy-method": None,
    }
)

DEFAULT_ATTRIBUTE_PREFIX = "default-"


@dataclass(frozen=True, eq=False)
class ScopeContext:
    """Immutable set of inheritable default settings.

    Attributes:
        settings: Values declared explicitly on the element that created
            this scope, keyed by setting name (without ``default-``).
        parent: Enclosing scope used for fallback lookup.
    """

    settings: Mapping[str, str] = field(default_factory=dict)
    parent: ScopeContext | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "settings", MappingProxyType(dict(self.settings)))

    @classmethod
    def from_element(
        cls, elem: etree._Element, parent: ScopeContext | None = None
    ) -> ScopeContext:
        """Build a scope from an element's ``default-*`` attributes.

        Blank values and the literal ``default`` count as "not set here".

        Args:
            elem: The <components> element
            parent: The enclosing scope, if any

        Returns:
            A new ScopeContext chained to parent
        """
        settings = {}
        for setting in BUILTIN_DEFAULTS:
            value = elem.get(DEFAULT_ATTRIBUTE_PREFIX + setting)
            if has_text(value) and value.strip() != DEFAULT_VALUE:
                settings[setting] = value.strip()
        return cls(settings, parent)

    def get(self, setting: str) -> str | None:
        """Look up a setting, falling back to the parent then the built-ins.

        Raises:
            KeyError: If setting is not a known default setting
        """
        if setting not in BUILTIN_DEFAULTS:
            raise KeyError(setting)
        if setting in self.settings:
            return self.settings[setting]
        if self.parent is not None:
            return self.parent.get(setting)
        return BUILTIN_DEFAULTS[setting]

    def is_explicit(self, setting: str) -> bool:
        """Return True if this scope itself declares the setting."""
        return setting in self.settings

    @property
    def lazy_init(self) -> bool:
        return self.get("lazy-init") == "true"

    @property
    def autowire(self) -> str:
        return self.get("autowire")

    @property
    def merge(self) -> bool:
        return self.get("merge") == "true"

    @property
    def autowire_candidates(self) -> list[str]:
        return tokenize(self.get("autowire-candidates"), ",")

    @property
    def init_method(self) -> str | None:
        return self.get("init-method")

    @property
    def destroy_method(self) -> str | None:
        return self.get("destroy-method")

    @property
    def depth(self) -> int:
        """Number of enclosing scopes (0 for a document root)."""
        return 0 if self.parent is None else self.parent.depth + 1

    def __repr__(self) -> str:
        return f"ScopeContext(settings={dict(self.settings)!r}, depth={self.depth})"
