"""Installable WordPress software units and their vulnerable ranges."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .errors import EmptyEntitySlug
from .versions import Constraint, Range

CORE_SLUG = "wordpress-core"


class PackageType(str, Enum):
    """Composer package types for WordPress software."""

    CORE = "wordpress-core"
    PLUGIN = "wordpress-plugin"
    THEME = "wordpress-theme"


class EntityKind(str, Enum):
    """Software kinds as reported by the vulnerability feed."""

    CORE = "core"
    PLUGIN = "plugin"
    THEME = "theme"

    @property
    def package_type(self) -> PackageType:
        return PackageType[self.name]


@dataclass
class Entity:
    """One installable unit (core, plugin or theme) and its vulnerable ranges.

    Use the ``core``, ``plugin``, ``theme`` or ``create`` factories rather
    than the constructor so empty slugs are rejected.

    Attributes:
        kind: Core, plugin or theme.
        slug: WordPress.org slug, e.g. ``akismet``.
        constraint: Every known-vulnerable range, ORed together.
    """

    kind: EntityKind
    slug: str
    constraint: Constraint = field(default_factory=Constraint)

    @classmethod
    def core(cls, slug: str = CORE_SLUG) -> Entity:
        return cls(kind=EntityKind.CORE, slug=slug or CORE_SLUG)

    @classmethod
    def plugin(cls, slug: str) -> Entity:
        if not slug:
            raise EmptyEntitySlug(EntityKind.PLUGIN.value)
        return cls(kind=EntityKind.PLUGIN, slug=slug)

    @classmethod
    def theme(cls, slug: str) -> Entity:
        if not slug:
            raise EmptyEntitySlug(EntityKind.THEME.value)
        return cls(kind=EntityKind.THEME, slug=slug)

    @classmethod
    def create(cls, kind: EntityKind, slug: str) -> Entity:
        """Build an entity of the given kind.

        Raises:
            EmptyEntitySlug: If ``slug`` is empty for a plugin or theme.
        """
        if kind is EntityKind.CORE:
            return cls.core(slug)
        if kind is EntityKind.PLUGIN:
            return cls.plugin(slug)
        return cls.theme(slug)

    @property
    def key(self) -> tuple[EntityKind, str]:
        return self.kind, self.slug

    @property
    def package_type(self) -> PackageType:
        return self.kind.package_type

    def add(self, *ranges: Range) -> None:
        """OR ranges into this entity's constraint."""
        self.constraint.add(*ranges)
