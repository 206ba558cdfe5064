"""Package name resolution for WordPress software.

A ``Searcher`` maps a (package type, slug) pair to zero or more Composer
package names.  Searchers compose: ``CompositeSearcher`` concatenates the
results of its children in order.

Adding a new naming convention requires only:
1. Subclass ``Searcher`` (or wrap a function in ``FunctionSearcher``).
2. Add it to the composite built by ``default_searcher()``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Iterable, Sequence

from .entities import PackageType

WPACKAGIST_PLUGIN_VENDOR = "wpackagist-plugin"
WPACKAGIST_THEME_VENDOR = "wpackagist-theme"

DEFAULT_CORE_PACKAGES = (
    "johnpbloch/wordpress-core",
    "pantheon-systems/wordpress-composer",
    "roots/wordpress-full",
    "roots/wordpress-no-content",
)


class Searcher(ABC):
    """Base class for all package name resolvers."""

    @abstractmethod
    def search(self, package_type: PackageType, slug: str) -> list[str]:
        """Return candidate Composer package names.

        Args:
            package_type: Composer package type of the software.
            slug: WordPress.org slug.

        Returns:
            Package names, possibly empty.  Never raises for unknown input.
        """
        ...


class FunctionSearcher(Searcher):
    """Adapts a plain function to the ``Searcher`` interface."""

    def __init__(self, fn: Callable[[PackageType, str], Iterable[str]]):
        self.fn = fn

    def search(self, package_type: PackageType, slug: str) -> list[str]:
        return list(self.fn(package_type, slug) or [])


class PrefixedSearcher(Searcher):
    """Names packages ``<prefix>/<slug>`` for one package type.

    Example: ``PrefixedSearcher(PackageType.PLUGIN, "wpackagist-plugin")``
    resolves ``akismet`` to ``wpackagist-plugin/akismet``.
    """

    def __init__(self, package_type: PackageType, prefix: str):
        self.package_type = package_type
        self.prefix = prefix

    def search(self, package_type: PackageType, slug: str) -> list[str]:
        if package_type != self.package_type:
            return []
        return [f"{self.prefix}/{slug}"]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrefixedSearcher):
            return NotImplemented
        return (self.package_type, self.prefix) == (other.package_type, other.prefix)

    def __repr__(self) -> str:
        return f"PrefixedSearcher({self.package_type.value!r}, {self.prefix!r})"


class StaticSearcher(Searcher):
    """Returns a fixed list of names for one package type, ignoring the slug.

    Used for WordPress core, which is published under several well-known
    package names.
    """

    def __init__(self, package_type: PackageType, names: Sequence[str]):
        self.package_type = package_type
        self.names = list(names)

    def search(self, package_type: PackageType, slug: str) -> list[str]:
        if package_type != self.package_type:
            return []
        return list(self.names)


class CompositeSearcher(Searcher):
    """Concatenates results of child searchers, in the order they were added."""

    def __init__(self, searchers: Iterable[Searcher] = ()):
        self.searchers: list[Searcher] = list(searchers)

    def add(self, searcher: Searcher) -> CompositeSearcher:
        self.searchers.append(searcher)
        return self

    def search(self, package_type: PackageType, slug: str) -> list[str]:
        names: list[str] = []
        for s in self.searchers:
            names.extend(s.search(package_type, slug))
        return names


def default_searcher(
    plugin_vendors: Sequence[str] = (WPACKAGIST_PLUGIN_VENDOR,),
    theme_vendors: Sequence[str] = (WPACKAGIST_THEME_VENDOR,),
    core_packages: Sequence[str] = DEFAULT_CORE_PACKAGES,
) -> CompositeSearcher:
    """Build the standard composite searcher.

    Args:
        plugin_vendors: Vendor prefixes for plugin packages.
        theme_vendors: Vendor prefixes for theme packages.
        core_packages: Package names that publish WordPress core.

    Returns:
        ``CompositeSearcher`` with the core names first, then one prefixed
        searcher per plugin vendor and per theme vendor.
    """
    cs = CompositeSearcher()
    if core_packages:
        cs.add(StaticSearcher(PackageType.CORE, core_packages))
    for prefix in plugin_vendors:
        cs.add(PrefixedSearcher(PackageType.PLUGIN, prefix))
    for prefix in theme_vendors:
        cs.add(PrefixedSearcher(PackageType.THEME, prefix))
    return cs
