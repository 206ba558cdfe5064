"""Conflict generation: feed records in, Composer document out."""

from __future__ import annotations

import logging
from typing import Iterable, Protocol

from .composer import ComposerDocument, Link
from .entities import Entity, EntityKind
from .feed import Vulnerability, VulnerabilityFilter, aggregate_entities
from .searchers import Searcher

logger = logging.getLogger(__name__)

# Core slugs never emitted as conflicts.
SKIPPED_CORE_SLUGS = frozenset({"wpmu"})


class Fetcher(Protocol):
    def fetch(self, vuln_filter: VulnerabilityFilter | None = None) -> list[Vulnerability]: ...


def is_skipped(entity: Entity) -> bool:
    return entity.kind is EntityKind.CORE and entity.slug in SKIPPED_CORE_SLUGS


def build_document(entities: Iterable[Entity], searcher: Searcher) -> ComposerDocument:
    """Turn entities into conflict links.

    Every non-empty name the searcher returns for an entity becomes one
    link sharing that entity's constraint.  Entities without any parseable
    range produce no links.

    Args:
        entities: Aggregated entities.
        searcher: Package name resolver.

    Returns:
        Document holding one link per resolved package name.
    """
    doc = ComposerDocument()

    for entity in entities:
        if is_skipped(entity):
            continue
        if not entity.constraint:
            logger.debug("No usable ranges for %s %s", entity.kind.value, entity.slug)
            continue

        names = [n for n in searcher.search(entity.package_type, entity.slug) if n]
        if not names:
            logger.debug("No package names for %s %s", entity.kind.value, entity.slug)
            continue

        for name in names:
            doc.add_conflict(Link(name=name, constraint=entity.constraint))

    return doc


class Generator:
    """Wires a feed client and a searcher together.

    Attributes:
        client: Feed client (``FeedClient`` or anything with a
            ``fetch(vuln_filter)`` method). Ignores apply to one call only;
            the client is not mutated.
        searcher: Package name resolver.
    """

    def __init__(self, client: Fetcher, searcher: Searcher):
        self.client = client
        self.searcher = searcher

    def generate(self, ignores: Iterable[str] = ()) -> ComposerDocument:
        """Fetch the feed and build the conflicts document.

        Args:
            ignores: Record ids and/or CVE ids to exclude; each entry is
                matched against both.

        Returns:
            The generated ``ComposerDocument``.

        Raises:
            FeedFetchFailed: If the feed cannot be fetched or decoded.
            EmptyFeedResult: If every record was excluded.
        """
        ignores = [i for i in ignores if i]
        vuln_filter = VulnerabilityFilter().exclude_ids(*ignores).exclude_cves(*ignores)

        vulns = self.client.fetch(vuln_filter)
        entities = aggregate_entities(vulns)
        doc = build_document(entities, self.searcher)

        logger.info("Generated %d conflicts for %d entities", len(doc), len(entities))
        return doc
