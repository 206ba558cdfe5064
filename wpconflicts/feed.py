"""Vulnerability feed records and their aggregation into entities.

Pydantic models for the Wordfence Intelligence v2 feed format plus pure
functions turning validated records into ``Entity`` objects.  No I/O or
network calls here; fetching lives in ``downloaders``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .entities import Entity, EntityKind
from .errors import EmptyEntitySlug, MalformedVersion
from .versions import Range, Version

logger = logging.getLogger(__name__)

WILDCARD = "*"


class AffectedVersion(BaseModel):
    """One affected-version range as reported by the feed.

    Example JSON::

        "1.6 - 1.6.3": {
            "from_version": "1.6",
            "from_inclusive": true,
            "to_version": "1.6.3",
            "to_inclusive": true
        }
    """

    model_config = ConfigDict(extra="ignore")

    from_version: str = WILDCARD
    from_inclusive: bool = True
    to_version: str = WILDCARD
    to_inclusive: bool = True

    @field_validator("from_version", "to_version", mode="before")
    @classmethod
    def _null_version(cls, v: Any) -> Any:
        # A null bound fails parsing later, which drops only this descriptor.
        return "" if v is None else v

    @field_validator("from_inclusive", "to_inclusive", mode="before")
    @classmethod
    def _null_flag(cls, v: Any) -> Any:
        return True if v is None else v


class Software(BaseModel):
    """A piece of affected software inside a vulnerability record.

    Attributes:
        type: ``core``, ``plugin`` or ``theme``.
        slug: WordPress.org slug.
        name: Human-readable name.
        affected_versions: Affected ranges keyed by their display label.
    """

    model_config = ConfigDict(extra="ignore")

    type: str = ""
    slug: str = ""
    name: str | None = None
    affected_versions: dict[str, AffectedVersion] = Field(default_factory=dict)

    @field_validator("type", "slug", mode="before")
    @classmethod
    def _normalize(cls, v: Any) -> str:
        return str(v or "").strip()

    @field_validator("affected_versions", mode="before")
    @classmethod
    def _null_affected(cls, v: Any) -> Any:
        return {} if v is None else v


class Vulnerability(BaseModel):
    """A single vulnerability record.

    Attributes:
        id: Feed identifier (a UUID for Wordfence).
        cve: CVE identifier, when one was assigned.
        title: Short description.
        software: Every piece of software the vulnerability affects.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    cve: str | None = None
    title: str | None = None
    software: list[Software] = Field(default_factory=list)

    @field_validator("software", mode="before")
    @classmethod
    def _null_software(cls, v: Any) -> Any:
        return [] if v is None else v


def parse_vulnerabilities(data: Any) -> list[Vulnerability]:
    """Validate raw feed JSON into ``Vulnerability`` models.

    The feed is a JSON object keyed by record id.  A record without its
    own ``id`` inherits the key.  A bare list of records is accepted too.

    Args:
        data: Decoded JSON body.

    Returns:
        List of validated records.

    Raises:
        ValueError: If ``data`` is neither an object nor a list of records.
        pydantic.ValidationError: If a record fails validation.
    """
    if isinstance(data, dict):
        records = []
        for key, record in data.items():
            if isinstance(record, dict) and not record.get("id"):
                record = {**record, "id": key}
            records.append(record)
    elif isinstance(data, list):
        records = data
    else:
        raise ValueError(f"expected a JSON object of vulnerabilities, got {type(data).__name__}")

    return [Vulnerability.model_validate(r) for r in records]


# ─────────────────────────────────────────────────────────────────────────────
# Filtering
# ─────────────────────────────────────────────────────────────────────────────

ExcludeFunc = Callable[[Vulnerability], bool]


class VulnerabilityFilter:
    """Chainable exclusion predicates over vulnerability records.

    Example::

        f = VulnerabilityFilter().exclude_ids("123e4567-...").exclude_cves("CVE-2022-3590")
        kept = f.apply(vulns)
    """

    def __init__(self) -> None:
        self._exclude_funcs: list[ExcludeFunc] = []

    def exclude_ids(self, *ids: str) -> VulnerabilityFilter:
        wanted = set(ids)
        return self.exclude_where(lambda v: v.id in wanted)

    def exclude_cves(self, *cves: str) -> VulnerabilityFilter:
        wanted = set(cves)
        return self.exclude_where(lambda v: v.cve is not None and v.cve in wanted)

    def exclude_where(self, fn: ExcludeFunc) -> VulnerabilityFilter:
        self._exclude_funcs.append(fn)
        return self

    def excludes(self, vuln: Vulnerability) -> bool:
        return any(fn(vuln) for fn in self._exclude_funcs)

    def apply(self, vulns: Iterable[Vulnerability]) -> list[Vulnerability]:
        return [v for v in vulns if not self.excludes(v)]


# ─────────────────────────────────────────────────────────────────────────────
# Aggregation
# ─────────────────────────────────────────────────────────────────────────────


def affected_range(av: AffectedVersion) -> Range:
    """Convert a feed range descriptor into a ``Range``.

    ``"*"`` on either side leaves that side unbounded.

    Raises:
        MalformedVersion: If either bound is neither ``"*"`` nor a version
            (e.g. ``"informational"``).
    """
    r = Range()

    if av.from_version.strip() != WILDCARD:
        v = Version.parse(av.from_version)
        r = r.with_inclusive_floor(v) if av.from_inclusive else r.with_exclusive_floor(v)

    if av.to_version.strip() != WILDCARD:
        v = Version.parse(av.to_version)
        r = r.with_inclusive_ceiling(v) if av.to_inclusive else r.with_exclusive_ceiling(v)

    return r


def aggregate_entities(vulns: Iterable[Vulnerability]) -> list[Entity]:
    """Group affected ranges by software.

    Every (kind, slug) pair gets one ``Entity`` whose constraint ORs the
    ranges of all records affecting it.  Unparseable range descriptors and
    software with an unknown type or empty slug are skipped.

    Args:
        vulns: Records, already filtered.

    Returns:
        Entities in first-seen order.
    """
    entities: dict[tuple[EntityKind, str], Entity] = {}

    for vuln in vulns:
        for sw in vuln.software:
            try:
                kind = EntityKind(sw.type)
            except ValueError:
                logger.warning("Skipping software %r of unknown type %r in %s", sw.slug, sw.type, vuln.id)
                continue

            try:
                candidate = Entity.create(kind, sw.slug)
            except EmptyEntitySlug as e:
                logger.warning("Skipping software in %s: %s", vuln.id, e)
                continue
            # Keyed by the factory's slug so an empty core slug joins CORE_SLUG.
            entity = entities.setdefault(candidate.key, candidate)

            for label, av in sw.affected_versions.items():
                try:
                    entity.add(affected_range(av))
                except MalformedVersion as e:
                    logger.debug("Skipping affected versions %r of %s in %s: %s", label, sw.slug, vuln.id, e)

    return list(entities.values())
