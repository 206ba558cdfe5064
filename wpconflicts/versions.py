"""Version-range algebra for Composer conflict constraints.

Pure value types with no I/O:

- ``Version``: a 4-component numeric version (major.minor.patch.revision).
- ``Range``: an interval over ``Version`` with optional, inclusive or
  exclusive endpoints.
- ``Constraint``: a logical-OR list of ``Range`` that renders as the
  minimal disjoint set of ranges covering the same versions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator

from .errors import MalformedVersion

_VERSION_RE = re.compile(
    r"^v?[ \t]?(?P<major>\d+)"
    r"(?:\.(?P<minor>\d+)(?:\.(?P<patch>\d+)(?:\.(?P<revision>\d+)?)?)?)?",
    re.ASCII,
)


# ─────────────────────────────────────────────────────────────────────────────
# Version
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, order=True)
class Version:
    """A dotted numeric version ordered lexicographically by its components.

    Attributes:
        major: First component.
        minor: Second component, ``0`` when omitted.
        patch: Third component, ``0`` when omitted.
        revision: Fourth component, ``0`` when omitted.
    """

    major: int = 0
    minor: int = 0
    patch: int = 0
    revision: int = 0

    @classmethod
    def parse(cls, raw: str) -> Version:
        """Parse a loosely structured version string.

        Accepts an optional leading ``v`` and a single blank, followed by
        one to four dot-separated integer groups.  Anything after the
        numeric prefix (``+build``, ``-beta``, `` as 2.0``) is ignored.

        Args:
            raw: Version string such as ``"1.2"``, ``"v1.0.0"`` or
                ``"1.0.0+foo"``.

        Returns:
            Parsed ``Version``.

        Raises:
            MalformedVersion: If no numeric version prefix is found.
        """
        m = _VERSION_RE.match(raw or "")
        if not m:
            raise MalformedVersion(raw)
        return cls(*(int(m.group(g) or 0) for g in ("major", "minor", "patch", "revision")))

    def compare(self, other: Version) -> int:
        """Return -1, 0 or 1 if this version is smaller, equal or larger."""
        if self < other:
            return -1
        if self > other:
            return 1
        return 0

    def equal_to(self, other: Version) -> bool:
        return self.compare(other) == 0

    def less_than(self, other: Version) -> bool:
        return self.compare(other) < 0

    def greater_than(self, other: Version) -> bool:
        return self.compare(other) > 0

    def normalize(self) -> str:
        """Return the four-component form, e.g. ``1.0.0.0``."""
        return f"{self.major}.{self.minor}.{self.patch}.{self.revision}"

    def __str__(self) -> str:
        s = self.normalize()
        for _ in range(3):
            if not s.endswith(".0"):
                break
            s = s[: -len(".0")]
        return s


# ─────────────────────────────────────────────────────────────────────────────
# Range
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Range:
    """An interval of versions with optional endpoints.

    ``floor`` / ``ceiling`` set to ``None`` mean no lower / upper limit;
    ``Range()`` matches every version.  ``floor <= ceiling`` is not
    checked, so an inverted range can be built and simply matches nothing
    useful.

    Attributes:
        floor: Lower bound, or ``None`` for unbounded.
        floor_inclusive: Whether ``floor`` itself is included.
        ceiling: Upper bound, or ``None`` for unbounded.
        ceiling_inclusive: Whether ``ceiling`` itself is included.
    """

    floor: Version | None = None
    floor_inclusive: bool = False
    ceiling: Version | None = None
    ceiling_inclusive: bool = False

    # Endpoint directives. Each returns a new Range; later calls win.

    def with_inclusive_floor(self, v: Version) -> Range:
        return replace(self, floor=v, floor_inclusive=True)

    def with_exclusive_floor(self, v: Version) -> Range:
        return replace(self, floor=v, floor_inclusive=False)

    def without_floor(self) -> Range:
        return replace(self, floor=None, floor_inclusive=False)

    def with_inclusive_ceiling(self, v: Version) -> Range:
        return replace(self, ceiling=v, ceiling_inclusive=True)

    def with_exclusive_ceiling(self, v: Version) -> Range:
        return replace(self, ceiling=v, ceiling_inclusive=False)

    def without_ceiling(self) -> Range:
        return replace(self, ceiling=None, ceiling_inclusive=False)

    @property
    def is_wildcard(self) -> bool:
        return self.floor is None and self.ceiling is None

    def __str__(self) -> str:
        if self.is_wildcard:
            return "*"

        if (
            self.floor is not None
            and self.floor_inclusive
            and self.ceiling_inclusive
            and self.floor == self.ceiling
        ):
            return str(self.floor)

        lower = ""
        if self.floor is not None:
            lower = (">=" if self.floor_inclusive else ">") + str(self.floor)

        upper = ""
        if self.ceiling is not None:
            upper = ("<=" if self.ceiling_inclusive else "<") + str(self.ceiling)

        return f"{lower} {upper}".strip(" ")


def _lower_first(a: Range, b: Range) -> tuple[Range, Range]:
    """Order two ranges by floor; a missing floor sorts lowest."""
    if a.floor is None:
        return a, b
    if b.floor is None or a.floor > b.floor:
        return b, a
    return a, b


def overlap(a: Range, b: Range) -> bool:
    """Check whether two ranges share a version or touch on an included point.

    Args:
        a: First range.
        b: Second range.

    Returns:
        True if the union of ``a`` and ``b`` is a single contiguous range.
    """
    if a.is_wildcard or b.is_wildcard:
        return True
    if str(a) == str(b):
        return True

    #     |<-a->
    # |<---b--->
    if a.ceiling is None and b.ceiling is None:
        return True

    # <-a->|
    # <---b--->|
    if a.floor is None and b.floor is None:
        return True

    a, b = _lower_first(a, b)
    # b.floor is set here: both floors missing was handled above.
    return (
        a.ceiling is None
        or a.ceiling > b.floor
        or (a.ceiling == b.floor and (a.ceiling_inclusive or b.floor_inclusive))
    )


def union_of_two(a: Range, b: Range) -> Range | None:
    """Merge two ranges into one.

    Ties on an unbounded side (both without ceiling, or both without floor)
    keep the narrower inclusivity (AND); ties in the general bounded case
    keep the wider one (OR).

    Args:
        a: Incoming range.
        b: Existing range.

    Returns:
        The merged ``Range``, or ``None`` when the two do not overlap.
    """
    if not overlap(a, b):
        return None

    if a.is_wildcard:
        return a
    if b.is_wildcard:
        return b
    if str(a) == str(b):
        return a

    # Both without ceiling, take the lesser floor.
    if a.ceiling is None and b.ceiling is None:
        floor, floor_inclusive = a.floor, a.floor_inclusive
        if b.floor < a.floor:
            floor, floor_inclusive = b.floor, b.floor_inclusive
        if a.floor == b.floor:
            floor_inclusive = a.floor_inclusive and b.floor_inclusive
        return Range(floor=floor, floor_inclusive=floor_inclusive)

    # Both without floor, take the greater ceiling.
    if a.floor is None and b.floor is None:
        ceiling, ceiling_inclusive = a.ceiling, a.ceiling_inclusive
        if b.ceiling > a.ceiling:
            ceiling, ceiling_inclusive = b.ceiling, b.ceiling_inclusive
        if a.ceiling == b.ceiling:
            ceiling_inclusive = a.ceiling_inclusive and b.ceiling_inclusive
        return Range(ceiling=ceiling, ceiling_inclusive=ceiling_inclusive)

    a, b = _lower_first(a, b)

    floor, floor_inclusive = a.floor, a.floor_inclusive
    if floor is not None and floor == b.floor:
        floor_inclusive = a.floor_inclusive or b.floor_inclusive
    if floor is None:
        floor_inclusive = False

    if a.ceiling is None or b.ceiling is None:
        return Range(floor=floor, floor_inclusive=floor_inclusive)

    ceiling, ceiling_inclusive = b.ceiling, b.ceiling_inclusive
    if a.ceiling > b.ceiling:
        ceiling, ceiling_inclusive = a.ceiling, a.ceiling_inclusive
    if a.ceiling == b.ceiling:
        ceiling_inclusive = a.ceiling_inclusive or b.ceiling_inclusive

    return Range(
        floor=floor,
        floor_inclusive=floor_inclusive,
        ceiling=ceiling,
        ceiling_inclusive=ceiling_inclusive,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Constraint
# ─────────────────────────────────────────────────────────────────────────────


def reduce_ranges(ranges: Iterable[Range]) -> list[Range]:
    """Collapse ranges into the minimal disjoint list with the same union.

    Each incoming range is merged into the first accumulated range it
    overlaps; after a merge the fold restarts over the accumulated ranges
    followed by the ranges not yet visited, since the widened range may
    now overlap others.  Every restart removes one range from the working
    list, so the loop terminates.

    Args:
        ranges: Ranges in any order, possibly overlapping.

    Returns:
        Disjoint ranges, in fold order.
    """
    work = list(ranges)

    while True:
        if not work:
            return []

        result = [work[0]]
        restarted = False

        for i in range(1, len(work)):
            incoming = work[i]
            for j, existing in enumerate(result):
                merged = union_of_two(incoming, existing)
                if merged is not None:
                    result[j] = merged
                    work = result + work[i + 1 :]
                    restarted = True
                    break
            if restarted:
                break
            result.append(incoming)

        if not restarted:
            return result


@dataclass
class Constraint:
    """Ranges grouped together with logical OR.

    Ranges are appended as-is; reduction happens when the constraint is
    rendered.
    """

    ranges: list[Range] = field(default_factory=list)

    def add(self, *ranges: Range) -> None:
        """OR one or more ranges into this constraint."""
        self.ranges.extend(ranges)

    def reduce(self) -> list[Range]:
        return reduce_ranges(self.ranges)

    def __iter__(self) -> Iterator[Range]:
        return iter(self.ranges)

    def __len__(self) -> int:
        return len(self.ranges)

    def __str__(self) -> str:
        # Sorted so output is deterministic; alternatives are unordered.
        return "||".join(sorted(str(r) for r in self.reduce()))
