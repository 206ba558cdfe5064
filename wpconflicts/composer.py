"""Composer JSON document with generated ``conflicts``.

Builds ``{"conflicts": {package: constraint}}`` and deep-merges it into a
caller-supplied base ``composer.json``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import DocumentMergeFailed


@dataclass(frozen=True)
class Link:
    """A package name paired with the constraint it conflicts with.

    Attributes:
        name: Composer package name, e.g. ``wpackagist-plugin/akismet``.
        constraint: Anything whose ``str()`` is a Composer constraint,
            usually a ``Constraint``.
    """

    name: str
    constraint: Any

    def __str__(self) -> str:
        return f"{self.name}: {self.constraint}"


class ComposerDocument:
    """Collects conflict links and renders them as Composer JSON."""

    def __init__(self) -> None:
        self._conflicts: dict[str, Link] = {}

    def add_conflict(self, link: Link) -> None:
        """Add a link; a later link with the same name replaces the earlier one."""
        self._conflicts[link.name] = link

    def conflicts(self) -> dict[str, str]:
        """Return the rendered ``package -> constraint`` mapping."""
        return {name: str(link.constraint) for name, link in self._conflicts.items()}

    def __len__(self) -> int:
        return len(self._conflicts)

    def __contains__(self, name: object) -> bool:
        return name in self._conflicts

    def to_json(self) -> bytes:
        return dumps_unescaped({"conflicts": self.conflicts()})

    def merge(self, base: bytes | str = b"{}") -> bytes:
        """Deep-merge the generated conflicts into ``base``.

        Generated values win on key collisions.

        Raises:
            DocumentMergeFailed: If ``base`` is not valid JSON.
        """
        return json_merge(self.to_json(), base)


def dumps_unescaped(value: Any) -> bytes:
    """Serialize to compact UTF-8 JSON without escaping HTML or non-ASCII.

    Constraint strings keep ``<``, ``>`` and ``&`` literal.  Keys are
    sorted and the output ends with a newline.
    """
    text = json.dumps(value, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    return (text + "\n").encode("utf-8")


def merge_values(x1: Any, x2: Any) -> Any:
    """Recursively merge ``x2`` into ``x1``, preferring ``x1``.

    Objects merge key by key.  Any other type (including arrays) is taken
    from ``x1`` whole, except that a ``None`` ``x1`` yields an object ``x2``.
    """
    if isinstance(x1, dict):
        if not isinstance(x2, dict):
            return x1
        merged = dict(x2)
        for k, v1 in x1.items():
            merged[k] = merge_values(v1, x2[k]) if k in x2 else v1
        return merged
    if x1 is None and isinstance(x2, dict):
        return x2
    return x1


def json_merge(a: bytes | str, b: bytes | str) -> bytes:
    """Merge two JSON documents, preferring ``a`` on conflicting keys.

    Args:
        a: Preferred document.
        b: Base document.

    Returns:
        Merged document, serialized with ``dumps_unescaped``.

    Raises:
        DocumentMergeFailed: If either side cannot be decoded.
    """
    try:
        j1 = json.loads(a)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DocumentMergeFailed(str(e), side="generated") from e

    try:
        j2 = json.loads(b)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DocumentMergeFailed(str(e), side="base") from e

    return dumps_unescaped(merge_values(j1, j2))


def write_document(path: Path, content: bytes) -> None:
    """Write ``content`` to ``path`` atomically via a temporary sibling."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("wb") as f:
        f.write(content)
    tmp.replace(path)
