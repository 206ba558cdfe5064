"""Shared fixtures: a small production-style Wordfence feed."""

import copy
from typing import Any

import pytest


def _av(from_version: str, from_inclusive: bool, to_version: str, to_inclusive: bool) -> dict[str, Any]:
    return {
        "from_version": from_version,
        "from_inclusive": from_inclusive,
        "to_version": to_version,
        "to_inclusive": to_inclusive,
    }


def _record(uuid: str, cve: str, sw_type: str, slug: str, affected: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": uuid,
        "title": f"{slug} vulnerability",
        "software": [
            {
                "type": sw_type,
                "name": slug.replace("-", " ").title(),
                "slug": slug,
                "affected_versions": affected,
                "patched": False,
            }
        ],
        "cve": cve,
        "cvss": {"score": 6.1},
    }


PRODUCTION_FEED: dict[str, Any] = {
    r["id"]: r
    for r in [
        _record(
            "123e4567-e89b-12d3-a456-426655440000",
            "CVE-2022-1111",
            "plugin",
            "foo-bar",
            {
                "* - 1.5.7": _av("*", True, "1.5.7", True),
                "1.6 - 1.6.3": _av("1.6", True, "1.6.3", True),
                "1.7 - 1.7.3.3": _av("1.7", True, "1.7.3.3", True),
            },
        ),
        _record(
            "223e4567-e89b-12d3-a456-426655440000",
            "CVE-2022-2222",
            "plugin",
            "foo-bar",
            {
                "[1.8 - 1.8.8.8)": _av("1.8", True, "1.8.8.8", False),
                "(1.9 - 1.9.9.9]": _av("1.9", False, "1.9.9.9", True),
            },
        ),
        _record(
            "323e4567-e89b-12d3-a456-426655440000",
            "CVE-2022-3333",
            "theme",
            "foo-bar",
            {
                "[2.8 - 2.8.8.8)": _av("2.8", True, "2.8.8.8", False),
                "(2.9 - 2.9.9]": _av("2.9", False, "2.9.9", True),
            },
        ),
        _record(
            "423e4567-e89b-12d3-a456-426655440000",
            "CVE-2022-4444",
            "core",
            "wordpress",
            {
                "[3.8 - 3.8.8.8)": _av("3.8", True, "3.8.8.8", False),
                "(3.9 - 3.9.9]": _av("3.9", False, "3.9.9", True),
            },
        ),
        _record(
            "523e4567-e89b-12d3-a456-426655440000",
            "CVE-2022-5555",
            "plugin",
            "foo-bar-wildcard",
            {"* - *": _av("*", True, "*", True)},
        ),
        _record(
            "623e4567-e89b-12d3-a456-426655440000",
            "CVE-2022-6666",
            "plugin",
            "foo-bar",
            {
                "[1.0 - 2.0]": _av("1.0", True, "2.0", True),
                "[9.1.1 - 10.2.2)": _av("9.1.1", True, "10.2.2", False),
            },
        ),
        _record(
            "723e4567-e89b-12d3-a456-426655440000",
            "CVE-2022-7777",
            "plugin",
            "foo-bar-informational",
            {"informational": _av("informational", True, "informational", True)},
        ),
        _record(
            "823e4567-e89b-12d3-a456-426655440000",
            "CVE-2022-8888",
            "core",
            "wordpress",
            {"* - 6.1.1": _av("*", True, "6.1.1", True)},
        ),
    ]
}


@pytest.fixture
def production_feed() -> dict[str, Any]:
    """Raw decoded feed body, safe to mutate."""
    return copy.deepcopy(PRODUCTION_FEED)
