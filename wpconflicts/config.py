"""Configuration models using Pydantic.

Settings can come from a YAML (preferred) or JSON file and are then
overridden by CLI flags.

Example ``wpconflicts.yaml``::

    feed: production
    plugin_vendors:
      - wpackagist-plugin
    theme_vendors:
      - wpackagist-theme
    core_packages:
      - roots/wordpress-no-content
    ignore:
      - CVE-2022-3590
    base: composer.base.json
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError
from .searchers import DEFAULT_CORE_PACKAGES, WPACKAGIST_PLUGIN_VENDOR, WPACKAGIST_THEME_VENDOR

logger = logging.getLogger(__name__)

CONFIG_NAMES = ("wpconflicts.yaml", "wpconflicts.yml", "wpconflicts.json")

# As of 3 January 2023 this vulnerability affects every WordPress version.
# https://www.wordfence.com/threat-intel/vulnerabilities/wordpress-core/wordpress-core-611-unauthenticated-blind-server-side-request-forgery
DEFAULT_IGNORE = ("CVE-2022-3590", "112ed4f2-fe91-4d83-a3f7-eaf889870af4")


class GeneratorConfig(BaseModel):
    """Validated generator settings.

    Attributes:
        feed: ``production`` or ``scanner``; ``None`` leaves the choice to
            the CLI.
        url: Explicit feed URL, overriding ``feed``.
        plugin_vendors: Vendor prefixes for plugin package names.
        theme_vendors: Vendor prefixes for theme package names.
        core_packages: Package names that publish WordPress core.
        ignore: Record ids or CVE ids to exclude.
        base: Base ``composer.json`` to merge the conflicts into.
        timeout: Read timeout in seconds.
        retries: Extra fetch attempts after a failure.
    """

    feed: Literal["production", "scanner"] | None = None
    url: str | None = None
    plugin_vendors: list[str] = Field(default_factory=lambda: [WPACKAGIST_PLUGIN_VENDOR])
    theme_vendors: list[str] = Field(default_factory=lambda: [WPACKAGIST_THEME_VENDOR])
    core_packages: list[str] = Field(default_factory=lambda: list(DEFAULT_CORE_PACKAGES))
    ignore: list[str] = Field(default_factory=lambda: list(DEFAULT_IGNORE))
    base: Path | None = None
    timeout: float = Field(default=120.0, gt=0)
    retries: int = Field(default=0, ge=0, le=10)

    @field_validator("plugin_vendors", "theme_vendors", "core_packages", "ignore", mode="before")
    @classmethod
    def _normalize_list(cls, v: Any) -> list[str]:
        """Strip each entry and drop blanks."""
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, (list, tuple, set)):
            return v

        out: list[str] = []
        for item in v:
            if not isinstance(item, str):
                continue
            item = item.strip()
            if item and item not in out:
                out.append(item)
        return out


def load_config(path: Path) -> GeneratorConfig:
    """Load settings from a YAML or JSON file.

    Args:
        path: Path to the config file.

    Returns:
        Validated ``GeneratorConfig``.

    Raises:
        ConfigurationError: If the file is missing, unparseable or invalid.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"cannot read config {path}: {e}") from e

    try:
        if path.suffix.lower() == ".json":
            raw = json.loads(content)
        else:
            raw = yaml.safe_load(content) or {}
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"cannot parse config {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(f"config {path} must be a mapping")

    try:
        return GeneratorConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"invalid config {path}: {e}") from e


def find_config(directory: Path | None = None) -> Path | None:
    """Find a config file, preferring YAML over JSON.

    Returns:
        Path of the first existing config file, or ``None``.
    """
    directory = directory or Path.cwd()
    for name in CONFIG_NAMES:
        candidate = directory / name
        if candidate.exists():
            logger.debug("Using config file %s", candidate)
            return candidate
    return None
