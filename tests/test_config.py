"""Unit tests for wpconflicts.config - Pydantic generator settings."""

import json

import pytest
import yaml
from pydantic import ValidationError

from wpconflicts.config import CONFIG_NAMES, DEFAULT_IGNORE, GeneratorConfig, find_config, load_config
from wpconflicts.errors import ConfigurationError
from wpconflicts.searchers import DEFAULT_CORE_PACKAGES

# ── GeneratorConfig ──────────────────────────────────────────────────────────


class TestGeneratorConfig:
    """Tests for GeneratorConfig Pydantic model."""

    def test_defaults(self):
        cfg = GeneratorConfig()
        assert cfg.feed is None
        assert cfg.url is None
        assert cfg.plugin_vendors == ["wpackagist-plugin"]
        assert cfg.theme_vendors == ["wpackagist-theme"]
        assert cfg.core_packages == list(DEFAULT_CORE_PACKAGES)
        assert cfg.ignore == list(DEFAULT_IGNORE)
        assert cfg.base is None
        assert cfg.timeout == 120.0
        assert cfg.retries == 0

    def test_default_ignore(self):
        assert "CVE-2022-3590" in DEFAULT_IGNORE
        assert "112ed4f2-fe91-4d83-a3f7-eaf889870af4" in DEFAULT_IGNORE

    def test_feed_choices(self):
        assert GeneratorConfig(feed="scanner").feed == "scanner"
        with pytest.raises(ValidationError):
            GeneratorConfig(feed="staging")

    def test_list_normalization(self):
        cfg = GeneratorConfig(ignore=[" CVE-1 ", "", "CVE-1", "CVE-2"])
        assert cfg.ignore == ["CVE-1", "CVE-2"]

    def test_string_becomes_list(self):
        assert GeneratorConfig(plugin_vendors="my-vendor").plugin_vendors == ["my-vendor"]

    def test_none_becomes_empty(self):
        assert GeneratorConfig(ignore=None).ignore == []

    def test_non_string_entries_dropped(self):
        assert GeneratorConfig(theme_vendors=["a", 3, None]).theme_vendors == ["a"]

    def test_non_list_rejected(self):
        with pytest.raises(ValidationError):
            GeneratorConfig(core_packages={"a": 1})

    @pytest.mark.parametrize("timeout", [0, -1])
    def test_timeout_positive(self, timeout):
        with pytest.raises(ValidationError):
            GeneratorConfig(timeout=timeout)

    @pytest.mark.parametrize("retries", [-1, 11])
    def test_retries_bounds(self, retries):
        with pytest.raises(ValidationError):
            GeneratorConfig(retries=retries)

    def test_base_path(self, tmp_path):
        cfg = GeneratorConfig(base=str(tmp_path / "composer.json"))
        assert cfg.base == tmp_path / "composer.json"


# ── load_config ──────────────────────────────────────────────────────────────


class TestLoadConfig:
    def test_yaml(self, tmp_path):
        p = tmp_path / "wpconflicts.yaml"
        p.write_text(yaml.dump({"feed": "production", "plugin_vendors": ["a", "b"], "ignore": []}))
        cfg = load_config(p)
        assert cfg.feed == "production"
        assert cfg.plugin_vendors == ["a", "b"]
        assert cfg.ignore == []

    def test_json(self, tmp_path):
        p = tmp_path / "wpconflicts.json"
        p.write_text(json.dumps({"url": "https://feed.test", "retries": 2}))
        cfg = load_config(p)
        assert cfg.url == "https://feed.test"
        assert cfg.retries == 2

    def test_empty_yaml(self, tmp_path):
        p = tmp_path / "wpconflicts.yaml"
        p.write_text("")
        assert load_config(p) == GeneratorConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="cannot read config"):
            load_config(tmp_path / "nope.yaml")

    def test_bad_yaml(self, tmp_path):
        p = tmp_path / "wpconflicts.yaml"
        p.write_text("feed: [unclosed")
        with pytest.raises(ConfigurationError, match="cannot parse config"):
            load_config(p)

    def test_bad_json(self, tmp_path):
        p = tmp_path / "wpconflicts.json"
        p.write_text("{")
        with pytest.raises(ConfigurationError, match="cannot parse config"):
            load_config(p)

    def test_not_a_mapping(self, tmp_path):
        p = tmp_path / "wpconflicts.yaml"
        p.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            load_config(p)

    def test_invalid_values(self, tmp_path):
        p = tmp_path / "wpconflicts.yaml"
        p.write_text("timeout: -5\n")
        with pytest.raises(ConfigurationError, match="invalid config"):
            load_config(p)


# ── find_config ──────────────────────────────────────────────────────────────


class TestFindConfig:
    def test_none_found(self, tmp_path):
        assert find_config(tmp_path) is None

    def test_prefers_yaml(self, tmp_path):
        (tmp_path / "wpconflicts.json").write_text("{}")
        (tmp_path / "wpconflicts.yaml").write_text("")
        assert find_config(tmp_path) == tmp_path / "wpconflicts.yaml"

    def test_json_fallback(self, tmp_path):
        (tmp_path / "wpconflicts.json").write_text("{}")
        assert find_config(tmp_path) == tmp_path / "wpconflicts.json"

    def test_defaults_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / CONFIG_NAMES[1]).write_text("")
        assert find_config().name == CONFIG_NAMES[1]
