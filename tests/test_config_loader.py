"""
Unit tests for configuration loading.

Tests multi-layer config merging, environment variable overrides,
env file loading, caching, and workspace path derivation.
"""

import json
import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from constellation.core.config import (
    ConstellationConfig,
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    load_config,
)
from constellation.core.config.env import load_layered_env, read_env_file
from constellation.core.config.loader import apply_env_overrides, deep_merge, load_json_file

# ==============================================================================
# Helper Functions Tests
# ==============================================================================


class TestDeepMerge:
    """Test the deep_merge helper function."""

    def test_nested_merge(self):
        base = {"a": 1, "limits": {"feed_entries": 50, "stale_days": 7}}
        override = {"limits": {"stale_days": 3}, "b": 2}
        assert deep_merge(base, override) == {
            "a": 1,
            "b": 2,
            "limits": {"feed_entries": 50, "stale_days": 3},
        }

    def test_does_not_mutate_base(self):
        base = {"limits": {"stale_days": 7}}
        deep_merge(base, {"limits": {"stale_days": 1}})
        assert base == {"limits": {"stale_days": 7}}


class TestLoadJsonFile:
    """Test load_json_file."""

    def test_missing_invalid_and_non_object(self, tmp_path):
        assert load_json_file(tmp_path / "absent.json") is None

        bad = tmp_path / "bad.json"
        bad.write_text("{oops")
        assert load_json_file(bad) is None

        array = tmp_path / "array.json"
        array.write_text("[1]")
        assert load_json_file(array) is None


class TestPaths:
    """Test config file locations."""

    def test_user_config_uses_xdg(self, tmp_path):
        assert get_user_config_path() == tmp_path / "xdg" / "constellation" / "config.json"

    def test_project_config(self, tmp_path):
        assert get_project_config_path(tmp_path) == tmp_path / ".constellation.json"


# ==============================================================================
# Environment Overrides
# ==============================================================================


class TestEnvOverrides:
    """Test apply_env_overrides."""

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("CONSTELLATION_WORKSPACE", "/srv/ws")
        monkeypatch.setenv("CONSTELLATION_STALE_DAYS", "3")
        monkeypatch.setenv("CONSTELLATION_PROBES_ENABLED", "false")
        monkeypatch.setenv("CONSTELLATION_PORT", "8080")

        result = apply_env_overrides({"limits": {"stale_days": 7, "feed_entries": 50}})

        assert result["workspace"] == "/srv/ws"
        assert result["limits"] == {"stale_days": 3, "feed_entries": 50}
        assert result["probes"]["enabled"] is False
        assert result["server"]["port"] == 8080

    @pytest.mark.parametrize("value", ["abc", "0", "-2"])
    def test_invalid_numbers_ignored(self, monkeypatch, value):
        monkeypatch.setenv("CONSTELLATION_FEED_LIMIT", value)
        result = apply_env_overrides({"limits": {"feed_entries": 50}})
        assert result["limits"]["feed_entries"] == 50


# ==============================================================================
# load_config
# ==============================================================================


class TestLoadConfig:
    """Test the full precedence chain."""

    def test_defaults(self, tmp_path):
        config = load_config(project_dir=tmp_path, use_cache=False)
        assert config.limits.stale_days == 7
        assert config.limits.feed_entries == 50
        assert config.server.port == 3400
        assert config.workspace == Path.home() / ".openclaw" / "workspace"

    def test_precedence(self, tmp_path, monkeypatch):
        user_dir = tmp_path / "xdg" / "constellation"
        user_dir.mkdir(parents=True)
        (user_dir / "config.json").write_text(
            json.dumps({"limits": {"stale_days": 3, "tweets": 4}, "workspace": "/user/ws"})
        )
        project_dir = tmp_path / "project"
        project_dir.mkdir()
        (project_dir / ".constellation.json").write_text(
            json.dumps({"limits": {"stale_days": 5, "feed_entries": 10}})
        )
        monkeypatch.setenv("CONSTELLATION_STALE_DAYS", "2")

        config = load_config(project_dir=project_dir, use_cache=False)

        assert config.limits.stale_days == 2
        assert config.limits.feed_entries == 10
        assert config.limits.tweets == 4
        assert config.workspace == Path("/user/ws")

    def test_cache(self, tmp_path):
        first = load_config(project_dir=tmp_path)
        assert load_config(project_dir=tmp_path) is first
        clear_cache()
        assert load_config(project_dir=tmp_path) is not first

    def test_invalid_values_raise(self, tmp_path):
        (tmp_path / ".constellation.json").write_text(json.dumps({"limits": {"stale_days": 0}}))
        with pytest.raises(ValidationError):
            load_config(project_dir=tmp_path, use_cache=False)


class TestConfigModel:
    """Test derived workspace paths."""

    def test_paths(self, tmp_path):
        config = ConstellationConfig(workspace=tmp_path / "workspace")
        assert config.feed_dir == tmp_path / "workspace" / "org" / "feed"
        assert config.registry_file == tmp_path / "workspace" / "org" / "projects.json"
        assert config.ideas_file == tmp_path / "workspace" / "org" / "IDEAS.md"

    def test_agent_dirs(self, tmp_path):
        config = ConstellationConfig(
            workspace=tmp_path / "workspace", agent_dirs={"qa": tmp_path / "elsewhere"}
        )
        assert config.agent_dir("ceo") == tmp_path / "workspace"
        assert config.agent_dir("engineering") == tmp_path / "workspace-engineering"
        assert config.agent_dir("qa") == tmp_path / "elsewhere"

    def test_registry_override(self, tmp_path):
        config = ConstellationConfig(workspace=tmp_path, registry_path=tmp_path / "r.json")
        assert config.registry_file == tmp_path / "r.json"


# ==============================================================================
# Env files
# ==============================================================================


@pytest.fixture
def env_keys(monkeypatch):
    """Make sure keys set by load_layered_env are removed after the test."""
    keys = ["CONSTELLATION_WORKSPACE", "CONSTELLATION_PORT", "OTHER_API_KEY"]
    for key in keys:
        monkeypatch.setenv(key, "placeholder")
        monkeypatch.delenv(key)
    return keys


class TestLayeredEnv:
    """Test load_layered_env."""

    def test_only_prefixed_keys(self, tmp_path, env_keys):
        env_file = tmp_path / ".env"
        env_file.write_text("CONSTELLATION_PORT=9000\nOTHER_API_KEY=secret\n")
        assert read_env_file(env_file) == {"CONSTELLATION_PORT": "9000"}

    def test_later_files_win_and_shell_is_kept(self, tmp_path, env_keys, monkeypatch):
        user_env = tmp_path / "user.env"
        user_env.write_text("CONSTELLATION_PORT=9000\nCONSTELLATION_WORKSPACE=/user\n")
        project_env = tmp_path / "project.env"
        project_env.write_text("CONSTELLATION_PORT=9100\nCONSTELLATION_WORKSPACE=/project\n")
        monkeypatch.setenv("CONSTELLATION_WORKSPACE", "/shell")

        applied = load_layered_env(env_paths=[user_env, project_env, tmp_path / "absent"])

        assert applied == ["CONSTELLATION_PORT"]
        assert os.environ["CONSTELLATION_PORT"] == "9100"
        assert os.environ["CONSTELLATION_WORKSPACE"] == "/shell"
        assert "OTHER_API_KEY" not in os.environ
