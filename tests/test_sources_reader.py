"""
Tests for the workspace source reader.

SECURITY FOCUS: project file reads must never leave the project's
registered directory. This suite validates defenses against:
- Directory traversal (../)
- Absolute paths
- Null byte injection
- Files outside the extension allow-list
"""

from pathlib import Path

import pytest

from constellation.core.registry.models import Project
from constellation.core.sources.reader import (
    InvalidSourcePathError,
    SourceReader,
    is_identifier,
    resolve_within,
)


@pytest.fixture
def project(tmp_path) -> Project:
    return Project(name="Launch Site", path=tmp_path / "projects" / "launch-site")


@pytest.fixture
def reader(config) -> SourceReader:
    return SourceReader(config)


class TestResolveWithin:
    """Test lexical containment and the extension allow-list."""

    @pytest.mark.parametrize(
        "relative",
        [
            "../shop/state.json",
            "docs/../../shop/state.json",
            "../../workspace/org/projects.json",
            "/etc/passwd.txt",
            "notes\x00.md",
            "",
            "   ",
            ".",
            "secret.env",
            "script.sh",
            "docs",
        ],
    )
    def test_rejected(self, tmp_path, relative):
        with pytest.raises(InvalidSourcePathError):
            resolve_within(tmp_path / "project", relative)

    def test_accepted_paths_are_normalized(self, tmp_path):
        base = tmp_path / "project"
        assert resolve_within(base, "docs/notes.md") == base / "docs" / "notes.md"
        assert resolve_within(base, "./docs/../PRD.md") == base / "PRD.md"
        assert resolve_within(base, "DATA.JSON") == base / "DATA.JSON"


class TestIdentifiers:
    """Test names used to build agent and department paths."""

    def test_identifiers(self):
        assert is_identifier("engineering")
        assert is_identifier("qa-2")
        assert not is_identifier("../ceo")
        assert not is_identifier("Engineering")
        assert not is_identifier("")


class TestSourceReader:
    """Test defensive reads."""

    def test_read_feed(self, reader):
        assert "Picked up pricing page" in reader.read_feed("engineering")
        assert reader.read_feed("comms") == ""

    def test_read_feed_rejects_path_like_names(self, reader):
        assert reader.read_feed("../org/feed/engineering") == ""

    def test_read_inbox_markdown_only_sorted(self, reader):
        names = [name for name, _ in reader.read_inbox("engineering")]
        assert names == ["001-keys.md", "002-done.md", "003-fm.md"]

    def test_missing_directories_read_empty(self, reader):
        assert reader.read_inbox("qa") == []
        assert reader.read_status("qa") == ""
        assert reader.read_findings("comms") == []

    def test_invalid_utf8_reads_empty(self, reader, config):
        path = config.feed_dir / "qa.md"
        path.write_bytes(b"\xff\xfe\x00 not utf-8 \x80")
        assert reader.read_feed("qa") == ""

    def test_read_project_file(self, reader, project):
        assert reader.read_project_file(project, "PRD.md") == "# Launch Site\n"
        assert reader.read_project_file(project, "docs/notes.md") == "# Notes\n"

    def test_read_project_file_rejections_look_missing(self, reader, project):
        assert reader.read_project_file(project, "secret.env") is None
        assert reader.read_project_file(project, "../shop/state.json") is None
        assert reader.read_project_file(project, "missing.md") is None

    def test_project_exists(self, reader, project, tmp_path):
        assert reader.project_exists(project)
        ghost = Project(name="Ghost", path=tmp_path / "projects" / "ghost")
        assert not reader.project_exists(ghost)

    def test_project_has_file(self, reader, project):
        assert reader.project_has_file(project, "PRD.md")
        assert not reader.project_has_file(project, "README.md")
        assert not reader.project_has_file(project, "../shop/state.json")

    def test_read_json(self, reader, tmp_path):
        good = tmp_path / "good.json"
        good.write_text('{"a": 1}')
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        assert reader.read_json(good) == {"a": 1}
        assert reader.read_json(bad) is None
        assert reader.read_json(Path(tmp_path / "absent.json")) is None
