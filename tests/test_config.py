"""Unit tests for Config (stubforge.config).

Tests cover:
- Config defaults and field validation
- template_search_paths ordering
- resolve_project_root (explicit, discovered, missing marker)
- save/load round trip
- from_env
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from stubforge.config import (
    PROJECT_ROOT_ENV,
    SEARCH_PATHS_ENV,
    STUBS_DIR_ENV,
    Config,
    ProjectRootNotFoundError,
)


# ---------------------------------------------------------------------------
# Defaults & validation
# ---------------------------------------------------------------------------


class TestConfigDefaults:
    @pytest.mark.unit
    def test_defaults(self):
        config = Config()
        assert config.project_root is None
        assert config.stubs_dir is None
        assert config.search_paths == []
        assert config.root_marker == "pubspec.yaml"
        assert config.target_extension == ".dart"
        assert config.stub_extension == ".stub"

    @pytest.mark.unit
    def test_custom_values(self, tmp_path: Path):
        config = Config(project_root=tmp_path, target_extension=".ts")
        assert config.project_root == tmp_path
        assert config.target_extension == ".ts"

    @pytest.mark.unit
    def test_extension_without_dot_rejected(self):
        with pytest.raises(ValidationError):
            Config(target_extension="dart")

    @pytest.mark.unit
    def test_empty_root_marker_rejected(self):
        with pytest.raises(ValidationError):
            Config(root_marker="")

    @pytest.mark.unit
    def test_string_paths_coerced(self):
        config = Config(stubs_dir="/tmp/stubs", search_paths=["/a", "/b"])
        assert config.stubs_dir == Path("/tmp/stubs")
        assert config.search_paths == [Path("/a"), Path("/b")]


# ---------------------------------------------------------------------------
# Derived values
# ---------------------------------------------------------------------------


class TestTemplateSearchPaths:
    @pytest.mark.unit
    def test_empty_by_default(self):
        assert Config().template_search_paths() == []

    @pytest.mark.unit
    def test_override_comes_first(self):
        config = Config(stubs_dir=Path("/override"), search_paths=[Path("/extra1"), Path("/extra2")])
        assert config.template_search_paths() == [
            Path("/override"),
            Path("/extra1"),
            Path("/extra2"),
        ]

    @pytest.mark.unit
    def test_extras_only(self):
        config = Config(search_paths=[Path("/extra")])
        assert config.template_search_paths() == [Path("/extra")]


class TestResolveProjectRoot:
    @pytest.mark.unit
    def test_explicit_root_wins(self, tmp_path: Path):
        config = Config(project_root=tmp_path / "anywhere")
        assert config.resolve_project_root(tmp_path) == tmp_path / "anywhere"

    @pytest.mark.unit
    def test_discovers_marker_in_start_dir(self, tmp_project_dir: Path):
        assert Config().resolve_project_root(tmp_project_dir) == tmp_project_dir.resolve()

    @pytest.mark.unit
    def test_discovers_marker_in_ancestor(self, tmp_project_dir: Path):
        nested = tmp_project_dir / "lib" / "app" / "models"
        nested.mkdir(parents=True)
        assert Config().resolve_project_root(nested) == tmp_project_dir.resolve()

    @pytest.mark.unit
    def test_custom_marker(self, tmp_path: Path):
        (tmp_path / "package.json").write_text("{}", encoding="utf-8")
        config = Config(root_marker="package.json")
        assert config.resolve_project_root(tmp_path) == tmp_path.resolve()

    @pytest.mark.unit
    def test_missing_marker_raises(self, tmp_path: Path):
        config = Config(root_marker="definitely-not-present.marker")
        with pytest.raises(ProjectRootNotFoundError, match="definitely-not-present.marker"):
            config.resolve_project_root(tmp_path)

    @pytest.mark.unit
    def test_defaults_to_cwd(self, tmp_project_dir: Path, monkeypatch):
        monkeypatch.chdir(tmp_project_dir)
        assert Config().resolve_project_root() == tmp_project_dir.resolve()


# ---------------------------------------------------------------------------
# Config.save / Config.load
# ---------------------------------------------------------------------------


class TestConfigSaveLoad:
    @pytest.mark.unit
    def test_save_creates_parent_dirs(self, tmp_path: Path):
        target = tmp_path / "nested" / "dir" / "stubforge.json"
        saved = Config().save(target)
        assert saved == target
        assert target.exists()

    @pytest.mark.unit
    def test_saved_file_is_json(self, tmp_path: Path):
        target = Config(stubs_dir=Path("/stubs")).save(tmp_path / "config.json")
        data = json.loads(target.read_text(encoding="utf-8"))
        assert data["stubs_dir"] == "/stubs"
        assert data["target_extension"] == ".dart"

    @pytest.mark.unit
    def test_round_trip(self, tmp_path: Path):
        original = Config(
            project_root=tmp_path,
            stubs_dir=tmp_path / "stubs",
            search_paths=[tmp_path / "a", tmp_path / "b"],
            target_extension=".ts",
        )
        loaded = Config.load(original.save(tmp_path / "config.json"))
        assert loaded == original

    @pytest.mark.unit
    def test_load_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            Config.load(tmp_path / "missing.json")


# ---------------------------------------------------------------------------
# Config.from_env
# ---------------------------------------------------------------------------


class TestConfigFromEnv:
    @pytest.mark.unit
    def test_defaults_when_no_env(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config.from_env()
        assert config.stubs_dir is None
        assert config.project_root is None
        assert config.search_paths == []

    @pytest.mark.unit
    def test_stubs_dir_from_env(self):
        with patch.dict(os.environ, {STUBS_DIR_ENV: "/custom/stubs"}, clear=True):
            config = Config.from_env()
        assert config.stubs_dir == Path("/custom/stubs")

    @pytest.mark.unit
    def test_project_root_from_env(self):
        with patch.dict(os.environ, {PROJECT_ROOT_ENV: "/work/app"}, clear=True):
            config = Config.from_env()
        assert config.project_root == Path("/work/app")

    @pytest.mark.unit
    def test_search_paths_from_env(self):
        value = os.pathsep.join(["/one", "/two"])
        with patch.dict(os.environ, {SEARCH_PATHS_ENV: value}, clear=True):
            config = Config.from_env()
        assert config.search_paths == [Path("/one"), Path("/two")]

    @pytest.mark.unit
    def test_blank_entries_ignored(self):
        value = os.pathsep.join(["/one", "", "  "])
        with patch.dict(os.environ, {SEARCH_PATHS_ENV: value}, clear=True):
            config = Config.from_env()
        assert config.search_paths == [Path("/one")]

    @pytest.mark.unit
    def test_empty_stubs_dir_ignored(self):
        with patch.dict(os.environ, {STUBS_DIR_ENV: ""}, clear=True):
            config = Config.from_env()
        assert config.stubs_dir is None
