"""Shared pytest fixtures for the stubforge test suite.

Provides reusable fixtures for:
- Temporary project directories with a project marker file
- Temporary stub directories populated with small templates
- Template registries and generator pipelines bound to those directories
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from stubforge.scaffolder import GeneratorPipeline, TemplateRegistry


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary Flutter-style project root containing a pubspec.yaml."""
    project_dir = tmp_path / "test-project"
    project_dir.mkdir()
    (project_dir / "pubspec.yaml").write_text("name: test_project\n", encoding="utf-8")
    yield project_dir


@pytest.fixture
def stubs_dir(tmp_path: Path) -> Path:
    """Temporary stub directory with a handful of minimal templates."""
    directory = tmp_path / "stubs"
    directory.mkdir()
    (directory / "basic.stub").write_text(
        "// {{ namespace }}\nclass {{ className }} {}\n", encoding="utf-8"
    )
    (directory / "model.stub").write_text(
        "class {{ className }} { String get table => '{{ tableName }}'; }",
        encoding="utf-8",
    )
    (directory / "factory.stub").write_text(
        "class {{ className }} extends Factory<{{ modelName }}> {}\n", encoding="utf-8"
    )
    yield directory


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

@pytest.fixture
def registry() -> TemplateRegistry:
    """Registry that only sees the built-in stubs."""
    return TemplateRegistry()


@pytest.fixture
def pipeline(tmp_project_dir: Path) -> GeneratorPipeline:
    """Pipeline writing into the temporary project, using built-in stubs."""
    return GeneratorPipeline(TemplateRegistry(), tmp_project_dir)


@pytest.fixture
def stub_pipeline(tmp_project_dir: Path, stubs_dir: Path) -> GeneratorPipeline:
    """Pipeline whose registry searches the temporary stub directory first."""
    return GeneratorPipeline(TemplateRegistry([stubs_dir]), tmp_project_dir)


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed clock value for migration timestamps."""
    return datetime(2024, 1, 15, 10, 30, 0)
