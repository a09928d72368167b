"""stubforge configuration.

Centralised, typed configuration for code generation.  Settings use Pydantic
v2 models so they are validated at construction time and can be serialised
to/from JSON.  The environment is read exactly once, by :meth:`Config.from_env`,
and the result is threaded explicitly into the template registry and the
generator pipeline.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field


STUBS_DIR_ENV = "STUBFORGE_STUBS_DIR"
PROJECT_ROOT_ENV = "STUBFORGE_PROJECT_ROOT"
SEARCH_PATHS_ENV = "STUBFORGE_SEARCH_PATHS"


class ProjectRootNotFoundError(Exception):
    """Raised when no ancestor directory contains the project marker file."""

    def __init__(self, marker: str, start: Path) -> None:
        self.marker = marker
        self.start = start
        super().__init__(f"Could not find {marker} in {start} or any parent directory")


class Config(BaseModel):
    """Global stubforge configuration.

    Instances are typically created once by the CLI entry point and then
    passed to :class:`~stubforge.scaffolder.templates.TemplateRegistry` and
    :class:`~stubforge.scaffolder.generator.GeneratorPipeline`.
    """

    project_root: Path | None = Field(
        default=None, description="Output project root; discovered from root_marker when unset"
    )
    stubs_dir: Path | None = Field(
        default=None, description="Override directory searched before everything else"
    )
    search_paths: list[Path] = Field(
        default_factory=list, description="Extra template directories, in priority order"
    )
    root_marker: str = Field(default="pubspec.yaml", min_length=1)
    target_extension: str = Field(default=".dart", pattern=r"^\.")
    stub_extension: str = Field(default=".stub", pattern=r"^\.")

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def template_search_paths(self) -> list[Path]:
        """Default template search path: the override first, then extras."""
        paths: list[Path] = []
        if self.stubs_dir is not None:
            paths.append(self.stubs_dir)
        paths.extend(self.search_paths)
        return paths

    def resolve_project_root(self, start: Path | None = None) -> Path:
        """Return the project root, searching upwards when not configured.

        Args:
            start: Directory to start the search from. Defaults to the cwd.

        Raises:
            ProjectRootNotFoundError: No ancestor contains ``root_marker``.
        """
        if self.project_root is not None:
            return self.project_root

        origin = (start or Path.cwd()).resolve()
        for directory in (origin, *origin.parents):
            if (directory / self.root_marker).is_file():
                return directory
        raise ProjectRootNotFoundError(self.root_marker, origin)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            STUBFORGE_STUBS_DIR, STUBFORGE_PROJECT_ROOT,
            STUBFORGE_SEARCH_PATHS (``os.pathsep``-separated).
        """
        stubs_dir = os.environ.get(STUBS_DIR_ENV)
        project_root = os.environ.get(PROJECT_ROOT_ENV)
        search_paths = [
            Path(p) for p in os.environ.get(SEARCH_PATHS_ENV, "").split(os.pathsep) if p.strip()
        ]

        return cls(
            stubs_dir=Path(stubs_dir) if stubs_dir else None,
            project_root=Path(project_root) if project_root else None,
            search_paths=search_paths,
        )
