"""Stub template resolution and placeholder substitution.

Provides the TemplateRegistry class which locates ``<name>.stub`` files on an
ordered search path (first match wins, the built-in ``stubs/`` directory is
always the last resort) and the :func:`substitute` function that fills
``{{ key }}`` placeholders.

Lookup goes through a Jinja2 ``FileSystemLoader`` so path handling matches the
rest of the Jinja2 ecosystem, but bodies are never rendered by Jinja2: a stub
is opaque text with flat key substitution only.  Templates are re-read on
every call so a changed stub or search path takes effect immediately.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from jinja2 import TemplateNotFound as JinjaTemplateNotFound

from stubforge.config import Config


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_STUBS_DIR = Path(__file__).parent / "stubs"

STUB_EXTENSION = ".stub"


class TemplateNotFoundError(Exception):
    """Raised when no directory on the search path holds the template."""

    def __init__(self, template_name: str) -> None:
        self.template_name = template_name
        super().__init__(f"Template not found: {template_name}")


@dataclass(frozen=True)
class Template:
    """A resolved stub: its name, raw body and the file it came from."""

    name: str
    body: str
    path: Path


# ---------------------------------------------------------------------------
# TemplateRegistry
# ---------------------------------------------------------------------------


class TemplateRegistry:
    """Locates stub templates on an ordered list of directories.

    *search_paths* is the default search path used whenever a call does not
    pass its own (typically the configured override directory followed by any
    extra directories).  The built-in stubs directory is appended to every
    effective search path.
    """

    def __init__(
        self,
        search_paths: Sequence[str | Path] | None = None,
        *,
        builtin_dir: str | Path | None = None,
        extension: str = STUB_EXTENSION,
    ) -> None:
        self.search_paths = [Path(p) for p in (search_paths or [])]
        self.builtin_dir = Path(builtin_dir) if builtin_dir is not None else _DEFAULT_STUBS_DIR
        self.extension = extension
        self.env = Environment(autoescape=False, keep_trailing_newline=True)

    @classmethod
    def from_config(cls, config: Config) -> TemplateRegistry:
        """Build a registry from a :class:`stubforge.config.Config`."""
        return cls(config.template_search_paths(), extension=config.stub_extension)

    # -- Resolution --------------------------------------------------------

    def effective_paths(self, search_paths: Sequence[str | Path] | None = None) -> list[Path]:
        """Return the ordered, de-duplicated directories a lookup will scan."""
        candidates = [Path(p) for p in search_paths] if search_paths is not None else list(self.search_paths)
        candidates.append(self.builtin_dir)

        paths: list[Path] = []
        for path in candidates:
            if path not in paths:
                paths.append(path)
        return paths

    def resolve(self, name: str, search_paths: Sequence[str | Path] | None = None) -> Template:
        """Load the first ``<name>.stub`` found on the search path.

        Raises:
            TemplateNotFoundError: No directory contains the template.
            OSError: The template exists but could not be read.
        """
        paths = self.effective_paths(search_paths)
        loader = FileSystemLoader([str(p) for p in paths])
        try:
            _, filename, _ = loader.get_source(self.env, name + self.extension)
        except JinjaTemplateNotFound:
            raise TemplateNotFoundError(name) from None
        # Body is re-read untranslated so CRLF stubs keep their line endings.
        path = Path(filename)
        with path.open(encoding="utf-8", newline="") as fh:
            body = fh.read()
        return Template(name=name, body=body, path=path)

    def exists(self, name: str, search_paths: Sequence[str | Path] | None = None) -> bool:
        """Return ``True`` if the template resolves.

        Only a missing template maps to ``False``; read errors propagate.
        """
        try:
            self.resolve(name, search_paths)
        except TemplateNotFoundError:
            return False
        return True

    def make(
        self,
        name: str,
        replacements: Mapping[str, str],
        search_paths: Sequence[str | Path] | None = None,
    ) -> str:
        """Resolve a template and substitute *replacements* in one step."""
        return substitute(self.resolve(name, search_paths).body, replacements)

    # -- Utility -----------------------------------------------------------

    def list_templates(self, search_paths: Sequence[str | Path] | None = None) -> list[str]:
        """Return the sorted template names visible on the search path."""
        loader = FileSystemLoader([str(p) for p in self.effective_paths(search_paths)])
        return sorted(
            {
                name[: -len(self.extension)]
                for name in loader.list_templates()
                if name.endswith(self.extension)
            }
        )


# ---------------------------------------------------------------------------
# Placeholder substitution
# ---------------------------------------------------------------------------


def placeholder_pattern(key: str) -> re.Pattern[str]:
    """Compile the pattern for ``{{ key }}`` with optional spaces or tabs."""
    return re.compile(r"\{\{[ \t]*" + re.escape(key) + r"[ \t]*\}\}")


def substitute(text: str, replacements: Mapping[str, str]) -> str:
    """Replace every ``{{ key }}`` token in *text* with its value.

    Matching is anchored to the braces, so ``name`` never matches inside
    ``{{ fullName }}``.  Tokens without a key in *replacements* are left
    untouched for a later pass.

    Example::

        substitute("Hello {{name}} and {{ other }}", {"name": "World"})
        -> "Hello World and {{ other }}"
    """
    for key, value in replacements.items():
        text = placeholder_pattern(key).sub(lambda _match, v=value: v, text)
    return text
