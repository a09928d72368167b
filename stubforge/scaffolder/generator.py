"""Generator pipeline: turn a qualified name and a stub into a file on disk.

Every ``make:*`` kind is a thin caller of :meth:`GeneratorPipeline.generate`:

1. parse the qualified name (``Admin/Dashboard``),
2. resolve the stub on the search path,
3. compute the ``namespace`` and ``className`` placeholders,
4. substitute the reserved placeholders, then the caller's extras,
5. refuse to clobber an existing file unless ``overwrite`` is set,
6. write the result, creating parent directories first.

Per-kind behaviour is described by a :class:`GeneratorSpec` value rather than
a subclass; :meth:`GeneratorPipeline.run` turns a spec into a ``generate``
call.  Each call is independent: multi-file sequences are plain sequences of
calls with no rollback.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from stubforge.config import Config
from stubforge.naming import ParsedName, SuffixPolicy, parse_name, to_snake_case
from stubforge.utils import write_file

from .templates import TemplateRegistry, substitute


RESERVED_KEYS: tuple[str, ...] = ("namespace", "className")

ExtraReplacements = Mapping[str, str] | Callable[[str], Mapping[str, str]]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class TargetExistsError(Exception):
    """Raised when the output file exists and overwrite was not requested."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"File already exists at {path}")


class InvalidNameError(ValueError):
    """Raised when the qualified name has no leaf identifier."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Invalid name {name!r}: a class name is required")


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GeneratedArtifact:
    """A file written by the pipeline."""

    path: Path
    content: str


@dataclass(frozen=True)
class GeneratorSpec:
    """Describes how one ``make:*`` kind customises the pipeline.

    Attributes:
        kind: Short name, e.g. ``"factory"``.
        namespace: Default output directory relative to the project root.
        template: Stub name, or a function choosing one from the options.
        suffix: Suffix policy applied to the leaf identifier, if any.
        substitute_base: Fill ``{{ className }}`` with the suffix-stripped
            name (the stub appends the suffix itself) while the file name
            still uses the suffixed one.
        class_name: Transform applied to the raw leaf before the suffix policy.
        replacements: Builds the extra placeholders from the final class name
            and the options.
        file_stem: Overrides the snake_case file stem.
        extension: Overrides the configured target extension.
        description: One-line help text shown for the CLI subcommand.
    """

    kind: str
    namespace: str
    template: str | Callable[[Mapping[str, Any]], str]
    suffix: SuffixPolicy | None = None
    substitute_base: bool = False
    class_name: Callable[[str], str] | None = None
    replacements: Callable[[str, Mapping[str, Any]], Mapping[str, str]] | None = None
    file_stem: Callable[[str, Mapping[str, Any]], str] | None = None
    extension: str | None = None
    description: str = ""

    def template_name(self, options: Mapping[str, Any]) -> str:
        if callable(self.template):
            return self.template(options)
        return self.template


# ---------------------------------------------------------------------------
# GeneratorPipeline
# ---------------------------------------------------------------------------


class GeneratorPipeline:
    """Resolves, fills and writes stubs into a project tree.

    The pipeline holds no state between calls apart from its configuration;
    the filesystem is the only shared resource and calls against the same
    output tree must be serialised by the caller.
    """

    def __init__(
        self,
        registry: TemplateRegistry,
        project_root: str | Path,
        *,
        search_paths: Sequence[str | Path] | None = None,
        extension: str = ".dart",
    ) -> None:
        self.registry = registry
        self.project_root = Path(project_root).absolute()
        self.search_paths = search_paths
        self.extension = extension

    @classmethod
    def from_config(cls, config: Config, start: Path | None = None) -> GeneratorPipeline:
        """Build a pipeline whose project root is resolved from *config*."""
        return cls(
            TemplateRegistry.from_config(config),
            config.resolve_project_root(start),
            extension=config.target_extension,
        )

    # -- Public API --------------------------------------------------------

    def generate(
        self,
        name: str,
        template_name: str,
        default_namespace: str,
        extra_replacements: ExtraReplacements | None = None,
        overwrite: bool = False,
        *,
        suffix: SuffixPolicy | None = None,
        substitute_base: bool = False,
        class_name: Callable[[str], str] | None = None,
        file_stem: str | Callable[[str], str] | None = None,
        extension: str | None = None,
    ) -> GeneratedArtifact:
        """Generate one file from a stub.

        Args:
            name: Qualified name such as ``"Admin/Dashboard"``.
            template_name: Stub to resolve, without extension.
            default_namespace: Output directory relative to the project root.
            extra_replacements: Kind-specific placeholders, or a function
                computing them from the final class name.  Applied after the
                reserved ``namespace``/``className`` placeholders, so they
                can never override those.
            overwrite: Replace an existing file instead of failing.
            suffix: Suffix policy for the class name and file stem.
            substitute_base: See :class:`GeneratorSpec`.
            class_name: Transform applied to the leaf before ``suffix``.
            file_stem: Explicit file stem, or a function of the class name.
            extension: Target extension; defaults to the pipeline's.

        Returns:
            The written artifact.

        Raises:
            InvalidNameError: *name* has no leaf identifier.
            TemplateNotFoundError: The stub is not on the search path.
            TargetExistsError: The output exists and *overwrite* is false.
        """
        parsed = parse_name(name)
        if not parsed.identifier:
            raise InvalidNameError(name)

        template = self.registry.resolve(template_name, self.search_paths)

        final_name = self.class_name_for(parsed, suffix, class_name)
        placeholder_name = suffix.strip(final_name) if suffix and substitute_base else final_name

        # Phase one: reserved placeholders.
        body = substitute(
            template.body,
            {
                "namespace": self.namespace_for(parsed, default_namespace),
                "className": placeholder_name,
            },
        )

        # Phase two: kind-specific placeholders, which may depend on final_name.
        extras = extra_replacements(final_name) if callable(extra_replacements) else extra_replacements
        if extras:
            body = substitute(body, {k: v for k, v in extras.items() if k not in RESERVED_KEYS})

        if callable(file_stem):
            stem = file_stem(final_name)
        else:
            stem = file_stem or to_snake_case(final_name)
        path = self.path_for(parsed, default_namespace, stem, extension)

        if path.exists() and not overwrite:
            raise TargetExistsError(path)

        write_file(path, body)
        return GeneratedArtifact(path=path, content=body)

    def run(
        self,
        spec: GeneratorSpec,
        name: str,
        options: Mapping[str, Any] | None = None,
        overwrite: bool = False,
    ) -> GeneratedArtifact:
        """Generate *name* using the behaviour described by *spec*."""
        opts: dict[str, Any] = dict(options or {})

        replacements = None
        if spec.replacements is not None:
            build = spec.replacements

            def replacements(final_name: str) -> Mapping[str, str]:
                return build(final_name, opts)

        file_stem = None
        if spec.file_stem is not None:
            stem_for = spec.file_stem

            def file_stem(final_name: str) -> str:
                return stem_for(final_name, opts)

        return self.generate(
            name,
            spec.template_name(opts),
            spec.namespace,
            replacements,
            overwrite,
            suffix=spec.suffix,
            substitute_base=spec.substitute_base,
            class_name=spec.class_name,
            file_stem=file_stem,
            extension=spec.extension,
        )

    # -- Naming and paths --------------------------------------------------

    @staticmethod
    def namespace_for(parsed: ParsedName, default_namespace: str) -> str:
        """``lib/app/controllers`` + ``admin`` -> ``lib/app/controllers/admin``."""
        if not parsed.directory:
            return default_namespace
        return f"{default_namespace}/{parsed.directory}"

    @staticmethod
    def class_name_for(
        parsed: ParsedName,
        suffix: SuffixPolicy | None = None,
        class_name: Callable[[str], str] | None = None,
    ) -> str:
        """Apply the leaf transform, then the suffix policy, to the identifier."""
        identifier = class_name(parsed.identifier) if class_name else parsed.identifier
        return suffix.normalize(identifier) if suffix else identifier

    def path_for(
        self,
        parsed: ParsedName,
        default_namespace: str,
        file_stem: str,
        extension: str | None = None,
    ) -> Path:
        """``<root>/<namespace>/[<directory>/]<file_stem><extension>``."""
        directory = self.project_root.joinpath(*_segments(default_namespace))
        if parsed.directory:
            directory = directory.joinpath(*_segments(parsed.directory))
        return directory / f"{file_stem}{extension or self.extension}"


def _segments(path: str) -> list[str]:
    return [segment for segment in path.split("/") if segment]
