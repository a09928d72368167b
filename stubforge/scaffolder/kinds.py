"""Built-in ``make:*`` generator kinds.

Each kind is a :class:`~stubforge.scaffolder.generator.GeneratorSpec` value:
its output namespace, which stub it uses, its suffix policy and how it builds
its extra placeholders.  ``GENERATORS`` maps kind names to specs.

Also provides the multi-file sequences: a model with its
related classes, and the CRUD views of a resource controller.  Both are plain
sequences of independent ``generate`` calls; a failed step is recorded and
the remaining steps still run.  Nothing is rolled back.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from stubforge import naming
from stubforge.naming import parse_name, to_pascal_case, to_plural, to_snake_case, to_words

from .generator import GeneratedArtifact, GeneratorPipeline, GeneratorSpec, TargetExistsError
from .templates import TemplateNotFoundError

DEFAULT_EVENT_CLASS = "MagicEvent"
RESOURCE_VIEWS: tuple[str, ...] = ("index", "show", "create", "edit")


# ---------------------------------------------------------------------------
# Template choosers
# ---------------------------------------------------------------------------


def _variant(base: str, *flags: str) -> Callable[[Mapping[str, Any]], str]:
    """Pick ``<base>.<flag>`` for the first truthy flag option, else *base*."""

    def choose(options: Mapping[str, Any]) -> str:
        for flag in flags:
            if options.get(flag):
                return f"{base}.{flag}"
        return base

    return choose


def _migration_template(options: Mapping[str, Any]) -> str:
    return "migration.create" if options.get("create") else "migration"


# ---------------------------------------------------------------------------
# Replacement builders
# ---------------------------------------------------------------------------


def _snake(class_name: str, options: Mapping[str, Any]) -> dict[str, str]:
    return {"snakeName": to_snake_case(class_name)}


def _base_snake(policy: naming.SuffixPolicy):
    def build(class_name: str, options: Mapping[str, Any]) -> dict[str, str]:
        return {"snakeName": to_snake_case(policy.strip(class_name))}

    return build


def _model(class_name: str, options: Mapping[str, Any]) -> dict[str, str]:
    table_name = to_plural(to_snake_case(class_name))
    return {
        "tableName": table_name,
        "resourceName": table_name,
        "snakeName": to_snake_case(class_name),
    }


def _factory(class_name: str, options: Mapping[str, Any]) -> dict[str, str]:
    model_name = naming.FACTORY.strip(class_name)
    return {"modelName": model_name, "snakeName": to_snake_case(model_name)}


def _seeder(class_name: str, options: Mapping[str, Any]) -> dict[str, str]:
    model_name = naming.SEEDER.strip(class_name)
    return {"modelName": model_name, "snakeName": to_snake_case(model_name)}


def _policy(class_name: str, options: Mapping[str, Any]) -> dict[str, str]:
    model_name = options.get("model") or naming.POLICY.strip(class_name)
    return {
        "snakeName": to_snake_case(class_name),
        "modelName": model_name,
        "modelClass": model_name,
        "modelSnakeName": to_snake_case(model_name),
    }


def _request(class_name: str, options: Mapping[str, Any]) -> dict[str, str]:
    return {
        "snakeName": to_snake_case(class_name),
        "actionDescription": to_words(naming.REQUEST.strip(class_name)),
    }


def _provider(class_name: str, options: Mapping[str, Any]) -> dict[str, str]:
    base_name = naming.SERVICE_PROVIDER.strip(class_name)
    return {
        "snakeName": to_snake_case(class_name),
        "description": f"{to_words(base_name)} services",
    }


def _event(class_name: str, options: Mapping[str, Any]) -> dict[str, str]:
    return {
        "snakeName": to_snake_case(class_name),
        "description": f"the {class_name} action occurs",
    }


def _listener(class_name: str, options: Mapping[str, Any]) -> dict[str, str]:
    event_class = options.get("event") or DEFAULT_EVENT_CLASS
    # The framework event ships with the package import; custom events need their own.
    event_import = ""
    if event_class != DEFAULT_EVENT_CLASS:
        event_import = f"\nimport '../events/{to_snake_case(event_class)}.dart';\n"
    return {
        "snakeName": to_snake_case(class_name),
        "eventClass": event_class,
        "eventImport": event_import,
    }


# ---------------------------------------------------------------------------
# Migrations
# ---------------------------------------------------------------------------


def migration_timestamp(now: datetime | None = None) -> str:
    """Format a migration timestamp: ``2024_01_15_103000``."""
    return (now or datetime.now()).strftime("%Y_%m_%d_%H%M%S")


def _migration_snake(class_name: str, options: Mapping[str, Any]) -> str:
    return options.get("snake_name") or to_snake_case(class_name)


def _migration_full_name(class_name: str, options: Mapping[str, Any]) -> str:
    timestamp = options.get("timestamp") or migration_timestamp(options.get("now"))
    return f"{timestamp}_{_migration_snake(class_name, options)}"


def _migration_table(migration_name: str) -> str:
    if migration_name.startswith("create_") and migration_name.endswith("_table"):
        return migration_name[len("create_"): -len("_table")]
    return ""


def _migration(class_name: str, options: Mapping[str, Any]) -> dict[str, str]:
    replacements = {"fullName": _migration_full_name(class_name, options)}
    table_name = options.get("create") or _migration_table(_migration_snake(class_name, options))
    if table_name:
        replacements["tableName"] = table_name
    return replacements


def _migration_stem(class_name: str, options: Mapping[str, Any]) -> str:
    return f"m_{_migration_full_name(class_name, options)}"


def _migration_options(name: str, options: Mapping[str, Any]) -> dict[str, Any]:
    """Pin the timestamp and snake name once; detect ``create_<table>_table``.

    The snake name comes from the name as typed, not from the PascalCase
    class name, so ``add_2fa_to_users`` keeps its exact spelling.
    """
    opts = dict(options)
    opts.setdefault("timestamp", migration_timestamp(opts.get("now")))
    opts.setdefault("snake_name", to_snake_case(parse_name(name).identifier))
    if not opts.get("create"):
        table_name = _migration_table(opts["snake_name"])
        if table_name:
            opts["create"] = table_name
    return opts


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------

GENERATORS: dict[str, GeneratorSpec] = {
    spec.kind: spec
    for spec in (
        GeneratorSpec(
            kind="controller",
            namespace="lib/app/controllers",
            template=_variant("controller", "resource", "stateful"),
            suffix=naming.CONTROLLER,
            substitute_base=True,
            replacements=_base_snake(naming.CONTROLLER),
            description="Create a new controller class",
        ),
        GeneratorSpec(
            kind="view",
            namespace="lib/resources/views",
            template=_variant("view", "responsive", "stateful"),
            suffix=naming.VIEW,
            substitute_base=True,
            replacements=_base_snake(naming.VIEW),
            description="Create a new view class",
        ),
        GeneratorSpec(
            kind="model",
            namespace="lib/app/models",
            template="model",
            replacements=_model,
            description="Create a new model class",
        ),
        GeneratorSpec(
            kind="migration",
            namespace="lib/database/migrations",
            template=_migration_template,
            class_name=to_pascal_case,
            replacements=_migration,
            file_stem=_migration_stem,
            description="Create a new migration file",
        ),
        GeneratorSpec(
            kind="factory",
            namespace="lib/database/factories",
            template="factory",
            suffix=naming.FACTORY,
            replacements=_factory,
            description="Create a new model factory",
        ),
        GeneratorSpec(
            kind="seeder",
            namespace="lib/database/seeders",
            template="seeder",
            suffix=naming.SEEDER,
            replacements=_seeder,
            description="Create a new seeder class",
        ),
        GeneratorSpec(
            kind="policy",
            namespace="lib/app/policies",
            template="policy",
            suffix=naming.POLICY,
            replacements=_policy,
            description="Create a new policy class",
        ),
        GeneratorSpec(
            kind="request",
            namespace="lib/app/validation/requests",
            template="request",
            suffix=naming.REQUEST,
            replacements=_request,
            description="Create a new form request class",
        ),
        GeneratorSpec(
            kind="provider",
            namespace="lib/app/providers",
            template="provider",
            suffix=naming.SERVICE_PROVIDER,
            replacements=_provider,
            description="Create a new service provider class",
        ),
        GeneratorSpec(
            kind="enum",
            namespace="lib/app/enums",
            template="enum",
            replacements=_snake,
            description="Create a new enum",
        ),
        GeneratorSpec(
            kind="event",
            namespace="lib/app/events",
            template="event",
            replacements=_event,
            description="Create a new event class",
        ),
        GeneratorSpec(
            kind="listener",
            namespace="lib/app/listeners",
            template="listener",
            replacements=_listener,
            description="Create a new event listener class",
        ),
        GeneratorSpec(
            kind="middleware",
            namespace="lib/app/middleware",
            template="middleware",
            replacements=_snake,
            description="Create a new middleware class",
        ),
        GeneratorSpec(
            kind="lang",
            namespace="assets/lang",
            template="lang",
            file_stem=lambda class_name, options: class_name,
            extension=".json",
            description="Create a new language file",
        ),
    )
}


def get_generator(kind: str) -> GeneratorSpec:
    """Look up a kind by name (``"factory"`` or ``"make:factory"``)."""
    key = kind.removeprefix("make:")
    try:
        return GENERATORS[key]
    except KeyError:
        raise KeyError(f"Unknown generator kind: {kind}") from None


def make(
    pipeline: GeneratorPipeline,
    kind: str,
    name: str,
    options: Mapping[str, Any] | None = None,
    overwrite: bool = False,
) -> GeneratedArtifact:
    """Generate a single artifact of *kind*."""
    opts = dict(options or {})
    if kind.removeprefix("make:") == "migration":
        opts = _migration_options(name, opts)
    return pipeline.run(get_generator(kind), name, opts, overwrite)


# ---------------------------------------------------------------------------
# Multi-artifact sequences
# ---------------------------------------------------------------------------


@dataclass
class StepResult:
    """Outcome of one step of a multi-artifact sequence."""

    kind: str
    name: str
    artifact: GeneratedArtifact | None = None
    error: Exception | None = None
    skipped: bool = False

    @property
    def success(self) -> bool:
        return self.artifact is not None

    @property
    def path(self) -> Path | None:
        return self.artifact.path if self.artifact else None


def _step(
    pipeline: GeneratorPipeline,
    kind: str,
    name: str,
    options: Mapping[str, Any],
    overwrite: bool,
) -> StepResult:
    try:
        artifact = make(pipeline, kind, name, options, overwrite)
    except (TargetExistsError, TemplateNotFoundError, OSError) as exc:
        return StepResult(kind=kind, name=name, error=exc)
    return StepResult(kind=kind, name=name, artifact=artifact)


def make_resource_views(
    pipeline: GeneratorPipeline,
    name: str,
    overwrite: bool = False,
) -> list[StepResult]:
    """Generate the CRUD views for a resource controller.

    Writes ``lib/resources/views/<snake>/<type>_view.dart`` for each of
    ``index``, ``show``, ``create`` and ``edit`` from the ``view.stateful``
    stub.  Views that already exist are skipped unless *overwrite* is set.
    """
    base_name = naming.CONTROLLER.strip(parse_name(name).identifier)
    snake_name = to_snake_case(base_name)
    namespace = f"{GENERATORS['view'].namespace}/{snake_name}"

    results: list[StepResult] = []
    for view_type in RESOURCE_VIEWS:
        view_name = f"{base_name}{view_type.capitalize()}"
        try:
            artifact = pipeline.generate(
                view_name,
                "view.stateful",
                namespace,
                {"modelName": base_name, "snakeName": snake_name},
                overwrite,
                file_stem=f"{view_type}_view",
            )
        except TargetExistsError as exc:
            results.append(StepResult(kind="view", name=view_name, error=exc, skipped=True))
            continue
        except (TemplateNotFoundError, OSError) as exc:
            results.append(StepResult(kind="view", name=view_name, error=exc))
            continue
        results.append(StepResult(kind="view", name=view_name, artifact=artifact))
    return results


def make_controller(
    pipeline: GeneratorPipeline,
    name: str,
    options: Mapping[str, Any] | None = None,
    overwrite: bool = False,
) -> list[StepResult]:
    """Generate a controller, plus its CRUD views when ``resource`` is set.

    The views are only attempted once the controller itself was written.
    """
    opts = dict(options or {})
    results = [_step(pipeline, "controller", name, opts, overwrite)]
    if opts.get("resource") and results[0].success:
        results.extend(make_resource_views(pipeline, name, overwrite))
    return results


def make_model_bundle(
    pipeline: GeneratorPipeline,
    name: str,
    *,
    migration: bool = False,
    controller: bool = False,
    factory: bool = False,
    seeder: bool = False,
    policy: bool = False,
    include_all: bool = False,
    overwrite: bool = False,
    now: datetime | None = None,
) -> list[StepResult]:
    """Generate a model and, optionally, its related classes.

    Order: model, migration, factory, seeder, policy, controller (a resource
    controller with views when *include_all* is set).  Every requested step runs even
    if an earlier one failed; files already written stay on disk.
    """
    class_name = parse_name(name).identifier
    table_name = to_plural(to_snake_case(class_name))

    results = [_step(pipeline, "model", name, {}, overwrite)]

    if include_all or migration:
        results.append(
            _step(
                pipeline,
                "migration",
                f"create_{table_name}_table",
                {"create": table_name, "now": now},
                overwrite,
            )
        )
    if include_all or factory:
        results.append(_step(pipeline, "factory", class_name, {}, overwrite))
    if include_all or seeder:
        results.append(_step(pipeline, "seeder", class_name, {}, overwrite))
    if include_all or policy:
        results.append(_step(pipeline, "policy", class_name, {"model": class_name}, overwrite))
    if include_all or controller:
        results.extend(make_controller(pipeline, class_name, {"resource": include_all}, overwrite))

    return results
