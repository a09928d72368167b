"""Command-line entry point for the ``make:*`` generators.

Usage::

    stubforge make:model Monitor --all
    stubforge make:controller Admin/Dashboard --resource
    stubforge --root ./my_app make:factory User --force
    stubforge stubs:list

Each ``make:*`` subcommand validates its argument, then hands off to the
generator pipeline.  All output goes through the Rich helpers in
:mod:`stubforge.utils`.
"""

from __future__ import annotations

import argparse
import re
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from stubforge import naming
from stubforge.config import Config, ProjectRootNotFoundError
from stubforge.scaffolder import (
    GENERATORS,
    GeneratorPipeline,
    InvalidNameError,
    StepResult,
    TargetExistsError,
    TemplateNotFoundError,
    TemplateRegistry,
    make,
    make_controller,
    make_model_bundle,
)
from stubforge.utils import (
    display_path,
    print_comment,
    print_error,
    print_warning,
    print_success,
    print_summary_table,
)

PASCAL_CASE = re.compile(r"^[A-Z][a-zA-Z0-9]*$")

# Kinds whose bare name (suffix stripped) must be PascalCase.
_PASCAL_CASE_KINDS: dict[str, naming.SuffixPolicy] = {
    "controller": naming.CONTROLLER,
    "view": naming.VIEW,
}


# ---------------------------------------------------------------------------
# Per-kind arguments
# ---------------------------------------------------------------------------


def _controller_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--stateful", "-s", action="store_true", help="Controller with MagicStateMixin")
    parser.add_argument("--resource", "-r", action="store_true", help="CRUD controller with views")


def _view_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--stateful", action="store_true", help="Stateful view with lifecycle hooks")
    parser.add_argument("--responsive", "-r", action="store_true", help="Mobile/tablet/desktop layouts")


def _model_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--migration", "-m", action="store_true", help="Also create a migration")
    parser.add_argument("--controller", "-c", action="store_true", help="Also create a controller")
    parser.add_argument("--factory", "-f", action="store_true", help="Also create a factory")
    parser.add_argument("--seeder", "-s", action="store_true", help="Also create a seeder")
    parser.add_argument("--policy", "-p", action="store_true", help="Also create a policy")
    parser.add_argument(
        "--all", "-a", dest="include_all", action="store_true",
        help="Migration, factory, seeder, policy and resource controller",
    )


def _policy_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--model", "-m", default=None, help="The model the policy applies to")


def _listener_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--event", "-e", default=None, help="The event class the listener handles")


def _migration_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--create", default=None, metavar="TABLE", help="The table to be created")


_KIND_ARGS: dict[str, Callable[[argparse.ArgumentParser], None]] = {
    "controller": _controller_args,
    "view": _view_args,
    "model": _model_args,
    "policy": _policy_args,
    "listener": _listener_args,
    "migration": _migration_args,
}

_OPTION_KEYS: tuple[str, ...] = ("stateful", "resource", "responsive", "model", "event", "create")


def build_parser() -> argparse.ArgumentParser:
    """Build the ``stubforge`` argument parser."""
    parser = argparse.ArgumentParser(
        prog="stubforge",
        description="stubforge -- generate classes from stub templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  stubforge make:model Monitor --all\n"
            "  stubforge make:controller Admin/Dashboard --resource\n"
            "  stubforge stubs:list\n"
        ),
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Project root (default: nearest directory containing pubspec.yaml)",
    )
    parser.add_argument(
        "--stubs-dir",
        default=None,
        help="Directory searched for stubs before the built-in ones",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="command", required=True)
    for kind, spec in GENERATORS.items():
        sub = subparsers.add_parser(f"make:{kind}", help=spec.description)
        sub.add_argument("name", help="Class name, optionally nested (e.g. Admin/Dashboard)")
        sub.add_argument("--force", action="store_true", help="Overwrite the file if it exists")
        add_args = _KIND_ARGS.get(kind)
        if add_args is not None:
            add_args(sub)
        sub.set_defaults(kind=kind)

    subparsers.add_parser("stubs:list", help="List the stubs visible on the search path")
    return parser


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _load_config(args: argparse.Namespace) -> Config:
    config = Config.from_env()
    updates = {}
    if args.root:
        updates["project_root"] = Path(args.root)
    if args.stubs_dir:
        updates["stubs_dir"] = Path(args.stubs_dir)
    return config.model_copy(update=updates) if updates else config


def validate_name(kind: str, name: str) -> str | None:
    """Return an error message if *name* is not acceptable for *kind*."""
    leaf = naming.parse_name(name).identifier
    if not leaf:
        return 'Not enough arguments (missing: "name").'
    policy = _PASCAL_CASE_KINDS.get(kind)
    if policy is not None and not PASCAL_CASE.match(policy.strip(leaf)):
        return f"{kind.capitalize()} name must be PascalCase (e.g., User, Dashboard)."
    return None


def _report(results: Sequence[StepResult], root: Path) -> bool:
    """Print each step outcome; return ``True`` when no step failed."""
    ok = True
    for result in results:
        if result.artifact is not None:
            print_success(f"Created: {display_path(result.artifact.path, root)}")
        elif result.skipped:
            print_warning(f"Skipped: {result.error}")
        else:
            print_error(str(result.error))
            ok = False
    return ok


def _make(args: argparse.Namespace, pipeline: GeneratorPipeline) -> bool:
    kind = args.kind
    options = {key: getattr(args, key) for key in _OPTION_KEYS if getattr(args, key, None)}

    if kind == "model":
        results = make_model_bundle(
            pipeline,
            args.name,
            migration=args.migration,
            controller=args.controller,
            factory=args.factory,
            seeder=args.seeder,
            policy=args.policy,
            include_all=args.include_all,
            overwrite=args.force,
        )
    elif kind == "controller":
        results = make_controller(pipeline, args.name, options, overwrite=args.force)
    else:
        artifact = make(pipeline, kind, args.name, options, overwrite=args.force)
        results = [StepResult(kind=kind, name=args.name, artifact=artifact)]

    return _report(results, pipeline.project_root)


def _list_stubs(config: Config) -> None:
    registry = TemplateRegistry.from_config(config)
    rows = [(name, str(registry.resolve(name).path)) for name in registry.list_templates()]
    print_summary_table(rows, title="Stubs", columns=("Stub", "Source"))
    for path in registry.effective_paths():
        print_comment(f"Search path: {path}")


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for ``stubforge`` / ``python -m stubforge``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    config = _load_config(args)

    if args.command == "stubs:list":
        _list_stubs(config)
        return

    problem = validate_name(args.kind, args.name)
    if problem:
        print_error(problem)
        sys.exit(1)

    try:
        pipeline = GeneratorPipeline.from_config(config)
        ok = _make(args, pipeline)
    except (ProjectRootNotFoundError, TemplateNotFoundError, TargetExistsError, InvalidNameError) as exc:
        print_error(str(exc))
        sys.exit(1)

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
