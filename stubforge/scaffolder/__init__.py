"""stubforge scaffolder -- fills stub templates and writes them into a project.

This module resolves a named ``.stub`` template on an ordered search path,
derives the naming conventions a generator needs from a qualified name such
as ``Admin/Dashboard``, substitutes ``{{ key }}`` placeholders and writes the
result to a deterministic path, refusing to overwrite unless asked to.

Quick usage::

    from stubforge.scaffolder import GeneratorPipeline, TemplateRegistry, make

    pipeline = GeneratorPipeline(TemplateRegistry(), "/path/to/project")
    artifact = make(pipeline, "factory", "User")
    # -> /path/to/project/lib/database/factories/user_factory.dart
"""

from stubforge.scaffolder.generator import (
    GeneratedArtifact,
    GeneratorPipeline,
    GeneratorSpec,
    InvalidNameError,
    TargetExistsError,
)
from stubforge.scaffolder.kinds import (
    GENERATORS,
    StepResult,
    get_generator,
    make,
    make_controller,
    make_model_bundle,
    make_resource_views,
)
from stubforge.scaffolder.templates import (
    Template,
    TemplateNotFoundError,
    TemplateRegistry,
    substitute,
)

__all__ = [
    "GENERATORS",
    "GeneratedArtifact",
    "GeneratorPipeline",
    "GeneratorSpec",
    "InvalidNameError",
    "StepResult",
    "TargetExistsError",
    "Template",
    "TemplateNotFoundError",
    "TemplateRegistry",
    "get_generator",
    "make",
    "make_controller",
    "make_model_bundle",
    "make_resource_views",
    "substitute",
]
