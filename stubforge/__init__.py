"""stubforge -- stub-based code generation for ``make:*`` commands."""

__version__ = "0.1.0"
