"""Pluggable build strategies that execute a detection's plan on a host.

Public API:
    default_registry() -> BuilderRegistry
    run_build(options, builder_name=None) -> BuildResult
    BuildOptions, BuildResult, BuildError (and subclasses)
"""

from stackplan.builders.registry import BuilderRegistry, default_registry
from stackplan.builders.runner import run_build
from stackplan.builders.types import (
    BuildCommandFailed,
    Builder,
    BuildError,
    BuildOptions,
    BuildResult,
    EnvironmentWriteError,
    OutOfMemoryError,
    PlanParseError,
    UnknownBuilderError,
)

__all__ = [
    "default_registry",
    "run_build",
    "BuildCommandFailed",
    "Builder",
    "BuilderRegistry",
    "BuildError",
    "BuildOptions",
    "BuildResult",
    "EnvironmentWriteError",
    "OutOfMemoryError",
    "PlanParseError",
    "UnknownBuilderError",
]
