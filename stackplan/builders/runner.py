"""Run a build end to end: pick a builder, tag the logs, execute."""

import logging
from dataclasses import replace
from typing import Optional

from stackplan.builders.registry import BuilderRegistry, default_registry
from stackplan.builders.types import BuildError, BuildOptions, BuildResult
from stackplan.core.logging import bind_release
from stackplan.remote.envfile import load_local_env

logger = logging.getLogger(__name__)


def run_build(
    options: BuildOptions,
    builder_name: Optional[str] = None,
    registry: Optional[BuilderRegistry] = None,
) -> BuildResult:
    """Build a release with the named builder, or an auto-selected one.

    Variables from the project's local .env file are merged under
    `options.env_vars` before the builder runs.

    Raises:
        UnknownBuilderError: If `builder_name` is not registered.
        BuildError: Whatever the builder raises, unchanged.
    """
    registry = registry or default_registry()
    name = builder_name or registry.auto_select_builder(options.project_path, options.detection)
    builder = registry.get_builder(name)

    options = replace(options, env_vars=load_local_env(options.project_path, options.env_vars))

    bind_release(options.release_path)
    logger.info("Building %s with '%s' builder", options.release_path, name)

    try:
        result = builder.build(options)
        logger.info(
            "Build of %s succeeded (needs_nginx=%s start_command=%r)",
            options.release_path,
            builder.needs_nginx(),
            result.start_command,
        )
        return result
    except BuildError as exc:
        logger.warning("Build of %s failed: %s", options.release_path, exc)
        raise
    finally:
        bind_release("")
