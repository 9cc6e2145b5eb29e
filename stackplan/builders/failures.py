"""Build command failure classification.

A command counts as OOM-killed when it exits with 137 (SIGKILL) or 143
(SIGTERM), or when its output contains "Killed".
"""

import logging

from stackplan.builders.types import BuildCommandFailed, BuildResult, OutOfMemoryError
from stackplan.remote.executor import CommandResult, truncate_output

logger = logging.getLogger(__name__)

OOM_EXIT_CODES = frozenset({137, 143})

BASE_OOM_SUGGESTIONS = [
    "Increase server memory (upgrade droplet size)",
    "Add swap space to the server",
]


def is_oom(result: CommandResult) -> bool:
    return result.exit_code in OOM_EXIT_CODES or "Killed" in result.output


def oom_suggestions(command: str) -> list[str]:
    suggestions = list(BASE_OOM_SUGGESTIONS)
    if "bun" in command:
        suggestions.append("Use npm instead of bun (bun uses more memory during install)")
    elif _contains_any(command, ("poetry", "pip")):
        suggestions.append("Use --no-cache-dir flag with pip to reduce memory usage")
    return suggestions


def command_failure(command: str, result: CommandResult, build_log: str) -> BuildCommandFailed:
    """Build the exception for a failed command, relabelled as OOM when killed."""
    failed = BuildResult(success=False, build_log=build_log)
    output = result.output or (result.error or "")

    logger.warning(
        "Build command failed (exit=%d): %s\n%s",
        result.exit_code,
        command,
        truncate_output(output),
    )

    if is_oom(result):
        return OutOfMemoryError(
            command,
            result.exit_code,
            output,
            oom_suggestions(command),
            failed,
        )
    return BuildCommandFailed(command, result.exit_code, output, failed)


def _contains_any(text: str, needles: tuple[str, ...]) -> bool:
    return any(needle in text for needle in needles)
