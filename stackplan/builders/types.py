"""Builder contract, build inputs/outputs and the build error taxonomy.

A builder either returns a successful BuildResult or raises a BuildError
subclass. Every BuildError carries the failed BuildResult (success False,
build log up to the failure) on `.result`, so callers always have a log
to show next to the error message.
"""

from dataclasses import dataclass, field
from typing import Optional, Protocol, runtime_checkable

from stackplan.detector.types import Detection
from stackplan.remote.executor import RemoteExecutor


@dataclass(frozen=True)
class BuildOptions:
    project_path: str
    detection: Optional[Detection]
    # Remote release directory, e.g. /srv/<app>/releases/<timestamp>
    release_path: str
    executor: RemoteExecutor
    env_vars: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class BuildResult:
    success: bool
    build_log: str = ""
    includes_nginx: bool = False
    # Command the process supervisor should run; empty when the plan's run
    # command applies unchanged
    start_command: str = ""

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "build_log": self.build_log,
            "includes_nginx": self.includes_nginx,
            "start_command": self.start_command,
        }


def failed_result(build_log: str = "") -> BuildResult:
    return BuildResult(success=False, build_log=build_log)


@runtime_checkable
class Builder(Protocol):
    """A build strategy. Instances are cheap and created per build."""

    name: str

    def is_available(self) -> bool:
        """Whether the strategy can run in the current environment."""
        ...

    def needs_nginx(self) -> bool:
        """Whether a reverse proxy must be configured in front of the app."""
        ...

    def build(self, options: BuildOptions) -> BuildResult:
        ...


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class BuildError(Exception):
    """Raised when a build cannot complete.

    Carries the failed BuildResult for log reporting.
    """

    def __init__(self, message: str, result: Optional[BuildResult] = None):
        self.result = result or failed_result()
        super().__init__(message)


class BuildCommandFailed(BuildError):
    """A build command exited non-zero."""

    def __init__(
        self,
        command: str,
        exit_code: int,
        output: str,
        result: Optional[BuildResult] = None,
        message: str = "",
    ):
        self.command = command
        self.exit_code = exit_code
        self.output = output
        super().__init__(
            message or f"build command failed '{command}' (exit code {exit_code}): {output}",
            result,
        )


class OutOfMemoryError(BuildCommandFailed):
    """A build command was killed, most likely by the kernel OOM killer."""

    def __init__(
        self,
        command: str,
        exit_code: int,
        output: str,
        suggestions: list[str],
        result: Optional[BuildResult] = None,
    ):
        self.suggestions = suggestions
        hints = "\n".join(f"  - {s}" for s in suggestions)
        super().__init__(
            command,
            exit_code,
            output,
            result,
            message=(
                f"build command failed '{command}' (exit code {exit_code}):\n\n{output}\n\n"
                "Process was killed, likely due to insufficient memory (OOM).\n"
                f"Suggestions:\n{hints}"
            ),
        )


class EnvironmentWriteError(BuildError):
    """The release .env file or a generated script could not be written."""

    def __init__(self, path: str, cause: Exception, result: Optional[BuildResult] = None):
        self.path = path
        self.cause = cause
        super().__init__(f"failed to write {path}: {cause}", result)


class PlanParseError(BuildError):
    """The Nixpacks JSON plan could not be parsed."""

    def __init__(self, cause: Exception, result: Optional[BuildResult] = None):
        self.cause = cause
        super().__init__(f"failed to parse nixpacks plan: {cause}", result)


class UnknownBuilderError(LookupError):
    """Raised by the registry for a name nobody registered."""

    def __init__(self, name: str, valid: list[str]):
        self.name = name
        self.valid = valid
        super().__init__(
            f"Unknown builder '{name}'. Valid options: {', '.join(valid) or '(none)'}"
        )
