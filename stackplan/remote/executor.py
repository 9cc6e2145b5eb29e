"""Remote command execution contract and a local implementation.

Builders never open connections themselves; they receive an executor that
satisfies `RemoteExecutor`. An SSH transport lives outside this package.
`LocalExecutor` runs the same commands on the current machine, which is
enough for single-host deploys and for exercising builders end to end.

Execution methods never raise: failures come back as a CommandResult with
a non-zero exit code or an `error`. File transfer methods raise
RemoteExecutorError, since a half-written file cannot be reported any
other way.
"""

import logging
import os
import shutil
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 1800

# Non-interactive: fail instead of prompting for a password
SUDO_PREFIX = "sudo -n"


@dataclass
class CommandResult:
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    # Transport-level failure (command could not be run at all)
    error: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.error is None and self.exit_code == 0

    @property
    def output(self) -> str:
        """stdout and stderr joined the way build logs record them."""
        if self.stdout:
            return f"{self.stdout}\n{self.stderr}"
        return self.stderr


class RemoteExecutorError(Exception):
    """Raised when a file cannot be written or uploaded to the target host.

    Carries the destination path and the underlying error.
    """

    def __init__(self, path: str, message: str, cause: Optional[Exception] = None):
        self.path = path
        self.cause = cause
        super().__init__(f"{message}: {path}")


@runtime_checkable
class RemoteExecutor(Protocol):
    """Operations a builder may perform on the target host."""

    def execute(self, command: str) -> CommandResult:
        ...

    def execute_sudo(self, command: str) -> CommandResult:
        ...

    def write_remote_file(self, path: str, content: str, mode: int) -> None:
        """Create or replace a file with the given permission bits."""
        ...

    def upload_file(self, local_path: str, remote_path: str) -> None:
        ...


class LocalExecutor:
    """RemoteExecutor that runs commands with the local shell."""

    def __init__(self, timeout: int = DEFAULT_TIMEOUT, sudo_prefix: str = SUDO_PREFIX):
        self.timeout = timeout
        self.sudo_prefix = sudo_prefix

    def execute(self, command: str) -> CommandResult:
        logger.debug("Executing: %s", command)
        start = time.monotonic()

        try:
            completed = subprocess.run(
                command,
                shell=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
            result = CommandResult(
                stdout=completed.stdout,
                stderr=completed.stderr,
                exit_code=completed.returncode,
            )
        except subprocess.TimeoutExpired:
            result = CommandResult(
                exit_code=-1,
                stderr=f"Timed out after {self.timeout} seconds",
            )
        except OSError as exc:
            result = CommandResult(exit_code=-2, error=str(exc))

        duration = time.monotonic() - start
        if not result.is_success:
            logger.warning(
                "Command failed (exit=%d, %.1fs): %s\n%s",
                result.exit_code,
                duration,
                command,
                truncate_output(result.error or result.stderr or result.stdout),
            )
        return result

    def execute_sudo(self, command: str) -> CommandResult:
        if not self.sudo_prefix:
            return self.execute(command)
        return self.execute(f"{self.sudo_prefix} {command}")

    def write_remote_file(self, path: str, content: str, mode: int) -> None:
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
            os.chmod(target, mode)
        except OSError as exc:
            raise RemoteExecutorError(path, "Failed to write file", exc) from exc

    def upload_file(self, local_path: str, remote_path: str) -> None:
        target = Path(remote_path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(local_path, target)
        except OSError as exc:
            raise RemoteExecutorError(remote_path, "Failed to upload file", exc) from exc


def truncate_output(text: str, max_lines: int = 60, max_chars: int = 4000) -> str:
    """Return a concise tail of command output for logs."""
    if not text:
        return ""
    lines = text.splitlines()
    tail = lines[-max_lines:]
    joined = "\n".join(tail)
    if len(joined) > max_chars:
        joined = joined[-max_chars:]
    return joined
