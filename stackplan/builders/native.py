"""Native builder: runs the detected build plan directly on the host.

Each command runs from the release directory. Python projects get a
shared virtualenv per app that survives across releases; install commands
activate it first. Package managers installed into the deploy user's home
(bun, poetry, uv) get their bin directory prepended to PATH.
"""

import logging
from typing import Optional

from stackplan.builders.failures import command_failure
from stackplan.builders.release import app_name_from_release, write_release_env
from stackplan.builders.types import BuildError, BuildOptions, BuildResult, failed_result
from stackplan.core.config import Settings, get_settings
from stackplan.detector.types import Detection

logger = logging.getLogger(__name__)

PM_PATH_PREFIXES: dict[str, str] = {
    "bun": "export PATH=$HOME/.bun/bin:$PATH && ",
    "poetry": "export PATH=$HOME/.local/bin:$PATH && ",
    "uv": "export PATH=$HOME/.cargo/bin:$PATH && ",
}

# Substrings marking a command that installs into the virtualenv
VENV_INSTALL_MARKERS = ("pip install", "poetry install", "uv")


class NativeBuilder:
    name = "native"

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def is_available(self) -> bool:
        return True

    def needs_nginx(self) -> bool:
        return True

    def build(self, options: BuildOptions) -> BuildResult:
        """Run every build command in order, stopping at the first failure.

        Raises:
            EnvironmentWriteError: If the release .env cannot be written.
            BuildError: If the Python virtualenv cannot be created.
            BuildCommandFailed: If a command exits non-zero.
            OutOfMemoryError: If a command was killed.
        """
        detection = options.detection
        if detection is None or not detection.build_plan:
            return BuildResult(success=True)

        executor = options.executor
        release_path = options.release_path

        write_release_env(executor, release_path, options.env_vars, self.settings)

        if detection.language == "Python":
            self._create_venv(options)

        log: list[str] = []
        path_prefix = package_manager_path(detection)

        for command in detection.build_plan:
            stripped = command.strip()
            if not stripped or stripped.startswith("#"):
                continue

            adjusted = self.adjust_command(command, release_path, detection)
            full_command = f"cd {release_path} && {path_prefix}{adjusted}"
            logger.info("Running build command: %s", command)

            result = executor.execute(full_command)
            log.append(result.stdout)
            log.append(result.stderr)

            if not result.is_success:
                raise command_failure(command, result, "".join(log))

        return BuildResult(success=True, build_log="".join(log))

    def venv_path(self, release_path: str) -> str:
        app = app_name_from_release(release_path)
        return f"{self.settings.remote_app_base_dir}/{app}/shared/venv"

    def adjust_command(self, command: str, release_path: str, detection: Optional[Detection]) -> str:
        """Activate the shared virtualenv before Python install commands."""
        if detection is None or detection.language != "Python":
            return command
        if any(marker in command for marker in VENV_INSTALL_MARKERS):
            return f"source {self.venv_path(release_path)}/bin/activate && {command}"
        return command

    def _create_venv(self, options: BuildOptions) -> None:
        venv = self.venv_path(options.release_path)
        user = self.settings.deploy_user

        result = options.executor.execute_sudo(f"python3 -m venv {venv}")
        if not result.is_success:
            logger.warning("Failed to create virtualenv %s: %s", venv, result.stderr)
            raise BuildError(
                f"failed to create venv: {result.stderr or result.error}",
                failed_result(),
            )
        options.executor.execute_sudo(f"chown -R {user}:{user} {venv}")


def package_manager_path(detection: Optional[Detection]) -> str:
    if detection is None:
        return ""
    return PM_PATH_PREFIXES.get(detection.meta.get("package_manager", ""), "")
