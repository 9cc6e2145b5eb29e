"""Nixpacks builder: lets Nixpacks plan the build, then runs it on the host.

Nixpacks is only used as a planner (`nixpacks plan . --format json`); the
install and build phases run as plain shell commands in the release
directory, without building a container image. Nix packages from the setup
phase are not installed, the host's system packages are used instead.

Nixpacks installs Python dependencies into /opt/venv, so start commands
are rewritten to use the virtualenv's binaries. It also tends to propose
`python main.py` for ASGI/WSGI apps; `correct_start_command` swaps in a
real application server when one of the web frameworks is installed.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from stackplan.builders.failures import command_failure
from stackplan.builders.release import write_release_env
from stackplan.builders.types import (
    BuildError,
    BuildOptions,
    BuildResult,
    PlanParseError,
    failed_result,
)
from stackplan.core.config import Settings, get_settings
from stackplan.remote.executor import RemoteExecutor

logger = logging.getLogger(__name__)

NIXPACKS_BIN_PATH = "$HOME/.nixpacks/bin"

WEB_PACKAGES_PATTERN = "fastapi|flask|django|uvicorn|gunicorn"
FASTAPI_APP_PATTERN = r"app\s*=.*FastAPI|from fastapi import"

APP_SERVERS = ("uvicorn", "gunicorn")

# Only the leading executable is rewritten; absolute paths never match.
_BARE_SERVER = re.compile(r"^(uvicorn|gunicorn)(?=\s)")
_PYTHON_MODULE_SERVER = re.compile(r"^python3? (?=-m (uvicorn|gunicorn)\b)")


@dataclass
class NixpacksPlan:
    nix_packages: list[str] = field(default_factory=list)
    install_commands: list[str] = field(default_factory=list)
    build_commands: list[str] = field(default_factory=list)
    start_command: str = ""

    @classmethod
    def from_json(cls, text: str) -> "NixpacksPlan":
        """Parse `nixpacks plan --format json` output.

        Raises:
            ValueError: If the text is not a JSON object (json.JSONDecodeError
                is a ValueError subclass).
        """
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("nixpacks plan is not a JSON object")

        phases = data.get("phases") or {}
        start = data.get("start") or {}
        return cls(
            nix_packages=_str_list((phases.get("setup") or {}).get("nixPkgs")),
            install_commands=_str_list((phases.get("install") or {}).get("cmds")),
            build_commands=_str_list((phases.get("build") or {}).get("cmds")),
            start_command=str(start.get("cmd") or ""),
        )


class NixpacksBuilder:
    name = "nixpacks"

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def is_available(self) -> bool:
        # Installed on demand on the target host during build()
        return True

    def needs_nginx(self) -> bool:
        return True

    def build(self, options: BuildOptions) -> BuildResult:
        """Plan with Nixpacks, run install and build phases, resolve start.

        Raises:
            BuildError: If Nixpacks cannot be installed or planning fails.
            PlanParseError: If the plan output is not valid JSON.
            BuildCommandFailed / OutOfMemoryError: If a phase command fails.
            EnvironmentWriteError: If the release .env cannot be written.
        """
        executor = options.executor
        release = options.release_path
        log: list[str] = []

        self._ensure_nixpacks(executor, log)
        plan = self._generate_plan(executor, release, log)

        if plan.nix_packages:
            log.append("==> Installing Nix packages...\n")
            log.append("    (skipping - using system packages)\n")

        venv = self.settings.nixpacks_venv
        if any(venv in command for command in plan.install_commands):
            log.append(f"==> Preparing {venv} directory...\n")
            user = self.settings.deploy_user
            executor.execute_sudo(f"mkdir -p {venv}")
            executor.execute_sudo(f"chown {user}:{user} {venv}")

        self._run_phase("install", plan.install_commands, executor, release, log)
        self._run_phase("build", plan.build_commands, executor, release, log)

        write_release_env(executor, release, options.env_vars, self.settings, "".join(log))
        log.append("==> Build completed successfully!\n")

        start_command = self._resolve_start_command(plan.start_command, executor, release, log)
        return BuildResult(success=True, build_log="".join(log), start_command=start_command)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_nixpacks(self, executor: RemoteExecutor, log: list[str]) -> None:
        log.append("==> Checking nixpacks installation...\n")
        if executor.execute("which nixpacks").is_success:
            return

        log.append("==> Installing nixpacks via curl...\n")
        result = executor.execute(f"curl -sSL {self.settings.nixpacks_install_url} | bash")
        log.append(result.stdout)
        log.append(result.stderr)
        if not result.is_success:
            raise BuildError(
                f"failed to install nixpacks: {result.stderr or result.error}",
                failed_result("".join(log)),
            )
        executor.execute(f"export PATH={NIXPACKS_BIN_PATH}:$PATH")

    def _generate_plan(self, executor: RemoteExecutor, release: str, log: list[str]) -> NixpacksPlan:
        log.append("==> Generating nixpacks build plan...\n")
        result = executor.execute(
            f"cd {release} && {NIXPACKS_BIN_PATH}/nixpacks plan . --format json 2>/dev/null"
            " || nixpacks plan . --format json"
        )
        log.append(result.stdout)

        if not result.is_success:
            raise BuildError(
                f"nixpacks plan failed: {result.stderr or result.error}",
                failed_result("".join(log)),
            )

        try:
            return NixpacksPlan.from_json(result.stdout)
        except ValueError as exc:
            logger.warning("Unparsable nixpacks plan: %s", exc)
            raise PlanParseError(exc, failed_result("".join(log))) from exc

    def _run_phase(
        self,
        phase: str,
        commands: list[str],
        executor: RemoteExecutor,
        release: str,
        log: list[str],
    ) -> None:
        if not commands:
            return
        log.append(f"==> Running {phase} commands...\n")
        for command in commands:
            result = executor.execute(f"cd {release} && {command}")
            log.append(f"    $ {command}\n")
            log.append(result.stdout)
            if not result.is_success:
                log.append(result.stderr)
                raise command_failure(command, result, "".join(log))

    def _resolve_start_command(
        self,
        command: str,
        executor: RemoteExecutor,
        release: str,
        log: list[str],
    ) -> str:
        if not command:
            return ""

        installed = ""
        has_fastapi_app = False
        if not _uses_app_server(command) and command.startswith("python "):
            venv = self.settings.nixpacks_venv
            packages = executor.execute(
                f"cd {release} && {venv}/bin/pip list 2>/dev/null | grep -iE '{WEB_PACKAGES_PATTERN}'"
            )
            installed = packages.stdout
            if _mentions_any(installed.lower(), ("fastapi", "uvicorn")):
                app_check = executor.execute(
                    f"cd {release} && grep -E '{FASTAPI_APP_PATTERN}' main.py 2>/dev/null"
                )
                has_fastapi_app = app_check.is_success

        corrected = correct_start_command(
            command, installed, has_fastapi_app, venv=self.settings.nixpacks_venv
        )
        if corrected != command:
            log.append(f"==> Using start command: {corrected}\n")
            logger.info("Rewrote nixpacks start command %r -> %r", command, corrected)
        return corrected


def correct_start_command(
    command: str,
    installed_packages: str,
    has_fastapi_app: bool,
    venv: str = "/opt/venv",
) -> str:
    """Point a Nixpacks start command at the virtualenv's binaries.

    Args:
        command: Start command proposed by Nixpacks.
        installed_packages: `pip list` output (any case) filtered to the
            web packages of interest.
        has_fastapi_app: Whether main.py declares a FastAPI app.
        venv: Virtualenv that Nixpacks installed into.

    Decision order:
      uvicorn/gunicorn command   → leading executable swapped for the venv one
      `python <file>` and
        fastapi/uvicorn present  → uvicorn main:app if main.py is a FastAPI
                                   app, else venv python
        flask present            → gunicorn main:app
        django present           → gunicorn wsgi:application
        otherwise                → venv python
    Any other command is returned unchanged.
    """
    bin_dir = f"{venv}/bin"

    if _uses_app_server(command):
        command = _BARE_SERVER.sub(lambda m: f"{bin_dir}/{m.group(1)}", command, count=1)
        return _PYTHON_MODULE_SERVER.sub(f"{bin_dir}/python ", command, count=1)

    if not command.startswith("python "):
        return command

    packages = installed_packages.lower()
    venv_python = command.replace("python ", f"{bin_dir}/python ", 1)

    if _mentions_any(packages, ("fastapi", "uvicorn")):
        if has_fastapi_app:
            return f"{bin_dir}/uvicorn main:app --host 0.0.0.0 --port 8000"
        return venv_python
    if "flask" in packages:
        return f"{bin_dir}/gunicorn main:app --bind 0.0.0.0:8000 --workers 2"
    if "django" in packages:
        return f"{bin_dir}/gunicorn wsgi:application --bind 0.0.0.0:8000 --workers 2"
    return venv_python


def _uses_app_server(command: str) -> bool:
    return _mentions_any(command, APP_SERVERS)


def _mentions_any(text: str, needles: tuple[str, ...]) -> bool:
    return any(needle in text for needle in needles)


def _str_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value]
