"""Helpers shared by builders that work inside a remote release directory."""

import logging
from typing import Optional

from stackplan.builders.types import EnvironmentWriteError, failed_result
from stackplan.core.config import Settings
from stackplan.remote.envfile import render_env_file
from stackplan.remote.executor import RemoteExecutor, RemoteExecutorError

logger = logging.getLogger(__name__)


def app_name_from_release(release_path: str, default: str = "app") -> str:
    """App name from a release path laid out as /<base>/<app>/releases/<ts>."""
    parts = release_path.split("/")
    if len(parts) >= 3 and parts[2]:
        return parts[2]
    return default


def write_release_file(
    executor: RemoteExecutor,
    path: str,
    content: str,
    mode: int,
    settings: Settings,
    build_log: str = "",
) -> None:
    """Write a file into the release and hand it to the deploy user.

    Raises:
        EnvironmentWriteError: If the executor cannot write the file.
    """
    try:
        executor.write_remote_file(path, content, mode)
    except RemoteExecutorError as exc:
        logger.warning("Failed to write %s: %s", path, exc)
        raise EnvironmentWriteError(path, exc, failed_result(build_log)) from exc
    executor.execute_sudo(f"chown {settings.deploy_user}:{settings.deploy_user} {path}")


def write_release_env(
    executor: RemoteExecutor,
    release_path: str,
    env_vars: Optional[dict[str, str]],
    settings: Settings,
    build_log: str = "",
) -> Optional[str]:
    """Write `{release}/.env` when there is anything to write.

    Returns the written path, or None when env_vars is empty.
    """
    if not env_vars:
        return None
    env_path = f"{release_path}/.env"
    write_release_file(
        executor, env_path, render_env_file(env_vars), settings.env_file_mode, settings, build_log
    )
    return env_path
