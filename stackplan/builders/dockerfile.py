"""Dockerfile builder: builds the project's own image and ships it.

Flow:
1. `docker build` locally, then `docker save` to a tarball in the temp dir.
2. Install Docker on the target host if it is missing.
3. Upload the tarball, `docker load` it, remove the remote copy.
4. Write the release .env and a docker-run.sh that replaces the running
   container. The start command runs that script.

The container is expected to serve its own HTTP traffic, so no nginx is
configured in front of it. The app inside the container listens on 3000.
"""

import logging
import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Optional

from stackplan.builders.release import app_name_from_release, write_release_env, write_release_file
from stackplan.builders.types import BuildError, BuildOptions, BuildResult, failed_result
from stackplan.core.config import Settings, get_settings
from stackplan.remote.executor import RemoteExecutor, RemoteExecutorError, truncate_output

logger = logging.getLogger(__name__)

CONTAINER_PORT = 3000
RUN_SCRIPT_MODE = 0o755
DOCKER_INFO_TIMEOUT = 30

REMOTE_DOCKER_INSTALL = [
    "curl -fsSL https://get.docker.com -o /tmp/get-docker.sh",
    "sudo sh /tmp/get-docker.sh",
    "sudo usermod -aG docker {user}",
    "rm /tmp/get-docker.sh",
]

RUN_SCRIPT_TEMPLATE = """#!/bin/bash
# stackplan Docker container run script
CONTAINER_NAME="stackplan-{app}"
IMAGE_NAME="{image}"
RELEASE_PATH="{release}"

# Stop and remove existing container if running
docker stop $CONTAINER_NAME 2>/dev/null || true
docker rm $CONTAINER_NAME 2>/dev/null || true

# Run new container
docker run -d \\
  --name $CONTAINER_NAME \\
  --restart unless-stopped \\
  -p {port}:{container_port} \\
{env_file}  $IMAGE_NAME
"""

# Only passed when the release .env was written
ENV_FILE_FLAG = "  --env-file $RELEASE_PATH/.env \\\n"


class DockerfileBuilder:
    name = "dockerfile"

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def is_available(self) -> bool:
        """True when the docker CLI exists and the daemon answers."""
        if shutil.which("docker") is None:
            return False
        try:
            result = subprocess.run(
                ["docker", "info"],
                capture_output=True,
                timeout=DOCKER_INFO_TIMEOUT,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.debug("docker info failed: %s", exc)
            return False
        return result.returncode == 0

    def needs_nginx(self) -> bool:
        return False

    def build(self, options: BuildOptions) -> BuildResult:
        """Build, transfer and stage the image for the release.

        Raises:
            BuildError: On a missing Dockerfile or app name, or any failed
                docker step.
            EnvironmentWriteError: If .env or docker-run.sh cannot be written.
        """
        dockerfile = Path(options.project_path) / "Dockerfile"
        if not dockerfile.is_file():
            raise BuildError(f"Dockerfile not found at {dockerfile}")

        app = app_name_from_release(options.release_path, default="")
        if not app:
            raise BuildError(
                f"failed to extract app name from release path: {options.release_path}"
            )

        image = f"stackplan-{app}:latest"
        tarball = os.path.join(tempfile.gettempdir(), f"stackplan-{app}-image.tar")
        log: list[str] = []

        try:
            log.append(f"Building Docker image: {image}\n")
            self._run_local(
                ["docker", "build", "-t", image, options.project_path],
                "docker build failed",
                log,
                cwd=options.project_path,
            )

            log.append(f"\nExporting image to tarball: {tarball}\n")
            self._run_local(["docker", "save", "-o", tarball, image], "docker save failed", log)

            self._ship_image(options.executor, app, tarball, log)
        finally:
            if os.path.exists(tarball):
                os.remove(tarball)

        executor = options.executor
        release = options.release_path

        env_path = write_release_env(executor, release, options.env_vars, self.settings, "".join(log))
        if env_path:
            log.append(f"\nWrote environment variables to {env_path}\n")

        script_path = f"{release}/docker-run.sh"
        script = RUN_SCRIPT_TEMPLATE.format(
            app=app,
            image=image,
            release=release,
            port=self.host_port(options),
            container_port=CONTAINER_PORT,
            env_file=ENV_FILE_FLAG if env_path else "",
        )
        write_release_file(executor, script_path, script, RUN_SCRIPT_MODE, self.settings, "".join(log))
        log.append(f"\nCreated Docker run script at {script_path}\n")
        log.append("\nDocker build completed successfully\n")

        return BuildResult(
            success=True,
            build_log="".join(log),
            includes_nginx=False,
            start_command=f"bash {script_path}",
        )

    def host_port(self, options: BuildOptions) -> str:
        """PORT from the env vars, else the detected port, else the default."""
        port = options.env_vars.get("PORT")
        if not port and options.detection is not None:
            port = options.detection.meta.get("port")
        return port or str(self.settings.default_app_port)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _run_local(
        self,
        args: list[str],
        failure: str,
        log: list[str],
        cwd: Optional[str] = None,
    ) -> None:
        logger.info("Running locally: %s", " ".join(args))
        try:
            result = subprocess.run(
                args,
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=self.settings.command_timeout_seconds,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise BuildError(f"{failure}: {exc}", failed_result("".join(log))) from exc

        log.append(result.stdout or "")
        if result.returncode != 0:
            logger.warning("%s (exit=%d):\n%s", failure, result.returncode, truncate_output(result.stdout))
            raise BuildError(
                f"{failure}: exit code {result.returncode}\nOutput: {result.stdout}",
                failed_result("".join(log)),
            )

    def _ship_image(self, executor: RemoteExecutor, app: str, tarball: str, log: list[str]) -> None:
        log.append("\nChecking Docker on remote server...\n")
        if not executor.execute("which docker").is_success:
            self._install_remote_docker(executor, log)

        remote_tarball = f"/tmp/stackplan-{app}-image.tar"
        log.append(f"\nTransferring image to server: {remote_tarball}\n")
        try:
            executor.upload_file(tarball, remote_tarball)
        except RemoteExecutorError as exc:
            raise BuildError(
                f"failed to transfer image tarball: {exc}", failed_result("".join(log))
            ) from exc

        log.append("\nLoading Docker image on remote server...\n")
        loaded = executor.execute(f"docker load -i {remote_tarball}")
        log.append(loaded.stdout)
        log.append(loaded.stderr)
        executor.execute(f"rm {remote_tarball}")

        if not loaded.is_success:
            raise BuildError(
                f"docker load failed: {loaded.stderr or loaded.error}",
                failed_result("".join(log)),
            )

    def _install_remote_docker(self, executor: RemoteExecutor, log: list[str]) -> None:
        log.append("Installing Docker on remote server...\n")
        for template in REMOTE_DOCKER_INSTALL:
            result = executor.execute_sudo(template.format(user=self.settings.deploy_user))
            log.append(result.stdout)
            log.append(result.stderr)
            if not result.is_success:
                raise BuildError(
                    f"failed to install Docker on remote server: {result.stderr or result.error}",
                    failed_result("".join(log)),
                )
        log.append("Docker installed successfully\n")
