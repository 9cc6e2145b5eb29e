"""Unit tests for the Dockerfile builder.

Local docker calls are mocked via subprocess.run; the remote side is a
MagicMock executor.
"""

import os
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from stackplan.builders.dockerfile import DockerfileBuilder
from stackplan.builders.types import BuildError, BuildOptions
from stackplan.core.config import Settings
from stackplan.detector.types import Detection
from stackplan.remote.executor import CommandResult, RemoteExecutorError

RELEASE = "/srv/blog/releases/20240102"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _project(tmp_path, dockerfile: bool = True):
    if dockerfile:
        (tmp_path / "Dockerfile").write_text("FROM node:20\n")
    return tmp_path


def _executor(responses: dict[str, CommandResult] | None = None) -> MagicMock:
    responses = responses or {}

    def run(command: str) -> CommandResult:
        for needle, result in responses.items():
            if needle in command:
                return result
        return CommandResult()

    executor = MagicMock()
    executor.execute.side_effect = run
    executor.execute_sudo.side_effect = run
    return executor


def _options(project, executor, env_vars=None, detection=None, release=RELEASE) -> BuildOptions:
    return BuildOptions(
        project_path=str(project),
        detection=detection,
        release_path=release,
        executor=executor,
        env_vars=env_vars or {},
    )


def _builder() -> DockerfileBuilder:
    return DockerfileBuilder(Settings(deploy_user="deploy", default_app_port=3000))


def _ok(*args, **kwargs):
    return MagicMock(returncode=0, stdout="step 1/3\n")


def _written(executor: MagicMock) -> dict[str, tuple[str, int]]:
    return {c.args[0]: (c.args[1], c.args[2]) for c in executor.write_remote_file.call_args_list}


# ---------------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------------

class TestDockerfileBuild:
    @patch("stackplan.builders.dockerfile.subprocess.run", side_effect=_ok)
    def test_successful_build(self, mock_run, tmp_path):
        executor = _executor()

        result = _builder().build(_options(_project(tmp_path), executor, {"PORT": "8080"}))

        assert result.success
        assert result.includes_nginx is False
        assert result.start_command == f"bash {RELEASE}/docker-run.sh"

        build_args = mock_run.call_args_list[0].args[0]
        save_args = mock_run.call_args_list[1].args[0]
        assert build_args == ["docker", "build", "-t", "stackplan-blog:latest", str(tmp_path)]
        assert save_args[:3] == ["docker", "save", "-o"]

        executor.upload_file.assert_called_once()
        assert executor.upload_file.call_args.args[1] == "/tmp/stackplan-blog-image.tar"
        executed = [c.args[0] for c in executor.execute.call_args_list]
        assert "docker load -i /tmp/stackplan-blog-image.tar" in executed
        assert "rm /tmp/stackplan-blog-image.tar" in executed

        written = _written(executor)
        assert written[f"{RELEASE}/.env"] == ("PORT=8080\n", 0o600)
        script, mode = written[f"{RELEASE}/docker-run.sh"]
        assert mode == 0o755
        assert "-p 8080:3000" in script
        assert 'CONTAINER_NAME="stackplan-blog"' in script
        assert "--env-file $RELEASE_PATH/.env" in script

    @patch("stackplan.builders.dockerfile.subprocess.run", side_effect=_ok)
    def test_no_env_vars_skips_env_file(self, mock_run, tmp_path):
        executor = _executor()

        result = _builder().build(_options(_project(tmp_path), executor, {}))

        assert result.success
        written = _written(executor)
        assert list(written) == [f"{RELEASE}/docker-run.sh"]
        script, _ = written[f"{RELEASE}/docker-run.sh"]
        assert "--env-file" not in script
        assert "-p 3000:3000 \\\n  $IMAGE_NAME" in script

    def test_missing_dockerfile(self, tmp_path):
        with pytest.raises(BuildError, match="Dockerfile not found"):
            _builder().build(_options(_project(tmp_path, dockerfile=False), _executor()))

    def test_release_without_app_name(self, tmp_path):
        with pytest.raises(BuildError, match="failed to extract app name"):
            _builder().build(_options(_project(tmp_path), _executor(), release="release"))

    @patch("stackplan.builders.dockerfile.subprocess.run")
    def test_docker_build_failure(self, mock_run, tmp_path):
        mock_run.return_value = MagicMock(returncode=1, stdout="failed to solve: node:20 not found")
        executor = _executor()

        with pytest.raises(BuildError, match="docker build failed: exit code 1") as exc_info:
            _builder().build(_options(_project(tmp_path), executor))

        assert "failed to solve" in exc_info.value.result.build_log
        executor.upload_file.assert_not_called()

    @patch("stackplan.builders.dockerfile.subprocess.run")
    def test_docker_missing_locally(self, mock_run, tmp_path):
        mock_run.side_effect = FileNotFoundError("docker")

        with pytest.raises(BuildError, match="docker build failed"):
            _builder().build(_options(_project(tmp_path), _executor()))

    @patch("stackplan.builders.dockerfile.subprocess.run", side_effect=_ok)
    def test_installs_docker_on_remote(self, mock_run, tmp_path):
        executor = _executor({"which docker": CommandResult(exit_code=1)})

        _builder().build(_options(_project(tmp_path), executor))

        sudo_calls = [c.args[0] for c in executor.execute_sudo.call_args_list]
        assert sudo_calls[:4] == [
            "curl -fsSL https://get.docker.com -o /tmp/get-docker.sh",
            "sudo sh /tmp/get-docker.sh",
            "sudo usermod -aG docker deploy",
            "rm /tmp/get-docker.sh",
        ]

    @patch("stackplan.builders.dockerfile.subprocess.run", side_effect=_ok)
    def test_remote_install_failure(self, mock_run, tmp_path):
        executor = _executor({
            "which docker": CommandResult(exit_code=1),
            "get.docker.com": CommandResult(exit_code=6, stderr="could not resolve host"),
        })

        with pytest.raises(BuildError, match="failed to install Docker on remote server"):
            _builder().build(_options(_project(tmp_path), executor))

    @patch("stackplan.builders.dockerfile.subprocess.run", side_effect=_ok)
    def test_upload_failure(self, mock_run, tmp_path):
        executor = _executor()
        executor.upload_file.side_effect = RemoteExecutorError("/tmp/x.tar", "Failed to upload file")

        with pytest.raises(BuildError, match="failed to transfer image tarball"):
            _builder().build(_options(_project(tmp_path), executor))

    @patch("stackplan.builders.dockerfile.subprocess.run", side_effect=_ok)
    def test_load_failure_still_cleans_up_remote(self, mock_run, tmp_path):
        executor = _executor({"docker load": CommandResult(exit_code=1, stderr="invalid tar header")})

        with pytest.raises(BuildError, match="docker load failed: invalid tar header"):
            _builder().build(_options(_project(tmp_path), executor))

        executed = [c.args[0] for c in executor.execute.call_args_list]
        assert "rm /tmp/stackplan-blog-image.tar" in executed

    @patch("stackplan.builders.dockerfile.subprocess.run")
    def test_local_tarball_removed(self, mock_run, tmp_path):
        def fake_docker(args, **kwargs):
            if args[1] == "save":
                with open(args[3], "w") as fh:
                    fh.write("image")
            return MagicMock(returncode=0, stdout="")

        mock_run.side_effect = fake_docker
        executor = _executor()

        _builder().build(_options(_project(tmp_path), executor))

        tarball = mock_run.call_args_list[1].args[0][3]
        assert not os.path.exists(tarball)


class TestHostPort:
    def test_env_var_wins(self, tmp_path):
        detection = Detection(framework="Express.js", language="JavaScript", meta={"port": "4000"})
        options = _options(tmp_path, _executor(), {"PORT": "9000"}, detection)
        assert _builder().host_port(options) == "9000"

    def test_detected_port(self, tmp_path):
        detection = Detection(framework="Express.js", language="JavaScript", meta={"port": "4000"})
        assert _builder().host_port(_options(tmp_path, _executor(), detection=detection)) == "4000"

    def test_default(self, tmp_path):
        assert _builder().host_port(_options(tmp_path, _executor())) == "3000"


class TestAvailability:
    @patch("stackplan.builders.dockerfile.shutil.which", return_value=None)
    def test_no_cli(self, mock_which):
        assert not _builder().is_available()

    @patch("stackplan.builders.dockerfile.subprocess.run")
    @patch("stackplan.builders.dockerfile.shutil.which", return_value="/usr/bin/docker")
    def test_daemon_running(self, mock_which, mock_run):
        mock_run.return_value = MagicMock(returncode=0)
        assert _builder().is_available()

    @patch("stackplan.builders.dockerfile.subprocess.run")
    @patch("stackplan.builders.dockerfile.shutil.which", return_value="/usr/bin/docker")
    def test_daemon_down(self, mock_which, mock_run):
        mock_run.return_value = MagicMock(returncode=1)
        assert not _builder().is_available()

    @patch("stackplan.builders.dockerfile.subprocess.run")
    @patch("stackplan.builders.dockerfile.shutil.which", return_value="/usr/bin/docker")
    def test_daemon_hangs(self, mock_which, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="docker info", timeout=30)
        assert not _builder().is_available()

    def test_does_not_need_nginx(self):
        assert _builder().needs_nginx() is False
        assert _builder().name == "dockerfile"
