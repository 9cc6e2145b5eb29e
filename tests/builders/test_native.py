"""Unit tests for the native builder.

The executor is a MagicMock; no commands are run.
"""

from unittest.mock import MagicMock

import pytest

from stackplan.builders.native import NativeBuilder, package_manager_path
from stackplan.builders.types import BuildCommandFailed, BuildError, BuildOptions, OutOfMemoryError
from stackplan.core.config import Settings
from stackplan.detector.types import Detection
from stackplan.remote.executor import CommandResult

RELEASE = "/srv/shop/releases/20240101120000"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _executor(failures: dict[str, CommandResult] | None = None) -> MagicMock:
    """Executor whose commands succeed unless a key of `failures` matches."""
    failures = failures or {}

    def run(command: str) -> CommandResult:
        for needle, result in failures.items():
            if needle in command:
                return result
        return CommandResult(stdout=f"ok: {command}\n")

    executor = MagicMock()
    executor.execute.side_effect = run
    executor.execute_sudo.side_effect = run
    return executor


def _detection(language: str, build_plan: list[str], **meta: str) -> Detection:
    return Detection(
        framework="Test",
        language=language,
        build_plan=build_plan,
        run_plan=["./app"],
        meta=meta,
    )


def _options(detection, executor, env_vars=None) -> BuildOptions:
    return BuildOptions(
        project_path="/tmp/project",
        detection=detection,
        release_path=RELEASE,
        executor=executor,
        env_vars=env_vars or {},
    )


def _builder() -> NativeBuilder:
    return NativeBuilder(Settings(remote_app_base_dir="/srv", deploy_user="deploy"))


def _executed(executor: MagicMock) -> list[str]:
    return [c.args[0] for c in executor.execute.call_args_list]


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestNativeBuild:
    def test_runs_commands_in_release_dir(self):
        executor = _executor()
        detection = _detection("JavaScript/TypeScript", ["npm install", "npm run build"], package_manager="npm")

        result = _builder().build(_options(detection, executor))

        assert result.success
        assert _executed(executor) == [
            f"cd {RELEASE} && npm install",
            f"cd {RELEASE} && npm run build",
        ]
        assert "ok: cd" in result.build_log

    def test_skips_comments_and_blank_lines(self):
        executor = _executor()
        detection = _detection("Go", ["# Please provide build steps", "   ", "go build -o app ."])

        _builder().build(_options(detection, executor))

        assert _executed(executor) == [f"cd {RELEASE} && go build -o app ."]

    def test_no_detection_is_a_no_op(self):
        executor = _executor()

        result = _builder().build(_options(None, executor))

        assert result.success
        executor.execute.assert_not_called()

    def test_empty_plan_is_a_no_op(self):
        executor = _executor()
        result = _builder().build(_options(_detection("Go", []), executor))

        assert result.success
        assert result.build_log == ""

    def test_bun_path_prefix(self):
        executor = _executor()
        detection = _detection("JavaScript/TypeScript", ["bun install"], package_manager="bun")

        _builder().build(_options(detection, executor))

        assert _executed(executor) == [
            f"cd {RELEASE} && export PATH=$HOME/.bun/bin:$PATH && bun install"
        ]

    def test_writes_env_file(self):
        executor = _executor()
        detection = _detection("Go", ["go build -o app ."])

        _builder().build(_options(detection, executor, {"PORT": "8080", "A": "1"}))

        executor.write_remote_file.assert_called_once_with(f"{RELEASE}/.env", "A=1\nPORT=8080\n", 0o600)

    def test_stops_at_first_failure(self):
        executor = _executor({"npm run build": CommandResult(exit_code=1, stderr="Type error")})
        detection = _detection("JavaScript/TypeScript", ["npm install", "npm run build", "npm test"])

        with pytest.raises(BuildCommandFailed) as exc_info:
            _builder().build(_options(detection, executor))

        error = exc_info.value
        assert error.command == "npm run build"
        assert error.exit_code == 1
        assert "Type error" in error.result.build_log
        assert error.result.success is False
        assert len(_executed(executor)) == 2

    def test_oom_is_reported(self):
        executor = _executor({"pip install": CommandResult(exit_code=137, stderr="Killed")})
        detection = _detection("Python", ["pip install -r requirements.txt"])

        with pytest.raises(OutOfMemoryError) as exc_info:
            _builder().build(_options(detection, executor))

        assert any("--no-cache-dir" in s for s in exc_info.value.suggestions)


class TestPythonVirtualenv:
    def test_creates_shared_venv_and_activates_it(self):
        executor = _executor()
        detection = _detection(
            "Python",
            ["pip install -r requirements.txt", "python manage.py collectstatic --noinput"],
        )

        _builder().build(_options(detection, executor))

        sudo_calls = [c.args[0] for c in executor.execute_sudo.call_args_list]
        assert sudo_calls == [
            "python3 -m venv /srv/shop/shared/venv",
            "chown -R deploy:deploy /srv/shop/shared/venv",
        ]
        assert _executed(executor) == [
            f"cd {RELEASE} && source /srv/shop/shared/venv/bin/activate && pip install -r requirements.txt",
            f"cd {RELEASE} && python manage.py collectstatic --noinput",
        ]

    def test_venv_failure(self):
        executor = _executor({"python3 -m venv": CommandResult(exit_code=1, stderr="no ensurepip")})
        detection = _detection("Python", ["pip install -r requirements.txt"])

        with pytest.raises(BuildError, match="failed to create venv: no ensurepip"):
            _builder().build(_options(detection, executor))

        executor.execute.assert_not_called()

    def test_adjust_command_leaves_other_languages(self):
        detection = _detection("Ruby", ["bundle install"])
        assert _builder().adjust_command("bundle install", RELEASE, detection) == "bundle install"

    def test_venv_path_defaults_app_name(self):
        assert _builder().venv_path("relative") == "/srv/app/shared/venv"


def test_builder_properties():
    builder = _builder()
    assert builder.name == "native"
    assert builder.is_available()
    assert builder.needs_nginx()


def test_package_manager_path():
    assert package_manager_path(None) == ""
    assert package_manager_path(_detection("Python", [], package_manager="uv")) == (
        "export PATH=$HOME/.cargo/bin:$PATH && "
    )
    assert package_manager_path(_detection("Python", [], package_manager="pip")) == ""
