"""Package-manager inference from lockfiles and the command strings each
manager expects.

JavaScript precedence (first match wins):
  bun.lockb / bun.lock → bun
  .yarnrc.yml          → yarn-berry
  pnpm-lock.yaml       → pnpm
  yarn.lock            → yarn
  (default)            → npm

Python precedence:
  uv.lock → uv, pdm.lock → pdm, poetry.lock → poetry,
  Pipfile.lock → pipenv, (default) → pip
"""

from stackplan.detector.probe import ProjectProbe, has_any

JS_LOCKFILES: list[tuple[tuple[str, ...], str]] = [
    (("bun.lockb", "bun.lock"), "bun"),
    ((".yarnrc.yml",), "yarn-berry"),
    (("pnpm-lock.yaml",), "pnpm"),
    (("yarn.lock",), "yarn"),
]

PYTHON_LOCKFILES: list[tuple[str, str]] = [
    ("uv.lock", "uv"),
    ("pdm.lock", "pdm"),
    ("poetry.lock", "poetry"),
    ("Pipfile.lock", "pipenv"),
]

JS_INSTALL_CMDS: dict[str, str] = {
    "bun": "bun install",
    "pnpm": "pnpm install",
    "yarn": "yarn install",
    "yarn-berry": "yarn install",
    "npm": "npm install",
}

JS_BUILD_CMDS: dict[str, str] = {
    "bun": "bun run build",
    "pnpm": "pnpm run build",
    "yarn": "yarn build",
    "yarn-berry": "yarn build",
    "npm": "npm run build",
}

JS_START_CMDS: dict[str, str] = {
    "bun": "bun run start",
    "pnpm": "pnpm start",
    "yarn": "yarn start",
    "yarn-berry": "yarn start",
    "npm": "npm start",
}

PYTHON_INSTALL_CMDS: dict[str, str] = {
    "uv": "uv sync",
    "pdm": "pdm install --prod",
    "poetry": "poetry install",
    "pipenv": "pipenv install",
    "pip": "pip install -r requirements.txt",
}

# yarn-berry is still invoked as `yarn`
_JS_EXECUTABLES = {"yarn-berry": "yarn"}

DJANGO_ASGI_MODULES = ("config/asgi.py", "core/asgi.py", "mysite/asgi.py", "project/asgi.py")
DJANGO_SETTINGS = ("settings.py", "settings/base.py", "config/settings.py", "core/settings.py")
ASGI_SERVERS = ("uvicorn", "daphne", "channels")


def detect_js(probe: ProjectProbe) -> str:
    for lockfiles, pm in JS_LOCKFILES:
        if has_any(probe, *lockfiles):
            return pm
    return "npm"


def detect_python(probe: ProjectProbe) -> str:
    for lockfile, pm in PYTHON_LOCKFILES:
        if probe.has(lockfile):
            return pm
    return "pip"


def detect_deno_runtime(probe: ProjectProbe) -> bool:
    return has_any(probe, "deno.json", "deno.jsonc")


def js_install_command(pm: str) -> str:
    return JS_INSTALL_CMDS.get(pm, JS_INSTALL_CMDS["npm"])


def js_build_command(pm: str) -> str:
    return JS_BUILD_CMDS.get(pm, JS_BUILD_CMDS["npm"])


def js_start_command(pm: str) -> str:
    return JS_START_CMDS.get(pm, JS_START_CMDS["npm"])


def js_run_command(pm: str, script: str) -> str:
    """`<pm> run <script>` using the manager's executable name."""
    return f"{_JS_EXECUTABLES.get(pm, pm)} run {script}"


def python_install_command(pm: str) -> str:
    return PYTHON_INSTALL_CMDS.get(pm, PYTHON_INSTALL_CMDS["pip"])


def detect_django_server_type(probe: ProjectProbe) -> str:
    """Return "asgi" or "wsgi" for a Django project.

    ASGI wins on any of: an asgi.py module, ASGI settings, or an ASGI
    server among the dependencies. Everything else is served over WSGI.
    """
    if has_any(probe, "asgi.py", *DJANGO_ASGI_MODULES):
        return "asgi"

    for settings_path in DJANGO_SETTINGS:
        content = probe.read(settings_path)
        if "ASGI_APPLICATION" in content or "asgi" in content:
            return "asgi"

    for dep_file in ("requirements.txt", "pyproject.toml", "Pipfile"):
        content = probe.read(dep_file)
        if any(server in content for server in ASGI_SERVERS):
            return "asgi"

    return "wsgi"


def django_run_command(server_type: str, project_name: str = "") -> str:
    if server_type == "asgi":
        module = f"{project_name}.asgi" if project_name else "asgi"
        return f"uvicorn {module}:application --host 0.0.0.0 --port 8000"
    module = f"{project_name}.wsgi" if project_name else "<yourproject>.wsgi"
    return f"gunicorn {module}:application --bind 0.0.0.0:8000 --workers 2"
