"""Best-effort application port inference.

Looks at package.json scripts and .env files first (they apply to any
framework), then at framework-specific config. Falls back to the
framework's conventional default port.
"""

import logging
import re
from typing import Callable, Optional

import yaml

from stackplan.detector.package_json import parse_package_json
from stackplan.detector.probe import ProjectProbe
from stackplan.detector.types import Framework

logger = logging.getLogger(__name__)

FALLBACK_PORT = "3000"

DEFAULT_PORTS: dict[str, str] = {
    Framework.NEXTJS: "3000",
    Framework.REMIX: "3000",
    Framework.NUXT: "3000",
    Framework.SVELTE: "5173",
    Framework.ASTRO: "4321",
    Framework.GATSBY: "9000",
    Framework.VUE: "8080",
    Framework.ANGULAR: "4200",
    Framework.EXPRESS: "3000",
    Framework.FASTIFY: "3000",
    Framework.NESTJS: "3000",
    Framework.TRPC: "3000",
    Framework.ELEVENTY: "8080",
    Framework.DOCUSAURUS: "3000",
    Framework.DJANGO: "8000",
    Framework.FASTAPI: "8000",
    Framework.FLASK: "5000",
    Framework.GIN: "8080",
    Framework.ECHO: "8080",
    Framework.FIBER: "3000",
    Framework.GO: "8080",
    Framework.HUGO: "1313",
    Framework.LARAVEL: "8000",
    Framework.SYMFONY: "8000",
    Framework.RAILS: "3000",
    Framework.JEKYLL: "4000",
    Framework.ACTIX: "8080",
    Framework.AXUM: "3000",
    Framework.SPRING_BOOT: "8080",
    Framework.ASPNET: "5000",
    Framework.PHOENIX: "4000",
}

SCRIPT_NAMES = ["start", "dev", "serve", "prod", "production"]
ENV_FILES = [".env", ".env.local", ".env.example", ".env.development"]

_PORT_FLAG = re.compile(r"(?:-p|--port)[\s=]+(\d+)")
_BIND_FLAG = re.compile(r"(?:--bind|--listen)\s+[^:\s]*:(\d+)")
_PORT_ENV = re.compile(r"PORT=(\d+)")
_JS_CONFIG_PORT = re.compile(r"port\s*:\s*(\d+)")
_PY_SETTINGS_PORT = re.compile(r"PORT\s*=\s*['\"]?(\d+)['\"]?")
_GO_LISTEN = re.compile(r":(\d{4,5})[^0-9]")
_GO_PORT_VAR = re.compile(r"port\s*:?=\s*['\"]?(\d+)['\"]?")
_RUBY_PORT = re.compile(r"port\s+(\d+)")
_SPRING_PORT = re.compile(r"server\.port\s*[=:]\s*(\d+)")
_ASPNET_URL = re.compile(r"http://[^:/\"]+:(\d+)")


def detect_port(probe: ProjectProbe, framework: str) -> Optional[str]:
    """Return an explicitly configured port, or None."""
    for finder in (port_from_package_json, port_from_env_files):
        port = finder(probe)
        if port:
            return port

    finder = _FRAMEWORK_FINDERS.get(framework)
    if finder is not None:
        return finder(probe)
    return None


def default_port(framework: str) -> str:
    return DEFAULT_PORTS.get(framework, FALLBACK_PORT)


def resolve_port(probe: ProjectProbe, framework: str) -> str:
    return detect_port(probe, framework) or default_port(framework)


def port_from_command(command: str) -> Optional[str]:
    """Extract a port from -p/--port, --bind host:port or PORT=... in a command."""
    for pattern in (_PORT_FLAG, _BIND_FLAG, _PORT_ENV):
        port = _valid(pattern.search(command))
        if port:
            return port
    return None


def port_from_package_json(probe: ProjectProbe) -> Optional[str]:
    scripts = parse_package_json(probe).scripts
    for name in SCRIPT_NAMES:
        if name in scripts:
            port = port_from_command(scripts[name])
            if port:
                return port
    return None


def port_from_env_files(probe: ProjectProbe) -> Optional[str]:
    for env_file in ENV_FILES:
        for line in probe.read(env_file).splitlines():
            line = line.strip()
            if line.startswith("PORT="):
                value = line[len("PORT="):].strip("\"'")
                if _is_valid_port(value):
                    return value
    return None


def port_from_spring_config(probe: ProjectProbe) -> Optional[str]:
    for config in (
        "src/main/resources/application.properties",
        "application.properties",
    ):
        port = _valid(_SPRING_PORT.search(probe.read(config)))
        if port:
            return port

    for config in ("src/main/resources/application.yml", "application.yml"):
        port = _spring_yaml_port(probe.read(config))
        if port:
            return port
    return None


# ---------------------------------------------------------------------------
# Framework-specific finders
# ---------------------------------------------------------------------------

def _search_files(paths: list[str], pattern: re.Pattern) -> Callable[[ProjectProbe], Optional[str]]:
    def finder(probe: ProjectProbe) -> Optional[str]:
        for path in paths:
            port = _valid(pattern.search(probe.read(path)))
            if port:
                return port
        return None

    return finder


def _port_from_go_code(probe: ProjectProbe) -> Optional[str]:
    for path in ("main.go", "cmd/server/main.go", "cmd/api/main.go"):
        content = probe.read(path)
        port = _valid(_GO_LISTEN.search(content)) or _valid(_GO_PORT_VAR.search(content))
        if port:
            return port
    return None


def _spring_yaml_port(content: str) -> Optional[str]:
    if not content:
        return None
    try:
        documents = list(yaml.safe_load_all(content))
    except yaml.YAMLError as exc:
        logger.debug("Ignoring unparsable Spring YAML config: %s", exc)
        return None
    for doc in documents:
        if not isinstance(doc, dict):
            continue
        server = doc.get("server")
        if isinstance(server, dict) and _is_valid_port(str(server.get("port", ""))):
            return str(server["port"])
        flat = doc.get("server.port")
        if flat is not None and _is_valid_port(str(flat)):
            return str(flat)
    return None


_next_config = _search_files(["next.config.js", "next.config.mjs"], _JS_CONFIG_PORT)
_vite_config = _search_files(["vite.config.js", "vite.config.ts", "vite.config.mjs"], _JS_CONFIG_PORT)
_python_settings = _search_files(
    ["settings.py", "config/settings.py", "core/settings.py"], _PY_SETTINGS_PORT
)
_phoenix_config = _search_files(
    ["config/config.exs", "config/dev.exs", "config/prod.exs"], re.compile(r"port:\s*(\d+)")
)
_ruby_config = _search_files(["config/puma.rb", "config.ru"], _RUBY_PORT)
_aspnet_config = _search_files(["Properties/launchSettings.json"], _ASPNET_URL)

_FRAMEWORK_FINDERS: dict[str, Callable[[ProjectProbe], Optional[str]]] = {
    Framework.NEXTJS: _next_config,
    Framework.REMIX: _next_config,
    Framework.SVELTE: _vite_config,
    Framework.VUE: _vite_config,
    Framework.DJANGO: _python_settings,
    Framework.FLASK: _python_settings,
    Framework.FASTAPI: _python_settings,
    Framework.GIN: _port_from_go_code,
    Framework.ECHO: _port_from_go_code,
    Framework.FIBER: _port_from_go_code,
    Framework.GO: _port_from_go_code,
    Framework.PHOENIX: _phoenix_config,
    Framework.RAILS: _ruby_config,
    Framework.SPRING_BOOT: port_from_spring_config,
    Framework.ASPNET: _aspnet_config,
}


def _valid(match: Optional[re.Match]) -> Optional[str]:
    if match and _is_valid_port(match.group(1)):
        return match.group(1)
    return None


def _is_valid_port(value: str) -> bool:
    return value.isdigit() and 0 < int(value) <= 65535
