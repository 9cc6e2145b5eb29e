"""package.json parsing and the JavaScript framework facts derived from it.

Covers production script selection, deployment adapters (Remix, SvelteKit,
Astro), Next.js output mode and router, and monorepo tooling.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Optional

from stackplan.detector.probe import ProjectProbe

logger = logging.getLogger(__name__)

# Preferred script names, most production-like first
START_SCRIPT_PRIORITY = ["start:prod", "start:production", "serve", "preview", "start"]

NEXT_CONFIG_FILES = ["next.config.js", "next.config.ts", "next.config.mjs"]

# Adapter package → adapter type. Checked in order so the result does not
# depend on dependency ordering inside package.json.
REMIX_ADAPTERS: list[tuple[str, str]] = [
    ("@remix-run/cloudflare", "cloudflare"),
    ("@remix-run/deno", "deno"),
    ("@remix-run/node", "node"),
]

SVELTEKIT_ADAPTERS: list[tuple[str, str]] = [
    ("@sveltejs/adapter-static", "static"),
    ("@sveltejs/adapter-node", "node"),
    ("@sveltejs/adapter-vercel", "vercel"),
    ("@sveltejs/adapter-netlify", "netlify"),
    ("@sveltejs/adapter-cloudflare", "cloudflare"),
]

ASTRO_ADAPTERS: list[tuple[str, str]] = [
    ("@astrojs/node", "node"),
    ("@astrojs/vercel", "vercel"),
    ("@astrojs/netlify", "netlify"),
    ("@astrojs/cloudflare", "cloudflare"),
]

MONOREPO_MARKERS: list[tuple[str, str]] = [
    ("turbo.json", "turborepo"),
    ("nx.json", "nx"),
    ("lerna.json", "lerna"),
    ("pnpm-workspace.yaml", "pnpm-workspaces"),
]


@dataclass
class PackageJson:
    scripts: dict[str, str] = field(default_factory=dict)
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    workspaces: bool = False

    @property
    def all_dependencies(self) -> dict[str, str]:
        return {**self.dependencies, **self.dev_dependencies}

    def has_dependency(self, name: str) -> bool:
        return bool(self.all_dependencies.get(name))


@dataclass
class FrameworkAdapter:
    type: str = "unknown"
    package: str = ""
    run_mode: str = "server"

    @property
    def is_static(self) -> bool:
        return self.run_mode == "static"


@dataclass
class NextConfig:
    output_mode: str = "default"  # "standalone", "export" or "default"
    router: str = ""  # "app", "pages" or "" when neither directory exists
    build_output: str = ".next/"


def parse_package_json(probe: ProjectProbe) -> PackageJson:
    """Parse package.json; a missing or malformed file yields an empty one."""
    content = probe.read("package.json")
    if not content:
        return PackageJson()

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        logger.warning("Failed to parse package.json: %s", exc)
        return PackageJson()
    if not isinstance(data, dict):
        return PackageJson()

    return PackageJson(
        scripts=_string_map(data.get("scripts")),
        dependencies=_string_map(data.get("dependencies")),
        dev_dependencies=_string_map(data.get("devDependencies")),
        workspaces=data.get("workspaces") is not None,
    )


def production_start_script(pkg: PackageJson) -> str:
    return _first_script(pkg, START_SCRIPT_PRIORITY, default="start")


def detect_adapter(pkg: PackageJson, framework: str) -> FrameworkAdapter:
    """Resolve the deployment adapter for remix, sveltekit or astro.

    Remix falls back to node when @remix-run/react is present, SvelteKit
    falls back to node when @sveltejs/kit is present, Astro falls back to
    static output.
    """
    deps = pkg.all_dependencies
    framework = framework.lower()

    if framework == "remix":
        adapter = _match_adapter(deps, REMIX_ADAPTERS)
        if adapter.type == "unknown" and deps.get("@remix-run/react"):
            adapter.type = "node"
        return adapter

    if framework in ("svelte", "sveltekit"):
        adapter = _match_adapter(deps, SVELTEKIT_ADAPTERS)
        if adapter.type == "static":
            adapter.run_mode = "static"
        if adapter.type == "unknown" and deps.get("@sveltejs/kit"):
            adapter.type = "node"
        return adapter

    if framework == "astro":
        adapter = _match_adapter(deps, ASTRO_ADAPTERS)
        if adapter.type == "unknown":
            adapter.type = "static"
            adapter.run_mode = "static"
        return adapter

    return FrameworkAdapter()


def parse_next_config(probe: ProjectProbe) -> NextConfig:
    config = NextConfig()

    if probe.dir_exists("app"):
        config.router = "app"
    elif probe.dir_exists("pages"):
        config.router = "pages"

    for config_file in NEXT_CONFIG_FILES:
        content = probe.read(config_file)
        if not content:
            continue
        if _declares_output(content, "standalone"):
            config.output_mode = "standalone"
            config.build_output = ".next/standalone/"
        if _declares_output(content, "export"):
            config.output_mode = "export"
            config.build_output = "out/"
        break

    return config


def detect_monorepo_tool(probe: ProjectProbe) -> Optional[str]:
    for marker, tool in MONOREPO_MARKERS:
        if probe.has(marker):
            return tool
    if '"workspaces"' in probe.read("package.json"):
        return "yarn-workspaces"
    return None


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _declares_output(content: str, mode: str) -> bool:
    compact = "".join(content.split())
    return f"output:'{mode}'" in compact or f'output:"{mode}"' in compact


def _match_adapter(deps: dict[str, str], adapters: list[tuple[str, str]]) -> FrameworkAdapter:
    for package, adapter_type in adapters:
        for dep in sorted(deps):
            if package in dep:
                return FrameworkAdapter(type=adapter_type, package=dep)
    return FrameworkAdapter()


def _first_script(pkg: PackageJson, names: list[str], default: str) -> str:
    for name in names:
        if pkg.scripts.get(name):
            return name
    return default


def _string_map(value: object) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): str(v) for k, v in value.items()}
