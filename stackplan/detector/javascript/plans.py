"""Plan synthesizers for JavaScript / TypeScript frameworks.

Every plan installs with the lockfile-detected package manager, then
builds. Run commands prefer the most production-like package.json script.
"""

import re

from stackplan.detector import package_managers as pms
from stackplan.detector.defaults import healthcheck, static_plan
from stackplan.detector.package_json import (
    detect_adapter,
    parse_next_config,
    parse_package_json,
    production_start_script,
)
from stackplan.detector.probe import ProjectProbe
from stackplan.detector.types import Plan

DENO_ENTRYPOINT = "main.ts"

_MAJOR = re.compile(r"\d+")


def _install_and_build(pm: str) -> list[str]:
    return [pms.js_install_command(pm), pms.js_build_command(pm)]


def plan_nextjs(probe: ProjectProbe) -> Plan:
    pm = pms.detect_js(probe)
    config = parse_next_config(probe)
    pkg = parse_package_json(probe)

    meta = {"package_manager": pm, "output_mode": config.output_mode}
    if config.router:
        meta["router"] = config.router
    env = ["NEXT_PUBLIC_*, any server-only envs"]

    if config.output_mode == "export":
        meta["export"] = "static"
        return static_plan(_install_and_build(pm), config.build_output, env, meta)

    if config.output_mode == "standalone":
        run = ["node .next/standalone/server.js"]
        meta["build_output"] = ".next/"
    else:
        run = [pms.js_run_command(pm, production_start_script(pkg))]
        meta["build_output"] = config.build_output

    return Plan(build=_install_and_build(pm), run=run, healthcheck=healthcheck("/"), env_schema=env, meta=meta)


def plan_remix(probe: ProjectProbe) -> Plan:
    pm = pms.detect_js(probe)
    pkg = parse_package_json(probe)
    adapter = detect_adapter(pkg, "remix")

    if adapter.type == "deno":
        run = ["deno run --allow-net --allow-read --allow-env server.ts"]
    elif adapter.type == "cloudflare":
        run = ["# Deploy to Cloudflare Workers"]
    else:
        run = [pms.js_run_command(pm, production_start_script(pkg))]

    return Plan(
        build=_install_and_build(pm),
        run=run,
        healthcheck=healthcheck("/"),
        env_schema=["NODE_ENV", "SESSION_SECRET"],
        meta={"package_manager": pm, "build_output": "build/", "adapter": adapter.type},
    )


def plan_nuxt(probe: ProjectProbe) -> Plan:
    pm = pms.detect_js(probe)
    return Plan(
        build=_install_and_build(pm),
        run=["node .output/server/index.mjs"],
        healthcheck=healthcheck("/"),
        env_schema=["NUXT_PUBLIC_*", "NITRO_*"],
        meta={"package_manager": pm, "build_output": ".output/"},
    )


def plan_astro(probe: ProjectProbe) -> Plan:
    pm = pms.detect_js(probe)
    pkg = parse_package_json(probe)
    adapter = detect_adapter(pkg, "astro")
    env = ["PUBLIC_*, any server-only envs for SSR"]
    meta = {"package_manager": pm, "adapter": adapter.type, "run_mode": adapter.run_mode}

    if adapter.is_static:
        return static_plan(_install_and_build(pm), "dist/", env, meta)

    if adapter.type == "node":
        run = ["node dist/server/entry.mjs"]
    elif adapter.type in ("vercel", "netlify", "cloudflare"):
        run = [f"# Deploy to {adapter.type}"]
    else:
        run = [pms.js_run_command(pm, production_start_script(pkg))]

    meta["build_output"] = "dist/"
    return Plan(build=_install_and_build(pm), run=run, healthcheck=healthcheck("/"), env_schema=env, meta=meta)


def plan_gatsby(probe: ProjectProbe) -> Plan:
    pm = pms.detect_js(probe)
    return Plan(
        build=_install_and_build(pm),
        run=[pms.js_run_command(pm, "serve")],
        healthcheck=healthcheck("/"),
        env_schema=["GATSBY_*, any build-time envs"],
        meta={"package_manager": pm, "build_output": "public/"},
    )


def plan_svelte(probe: ProjectProbe) -> Plan:
    pm = pms.detect_js(probe)
    pkg = parse_package_json(probe)
    adapter = detect_adapter(pkg, "sveltekit")
    env = ["PUBLIC_*, any server-only envs for SvelteKit SSR"]
    meta = {"package_manager": pm, "adapter": adapter.type, "run_mode": adapter.run_mode}

    if adapter.is_static:
        return static_plan(_install_and_build(pm), "build/", env, meta)

    if adapter.type == "node":
        run = ["node build"]
    elif adapter.type in ("vercel", "netlify", "cloudflare"):
        run = [f"# Deploy to {adapter.type}"]
    else:
        run = [pms.js_run_command(pm, production_start_script(pkg))]

    meta["build_output"] = "build/"
    return Plan(build=_install_and_build(pm), run=run, healthcheck=healthcheck("/"), env_schema=env, meta=meta)


def plan_vue(probe: ProjectProbe) -> Plan:
    pm = pms.detect_js(probe)
    pkg = parse_package_json(probe)
    meta = {"package_manager": pm, "build_output": "dist/"}

    major = _major_version(pkg.all_dependencies.get("vue", ""))
    if major in ("2", "3"):
        meta["vue_version"] = major

    return Plan(
        build=_install_and_build(pm),
        run=[pms.js_run_command(pm, production_start_script(pkg))],
        healthcheck=healthcheck("/"),
        env_schema=["VUE_APP_*, VITE_* for Vite-based setups"],
        meta=meta,
    )


def plan_angular(probe: ProjectProbe) -> Plan:
    pm = pms.detect_js(probe)
    return Plan(
        build=_install_and_build(pm),
        run=[pms.js_start_command(pm)],
        healthcheck=healthcheck("/"),
        env_schema=["NG_APP_*, any environment-specific configs"],
        meta={"package_manager": pm, "build_output": "dist/"},
    )


def plan_nestjs(probe: ProjectProbe) -> Plan:
    pm = pms.detect_js(probe)
    return Plan(
        build=_install_and_build(pm),
        run=["node dist/main", pms.js_run_command(pm, "start:prod")],
        healthcheck=healthcheck("/health"),
        env_schema=["NODE_ENV", "PORT", "DATABASE_URL"],
        meta={"package_manager": pm, "build_output": "dist/"},
    )


def plan_trpc(probe: ProjectProbe) -> Plan:
    pm = pms.detect_js(probe)
    pkg = parse_package_json(probe)

    adapter = "standalone"
    if pkg.has_dependency("@trpc/next") or pkg.has_dependency("next"):
        adapter = "nextjs"
    elif pkg.has_dependency("express"):
        adapter = "express"
    elif pkg.has_dependency("fastify"):
        adapter = "fastify"

    start_script = production_start_script(pkg)
    if adapter != "standalone" or start_script != "start":
        run = [pms.js_run_command(pm, start_script)]
    else:
        run = ["node dist/server.js", "node dist/index.js"]

    return Plan(
        build=_install_and_build(pm),
        run=run,
        healthcheck=healthcheck("/health"),
        env_schema=["NODE_ENV", "PORT", "DATABASE_URL", "API_*"],
        meta={"package_manager": pm, "adapter": adapter, "build_output": "dist/"},
    )


def plan_eleventy(probe: ProjectProbe) -> Plan:
    pm = pms.detect_js(probe)
    return static_plan(
        [pms.js_install_command(pm), pms.js_run_command(pm, "build")],
        "_site/",
        ["ELEVENTY_ENV"],
        {"package_manager": pm, "static": "true"},
    )


def plan_docusaurus(probe: ProjectProbe) -> Plan:
    pm = pms.detect_js(probe)
    return Plan(
        build=_install_and_build(pm),
        run=[pms.js_run_command(pm, "serve")],
        healthcheck=healthcheck("/"),
        env_schema=[],
        meta={"package_manager": pm, "build_output": "build/"},
    )


def plan_fastify(probe: ProjectProbe) -> Plan:
    return _node_server_plan(probe)


def plan_express(probe: ProjectProbe) -> Plan:
    return _node_server_plan(probe)


def _node_server_plan(probe: ProjectProbe) -> Plan:
    """Plain HTTP servers: install, then `start`; Deno projects run directly."""
    if pms.detect_deno_runtime(probe):
        return Plan(
            build=[f"deno cache {DENO_ENTRYPOINT}"],
            run=[f"deno run --allow-net --allow-read --allow-env {DENO_ENTRYPOINT}"],
            healthcheck=healthcheck("/health"),
            env_schema=["PORT", "DATABASE_URL"],
            meta={"runtime": "deno"},
        )

    pm = pms.detect_js(probe)
    return Plan(
        build=[pms.js_install_command(pm)],
        run=[pms.js_start_command(pm)],
        healthcheck=healthcheck("/health"),
        env_schema=["NODE_ENV", "PORT", "DATABASE_URL"],
        meta={"package_manager": pm},
    )


def _major_version(version_range: str) -> str:
    """Major version of a semver range such as "^3.4.0" or "~2.6"."""
    match = _MAJOR.search(version_range)
    return match.group(0) if match else ""
