"""JavaScript / TypeScript framework detectors.

Entry point: detect_javascript(probe, scan) -> list[Candidate]

Dependency checks look for the quoted package name inside package.json
(case-insensitive), so `"next"` does not match `"next-auth"`.
"""

from stackplan.detector import scoring
from stackplan.detector.probe import (
    ProjectProbe,
    TreeScan,
    any_dir,
    contains_ext,
    has_any,
    mentions,
)
from stackplan.detector.scoring import Evidence
from stackplan.detector.types import Candidate, Framework

JS_TS = "JavaScript/TypeScript"
TS = "TypeScript"

TRPC_ROUTER_FILES = ("server/trpc.ts", "src/server/trpc.ts", "server/router.ts", "src/server/router.ts")


def detect_javascript(probe: ProjectProbe, scan: TreeScan) -> list[Candidate]:
    detectors = [
        detect_nextjs(probe),
        detect_remix(probe),
        detect_nuxt(probe),
        detect_astro(probe),
        detect_gatsby(probe),
        detect_svelte(probe),
        detect_vue(probe, scan),
        detect_angular(probe),
        detect_nestjs(probe),
        detect_trpc(probe),
        detect_eleventy(probe),
        detect_docusaurus(probe),
        detect_fastify(probe),
        detect_express(probe),
    ]
    return [ev.to_candidate() for ev in detectors if ev.score > 0]


def _pkg(probe: ProjectProbe, needle: str) -> bool:
    return mentions(probe, "package.json", needle)


def detect_nextjs(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.NEXTJS, JS_TS)
    ev.add(has_any(probe, "next.config.js", "next.config.ts"), scoring.BUILD_TOOL, "next.config")
    ev.add(_pkg(probe, '"next"'), scoring.DEPENDENCY, "package.json has next")
    ev.add(_pkg(probe, '"next build"'), scoring.SCRIPT_PATTERN, "package.json scripts for next")
    ev.add(any_dir(probe, "pages", "app"), scoring.MINOR_INDICATOR, "pages/ or app/ folder")
    return ev


def detect_remix(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.REMIX, JS_TS)
    ev.add(has_any(probe, "remix.config.js", "remix.config.ts"), scoring.CONFIG_FILE, "remix.config")
    ev.add(_pkg(probe, '"@remix-run/react"'), scoring.DEPENDENCY, "package.json has @remix-run/react")
    ev.add(probe.dir_exists("app/routes"), scoring.STRUCTURE, "app/routes/ directory")
    return ev


def detect_nuxt(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.NUXT, JS_TS)
    ev.add(has_any(probe, "nuxt.config.js", "nuxt.config.ts"), scoring.CONFIG_FILE, "nuxt.config")
    ev.add(_pkg(probe, '"nuxt"'), scoring.DEPENDENCY, "package.json has nuxt")
    ev.add(
        probe.dir_exists("pages") or probe.has("app.vue"),
        scoring.STRUCTURE,
        "pages/ directory or app.vue",
    )
    return ev


def detect_astro(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.ASTRO, JS_TS)
    ev.add(
        has_any(probe, "astro.config.mjs", "astro.config.js", "astro.config.ts"),
        scoring.CONFIG_FILE,
        "astro.config",
    )
    ev.add(_pkg(probe, '"astro"'), scoring.DEPENDENCY, "package.json has astro")
    ev.add(_pkg(probe, '"astro build"'), scoring.SCRIPT_PATTERN, "package.json scripts for astro")
    ev.add(
        probe.dir_exists("src") and probe.dir_exists("public"),
        scoring.MINOR_INDICATOR,
        "src/ and public/ folders",
    )
    return ev


def detect_gatsby(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.GATSBY, JS_TS)
    ev.add(has_any(probe, "gatsby-config.js", "gatsby-config.ts"), scoring.CONFIG_FILE, "gatsby-config")
    ev.add(_pkg(probe, '"gatsby"'), scoring.DEPENDENCY, "package.json has gatsby")
    ev.add(_pkg(probe, '"gatsby build"'), scoring.SCRIPT_PATTERN, "package.json scripts for gatsby")
    ev.add(probe.dir_exists("src/pages"), scoring.STRUCTURE, "src/pages/ folder")
    return ev


def detect_svelte(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.SVELTE, JS_TS)
    ev.add(has_any(probe, "svelte.config.js", "svelte.config.ts"), scoring.CONFIG_FILE, "svelte.config")
    ev.first([
        (_pkg(probe, '"@sveltejs/kit"'), scoring.CONFIG_FILE, "package.json has @sveltejs/kit"),
        (_pkg(probe, '"svelte"'), scoring.DEPENDENCY, "package.json has svelte"),
    ])
    ev.add(probe.dir_exists("src/routes"), scoring.STRUCTURE, "src/routes/ folder (SvelteKit)")
    return ev


def detect_vue(probe: ProjectProbe, scan: TreeScan) -> Evidence:
    ev = Evidence(Framework.VUE, JS_TS)
    ev.add(
        has_any(probe, "vue.config.js", "vite.config.js", "vite.config.ts"),
        scoring.LOCKFILE,
        "vue/vite config",
    )
    ev.first([
        (_pkg(probe, '"@vue/cli"'), scoring.CONFIG_FILE, "Vue CLI"),
        (_pkg(probe, '"nuxt"'), scoring.CONFIG_FILE, "Nuxt"),
        (_pkg(probe, '"vue"'), scoring.DEPENDENCY, "package.json has vue"),
    ])
    ev.add(contains_ext(scan.files, ".vue"), scoring.FILE_PATTERN, ".vue files")
    return ev


def detect_angular(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.ANGULAR, TS)
    ev.add(probe.has("angular.json"), scoring.CONFIG_FILE, "angular.json")
    ev.add(_pkg(probe, '"@angular/core"'), scoring.CONFIG_FILE, "package.json has @angular/core")
    ev.add(
        probe.has("tsconfig.json") and (probe.dir_exists("src/app") or probe.has("src/main.ts")),
        scoring.STRUCTURE,
        "TypeScript config with Angular structure",
    )
    return ev


def detect_nestjs(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.NESTJS, TS)
    ev.add(probe.has("nest-cli.json"), scoring.CONFIG_FILE, "nest-cli.json")
    ev.add(_pkg(probe, '"@nestjs/core"'), scoring.CONFIG_FILE, "package.json has @nestjs/core")
    ev.add(
        probe.has("src/main.ts") and probe.has("src/app.module.ts"),
        scoring.STRUCTURE,
        "NestJS app structure",
    )
    return ev


def detect_trpc(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.TRPC, TS)
    ev.add(_pkg(probe, '"@trpc/server"'), scoring.CONFIG_FILE, "package.json has @trpc/server")
    ev.add(_pkg(probe, '"@trpc/client"'), scoring.LOCKFILE, "package.json has @trpc/client")
    ev.add(_pkg(probe, '"zod"'), scoring.STRUCTURE, "zod validation")
    ev.add(
        _pkg(probe, '"@trpc/server/adapters/standalone"'),
        scoring.MINOR_INDICATOR,
        "standalone adapter",
    )
    ev.add(has_any(probe, "server/routers", "src/server/routers"), scoring.BUILD_TOOL, "tRPC router directory")
    ev.add(has_any(probe, *TRPC_ROUTER_FILES), scoring.BUILD_TOOL, "tRPC router files")
    ev.add(probe.has("tsconfig.json"), scoring.MINOR_INDICATOR, "TypeScript config")
    return ev


def detect_eleventy(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.ELEVENTY, JS_TS)
    ev.add(has_any(probe, ".eleventy.js", "eleventy.config.js"), scoring.CONFIG_FILE, "eleventy config")
    ev.add(_pkg(probe, '"@11ty/eleventy"'), scoring.DEPENDENCY, "package.json has @11ty/eleventy")
    return ev


def detect_docusaurus(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.DOCUSAURUS, JS_TS)
    ev.add(
        has_any(probe, "docusaurus.config.js", "docusaurus.config.ts"),
        scoring.CONFIG_FILE,
        "docusaurus config",
    )
    ev.add(_pkg(probe, '"@docusaurus/core"'), scoring.DEPENDENCY, "package.json has @docusaurus/core")
    ev.add(any_dir(probe, "docs", "blog"), scoring.STRUCTURE, "docs/ or blog/ directory")
    return ev


def detect_fastify(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.FASTIFY, JS_TS)
    ev.add(_pkg(probe, '"fastify"'), scoring.DEPENDENCY, "package.json has fastify")
    ev.add(has_any(probe, "server.js", "app.js"), scoring.STRUCTURE, "server.js or app.js")
    return ev


def detect_express(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.EXPRESS, JS_TS)
    ev.add(_pkg(probe, '"express"'), scoring.DEPENDENCY, "package.json has express")
    ev.add(_pkg(probe, '"start"'), scoring.STRUCTURE, "node start script")
    ev.add(has_any(probe, "server.js", "app.js", "index.js"), scoring.LOCKFILE, "Express server file")
    return ev
