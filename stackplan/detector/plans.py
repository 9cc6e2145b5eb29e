"""Framework → plan synthesizer dispatch.

The winning candidate only names its framework; the plan is produced here
so detectors stay pure scoring functions.
"""

from typing import Callable

from stackplan.detector.docker import plan_docker, plan_docker_compose
from stackplan.detector.dotnet import plan_aspnet
from stackplan.detector.elixir import plan_phoenix
from stackplan.detector.go import plans as go
from stackplan.detector.javascript import plans as js
from stackplan.detector.jvm import plan_spring_boot
from stackplan.detector.php import plan_laravel, plan_symfony
from stackplan.detector.probe import ProjectProbe
from stackplan.detector.python import plans as py
from stackplan.detector.ruby import plans as ruby
from stackplan.detector.rust import plans as rust
from stackplan.detector.types import Framework, Plan

PlanSynthesizer = Callable[[ProjectProbe], Plan]

PLAN_SYNTHESIZERS: dict[Framework, PlanSynthesizer] = {
    Framework.NEXTJS: js.plan_nextjs,
    Framework.REMIX: js.plan_remix,
    Framework.NUXT: js.plan_nuxt,
    Framework.ASTRO: js.plan_astro,
    Framework.GATSBY: js.plan_gatsby,
    Framework.SVELTE: js.plan_svelte,
    Framework.VUE: js.plan_vue,
    Framework.ANGULAR: js.plan_angular,
    Framework.NESTJS: js.plan_nestjs,
    Framework.TRPC: js.plan_trpc,
    Framework.ELEVENTY: js.plan_eleventy,
    Framework.DOCUSAURUS: js.plan_docusaurus,
    Framework.FASTIFY: js.plan_fastify,
    Framework.EXPRESS: js.plan_express,
    Framework.DJANGO: py.plan_django,
    Framework.FLASK: py.plan_flask,
    Framework.FASTAPI: py.plan_fastapi,
    Framework.GIN: go.plan_gin,
    Framework.ECHO: go.plan_echo,
    Framework.FIBER: go.plan_fiber,
    Framework.HUGO: go.plan_hugo,
    Framework.GO: go.plan_go,
    Framework.ACTIX: rust.plan_actix,
    Framework.AXUM: rust.plan_axum,
    Framework.LARAVEL: plan_laravel,
    Framework.SYMFONY: plan_symfony,
    Framework.RAILS: ruby.plan_rails,
    Framework.JEKYLL: ruby.plan_jekyll,
    Framework.SPRING_BOOT: plan_spring_boot,
    Framework.ASPNET: plan_aspnet,
    Framework.PHOENIX: plan_phoenix,
    Framework.DOCKER_COMPOSE: plan_docker_compose,
    Framework.GENERIC_DOCKER: plan_docker,
}


def synthesize(framework: Framework, probe: ProjectProbe) -> Plan:
    """Return the build/run plan for a recognised framework.

    Raises:
        KeyError: If no synthesizer is registered for the framework.
    """
    try:
        synthesizer = PLAN_SYNTHESIZERS[framework]
    except KeyError:
        valid = ", ".join(sorted(f.value for f in PLAN_SYNTHESIZERS))
        raise KeyError(f"No plan synthesizer for '{framework}'. Known frameworks: {valid}") from None
    return synthesizer(probe)
