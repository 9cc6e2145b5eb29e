"""Plan synthesizers for Go services and the Hugo static site generator."""

from stackplan.detector.defaults import healthcheck, static_plan
from stackplan.detector.probe import ProjectProbe
from stackplan.detector.types import Plan

GO_BUILD = "go build -o app ."


def plan_gin(probe: ProjectProbe) -> Plan:
    return Plan(
        build=[GO_BUILD],
        run=["./app"],
        healthcheck=healthcheck("/ping"),
        env_schema=["GIN_MODE", "PORT"],
        meta={"framework": "gin"},
    )


def plan_echo(probe: ProjectProbe) -> Plan:
    return _go_service("echo")


def plan_fiber(probe: ProjectProbe) -> Plan:
    return _go_service("fiber")


def plan_go(probe: ProjectProbe) -> Plan:
    return Plan(
        build=[GO_BUILD],
        run=["./app -port 8080"],
        healthcheck=healthcheck("/healthz"),
        env_schema=["PORT", "any app-specific envs"],
    )


def plan_hugo(probe: ProjectProbe) -> Plan:
    return static_plan(["hugo --minify"], "public/", ["HUGO_ENV"], {"static": "true"})


def _go_service(framework: str) -> Plan:
    return Plan(
        build=[GO_BUILD],
        run=["./app"],
        healthcheck=healthcheck("/health"),
        env_schema=["PORT", "DATABASE_URL"],
        meta={"framework": framework},
    )
