"""Defaults shared by every plan synthesizer."""

from stackplan.detector.types import Healthcheck, Plan

# Run-plan entry for deployments that are only files behind a web server
STATIC_RUN_TEMPLATE = "# Static site - serve {output} with nginx"


def healthcheck(path: str = "/") -> Healthcheck:
    return Healthcheck(path=path)


def static_plan(
    build: list[str],
    output: str,
    env_schema: list[str],
    meta: dict[str, str],
) -> Plan:
    """Plan for a static-only deployment: no process to start or probe."""
    meta = dict(meta)
    meta["build_output"] = output
    meta["deployment_type"] = "static"
    return Plan(
        build=build,
        run=[STATIC_RUN_TEMPLATE.format(output=output)],
        healthcheck=None,
        env_schema=env_schema,
        meta=meta,
    )
