"""Plan synthesizers for Rust web services built with cargo."""

from stackplan.detector.defaults import healthcheck
from stackplan.detector.probe import ProjectProbe
from stackplan.detector.types import Plan

CARGO_BUILD = "cargo build --release"

# Binary name is the package name declared first in Cargo.toml
RELEASE_BINARY = "./target/release/$(grep '^name' Cargo.toml | head -1 | cut -d'\"' -f2 | tr -d ' ')"


def plan_actix(probe: ProjectProbe) -> Plan:
    return _cargo_plan(["RUST_LOG", "PORT"])


def plan_axum(probe: ProjectProbe) -> Plan:
    return _cargo_plan(["RUST_LOG", "PORT", "DATABASE_URL"])


def _cargo_plan(env_schema: list[str]) -> Plan:
    return Plan(
        build=[CARGO_BUILD],
        run=[RELEASE_BINARY],
        healthcheck=healthcheck("/health"),
        env_schema=env_schema,
        meta={"build_output": "target/release/"},
    )
