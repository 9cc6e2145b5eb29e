"""Elixir detection and plan synthesis for Phoenix."""

from stackplan.detector import scoring
from stackplan.detector.defaults import healthcheck
from stackplan.detector.probe import ProjectProbe, TreeScan, mentions
from stackplan.detector.scoring import Evidence
from stackplan.detector.types import Candidate, Framework, Plan

ELIXIR = "Elixir"


def detect_elixir(probe: ProjectProbe, scan: TreeScan) -> list[Candidate]:
    ev = detect_phoenix(probe)
    return [ev.to_candidate()] if ev.score > 0 else []


def detect_phoenix(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.PHOENIX, ELIXIR)
    ev.add(probe.has("mix.exs"), scoring.DEPENDENCY, "mix.exs")
    ev.add(mentions(probe, "mix.exs", "phoenix"), scoring.LOCKFILE, "Phoenix in mix.exs")
    ev.add(
        probe.dir_exists("lib") and probe.dir_exists("priv"),
        scoring.STRUCTURE,
        "Elixir project structure",
    )
    return ev


def plan_phoenix(probe: ProjectProbe) -> Plan:
    return Plan(
        build=["mix deps.get", "mix compile", "mix assets.deploy", "mix phx.digest"],
        run=["mix phx.server"],
        healthcheck=healthcheck("/"),
        env_schema=["DATABASE_URL", "SECRET_KEY_BASE", "PHX_HOST"],
    )
