"""Container-based projects: Docker Compose and a bare Dockerfile.

A compose file describes the whole deployment and carries the heaviest
single weight. A bare Dockerfile only scores as a lockfile, so any real
framework evidence alongside it wins.
"""

from stackplan.detector import scoring
from stackplan.detector.defaults import healthcheck
from stackplan.detector.probe import ProjectProbe, TreeScan, has_any
from stackplan.detector.scoring import Evidence
from stackplan.detector.types import Candidate, Framework, Plan

CONTAINER = "Container"

COMPOSE_FILES = ("docker-compose.yml", "docker-compose.yaml", "compose.yml", "compose.yaml")


def detect_docker(probe: ProjectProbe, scan: TreeScan, dominant_language: str) -> list[Candidate]:
    detectors = [detect_docker_compose(probe), detect_generic_docker(probe, dominant_language)]
    return [ev.to_candidate() for ev in detectors if ev.score > 0]


def detect_docker_compose(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.DOCKER_COMPOSE, CONTAINER)
    ev.add(has_any(probe, *COMPOSE_FILES), scoring.DOCKER_COMPOSE, "docker-compose file")
    return ev


def detect_generic_docker(probe: ProjectProbe, dominant_language: str) -> Evidence:
    ev = Evidence(Framework.GENERIC_DOCKER, dominant_language)
    ev.add(probe.has("Dockerfile"), scoring.LOCKFILE, "Dockerfile")
    return ev


def plan_docker(probe: ProjectProbe) -> Plan:
    return Plan(
        build=["docker build -t app:latest ."],
        run=["docker run -p 8080:8080 app:latest"],
        healthcheck=healthcheck("/"),
    )


def plan_docker_compose(probe: ProjectProbe) -> Plan:
    return Plan(
        build=["docker compose build"],
        run=["docker compose up -d"],
        healthcheck=healthcheck("/"),
        meta={"deployment_type": "docker-compose"},
    )
