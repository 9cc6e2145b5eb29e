"""Rust web framework detectors: Actix-web and Axum.

Cargo.toml and .rs sources only say "this is Rust". A framework is offered
only when its crate is declared in Cargo.toml.
"""

from stackplan.detector import scoring
from stackplan.detector.probe import ProjectProbe, TreeScan, contains_ext, mentions
from stackplan.detector.scoring import Evidence
from stackplan.detector.types import Candidate, Framework

RUST = "Rust"

ACTIX_DEPENDENCY = "actix-web in Cargo.toml"
AXUM_DEPENDENCY = "axum and tokio in Cargo.toml"


def detect_rust(probe: ProjectProbe, scan: TreeScan, threshold: float = 4.0) -> list[Candidate]:
    detectors = [
        (detect_actix(probe, scan), ACTIX_DEPENDENCY),
        (detect_axum(probe, scan), AXUM_DEPENDENCY),
    ]
    return [
        ev.to_candidate()
        for ev, dependency in detectors
        if dependency in ev.signals and ev.score >= threshold
    ]


def detect_actix(probe: ProjectProbe, scan: TreeScan) -> Evidence:
    ev = Evidence(Framework.ACTIX, RUST)
    ev.add(probe.has("Cargo.toml"), scoring.DEPENDENCY, "Cargo.toml")
    ev.add(mentions(probe, "Cargo.toml", "actix-web"), scoring.DEPENDENCY, ACTIX_DEPENDENCY)
    ev.add(contains_ext(scan.files, ".rs"), scoring.LOCKFILE, ".rs files")
    return ev


def detect_axum(probe: ProjectProbe, scan: TreeScan) -> Evidence:
    ev = Evidence(Framework.AXUM, RUST)
    ev.add(probe.has("Cargo.toml"), scoring.DEPENDENCY, "Cargo.toml")
    ev.add(contains_ext(scan.files, ".rs"), scoring.LOCKFILE, ".rs files")
    ev.add(
        mentions(probe, "Cargo.toml", "axum") and mentions(probe, "Cargo.toml", "tokio"),
        scoring.DEPENDENCY,
        AXUM_DEPENDENCY,
    )
    return ev
