"""Go detectors: Gin, Echo, Fiber, Hugo and plain Go modules.

A specific framework needs evidence in both go.mod and the sources
(score >= threshold). Generic Go is only offered when none of them,
Hugo included, made the cut.
"""

from stackplan.detector import scoring
from stackplan.detector.probe import (
    ProjectProbe,
    TreeScan,
    contains_ext,
    files_with_ext,
    has_any,
    mentions,
)
from stackplan.detector.scoring import Evidence
from stackplan.detector.types import Candidate, Framework

GO = "Go"

GO_FRAMEWORKS: list[tuple[Framework, str]] = [
    (Framework.GIN, "github.com/gin-gonic/gin"),
    (Framework.ECHO, "github.com/labstack/echo"),
    (Framework.FIBER, "github.com/gofiber/fiber"),
]

HUGO_CONFIG_FILES = ("hugo.toml", "hugo.yaml", "hugo.json")


def detect_go(
    probe: ProjectProbe,
    scan: TreeScan,
    threshold: float = 4.0,
    hugo_threshold: float = 3.0,
) -> list[Candidate]:
    candidates: list[Candidate] = []

    for framework, import_path in GO_FRAMEWORKS:
        ev = detect_go_framework(probe, scan, framework, import_path)
        if ev.score >= threshold:
            candidates.append(ev.to_candidate())

    hugo = detect_hugo(probe)
    if hugo.score >= hugo_threshold:
        candidates.append(hugo.to_candidate())

    if not candidates:
        generic = detect_generic_go(probe, scan)
        if generic.score > 0:
            candidates.append(generic.to_candidate())

    return candidates


def detect_go_framework(
    probe: ProjectProbe, scan: TreeScan, framework: Framework, import_path: str
) -> Evidence:
    ev = Evidence(framework, GO)
    ev.add(mentions(probe, "go.mod", import_path), scoring.LOCKFILE, f"{import_path} in go.mod")
    ev.add(
        any(mentions(probe, path, f'"{import_path}') for path in files_with_ext(scan.files, ".go")),
        scoring.LOCKFILE,
        f"{framework.value} import in .go files",
    )
    return ev


def detect_hugo(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.HUGO, GO)
    if has_any(probe, *HUGO_CONFIG_FILES):
        ev.add(True, scoring.CONFIG_FILE, "hugo config file")
    else:
        # config.toml alone is too generic without a content/ tree beside it
        ev.add(
            has_any(probe, "config.toml", "config.yaml") and probe.dir_exists("content"),
            scoring.CONFIG_FILE,
            "hugo config file",
        )
    ev.add(probe.dir_exists("content"), scoring.LOCKFILE, "content/ directory")
    ev.add(probe.dir_exists("themes"), scoring.STRUCTURE, "themes/ directory")
    return ev


def detect_generic_go(probe: ProjectProbe, scan: TreeScan) -> Evidence:
    ev = Evidence(Framework.GO, GO)
    ev.add(probe.has("go.mod"), scoring.DEPENDENCY, "go.mod")
    ev.add(
        probe.has("main.go") or contains_ext(scan.files, ".go"),
        scoring.LOCKFILE,
        "main.go/.go files",
    )
    return ev
