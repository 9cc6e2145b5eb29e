"""Detector orchestrator: runs every language detector and picks a winner.

Detection flow:
1. Scan the project tree once (file list + extension counts).
2. Run every language detector; each returns zero or more Candidates.
3. Pick the highest score. On an exact tie a real framework displaces
   Generic Docker; any other tie keeps the earlier candidate.
4. Synthesize the winner's plan and enrich its meta with the runtime
   version, monorepo tool and application port.

No candidate at all is not an error: the result is an "Unknown" detection
with placeholder commands for the user to fill in.
"""

import logging
from functools import partial
from pathlib import Path
from typing import Callable, Optional

from stackplan.core.config import Settings, get_settings
from stackplan.detector.docker import detect_docker
from stackplan.detector.dotnet import detect_csharp
from stackplan.detector.elixir import detect_elixir
from stackplan.detector.go import detect_go
from stackplan.detector.javascript import JS_TS, detect_javascript
from stackplan.detector.jvm import detect_java
from stackplan.detector.package_json import detect_monorepo_tool
from stackplan.detector.php import detect_php
from stackplan.detector.plans import synthesize
from stackplan.detector.ports import resolve_port
from stackplan.detector.probe import DirectoryProbe, ProjectProbe, TreeScan
from stackplan.detector.python import detect_python
from stackplan.detector.ruby import detect_ruby
from stackplan.detector.rust import detect_rust
from stackplan.detector.types import (
    UNKNOWN_FRAMEWORK,
    Candidate,
    Detection,
    Framework,
    Healthcheck,
)

logger = logging.getLogger(__name__)

UNKNOWN_LANGUAGE = "Unknown"
FALLBACK_NOTE = "Fell back to generic. Provide custom commands."

EXTENSION_LANGUAGES: dict[str, str] = {
    ".py": "Python",
    ".js": JS_TS,
    ".jsx": JS_TS,
    ".ts": JS_TS,
    ".tsx": JS_TS,
    ".vue": JS_TS,
    ".svelte": JS_TS,
    ".php": "PHP",
    ".rb": "Ruby",
    ".go": "Go",
    ".rs": "Rust",
    ".java": "Java",
    ".cs": "C#",
    ".ex": "Elixir",
    ".exs": "Elixir",
}

# Version files checked per language, first existing file wins
RUNTIME_VERSION_FILES: dict[str, list[str]] = {
    JS_TS: [".nvmrc", ".node-version"],
    "TypeScript": [".nvmrc", ".node-version"],
    "Python": [".python-version", "runtime.txt"],
    "Ruby": [".ruby-version"],
    "Go": [".go-version"],
}

Detector = Callable[[ProjectProbe, TreeScan], list[Candidate]]


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def detect(project: Path | str | ProjectProbe, settings: Optional[Settings] = None) -> Detection:
    """Classify a project and synthesize its build/run plan.

    Args:
        project: A directory path, or any ProjectProbe (e.g. a MemoryProbe).
        settings: Scoring thresholds and ceiling; defaults to get_settings().

    Returns:
        A Detection. Never raises for an unrecognised project.
    """
    settings = settings or get_settings()
    probe = project if isinstance(project, ProjectProbe) else DirectoryProbe(project)
    scan = probe.scan()
    language = dominant_language(scan.ext_counts)

    candidates = collect_candidates(probe, scan, settings, language)
    if not candidates:
        detection = _fallback(probe, language)
    else:
        detection = _from_candidate(probe, pick_best(candidates), settings)

    _log_result(detection)
    return detection


def detect_json(project: Path | str | ProjectProbe, settings: Optional[Settings] = None) -> str:
    return detect(project, settings).to_json()


def collect_candidates(
    probe: ProjectProbe,
    scan: TreeScan,
    settings: Settings,
    language: str,
) -> list[Candidate]:
    """Run every language detector in a fixed order."""
    candidates: list[Candidate] = []
    for detector in _detectors(settings, language):
        candidates.extend(detector(probe, scan))
    logger.debug(
        "Candidates: %s",
        ", ".join(f"{c.name}={c.score:.1f}" for c in candidates) or "none",
    )
    return candidates


def pick_best(candidates: list[Candidate]) -> Candidate:
    """Highest score wins; on a tie a framework displaces Generic Docker.

    Raises:
        ValueError: If candidates is empty.
    """
    if not candidates:
        raise ValueError("pick_best() requires at least one candidate")

    best = candidates[0]
    for candidate in candidates[1:]:
        if candidate.score > best.score:
            best = candidate
        elif (
            candidate.score == best.score
            and best.framework == Framework.GENERIC_DOCKER
            and candidate.framework != Framework.GENERIC_DOCKER
        ):
            best = candidate
    return best


def confidence(score: float, ceiling: float) -> float:
    return max(0.0, min(1.0, score / ceiling))


def dominant_language(ext_counts: dict[str, int]) -> str:
    """Language with the most files; ties go to the alphabetically first."""
    totals: dict[str, int] = {}
    for ext, count in ext_counts.items():
        language = EXTENSION_LANGUAGES.get(ext.lower(), "Other")
        totals[language] = totals.get(language, 0) + count

    if not totals:
        return UNKNOWN_LANGUAGE
    return min(totals, key=lambda lang: (-totals[lang], lang))


def detect_runtime_version(probe: ProjectProbe, language: str) -> str:
    for path in RUNTIME_VERSION_FILES.get(language, []):
        if not probe.has(path):
            continue
        version = probe.read(path).strip()
        if path == "runtime.txt":
            version = version.removeprefix("python-")
        return version
    return ""


def monorepo_meta(probe: ProjectProbe) -> dict[str, str]:
    tool = detect_monorepo_tool(probe)
    if not tool:
        return {}
    return {"monorepo_tool": tool, "monorepo": "true"}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _detectors(settings: Settings, language: str) -> list[Detector]:
    return [
        detect_javascript,
        detect_python,
        partial(
            detect_go,
            threshold=settings.compiled_framework_threshold,
            hugo_threshold=settings.hugo_threshold,
        ),
        partial(detect_rust, threshold=settings.compiled_framework_threshold),
        detect_php,
        detect_ruby,
        detect_java,
        detect_csharp,
        detect_elixir,
        partial(detect_docker, dominant_language=language),
    ]


def _from_candidate(probe: ProjectProbe, best: Candidate, settings: Settings) -> Detection:
    plan = synthesize(best.framework, probe)

    meta = dict(plan.meta)
    runtime_version = detect_runtime_version(probe, best.language)
    if runtime_version:
        meta["runtime_version"] = runtime_version
    meta.update(monorepo_meta(probe))
    meta["port"] = resolve_port(probe, best.framework)

    return Detection(
        framework=best.name,
        language=best.language,
        confidence=confidence(best.score, settings.confidence_ceiling),
        signals=list(best.signals),
        build_plan=list(plan.build),
        run_plan=list(plan.run),
        healthcheck=plan.healthcheck,
        env_schema=list(plan.env_schema),
        meta=meta,
    )


def _fallback(probe: ProjectProbe, language: str) -> Detection:
    logger.info("No framework signals found; falling back to generic detection")
    meta = {"note": FALLBACK_NOTE}
    runtime_version = detect_runtime_version(probe, language)
    if runtime_version:
        meta["runtime_version"] = runtime_version
    meta.update(monorepo_meta(probe))

    return Detection(
        framework=UNKNOWN_FRAMEWORK,
        language=language,
        confidence=0.0,
        signals=["no strong framework signals"],
        build_plan=["# Please provide build steps"],
        run_plan=["# Please provide run command"],
        healthcheck=Healthcheck(path="/"),
        env_schema=[],
        meta=meta,
    )


def _log_result(detection: Detection) -> None:
    logger.info(
        "Detection complete: framework=%s language=%s confidence=%.2f",
        detection.framework,
        detection.language,
        detection.confidence,
    )
