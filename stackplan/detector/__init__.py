"""Detector module: framework classification and build-plan synthesis.

Public API:
    detect(project) -> Detection
    detect_json(project) -> str
"""

from stackplan.detector.orchestrator import detect, detect_json
from stackplan.detector.probe import DirectoryProbe, MemoryProbe, ProjectProbe
from stackplan.detector.types import Candidate, Detection, Framework, Healthcheck, Plan

__all__ = [
    "detect",
    "detect_json",
    "Candidate",
    "Detection",
    "DirectoryProbe",
    "Framework",
    "Healthcheck",
    "MemoryProbe",
    "Plan",
    "ProjectProbe",
]
