"""Signal weights and the evidence accumulator detectors score with.

Weights only matter relative to each other: a framework-specific config
file outranks a dependency mention, which outranks directory layout.
"""

from dataclasses import dataclass, field

from stackplan.detector.types import Candidate, Framework

# Framework-specific config file (next.config.js, manage.py, artisan)
CONFIG_FILE = 3.0
# Framework named in a dependency manifest ("next" in package.json)
DEPENDENCY = 2.5
# Lockfile or secondary manifest evidence
LOCKFILE = 2.0
# Framework CLI or build tool (bin/console, next.config)
BUILD_TOOL = 2.5
# Conventional directory layout (pages/, app/routes/)
STRUCTURE = 1.0
# Framework-specific file extension (.vue)
FILE_PATTERN = 2.0
# Framework command inside package.json scripts ("next build")
SCRIPT_PATTERN = 1.0
# Weak corroborating hint
MINOR_INDICATOR = 0.5
# A compose file describes the whole deployment, so it outranks frameworks
DOCKER_COMPOSE = 5.0


@dataclass
class Evidence:
    """Additive score for one framework, plus the signals that built it."""

    framework: Framework
    language: str
    score: float = 0.0
    signals: list[str] = field(default_factory=list)

    def add(self, matched: bool, weight: float, signal: str) -> bool:
        if matched:
            self.score += weight
            self.signals.append(signal)
        return matched

    def first(self, checks: list[tuple[bool, float, str]]) -> bool:
        """Score only the first matching check, in priority order."""
        for matched, weight, signal in checks:
            if matched:
                return self.add(True, weight, signal)
        return False

    def to_candidate(self) -> Candidate:
        return Candidate(
            framework=self.framework,
            score=self.score,
            language=self.language,
            signals=list(self.signals),
        )
