"""Shared types for the detector module.

Every detection call produces a single Detection: the JSON-serializable
record of which framework was recognised, the evidence behind it, and the
build/run/health-check plan synthesized for it.
"""

import json
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Optional

DEFAULT_HEALTHCHECK_STATUS = 200
DEFAULT_HEALTHCHECK_TIMEOUT = 30

UNKNOWN_FRAMEWORK = "Unknown"


class Framework(StrEnum):
    """Every framework a detector can recognise, keyed by display name."""

    NEXTJS = "Next.js"
    REMIX = "Remix"
    NUXT = "Nuxt.js"
    ASTRO = "Astro"
    GATSBY = "Gatsby"
    SVELTE = "Svelte"
    VUE = "Vue.js"
    ANGULAR = "Angular"
    NESTJS = "NestJS"
    TRPC = "tRPC"
    ELEVENTY = "Eleventy"
    DOCUSAURUS = "Docusaurus"
    FASTIFY = "Fastify"
    EXPRESS = "Express.js"
    DJANGO = "Django"
    FLASK = "Flask"
    FASTAPI = "FastAPI"
    GIN = "Gin"
    ECHO = "Echo"
    FIBER = "Fiber"
    HUGO = "Hugo"
    GO = "Go"
    ACTIX = "Actix-web"
    AXUM = "Axum"
    LARAVEL = "Laravel"
    SYMFONY = "Symfony"
    RAILS = "Rails"
    JEKYLL = "Jekyll"
    SPRING_BOOT = "Spring Boot"
    ASPNET = "ASP.NET Core"
    PHOENIX = "Phoenix"
    DOCKER_COMPOSE = "Docker Compose"
    GENERIC_DOCKER = "Generic Docker"


@dataclass(frozen=True)
class Healthcheck:
    """HTTP probe the deploy layer runs once the app has started."""

    path: str = "/"
    expect: int = DEFAULT_HEALTHCHECK_STATUS
    timeout_seconds: int = DEFAULT_HEALTHCHECK_TIMEOUT

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "expect": self.expect,
            "timeout_seconds": self.timeout_seconds,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["Healthcheck"]:
        if not data:
            return None
        return cls(
            path=str(data.get("path", "/")),
            expect=int(data.get("expect", DEFAULT_HEALTHCHECK_STATUS)),
            timeout_seconds=int(data.get("timeout_seconds", DEFAULT_HEALTHCHECK_TIMEOUT)),
        )


@dataclass
class Candidate:
    """One detector's verdict: accumulated score plus the evidence for it.

    The plan is not stored here; it is synthesized from `framework` once
    the candidate has won.
    """

    framework: Framework
    score: float
    language: str
    signals: list[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.framework.value


@dataclass
class Plan:
    """What a plan synthesizer returns for the winning framework."""

    build: list[str]
    run: list[str]
    healthcheck: Optional[Healthcheck] = field(default_factory=Healthcheck)
    env_schema: list[str] = field(default_factory=list)
    meta: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Detection:
    """Complete detection output for a project directory.

    Confidence is the winning score divided by the configured ceiling,
    clamped to [0, 1]. Signals list every piece of evidence that added to
    the score, in the order it was checked.
    """

    framework: str
    language: str
    confidence: float = 0.0
    signals: list[str] = field(default_factory=list)
    build_plan: list[str] = field(default_factory=list)
    run_plan: list[str] = field(default_factory=list)
    healthcheck: Optional[Healthcheck] = None
    env_schema: list[str] = field(default_factory=list)
    meta: dict[str, str] = field(default_factory=dict)

    @property
    def is_unknown(self) -> bool:
        return self.framework == UNKNOWN_FRAMEWORK

    @property
    def is_static(self) -> bool:
        return self.meta.get("deployment_type") == "static"

    def with_commands(
        self,
        build_plan: Optional[list[str]] = None,
        run_plan: Optional[list[str]] = None,
    ) -> "Detection":
        """Return a copy carrying user-edited build and/or run commands."""
        return replace(
            self,
            build_plan=list(build_plan) if build_plan is not None else list(self.build_plan),
            run_plan=list(run_plan) if run_plan is not None else list(self.run_plan),
        )

    def to_dict(self) -> dict:
        data = {
            "framework": self.framework,
            "language": self.language,
            "confidence": round(self.confidence, 4),
            "signals": list(self.signals),
            "build_plan": list(self.build_plan),
            "run_plan": list(self.run_plan),
            "healthcheck": self.healthcheck.to_dict() if self.healthcheck else None,
            "env_schema": list(self.env_schema),
        }
        if self.meta:
            data["meta"] = {key: self.meta[key] for key in sorted(self.meta)}
        return data

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict) -> "Detection":
        return cls(
            framework=str(data.get("framework", UNKNOWN_FRAMEWORK)),
            language=str(data.get("language", "Unknown")),
            confidence=float(data.get("confidence", 0.0)),
            signals=list(data.get("signals") or []),
            build_plan=list(data.get("build_plan") or []),
            run_plan=list(data.get("run_plan") or []),
            healthcheck=Healthcheck.from_dict(data.get("healthcheck")),
            env_schema=list(data.get("env_schema") or []),
            meta={str(k): str(v) for k, v in (data.get("meta") or {}).items()},
        )

    @classmethod
    def from_json(cls, text: str) -> "Detection":
        return cls.from_dict(json.loads(text))
