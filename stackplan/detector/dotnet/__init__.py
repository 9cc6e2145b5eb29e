"""C# detection and plan synthesis for ASP.NET Core."""

from stackplan.detector import scoring
from stackplan.detector.defaults import healthcheck
from stackplan.detector.probe import ProjectProbe, TreeScan, contains_ext, has_any
from stackplan.detector.scoring import Evidence
from stackplan.detector.types import Candidate, Framework, Plan

CSHARP = "C#"


def detect_csharp(probe: ProjectProbe, scan: TreeScan) -> list[Candidate]:
    ev = detect_aspnet(probe, scan)
    return [ev.to_candidate()] if ev.score > 0 else []


def detect_aspnet(probe: ProjectProbe, scan: TreeScan) -> Evidence:
    ev = Evidence(Framework.ASPNET, CSHARP)
    ev.add(contains_ext(scan.files, ".csproj"), scoring.DEPENDENCY, ".csproj file")
    ev.add(has_any(probe, "Program.cs", "Startup.cs"), scoring.LOCKFILE, "ASP.NET Core entry point")
    ev.add(probe.has("appsettings.json"), scoring.STRUCTURE, "appsettings.json")
    return ev


def plan_aspnet(probe: ProjectProbe) -> Plan:
    return Plan(
        build=["dotnet restore", "dotnet publish -c Release -o out"],
        run=["dotnet $(ls out/*.dll | head -n 1)"],
        healthcheck=healthcheck("/health"),
        env_schema=["ASPNETCORE_ENVIRONMENT", "ConnectionStrings__DefaultConnection"],
        meta={"build_output": "out/"},
    )
