"""Java detection and plan synthesis for Spring Boot (Maven or Gradle)."""

from stackplan.detector import scoring
from stackplan.detector.defaults import healthcheck
from stackplan.detector.probe import ProjectProbe, TreeScan, mentions, mentions_any
from stackplan.detector.scoring import Evidence
from stackplan.detector.types import Candidate, Framework, Plan

JAVA = "Java"


def detect_java(probe: ProjectProbe, scan: TreeScan) -> list[Candidate]:
    ev = detect_spring_boot(probe)
    return [ev.to_candidate()] if ev.score > 0 else []


def detect_spring_boot(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.SPRING_BOOT, JAVA)
    ev.add(mentions(probe, "pom.xml", "spring-boot"), scoring.CONFIG_FILE, "pom.xml has spring-boot")
    ev.add(
        mentions_any(probe, ["build.gradle", "build.gradle.kts"], "spring-boot"),
        scoring.CONFIG_FILE,
        "gradle has spring-boot",
    )
    ev.add(probe.dir_exists("src/main/java"), scoring.STRUCTURE, "Maven/Gradle Java structure")
    return ev


def plan_spring_boot(probe: ProjectProbe) -> Plan:
    """Maven when a pom.xml is present, Gradle otherwise."""
    if probe.has("pom.xml"):
        build = ["./mvnw clean package -DskipTests"]
        run = ["java -jar target/*.jar"]
        meta = {"build_tool": "maven", "build_output": "target/"}
    else:
        build = ["./gradlew build -x test"]
        run = ["java -jar build/libs/*.jar"]
        meta = {"build_tool": "gradle", "build_output": "build/"}

    return Plan(
        build=build,
        run=run,
        healthcheck=healthcheck("/actuator/health"),
        env_schema=["SPRING_PROFILES_ACTIVE", "DATABASE_URL", "SERVER_PORT"],
        meta=meta,
    )
