"""Python framework detectors: Django, Flask, FastAPI."""

from stackplan.detector import scoring
from stackplan.detector.probe import ProjectProbe, TreeScan, any_dir, has_any, mentions_any
from stackplan.detector.scoring import Evidence
from stackplan.detector.types import Candidate, Framework

PYTHON = "Python"


def detect_python(probe: ProjectProbe, scan: TreeScan) -> list[Candidate]:
    detectors = [detect_django(probe), detect_flask(probe), detect_fastapi(probe)]
    return [ev.to_candidate() for ev in detectors if ev.score > 0]


def detect_django(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.DJANGO, PYTHON)
    ev.add(probe.has("manage.py"), scoring.CONFIG_FILE, "manage.py")
    ev.add(
        has_any(probe, "requirements.txt", "Pipfile.lock", "poetry.lock", "pyproject.toml"),
        scoring.LOCKFILE,
        "python deps lockfile",
    )
    ev.add(has_any(probe, "myproject/wsgi.py", "wsgi.py", "asgi.py"), scoring.STRUCTURE, "wsgi/asgi")
    ev.add(
        mentions_any(probe, ["requirements.txt", "pyproject.toml"], "django"),
        scoring.LOCKFILE,
        "mentions django in deps",
    )
    return ev


def detect_flask(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.FLASK, PYTHON)
    ev.add(has_any(probe, "app.py", "wsgi.py", "application.py"), scoring.LOCKFILE, "Flask app file")
    ev.add(
        mentions_any(probe, ["requirements.txt", "Pipfile", "pyproject.toml"], "flask"),
        scoring.DEPENDENCY,
        "Flask in dependencies",
    )
    ev.add(any_dir(probe, "templates"), scoring.MINOR_INDICATOR, "templates/ folder")
    return ev


def detect_fastapi(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.FASTAPI, PYTHON)
    ev.add(
        mentions_any(probe, ["main.py", "app.py"], "fastapi"),
        scoring.CONFIG_FILE,
        "FastAPI import in main/app file",
    )
    ev.add(
        mentions_any(probe, ["requirements.txt", "pyproject.toml"], "fastapi"),
        scoring.DEPENDENCY,
        "FastAPI in dependencies",
    )
    return ev
