"""Tests for Python framework detection and plan synthesis."""

from stackplan.detector import detect
from stackplan.detector.probe import MemoryProbe
from stackplan.detector.python import detect_django, detect_fastapi, detect_python


class TestDjango:
    def test_wsgi_project(self):
        probe = MemoryProbe({
            "manage.py": "#!/usr/bin/env python",
            "requirements.txt": "Django==4.2\ngunicorn\n",
        })

        detection = detect(probe)

        assert detection.framework == "Django"
        assert detection.language == "Python"
        assert detect_django(probe).score == 7.0
        assert detection.signals == ["manage.py", "python deps lockfile", "mentions django in deps"]
        assert detection.build_plan == [
            "pip install -r requirements.txt",
            "python manage.py collectstatic --noinput",
        ]
        assert detection.run_plan == [
            "gunicorn <yourproject>.wsgi:application --bind 0.0.0.0:8000 --workers 2"
        ]
        assert detection.healthcheck.path == "/healthz"
        assert detection.meta["server_type"] == "wsgi"
        assert detection.meta["port"] == "8000"

    def test_asgi_project_with_poetry(self):
        probe = MemoryProbe({
            "manage.py": "",
            "pyproject.toml": "[tool.poetry.dependencies]\ndjango = '^5'\nuvicorn = '*'\n",
            "poetry.lock": "",
        })

        detection = detect(probe)

        assert detection.meta["server_type"] == "asgi"
        assert detection.meta["package_manager"] == "poetry"
        assert detection.build_plan[0] == "poetry install"
        assert detection.run_plan == ["uvicorn asgi:application --host 0.0.0.0 --port 8000"]

    def test_runtime_version_from_runtime_txt(self):
        probe = MemoryProbe({
            "manage.py": "",
            "requirements.txt": "django\n",
            "runtime.txt": "python-3.12.1\n",
        })
        assert detect(probe).meta["runtime_version"] == "3.12.1"


class TestFastAPI:
    def test_detected_over_generic_python_deps(self):
        probe = MemoryProbe({
            "main.py": "from fastapi import FastAPI\napp = FastAPI()\n",
            "requirements.txt": "fastapi\nuvicorn\n",
        })

        detection = detect(probe)

        assert detect_fastapi(probe).score == 5.5
        assert detection.framework == "FastAPI"
        assert detection.run_plan == ["uvicorn main:app --host 0.0.0.0 --port $PORT"]
        assert detection.meta["port"] == "8000"

    def test_uv_lockfile(self):
        probe = MemoryProbe({
            "main.py": "import fastapi",
            "pyproject.toml": "dependencies = ['fastapi']",
            "uv.lock": "",
        })
        assert detect(probe).build_plan == ["uv sync"]


class TestFlask:
    def test_app_with_templates(self):
        probe = MemoryProbe({
            "app.py": "from flask import Flask",
            "requirements.txt": "Flask==3.0\n",
            "templates/index.html": "<html/>",
        })

        detection = detect(probe)

        assert detection.framework == "Flask"
        assert detection.confidence == 5.0 / 6.0
        assert detection.run_plan == ["gunicorn --bind 0.0.0.0:$PORT --workers 2 app:app"]
        assert detection.meta["port"] == "5000"


def test_no_python_markers():
    probe = MemoryProbe({"README.md": "# hello"})
    assert detect_python(probe, probe.scan()) == []
