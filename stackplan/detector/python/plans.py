"""Plan synthesizers for Python web frameworks."""

from stackplan.detector import package_managers as pms
from stackplan.detector.defaults import healthcheck
from stackplan.detector.probe import ProjectProbe
from stackplan.detector.types import Plan


def plan_django(probe: ProjectProbe) -> Plan:
    pm = pms.detect_python(probe)
    server_type = pms.detect_django_server_type(probe)
    return Plan(
        build=[pms.python_install_command(pm), "python manage.py collectstatic --noinput"],
        run=[pms.django_run_command(server_type)],
        healthcheck=healthcheck("/healthz"),
        env_schema=["DJANGO_SETTINGS_MODULE", "SECRET_KEY", "DATABASE_URL", "ALLOWED_HOSTS"],
        meta={"package_manager": pm, "server_type": server_type},
    )


def plan_flask(probe: ProjectProbe) -> Plan:
    pm = pms.detect_python(probe)
    return Plan(
        build=[pms.python_install_command(pm)],
        run=["gunicorn --bind 0.0.0.0:$PORT --workers 2 app:app"],
        healthcheck=healthcheck("/health"),
        env_schema=["FLASK_ENV", "FLASK_APP", "DATABASE_URL", "SECRET_KEY"],
        meta={"package_manager": pm},
    )


def plan_fastapi(probe: ProjectProbe) -> Plan:
    pm = pms.detect_python(probe)
    return Plan(
        build=[pms.python_install_command(pm)],
        run=["uvicorn main:app --host 0.0.0.0 --port $PORT"],
        healthcheck=healthcheck("/health"),
        env_schema=["DATABASE_URL", "SECRET_KEY", "DEBUG"],
        meta={"package_manager": pm},
    )
