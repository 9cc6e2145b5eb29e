"""Plan synthesizers for Ruby projects."""

from stackplan.detector.defaults import healthcheck, static_plan
from stackplan.detector.probe import ProjectProbe
from stackplan.detector.types import Plan


def plan_rails(probe: ProjectProbe) -> Plan:
    return Plan(
        build=[
            "bundle install --deployment --without development test",
            "bundle exec rails db:migrate",
            "bundle exec rails assets:precompile",
        ],
        run=["bundle exec puma -C config/puma.rb"],
        healthcheck=healthcheck("/up"),
        env_schema=["RAILS_ENV", "DATABASE_URL", "SECRET_KEY_BASE"],
    )


def plan_jekyll(probe: ProjectProbe) -> Plan:
    return static_plan(
        ["bundle install", "bundle exec jekyll build"],
        "_site/",
        ["JEKYLL_ENV"],
        {"static": "true"},
    )
