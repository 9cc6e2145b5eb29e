"""PHP framework detectors and plans: Laravel and Symfony."""

from stackplan.detector import scoring
from stackplan.detector.defaults import healthcheck
from stackplan.detector.probe import ProjectProbe, TreeScan, mentions
from stackplan.detector.scoring import Evidence
from stackplan.detector.types import Candidate, Framework, Plan

PHP = "PHP"

COMPOSER_INSTALL = "composer install --no-dev --optimize-autoloader"
PHP_FPM_RUN = "php-fpm (with nginx)"


def detect_php(probe: ProjectProbe, scan: TreeScan) -> list[Candidate]:
    detectors = [detect_laravel(probe), detect_symfony(probe)]
    return [ev.to_candidate() for ev in detectors if ev.score > 0]


def detect_laravel(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.LARAVEL, PHP)
    ev.add(probe.has("artisan"), scoring.CONFIG_FILE, "artisan")
    ev.add(probe.has("composer.lock"), scoring.LOCKFILE, "composer.lock")
    ev.add(probe.has("config/app.php"), scoring.MINOR_INDICATOR, "config/app.php")
    return ev


def detect_symfony(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.SYMFONY, PHP)
    ev.add(probe.has("symfony.lock"), scoring.CONFIG_FILE, "symfony.lock")
    ev.add(probe.has("bin/console"), scoring.BUILD_TOOL, "bin/console")
    ev.add(mentions(probe, "composer.json", "symfony"), scoring.LOCKFILE, "symfony in composer.json")
    ev.add(probe.has("config/bundles.php"), scoring.STRUCTURE, "config/bundles.php")
    return ev


# ---------------------------------------------------------------------------
# Plans
# ---------------------------------------------------------------------------

def plan_laravel(probe: ProjectProbe) -> Plan:
    return Plan(
        build=[
            COMPOSER_INSTALL,
            "php artisan migrate --force",
            "php artisan config:cache && php artisan route:cache",
        ],
        run=[PHP_FPM_RUN],
        healthcheck=healthcheck("/health"),
        env_schema=["APP_KEY", "APP_ENV", "DB_CONNECTION/DB_*"],
    )


def plan_symfony(probe: ProjectProbe) -> Plan:
    return Plan(
        build=[
            COMPOSER_INSTALL,
            "php bin/console cache:clear --env=prod",
            "php bin/console assets:install",
        ],
        run=[PHP_FPM_RUN],
        healthcheck=healthcheck("/health"),
        env_schema=["APP_ENV", "APP_SECRET", "DATABASE_URL"],
    )
