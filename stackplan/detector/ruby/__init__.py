"""Ruby detectors: Rails and the Jekyll static site generator."""

from stackplan.detector import scoring
from stackplan.detector.probe import ProjectProbe, TreeScan, any_dir, mentions
from stackplan.detector.scoring import Evidence
from stackplan.detector.types import Candidate, Framework

RUBY = "Ruby"


def detect_ruby(probe: ProjectProbe, scan: TreeScan) -> list[Candidate]:
    detectors = [detect_rails(probe), detect_jekyll(probe)]
    return [ev.to_candidate() for ev in detectors if ev.score > 0]


def detect_rails(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.RAILS, RUBY)
    ev.add(probe.has("bin/rails"), scoring.CONFIG_FILE, "bin/rails")
    ev.add(probe.has("Gemfile.lock"), scoring.LOCKFILE, "Gemfile.lock")
    ev.add(probe.has("config/application.rb"), scoring.MINOR_INDICATOR, "config/application.rb")
    return ev


def detect_jekyll(probe: ProjectProbe) -> Evidence:
    ev = Evidence(Framework.JEKYLL, RUBY)
    ev.add(probe.has("_config.yml"), scoring.CONFIG_FILE, "_config.yml")
    ev.add(mentions(probe, "Gemfile", "jekyll"), scoring.DEPENDENCY, "jekyll in Gemfile")
    ev.add(any_dir(probe, "_posts", "_site"), scoring.STRUCTURE, "_posts/ or _site/ directory")
    return ev
