"""Command-line entry point: print the detection for a project directory.

Usage:
    python -m stackplan [PATH] [--compact]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from stackplan.core.config import get_settings
from stackplan.core.logging import configure_structlog
from stackplan.detector import detect

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stackplan",
        description="Detect a project's framework and print its build/run plan as JSON.",
    )
    parser.add_argument("path", nargs="?", default=".", help="project directory (default: .)")
    parser.add_argument("--compact", action="store_true", help="print JSON on a single line")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_structlog(debug=settings.debug)

    project = Path(args.path)
    if not project.is_dir():
        logger.error("Not a directory: %s", project)
        return 2

    detection = detect(project, settings)
    sys.stdout.write(detection.to_json(indent=None if args.compact else 2) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
