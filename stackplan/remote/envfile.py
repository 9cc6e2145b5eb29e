"""Local .env discovery and parsing, and rendering of the remote .env.

Lookup order in the project root: .env.production, .env.prod, .env.
Values given explicitly by the caller override values from the file.
"""

import logging
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

ENV_FILE_PRIORITY = [".env.production", ".env.prod", ".env"]


def find_env_file(project_path: Path | str) -> Optional[Path]:
    root = Path(project_path)
    for name in ENV_FILE_PRIORITY:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def parse_env_file(path: Path | str) -> dict[str, str]:
    """Parse a dotenv file with python-dotenv.

    Keys declared without a value are dropped. A missing or undecodable
    file yields an empty mapping.
    """
    try:
        values = dotenv_values(path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read env file %s: %s", path, exc)
        return {}
    return {key: value for key, value in values.items() if value is not None}


def load_local_env(project_path: Path | str, provided: Optional[dict[str, str]] = None) -> dict[str, str]:
    env_file = find_env_file(project_path)
    env = parse_env_file(env_file) if env_file else {}
    if env_file:
        logger.info("Loaded %d variables from %s", len(env), env_file.name)
    env.update(provided or {})
    return env


def render_env_file(env_vars: dict[str, str]) -> str:
    """Serialize to KEY=VALUE lines with keys sorted."""
    return "".join(f"{key}={env_vars[key]}\n" for key in sorted(env_vars))
