"""Builder registry.

Maps builder names to factories. Each lookup returns a fresh instance, and
availability is re-evaluated on every call since it can depend on the
environment (e.g. whether the Docker daemon is running).

Auto-selection order:
  Dockerfile in project root and "dockerfile" available → dockerfile
  JavaScript/TypeScript or Python and "nixpacks" available → nixpacks
  otherwise → native
"""

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from stackplan.builders.types import Builder, UnknownBuilderError
from stackplan.core.config import Settings
from stackplan.detector.types import Detection

logger = logging.getLogger(__name__)

BuilderFactory = Callable[[], Builder]

FALLBACK_BUILDER = "native"

# Languages Nixpacks plans well, compared lower-cased
NIXPACKS_LANGUAGES = frozenset({"javascript", "typescript", "javascript/typescript", "python"})


class BuilderRegistry:
    def __init__(self) -> None:
        self._factories: dict[str, BuilderFactory] = {}
        # Serialises lookups as well as registration; threading has no
        # reader-writer lock.
        self._lock = threading.RLock()

    def register(self, name: str, factory: BuilderFactory) -> None:
        """Register a factory; re-registering a name replaces it."""
        with self._lock:
            if name in self._factories:
                logger.debug("Replacing builder factory '%s'", name)
            self._factories[name] = factory

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._factories)

    def get_builder(self, name: str) -> Builder:
        """Return a fresh builder instance.

        Raises:
            UnknownBuilderError: If nothing is registered under `name`.
        """
        with self._lock:
            factory = self._factories.get(name)
            if factory is None:
                raise UnknownBuilderError(name, sorted(self._factories))
        return factory()

    def list_available_builders(self) -> list[str]:
        with self._lock:
            factories = dict(self._factories)
        return sorted(name for name, factory in factories.items() if factory().is_available())

    def auto_select_builder(self, project_path: Path | str, detection: Optional[Detection]) -> str:
        if (Path(project_path) / "Dockerfile").is_file() and self._is_available("dockerfile"):
            logger.info("Auto-selected builder 'dockerfile' (Dockerfile present)")
            return "dockerfile"

        if (
            detection is not None
            and detection.language.lower() in NIXPACKS_LANGUAGES
            and self._is_available("nixpacks")
        ):
            logger.info("Auto-selected builder 'nixpacks' for %s", detection.language)
            return "nixpacks"

        logger.info("Auto-selected builder '%s'", FALLBACK_BUILDER)
        return FALLBACK_BUILDER

    def _is_available(self, name: str) -> bool:
        try:
            return self.get_builder(name).is_available()
        except UnknownBuilderError:
            return False


def default_registry(settings: Optional[Settings] = None) -> BuilderRegistry:
    """Registry with the native, nixpacks and dockerfile builders."""
    # Imported lazily so importing the registry does not pull in every builder
    from stackplan.builders.dockerfile import DockerfileBuilder
    from stackplan.builders.native import NativeBuilder
    from stackplan.builders.nixpacks import NixpacksBuilder

    registry = BuilderRegistry()
    registry.register("native", lambda: NativeBuilder(settings))
    registry.register("nixpacks", lambda: NixpacksBuilder(settings))
    registry.register("dockerfile", lambda: DockerfileBuilder(settings))
    return registry
