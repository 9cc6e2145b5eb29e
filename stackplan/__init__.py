"""stackplan: framework detection, build plans and remote builders.

Public API:
    detect(project) -> Detection
    default_registry() -> BuilderRegistry
"""

from stackplan.builders.registry import BuilderRegistry, default_registry
from stackplan.detector import Detection, Healthcheck, detect

__all__ = ["BuilderRegistry", "Detection", "Healthcheck", "default_registry", "detect"]
