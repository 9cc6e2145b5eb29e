"""Remote host collaborators used by the builders.

Public API:
    RemoteExecutor   : protocol every transport implements
    LocalExecutor    : subprocess-backed implementation for the local host
    CommandResult
"""

from stackplan.remote.executor import (
    CommandResult,
    LocalExecutor,
    RemoteExecutor,
    RemoteExecutorError,
)

__all__ = ["CommandResult", "LocalExecutor", "RemoteExecutor", "RemoteExecutorError"]
