"""Discovery and loading of executor plugins."""

from collections.abc import Sequence
from importlib.metadata import entry_points
from typing import Any

from sql_doctester.executors.manifest import ExecutorManifest

ENTRY_POINT_GROUP = "sql_doctester.executors"


class ExecutorNotFoundError(Exception):
    """Raised when no executor plugin is registered under a key."""


def available_executors() -> Sequence[str]:
    """Return the sorted keys of all installed executor plugins."""
    return sorted({entry.name for entry in entry_points(group=ENTRY_POINT_GROUP)})


def load_executor_manifest(key: str) -> ExecutorManifest[Any]:
    """Import the manifest registered for an executor key.

    Only the selected plugin is imported, so engines whose driver is not
    installed do not get in the way.

    Args:
        key: Entry point name, e.g. "sqlite" or "postgres"

    Returns:
        The executor manifest

    Raises:
        ExecutorNotFoundError: If no executor is registered under the key

    """
    matches = entry_points(group=ENTRY_POINT_GROUP, name=key)
    if not matches:
        raise ExecutorNotFoundError(
            f"Executor '{key}' not found. Available executors: {available_executors()}"
        )

    manifest: ExecutorManifest[Any] = next(iter(matches)).load()
    return manifest
