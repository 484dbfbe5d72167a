"""Executor manifest definition for the plugin system."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

from sql_doctester.executors.base import QueryExecutor

ConfigT = TypeVar("ConfigT", bound=BaseModel)


@dataclass(frozen=True, kw_only=True)
class ExecutorManifest(Generic[ConfigT]):
    """Manifest describing an executor plugin.

    Holds the configuration class and the factory that opens an executor for a
    configuration, so engines are only imported once they are selected.
    """

    config_cls: type[ConfigT]
    executor_factory: Callable[[ConfigT], AbstractAsyncContextManager[QueryExecutor]]
