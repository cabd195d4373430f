# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Polyscript - run build-pipeline scripts through pluggable scripting engines.

Scripts under the project's script source roots run first, each through the
engine selected by its file extension; an optional inline script runs last.
"""

__version__ = "0.3.0"

from polyscript.config import ConfigurationError, ExecutionConfig, Project, load_config
from polyscript.discovery import FilterSpec, ScriptFile, discover
from polyscript.engines import (
    EngineCache,
    EngineFactory,
    EngineKind,
    EngineNotFoundError,
    EngineRegistry,
    ScriptEngine,
)
from polyscript.orchestrator import (
    ExecutionFailure,
    RunState,
    ScriptEvaluationError,
    ScriptOrchestrator,
    execute,
)

__all__ = [
    "__version__",
    "ConfigurationError",
    "ExecutionConfig",
    "Project",
    "load_config",
    "FilterSpec",
    "ScriptFile",
    "discover",
    "EngineCache",
    "EngineFactory",
    "EngineKind",
    "EngineNotFoundError",
    "EngineRegistry",
    "ScriptEngine",
    "ExecutionFailure",
    "RunState",
    "ScriptEvaluationError",
    "ScriptOrchestrator",
    "execute",
]
