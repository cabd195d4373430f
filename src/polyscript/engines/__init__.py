# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Scripting engines: contracts, built-ins, registry and per-run cache."""

from polyscript.engines.base import EngineFactory, EngineKind, ScriptEngine
from polyscript.engines.cache import DEFAULT_NAME_OF_PROJECT_PROPERTY, EngineCache
from polyscript.engines.jinja import JinjaEngine, JinjaEngineFactory
from polyscript.engines.python import PythonEngine, PythonEngineFactory
from polyscript.engines.registry import (
    ENTRY_POINT_GROUP,
    EngineNotFoundError,
    EngineRegistry,
    default_factories,
    discover_factories,
)

__all__ = [
    "EngineFactory",
    "EngineKind",
    "ScriptEngine",
    "EngineCache",
    "DEFAULT_NAME_OF_PROJECT_PROPERTY",
    "PythonEngine",
    "PythonEngineFactory",
    "JinjaEngine",
    "JinjaEngineFactory",
    "EngineRegistry",
    "EngineNotFoundError",
    "ENTRY_POINT_GROUP",
    "default_factories",
    "discover_factories",
]
