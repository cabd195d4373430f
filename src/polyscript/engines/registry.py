"""
Engine registry - find a scripting engine by extension, name or MIME type.

Factories come from two places, consulted in this order:
1. Factories passed to the registry (default: the built-in python and jinja engines)
2. Plugins published under the ``polyscript.engines`` entry-point group

The registry never caches: every resolve() creates a new engine. Reuse of
engines within a run is the job of EngineCache.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

import logging
from importlib.metadata import entry_points
from typing import Iterable, List, Optional

from polyscript.engines.base import EngineFactory, EngineKind, ScriptEngine
from polyscript.engines.jinja import JinjaEngineFactory
from polyscript.engines.python import PythonEngineFactory

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "polyscript.engines"


class EngineNotFoundError(Exception):
    """Raised when no engine matches a key."""

    def __init__(self, key: str, kind: EngineKind):
        self.key = key
        self.kind = kind
        super().__init__(f"No engine with {kind.value} {key!r} has been found")


def default_factories() -> List[EngineFactory]:
    """Return the engines that ship with polyscript."""
    return [PythonEngineFactory(), JinjaEngineFactory()]


def discover_factories(group: str = ENTRY_POINT_GROUP) -> List[EngineFactory]:
    """Load engine factories from installed entry points.

    An entry point may reference an EngineFactory subclass or an instance.
    Plugins that fail to load are logged and left out.
    """
    factories = []

    eps = entry_points()
    for ep in eps.select(group=group):
        try:
            loaded = ep.load()
        except Exception as e:
            logger.warning(f"Could not load engine plugin {ep.name} ({ep.value}): {e}")
            continue

        factory = loaded() if isinstance(loaded, type) else loaded
        if not isinstance(factory, EngineFactory):
            logger.warning(f"Engine plugin {ep.name} is not an EngineFactory, ignoring")
            continue

        logger.debug(f"Loaded engine plugin {ep.name}: {factory.engine_name}")
        factories.append(factory)

    return factories


class EngineRegistry:
    """Lookup of engine factories by key."""

    def __init__(
        self,
        factories: Optional[Iterable[EngineFactory]] = None,
        load_plugins: bool = True,
    ):
        """
        Initialize the registry.

        Args:
            factories: Factories to register first (default: built-in engines)
            load_plugins: Also load factories from the entry-point group
        """
        self._factories: List[EngineFactory] = (
            list(factories) if factories is not None else default_factories()
        )
        if load_plugins:
            self._factories.extend(discover_factories())

    @property
    def factories(self) -> List[EngineFactory]:
        return list(self._factories)

    def register(self, factory: EngineFactory) -> None:
        """Add a factory after the ones already registered."""
        self._factories.append(factory)

    def find_factory(self, key: str, kind: EngineKind) -> Optional[EngineFactory]:
        """Return the first factory that handles key, or None."""
        for factory in self._factories:
            if factory.handles(key, kind):
                return factory
        return None

    def resolve(self, key: str, kind: EngineKind = EngineKind.EXTENSION) -> ScriptEngine:
        """
        Create a new engine for key.

        Args:
            key: Extension, language name or MIME type
            kind: How to interpret key

        Returns:
            A fresh engine with an empty binding table

        Raises:
            EngineNotFoundError: If no registered factory handles key
        """
        factory = self.find_factory(key, kind)
        if factory is None:
            raise EngineNotFoundError(key, kind)
        return factory.create_engine()
