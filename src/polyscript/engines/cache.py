"""Per-run engine cache.

One engine per key for the whole run. Engines are created lazily through the
registry, and the project binding is injected once, at creation time.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

import logging
from typing import Any, Dict, List, Optional

from polyscript.engines.base import EngineKind, ScriptEngine
from polyscript.engines.registry import EngineRegistry

DEFAULT_NAME_OF_PROJECT_PROPERTY = "project"


class EngineCache:
    """Memoizes engines by key, never evicting during a run."""

    def __init__(
        self,
        registry: EngineRegistry,
        project: Any = None,
        pass_project_as_property: bool = False,
        name_of_project_property: Optional[str] = None,
    ):
        self.registry = registry
        self.project = project
        self.pass_project_as_property = pass_project_as_property
        self.name_of_project_property = (
            name_of_project_property or DEFAULT_NAME_OF_PROJECT_PROPERTY
        )
        self._engines: Dict[str, ScriptEngine] = {}
        self.logger = logging.getLogger(__name__)

    def get_or_create(
        self, key: str, kind: EngineKind = EngineKind.EXTENSION
    ) -> ScriptEngine:
        """Return the engine cached under key, creating it on first use.

        The key string alone identifies the engine; kind only matters on a
        miss. A lookup of "j2" as a language name therefore returns the
        engine a ``.j2`` file created earlier in the run, and raises
        EngineNotFoundError when no such file ran.

        Args:
            key: Cache key, also the lookup key for the registry on a miss
            kind: How the registry interprets key on a miss

        Returns:
            The same engine object for every call with the same key

        Raises:
            EngineNotFoundError: If the key is not cached and nothing handles it
        """
        engine = self._engines.get(key)
        if engine is not None:
            return engine

        engine = self.registry.resolve(key, kind)
        if self.pass_project_as_property:
            engine.put(self.name_of_project_property, self.project)
        self._engines[key] = engine
        self.logger.debug(f"Created engine {engine!r} for {kind.value} {key!r}")
        return engine

    def get(self, key: str) -> Optional[ScriptEngine]:
        """Return the cached engine for key without creating one."""
        return self._engines.get(key)

    def keys(self) -> List[str]:
        return list(self._engines)

    def __contains__(self, key: str) -> bool:
        return key in self._engines

    def __len__(self) -> int:
        return len(self._engines)
