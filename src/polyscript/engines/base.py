"""Engine contracts shared by every scripting language.

An engine evaluates source text against a binding table that lives as long
as the engine does. A factory describes which keys (names, extensions, MIME
types) select its engine and creates new instances on request.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Iterator, Tuple


class EngineKind(Enum):
    """How an engine key is interpreted during lookup."""

    EXTENSION = "extension"
    NAME = "language"
    MIME_TYPE = "mimeType"


class ScriptEngine(ABC):
    """A stateful interpreter with a persistent binding table.

    Every evaluation sees the bindings left behind by earlier evaluations
    made through the same engine.
    """

    def __init__(self, factory: "EngineFactory" = None):
        self.factory = factory
        self.bindings: Dict[str, Any] = {}

    @abstractmethod
    def eval(self, source: str, filename: str = "inline") -> Any:
        """Evaluate source text against this engine's bindings.

        Args:
            source: Script source text.
            filename: Name reported in tracebacks and error messages.

        Returns:
            Whatever the language produces for the evaluation, or None.
        """

    def get(self, name: str, default: Any = None) -> Any:
        return self.bindings.get(name, default)

    def put(self, name: str, value: Any) -> None:
        self.bindings[name] = value

    def names(self) -> Iterator[str]:
        """Iterate over user-visible binding names."""
        return (name for name in self.bindings if not name.startswith("__"))

    def __contains__(self, name: str) -> bool:
        return name in self.bindings

    def __repr__(self) -> str:
        engine_name = self.factory.engine_name if self.factory else "?"
        return f"{type(self).__name__}(engine={engine_name})"


class EngineFactory(ABC):
    """Describes one scripting language and creates engines for it.

    Subclasses set the class attributes and implement create_engine().
    Plugins expose a subclass (or an instance) through the
    ``polyscript.engines`` entry-point group.
    """

    engine_name: str = ""
    language_version: str = ""
    names: Tuple[str, ...] = ()
    extensions: Tuple[str, ...] = ()
    mime_types: Tuple[str, ...] = ()

    @abstractmethod
    def create_engine(self) -> ScriptEngine:
        """Create a fresh engine with an empty binding table."""

    def keys(self, kind: EngineKind) -> Tuple[str, ...]:
        if kind == EngineKind.EXTENSION:
            return tuple(self.extensions)
        if kind == EngineKind.NAME:
            return tuple(self.names)
        return tuple(self.mime_types)

    def handles(self, key: str, kind: EngineKind) -> bool:
        """Check whether key selects this factory (exact, case-sensitive)."""
        return bool(key) and key in self.keys(kind)
