# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Python engine: scripts run with the binding table as their globals."""

import sys
from typing import Any

from polyscript.engines.base import EngineFactory, ScriptEngine


class PythonEngine(ScriptEngine):
    """Executes Python source in a namespace shared across evaluations.

    Top-level assignments in one script are visible to every later script
    evaluated through the same engine. ``__file__`` holds the name of the
    source being evaluated.
    """

    def eval(self, source: str, filename: str = "inline") -> Any:
        code = compile(source, filename, "exec")
        self.bindings["__file__"] = filename
        exec(code, self.bindings)
        return None


class PythonEngineFactory(EngineFactory):
    engine_name = "python"
    language_version = "{}.{}.{}".format(*sys.version_info[:3])
    names = ("python", "py", "python3")
    extensions = ("py",)
    mime_types = ("text/x-python", "application/x-python", "text/x-python3")

    def create_engine(self) -> PythonEngine:
        return PythonEngine(factory=self)
