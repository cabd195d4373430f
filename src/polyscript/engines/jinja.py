# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Jinja2 engine.

A script is a template rendered against the engine's bindings. Top-level
``{% set name = ... %}`` assignments are written back to the bindings, so
templates can accumulate state the same way Python scripts do. Non-blank
rendered output is written to the engine's writer (stdout by default).
"""

import sys
from typing import Any, Optional, TextIO

import jinja2

from polyscript.engines.base import EngineFactory, ScriptEngine


class JinjaEngine(ScriptEngine):
    """Renders Jinja2 templates against a persistent binding table."""

    def __init__(self, factory: EngineFactory = None, writer: Optional[TextIO] = None):
        super().__init__(factory=factory)
        self.environment = jinja2.Environment(
            autoescape=False,
            keep_trailing_newline=True,
            undefined=jinja2.StrictUndefined,
        )
        self.writer = writer

    def eval(self, source: str, filename: str = "inline") -> Any:
        template = self.environment.from_string(source)
        module = template.make_module(vars=dict(self.bindings))

        # Exported names are the template's top-level {% set %} assignments
        for name, value in vars(module).items():
            if not name.startswith("_"):
                self.bindings[name] = value

        rendered = str(module)
        if rendered.strip():
            writer = self.writer or sys.stdout
            writer.write(rendered)
        return rendered


class JinjaEngineFactory(EngineFactory):
    engine_name = "jinja"
    language_version = jinja2.__version__
    names = ("jinja", "jinja2")
    extensions = ("j2", "jinja", "jinja2")
    mime_types = ("text/x-jinja", "text/x-jinja2")

    def create_engine(self) -> JinjaEngine:
        return JinjaEngine(factory=self)
