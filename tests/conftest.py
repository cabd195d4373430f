"""Shared fixtures for polyscript tests."""

from pathlib import Path

import pytest

from polyscript.config import ExecutionConfig, Project
from polyscript.engines import EngineFactory, EngineRegistry, ScriptEngine

# Appends the evaluated file's name to the shared "result" binding
ACCUMULATE = (
    "import os\n"
    "result = globals().get('result', 'undefined') + ',' + os.path.basename(__file__)\n"
)

FILTER_TREE = ("l0-1.py", "l1/l1-1.py", "l1/l2/l2-1.py", "l1/l2/l2-2.py")


class RecordingEngine(ScriptEngine):
    """Stores every evaluated source instead of running it."""

    def __init__(self, factory=None):
        super().__init__(factory=factory)
        self.evaluated = []

    def eval(self, source, filename="inline"):
        self.evaluated.append((filename, source))
        if "raise" in source:
            raise RuntimeError(f"boom in {filename}")
        return None


class RecordingEngineFactory(EngineFactory):
    engine_name = "recording"
    language_version = "1.0"
    names = ("recording",)
    extensions = ("rec",)
    mime_types = ("text/x-recording",)

    def __init__(self):
        self.created = 0

    def create_engine(self):
        self.created += 1
        return RecordingEngine(factory=self)


@pytest.fixture
def registry():
    """Built-in engines only, no installed plugins."""
    return EngineRegistry(load_plugins=False)


@pytest.fixture
def recording_factory():
    return RecordingEngineFactory()


@pytest.fixture
def script_tree(tmp_path):
    """Nested script directory where every file runs ACCUMULATE."""
    root = tmp_path / "scripts"
    for rel in FILTER_TREE:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(ACCUMULATE)
    return root


@pytest.fixture
def make_config(tmp_path):
    """Build an ExecutionConfig rooted at tmp_path."""

    def _make(roots=(), **kwargs):
        project = Project(
            name="test-project",
            basedir=tmp_path,
            script_source_roots=[Path(r) for r in roots],
        )
        return ExecutionConfig(project=project, **kwargs)

    return _make
