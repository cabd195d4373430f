"""Tests for engine lookup and plugin discovery."""

from unittest.mock import MagicMock, patch

import pytest

from polyscript.engines import (
    EngineKind,
    EngineNotFoundError,
    EngineRegistry,
    JinjaEngine,
    PythonEngine,
    PythonEngineFactory,
    discover_factories,
)


class TestEngineRegistry:
    """Tests for EngineRegistry.resolve and find_factory."""

    def test_default_factories(self, registry):
        names = [f.engine_name for f in registry.factories]
        assert names == ["python", "jinja"]

    @pytest.mark.parametrize(
        "key,kind",
        [
            ("py", EngineKind.EXTENSION),
            ("python", EngineKind.NAME),
            ("text/x-python", EngineKind.MIME_TYPE),
        ],
    )
    def test_resolve_python_by_any_kind(self, registry, key, kind):
        assert isinstance(registry.resolve(key, kind), PythonEngine)

    def test_resolve_jinja_by_extension(self, registry):
        assert isinstance(registry.resolve("j2"), JinjaEngine)

    def test_resolve_never_caches(self, registry):
        """Every resolve should create a fresh engine."""
        first = registry.resolve("py")
        second = registry.resolve("py")
        assert first is not second

    @pytest.mark.parametrize(
        "key,kind,message",
        [
            ("rb", EngineKind.EXTENSION, "No engine with extension 'rb'"),
            ("ruby", EngineKind.NAME, "No engine with language 'ruby'"),
            ("text/x-ruby", EngineKind.MIME_TYPE, "No engine with mimeType 'text/x-ruby'"),
        ],
    )
    def test_unknown_key(self, registry, key, kind, message):
        with pytest.raises(EngineNotFoundError, match=message) as exc_info:
            registry.resolve(key, kind)
        assert exc_info.value.key == key
        assert exc_info.value.kind == kind

    def test_empty_key(self, registry):
        """Should raise EngineNotFoundError for an empty key."""
        with pytest.raises(EngineNotFoundError):
            registry.resolve("", EngineKind.EXTENSION)

    def test_kind_matters(self, registry):
        """A name is not an extension."""
        with pytest.raises(EngineNotFoundError):
            registry.resolve("python", EngineKind.EXTENSION)

    def test_register(self, registry, recording_factory):
        registry.register(recording_factory)

        engine = registry.resolve("rec")
        assert engine.factory is recording_factory
        assert registry.find_factory("recording", EngineKind.NAME) is recording_factory

    def test_first_registered_wins(self, recording_factory):
        """Factories are consulted in registration order."""
        recording_factory.extensions = ("py",)
        registry = EngineRegistry(
            factories=[recording_factory, PythonEngineFactory()], load_plugins=False
        )

        assert registry.find_factory("py", EngineKind.EXTENSION) is recording_factory

    def test_loads_plugins(self, recording_factory):
        with patch(
            "polyscript.engines.registry.discover_factories",
            return_value=[recording_factory],
        ):
            registry = EngineRegistry()

        assert registry.factories[-1] is recording_factory


class TestDiscoverFactories:
    """Tests for entry-point plugin loading."""

    def _mock_entry_points(self, mock_eps, *eps):
        mock_group = MagicMock()
        mock_group.select.return_value = list(eps)
        mock_eps.return_value = mock_group
        return mock_group

    def _ep(self, name, loaded=None, error=None):
        ep = MagicMock()
        ep.name = name
        ep.value = f"plugin.{name}:Factory"
        if error:
            ep.load.side_effect = error
        else:
            ep.load.return_value = loaded
        return ep

    def test_loads_factory_class(self):
        with patch("polyscript.engines.registry.entry_points") as mock_eps:
            group = self._mock_entry_points(mock_eps, self._ep("python", PythonEngineFactory))

            factories = discover_factories()

        group.select.assert_called_once_with(group="polyscript.engines")
        assert len(factories) == 1
        assert isinstance(factories[0], PythonEngineFactory)

    def test_loads_factory_instance(self, recording_factory):
        with patch("polyscript.engines.registry.entry_points") as mock_eps:
            self._mock_entry_points(mock_eps, self._ep("recording", recording_factory))

            factories = discover_factories()

        assert factories == [recording_factory]

    def test_broken_plugin_is_skipped(self, caplog, recording_factory):
        """Should log and skip a plugin that fails to load."""
        with patch("polyscript.engines.registry.entry_points") as mock_eps:
            self._mock_entry_points(
                mock_eps,
                self._ep("broken", error=ImportError("no module named broken")),
                self._ep("recording", recording_factory),
            )

            factories = discover_factories()

        assert factories == [recording_factory]
        assert "Could not load engine plugin broken" in caplog.text

    def test_non_factory_is_ignored(self, caplog):
        """Should ignore entry points that are not engine factories."""
        with patch("polyscript.engines.registry.entry_points") as mock_eps:
            self._mock_entry_points(mock_eps, self._ep("junk", object()))

            factories = discover_factories()

        assert factories == []
        assert "not an EngineFactory" in caplog.text
