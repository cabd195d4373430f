"""
Configuration loading for polyscript.

Reads polyscript.yaml (or $POLYSCRIPT_CONFIG, or an explicit path) into an
ExecutionConfig. Keys may use snake_case or the camelCase spelling of the
original build-plugin parameters (scriptSourceRoots, passProjectAsProperty,
nameOfProjectProperty, mimeType).

Example:
    project:
      name: demo
      script_source_roots: [src/main/scripts, src/test/scripts]
    includes: ["**/*.py"]
    excludes: ["**/_*.py"]
    language: python
    script: |
      print("done")
    pass_project_as_property: true

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from polyscript.engines.base import EngineKind

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "POLYSCRIPT_CONFIG"
DEFAULT_CONFIG_FILE = "polyscript.yaml"
DEFAULT_SCRIPT_SOURCE_ROOT = "src/main/scripts"

# camelCase parameter names accepted as aliases
_ALIASES = {
    "scriptSourceRoots": "script_source_roots",
    "passProjectAsProperty": "pass_project_as_property",
    "nameOfProjectProperty": "name_of_project_property",
    "mimeType": "mime_type",
    "eventLog": "event_log",
}

_TOP_LEVEL_KEYS = {
    "project",
    "script_source_roots",
    "includes",
    "excludes",
    "language",
    "extension",
    "mime_type",
    "script",
    "pass_project_as_property",
    "name_of_project_property",
    "event_log",
}

_PROJECT_KEYS = {"name", "version", "basedir", "script_source_roots", "properties"}


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""
    pass


@dataclass
class Project:
    """The project a run belongs to. Bound into engines on request."""
    name: str = ""
    version: str = "0.0.0"
    basedir: Path = field(default_factory=Path.cwd)
    script_source_roots: List[Path] = field(
        default_factory=lambda: [Path(DEFAULT_SCRIPT_SOURCE_ROOT)]
    )
    properties: Dict[str, Any] = field(default_factory=dict)

    def resolved_script_source_roots(self) -> List[Path]:
        """Script source roots with relative entries resolved against basedir."""
        return [
            root if root.is_absolute() else self.basedir / root
            for root in self.script_source_roots
        ]


@dataclass
class ExecutionConfig:
    """Everything one run needs."""
    project: Project = field(default_factory=Project)
    includes: List[str] = field(default_factory=list)
    excludes: List[str] = field(default_factory=list)
    language: Optional[str] = None
    extension: Optional[str] = None
    mime_type: Optional[str] = None
    script: Optional[str] = None
    pass_project_as_property: bool = False
    name_of_project_property: Optional[str] = None
    event_log: Optional[Path] = None

    def inline_engine(self) -> Optional[Tuple[str, EngineKind]]:
        """Return the (key, kind) declared for the inline script.

        language wins over extension, which wins over mime_type.
        """
        if self.language:
            return self.language, EngineKind.NAME
        if self.extension:
            return self.extension, EngineKind.EXTENSION
        if self.mime_type:
            return self.mime_type, EngineKind.MIME_TYPE
        return None

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If validation fails.
        """
        for name in ("includes", "excludes"):
            patterns = getattr(self, name)
            if not all(isinstance(p, str) and p for p in patterns):
                raise ConfigurationError(f"{name} must be a list of non-empty patterns")

        for name in ("language", "extension", "mime_type", "name_of_project_property"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ConfigurationError(f"{name} must be a string, got: {value!r}")

        if self.script is not None:
            if not isinstance(self.script, str):
                raise ConfigurationError("script must be a string")
            if self.inline_engine() is None:
                raise ConfigurationError(
                    "An inline script requires one of language|extension|mime_type"
                )


def _to_bool(value: Any) -> bool:
    """Convert value to boolean, handling string 'true'/'false'."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes")
    return bool(value)


def _to_list(name: str, value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ConfigurationError(f"{name} must be a list, got: {type(value).__name__}")
    return value


def _normalize_keys(data: Dict[str, Any], known: set, where: str) -> Dict[str, Any]:
    normalized = {}
    for key, value in data.items():
        key = _ALIASES.get(key, key)
        if key not in known:
            logger.warning(f"Unknown {where} key ignored: {key}")
            continue
        normalized[key] = value
    return normalized


def config_from_dict(data: Dict[str, Any], basedir: Optional[Path] = None) -> ExecutionConfig:
    """
    Build an ExecutionConfig from a parsed YAML mapping.

    Args:
        data: Top-level configuration mapping
        basedir: Default project basedir (usually the config file's directory)

    Returns:
        Unvalidated ExecutionConfig
    """
    data = _normalize_keys(data, _TOP_LEVEL_KEYS, "config")
    basedir = basedir or Path.cwd()

    project_data = data.get("project") or {}
    if not isinstance(project_data, dict):
        raise ConfigurationError("project must be a mapping")
    project_data = _normalize_keys(project_data, _PROJECT_KEYS, "project")

    project_basedir = Path(project_data.get("basedir") or basedir).expanduser()
    if not project_basedir.is_absolute():
        project_basedir = basedir / project_basedir

    roots = data.get("script_source_roots", project_data.get("script_source_roots"))
    if roots is None:
        roots = [DEFAULT_SCRIPT_SOURCE_ROOT]

    properties = project_data.get("properties") or {}
    if not isinstance(properties, dict):
        raise ConfigurationError("project.properties must be a mapping")

    project = Project(
        name=str(project_data.get("name") or project_basedir.name),
        version=str(project_data.get("version", "0.0.0")),
        basedir=project_basedir,
        script_source_roots=[
            Path(str(r)).expanduser() for r in _to_list("script_source_roots", roots)
        ],
        properties=properties,
    )

    event_log = data.get("event_log")

    return ExecutionConfig(
        project=project,
        includes=_to_list("includes", data.get("includes")),
        excludes=_to_list("excludes", data.get("excludes")),
        language=data.get("language"),
        extension=data.get("extension"),
        mime_type=data.get("mime_type"),
        script=data.get("script"),
        pass_project_as_property=_to_bool(data.get("pass_project_as_property", False)),
        name_of_project_property=data.get("name_of_project_property"),
        event_log=Path(event_log).expanduser() if event_log else None,
    )


def get_config_path(path: Optional[str] = None) -> Path:
    """Resolve the config file path: explicit path, then $POLYSCRIPT_CONFIG, then ./polyscript.yaml."""
    if path:
        return Path(path).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path(DEFAULT_CONFIG_FILE)


def load_config(path: Optional[str] = None) -> ExecutionConfig:
    """
    Load and validate a configuration file.

    Args:
        path: Config file path (default: $POLYSCRIPT_CONFIG or ./polyscript.yaml)

    Returns:
        Validated ExecutionConfig

    Raises:
        FileNotFoundError: If the config file does not exist
        ConfigurationError: If the file is not valid YAML or has invalid values
    """
    config_path = get_config_path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML in {config_path}: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"config file {config_path} must contain a YAML mapping")

    config = config_from_dict(data, basedir=config_path.resolve().parent)
    config.validate()
    return config
