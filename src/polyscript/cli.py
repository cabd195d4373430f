# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Main CLI entry point for polyscript.

Dumb trigger: loads configuration, applies command-line overrides, runs the
orchestrator, reports the outcome. All execution logic lives in
polyscript.orchestrator.
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer

from polyscript import __version__
from polyscript.config import (
    ConfigurationError,
    ExecutionConfig,
    config_from_dict,
    get_config_path,
    load_config,
)
from polyscript.engines import EngineRegistry
from polyscript.orchestrator import ExecutionFailure, ScriptOrchestrator
from polyscript.schemas import COMPLETED, SKIPPED


app = typer.Typer(
    name="polyscript",
    help="Run build-pipeline scripts through pluggable scripting engines",
    no_args_is_help=True,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_execution_config(config_path: Optional[str]) -> ExecutionConfig:
    """Load the config file if one is given or present, else use defaults."""
    if config_path or get_config_path().exists():
        return load_config(config_path)
    return config_from_dict({}, basedir=Path.cwd())


@app.command()
def execute(
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config file"),
    roots: Optional[List[str]] = typer.Option(
        None, "--root", "-r", help="Script source root (repeatable, replaces configured roots)"
    ),
    includes: Optional[List[str]] = typer.Option(None, "--include", "-i", help="Include pattern (repeatable)"),
    excludes: Optional[List[str]] = typer.Option(None, "--exclude", "-x", help="Exclude pattern (repeatable)"),
    script: Optional[str] = typer.Option(None, "--script", "-s", help="Inline script, run after the files"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Language of the inline script"),
    extension: Optional[str] = typer.Option(None, "--extension", help="Extension selecting the inline script's engine"),
    mime_type: Optional[str] = typer.Option(None, "--mime-type", help="MIME type selecting the inline script's engine"),
    pass_project: Optional[bool] = typer.Option(
        None, "--pass-project/--no-pass-project", help="Bind the project into every engine"
    ),
    project_property: Optional[str] = typer.Option(
        None, "--project-property", help="Binding name for the project (default: project)"
    ),
    events: Optional[str] = typer.Option(None, "--events", help="Append run events to this JSONL file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Run every script under the source roots, then the inline script."""
    _configure_logging(verbose)

    try:
        config = _load_execution_config(config_path)
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(2)

    # Command-line overrides
    if roots:
        config.project.script_source_roots = [Path(r).expanduser() for r in roots]
    if includes:
        config.includes = list(includes)
    if excludes:
        config.excludes = list(excludes)
    if script is not None:
        config.script = script
    if language:
        config.language = language
    if extension:
        config.extension = extension
    if mime_type:
        config.mime_type = mime_type
    if pass_project is not None:
        config.pass_project_as_property = pass_project
    if project_property:
        config.name_of_project_property = project_property
    if events:
        config.event_log = Path(events).expanduser()

    try:
        config.validate()
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(2)

    try:
        record = ScriptOrchestrator(config).execute()
    except ExecutionFailure as e:
        typer.echo(f"Execution failed: {e}", err=True)
        raise typer.Exit(1)

    completed = len(record.by_status(COMPLETED))
    skipped = len(record.by_status(SKIPPED))
    typer.echo(f"Executed {completed} script(s), skipped {skipped} (run {record.run_id})")


@app.command()
def engines():
    """List available scripting engines."""
    registry = EngineRegistry()
    for factory in registry.factories:
        typer.echo(f"{factory.engine_name} {factory.language_version}".rstrip())
        typer.echo(f"  names: {', '.join(factory.names) or '-'}")
        typer.echo(f"  extensions: {', '.join(factory.extensions) or '-'}")
        typer.echo(f"  mime types: {', '.join(factory.mime_types) or '-'}")


@app.command()
def version():
    """Show version information."""
    typer.echo(f"polyscript version {__version__}")


# Static commands (config)
from polyscript.commands import config

app.add_typer(config.app, name="config")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
