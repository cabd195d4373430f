# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Config command for polyscript.

Validates a configuration file and shows what a run would use.
"""

import typer

from polyscript.config import ConfigurationError, load_config

app = typer.Typer(help="Manage and validate configuration")


@app.command()
def validate(
    config_path: str = typer.Option(None, "--config", "-c", help="Path to config file"),
):
    """
    Validate configuration file.

    Checks that the config file exists, is valid YAML and declares an
    engine for the inline script if there is one.
    """
    typer.echo("Validating configuration...")
    typer.echo()

    try:
        config = load_config(config_path)
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except ConfigurationError as e:
        typer.echo(f"Validation failed: {e}", err=True)
        raise typer.Exit(1)

    project = config.project
    typer.echo(f"Project: {project.name} {project.version}")
    typer.echo(f"Basedir: {project.basedir}")
    typer.echo("Script source roots:")
    for root in project.resolved_script_source_roots():
        marker = "" if root.is_dir() else " (missing)"
        typer.echo(f"  - {root}{marker}")
    if config.includes:
        typer.echo(f"Includes: {', '.join(config.includes)}")
    if config.excludes:
        typer.echo(f"Excludes: {', '.join(config.excludes)}")
    declared = config.inline_engine()
    if config.script is not None and declared:
        key, kind = declared
        typer.echo(f"Inline script: {kind.value} {key}")
    if config.pass_project_as_property:
        typer.echo(f"Project binding: {config.name_of_project_property or 'project'}")
    typer.echo()
    typer.echo("Configuration validation complete!")
