"""CLI commands for applying and inspecting Thorfix patches."""

from __future__ import annotations

import copy
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import typer
import yaml

from .config import DEFAULT_CONFIG_NAME, DEFAULT_CONFIG_TEMPLATE, PatchSettings, load_settings
from .patching import PatchError, apply_patch, create_patch
from .tools import ToolRouter

APP_HELP = "Thorfix patch engine CLI entry point."

app = typer.Typer(help=APP_HELP)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log patch telemetry to stderr."),
) -> None:
    """Configure logging before running a command."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def load_config(config_path: Path) -> Dict[str, Any]:
    """Load YAML configuration from disk and return it as a dictionary."""
    if not config_path.exists():
        raise typer.BadParameter(f"Config file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        typer.echo(f"Failed to parse config: {error}")
        raise typer.Exit(code=1) from error

    if not isinstance(data, dict):
        typer.echo("Configuration must be a mapping at the top level.")
        raise typer.Exit(code=1)

    return data


def _settings_from_option(config: Optional[str]) -> PatchSettings:
    """Load settings from ``config``, or fall back to the current directory."""
    if config is None:
        default_path = Path(DEFAULT_CONFIG_NAME)
        if not default_path.exists():
            return load_settings({}, default_path.resolve())
        config = DEFAULT_CONFIG_NAME
    config_path = Path(config)
    try:
        return load_settings(load_config(config_path), config_path.resolve())
    except PatchError as error:
        typer.echo(f"Invalid configuration: {error}")
        raise typer.Exit(code=1) from error


def _read_text_argument(value: str) -> str:
    """Read ``value`` as a file path, or stdin when it is ``-``."""
    if value == "-":
        return sys.stdin.read()
    path = Path(value)
    if not path.exists():
        raise typer.BadParameter(f"File not found: {path}")
    return path.read_text(encoding="utf-8")


@app.command()
def init(
    config: str = typer.Option(
        DEFAULT_CONFIG_NAME,
        "--config",
        "-c",
        help="Path of the configuration file to create.",
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing configuration file."),
) -> None:
    """Write a default configuration file."""
    config_path = Path(config)
    if config_path.exists() and not force:
        typer.echo(f"Configuration already exists at {config_path}; use --force to overwrite.")
        raise typer.Exit(code=1)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(copy.deepcopy(DEFAULT_CONFIG_TEMPLATE), handle, sort_keys=False)
    typer.echo(f"Wrote configuration at {config_path}.")


@app.command("apply")
def apply_command(
    path: str = typer.Argument(..., help="File to patch, relative to the repository root."),
    diff_file: str = typer.Argument(..., help="File holding the diff text, or '-' for stdin."),
    patch_format: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Diff grammar: 'block' (SEARCH/REPLACE) or 'unified' (@@ hunks). Defaults to the config value.",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the configuration file.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the outcome as a JSON object."),
) -> None:
    """Apply a diff to one file in the repository."""
    settings = _settings_from_option(config)
    diff_text = _read_text_argument(diff_file)
    outcome = apply_patch(
        path,
        diff_text,
        patch_format or settings.default_format,
        root=settings.root,
        max_patch_bytes=settings.max_patch_bytes,
    )
    if as_json:
        typer.echo(json.dumps(outcome.to_dict(), indent=2))
        if not outcome.ok:
            raise typer.Exit(code=1)
        return
    if not outcome.ok:
        kind = outcome.kind.value if outcome.kind else "error"
        typer.echo(f"Patch failed ({kind}): {outcome.message}")
        raise typer.Exit(code=1)
    typer.echo(f"{outcome.message} ({outcome.bytes_written} bytes written)")


@app.command()
def diff(
    original: Path = typer.Argument(..., help="Original file."),
    modified: Path = typer.Argument(..., help="Modified file."),
) -> None:
    """Print the unified hunks that turn ORIGINAL into MODIFIED."""
    for candidate in (original, modified):
        if not candidate.exists():
            raise typer.BadParameter(f"File not found: {candidate}")
    patch = create_patch(
        original.read_text(encoding="utf-8"),
        modified.read_text(encoding="utf-8"),
    )
    typer.echo(patch, nl=False)


@app.command()
def tool(
    name: str = typer.Argument(..., help="Tool name, e.g. modify_file."),
    args: str = typer.Option("{}", "--args", "-a", help="Tool arguments as a JSON object."),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the configuration file.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the tool result as a JSON object."),
) -> None:
    """Invoke an agent tool the way the orchestrator would."""
    router = ToolRouter(_settings_from_option(config))
    result = router.invoke(name, args)
    typer.echo(json.dumps(result.to_dict()) if as_json else result.response)
    if result.is_error:
        raise typer.Exit(code=1)


@app.command()
def tools(
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the configuration file.",
    ),
) -> None:
    """Print the tool definitions handed to the language model."""
    router = ToolRouter(_settings_from_option(config))
    typer.echo(json.dumps(router.describe(), indent=2))


if __name__ == "__main__":
    app()
