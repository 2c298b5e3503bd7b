"""
git2go — CLI entrypoint.

Usage:
    git2go --help
    git2go install
    git2go configure
    git2go check
    git2go copy-key
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from git2go import __version__
from git2go.core.observability.logging_config import (
    FILE_ENV_VAR,
    FILE_LEVEL_ENV_VAR,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="git2go")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to a settings YAML file (default: ~/.git2go/config.yml).",
)
@click.option("--mock", is_flag=True, help="Simulate shell commands (no real execution).")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    mock: bool,
) -> None:
    """git2go — install git, set your identity, create SSH keys."""
    from git2go.core.config.loader import ConfigError, load_settings
    from git2go.core.context import create_context

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["mock"] = mock
    ctx.obj.setdefault("context_factory", create_context)

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(FILE_ENV_VAR),
        log_file_level=os.environ.get(FILE_LEVEL_ENV_VAR),
    )

    try:
        ctx.obj["settings"] = load_settings(Path(config_path) if config_path else None)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


# ── Register command groups ─────────────────────────────────────

from git2go.ui.cli.workflow import check, configure, copy_key, install  # noqa: E402

cli.add_command(install)
cli.add_command(configure)
cli.add_command(check)
cli.add_command(copy_key)


if __name__ == "__main__":
    cli()
