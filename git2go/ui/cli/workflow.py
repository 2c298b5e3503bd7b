"""
CLI commands for the install / configure workflow.

Thin wrappers over ``git2go.core.use_cases.workflow``.
"""

from __future__ import annotations

import json
import sys

import click

from git2go.core.context import WorkflowContext
from git2go.core.platform import UnsupportedPlatformError
from git2go.ui.cli.console import ClickNotifier, ClickProgress, ClickPrompter


def _build_context(ctx: click.Context, title: str, as_json: bool = False) -> WorkflowContext:
    """Create the workflow context for a command from the group options."""
    from git2go.adapters.mock import MockShellAdapter

    quiet = ctx.obj.get("quiet", False)
    factory = ctx.obj["context_factory"]
    shell = MockShellAdapter() if ctx.obj.get("mock") else None

    return factory(
        prompter=ClickPrompter(err=as_json),
        notifier=ClickNotifier(quiet=quiet, err=as_json),
        progress=ClickProgress(title, quiet=quiet or as_json, err=as_json),
        settings=ctx.obj["settings"],
        shell=shell,
    )


def _unsupported(e: UnsupportedPlatformError) -> None:
    click.secho(f"❌ {e}", fg="red", err=True)
    sys.exit(2)


@click.command()
@click.option("--no-copy-key", is_flag=True, help="Don't copy the public key afterwards.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, no_copy_key: bool, as_json: bool) -> None:
    """Install git (if missing), configure it and create SSH keys."""
    from git2go.core.use_cases.workflow import run_install

    wf_ctx = _build_context(ctx, "Install", as_json)
    try:
        result = run_install(wf_ctx, copy_key=not no_copy_key)
    except UnsupportedPlatformError as e:
        _unsupported(e)
        return

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))

    if not result.ok:
        sys.exit(1)


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def configure(ctx: click.Context, as_json: bool) -> None:
    """Re-prompt for name and email, set the editor, ensure SSH keys."""
    from git2go.core.use_cases.workflow import run_configure

    wf_ctx = _build_context(ctx, "Configure", as_json)
    try:
        result = run_configure(wf_ctx)
    except UnsupportedPlatformError as e:
        _unsupported(e)
        return

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif result.configure is None:
        click.secho("⚠️  Git is not installed — run 'git2go install' first.", fg="yellow")

    if result.configure is None:
        sys.exit(1)


@click.command()
@click.option("--yes", "-y", is_flag=True, help="Install without asking if git is missing.")
@click.pass_context
def check(ctx: click.Context, yes: bool) -> None:
    """Check whether git is installed; offer to install it."""
    from git2go.core.use_cases.workflow import check_installation

    wf_ctx = _build_context(ctx, "Check")
    if check_installation(wf_ctx):
        return

    if yes or click.confirm("Install now?", default=True):
        ctx.invoke(install)
        return
    sys.exit(1)


@click.command("copy-key")
@click.pass_context
def copy_key(ctx: click.Context) -> None:
    """Copy the SSH public key to the clipboard."""
    from git2go.core.use_cases.workflow import copy_public_key

    wf_ctx = _build_context(ctx, "Copy key")
    try:
        outcome = copy_public_key(wf_ctx)
    except UnsupportedPlatformError as e:
        _unsupported(e)
        return

    if outcome.failed:
        sys.exit(1)
