"""
Terminal host capabilities — prompts, progress and notifications via click.

With ``err=True`` everything goes to stderr so ``--json`` output on
stdout stays machine-readable.
"""

from __future__ import annotations

import click


class ClickPrompter:
    """Prompter backed by ``click.prompt``. Ctrl-C / EOF dismisses."""

    def __init__(self, err: bool = False):
        self._err = err

    def ask(self, prompt: str, default: str = "") -> str | None:
        try:
            return click.prompt(
                prompt,
                default=default,
                show_default=bool(default),
                err=self._err,
            )
        except click.Abort:
            click.echo("", err=self._err)
            return None


class ClickProgress:
    """ProgressSink that prints a running percentage."""

    def __init__(self, title: str, quiet: bool = False, err: bool = False):
        self._title = title
        self._quiet = quiet
        self._err = err
        self._done = 0

    def report(self, message: str, increment: int = 0) -> None:
        self._done = min(100, self._done + max(0, increment))
        if self._quiet:
            return
        click.secho(f"   [{self._done:3d}%] ", fg="cyan", nl=False, err=self._err)
        click.echo(f"{self._title}: {message}", err=self._err)


class ClickNotifier:
    """Notifier rendering info / warning / error lines."""

    def __init__(self, quiet: bool = False, err: bool = False):
        self._quiet = quiet
        self._err = err

    def info(self, message: str) -> None:
        if not self._quiet:
            self._emit("💬", message, "green")

    def warning(self, message: str) -> None:
        self._emit("⚠️ ", message, "yellow")

    def error(self, message: str) -> None:
        self._emit("❌", message, "red")

    def _emit(self, icon: str, message: str, color: str) -> None:
        first, *rest = message.splitlines() or [""]
        click.secho(f"{icon} {first}", fg=color, err=self._err)
        for line in rest:
            click.echo(f"   {line}", err=self._err)
