"""CLI entry point: write entries, inspect the log file, and send debug trace lines."""

from __future__ import annotations

import sys
from collections import deque
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from applog import __version__
from applog.config import CONFIG_PATH, DEFAULTS, load_config
from applog.debug_channel import get_channel
from applog.errors import LogError
from applog.logging_setup import setup_logging, teardown_logging
from applog.severity import SEVERITY_NAMES, Severity
from applog.writer import LogWriter, writer_from_config

console = Console(highlight=False)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _build_writer(log_path: str | None) -> LogWriter:
    """Writer from config, with --log taking priority over config log_path."""
    cfg = load_config()
    if log_path:
        cfg["log_path"] = log_path
    return writer_from_config(cfg)


def _severity_of(line: str) -> Severity:
    """Severity of a stored entry, judged by its prefix."""
    head, sep, _ = line.partition(": ")
    if sep:
        for sev in Severity:
            if sev is not Severity.NONE and sev.label == head:
                return sev
    return Severity.NONE


def _tail(path: Path, count: int) -> list[str]:
    with path.open(encoding="utf-8", errors="replace") as f:
        return [line.rstrip("\n") for line in deque(f, maxlen=count)]


# ---------------------------------------------------------------------------
# Main command group
# ---------------------------------------------------------------------------

@click.group()
@click.option(
    "--log", "log_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Log file to use instead of the configured one.",
)
@click.option("--debug", is_flag=True, default=False, help="Show applog's own diagnostics.")
@click.version_option(__version__, prog_name="applog")
@click.pass_context
def main(ctx: click.Context, log_path: str | None, debug: bool) -> None:
    """applog: shared rolling log file with severity tags."""
    writer = _build_writer(log_path)
    setup_logging(debug=debug, writer=writer)
    ctx.ensure_object(dict)
    ctx.obj["writer"] = writer
    ctx.call_on_close(writer.close)
    ctx.call_on_close(teardown_logging)


@main.command(name="write")
@click.option(
    "-s", "--severity",
    type=click.Choice(SEVERITY_NAMES, case_sensitive=False),
    default=Severity.INFO.label,
    show_default=True,
    help="Entry severity. 'None' writes the message without a prefix.",
)
@click.argument("fmt", metavar="FORMAT")
@click.argument("args", nargs=-1)
@click.pass_context
def write_cmd(ctx: click.Context, severity: str, fmt: str, args: tuple[str, ...]) -> None:
    """Append one entry. ARGS fill {0}, {1}, ... placeholders in FORMAT."""
    writer: LogWriter = ctx.obj["writer"]
    try:
        writer.write(Severity.parse(severity), fmt, *args)
    except LogError as exc:
        console.print(f"  [red bold]Error:[/red bold] {escape(str(exc))}")
        sys.exit(1)


@main.command()
@click.option("-n", "--lines", "count", type=click.IntRange(min=1), default=20, show_default=True)
@click.pass_context
def show(ctx: click.Context, count: int) -> None:
    """Print the last lines of the log, coloured by severity."""
    writer: LogWriter = ctx.obj["writer"]
    if not writer.path.exists():
        console.print(f"  [dim]No log yet at {escape(str(writer.path))}[/dim]")
        return
    try:
        lines = _tail(writer.path, count)
    except OSError as exc:
        console.print(f"  [red bold]Error:[/red bold] {escape(str(exc))}")
        sys.exit(1)

    current = Severity.NONE
    for line in lines:
        if line.startswith("--------"):
            current = Severity.NONE
            console.print(f"[dim]{escape(line)}[/dim]")
            continue
        # Indented lines continue the previous entry.
        if not line.startswith(" "):
            current = _severity_of(line)
        if current is Severity.NONE:
            console.print(escape(line))
        else:
            console.print(f"[{current.color}]{escape(line)}[/{current.color}]")


@main.command()
@click.pass_context
def path(ctx: click.Context) -> None:
    """Print the resolved log file path."""
    click.echo(str(ctx.obj["writer"].path))


@main.command(name="config")
def config_cmd() -> None:
    """Show the effective configuration."""
    cfg = load_config()
    console.print(f"  [dim]{escape(str(CONFIG_PATH))}[/dim]")
    for key, meta in DEFAULTS.items():
        console.print(f"  [bold]{key}[/bold] = {escape(repr(cfg.get(key)))}")
        console.print(f"    [dim]{escape(meta['description'])}[/dim]")


@main.command(name="debug")
@click.argument("message")
@click.argument("args", nargs=-1)
def debug_cmd(message: str, args: tuple[str, ...]) -> None:
    """Send one DEBUG: line to the platform debug output."""
    channel = get_channel()
    if not channel.enabled:
        console.print("  [dim]Debug channel is disabled.[/dim]")
        return
    try:
        channel.write_line(message, *args)
    except LogError as exc:
        console.print(f"  [red bold]Error:[/red bold] {escape(str(exc))}")
        sys.exit(1)
