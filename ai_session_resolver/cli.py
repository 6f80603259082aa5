"""
Thin CLI layer - loads an event log and delegates to the resolvers.

No resolution logic lives here: every command is load, call one library
function, render.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from .body import copy_body_or_none, has_copiable_content
from .content import resolve_content_near
from .formatters import get_formatter
from .loader import load_events
from .models import Event
from .resolver import resolve_path_around, resolve_path_near, scan_event_paths

app = typer.Typer(
    help=(
        "Resolve file paths and file contents from recorded AI coding-agent sessions.\n\n"
        "An event log is a JSON list (or JSONL file) of session events: user/assistant turns "
        "holding text, reasoning, tool invocations and tool results. Every command reads one "
        "log and answers a question about the event at --index.\n\n"
        "Override the config file location with AI_SESSION_RESOLVER_CONFIG."
    ),
)
config_app = typer.Typer(
    help=(
        "View the ai_session_resolver config file.\n\n"
        "Config file location (priority order):\n\n"
        "  1. --config CLI flag\n"
        "  2. AI_SESSION_RESOLVER_CONFIG env var\n"
        "  3. OS default: ~/Library/Application Support/ai_session_resolver/config.json (macOS)\n"
        "               : ~/.config/ai_session_resolver/config.json (Linux)"
    ),
)
app.add_typer(config_app, name="config", rich_help_panel="Configuration")

console = Console()
err_console = Console(stderr=True)

#: Values used when neither the command line nor the config file sets them.
DEFAULT_CONFIG = {
    "format": "table",
    "around": False,
}

_FORMATS = ("table", "json", "plain")

# Module-level overrides set by global options
_g_config_path: Optional[str] = None
_config_cache: Optional[dict] = None  # lazily loaded, reset per process


def _get_config_file_path() -> Path:
    """Config file path: --config flag > AI_SESSION_RESOLVER_CONFIG env > typer.get_app_dir default."""
    if _g_config_path:
        return Path(_g_config_path).expanduser()
    env_val = os.getenv("AI_SESSION_RESOLVER_CONFIG")
    if env_val:
        return Path(env_val).expanduser()
    return Path(typer.get_app_dir("ai_session_resolver")) / "config.json"


def load_config() -> dict:
    """Load app config from JSON file. Returns empty dict if not found or unreadable.

    Supported keys (all optional):

    - ``format`` (string): default output format, one of ``table``, ``json``, ``plain``.
    - ``around`` (bool): make ``aisr path`` fall back to later events by default.

    Example ``config.json``::

        {
            "format": "json",
            "around": true
        }
    """
    global _config_cache
    if _config_cache is not None:
        return _config_cache

    config_file = _get_config_file_path()
    if config_file.exists():
        try:
            with open(config_file, encoding="utf-8") as f:
                loaded = json.load(f)
            _config_cache = loaded if isinstance(loaded, dict) else {}
        except (json.JSONDecodeError, OSError) as exc:
            err_console.print(f"[yellow]Warning: could not load config {config_file}: {exc}[/yellow]")
            _config_cache = {}
    else:
        _config_cache = {}

    return _config_cache


def _config_value(key: str, cli_value=None):
    """CLI option > config file > DEFAULT_CONFIG."""
    if cli_value is not None:
        return cli_value
    return load_config().get(key, DEFAULT_CONFIG[key])


def _resolve_format(cli_value: Optional[str]) -> str:
    fmt = str(_config_value("format", cli_value)).lower()
    if fmt not in _FORMATS:
        err_console.print(f"[red]Unknown format:[/red] {fmt}  (choose from {', '.join(_FORMATS)})")
        raise typer.Exit(code=2)
    return fmt


# ── Root app callback (global options) ────────────────────────────────────────

@app.callback(invoke_without_command=True)
def app_callback(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(
        None, "--config",
        help=(
            "Path to the ai_session_resolver config JSON file. "
            "Default: OS config dir / ai_session_resolver / config.json. "
            "Also overridable via AI_SESSION_RESOLVER_CONFIG env var."
        ),
        envvar="AI_SESSION_RESOLVER_CONFIG",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Log resolver decisions to stderr.",
    ),
) -> None:
    global _g_config_path, _config_cache
    if config != _g_config_path:
        _g_config_path = config
        _config_cache = None  # invalidate cache when path changes
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


# ── Shared helpers ────────────────────────────────────────────────────────────

def _load(log: Path) -> List[Event]:
    try:
        return load_events(log)
    except ValueError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)


def _check_index(events: List[Event], index: int) -> None:
    if not events:
        err_console.print("[yellow]Event log is empty[/yellow]")
        raise typer.Exit(code=1)
    if index >= len(events):
        err_console.print(f"[red]Index {index} out of range.[/red] Log has {len(events)} events (0–{len(events) - 1})")
        raise typer.Exit(code=2)


def _emit(text: str) -> None:
    """Write to stdout as-is (no Rich markup processing: content may contain brackets)."""
    sys.stdout.write(text if text.endswith("\n") else text + "\n")


_LOG_ARG = typer.Argument(..., help="Event log file (.json list of events, or .jsonl one event per line).")
_INDEX_OPT = typer.Option(0, "--index", "-i", min=0, help="Pivot event index (0-based).")
_FORMAT_OPT = typer.Option(None, "--format", "-f", help="Output format: table, json, plain. Default from config, else table.")


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("path")
def path_cmd(
    log: Path = _LOG_ARG,
    index: int = _INDEX_OPT,
    around: Optional[bool] = typer.Option(
        None, "--around/--backward-only",
        help="Also search later events when nothing is found at or before --index.",
    ),
    fmt: Optional[str] = _FORMAT_OPT,
) -> None:
    """Show the file path the session is discussing at --index.

    Checks the event at --index, then earlier events. Hits from other events
    are reported with source 'history'.

    Examples:
        aisr path session.json --index 12
        aisr path session.jsonl -i 3 --around --format json
    """
    output = _resolve_format(fmt)
    events = _load(log)
    _check_index(events, index)

    resolver = resolve_path_around if _config_value("around", around) else resolve_path_near
    result = resolver(events, index)
    if result is None:
        err_console.print(f"[yellow]No file path found near event {index}[/yellow]")
        raise typer.Exit(code=1)
    _emit(get_formatter(output).format(result))


@app.command("content")
def content_cmd(
    log: Path = _LOG_ARG,
    target: str = typer.Argument(..., help="File path to recover, e.g. src/app.ts (matched case-insensitively, leading ./ or / ignored)."),
    index: int = _INDEX_OPT,
    fmt: Optional[str] = _FORMAT_OPT,
) -> None:
    """Show the content of TARGET as of --index.

    Uses the nearest write/edit of TARGET at or before --index, else the
    first one after it.

    Examples:
        aisr content session.json src/app.ts --index 40 --format plain > app.ts
    """
    output = _resolve_format(fmt)
    events = _load(log)
    _check_index(events, index)

    result = resolve_content_near(events, target, index)
    if result is None:
        err_console.print(f"[yellow]No content found for[/yellow] {target} [yellow]near event {index}[/yellow]")
        raise typer.Exit(code=1)
    _emit(get_formatter(output).format(result))


@app.command("copy")
def copy_cmd(
    log: Path = _LOG_ARG,
    index: int = _INDEX_OPT,
) -> None:
    """Print the copyable body of the event at --index.

    Text, commands, file paths, search patterns and tool output are joined
    with blank lines; images and structural payloads are left out.
    """
    events = _load(log)
    _check_index(events, index)

    event = events[index]
    body = copy_body_or_none(event) if has_copiable_content(event) else None
    if body is None:
        err_console.print(f"[yellow]Event {index} has no copyable content[/yellow]")
        raise typer.Exit(code=1)
    _emit(body)


@app.command("scan")
def scan_cmd(
    log: Path = _LOG_ARG,
    fmt: Optional[str] = _FORMAT_OPT,
) -> None:
    """Resolve a path for every event on its own (no history lookup).

    Examples:
        aisr scan session.json
        aisr scan session.jsonl --format json
    """
    output = _resolve_format(fmt)
    events = _load(log)
    if not events:
        err_console.print("[yellow]Event log is empty[/yellow]")
        raise typer.Exit(code=1)

    rows = scan_event_paths(events)
    resolved = sum(1 for row in rows if row.resolution is not None)
    _emit(get_formatter(output, title=f"Event paths ({len(rows)} events)").format_many(rows))
    if output == "table":
        console.print(f"\n[bold]Resolved {resolved} of {len(rows)} events[/bold]")


# ── Config commands ───────────────────────────────────────────────────────────

@config_app.command("path")
def config_path() -> None:
    """Print the config file location in use."""
    _emit(str(_get_config_file_path()))


@config_app.command("show")
def config_show() -> None:
    """Print the effective configuration (defaults merged with the config file)."""
    effective = dict(DEFAULT_CONFIG)
    effective.update(load_config())
    _emit(json.dumps(effective, indent=2))


# ── Entry point ───────────────────────────────────────────────────────────────

def cli_main():
    """CLI entry point."""
    app()
