"""autocommit CLI — Typer application: the commit workflow plus config management."""

from __future__ import annotations

import os
import shlex
import subprocess
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from autocommit import __version__

app = typer.Typer(
    name="autocommit",
    help="Draft a conventional commit message from your staged changes with an LLM.",
    add_completion=False,
    no_args_is_help=False,
)

config_app = typer.Typer(
    name="config",
    help="Create, inspect, and edit the config file.",
    add_completion=False,
)
app.add_typer(config_app, name="config")

console = Console(stderr=True)


def _config_override(ctx: typer.Context, value: Optional[str]) -> Optional[str]:
    """A --config given to a subcommand wins over one given to the main command."""
    if value:
        return value
    return (ctx.obj or {}).get("config_path")


def _default_editor() -> str:
    if editor := os.environ.get("EDITOR"):
        return editor
    return "notepad" if os.name == "nt" else "vi"


# ── config ────────────────────────────────────────────────────────────────────


@config_app.callback(invoke_without_command=True)
def config_main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Open the config file in $EDITOR (or run a config subcommand)."""
    if config:
        ctx.obj = {**(ctx.obj or {}), "config_path": config}
    if ctx.invoked_subcommand is None:
        edit(ctx, config=None)


@config_app.command()
def show(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Print the active configuration."""
    from autocommit.config.loader import ConfigError, get_config_path, load_config
    from autocommit.providers.registry import build_registry

    config_path = get_config_path(_config_override(ctx, config))
    console.print(f"[bold]Config file:[/bold] {config_path}")
    if not config_path.is_file():
        console.print(
            "  Status: [red]Not created[/red] (run 'autocommit config init' to create)"
        )
        raise typer.Exit(code=0)
    console.print("  Status: [green]Exists[/green]")

    try:
        cfg = load_config(str(config_path))
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    registry = build_registry()
    console.print()
    console.print(f"[bold]Default provider:[/bold] {cfg.default_provider}")
    if cfg.system_prompt.strip():
        console.print(f"[bold]System prompt:[/bold] {escape(cfg.system_prompt.strip())}")
    else:
        console.print("[bold]System prompt:[/bold] [dim](built-in default)[/dim]")

    console.print()
    console.print("[bold]Providers:[/bold]")
    if not cfg.providers:
        console.print("  [dim]none configured[/dim]")
    for provider in cfg.providers:
        provider_cls = registry.get(provider.name)
        placeholder = provider_cls.api_key_placeholder if provider_cls else ""
        model = provider.model or (provider_cls.default_model if provider_cls else "")
        key_status = (
            "[green]✓ set[/green]"
            if provider.has_api_key(placeholder)
            else "[red]✗ not set[/red]"
        )
        marker = "*" if provider.name == cfg.default_provider else " "
        console.print(
            f" {marker} [cyan]{provider.name}[/cyan]  model={model or '-'}  API key: {key_status}"
        )


@config_app.command()
def path(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Print where the config file lives."""
    from autocommit.config.loader import get_config_path

    config_path = get_config_path(_config_override(ctx, config))
    print(config_path)
    if config_path.is_file():
        console.print("  Status: [green]Exists[/green]")
    else:
        console.print(
            "  Status: [red]Not created[/red] (run 'autocommit config init' to create)"
        )


@config_app.command()
def init(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Write a starter config.toml."""
    from autocommit.config.defaults import render_default_toml
    from autocommit.config.loader import get_config_path

    config_path = get_config_path(_config_override(ctx, config))
    if config_path.exists() and not force:
        console.print(f"[yellow]⚠[/yellow]  Config already exists at {config_path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(render_default_toml(), encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


@config_app.command()
def edit(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Open the config file in $EDITOR, creating it first if needed."""
    from autocommit.config.defaults import render_default_toml
    from autocommit.config.loader import ConfigError, get_config_path, load_config

    config_path = get_config_path(_config_override(ctx, config))
    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(render_default_toml(), encoding="utf-8")
        console.print(f"[green]✓[/green] Created {config_path}")

    editor = _default_editor()
    try:
        subprocess.run([*shlex.split(editor), str(config_path)], check=False)
    except FileNotFoundError as exc:
        console.print(f"[bold red]Error:[/bold red] editor not found: {editor}")
        raise typer.Exit(code=1) from exc

    try:
        load_config(str(config_path))
    except ConfigError as exc:
        console.print(f"[yellow]⚠[/yellow]  Config is not valid: {exc}")


# ── main ──────────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"autocommit {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    add: bool = typer.Option(False, "--add", "-a", help="Stage all changes without asking"),
    push: bool = typer.Option(False, "--push", "-p", help="Push after committing without asking"),
    accept: bool = typer.Option(False, "--accept", "-y", help="Commit the generated message without review"),
    provider: Optional[str] = typer.Option(None, "--provider", help="Provider to use instead of the default"),
    model: Optional[str] = typer.Option(None, "--model", help="Model to use instead of the configured one"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config file"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Print debug output to stderr"),
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """autocommit — stage, describe, commit, and push in one step."""
    ctx.obj = {"config_path": config}
    if ctx.invoked_subcommand is not None:
        return

    from autocommit.output.terminal import make_debug_log
    from autocommit.workflow import WorkflowController, WorkflowOptions

    options = WorkflowOptions(
        auto_add=add,
        auto_push=push,
        auto_accept=accept,
        provider=provider,
        model=model,
        config_path=config,
    )
    debug_log = make_debug_log(console) if debug else None

    controller = WorkflowController(options, err_console=console, debug_log=debug_log)
    raise typer.Exit(code=controller.run())
