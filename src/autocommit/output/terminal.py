"""Rich terminal rendering: status sections, generated message, prompts, warnings."""

from __future__ import annotations

from typing import Callable

from rich.console import Console
from rich.markup import escape
from rich.text import Text

from autocommit.git.models import FileState, StatusSnapshot

_UNTRACKED_STYLE = "red"
_UNSTAGED_STYLE = "yellow"
_STAGED_STYLE = "green"


def _display_path(path: str, state: FileState) -> str:
    if state.is_renamed_or_copied() and state.original_path:
        return f"{state.original_path} -> {path}"
    return path


def _entry(code: str, style: str, label: str) -> Text:
    line = Text("  ")
    line.append(code, style=style)
    line.append(f" {label}")
    return line


def render_status(snapshot: StatusSnapshot, console: Console) -> bool:
    """Print Untracked / Unstaged / Staged sections. Returns ``has_changes``."""
    if not snapshot.has_changes():
        console.print("No changes to commit")
        return False

    sections = []
    untracked = [
        _entry("?", _UNTRACKED_STYLE, path) for path, _ in snapshot.iter_untracked()
    ]
    if untracked:
        sections.append(("Untracked:", untracked))

    unstaged = [
        _entry(state.unstaged.code, _UNSTAGED_STYLE, path)
        for path, state in snapshot.iter_unstaged()
    ]
    if unstaged:
        sections.append(("Unstaged:", unstaged))

    staged = [
        _entry(state.staged.code, _STAGED_STYLE, _display_path(path, state))
        for path, state in snapshot.iter_staged()
    ]
    if staged:
        sections.append(("Staged:", staged))

    for i, (title, lines) in enumerate(sections):
        if i:
            console.print()
        console.print(title)
        for line in lines:
            console.print(line)
    return True


def render_message(message: str, console: Console) -> None:
    console.print()
    console.print("[bold]Generated commit message:[/bold]")
    console.print(Text(message, style="cyan"))


def render_error(message: str, console: Console) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(message)}", soft_wrap=True)


def render_warning(message: str, console: Console) -> None:
    console.print(f"[yellow]Warning: {escape(message)}[/yellow]", soft_wrap=True)


def render_progress(message: str, console: Console, style: str = "green") -> None:
    console.print(f"[{style}]{escape(message)}[/{style}]")


def make_debug_log(console: Console) -> Callable[[str], None]:
    """Return a callable printing ``Debug: <message>`` lines to *console*."""

    def debug_log(message: str) -> None:
        console.print(f"[yellow]Debug:[/yellow] {escape(message)}")

    return debug_log
