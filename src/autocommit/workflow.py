"""Interactive commit workflow, driven as an explicit state machine.

Each handler performs one step and returns the next :class:`State`. The
controller owns the current :class:`StatusSnapshot` and replaces it wholesale
after anything that can change the working tree.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, List, Optional

from rich.console import Console

from autocommit.config.loader import ConfigError, load_config
from autocommit.config.schema import AutocommitConfig
from autocommit.generator import CommitMessageGenerator
from autocommit.git.adapter import GitError, GitRepo
from autocommit.git.diff import MAX_DIFF_BYTES, decode_diff, truncate_diff
from autocommit.git.models import StatusSnapshot
from autocommit.output import terminal
from autocommit.providers.base import ChatProvider
from autocommit.providers.errors import GenerationError, GenerationErrorKind
from autocommit.providers.registry import ProviderRegistry, build_registry

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

ERROR_MESSAGES: Dict[GenerationErrorKind, str] = {
    GenerationErrorKind.INVALID_API_KEY: "Invalid API key. Check your config file.",
    GenerationErrorKind.RATE_LIMITED: "Rate limit exceeded. Please try again later.",
    GenerationErrorKind.SERVER_ERROR: "Server error. Please try again later.",
    GenerationErrorKind.TIMEOUT: "Request timed out. Check your internet connection.",
    GenerationErrorKind.INVALID_RESPONSE: "Invalid response from API.",
    GenerationErrorKind.EMPTY_CONTENT: "LLM returned empty message.",
    GenerationErrorKind.API_ERROR: "API error occurred.",
    GenerationErrorKind.OUT_OF_MEMORY: "Out of memory.",
}

PRESENT_PROMPT = "(y)es / (r)egenerate / (e)dit / (q)uit [Y/r/e/q] "
EDIT_PROMPT = "Enter the commit message (finish with an empty line):"

ReadLine = Callable[[str], Optional[str]]
DebugLog = Callable[[str], None]


class State(str, Enum):
    CHECK_REPO = "check_repo"
    LOAD_CONFIG = "load_config"
    SHOW_STATUS = "show_status"
    ADD_DECISION = "add_decision"
    CHECK_STAGED = "check_staged"
    GENERATE = "generate"
    PRESENT = "present"
    COMMIT = "commit"
    PUSH_DECISION = "push_decision"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class WorkflowOptions:
    """Command-line flags. The boolean ones are OR-ed with the config file."""

    auto_add: bool = False
    auto_push: bool = False
    auto_accept: bool = False
    provider: Optional[str] = None
    model: Optional[str] = None
    config_path: Optional[str] = None


def error_message(kind: GenerationErrorKind) -> str:
    return ERROR_MESSAGES[kind]


def stdin_reader(console: Console) -> ReadLine:
    """Prompt on *console* and read one line from stdin; ``None`` on EOF."""

    def read_line(prompt: str) -> Optional[str]:
        console.print(prompt, end="", markup=False, highlight=False)
        line = sys.stdin.readline()
        if not line:
            console.print()
            return None
        return line.rstrip("\r\n")

    return read_line


class WorkflowController:
    """Runs one commit session from repo check to push."""

    def __init__(
        self,
        options: Optional[WorkflowOptions] = None,
        *,
        git: Optional[GitRepo] = None,
        config_loader: Optional[Callable[[], AutocommitConfig]] = None,
        registry: Optional[ProviderRegistry] = None,
        generator: Optional[CommitMessageGenerator] = None,
        read_line: Optional[ReadLine] = None,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
        debug_log: Optional[DebugLog] = None,
    ) -> None:
        self.options = options or WorkflowOptions()
        self.git = git or GitRepo()
        self.config_loader = config_loader or (lambda: load_config(self.options.config_path))
        self.registry = registry or build_registry()
        self.generator = generator or CommitMessageGenerator()
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)
        self.read_line = read_line or stdin_reader(self.console)
        self.debug_log = debug_log

        self.config: Optional[AutocommitConfig] = None
        self.provider: Optional[ChatProvider] = None
        self.snapshot: Optional[StatusSnapshot] = None
        self.message: Optional[str] = None
        self.exit_code = EXIT_OK
        self.history: List[State] = []

        self._handlers: Dict[State, Callable[[], State]] = {
            State.CHECK_REPO: self._check_repo,
            State.LOAD_CONFIG: self._load_config,
            State.SHOW_STATUS: self._show_status,
            State.ADD_DECISION: self._add_decision,
            State.CHECK_STAGED: self._check_staged,
            State.GENERATE: self._generate,
            State.PRESENT: self._present,
            State.COMMIT: self._commit,
            State.PUSH_DECISION: self._push_decision,
        }

    # ---- driver ----

    def run(self) -> int:
        """Run until DONE or ABORTED and return the process exit code."""
        state = State.CHECK_REPO
        try:
            while state not in (State.DONE, State.ABORTED):
                self.history.append(state)
                state = self._handlers[state]()
        except KeyboardInterrupt:
            self.console.print()
            self.console.print("[yellow]Interrupted, no further changes made.[/yellow]")
            self.history.append(State.ABORTED)
            return EXIT_INTERRUPTED
        self.history.append(state)
        return self.exit_code

    # ---- helpers ----

    def _debug(self, message: str) -> None:
        if self.debug_log is not None:
            self.debug_log(message)

    def _fatal(self, message: str, code: int = EXIT_FAILURE) -> State:
        terminal.render_error(message, self.err_console)
        self.exit_code = code
        return State.ABORTED

    def _refresh_status(self) -> bool:
        self.snapshot = self.git.status()
        return terminal.render_status(self.snapshot, self.err_console)

    @staticmethod
    def _is_yes(answer: Optional[str], default: bool) -> bool:
        if answer is None:
            return default
        answer = answer.strip()
        if not answer:
            return True
        return answer.lower() in ("y", "yes")

    # ---- states ----

    def _check_repo(self) -> State:
        if not self.git.is_repo():
            return self._fatal("Not a git repository (or any of the parent directories).")
        return State.LOAD_CONFIG

    def _load_config(self) -> State:
        try:
            config = self.config_loader()
        except ConfigError as exc:
            return self._fatal(str(exc), code=EXIT_CONFIG_ERROR)
        self.config = config

        name = self.options.provider or config.default_provider
        provider_cfg = config.get_provider(name)
        if provider_cfg is None:
            return self._fatal(f"Provider '{name}' not found in config.")
        provider_cls = self.registry.get(name)
        if provider_cls is None:
            known = ", ".join(self.registry.names())
            return self._fatal(f"Unsupported provider: {name} (available: {known})")
        if self.options.model:
            provider_cfg = replace(provider_cfg, model=self.options.model)
        if not provider_cfg.has_api_key(provider_cls.api_key_placeholder):
            return self._fatal(
                f"No API key set for provider '{name}'. "
                "Run 'autocommit config edit' to add one."
            )

        self.provider = self.registry.create(name, provider_cfg)
        self._debug(
            f"auto_add={self.options.auto_add or config.auto_add}, "
            f"auto_push={self.options.auto_push or config.auto_push}, "
            f"auto_accept={self.options.auto_accept}"
        )
        self._debug(f"provider={name}, model={self.provider.model}")
        return State.SHOW_STATUS

    def _show_status(self) -> State:
        self.console.print()
        try:
            has_changes = self._refresh_status()
        except GitError as exc:
            return self._fatal(str(exc))
        return State.ADD_DECISION if has_changes else State.DONE

    def _add_decision(self) -> State:
        count = self.snapshot.addable_count()
        if count == 0:
            return State.CHECK_STAGED

        if self.options.auto_add or self.config.auto_add:
            terminal.render_progress(f"Auto-adding {count} file(s)...", self.console)
        else:
            self.console.print()
            answer = self.read_line(f"{count} file(s) can be added. Add them? [Y/n] ")
            if answer is not None and answer.strip() in ("n", "N"):
                return State.CHECK_STAGED
            terminal.render_progress(f"Adding {count} file(s)...", self.console)

        try:
            self.git.add_all()
            self.console.print()
            self._refresh_status()
        except GitError as exc:
            return self._fatal(str(exc))
        return State.CHECK_STAGED

    def _check_staged(self) -> State:
        if self.snapshot.staged_count() == 0:
            self.console.print()
            self.console.print("No staged changes to commit.")
            return State.DONE
        return State.GENERATE

    def _generate(self) -> State:
        self.message = None
        try:
            diff = self.git.staged_diff()
        except GitError as exc:
            return self._fatal(str(exc))
        self._debug(f"Diff size: {len(diff)} bytes")
        if len(diff) > MAX_DIFF_BYTES:
            self._debug(f"Diff truncated to {MAX_DIFF_BYTES} bytes")

        self.err_console.print("[dim]Generating commit message...[/dim]")
        try:
            self.message = self.generator.generate(
                self.provider,
                decode_diff(truncate_diff(diff)),
                self.config.effective_system_prompt,
                debug_log=self.debug_log,
            )
        except GenerationError as exc:
            return self._fatal(error_message(exc.kind))
        terminal.render_message(self.message, self.console)
        return State.PRESENT

    def _present(self) -> State:
        if self.options.auto_accept:
            terminal.render_progress("Auto-accept enabled, committing...", self.console, "yellow")
            return State.COMMIT

        while True:
            self.console.print()
            answer = self.read_line(PRESENT_PROMPT)
            if answer is None:
                return self._user_quit()
            choice = answer.strip().lower()
            if choice in ("", "y", "yes"):
                return State.COMMIT
            if choice in ("r", "regenerate"):
                return State.GENERATE
            if choice in ("e", "edit"):
                self._edit_message()
                return State.COMMIT
            if choice in ("q", "quit"):
                return self._user_quit()
            self.console.print(f"Unknown choice: {answer.strip()}", markup=False)

    def _edit_message(self) -> None:
        self.console.print(EDIT_PROMPT)
        lines: List[str] = []
        while True:
            line = self.read_line("")
            if line is None or not line.strip():
                break
            lines.append(line)
        edited = "\n".join(lines).strip()
        if edited:
            self.message = edited
        else:
            self.console.print("[dim]Empty message, keeping the generated one.[/dim]")

    def _user_quit(self) -> State:
        self.console.print()
        self.console.print("[yellow]Aborted, no commit made.[/yellow]")
        self.exit_code = EXIT_OK
        return State.ABORTED

    def _commit(self) -> State:
        terminal.render_progress("Committing...", self.console)
        try:
            self.git.commit(self.message)
        except GitError as exc:
            return self._fatal(str(exc))
        terminal.render_progress("Committed successfully!", self.console)
        return State.PUSH_DECISION

    def _push_decision(self) -> State:
        should_push = self.options.auto_push or self.config.auto_push
        if should_push:
            self._debug("Auto-push enabled, skipping prompt")
        else:
            self.console.print()
            answer = self.read_line("Push to remote? [Y/n] ")
            should_push = self._is_yes(answer, default=self.config.push_on_eof)

        if not should_push:
            self._debug("Push skipped")
            return State.DONE

        terminal.render_progress("Pushing...", self.console)
        try:
            self.git.push()
        except GitError as exc:
            terminal.render_warning(f"Push failed: {exc}", self.err_console)
            return State.DONE
        terminal.render_progress("Pushed successfully!", self.console)
        return State.DONE
