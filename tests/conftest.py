"""Shared test fixtures — porcelain samples, configs, fakes, temp git repos."""

from __future__ import annotations

import io
import json
import subprocess
import textwrap
from pathlib import Path
from typing import List, Optional, Union

import pytest
from rich.console import Console

from autocommit.config.schema import AutocommitConfig, ProviderConfig
from autocommit.git.adapter import GitCommandFailed
from autocommit.git.models import StatusSnapshot
from autocommit.git.status_parser import parse_status
from autocommit.transport import HttpResponse


@pytest.fixture
def porcelain_mixed() -> str:
    """Staged, unstaged, untracked, and renamed entries."""
    return textwrap.dedent("""\
        # branch.oid 1234567890abcdef1234567890abcdef12345678
        # branch.head main
        1 M. N... 100644 100644 100644 abc1234 def5678 src/staged.py
        1 .M N... 100644 100644 100644 abc1234 def5678 src/unstaged.py
        1 MM N... 100644 100644 100644 abc1234 def5678 src/both.py
        2 R. N... 100644 100644 100644 abc1234 def5678 R95 src/new_name.py src/old_name.py
        ? notes.txt
    """)


@pytest.fixture
def porcelain_staged_only() -> str:
    return "1 A. N... 000000 100644 100644 0000000 abc1234 added.py\n"


@pytest.fixture
def porcelain_unstaged_only() -> str:
    return textwrap.dedent("""\
        1 .M N... 100644 100644 100644 abc1234 abc1234 README.md
        ? scratch.txt
    """)


@pytest.fixture
def snapshot_factory():
    """Build a StatusSnapshot from porcelain text."""
    return parse_status


@pytest.fixture
def provider_config() -> ProviderConfig:
    return ProviderConfig(name="groq", api_key="gsk-test-key", model="", endpoint="")


@pytest.fixture
def app_config(provider_config: ProviderConfig) -> AutocommitConfig:
    return AutocommitConfig(
        default_provider="groq",
        providers=[
            provider_config,
            ProviderConfig(name="openai", api_key="paste-key-here"),
            ProviderConfig(name="zai", api_key="zai-test-key"),
        ],
    )


def chat_body(content: str) -> bytes:
    body = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    return json.dumps(body).encode("utf-8")


@pytest.fixture
def chat_response():
    """Factory for a successful chat-completion body."""
    return chat_body


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeGit:
    """Stands in for GitRepo; status() walks through the given snapshots."""

    def __init__(
        self,
        snapshots: List[StatusSnapshot],
        *,
        is_repo: bool = True,
        diff: bytes = b"diff --git a/x b/x\n+change\n",
        commit_error: Optional[str] = None,
        push_error: Optional[str] = None,
    ) -> None:
        self._snapshots = list(snapshots)
        self._is_repo = is_repo
        self.diff = diff
        self.commit_error = commit_error
        self.push_error = push_error
        self.calls: List[str] = []
        self.commits: List[str] = []

    def is_repo(self) -> bool:
        self.calls.append("is_repo")
        return self._is_repo

    def status(self) -> StatusSnapshot:
        self.calls.append("status")
        if len(self._snapshots) > 1:
            return self._snapshots.pop(0)
        return self._snapshots[0]

    def add_all(self) -> None:
        self.calls.append("add_all")

    def staged_diff(self) -> bytes:
        self.calls.append("staged_diff")
        return self.diff

    def commit(self, message: str) -> None:
        self.calls.append("commit")
        if self.commit_error:
            raise GitCommandFailed(self.commit_error)
        self.commits.append(message)

    def push(self) -> None:
        self.calls.append("push")
        if self.push_error:
            raise GitCommandFailed(self.push_error)


class FakeGenerator:
    """Returns (or raises) the queued results in order; repeats the last one."""

    def __init__(self, results: List[Union[str, Exception]]) -> None:
        self._results = list(results)
        self.calls: List[dict] = []

    def generate(self, provider, diff, system_prompt, debug_log=None) -> str:
        self.calls.append(
            {"provider": provider, "diff": diff, "system_prompt": system_prompt}
        )
        result = self._results.pop(0) if len(self._results) > 1 else self._results[0]
        if isinstance(result, Exception):
            raise result
        return result


class ScriptedInput:
    """read_line replacement. ``None`` means EOF; an exception instance is raised."""

    def __init__(self, answers: List[Union[str, None, BaseException]]) -> None:
        self._answers = list(answers)
        self.prompts: List[str] = []

    def __call__(self, prompt: str) -> Optional[str]:
        self.prompts.append(prompt)
        if not self._answers:
            return None
        answer = self._answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer


class FakeTransport:
    """Records post_json calls and returns a canned response or raises."""

    def __init__(self, response: Union[HttpResponse, Exception]) -> None:
        self.response = response
        self.requests: List[dict] = []

    def post_json(self, url: str, body: bytes, auth_header: Optional[str] = None) -> HttpResponse:
        self.requests.append({"url": url, "body": body, "auth_header": auth_header})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture
def fake_git():
    return FakeGit


@pytest.fixture
def fake_generator():
    return FakeGenerator


@pytest.fixture
def scripted_input():
    return ScriptedInput


@pytest.fixture
def fake_transport():
    return FakeTransport


@pytest.fixture
def capture_console():
    """Return a (console, buffer) pair that records plain text output."""

    def _make():
        buffer = io.StringIO()
        console = Console(file=buffer, force_terminal=False, color_system=None, width=200)
        return console, buffer

    return _make


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    subprocess.run(
        ["git", "config", "user.email", "test@test.com"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "config", "user.name", "Test"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "config", "commit.gpgsign", "false"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    # Initial commit
    readme = tmp_path / "README.md"
    readme.write_text("# Test\n")
    subprocess.run(["git", "add", "."], cwd=tmp_path, capture_output=True, check=True)
    subprocess.run(
        ["git", "commit", "-m", "init"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    return tmp_path
