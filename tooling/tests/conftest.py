"""Pytest fixtures for release tooling tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from release_tooling.config import resolve_release_config


class FakeGit:
    """Stands in for release_tooling.git.Git: canned answers keyed by the git argument tuple.

    stdout answers are strings; success answers are bools (default True).
    Every call is recorded as (cwd, args).
    """

    def __init__(
        self,
        cwd: Path | str = "/repo",
        stdout: dict[tuple[str, ...], str] | None = None,
        success: dict[tuple[str, ...], bool] | None = None,
        calls: list[tuple[Path, tuple[str, ...]]] | None = None,
    ) -> None:
        self.cwd = Path(cwd)
        self.stdout_answers = stdout if stdout is not None else {}
        self.success_answers = success if success is not None else {}
        self.calls = calls if calls is not None else []

    def stdout(self, *args: str) -> str:
        self.calls.append((self.cwd, args))
        return self.stdout_answers[args]

    def success(self, *args: str) -> bool:
        self.calls.append((self.cwd, args))
        return self.success_answers.get(args, True)

    def config_value(self, key: str) -> str:
        return self.stdout("config", key)

    def sub(self, path: str) -> FakeGit:
        return FakeGit(self.cwd / path, self.stdout_answers, self.success_answers, self.calls)


@pytest.fixture
def config() -> dict[str, Any]:
    return resolve_release_config(None)


@pytest.fixture
def always_yes() -> Callable[[str, bool], bool]:
    return lambda prompt, default: True


@pytest.fixture
def fake_git() -> type[FakeGit]:
    return FakeGit


def commit_block(sha: str, *message: str) -> str:
    """One `git log` (medium format) commit block with indented message lines."""
    lines = [f"commit {sha}", "Author: bors <bors@rust-lang.org>", "Date:   Mon Oct 19 10:00:00 2026 +0000", ""]
    lines.extend(f"    {m}" for m in message)
    lines.append("")
    return "\n".join(lines) + "\n"


@pytest.fixture
def make_log() -> Callable[..., str]:
    def _make(*blocks: tuple[str, ...]) -> str:
        return "".join(commit_block(b[0], *b[1:]) for b in blocks)

    return _make
