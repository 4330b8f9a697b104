"""Confirmation prompts behind a small callable interface so tools run without a terminal in tests."""

from __future__ import annotations

from typing import Protocol

import click

from release_tooling.errors import Aborted


class Confirm(Protocol):
    def __call__(self, prompt: str, default: bool) -> bool: ...


def console_confirm(prompt: str, default: bool) -> bool:
    """Ask on the terminal: [Y/n] or [y/N] depending on default."""
    return click.confirm(prompt, default=default, err=True)


def require(confirm: Confirm, prompt: str, default: bool = True) -> None:
    """Raise Aborted unless the user confirms."""
    if not confirm(prompt, default):
        raise Aborted(prompt)
