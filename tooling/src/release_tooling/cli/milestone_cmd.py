"""`milestone <rust-repo>`: milestone Cargo PRs shipped by rust-lang/rust submodule updates."""

from __future__ import annotations

import os
import sys

from release_tooling.cli.parse_common import parse_tool_argv, run_guarded
from release_tooling.errors import ReleaseToolError
from release_tooling.milestone import run_milestone
from release_tooling.prompt import console_confirm

USAGE = "Usage: milestone <path-to-rust-repo> [--config PATH] [--verbose]"


def run_milestone_argv(argv: list[str] | None = None) -> int:
    """Parse argv (default sys.argv[1:]) and run. Needs GITHUB_TOKEN. Returns exit code."""
    if argv is None:
        argv = sys.argv[1:]
    if argv and argv[0] in ("-h", "--help"):
        print(USAGE, file=sys.stderr)
        return 0

    def body() -> int:
        rust_repo, config = parse_tool_argv("milestone", argv)
        token = os.environ.get("GITHUB_TOKEN")
        if not token:
            msg = "GITHUB_TOKEN must be set"
            raise ReleaseToolError(msg)
        return run_milestone(rust_repo, token, config, console_confirm)

    return run_guarded(body)


def main() -> None:
    sys.exit(run_milestone_argv())
