"""`new-release <rust-repo>`: bump version, update changelog, open the release PR."""

from __future__ import annotations

import sys

from release_tooling.cli.parse_common import parse_tool_argv, run_guarded
from release_tooling.prompt import console_confirm
from release_tooling.release import run_prepare

USAGE = "Usage: new-release <path-to-rust-repo> [--config PATH] [--verbose]  (run inside the cargo checkout)"


def run_release_argv(argv: list[str] | None = None) -> int:
    """Parse argv (default sys.argv[1:]) and run. Returns exit code."""
    if argv is None:
        argv = sys.argv[1:]
    if argv and argv[0] in ("-h", "--help"):
        print(USAGE, file=sys.stderr)
        return 0

    def body() -> int:
        rust_repo, config = parse_tool_argv("new-release", argv)
        return run_prepare(rust_repo, config, console_confirm)

    return run_guarded(body)


def main() -> None:
    sys.exit(run_release_argv())
