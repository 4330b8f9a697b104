"""Shared CLI argument parsing (--config, --verbose) and top-level error handling."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from release_tooling.config import load_release_config
from release_tooling.errors import Aborted, ReleaseToolError, report_error


def parse_flags(
    argv: list[str],
    *specs: tuple[str, str, Any, Callable[[str], Any] | None],
) -> tuple[dict[str, Any], list[str]]:
    """Parse optional --flag value from argv in one pass.

    Each spec is (key, flag_str, default, converter).
    E.g. ("config", "--config", None, path_resolver).
    converter can be None for string values.
    Returns (dict of key -> value, remaining argv).
    """
    result: dict[str, Any] = {}
    for key, _flag, default, _converter in specs:
        result[key] = default() if callable(default) else default

    rest: list[str] = []
    i = 0
    while i < len(argv):
        matched = False
        for key, flag_str, _default, converter in specs:
            if argv[i] == flag_str and i + 1 < len(argv):
                result[key] = converter(argv[i + 1]) if converter else argv[i + 1]
                i += 2
                matched = True
                break
        if not matched:
            rest.append(argv[i])
            i += 1
    return result, rest


def path_resolver(s: str) -> Path:
    """Resolve a path argument to absolute Path (e.g. --config, rust repo)."""
    return Path(s).resolve()


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def parse_tool_argv(prog: str, argv: list[str]) -> tuple[Path, dict[str, Any]]:
    """Common shape of both tools: <rust-repo> [--config PATH] [--verbose]. Returns (rust_repo, config)."""
    verbose = "--verbose" in argv or "-v" in argv
    argv = [a for a in argv if a not in ("--verbose", "-v")]
    parsed, rest = parse_flags(argv, ("config", "--config", None, path_resolver))
    setup_logging(verbose)
    if not rest:
        msg = f"{prog}: expected path to rust repo as first argument"
        raise ReleaseToolError(msg)
    return path_resolver(rest[0]), load_release_config(parsed["config"])


def run_guarded(fn: Callable[[], int]) -> int:
    """Run a tool body; report errors with their cause chain. Returns the exit code."""
    try:
        return fn()
    except Aborted as e:
        print(f"aborted: {e.prompt}", file=sys.stderr)
        return 1
    except ReleaseToolError as e:
        report_error(e)
        return 1
