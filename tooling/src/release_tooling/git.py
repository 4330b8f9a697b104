"""Run git (and other programs) in an explicit directory.

Every call takes its working directory from the Git instance; the process cwd is
never changed. Exit status 0 is success; for `success()` status 1 means "no" and
anything else is fatal.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from release_tooling.errors import CommandError

log = logging.getLogger(__name__)


def _run(
    cmd: Sequence[str],
    cwd: Path | None = None,
    capture: bool = False,
) -> subprocess.CompletedProcess[str]:
    log.debug("running `%s` in %s", " ".join(cmd), cwd or ".")
    try:
        return subprocess.run(
            list(cmd),
            cwd=cwd,
            capture_output=capture,
            text=True,
        )
    except OSError as e:
        raise CommandError(cmd[0], list(cmd[1:])) from e


def run_stdout(cmd: Sequence[str], cwd: Path | None = None) -> str:
    """Run cmd and return its stripped stdout. Any non-zero exit is fatal."""
    r = _run(cmd, cwd=cwd, capture=True)
    if r.returncode != 0:
        raise CommandError(cmd[0], list(cmd[1:]), r.returncode)
    return (r.stdout or "").strip()


def run_success(cmd: Sequence[str], cwd: Path | None = None) -> bool:
    """Run cmd with inherited stdio. True on exit 0, False on exit 1, fatal otherwise."""
    r = _run(cmd, cwd=cwd)
    if r.returncode not in (0, 1):
        raise CommandError(cmd[0], list(cmd[1:]), r.returncode)
    return r.returncode == 0


class Git:
    """git bound to one repository directory."""

    def __init__(self, cwd: Path | str) -> None:
        self.cwd = Path(cwd)

    def __repr__(self) -> str:
        return f"Git({str(self.cwd)!r})"

    def stdout(self, *args: str) -> str:
        return run_stdout(["git", *args], cwd=self.cwd)

    def success(self, *args: str) -> bool:
        return run_success(["git", *args], cwd=self.cwd)

    def sub(self, path: str) -> Git:
        """Git for a subdirectory (e.g. a vendored submodule checkout)."""
        return Git(self.cwd / path)

    def config_value(self, key: str) -> str:
        return self.stdout("config", key)


def open_browser(browser: Sequence[str], urls: Sequence[str]) -> None:
    """Open urls with the configured browser command. A failing browser is fatal."""
    if not urls:
        return
    cmd = [*browser, *urls]
    if not run_success(cmd):
        raise CommandError(cmd[0], list(cmd[1:]), 1)
