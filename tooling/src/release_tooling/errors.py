"""Error types shared by the milestone and release tools, plus cause-chain reporting."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from typing import TextIO


class ReleaseToolError(Exception):
    """Base for every fatal error raised by release_tooling."""


class CommandError(ReleaseToolError):
    """A subprocess could not be spawned or exited with an unexpected status."""

    def __init__(self, program: str, args: list[str], returncode: int | None = None) -> None:
        self.program = program
        self.args_list = list(args)
        self.returncode = returncode
        cmdline = " ".join([program, *self.args_list])
        if returncode is None:
            msg = f"failed to spawn `{cmdline}`"
        else:
            msg = f"failed to run `{cmdline}`: exit status {returncode}"
        super().__init__(msg)


class LogParseError(ReleaseToolError):
    """Version-control output did not have the expected shape."""


class GitHubAPIError(ReleaseToolError):
    """Non-2xx response from the GitHub REST API."""

    def __init__(self, url: str, status: int, body: str = "") -> None:
        self.url = url
        self.status = status
        self.body = body
        super().__init__(f"{url} failed status {status}: {body}")


class VersionError(ReleaseToolError):
    """Manifest version missing, malformed, or outside the 0.x scheme."""


class ChangelogError(ReleaseToolError):
    """Changelog anchors missing or inconsistent."""


class ConfigError(ReleaseToolError):
    """Invalid value in the tool configuration."""


class Aborted(Exception):
    """The user declined a confirmation prompt. Not an error."""

    def __init__(self, prompt: str) -> None:
        self.prompt = prompt
        super().__init__(prompt)


def error_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield exc followed by its __cause__ (or implicit __context__) chain."""
    seen: set[int] = set()
    cur: BaseException | None = exc
    while cur is not None and id(cur) not in seen:
        seen.add(id(cur))
        yield cur
        if cur.__cause__ is not None:
            cur = cur.__cause__
        elif not cur.__suppress_context__:
            cur = cur.__context__
        else:
            cur = None


def report_error(exc: BaseException, stream: TextIO | None = None) -> None:
    """Print `error: ...` then one `caused by: ...` line per chained cause."""
    out = stream if stream is not None else sys.stderr
    for i, e in enumerate(error_chain(exc)):
        prefix = "error" if i == 0 else "caused by"
        print(f"{prefix}: {e}", file=out)
