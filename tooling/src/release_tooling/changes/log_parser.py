"""Parse `git log` output into the pull requests it merged.

Each commit block starts with a `commit <hash>` line. Message lines are the
indented ones; the first must be a merge line in one of two forms:

    Auto merge of #123 - someone:feat, r=reviewer     (bors; description is the next line)
    Merge pull request #123 from someone/feat          (GitHub merge; description is the next line)
    Add new flag (#123)                                (merge queue / squash; description is the line itself)

An unmatched first line fails the whole parse.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from release_tooling.errors import LogParseError

DEFAULT_REPO_URL = "https://github.com/rust-lang/cargo"

COMMIT_RE = re.compile(r"^commit ", re.MULTILINE)
MERGE_RE = re.compile(r"(?:Auto merge of|Merge pull request) #([0-9]+)|\(#([0-9]+)\)$")

_U32_MAX = 0xFFFFFFFF


class PullRequest(NamedTuple):
    number: int
    url: str
    description: str


def pull_request_url(number: int, repo_url: str = DEFAULT_REPO_URL) -> str:
    return f"{repo_url.rstrip('/')}/pull/{number}"


def _message_lines(block: str) -> list[str]:
    # git log indents message lines; headers (Author:, Date:, Merge:) are flush left.
    return [line.strip() for line in block.splitlines() if line.strip() and line.startswith(" ")]


def _parse_number(digits: str, commit: str) -> int:
    if not digits.isdigit():
        msg = f"cannot parse PR number {digits!r}\nhash: {commit}"
        raise LogParseError(msg)
    number = int(digits)
    if number == 0 or number > _U32_MAX:
        msg = f"PR number {digits} out of range\nhash: {commit}"
        raise LogParseError(msg)
    return number


def _parse_block(block: str, repo_url: str) -> PullRequest:
    commit = block.split(None, 1)[0]
    lines = _message_lines(block)
    if not lines:
        msg = f"commit has no message lines\nhash: {commit}"
        raise LogParseError(msg)
    first = lines[0]
    m = MERGE_RE.search(first)
    if m is None:
        msg = f'could not find "{MERGE_RE.pattern}" in line: {first}\nhash: {commit}'
        raise LogParseError(msg)

    if m.group(1) is not None:
        number = _parse_number(m.group(1), commit)
        description = lines[1] if len(lines) > 1 else ""
    else:
        number = _parse_number(m.group(2), commit)
        # Drop "(#N)"; the space before it goes with rstrip.
        description = (first[: m.start(2) - 2] + first[m.end(2) + 1 :]).rstrip()
    return PullRequest(number, pull_request_url(number, repo_url), description)


def commits_in_log(log: str, repo_url: str = DEFAULT_REPO_URL) -> list[PullRequest]:
    """Return one PullRequest per commit block in log order. Empty log -> []."""
    return [
        _parse_block(block, repo_url)
        for block in COMMIT_RE.split(log)
        if block.strip()
    ]
