"""CHANGELOG.md generation: release dates, compare-link anchors, PR link stubs.

The changelog starts with `# Changelog`, newest release first. Only the top
(nightly) section links to HEAD: `[<hash>...HEAD](.../compare/<hash>...HEAD)`,
where <hash> is the commit the current beta branched from. Preparing a release
turns that link into `<hash>...rust-1.N.0`, adds the beta PRs not yet listed to
that section, and inserts a new nightly section on top.
"""

from __future__ import annotations

import datetime
import logging
import re
from collections.abc import Iterable

from release_tooling.changes import DEFAULT_REPO_URL, PullRequest, commits_in_log
from release_tooling.errors import ChangelogError, LogParseError, ReleaseToolError
from release_tooling.git import Git

log = logging.getLogger(__name__)

CHANGELOG_HEADING = "# Changelog\n"
ADDED_MARKER = "### Added\n"
HEAD_ANCHOR_RE = re.compile(r"([a-f0-9]+)\.\.\.HEAD")

RELEASE_EPOCH = datetime.date(2015, 5, 15)
RELEASE_CADENCE_DAYS = 42


def next_nightly_date(
    today: datetime.date,
    epoch: datetime.date = RELEASE_EPOCH,
    cadence_days: int = RELEASE_CADENCE_DAYS,
) -> str:
    """Release date (YYYY-MM-DD) of the version now entering nightly."""
    releases = (today - epoch).days // cadence_days
    next_nightly = epoch + datetime.timedelta(days=(releases + 2) * cadence_days - 1)
    return next_nightly.isoformat()


def find_anchor_hash(changelog: str) -> str:
    """The shared `<hash>...HEAD` anchor. Exactly two identical anchors are required."""
    matches = list(HEAD_ANCHOR_RE.finditer(changelog))
    if len(matches) != 2:
        msg = f"expected 2 `<hash>...HEAD` links in changelog, found {len(matches)}"
        raise ChangelogError(msg)
    if matches[0].group(0) != matches[1].group(0):
        msg = f"changelog links disagree: {matches[0].group(0)} vs {matches[1].group(0)}"
        raise ChangelogError(msg)
    return matches[0].group(1)


def retarget_anchor(changelog: str, anchor_hash: str, branch: str) -> str:
    """Replace every `<hash>...HEAD` with `<anchor_hash>...<branch>`."""
    return HEAD_ANCHOR_RE.sub(lambda _m: f"{anchor_hash}...{branch}", changelog)


def to_links(prs: Iterable[PullRequest]) -> str:
    return "".join(f"- {pr.description} \n  [#{pr.number}]({pr.url})\n" for pr in prs)


def partition_documented(
    changelog: str,
    prs: Iterable[PullRequest],
) -> tuple[list[PullRequest], list[PullRequest]]:
    """Split prs into (new, already documented) by looking for `[#N]` in changelog."""
    new: list[PullRequest] = []
    dupes: list[PullRequest] = []
    for pr in prs:
        (dupes if f"[#{pr.number}]" in changelog else new).append(pr)
    return new, dupes


def find_prs(
    repo: Git,
    changelog: str,
    start: str,
    end: str,
    repo_url: str = DEFAULT_REPO_URL,
) -> list[PullRequest]:
    """PRs merged on the first-parent range start...end that the changelog does not mention yet."""
    range_spec = f"{start}...{end}"
    text = repo.stdout("log", "--first-parent", range_spec)
    try:
        prs = commits_in_log(text, repo_url)
    except LogParseError as e:
        msg = f"failed on `git log --first-parent {range_spec}`"
        raise ReleaseToolError(msg) from e
    new, dupes = partition_documented(changelog, prs)
    for pr in dupes:
        log.info("skipping PR #%s, already documented", pr.number)
    return new


def insert_beta_links(changelog: str, links: str) -> str:
    """Insert links just before the first `### Added` (the previous nightly section)."""
    idx = changelog.find(ADDED_MARKER)
    if idx < 0:
        msg = f"couldn't find {ADDED_MARKER.strip()!r} in changelog"
        raise ChangelogError(msg)
    return changelog[:idx] + links + changelog[idx:]


def nightly_section(
    cargo_minor: int,
    date: str,
    short_hash: str,
    links: str,
    repo_url: str = DEFAULT_REPO_URL,
) -> str:
    return (
        f"\n## Cargo 1.{cargo_minor} ({date})\n"
        f"[{short_hash}...HEAD]({repo_url}/compare/{short_hash}...HEAD)\n"
        "\n"
        f"{links}\n"
        "\n"
        "### Added\n"
        "\n"
        "### Changed\n"
        "\n"
        "### Fixed\n"
        "\n"
        "### Nightly only\n"
        "\n"
    )


def insert_nightly_section(changelog: str, section: str) -> str:
    """Insert section right after the `# Changelog` heading."""
    if not changelog.startswith(CHANGELOG_HEADING):
        msg = f"changelog does not start with {CHANGELOG_HEADING.strip()!r}"
        raise ChangelogError(msg)
    n = len(CHANGELOG_HEADING)
    return changelog[:n] + section + changelog[n:]
