"""Milestone Cargo PRs by the Rust release that first shipped them.

Walks rust-lang/rust commits that moved the src/tools/cargo submodule, newest
first. Each move covers a range of cargo commits; their PRs get the milestone
named by src/version at that rust commit. The walk stops at the first
submodule update whose PRs are all milestoned already.
"""

from __future__ import annotations

import logging
import re
import sys
from pathlib import Path
from typing import Any

from release_tooling.changes import commits_in_log, pull_request_url
from release_tooling.config import repo_url
from release_tooling.errors import LogParseError, ReleaseToolError
from release_tooling.git import Git
from release_tooling.github import GitHubClient, basic_auth
from release_tooling.prompt import Confirm, require

log = logging.getLogger(__name__)

SUBPROJECT_RE = re.compile(r"Subproject commit ([0-9a-f]+)")


def fetch(rust_repo: Git) -> None:
    if not rust_repo.success("fetch", "upstream"):
        log.warning("git fetch upstream failed in %s; using existing refs", rust_repo.cwd)


def submodule_range(diff: str, commit: str) -> tuple[str, str]:
    """(before, after) submodule hashes from a `git show -p` of a submodule bump."""
    hashes = SUBPROJECT_RE.findall(diff)
    if len(hashes) != 2:
        msg = f"expected 2 'Subproject commit' lines in {commit}, found {len(hashes)}"
        raise LogParseError(msg)
    return hashes[0], hashes[1]


def version_at(rust_repo: Git, commit: str, version_file: str = "src/version") -> str:
    """Release version recorded in version_file at commit."""
    return rust_repo.stdout("show", f"{commit}:{version_file}")


def determine_milestones(
    client: GitHubClient,
    rust_repo: Git,
    config: dict[str, Any],
) -> dict[str, list[int]]:
    """Map release version -> PR numbers that still need that milestone."""
    subproject = config["subproject_path"]
    url = repo_url(config)
    hashes = rust_repo.stdout(
        "log",
        "--remotes=upstream",
        "-n",
        str(config["history_depth"]),
        "--format=%H",
        subproject,
    )
    to_milestone: dict[str, list[int]] = {}
    for commit in hashes.splitlines():
        diff = rust_repo.stdout("show", "-p", commit, subproject)
        start, end = submodule_range(diff, commit)
        version = version_at(rust_repo, commit, config["version_file"])
        range_spec = f"{start}...{end}"
        sub_log = rust_repo.sub(subproject).stdout("log", "--first-parent", range_spec)
        try:
            prs = commits_in_log(sub_log, url)
        except LogParseError as e:
            msg = f"failed on `git log --first-parent {range_spec}` for rust commit {commit}"
            raise ReleaseToolError(msg) from e
        if not prs:
            msg = f"no PRs found in {subproject} {range_spec} (rust commit {commit})"
            raise LogParseError(msg)

        found = False
        for pr in prs:
            current = client.current_milestone(pr.number)
            if current is not None:
                _number, title = current
                if title == version:
                    log.info("skipping PR %s, already milestoned to %s", pr.number, version)
                else:
                    log.warning(
                        "PR %s is already milestoned, but milestone %r does not match version %r",
                        pr.number,
                        title,
                        version,
                    )
                continue
            to_milestone.setdefault(version, []).append(pr.number)
            found = True
        if not found:
            break
    return to_milestone


def confirm_milestones(
    milestones: dict[str, list[int]],
    confirm: Confirm,
    url: str,
) -> None:
    print("milestoning:", file=sys.stderr)
    for version, prs in milestones.items():
        print(version, file=sys.stderr)
        for pr in prs:
            print(f"    {pull_request_url(pr, url)}", file=sys.stderr)
    require(confirm, "Ready to milestone?", default=True)


def set_milestones(client: GitHubClient, milestones: dict[str, list[int]]) -> None:
    for version, prs in milestones.items():
        milestone_num = client.get_milestone_num(version)
        for pr in prs:
            log.info("updating pr %s to milestone %s (%s)", pr, version, milestone_num)
            client.set_milestone(pr, milestone_num)


def run(
    rust_repo_path: Path,
    token: str,
    config: dict[str, Any],
    confirm: Confirm,
) -> int:
    """Fetch, find unmilestoned PRs, confirm, assign. Returns 0."""
    rust_repo = Git(rust_repo_path)
    client = GitHubClient(
        config["upstream_owner"],
        config["repo"],
        basic_auth(config["github_user"], token),
        api=config["github_api"],
    )
    fetch(rust_repo)
    milestones = determine_milestones(client, rust_repo, config)
    if not milestones:
        print("nothing to milestone", file=sys.stderr)
        return 0
    confirm_milestones(milestones, confirm, repo_url(config))
    set_milestones(client, milestones)
    return 0
