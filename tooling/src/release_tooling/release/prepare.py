"""Prepare a Cargo release PR: bump version, update changelog, push.

Run from inside a cargo checkout with `upstream` = rust-lang/cargo and `origin`
= your fork. The rust checkout (argument) is used to find which cargo commit
the rust beta branch ships. Every step that changes state asks first.
"""

from __future__ import annotations

import datetime
import logging
import re
import sys
from pathlib import Path
from typing import Any

from release_tooling.config import repo_url
from release_tooling.errors import LogParseError, ReleaseToolError
from release_tooling.git import Git, open_browser
from release_tooling.prompt import Confirm, require
from release_tooling.release.bump import Version, bump_manifest
from release_tooling.release.changelog import (
    find_anchor_hash,
    find_prs,
    insert_beta_links,
    insert_nightly_section,
    next_nightly_date,
    nightly_section,
    retarget_anchor,
    to_links,
)

log = logging.getLogger(__name__)

# `git ls-tree` mode/type of a submodule entry.
GITLINK_MODE = "160000"

_REMOTE_OWNER_RE = re.compile(r"[:/]([^/:]+)/[^/:]+?(?:\.git)?/?$")


def remote_owner(url: str) -> str:
    """Owner part of a GitHub remote URL (ssh or https)."""
    m = _REMOTE_OWNER_RE.search(url.strip())
    if not m:
        msg = f"cannot determine owner from remote url {url!r}"
        raise ReleaseToolError(msg)
    return m.group(1)


def check_status(cwd_repo: Git, config: dict[str, Any], confirm: Confirm) -> Git:
    """Resolve the checkout root, warn about local changes, verify remotes. Returns Git for the root."""
    repo = Git(Path(cwd_repo.stdout("rev-parse", "--show-toplevel")))
    if not repo.success("diff-index", "--quiet", "HEAD", "."):
        print("Working tree has changes.", file=sys.stderr)
        repo.success("status", "--porcelain")
        require(confirm, "Do you want to continue?", default=False)

    name = config["repo"]
    upstream = repo.config_value("remote.upstream.url")
    if not upstream.endswith(f"{config['upstream_owner']}/{name}.git"):
        msg = f"upstream does not appear to be {config['upstream_owner']}/{name}, was: {upstream}"
        raise ReleaseToolError(msg)
    origin = repo.config_value("remote.origin.url")
    if not origin.endswith(f"/{name}.git"):
        msg = f"origin does not appear to be {name}, was: {origin}"
        raise ReleaseToolError(msg)
    return repo


def _must(ok: bool, what: str) -> None:
    if not ok:
        msg = f"failed to {what}"
        raise ReleaseToolError(msg)


def create_branch(repo: Git, branch: str) -> None:
    """(Re)create branch from upstream/master, tracking origin/branch."""
    _must(repo.success("fetch", "upstream", "--tags"), "fetch upstream")
    if repo.success("show-ref", "--verify", "--quiet", f"refs/heads/{branch}"):
        log.info("removing %s branch", branch)
    log.info("creating %s branch", branch)
    _must(repo.success("checkout", "-B", branch, "upstream/master"), "create branch")
    _must(repo.success("config", f"branch.{branch}.remote", "origin"), "set remote origin")
    _must(
        repo.success("config", f"branch.{branch}.merge", f"refs/heads/{branch}"),
        "set branch merge",
    )


def wait_for_inspection(confirm: Confirm) -> None:
    print(
        "Check for any tests or rustc probing (usually target_info.rs) that can be updated.",
        file=sys.stderr,
    )
    require(confirm, "Ready to commit?", default=True)


def commit_bump(repo: Git, next_version: Version) -> None:
    _must(repo.success("commit", "-a", "-m", f"Bump to {next_version}"), "commit")


def rust_beta_hash(rust_repo: Git, subproject_path: str) -> str:
    """Cargo commit pinned by rust-lang/rust upstream/beta."""
    line = rust_repo.stdout("ls-tree", "upstream/beta", subproject_path)
    parts = line.split()
    if len(parts) != 4 or parts[0] != GITLINK_MODE or parts[1] != "commit" or parts[3] != subproject_path:
        msg = f"unexpected ls-tree output for {subproject_path}: {line!r}"
        raise LogParseError(msg)
    return parts[2]


def prep_changelog(
    repo: Git,
    rust_repo: Git,
    next_version: Version,
    config: dict[str, Any],
    confirm: Confirm,
    today: datetime.date | None = None,
) -> None:
    """Rewrite CHANGELOG.md for the new nightly/beta and walk the user through editing it."""
    beta_minor = next_version.minor - 2
    beta_version = f"rust-1.{beta_minor}.0"
    url = repo_url(config)

    _must(rust_repo.success("fetch", "upstream", "--tags"), "fetch rust upstream")
    last_beta_hash = rust_beta_hash(rust_repo, config["subproject_path"])
    last_branch_line = repo.stdout("show-ref", f"upstream/{beta_version}")
    last_branch_hash = last_branch_line.split()[0]

    if last_beta_hash != last_branch_hash:
        log.warning(
            "rust-lang/rust beta branch hash %s does not equal %s upstream/%s hash %s",
            last_beta_hash,
            config["repo"],
            beta_version,
            last_branch_hash,
        )
        print(
            f"This may happen if changes are pushed to {beta_version} shortly after the beta "
            "branch was created. Please carefully inspect to verify that this is the case.",
            file=sys.stderr,
        )
        require(confirm, "Do you want to continue?", default=True)
    start_of_beta_short_hash = last_beta_hash[:8]

    changelog_path = repo.cwd / config["changelog"]
    try:
        changelog = changelog_path.read_text()
    except OSError as e:
        msg = f"failed to read {changelog_path}"
        raise ReleaseToolError(msg) from e

    beta_hash_start = find_anchor_hash(changelog)
    changelog = retarget_anchor(changelog, beta_hash_start, beta_version)

    master_prs = find_prs(repo, changelog, start_of_beta_short_hash, "upstream/master", url)
    beta_prs = find_prs(repo, changelog, beta_hash_start, f"upstream/{beta_version}", url)

    changelog = insert_beta_links(changelog, to_links(beta_prs))
    date = next_nightly_date(
        today or datetime.date.today(),
        config["release_epoch"],
        config["release_cadence_days"],
    )
    changelog = insert_nightly_section(
        changelog,
        nightly_section(
            next_version.minor - 1,
            date,
            start_of_beta_short_hash,
            to_links(master_prs),
            url,
        ),
    )
    try:
        changelog_path.write_text(changelog)
    except OSError as e:
        msg = f"failed to write {changelog_path}"
        raise ReleaseToolError(msg) from e

    open_browser(config["browser"], [pr.url for pr in master_prs])
    print(
        f"Update the nightly version 1.{next_version.minor - 1}.0 and come back when finished.",
        file=sys.stderr,
    )
    require(confirm, "Ready to continue?", default=True)

    open_browser(config["browser"], [pr.url for pr in beta_prs])
    print(
        f"Update the beta version 1.{beta_minor}.0 and come back when finished.",
        file=sys.stderr,
    )
    require(confirm, "Ready to commit?", default=True)


def commit_changelog(repo: Git, next_version: Version) -> None:
    _must(
        repo.success("commit", "-a", "-m", f"Update changelog for 1.{next_version.minor - 2}"),
        "commit changelog",
    )


def create_pr(repo: Git, next_version: Version, config: dict[str, Any]) -> None:
    _must(repo.success("push"), "push")
    owner = remote_owner(repo.config_value("remote.origin.url"))
    open_browser(
        config["browser"],
        [f"https://github.com/{owner}/{config['repo']}/pull/new/{config['branch']}"],
    )
    # TODO: set the PR title through the GitHub API instead of printing it.
    print(f"title:\nBump to {next_version}, update changelog", file=sys.stderr)


def run(
    rust_repo_path: Path,
    config: dict[str, Any],
    confirm: Confirm,
    cwd: Path | None = None,
) -> int:
    """Full release preparation. Returns 0."""
    repo = check_status(Git(cwd or Path.cwd()), config, confirm)
    rust_repo = Git(rust_repo_path)
    create_branch(repo, config["branch"])
    next_version = bump_manifest(repo.cwd / config["manifest"])
    log.info("bumped %s to %s", config["manifest"], next_version)
    wait_for_inspection(confirm)
    commit_bump(repo, next_version)
    prep_changelog(repo, rust_repo, next_version, config, confirm)
    commit_changelog(repo, next_version)
    create_pr(repo, next_version, config)
    return 0
