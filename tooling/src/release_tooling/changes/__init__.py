"""Commit-log parsing shared by the milestone and release tools."""

from .log_parser import (
    DEFAULT_REPO_URL,
    PullRequest,
    commits_in_log,
    pull_request_url,
)

__all__ = [
    "DEFAULT_REPO_URL",
    "PullRequest",
    "commits_in_log",
    "pull_request_url",
]
