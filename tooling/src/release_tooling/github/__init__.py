"""GitHub REST client (issues, milestones)."""

from .client import GitHubClient, basic_auth

__all__ = ["GitHubClient", "basic_auth"]
