"""GitHub REST calls for milestoning: read/set an issue's milestone, create-or-find a milestone."""

from __future__ import annotations

import base64
import json
import logging
import socket
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from release_tooling.errors import GitHubAPIError, ReleaseToolError

log = logging.getLogger(__name__)

# GitHub answers a duplicate milestone title with 422 Unprocessable Entity.
MILESTONE_EXISTS_STATUS = 422


def basic_auth(user: str, token: str) -> str:
    """base64("user:token") for an Authorization: Basic header."""
    return base64.b64encode(f"{user}:{token}".encode()).decode()


class GitHubClient:
    """Issues and milestones of one repository (owner/repo)."""

    def __init__(
        self,
        owner: str,
        repo: str,
        auth: str,
        api: str = "https://api.github.com",
        timeout: float | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.auth = auth
        self.api = api.rstrip("/")
        self.timeout = timeout

    @property
    def repo_api(self) -> str:
        return f"{self.api}/repos/{self.owner}/{self.repo}"

    def _request(self, method: str, url: str, body: dict[str, Any] | None = None) -> Any:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "Authorization": f"Basic {self.auth}",
            "User-Agent": "release-tooling",
        }
        data = None
        if body is not None:
            data = json.dumps(body).encode()
            headers["Content-Type"] = "application/json"
        req = Request(url, data=data, headers=headers, method=method)
        log.debug("%s %s", method, url)
        try:
            timeout = socket._GLOBAL_DEFAULT_TIMEOUT if self.timeout is None else self.timeout
            with urlopen(req, timeout=timeout) as response:
                raw = response.read().decode()
        except HTTPError as e:
            err_body = e.read().decode(errors="replace") if e.fp is not None else ""
            raise GitHubAPIError(url, e.code, err_body) from e
        except URLError as e:
            msg = f"{method} {url} failed"
            raise ReleaseToolError(msg) from e
        try:
            return json.loads(raw) if raw else None
        except json.JSONDecodeError as e:
            msg = f"{url} returned invalid JSON"
            raise ReleaseToolError(msg) from e

    def current_milestone(self, pr_num: int) -> tuple[int, str] | None:
        """Return (milestone_number, milestone_title), or None when the PR has no milestone."""
        pr = self._request("GET", f"{self.repo_api}/issues/{pr_num}")
        milestone = (pr or {}).get("milestone")
        if not milestone:
            return None
        return int(milestone["number"]), str(milestone["title"])

    def set_milestone(self, pr_num: int, milestone_num: int) -> None:
        self._request("PATCH", f"{self.repo_api}/issues/{pr_num}", {"milestone": milestone_num})

    def list_milestones(self) -> list[dict[str, Any]]:
        return self._request("GET", f"{self.repo_api}/milestones?state=all&per_page=100") or []

    def get_milestone_num(self, title: str) -> int:
        """Milestone number for title; creates it (closed) if it does not exist yet."""
        try:
            created = self._request(
                "POST",
                f"{self.repo_api}/milestones",
                {"title": title, "state": "closed"},
            )
        except GitHubAPIError as e:
            if e.status != MILESTONE_EXISTS_STATUS:
                raise
            for milestone in self.list_milestones():
                if milestone.get("title") == title:
                    return int(milestone["number"])
            msg = f"could not find milestone {title}"
            raise ReleaseToolError(msg) from e
        number = (created or {}).get("number")
        if number is None:
            msg = f"creating milestone {title} returned no milestone number"
            raise ReleaseToolError(msg)
        log.info("created milestone %s (#%s)", title, number)
        return int(number)
