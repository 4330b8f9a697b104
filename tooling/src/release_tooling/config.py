"""Tool configuration: repository names, paths, browser, release cadence.

Defaults target rust-lang/cargo vendored in rust-lang/rust. Override any key in
release-tooling.yaml (or --config PATH); unknown keys are ignored.
"""

from __future__ import annotations

import datetime
import os
from pathlib import Path
from typing import Any

from release_tooling.errors import ConfigError

CONFIG_FILENAME = "release-tooling.yaml"

DEFAULT_RELEASE_CONFIG: dict[str, Any] = {
    "upstream_owner": "rust-lang",
    "repo": "cargo",
    "github_user": "ehuss",
    "github_api": "https://api.github.com",
    "subproject_path": "src/tools/cargo",
    "version_file": "src/version",
    "history_depth": 100,
    "manifest": "Cargo.toml",
    "changelog": "CHANGELOG.md",
    "branch": "version-bump",
    "browser": ["firefox", "-url"],
    # 1.0.0 release date
    "release_epoch": "2015-05-15",
    "release_cadence_days": 42,
}

_INT_KEYS = ("history_depth", "release_cadence_days")


def resolve_release_config(data: dict[str, Any] | None) -> dict[str, Any]:
    """Return config dict with defaults filled and values normalized."""
    out = dict(DEFAULT_RELEASE_CONFIG)
    if data:
        out.update({k: v for k, v in data.items() if k in out})

    browser = out["browser"]
    if isinstance(browser, str):
        browser = browser.split()
    if not browser:
        msg = "browser must name a command"
        raise ConfigError(msg)
    out["browser"] = [str(part) for part in browser]

    for key in _INT_KEYS:
        try:
            value = int(out[key])
        except (TypeError, ValueError) as e:
            msg = f"{key} must be an integer, got {out[key]!r}"
            raise ConfigError(msg) from e
        if value <= 0:
            msg = f"{key} must be positive, got {value}"
            raise ConfigError(msg)
        out[key] = value

    epoch = out["release_epoch"]
    if not isinstance(epoch, datetime.date):
        try:
            epoch = datetime.date.fromisoformat(str(epoch))
        except ValueError as e:
            msg = f"release_epoch must be YYYY-MM-DD, got {epoch!r}"
            raise ConfigError(msg) from e
    out["release_epoch"] = epoch

    env_user = os.environ.get("GITHUB_USER")
    if env_user:
        out["github_user"] = env_user
    out["github_api"] = str(out["github_api"]).rstrip("/")
    return out


def load_release_config(config_path: Path | None = None, base_dir: Path | None = None) -> dict[str, Any]:
    """Load config from config_path, else base_dir/release-tooling.yaml if present, else defaults."""
    import yaml

    if config_path is None:
        candidate = (base_dir or Path.cwd()) / CONFIG_FILENAME
        config_path = candidate if candidate.is_file() else None
    if config_path is None:
        return resolve_release_config(None)

    try:
        with config_path.open() as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        msg = f"could not read config {config_path}"
        raise ConfigError(msg) from e
    if not isinstance(data, dict):
        msg = f"config {config_path} must be a mapping"
        raise ConfigError(msg)
    return resolve_release_config(data)


def repo_url(config: dict[str, Any]) -> str:
    """https://github.com/{upstream_owner}/{repo}"""
    return f"https://github.com/{config['upstream_owner']}/{config['repo']}"
