"""Release: bump Cargo.toml version; regenerate CHANGELOG.md stubs; drive the release PR."""

from .bump import Version, bump_manifest
from .prepare import run as run_prepare

__all__ = ["Version", "bump_manifest", "run_prepare"]
