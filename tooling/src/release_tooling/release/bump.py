"""Bump the package version in Cargo.toml.

The first `version = "X.Y.Z"` in the manifest is the package version. Cargo is
still 0.x: every release bumps minor and resets patch (0.71.3 -> 0.72.0).
Nothing else in the file is touched.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import NamedTuple

from release_tooling.errors import VersionError

VERSION_MARKER = 'version = "'

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")


class Version(NamedTuple):
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(s: str) -> Version:
    m = _VERSION_RE.match(s.strip())
    if not m:
        msg = f"invalid version: {s!r}"
        raise VersionError(msg)
    return Version(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def _locate(text: str) -> tuple[int, int]:
    """(start, end) of the version string inside the first version = "..." marker."""
    idx = text.find(VERSION_MARKER)
    if idx < 0:
        msg = f"could not find {VERSION_MARKER!r} in manifest"
        raise VersionError(msg)
    start = idx + len(VERSION_MARKER)
    end = text.find('"', start)
    if end < 0:
        msg = "unterminated version string in manifest"
        raise VersionError(msg)
    return start, end


def _read_current(text: str) -> Version:
    start, end = _locate(text)
    return parse_version(text[start:end])


def _next_version(old: Version) -> Version:
    if old.major != 0:
        msg = f"expected a 0.x version, found {old}"
        raise VersionError(msg)
    return Version(0, old.minor + 1, 0)


def bump_text(text: str) -> tuple[str, Version]:
    """Return (new manifest text, new version)."""
    start, end = _locate(text)
    new = _next_version(_read_current(text))
    return text[:start] + str(new) + text[end:], new


def bump_manifest(path: Path) -> Version:
    """Rewrite path in place with the bumped version; return the new version."""
    try:
        text = path.read_text()
    except OSError as e:
        msg = f"failed to read {path}"
        raise VersionError(msg) from e
    new_text, new = bump_text(text)
    try:
        path.write_text(new_text)
    except OSError as e:
        msg = f"failed to write {path}"
        raise VersionError(msg) from e
    return new
