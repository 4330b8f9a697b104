"""Tests for release_tooling.release.bump (version parse/bump and manifest rewrite)."""

from pathlib import Path
from unittest.mock import patch

import pytest

from release_tooling.errors import VersionError
from release_tooling.release.bump import (
    Version,
    _next_version,
    bump_manifest,
    bump_text,
    parse_version,
)

MANIFEST = """[package]
name = "cargo"
version = "0.71.0"
edition = "2021"

[dependencies]
anyhow = { version = "1.0.47" }
"""


class TestNextVersion:
    """Minor bump: 0.Y.Z -> 0.(Y+1).0; non-zero major raises."""

    def test_minor_increments_and_patch_resets(self) -> None:
        assert _next_version(Version(0, 71, 0)) == Version(0, 72, 0)
        assert _next_version(Version(0, 71, 3)) == Version(0, 72, 0)

    def test_non_zero_major_raises(self) -> None:
        with pytest.raises(VersionError, match="expected a 0.x version"):
            _next_version(Version(1, 0, 0))

    def test_str(self) -> None:
        assert str(Version(0, 72, 0)) == "0.72.0"


class TestParseVersion:
    def test_parses_triple(self) -> None:
        assert parse_version("0.71.0") == Version(0, 71, 0)

    def test_invalid_raises(self) -> None:
        for bad in ("0.71", "v0.71.0", "abc", "0.71.0-rc.1"):
            with pytest.raises(VersionError, match="invalid version"):
                parse_version(bad)


class TestBumpManifest:
    def test_bumps_first_version_only(self) -> None:
        text, new = bump_text(MANIFEST)
        assert new == Version(0, 72, 0)
        assert 'version = "0.72.0"' in text
        assert 'anyhow = { version = "1.0.47" }' in text
        assert text == MANIFEST.replace('version = "0.71.0"', 'version = "0.72.0"')

    def test_rewrites_file_in_place(self, tmp_path: Path) -> None:
        p = tmp_path / "Cargo.toml"
        p.write_text(MANIFEST)
        assert bump_manifest(p) == Version(0, 72, 0)
        assert 'version = "0.72.0"' in p.read_text()

    def test_major_one_is_rejected_and_file_untouched(self, tmp_path: Path) -> None:
        p = tmp_path / "Cargo.toml"
        original = MANIFEST.replace("0.71.0", "1.2.0")
        p.write_text(original)
        with pytest.raises(VersionError):
            bump_manifest(p)
        assert p.read_text() == original

    def test_missing_marker_raises(self) -> None:
        with pytest.raises(VersionError, match="could not find"):
            bump_text('[package]\nname = "x"\n')

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(VersionError, match="failed to read"):
            bump_manifest(tmp_path / "Cargo.toml")

    def test_unwritable_file_raises(self, tmp_path: Path) -> None:
        p = tmp_path / "Cargo.toml"
        p.write_text(MANIFEST)
        with (
            patch.object(Path, "write_text", side_effect=PermissionError("read-only")),
            pytest.raises(VersionError, match="failed to write") as exc_info,
        ):
            bump_manifest(p)
        assert isinstance(exc_info.value.__cause__, PermissionError)
