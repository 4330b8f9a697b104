"""Tests for release_tooling.release.changelog."""

import datetime

import pytest

from release_tooling.changes import PullRequest, pull_request_url
from release_tooling.errors import ChangelogError, ReleaseToolError
from release_tooling.release.changelog import (
    find_anchor_hash,
    find_prs,
    insert_beta_links,
    insert_nightly_section,
    next_nightly_date,
    nightly_section,
    partition_documented,
    retarget_anchor,
    to_links,
)

CHANGELOG = """# Changelog

## Cargo 1.71 (2023-07-13)
[84b7041f...HEAD](https://github.com/rust-lang/cargo/compare/84b7041f...HEAD)

### Added

- Existing entry
  [#42](https://github.com/rust-lang/cargo/pull/42)

## Cargo 1.70 (2023-06-01)
[9880b408...84b7041f](https://github.com/rust-lang/cargo/compare/9880b408...84b7041f)

### Added
"""


def _pr(n: int, descr: str = "") -> PullRequest:
    return PullRequest(n, pull_request_url(n), descr or f"change {n}")


class TestNextNightlyDate:
    def test_on_release_day(self) -> None:
        # 2015-05-15 + 42*2 - 1 days
        assert next_nightly_date(datetime.date(2015, 5, 15)) == "2015-08-06"

    def test_mid_cycle(self) -> None:
        # 40 days in: still release 0
        assert next_nightly_date(datetime.date(2015, 6, 24)) == "2015-08-06"
        # 42 days in: release 1
        assert next_nightly_date(datetime.date(2015, 6, 26)) == "2015-09-17"

    def test_custom_epoch_and_cadence(self) -> None:
        assert next_nightly_date(datetime.date(2020, 1, 11), datetime.date(2020, 1, 1), 10) == "2020-01-30"


class TestAnchors:
    def test_find_anchor_hash(self) -> None:
        assert find_anchor_hash(CHANGELOG) == "84b7041f"

    def test_requires_exactly_two(self) -> None:
        with pytest.raises(ChangelogError, match="found 1"):
            find_anchor_hash("[abc...HEAD](x)\n")

    def test_requires_identical(self) -> None:
        with pytest.raises(ChangelogError, match="disagree"):
            find_anchor_hash("[abc...HEAD](x/abd...HEAD)\n")

    def test_retarget(self) -> None:
        out = retarget_anchor(CHANGELOG, "84b7041f", "rust-1.70.0")
        assert "...HEAD" not in out
        assert out.count("84b7041f...rust-1.70.0") == 2


class TestPartitionDocumented:
    def test_pr_already_in_changelog_is_skipped(self) -> None:
        new, dupes = partition_documented(CHANGELOG, [_pr(41), _pr(42), _pr(43)])
        assert [p.number for p in new] == [41, 43]
        assert [p.number for p in dupes] == [42]

    def test_prefix_numbers_do_not_collide(self) -> None:
        new, dupes = partition_documented("[#420]", [_pr(42)])
        assert [p.number for p in new] == [42]
        assert dupes == []


class TestSplice:
    def test_to_links(self) -> None:
        assert to_links([_pr(7, "Fix it")]) == "- Fix it \n  [#7](https://github.com/rust-lang/cargo/pull/7)\n"

    def test_insert_beta_links_before_first_added(self) -> None:
        out = insert_beta_links(CHANGELOG, "- new\n")
        assert out.index("- new\n") < out.index("### Added")
        assert out.count("### Added") == 2
        assert out.replace("- new\n", "", 1) == CHANGELOG

    def test_insert_beta_links_requires_marker(self) -> None:
        with pytest.raises(ChangelogError):
            insert_beta_links("# Changelog\n", "- x\n")

    def test_insert_nightly_section(self) -> None:
        section = nightly_section(71, "2023-07-13", "abcdef12", to_links([_pr(1)]))
        out = insert_nightly_section(CHANGELOG, section)
        assert out.startswith("# Changelog\n\n## Cargo 1.71 (2023-07-13)\n")
        assert "[abcdef12...HEAD](https://github.com/rust-lang/cargo/compare/abcdef12...HEAD)\n" in out
        assert out.endswith(CHANGELOG[len("# Changelog\n") :])
        for heading in ("### Added", "### Changed", "### Fixed", "### Nightly only"):
            assert heading in section

    def test_insert_nightly_section_requires_heading(self) -> None:
        with pytest.raises(ChangelogError):
            insert_nightly_section("# Changes\n", "x")


class TestFindPrs:
    def test_runs_first_parent_log_and_filters_documented(self, fake_git, make_log) -> None:
        log = make_log(("c2", "Auto merge of #43 - a:b", "New"), ("c1", "Auto merge of #42 - a:b", "Old"))
        repo = fake_git(stdout={("log", "--first-parent", "aaa...upstream/master"): log})
        prs = find_prs(repo, CHANGELOG, "aaa", "upstream/master")
        assert prs == [_pr(43, "New")]

    def test_parse_failure_names_git_command(self, fake_git) -> None:
        repo = fake_git(stdout={("log", "--first-parent", "a...b"): "commit c\n    not a merge\n"})
        with pytest.raises(ReleaseToolError, match="git log --first-parent a...b") as exc_info:
            find_prs(repo, "", "a", "b")
        assert "not a merge" in str(exc_info.value.__cause__)
