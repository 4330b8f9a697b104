"""Main CLI entry point for release tooling."""

import sys

from release_tooling.cli import milestone_cmd, release_cmd


def main() -> None:
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        print("Usage: release-tooling <command> [args...]", file=sys.stderr)
        print("Commands:", file=sys.stderr)
        print(
            "  milestone <rust-repo>  - Milestone Cargo PRs from rust-lang/rust submodule updates",
            file=sys.stderr,
        )
        print(
            "  prepare <rust-repo>    - Bump version, update CHANGELOG.md, open release PR",
            file=sys.stderr,
        )
        sys.exit(1)

    command = sys.argv[1]
    rest = sys.argv[2:]

    if command == "milestone":
        sys.exit(milestone_cmd.run_milestone_argv(rest))
    elif command == "prepare":
        sys.exit(release_cmd.run_release_argv(rest))
    else:
        print(f"Error: Unknown command: {command}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
