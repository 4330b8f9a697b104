"""Command-line entry points: release-tooling, milestone, new-release."""
