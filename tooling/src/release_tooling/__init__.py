"""Release tooling for Cargo: milestone merged PRs; bump version and prepare the changelog."""

__version__ = "0.1.0"
