"""Milestone merged Cargo PRs from rust-lang/rust submodule updates."""

from .assign import determine_milestones, set_milestones
from .assign import run as run_milestone

__all__ = ["determine_milestones", "run_milestone", "set_milestones"]
