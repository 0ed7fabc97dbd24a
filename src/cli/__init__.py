"""Harness CLI - command-line interface for repository maturity audits."""

from harness_engine import __version__

__all__ = ["__version__"]
