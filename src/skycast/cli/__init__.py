"""
Command-line interface for skycast.

Provides Click-based CLI commands for weather lookups and
managing recent searches.
"""

from skycast.cli.main import cli

__all__ = ["cli"]
