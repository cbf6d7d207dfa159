"""
CLI entry point for running skycast as a module.

Usage: python -m skycast [OPTIONS] COMMAND [ARGS]...
"""

from skycast.cli.main import cli

if __name__ == "__main__":
    cli()
