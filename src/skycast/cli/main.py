"""
Main CLI entry point for skycast.

Provides commands for one-off weather lookups, an interactive session that
keeps its cache between queries, and managing recent searches.
"""

import asyncio
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from skycast import __version__
from skycast.cli.output import (
    print_info,
    print_lookup_error,
    print_recent,
    print_success,
    print_weather,
)
from skycast.config import Settings
from skycast.core.exceptions import ConfigurationError, SkycastError
from skycast.core.models import WeatherRecord
from skycast.core.validation import normalize_city
from skycast.history import RecentSearches
from skycast.orchestrator import WeatherOrchestrator

logger = logging.getLogger(__name__)

QUIT_COMMANDS = (":q", ":quit", ":exit")
CLEAR_COMMAND = ":clear"


def run_async(coro):
    """Run an async coroutine in a fresh event loop."""
    return asyncio.run(coro)


def configure_logging() -> None:
    """Send debug log records to stderr through Rich."""
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    # aiohttp is chatty at DEBUG
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


@click.group()
@click.version_option(version=__version__, prog_name="skycast")
@click.option(
    "--api-key",
    envvar="OPENWEATHER_API_KEY",
    help="OpenWeatherMap API key.",
)
@click.option("--verbose", is_flag=True, help="Show debug logging.")
@click.pass_context
def cli(ctx: click.Context, api_key: Optional[str], verbose: bool) -> None:
    """skycast - current weather from the command line.

    Looks up current conditions on OpenWeatherMap, caching results for
    ten minutes and retrying transient network failures.
    """
    if verbose:
        configure_logging()
    ctx.ensure_object(dict)
    try:
        ctx.obj["settings"] = Settings.from_env(api_key=api_key)
    except ConfigurationError as e:
        print_lookup_error(e)
        sys.exit(1)


@cli.command()
@click.argument("city")
@click.option(
    "--no-cache",
    is_flag=True,
    help="Always fetch fresh data.",
)
@click.pass_context
def weather(ctx: click.Context, city: str, no_cache: bool) -> None:
    """Show current weather for CITY.

    \b
    Examples:
        skycast weather London
        skycast weather "New York" --no-cache
    """
    settings: Settings = ctx.obj["settings"]

    try:
        record = run_async(_lookup_once(settings, city, use_cache=not no_cache))
    except SkycastError as e:
        print_lookup_error(e)
        sys.exit(1)

    if record is None:
        return

    print_weather(record)
    RecentSearches(settings.recent_path).add(city.strip())


@cli.command()
@click.pass_context
def interactive(ctx: click.Context) -> None:
    """Look up several cities in one session.

    Results are cached for the whole session. Enter a city name at the
    prompt, ":clear" to empty the cache, or ":quit" to leave.
    """
    settings: Settings = ctx.obj["settings"]

    try:
        run_async(_interactive_session(settings))
    except SkycastError as e:
        print_lookup_error(e)
        sys.exit(1)


@cli.command()
@click.option("--clear", is_flag=True, help="Forget all recent searches.")
@click.pass_context
def recent(ctx: click.Context, clear: bool) -> None:
    """Show the most recent searches."""
    settings: Settings = ctx.obj["settings"]
    history = RecentSearches(settings.recent_path)

    if clear:
        history.clear()
        print_success("Recent searches cleared.")
        return

    print_recent(history.load())


async def _lookup_once(
    settings: Settings,
    city: str,
    use_cache: bool = True,
) -> Optional[WeatherRecord]:
    async with WeatherOrchestrator.from_settings(settings) as orchestrator:
        return await orchestrator.lookup(city, use_cache=use_cache)


async def _interactive_session(settings: Settings) -> None:
    """Prompt for cities until the user quits.

    Lookup failures are printed and the session continues.
    """
    history = RecentSearches(settings.recent_path)

    async with WeatherOrchestrator.from_settings(settings) as orchestrator:
        while True:
            try:
                line = await asyncio.to_thread(
                    click.prompt, "City", default="", show_default=False
                )
            except click.Abort:
                break

            line = line.strip()
            if not line:
                continue
            if line.lower() in QUIT_COMMANDS:
                break
            if line.lower() == CLEAR_COMMAND:
                orchestrator.clear_cache()
                print_info("Cache cleared.")
                continue

            cached = orchestrator.cache.is_valid(normalize_city(line))
            try:
                record = await orchestrator.lookup(line)
            except SkycastError as e:
                logger.debug("Lookup for %r failed", line, exc_info=True)
                print_lookup_error(e)
                continue

            if record is not None:
                print_weather(record, cached=cached)
                history.add(line)


if __name__ == "__main__":
    cli()
