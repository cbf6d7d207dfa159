"""
Rich terminal output helpers for CLI.

Renders weather records, recent searches and errors using the Rich library.
"""

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from skycast.core.exceptions import SkycastError
from skycast.core.models import WeatherRecord

# Console instance for all output
console = Console()


def get_error_style(category: str) -> str:
    """Get Rich style string for an error category."""
    styles = {
        "validation": "yellow",
        "not-found": "yellow",
        "rate-limited": "yellow",
        "network": "red",
        "service-unavailable": "red",
    }
    return styles.get(category, "bold red")


def print_weather(record: WeatherRecord, cached: bool = False) -> None:
    """Print current conditions for a city.

    Args:
        record: WeatherRecord to display.
        cached: Whether the record came from the cache.
    """
    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 1))
    table.add_column("Metric", style="dim")
    table.add_column("Value")

    table.add_row("Feels like", record.feels_like_display)
    table.add_row("Humidity", record.humidity_display)
    table.add_row("Pressure", record.pressure_display)
    table.add_row("Wind", record.wind_speed_display)
    table.add_row("Visibility", record.visibility_display)

    title = f"[bold]{escape(record.display_name)}[/]"
    subtitle = "[dim]cached[/]" if cached else None

    console.print()
    console.print(
        Panel(
            table,
            title=title,
            subtitle=subtitle,
            box=box.ROUNDED,
        )
    )
    console.print(
        f"  [bold cyan]{record.temperature_display}[/]  {record.description_display}"
    )
    console.print()


def print_recent(searches: list[str]) -> None:
    """Print recent searches, most recent first."""
    if not searches:
        print_info("No recent searches.")
        return

    console.print("\n[bold cyan]Recent searches[/]")
    for i, city in enumerate(searches, start=1):
        console.print(f"  {i}. {escape(city)}")
    console.print()


def print_lookup_error(error: SkycastError) -> None:
    """Print a lookup failure styled by its category."""
    style = get_error_style(error.category)
    console.print(f"[{style}]Error:[/] {escape(error.message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[cyan]Info:[/] {message}")
