"""
Input and response validation for skycast.

City names are checked locally before any request is made, and provider
bodies are checked for the fields the renderer relies on.
"""

import re
import unicodedata
from numbers import Real
from typing import Any

from skycast.core.exceptions import ValidationError

# Letters (any script), whitespace, hyphens, apostrophes, dots and commas
_CITY_PATTERN = re.compile(r"^(?:[^\W\d_]|[\s\-'.,])+$")

MIN_CITY_LENGTH = 2
MAX_CITY_LENGTH = 100

REQUIRED_RESPONSE_FIELDS = ("name", "main", "weather", "sys")


def validate_city(city: str | None) -> str:
    """Validate a city name typed by the user.

    Args:
        city: Raw input.

    Returns:
        The trimmed city name, NFC-composed.

    Raises:
        ValidationError: If the name is empty, too short, too long or
            contains disallowed characters.
    """
    # Composed form, so "u" plus a combining diaeresis counts as one letter
    city = unicodedata.normalize("NFC", (city or "").strip())

    if not city:
        raise ValidationError("city", city, "Please enter a city name")

    if len(city) < MIN_CITY_LENGTH:
        raise ValidationError(
            "city", city, f"City name must be at least {MIN_CITY_LENGTH} characters"
        )

    if len(city) > MAX_CITY_LENGTH:
        raise ValidationError("city", city[:50] + "...", "City name is too long")

    if not _CITY_PATTERN.match(city):
        raise ValidationError("city", city, "City name contains invalid characters")

    return city


def normalize_city(city: str) -> str:
    """Return the cache key for a city name (trimmed, NFC, lower-cased)."""
    return unicodedata.normalize("NFC", city.strip()).lower()


def validate_weather_payload(data: Any) -> list[str]:
    """Check that a provider body has the shape of current-weather data.

    Args:
        data: Decoded JSON body.

    Returns:
        List of problems found; empty when the body is usable.
    """
    if not isinstance(data, dict):
        return ["body is not an object"]

    problems = [
        f"missing '{name}'"
        for name in REQUIRED_RESPONSE_FIELDS
        if data.get(name) is None or data.get(name) == ""
    ]
    if problems:
        return problems

    if not isinstance(data["name"], str):
        problems.append("'name' is not a string")

    main = data["main"]
    temp = main.get("temp") if isinstance(main, dict) else None
    if isinstance(temp, bool) or not isinstance(temp, Real):
        problems.append("'main.temp' is not a number")

    weather = data["weather"]
    if not isinstance(weather, list) or not weather:
        problems.append("'weather' is not a non-empty list")
    elif not isinstance(weather[0], dict) or not weather[0].get("description"):
        problems.append("'weather[0].description' is missing")
    elif not isinstance(weather[0]["description"], str):
        problems.append("'weather[0].description' is not a string")

    wind = data.get("wind")
    if wind is not None and not isinstance(wind, dict):
        problems.append("'wind' is not an object")

    if not isinstance(data["sys"], dict):
        problems.append("'sys' is not an object")

    return problems
