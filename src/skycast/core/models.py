"""
Core data models for skycast.

Defines the weather record handed to presentation code and the response
snapshot produced by the HTTP layer.
"""

import json
import math
from dataclasses import asdict, dataclass
from numbers import Real
from typing import Any


@dataclass(frozen=True)
class WeatherRecord:
    """Current conditions for one city."""

    name: str
    temperature: float  # Celsius
    description: str
    country: str | None = None
    feels_like: float | None = None
    humidity: int | None = None  # Percent
    pressure: int | None = None  # hPa
    wind_speed: float | None = None  # m/s
    visibility: int | None = None  # Metres

    def __str__(self) -> str:
        return f"{self.display_name}: {self.temperature_display}, {self.description_display}"

    @property
    def display_name(self) -> str:
        """Return "Name, CC" or just the name when no country is known."""
        if self.country:
            return f"{self.name}, {self.country}"
        return self.name

    @property
    def temperature_display(self) -> str:
        return f"{_round_half_up(self.temperature)}°C"

    @property
    def description_display(self) -> str:
        """Return the description with every word capitalized."""
        return " ".join(word[:1].upper() + word[1:].lower() for word in self.description.split(" "))

    @property
    def feels_like_display(self) -> str:
        return f"{_round_half_up(self.feels_like)}°C" if self.feels_like else "N/A"

    @property
    def humidity_display(self) -> str:
        return f"{self.humidity}%" if self.humidity else "N/A"

    @property
    def pressure_display(self) -> str:
        return f"{self.pressure} hPa" if self.pressure else "N/A"

    @property
    def wind_speed_display(self) -> str:
        """Return wind speed converted from m/s to km/h."""
        return f"{_round_half_up(self.wind_speed * 3.6)} km/h" if self.wind_speed else "N/A"

    @property
    def visibility_display(self) -> str:
        return f"{_round_half_up(self.visibility / 1000)} km" if self.visibility else "N/A"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WeatherRecord":
        return cls(**data)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "WeatherRecord":
        """Build a record from a provider body that passed shape validation.

        Args:
            data: Decoded JSON body of a current-weather response.

        Returns:
            WeatherRecord with optional metrics filled where present.
            Optional metrics that are not numbers are left out.
        """
        main = data["main"]
        wind = data.get("wind") or {}
        return cls(
            name=data["name"],
            temperature=float(main["temp"]),
            description=data["weather"][0]["description"],
            country=data["sys"].get("country") or None,
            feels_like=_number(main.get("feels_like")),
            humidity=_number(main.get("humidity")),
            pressure=_number(main.get("pressure")),
            wind_speed=_number(wind.get("speed")),
            visibility=_number(data.get("visibility")),
        )


def _number(value: Any) -> Any:
    """Return value if it is a real number, else None."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    return value


def _round_half_up(value: float) -> int:
    """Round halves up (12.5 -> 13, -2.5 -> -2)."""
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class ProviderResponse:
    """Snapshot of an HTTP response, read while the connection was open."""

    status: int
    reason: str
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        """Decode the body as UTF-8 JSON.

        Raises:
            ValueError: If the body is not valid UTF-8 or not valid JSON.
        """
        return json.loads(self.body.decode("utf-8"))
