"""
Core module for skycast.

Contains data models, validation helpers, and exceptions.
"""

from skycast.core.exceptions import (
    Cancelled,
    CityNotFoundError,
    ConfigurationError,
    HttpStatusError,
    InvalidCredentialError,
    MalformedResponse,
    RateLimitError,
    ServiceUnavailableError,
    SkycastError,
    TransportError,
    ValidationError,
)
from skycast.core.models import ProviderResponse, WeatherRecord
from skycast.core.validation import normalize_city, validate_city

__all__ = [
    # Models
    "ProviderResponse",
    "WeatherRecord",
    # Validation
    "normalize_city",
    "validate_city",
    # Exceptions
    "SkycastError",
    "ConfigurationError",
    "ValidationError",
    "TransportError",
    "HttpStatusError",
    "CityNotFoundError",
    "InvalidCredentialError",
    "RateLimitError",
    "ServiceUnavailableError",
    "MalformedResponse",
    "Cancelled",
]
