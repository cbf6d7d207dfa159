"""
Custom exceptions for skycast.
"""


class SkycastError(Exception):
    """Base exception for all skycast errors."""

    category = "error"

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(SkycastError):
    """Raised when configuration is missing or invalid."""

    category = "configuration"

    def __init__(
        self,
        setting: str,
        details: str | None = None,
        problem: str = "Missing configuration",
    ):
        super().__init__(f"{problem}: {setting}", details=details)
        self.setting = setting


class ValidationError(SkycastError):
    """Raised when user input fails local checks."""

    category = "validation"

    def __init__(self, field: str, value: str, reason: str):
        super().__init__(reason)
        self.field = field
        self.value = value
        self.reason = reason


class TransportError(SkycastError):
    """Raised when the provider cannot be reached after all retries."""

    category = "network"

    def __init__(self, url: str, details: str | None = None):
        super().__init__(
            "Network error. Please check your internet connection.",
            details=details,
        )
        self.url = url


class HttpStatusError(SkycastError):
    """Raised when the provider answers with an error status."""

    category = "http"

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class CityNotFoundError(HttpStatusError):
    """Raised when the provider does not know the requested city."""

    category = "not-found"

    def __init__(self, city: str):
        super().__init__(
            404,
            f'City "{city}" not found. Please check the spelling and try again.',
        )
        self.city = city


class InvalidCredentialError(HttpStatusError):
    """Raised when the provider rejects the API key."""

    category = "invalid-credential"

    def __init__(self):
        super().__init__(401, "API key is invalid. Please contact support.")


class RateLimitError(HttpStatusError):
    """Raised when the provider rate limit is exceeded."""

    category = "rate-limited"

    def __init__(self):
        super().__init__(429, "Too many requests. Please wait a moment and try again.")


class ServiceUnavailableError(HttpStatusError):
    """Raised when the provider reports an internal failure."""

    category = "service-unavailable"

    def __init__(self):
        super().__init__(
            500,
            "Weather service is temporarily unavailable. Please try again later.",
        )


class MalformedResponse(SkycastError):
    """Raised when a successful response does not look like weather data."""

    category = "malformed"

    def __init__(self, details: str | None = None):
        super().__init__("Invalid weather data received", details=details)


class Cancelled(SkycastError):
    """Signals that a lookup was superseded by a newer one.

    Never shown to the user; the orchestrator turns it into a silent
    ``None`` result.
    """

    category = "cancelled"

    def __init__(self, city: str):
        super().__init__(f"Lookup for {city!r} was superseded")
        self.city = city
